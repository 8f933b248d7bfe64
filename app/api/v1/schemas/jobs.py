"""채용공고 API 스키마."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ImportJobRequest(BaseModel):
    """URL 기반 공고 가져오기 요청 (저장 컬럼과 같은 snake_case)."""

    url: str = Field(min_length=1)
    title: str = Field(min_length=1)
    company_name: str = Field(min_length=1)
    location: str | None = None
    location_type: Literal["remote", "hybrid", "onsite"] | None = None
    description_snippet: str | None = None
    salary_min: int | None = None
    salary_max: int | None = None
    salary_currency: str | None = None


class ImportJobResponse(BaseModel):
    job: dict
    existed: bool


class RecommendationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    target_role: str = Field(alias="targetRole", min_length=1)
    current_role: str | None = Field(default=None, alias="currentRole")
    skills: list[str] | str | None = None
    locations: list[str] | str | None = None
    seniority: str | None = None
    industry: str | None = None
    work_type: str | None = Field(default=None, alias="workType")
    force_refresh: bool = Field(default=False, alias="forceRefresh")


class ExtractJobDescriptionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source: Literal["text", "file"]
    text: str | None = None
    file_data: str | None = Field(default=None, alias="fileData")
    file_name: str | None = Field(default=None, alias="fileName")


class JobSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    keywords: str = Field(min_length=1)
    location: str = Field(min_length=1)
    salary: int | None = Field(default=None, ge=0)
    location_type: Literal["remote", "hybrid", "onsite"] | None = Field(default=None, alias="locationType")
