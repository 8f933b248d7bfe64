from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.tasks.fields import StringList, Text


class JobRecommendationInput(BaseModel):
    """직무 추천 프롬프트 입력 (DB 템플릿의 {{target_role}} 형식과 호환)"""

    target_role: str
    current_role: str
    skills: str
    locations: str
    seniority: str
    industry: str
    work_type: str


class JobRecommendations(BaseModel):
    """직무 추천 결과 - 모든 필드 기본값 있음"""

    best_match_titles: StringList = Field(default_factory=list, alias="bestMatchTitles")
    adjacent_titles: StringList = Field(default_factory=list, alias="adjacentTitles")
    title_variations: StringList = Field(default_factory=list, alias="titleVariations")
    keyword_pack: StringList = Field(default_factory=list, alias="keywordPack")
    positioning_summary: str = Field(default="", alias="positioningSummary")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_row(cls, row: dict) -> "JobRecommendations":
        return cls(
            best_match_titles=row.get("best_match_titles") or [],
            adjacent_titles=row.get("adjacent_titles") or [],
            title_variations=row.get("title_variations") or [],
            keyword_pack=row.get("keyword_pack") or [],
            positioning_summary=row.get("positioning_summary") or "",
        )


class JobDescriptionInput(BaseModel):
    source_type: str
    content: str


class ExtractedJobDescription(BaseModel):
    """구조화된 채용공고 - 알 수 없는 필드는 빈 값"""

    title: Text = ""
    company: Text = ""
    location: Text = ""
    description: Text = ""
    requirements: StringList = Field(default_factory=list)
    skills: StringList = Field(default_factory=list)
    experience: Text = ""
    source: str = ""


class JobSearchInput(BaseModel):
    keywords: str
    location: str
    filters: str


class GeneratedJobListing(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Text = ""
    company: Text = ""
    location: Text = ""
    description: Text = ""
    salary: Text = ""
    url: Text = ""
    work_type: Text = Field(default="", alias="workType")
    requirements: str = ""

    @field_validator("requirements", mode="before")
    @classmethod
    def join_requirements(cls, v):
        if isinstance(v, list):
            return ", ".join(str(item).strip() for item in v if item is not None and str(item).strip())
        if v is None:
            return ""
        return str(v).strip()


class JobListings(BaseModel):
    """AI 채용공고 검색 결과 - jobs가 배열이 아니면 실패, 객체가 아닌 항목은 제외"""

    jobs: list[GeneratedJobListing]

    @field_validator("jobs", mode="before")
    @classmethod
    def drop_non_objects(cls, v):
        if not isinstance(v, list):
            raise ValueError("jobs는 배열이어야 합니다")
        return [item for item in v if isinstance(item, dict)]
