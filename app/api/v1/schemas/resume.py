"""이력서 API 스키마."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.domain.resume.schemas import JobMatchResult, ParsedResume


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AnalyzeResumeRequest(_ApiModel):
    """이력서 분석 요청."""

    file_path: str = Field(alias="filePath", min_length=1)
    file_name: str = Field(alias="fileName", min_length=1)


class AnalyzeResumeResponse(_ApiModel):
    """이력서 분석 응답."""

    success: bool = True
    analysis: dict
    remaining_analyses: int = Field(alias="remainingAnalyses")


class ParseResumeRequest(_ApiModel):
    """이력서 파싱 요청 (base64 PDF)."""

    file_data: str = Field(alias="fileData", min_length=1)
    file_name: str = Field(alias="fileName", min_length=1)


class ParseResumeResponse(_ApiModel):
    parsed_data: ParsedResume = Field(alias="parsedData")


class JobDescription(_ApiModel):
    title: str = ""
    company: str | None = None
    location: str | None = None
    description: str = Field(min_length=1)
    requirements: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)


class AnalyzeJobMatchRequest(_ApiModel):
    """이력서-채용공고 매칭 요청."""

    resume_text: str = Field(alias="resumeText")
    job_description: JobDescription = Field(alias="jobDescription")


class AnalyzeJobMatchResponse(_ApiModel):
    analysis: JobMatchResult


class ImproveContext(_ApiModel):
    position: str | None = None
    company: str | None = None
    industry: str | None = None


class ImproveSectionRequest(_ApiModel):
    """이력서 문장 개선 요청."""

    type: Literal["summary", "bullet"]
    content: str = Field(min_length=1)
    context: ImproveContext = Field(default_factory=ImproveContext)


class ImproveSectionResponse(_ApiModel):
    improved: str
    suggestions: list[str] = Field(default_factory=list)
