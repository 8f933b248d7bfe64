from typing import Literal, TypedDict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.exceptions import CustomException
from app.domain.access.schemas import Identity
from app.domain.tasks.fields import RequiredStringList, Score, StringList

CANDIDATE_PLACEHOLDER = "Candidate"
UNABLE_TO_ANALYZE = "Unable to analyze"


class _AliasModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# 프롬프트 입력


class ResumeTextInput(_AliasModel):
    """이력서 텍스트만 받는 프롬프트 입력"""

    resume_text: str = Field(alias="resumeText")


class JobMatchInput(_AliasModel):
    """이력서-채용공고 비교 프롬프트 입력"""

    resume_text: str = Field(alias="resumeText")
    job_title: str = Field(alias="jobTitle")
    company: str
    location: str
    job_description: str = Field(alias="jobDescription")
    requirements: str
    skills: str


class ImproveSectionInput(_AliasModel):
    """섹션 개선 프롬프트 입력"""

    content: str
    position: str
    company: str
    industry: str


# LLM 출력


class ResumeAnalysisResult(_AliasModel):
    """ATS 분석 결과 - 점수 누락이나 배열이 아닌 목록은 실패"""

    ats_score: Score
    strengths: RequiredStringList
    gaps: RequiredStringList
    recommendations: RequiredStringList


class PersonalInfo(_AliasModel):
    full_name: str = Field(default=CANDIDATE_PLACEHOLDER, alias="fullName")
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    linkedin: str | None = None
    website: str | None = None

    @field_validator("full_name", mode="before")
    @classmethod
    def default_full_name(cls, v):
        if not isinstance(v, str) or not v.strip():
            return CANDIDATE_PLACEHOLDER
        return v.strip()


class WorkExperience(_AliasModel):
    title: str = ""
    company: str = ""
    location: str | None = None
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    current: bool = False
    description: str = ""
    achievements: StringList = Field(default_factory=list)


class Education(_AliasModel):
    degree: str = ""
    institution: str = ""
    field_of_study: str | None = Field(default=None, alias="fieldOfStudy")
    graduation_date: str | None = Field(default=None, alias="graduationDate")
    gpa: str | None = None


class Certification(_AliasModel):
    name: str = ""
    issuer: str | None = None
    date: str | None = None


class ParsedResume(_AliasModel):
    """구조화된 이력서 - 누락된 배열은 빈 배열"""

    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    professional_summary: str = ""
    work_experience: list[WorkExperience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: StringList = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)

    @field_validator("personal_info", mode="before")
    @classmethod
    def default_personal_info(cls, v):
        return v if isinstance(v, dict) else {}

    @field_validator("professional_summary", mode="before")
    @classmethod
    def default_summary(cls, v):
        return v if isinstance(v, str) else ""

    @field_validator("work_experience", "education", "certifications", mode="before")
    @classmethod
    def default_list(cls, v):
        return v if v is not None else []


class KeywordAnalysis(_AliasModel):
    matched: StringList = Field(default_factory=list)
    missing: StringList = Field(default_factory=list)
    bonus: StringList = Field(default_factory=list)


class SectionScore(_AliasModel):
    score: Score = 0
    feedback: str = UNABLE_TO_ANALYZE


class SectionAnalysis(_AliasModel):
    experience: SectionScore = Field(default_factory=SectionScore)
    skills: SectionScore = Field(default_factory=SectionScore)
    education: SectionScore = Field(default_factory=SectionScore)

    @field_validator("experience", "skills", "education", mode="before")
    @classmethod
    def default_section(cls, v):
        return v if isinstance(v, dict) else {}


class Improvement(_AliasModel):
    section: str = ""
    current: str = ""
    suggested: str = ""
    reason: str = ""


class JobMatchResult(_AliasModel):
    """이력서-채용공고 매칭 결과 - matchScore 누락은 실패"""

    match_score: Score = Field(alias="matchScore")
    keyword_analysis: KeywordAnalysis = Field(default_factory=KeywordAnalysis, alias="keywordAnalysis")
    section_analysis: SectionAnalysis = Field(default_factory=SectionAnalysis, alias="sectionAnalysis")
    improvements: list[Improvement] = Field(default_factory=list)
    tailored_summary: str = Field(default="", alias="tailoredSummary")
    action_items: StringList = Field(default_factory=list, alias="actionItems")

    @field_validator("keyword_analysis", "section_analysis", mode="before")
    @classmethod
    def default_object(cls, v):
        return v if isinstance(v, dict) else {}

    @field_validator("improvements", mode="before")
    @classmethod
    def default_improvements(cls, v):
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, dict)]

    @field_validator("tailored_summary", mode="before")
    @classmethod
    def default_tailored_summary(cls, v):
        return v if isinstance(v, str) else ""


SectionType = Literal["summary", "bullet"]


# 분석 파이프라인 상태


class ResumeAnalysisState(TypedDict, total=False):
    """이력서 분석 워크플로우 상태"""

    identity: Identity
    file_path: str
    file_name: str
    quota_limit: int
    quota_count: int
    pdf_bytes: bytes
    resume_text: str
    analysis: ResumeAnalysisResult
    record: dict
    error: CustomException
