from app.core.config import settings
from app.core.exceptions import InvalidInput
from app.core.logging import get_logger
from app.domain.access.schemas import Identity
from app.domain.extraction.extractor import extract_text
from app.domain.extraction.payload import decode_file_payload
from app.domain.resume.schemas import (
    ImproveSectionInput,
    JobMatchInput,
    JobMatchResult,
    ParsedResume,
    ResumeTextInput,
)
from app.domain.resume.tasks import (
    IMPROVE_TASKS,
    JOB_MATCH_MAX_CHARS,
    JOB_MATCH_TASK,
    PARSE_MAX_CHARS,
    RESUME_PARSE_TASK,
)
from app.domain.tasks.executor import run_task

logger = get_logger(__name__)

NOT_SPECIFIED = "Not specified"


async def parse_resume(identity: Identity, file_data: str, file_name: str) -> ParsedResume:
    """업로드된 PDF를 구조화된 이력서로 변환 (사용량 차감/저장 없음)"""
    logger.info("이력서 파싱 시작 file_name=%s", file_name)
    content = decode_file_payload(file_data)
    text = await extract_text(content)

    inputs = ResumeTextInput(resume_text=text[:PARSE_MAX_CHARS])
    return await run_task(RESUME_PARSE_TASK, inputs, identity=identity)


async def match_job_description(
    identity: Identity,
    resume_text: str,
    job_title: str,
    job_description: str,
    company: str | None = None,
    location: str | None = None,
    requirements: list[str] | None = None,
    skills: list[str] | None = None,
) -> JobMatchResult:
    """이력서와 채용공고 비교 분석"""
    if len(resume_text.strip()) < settings.min_extracted_chars:
        raise InvalidInput(
            detail=f"resume_text chars={len(resume_text.strip())}",
            message="이력서 텍스트가 너무 짧습니다",
        )

    logger.info("채용공고 매칭 시작 job_title=%s", job_title)
    inputs = JobMatchInput(
        resume_text=resume_text[:JOB_MATCH_MAX_CHARS],
        job_title=job_title or NOT_SPECIFIED,
        company=company or NOT_SPECIFIED,
        location=location or NOT_SPECIFIED,
        job_description=job_description,
        requirements="; ".join(requirements or []) or NOT_SPECIFIED,
        skills=", ".join(skills or []) or NOT_SPECIFIED,
    )
    return await run_task(JOB_MATCH_TASK, inputs, identity=identity)


async def improve_section(
    identity: Identity,
    section_type: str,
    content: str,
    position: str | None = None,
    company: str | None = None,
    industry: str | None = None,
) -> str:
    """요약/불릿 문장 개선, 개선된 텍스트 반환"""
    task = IMPROVE_TASKS.get(section_type)
    if task is None:
        raise InvalidInput(detail=f"type={section_type}", message="type은 summary 또는 bullet이어야 합니다")
    if not content or not content.strip():
        raise InvalidInput(detail="빈 content", message="개선할 내용을 입력해주세요")

    inputs = ImproveSectionInput(
        content=content.strip(),
        position=position or NOT_SPECIFIED,
        company=company or NOT_SPECIFIED,
        industry=industry or NOT_SPECIFIED,
    )
    improved = await run_task(task, inputs, identity=identity)
    return improved.strip().strip('"')
