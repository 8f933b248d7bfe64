import asyncio
import time
from datetime import datetime, timezone

from app.core.exceptions import InvalidInput, ServiceUnavailable
from app.core.logging import get_logger
from app.domain.access.schemas import Identity
from app.domain.extraction.extractor import TextExtractor
from app.domain.extraction.payload import decode_file_payload
from app.domain.jobs.listings import AI_SEARCH_PROVIDER, listing_to_row
from app.domain.jobs.prompts import (
    EXTRACT_JD_HUMAN,
    EXTRACT_JD_SYSTEM,
    JOB_SEARCH_HUMAN,
    JOB_SEARCH_SYSTEM,
    RECOMMENDATION_HUMAN,
    RECOMMENDATION_SYSTEM,
)
from app.domain.jobs.schemas import (
    ExtractedJobDescription,
    JobDescriptionInput,
    JobListings,
    JobRecommendationInput,
    JobRecommendations,
    JobSearchInput,
)
from app.domain.jobs.urls import normalize_job_url
from app.domain.tasks.executor import run_task
from app.domain.tasks.spec import TaskSpec
from app.domain.tasks.templates import PromptTemplate
from app.infra.supabase.client import SupabaseError, insert, select_one, upsert, upsert_many

logger = get_logger(__name__)

JOBS_TABLE = "external_jobs"
RECOMMENDATIONS_TABLE = "user_job_recommendations"
MANUAL_PROVIDER = "manual_url"

RECOMMENDATION_TASK = TaskSpec(
    name="job_recommendations",
    system_prompt=RECOMMENDATION_SYSTEM,
    prompt=PromptTemplate(RECOMMENDATION_HUMAN, JobRecommendationInput),
    output_model=JobRecommendations,
    temperature=0.7,
    max_tokens=2000,
    provider="anthropic",
    prompt_id="job-recommendations",
)

EXTRACT_JD_TASK = TaskSpec(
    name="extract_job_description",
    system_prompt=EXTRACT_JD_SYSTEM,
    prompt=PromptTemplate(EXTRACT_JD_HUMAN, JobDescriptionInput),
    output_model=ExtractedJobDescription,
    temperature=0.3,
    max_tokens=2000,
)

JOB_SEARCH_TASK = TaskSpec(
    name="job_search",
    system_prompt=JOB_SEARCH_SYSTEM,
    prompt=PromptTemplate(JOB_SEARCH_HUMAN, JobSearchInput),
    output_model=JobListings,
    temperature=0.8,
    max_tokens=4000,
)

JD_MIN_CHARS = 50
JD_MAX_CHARS = 15000
MANUAL_INPUT_SOURCE = "manual_input"
TEXT_FILE_SUFFIXES = (".txt", ".md")
LISTING_CONFLICT = "provider,provider_job_id"

_jd_extractor = TextExtractor(min_chars=JD_MIN_CHARS)


async def _find_job(canonical_url: str) -> dict | None:
    try:
        return await select_one(JOBS_TABLE, {"canonical_url": canonical_url})
    except SupabaseError as e:
        raise ServiceUnavailable(detail=str(e)) from e


async def import_job(identity: Identity, job: dict) -> dict:
    """
    URL 기준으로 채용공고를 가져온다

    정규 URL이 같은 공고가 있으면 새로 만들지 않고 기존 행을 반환한다.

    Returns:
        {"job": 행, "existed": 기존 공고 여부}
    """
    url = (job.get("url") or "").strip()
    title = (job.get("title") or "").strip()
    company_name = (job.get("company_name") or "").strip()
    if not url or not title or not company_name:
        raise InvalidInput(
            detail="url/title/company_name 누락",
            message="url, title, company_name은 필수입니다",
        )

    canonical_url = normalize_job_url(url)
    existing = await _find_job(canonical_url)
    if existing:
        logger.info("이미 등록된 공고 job_id=%s", existing.get("id"))
        return {"job": existing, "existed": True}

    row = {
        "provider": MANUAL_PROVIDER,
        "provider_job_id": f"manual_{int(time.time() * 1000)}_{identity.id[:8]}",
        "title": title,
        "company_name": company_name,
        "location": job.get("location"),
        "location_type": job.get("location_type"),
        "description_snippet": job.get("description_snippet"),
        "salary_min": job.get("salary_min"),
        "salary_max": job.get("salary_max"),
        "salary_currency": job.get("salary_currency") or "USD",
        "apply_url": url,
        "canonical_url": canonical_url,
        "raw": {"original_url": url, "imported_by": identity.id},
    }

    try:
        created = await insert(JOBS_TABLE, row)
    except SupabaseError as e:
        if not e.is_unique_violation:
            raise ServiceUnavailable(detail=str(e)) from e
        # 동시 가져오기: 먼저 저장된 행 사용
        existing = await _find_job(canonical_url)
        if existing is None:
            raise ServiceUnavailable(detail=str(e)) from e
        return {"job": existing, "existed": True}

    logger.info("공고 가져오기 완료 job_id=%s", created.get("id"))
    return {"job": created, "existed": False}


def _recommendation_input(payload: dict) -> JobRecommendationInput:
    skills = payload.get("skills") or []
    if isinstance(skills, str):
        skills = [skills]
    locations = payload.get("locations") or []
    if isinstance(locations, str):
        locations = [locations]

    return JobRecommendationInput(
        target_role=(payload.get("targetRole") or "").strip(),
        current_role=payload.get("currentRole") or "Not specified",
        skills=", ".join(skills) or "Not specified",
        locations=", ".join(locations) or "Any location",
        seniority=payload.get("seniority") or "Not specified",
        industry=payload.get("industry") or "Any industry",
        work_type=payload.get("workType") or "Any",
    )


async def get_saved_recommendations(identity: Identity) -> dict:
    """저장된 직무 추천 조회, 없으면 recommendations=None"""
    try:
        row = await select_one(RECOMMENDATIONS_TABLE, {"user_id": identity.id})
    except SupabaseError as e:
        raise ServiceUnavailable(detail=str(e)) from e

    if not row:
        return {"recommendations": None}

    return {
        "recommendations": JobRecommendations.from_row(row).model_dump(by_alias=True),
        "savedAt": row.get("updated_at"),
        "input": {
            "targetRole": row.get("target_role"),
            "currentRole": row.get("current_role"),
            "skills": row.get("skills"),
            "locations": row.get("locations"),
            "seniority": row.get("seniority"),
            "industry": row.get("industry"),
            "workType": row.get("work_type"),
        },
    }


async def generate_recommendations(identity: Identity, payload: dict, force_refresh: bool = False) -> dict:
    """
    직무 추천 생성

    저장된 추천이 있으면 forceRefresh가 아닌 한 재사용한다.
    저장 실패는 응답을 막지 않는다.
    """
    inputs = _recommendation_input(payload)
    if not inputs.target_role:
        raise InvalidInput(detail="targetRole 누락", message="targetRole은 필수입니다")

    if not force_refresh:
        saved = await get_saved_recommendations(identity)
        if saved["recommendations"]:
            logger.info("저장된 직무 추천 재사용")
            return {
                "recommendations": saved["recommendations"],
                "savedAt": saved["savedAt"],
                "fromCache": True,
            }

    result: JobRecommendations = await run_task(RECOMMENDATION_TASK, inputs, identity=identity)
    saved_at = datetime.now(timezone.utc).isoformat()

    try:
        await upsert(
            RECOMMENDATIONS_TABLE,
            {
                "user_id": identity.id,
                "target_role": inputs.target_role,
                "current_role": inputs.current_role,
                "skills": inputs.skills,
                "locations": inputs.locations,
                "seniority": inputs.seniority,
                "industry": inputs.industry,
                "work_type": inputs.work_type,
                "best_match_titles": result.best_match_titles,
                "adjacent_titles": result.adjacent_titles,
                "title_variations": result.title_variations,
                "keyword_pack": result.keyword_pack,
                "positioning_summary": result.positioning_summary,
                "updated_at": saved_at,
            },
            on_conflict="user_id",
        )
    except SupabaseError as e:
        logger.warning("직무 추천 저장 실패 error=%s", e)

    return {
        "recommendations": result.model_dump(by_alias=True),
        "savedAt": saved_at,
        "fromCache": False,
    }


async def _file_text(file_data: str, file_name: str) -> str:
    content = decode_file_payload(file_data)
    name = file_name.lower()
    if name.endswith(".pdf"):
        return await asyncio.to_thread(_jd_extractor.extract, content)
    if name.endswith(TEXT_FILE_SUFFIXES):
        return content.decode("utf-8", errors="replace")
    raise InvalidInput(
        detail=f"지원하지 않는 파일 file_name={file_name}",
        message="PDF 또는 텍스트(.txt, .md) 파일만 지원합니다",
    )


async def extract_job_description(
    identity: Identity,
    source: str,
    text: str | None = None,
    file_data: str | None = None,
    file_name: str | None = None,
) -> ExtractedJobDescription:
    """
    붙여넣은 텍스트나 업로드 파일에서 채용공고 구조화

    사용량 차감/저장 없음. source는 text면 "manual_input", file이면 파일명.
    """
    if source == "text":
        content = (text or "").strip()
        if not content:
            raise InvalidInput(detail="text 누락", message="채용공고 내용을 입력해주세요")
        inputs = JobDescriptionInput(source_type="job posting text", content=content[:JD_MAX_CHARS])
        label = MANUAL_INPUT_SOURCE
    elif source == "file":
        if not file_data or not file_name:
            raise InvalidInput(detail="fileData/fileName 누락", message="파일과 파일명은 필수입니다")
        content = (await _file_text(file_data, file_name)).strip()
        if len(content) < JD_MIN_CHARS:
            raise InvalidInput(
                detail=f"chars={len(content)}",
                message="파일에서 채용공고 내용을 추출할 수 없습니다. 내용을 직접 붙여넣어 주세요",
            )
        inputs = JobDescriptionInput(source_type="uploaded document", content=content[:JD_MAX_CHARS])
        label = file_name
    else:
        raise InvalidInput(detail=f"source={source}", message="source는 text 또는 file이어야 합니다")

    logger.info("채용공고 추출 시작 source=%s chars=%d", source, len(inputs.content))
    result: ExtractedJobDescription = await run_task(EXTRACT_JD_TASK, inputs, identity=identity)
    result.source = label
    return result


def _unique_rows(rows: list[dict]) -> list[dict]:
    """provider_job_id 또는 정규 URL이 겹치는 공고는 처음 것만 유지"""
    seen_ids: set[str] = set()
    seen_urls: set[str] = set()
    unique = []
    for row in rows:
        url = row.get("canonical_url")
        if row["provider_job_id"] in seen_ids or (url and url in seen_urls):
            continue
        seen_ids.add(row["provider_job_id"])
        if url:
            seen_urls.add(url)
        unique.append(row)
    return unique


def _search_filters(salary: int | None, location_type: str | None) -> str:
    filters = []
    if location_type:
        filters.append(f"Focus on {location_type} positions.")
    if salary:
        filters.append(f"Target salary range above {salary}.")
    return " ".join(filters)


async def search_jobs(
    identity: Identity,
    keywords: str,
    location: str,
    salary: int | None = None,
    location_type: str | None = None,
) -> dict:
    """
    AI 채용공고 검색

    생성된 공고를 external_jobs에 캐시한다. 캐시 실패는 응답을 막지 않는다.
    """
    keywords = (keywords or "").strip()
    location = (location or "").strip()
    if not keywords or not location:
        raise InvalidInput(detail="keywords/location 누락", message="keywords와 location은 필수입니다")

    inputs = JobSearchInput(
        keywords=keywords,
        location=location,
        filters=_search_filters(salary, location_type),
    )
    result: JobListings = await run_task(JOB_SEARCH_TASK, inputs, identity=identity)

    rows = _unique_rows(
        [listing_to_row(listing) for listing in result.jobs if listing.title and listing.company]
    )

    jobs = rows
    try:
        stored = await upsert_many(JOBS_TABLE, rows, on_conflict=LISTING_CONFLICT)
        if stored:
            jobs = stored
    except SupabaseError as e:
        logger.warning("검색 결과 캐시 실패 count=%d error=%s", len(rows), e)

    logger.info("채용공고 검색 완료 count=%d", len(jobs))
    return {
        "jobs": jobs,
        "totalCount": len(jobs),
        "page": 1,
        "provider": AI_SEARCH_PROVIDER,
    }
