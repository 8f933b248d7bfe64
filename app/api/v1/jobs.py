from fastapi import APIRouter, Depends, Request

from app.api.deps import get_current_identity
from app.api.v1.schemas.jobs import (
    ExtractJobDescriptionRequest,
    ImportJobRequest,
    ImportJobResponse,
    JobSearchRequest,
    RecommendationRequest,
)
from app.core.limiter import LLM_RATE_LIMIT, limiter
from app.domain.access.schemas import Identity
from app.domain.jobs.service import (
    extract_job_description,
    generate_recommendations,
    get_saved_recommendations,
    import_job,
    search_jobs,
)

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post("/import", response_model=ImportJobResponse)
async def import_external_job(
    body: ImportJobRequest,
    identity: Identity = Depends(get_current_identity),
) -> ImportJobResponse:
    result = await import_job(identity, body.model_dump())
    return ImportJobResponse(**result)


@router.get("/recommendations")
async def saved_recommendations(identity: Identity = Depends(get_current_identity)) -> dict:
    return await get_saved_recommendations(identity)


@router.post("/recommendations")
@limiter.limit(LLM_RATE_LIMIT)
async def job_recommendations(
    request: Request,
    body: RecommendationRequest,
    identity: Identity = Depends(get_current_identity),
) -> dict:
    payload = body.model_dump(by_alias=True, exclude={"force_refresh"})
    return await generate_recommendations(identity, payload, force_refresh=body.force_refresh)


@router.post("/extract-jd")
@limiter.limit(LLM_RATE_LIMIT)
async def extract_jd(
    request: Request,
    body: ExtractJobDescriptionRequest,
    identity: Identity = Depends(get_current_identity),
) -> dict:
    result = await extract_job_description(
        identity,
        body.source,
        text=body.text,
        file_data=body.file_data,
        file_name=body.file_name,
    )
    return result.model_dump()


@router.post("/search")
@limiter.limit(LLM_RATE_LIMIT)
async def job_search(
    request: Request,
    body: JobSearchRequest,
    identity: Identity = Depends(get_current_identity),
) -> dict:
    return await search_jobs(
        identity,
        body.keywords,
        body.location,
        salary=body.salary,
        location_type=body.location_type,
    )
