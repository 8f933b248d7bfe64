from fastapi import APIRouter, Depends, Request

from app.api.deps import get_current_identity
from app.api.v1.schemas.resume import (
    AnalyzeJobMatchRequest,
    AnalyzeJobMatchResponse,
    AnalyzeResumeRequest,
    AnalyzeResumeResponse,
    ImproveSectionRequest,
    ImproveSectionResponse,
    ParseResumeRequest,
    ParseResumeResponse,
)
from app.core.limiter import LLM_RATE_LIMIT, limiter
from app.domain.access.schemas import Identity
from app.domain.resume.service import improve_section, match_job_description, parse_resume
from app.domain.resume.workflow import run_resume_analysis

router = APIRouter(prefix="/resume", tags=["resume"])


@router.post("/analyze", response_model=AnalyzeResumeResponse)
@limiter.limit(LLM_RATE_LIMIT)
async def analyze_resume(
    request: Request,
    body: AnalyzeResumeRequest,
    identity: Identity = Depends(get_current_identity),
) -> AnalyzeResumeResponse:
    result = await run_resume_analysis(identity, body.file_path, body.file_name)
    return AnalyzeResumeResponse(
        analysis=result["analysis"],
        remaining_analyses=result["remaining"],
    )


@router.post("/parse", response_model=ParseResumeResponse)
@limiter.limit(LLM_RATE_LIMIT)
async def parse_resume_file(
    request: Request,
    body: ParseResumeRequest,
    identity: Identity = Depends(get_current_identity),
) -> ParseResumeResponse:
    parsed = await parse_resume(identity, body.file_data, body.file_name)
    return ParseResumeResponse(parsed_data=parsed)


@router.post("/analyze-jd", response_model=AnalyzeJobMatchResponse)
@limiter.limit(LLM_RATE_LIMIT)
async def analyze_job_match(
    request: Request,
    body: AnalyzeJobMatchRequest,
    identity: Identity = Depends(get_current_identity),
) -> AnalyzeJobMatchResponse:
    jd = body.job_description
    analysis = await match_job_description(
        identity,
        resume_text=body.resume_text,
        job_title=jd.title,
        job_description=jd.description,
        company=jd.company,
        location=jd.location,
        requirements=jd.requirements,
        skills=jd.skills,
    )
    return AnalyzeJobMatchResponse(analysis=analysis)


@router.post("/improve-section", response_model=ImproveSectionResponse)
@limiter.limit(LLM_RATE_LIMIT)
async def improve_resume_section(
    request: Request,
    body: ImproveSectionRequest,
    identity: Identity = Depends(get_current_identity),
) -> ImproveSectionResponse:
    improved = await improve_section(
        identity,
        section_type=body.type,
        content=body.content,
        position=body.context.position,
        company=body.context.company,
        industry=body.context.industry,
    )
    return ImproveSectionResponse(improved=improved)
