from fastapi import APIRouter, Depends, Request

from app.api.deps import get_current_identity
from app.api.v1.schemas.plans import (
    CanvasSuggestionRequest,
    CanvasSuggestionResponse,
    GenerateMilestonesRequest,
    GenerateMilestonesResponse,
)
from app.core.limiter import LLM_RATE_LIMIT, limiter
from app.domain.access.schemas import Identity
from app.domain.plan.service import generate_milestones, suggest_canvas_answer

router = APIRouter(prefix="/plans", tags=["plans"])


@router.post("/generate-milestones", response_model=GenerateMilestonesResponse)
@limiter.limit(LLM_RATE_LIMIT)
async def generate_plan_milestones(
    request: Request,
    body: GenerateMilestonesRequest,
    identity: Identity = Depends(get_current_identity),
) -> GenerateMilestonesResponse:
    milestones = await generate_milestones(identity, body.plan_id, body.canvas_data)
    return GenerateMilestonesResponse(milestones=milestones)


@router.post("/canvas-suggestion", response_model=CanvasSuggestionResponse)
@limiter.limit(LLM_RATE_LIMIT)
async def canvas_suggestion(
    request: Request,
    body: CanvasSuggestionRequest,
    identity: Identity = Depends(get_current_identity),
) -> CanvasSuggestionResponse:
    suggestion = await suggest_canvas_answer(
        identity,
        question_number=body.question_number,
        question_text=body.question_text,
        current_role=body.current_role,
        target_role=body.target_role,
        previous_answers=body.previous_answers,
    )
    return CanvasSuggestionResponse(suggestion=suggestion)
