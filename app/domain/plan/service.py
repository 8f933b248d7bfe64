import asyncio

from app.core.exceptions import InvalidInput, ServiceUnavailable
from app.core.logging import get_logger
from app.domain.access.ownership import ensure_plan_owner
from app.domain.access.schemas import Identity
from app.domain.plan.prompts import (
    CANVAS_HUMAN,
    CANVAS_SYSTEM,
    CONTINUATION_CONTEXT,
    MILESTONE_HUMAN,
    MILESTONE_SYSTEM,
)
from app.domain.plan.schemas import (
    CanvasData,
    CanvasSuggestionInput,
    Milestone,
    MilestonePlan,
    MilestonePromptInput,
    build_canvas_context,
)
from app.domain.tasks.executor import run_task
from app.domain.tasks.spec import TaskSpec
from app.domain.tasks.templates import PromptTemplate
from app.infra.supabase.client import SupabaseError, select_many, update

logger = get_logger(__name__)

MIN_CANVAS_CONTEXT_CHARS = 50
MILESTONES_TABLE = "weekly_milestones"

MILESTONE_TASK = TaskSpec(
    name="generate_milestones",
    system_prompt=MILESTONE_SYSTEM,
    prompt=PromptTemplate(MILESTONE_HUMAN, MilestonePromptInput),
    output_model=MilestonePlan,
    temperature=0.7,
    max_tokens=2000,
    prompt_id="generate-milestones",
)

CANVAS_SUGGESTION_TASK = TaskSpec(
    name="canvas_suggestion",
    system_prompt=CANVAS_SYSTEM,
    prompt=PromptTemplate(CANVAS_HUMAN, CanvasSuggestionInput),
    output_model=None,
    temperature=0.7,
    max_tokens=500,
    prompt_id="canvas-ai-suggestion",
)


def _describe_previous(rows: list[dict]) -> list[str]:
    described = []
    for row in rows:
        subtasks = row.get("subtasks") or []
        texts = ", ".join(
            str(s.get("text", "")) if isinstance(s, dict) else str(s) for s in subtasks
        )
        goal = row.get("goal") or ""
        described.append(f"{goal} ({texts})" if texts else goal)
    return described


async def _load_previous_milestones(parent_plan_id: str) -> list[str]:
    """이전 플랜의 마일스톤 요약 (조회 실패는 컨텍스트 없이 진행)"""
    try:
        rows = await select_many(
            MILESTONES_TABLE,
            {"plan_id": parent_plan_id},
            columns="goal, subtasks",
            order_by="week_number",
        )
    except SupabaseError as e:
        logger.warning("이전 마일스톤 조회 실패 parent_plan_id=%s error=%s", parent_plan_id, e)
        return []
    return _describe_previous(rows)


def build_continuation_context(sequence_number: int, previous: list[str]) -> str:
    if not previous:
        return ""
    completed = "\n".join(f"Week {i}: {m}" for i, m in enumerate(previous, start=1))
    return CONTINUATION_CONTEXT.format(sequence=sequence_number, completed=completed)


async def _save_milestones(plan_id: str, milestones: list[Milestone]) -> None:
    try:
        existing = await select_many(
            MILESTONES_TABLE,
            {"plan_id": plan_id},
            columns="id, week_number",
            order_by="week_number",
        )
    except SupabaseError as e:
        raise ServiceUnavailable(detail=str(e), message="마일스톤을 저장하지 못했습니다") from e

    ids_by_week = {row["week_number"]: row["id"] for row in existing}
    updates = [
        update(
            MILESTONES_TABLE,
            {
                "goal": m.title,
                "subtasks": [s.model_dump() for s in m.subtasks],
                "category": m.category,
            },
            {"id": ids_by_week[m.week]},
        )
        for m in milestones
        if m.week in ids_by_week
    ]

    results = await asyncio.gather(*updates, return_exceptions=True)
    failures = [r for r in results if isinstance(r, Exception)]
    if failures:
        logger.error("마일스톤 일부 저장 실패 plan_id=%s failed=%d", plan_id, len(failures))
        raise ServiceUnavailable(detail=str(failures[0]), message="마일스톤을 저장하지 못했습니다")

    logger.info("마일스톤 저장 완료 plan_id=%s updated=%d", plan_id, len(updates))


async def generate_milestones(identity: Identity, plan_id: str, canvas: CanvasData) -> list[Milestone]:
    """캔버스 기반 12주 마일스톤 생성 후 플랜의 기존 주차 행을 갱신"""
    plan = await ensure_plan_owner(
        identity, plan_id, columns="id, user_id, parent_plan_id, sequence_number"
    )

    canvas_context = build_canvas_context(canvas)
    if len(canvas_context) < MIN_CANVAS_CONTEXT_CHARS:
        raise InvalidInput(
            detail=f"canvas chars={len(canvas_context)}",
            message="마일스톤을 생성하려면 커리어 캔버스를 더 작성해주세요",
        )

    suffix = ""
    if plan.get("parent_plan_id"):
        previous = await _load_previous_milestones(plan["parent_plan_id"])
        suffix = build_continuation_context(plan.get("sequence_number") or 1, previous)
        logger.info("연속 플랜 마일스톤 생성 plan_id=%s previous=%d", plan_id, len(previous))

    result: MilestonePlan = await run_task(
        MILESTONE_TASK,
        MilestonePromptInput(canvas_context=canvas_context),
        identity=identity,
        prompt_suffix=suffix,
    )

    await _save_milestones(plan_id, result.milestones)
    return result.milestones


def build_previous_answers_context(previous_answers: dict[str, str] | None) -> str:
    filled = [
        f"{key}: {value.strip()}"
        for key, value in (previous_answers or {}).items()
        if isinstance(value, str) and value.strip()
    ]
    if not filled:
        return ""
    return "\n\nPrevious answers from this user:\n" + "\n".join(filled)


async def suggest_canvas_answer(
    identity: Identity,
    question_number: int,
    question_text: str,
    current_role: str,
    target_role: str,
    previous_answers: dict[str, str] | None = None,
) -> str:
    """커리어 캔버스 질문에 대한 답변 초안 생성"""
    inputs = CanvasSuggestionInput(
        question_number=question_number,
        question_text=question_text,
        current_role=current_role or "my current role",
        target_role=target_role or "my target role",
        previous_answers_context=build_previous_answers_context(previous_answers),
    )
    return await run_task(CANVAS_SUGGESTION_TASK, inputs, identity=identity)
