from datetime import datetime, timezone
from typing import Literal

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from app.core.config import settings
from app.core.exceptions import CustomException
from app.core.logging import get_logger
from app.domain.access.ownership import validate_storage_path
from app.domain.access.schemas import Identity
from app.domain.artifact.fetcher import fetch_artifact
from app.domain.extraction.extractor import extract_text
from app.domain.quota.ledger import RESUME_ANALYSIS, consume
from app.domain.resume.schemas import ResumeAnalysisResult, ResumeAnalysisState, ResumeTextInput
from app.domain.resume.tasks import ANALYSIS_MAX_CHARS, RESUME_ANALYSIS_TASK
from app.domain.tasks.executor import run_task
from app.domain.tasks.persister import persist_result

logger = get_logger(__name__)

RESULTS_TABLE = "resume_analyses"

NODE_ORDER = ["validate", "quota", "fetch", "extract", "analyze", "persist"]


def _fail(state: ResumeAnalysisState, node: str, error: CustomException) -> ResumeAnalysisState:
    logger.info("%s_node 실패 code=%s", node, error.error_code)
    return {**state, "error": error}


async def validate_node(state: ResumeAnalysisState) -> ResumeAnalysisState:
    """경로 소유권/형식 검증 노드 - I/O 없음"""
    try:
        validate_storage_path(state["identity"], state["file_path"])
    except CustomException as e:
        return _fail(state, "validate", e)
    return state


async def quota_node(state: ResumeAnalysisState) -> ResumeAnalysisState:
    """월간 사용량 원자적 증가 노드"""
    try:
        decision = await consume(state["identity"], RESUME_ANALYSIS, state["quota_limit"])
    except CustomException as e:
        return _fail(state, "quota", e)
    return {**state, "quota_count": decision.count}


async def fetch_node(state: ResumeAnalysisState) -> ResumeAnalysisState:
    """스토리지에서 PDF 조회 노드"""
    try:
        pdf_bytes = await fetch_artifact(state["file_path"])
    except CustomException as e:
        return _fail(state, "fetch", e)
    return {**state, "pdf_bytes": pdf_bytes}


async def extract_node(state: ResumeAnalysisState) -> ResumeAnalysisState:
    """PDF 텍스트 추출 노드"""
    try:
        resume_text = await extract_text(state["pdf_bytes"])
    except CustomException as e:
        return _fail(state, "extract", e)
    return {**state, "resume_text": resume_text}


async def analyze_node(state: ResumeAnalysisState) -> ResumeAnalysisState:
    """LLM 분석 노드"""
    inputs = ResumeTextInput(resume_text=state["resume_text"][:ANALYSIS_MAX_CHARS])
    try:
        analysis = await run_task(RESUME_ANALYSIS_TASK, inputs, identity=state["identity"])
    except CustomException as e:
        return _fail(state, "analyze", e)
    return {**state, "analysis": analysis}


async def persist_node(state: ResumeAnalysisState) -> ResumeAnalysisState:
    """분석 결과 저장 노드"""
    analysis: ResumeAnalysisResult = state["analysis"]
    try:
        record = await persist_result(
            RESULTS_TABLE,
            state["identity"],
            {
                "file_name": state["file_name"],
                "file_url": state["file_path"],
                "ats_score": analysis.ats_score,
                "strengths": analysis.strengths,
                "gaps": analysis.gaps,
                "recommendations": analysis.recommendations,
                "analysis_date": datetime.now(timezone.utc).isoformat(),
            },
        )
    except CustomException as e:
        return _fail(state, "persist", e)
    return {**state, "record": record}


def should_continue(state: ResumeAnalysisState) -> Literal["next", "end"]:
    """에러 상태 확인: 에러 있으면 종료, 없으면 다음 노드로"""
    if state.get("error"):
        return "end"
    return "next"


def create_resume_analysis_workflow() -> CompiledStateGraph:
    """이력서 분석 워크플로우 생성: 노드는 순서대로만 실행되며 실패 시 즉시 종료"""
    workflow = StateGraph(ResumeAnalysisState)

    workflow.add_node("validate", validate_node)
    workflow.add_node("quota", quota_node)
    workflow.add_node("fetch", fetch_node)
    workflow.add_node("extract", extract_node)
    workflow.add_node("analyze", analyze_node)
    workflow.add_node("persist", persist_node)

    workflow.set_entry_point(NODE_ORDER[0])

    for current, following in zip(NODE_ORDER, NODE_ORDER[1:]):
        workflow.add_conditional_edges(
            current,
            should_continue,
            {
                "next": following,
                "end": END,
            },
        )
    workflow.add_edge(NODE_ORDER[-1], END)

    return workflow.compile()


_workflow: CompiledStateGraph | None = None


def get_resume_analysis_workflow() -> CompiledStateGraph:
    global _workflow
    if _workflow is None:
        _workflow = create_resume_analysis_workflow()
    return _workflow


async def run_resume_analysis(
    identity: Identity,
    file_path: str,
    file_name: str,
    quota_limit: int | None = None,
) -> dict:
    """
    이력서 분석 파이프라인 실행

    Returns:
        {"analysis": 저장된 행, "remaining": 남은 횟수}

    Raises:
        CustomException: 실패한 노드에서 기록한 오류
    """
    limit = settings.resume_analysis_monthly_limit if quota_limit is None else quota_limit
    initial: ResumeAnalysisState = {
        "identity": identity,
        "file_path": file_path,
        "file_name": file_name,
        "quota_limit": limit,
    }

    final_state = await get_resume_analysis_workflow().ainvoke(initial)

    error = final_state.get("error")
    if error is not None:
        raise error

    remaining = max(0, limit - final_state["quota_count"])
    logger.info("이력서 분석 완료 remaining=%d", remaining)
    return {"analysis": final_state["record"], "remaining": remaining}
