"""이력서 분석 워크플로우/서비스 테스트"""

import base64
import json
from unittest.mock import AsyncMock, patch

import pytest

from app.core.exceptions import (
    Forbidden,
    InvalidInput,
    NotFound,
    RateLimited,
    ServiceUnavailable,
    UpstreamInvalidResponse,
)
from app.domain.resume.schemas import ResumeAnalysisResult
from app.domain.resume.service import (
    improve_section,
    match_job_description,
    parse_resume,
)
from app.domain.resume.workflow import (
    create_resume_analysis_workflow,
    persist_node,
    run_resume_analysis,
    should_continue,
)
from app.infra.supabase.client import SupabaseError
from tests.factories import RESUME_TEXT, USER_ID

ANALYSIS_JSON = json.dumps(
    {
        "ats_score": 150,
        "strengths": ["Clear impact metrics"],
        "gaps": ["No certifications"],
        "recommendations": ["Add a skills section"],
    }
)
FILE_PATH = f"{USER_ID}/resume.pdf"


@pytest.fixture
def storage(sample_pdf):
    """서명 URL 발급과 다운로드를 대체"""
    with patch(
        "app.domain.resume.workflow.fetch_artifact", new_callable=AsyncMock, return_value=sample_pdf
    ) as mock:
        yield mock


@pytest.fixture
def persisted():
    with patch(
        "app.domain.tasks.persister.insert",
        new_callable=AsyncMock,
        side_effect=lambda table, row: {"id": "analysis-1", **row},
    ) as mock:
        yield mock


class TestShouldContinue:
    """should_continue 함수 테스트"""

    def test_error_ends(self):
        assert should_continue({"error": NotFound()}) == "end"

    def test_no_error_continues(self):
        assert should_continue({}) == "next"


class TestWorkflowGraph:
    def test_graph_compiles(self):
        workflow = create_resume_analysis_workflow()

        assert workflow is not None


class TestRunResumeAnalysis:
    """run_resume_analysis 파이프라인 테스트"""

    @pytest.mark.asyncio
    async def test_success(self, identity, fake_ledger, storage, mock_llm, persisted):
        mock_llm.return_value = ANALYSIS_JSON

        result = await run_resume_analysis(identity, FILE_PATH, "resume.pdf", quota_limit=2)

        assert result["remaining"] == 1
        record = result["analysis"]
        assert record["ats_score"] == 100
        assert record["user_id"] == USER_ID
        assert record["file_url"] == FILE_PATH
        assert record["strengths"] == ["Clear impact metrics"]
        storage.assert_awaited_once_with(FILE_PATH)

    @pytest.mark.asyncio
    async def test_quota_exhausted_after_two(self, identity, fake_ledger, storage, mock_llm, persisted):
        """한도 2에서 세 번째 요청은 LLM 호출 없이 429"""
        mock_llm.return_value = ANALYSIS_JSON

        first = await run_resume_analysis(identity, FILE_PATH, "resume.pdf", quota_limit=2)
        second = await run_resume_analysis(identity, FILE_PATH, "resume.pdf", quota_limit=2)
        with pytest.raises(RateLimited):
            await run_resume_analysis(identity, FILE_PATH, "resume.pdf", quota_limit=2)

        assert [first["remaining"], second["remaining"]] == [1, 0]
        assert mock_llm.await_count == 2
        assert storage.await_count == 2

    @pytest.mark.asyncio
    async def test_foreign_path_does_no_io(self, identity, fake_ledger, storage, mock_llm):
        """다른 사용자 경로는 사용량/스토리지 접근 전에 거부"""
        with pytest.raises(Forbidden):
            await run_resume_analysis(identity, "someone-else/resume.pdf", "resume.pdf")

        assert fake_ledger.counts == {}
        storage.assert_not_called()
        mock_llm.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_file(self, identity, fake_ledger, storage, mock_llm):
        storage.side_effect = NotFound()

        with pytest.raises(NotFound):
            await run_resume_analysis(identity, FILE_PATH, "resume.pdf", quota_limit=2)

        mock_llm.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_model_output(self, identity, fake_ledger, storage, mock_llm, persisted):
        mock_llm.return_value = '{"ats_score": 80}'

        with pytest.raises(UpstreamInvalidResponse):
            await run_resume_analysis(identity, FILE_PATH, "resume.pdf", quota_limit=2)

        persisted.assert_not_called()

    @pytest.mark.asyncio
    async def test_quota_not_refunded_on_persist_failure(self, identity, fake_ledger, storage, mock_llm):
        """저장 실패 시 이미 증가한 사용량은 유지"""
        mock_llm.return_value = ANALYSIS_JSON
        with patch(
            "app.domain.tasks.persister.insert",
            new_callable=AsyncMock,
            side_effect=SupabaseError("timeout"),
        ):
            with pytest.raises(ServiceUnavailable):
                await run_resume_analysis(identity, FILE_PATH, "resume.pdf", quota_limit=2)

        assert sum(fake_ledger.counts.values()) == 1


class TestPersistNode:
    @pytest.mark.asyncio
    async def test_row_fields(self, identity, persisted):
        state = {
            "identity": identity,
            "file_path": FILE_PATH,
            "file_name": "resume.pdf",
            "analysis": ResumeAnalysisResult(ats_score=70, strengths=[], gaps=[], recommendations=[]),
        }

        result = await persist_node(state)

        row = persisted.call_args.args[1]
        assert persisted.call_args.args[0] == "resume_analyses"
        assert set(row) >= {"user_id", "file_name", "file_url", "ats_score", "analysis_date"}
        assert result["record"]["id"] == "analysis-1"


class TestParseResume:
    @pytest.mark.asyncio
    async def test_defaults_filled(self, identity, sample_pdf, mock_llm):
        mock_llm.return_value = '```json\n{"personal_info": {"email": "jane@example.com"}, "skills": null}\n```'

        parsed = await parse_resume(identity, base64.b64encode(sample_pdf).decode(), "resume.pdf")

        assert parsed.personal_info.full_name == "Candidate"
        assert parsed.personal_info.email == "jane@example.com"
        assert parsed.skills == []
        assert parsed.work_experience == []


class TestMatchJobDescription:
    @pytest.mark.asyncio
    async def test_section_defaults_and_clamping(self, identity, mock_llm):
        mock_llm.return_value = json.dumps(
            {
                "matchScore": 104,
                "sectionAnalysis": {"skills": {"score": -5, "feedback": "Weak"}},
                "improvements": [{"section": "summary", "suggested": "Mention Kafka"}],
            }
        )

        result = await match_job_description(
            identity,
            resume_text=RESUME_TEXT,
            job_title="Backend Engineer",
            job_description="Build APIs",
            skills=["Python"],
        )

        assert result.match_score == 100
        assert result.section_analysis.skills.score == 0
        assert result.section_analysis.experience.feedback == "Unable to analyze"
        assert result.keyword_analysis.matched == []
        assert result.improvements[0].suggested == "Mention Kafka"

    @pytest.mark.asyncio
    async def test_missing_score_fails(self, identity, mock_llm):
        mock_llm.return_value = json.dumps({"keywordAnalysis": {}})

        with pytest.raises(UpstreamInvalidResponse):
            await match_job_description(identity, RESUME_TEXT, "Engineer", "Build APIs")

    @pytest.mark.asyncio
    async def test_short_resume(self, identity, mock_llm):
        with pytest.raises(InvalidInput):
            await match_job_description(identity, "too short", "Engineer", "Build APIs")

        mock_llm.assert_not_called()


class TestImproveSection:
    @pytest.mark.asyncio
    async def test_strips_quotes(self, identity, mock_llm):
        mock_llm.return_value = '"Led a team of five engineers."'

        improved = await improve_section(identity, "bullet", "led team")

        assert improved == "Led a team of five engineers."

    @pytest.mark.asyncio
    async def test_unknown_type(self, identity, mock_llm):
        with pytest.raises(InvalidInput):
            await improve_section(identity, "header", "text")
