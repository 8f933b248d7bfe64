"""테스트 공통 fixture"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from app.core.limiter import limiter
from app.domain.access.schemas import Identity
from app.main import app
from tests.factories import OTHER_USER_ID, RESUME_TEXT, USER_ID, FakeUsageLedger, build_pdf


@pytest.fixture(autouse=True)
def disable_rate_limit():
    """요청 빈도 제한 비활성화"""
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def identity() -> Identity:
    """테스트용 인증 사용자"""
    return Identity(id=USER_ID, email="Jane.Doe@Example.com")


@pytest.fixture
def other_identity() -> Identity:
    return Identity(id=OTHER_USER_ID, email="someone@example.com")


@pytest.fixture
def sample_pdf() -> bytes:
    """텍스트가 충분한 PDF"""
    return build_pdf(RESUME_TEXT)


@pytest.fixture
def fake_ledger():
    """사용량 원장 fake - ledger 모듈의 rpc를 대체"""
    ledger = FakeUsageLedger()
    with patch("app.domain.quota.ledger.rpc", side_effect=ledger.rpc):
        yield ledger


@pytest.fixture
def async_client():
    """비동기 HTTP 클라이언트"""
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.fixture
def authenticated(identity):
    """인증 게이트가 항상 identity를 반환하도록 설정"""
    with patch("app.api.deps.authenticate", new_callable=AsyncMock, return_value=identity) as mock:
        yield mock


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": "Bearer test-token"}


@pytest.fixture
def create_http_error():
    """HTTPStatusError 생성 helper"""

    def _create(status_code: int, message: str = "Error"):
        return httpx.HTTPStatusError(
            message,
            request=httpx.Request("GET", "https://test.com"),
            response=httpx.Response(status_code),
        )

    return _create


@pytest.fixture
def mock_llm():
    """LLM complete 호출 mock (작업 실행기 기준)"""
    with patch("app.domain.tasks.executor.complete", new_callable=AsyncMock) as mock:
        yield mock


@pytest.fixture
def no_prompt_override():
    """ai_prompts 조회 시 활성 행 없음"""
    with patch(
        "app.domain.tasks.executor.select_one", new_callable=AsyncMock, return_value=None
    ) as mock:
        yield mock


@pytest.fixture
def mock_workflow():
    """LangGraph 워크플로우 mock"""
    workflow = MagicMock()
    workflow.ainvoke = AsyncMock()
    return workflow
