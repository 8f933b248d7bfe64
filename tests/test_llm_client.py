"""LLM 클라이언트 테스트"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.core.exceptions import ServiceUnavailable
from app.infra.llm.client import _content_to_text, complete
from app.infra.llm.factory import get_llm_client, reset_clients, resolve_provider


@pytest.fixture
def mock_provider():
    """LLM 프로바이더 클라이언트 mock"""
    llm = MagicMock()
    llm.ainvoke = AsyncMock(return_value=MagicMock(content='{"ok": true}'))

    client = MagicMock()
    client.provider = "openai"
    client.get_chat_model.return_value = llm
    client.get_model_name.return_value = "gpt-4o-mini"
    client.accepts_model.side_effect = lambda model: model.startswith("gpt-")

    with patch("app.infra.llm.client.get_llm_client", return_value=client):
        yield client


@pytest.fixture
def clean_clients():
    reset_clients()
    yield
    reset_clients()


class TestComplete:
    """complete 함수 테스트"""

    @pytest.mark.asyncio
    async def test_returns_text(self, mock_provider):
        result = await complete("system", "user", temperature=0.3, max_tokens=100)

        assert result == '{"ok": true}'
        mock_provider.get_chat_model.assert_called_once_with(
            temperature=0.3, max_tokens=100, model=None
        )
        messages = mock_provider.get_chat_model.return_value.ainvoke.call_args.args[0]
        assert [m.content for m in messages] == ["system", "user"]

    @pytest.mark.asyncio
    async def test_prompt_model_override(self, mock_provider):
        await complete("s", "u", temperature=0.3, max_tokens=10, model="gpt-4o")

        assert mock_provider.get_chat_model.call_args.kwargs["model"] == "gpt-4o"

    @pytest.mark.asyncio
    async def test_mismatched_model_uses_default(self, mock_provider):
        """다른 프로바이더의 모델명은 무시"""
        await complete("s", "u", temperature=0.3, max_tokens=10, model="claude-3-5-sonnet")

        assert mock_provider.get_chat_model.call_args.kwargs["model"] is None

    @pytest.mark.asyncio
    async def test_transport_error(self, mock_provider):
        llm = mock_provider.get_chat_model.return_value
        llm.ainvoke.side_effect = httpx.ConnectTimeout("timeout")

        with pytest.raises(ServiceUnavailable):
            await complete("s", "u", temperature=0.3, max_tokens=10)

        assert llm.ainvoke.await_count == 1

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        with patch("app.infra.llm.client.get_llm_client", side_effect=ValueError("no key")):
            with pytest.raises(ServiceUnavailable):
                await complete("s", "u", temperature=0.3, max_tokens=10)

    def test_content_blocks(self):
        """Anthropic 블록 응답을 문자열로 변환"""
        content = [{"type": "text", "text": "Hello "}, {"type": "tool_use"}, "world"]

        assert _content_to_text(content) == "Hello world"


class TestFactory:
    """프로바이더 선택 테스트"""

    def test_preferred_provider_when_configured(self):
        with patch("app.infra.llm.factory.settings") as mock_settings:
            mock_settings.anthropic_api_key = "key"
            mock_settings.llm_provider = "openai"

            assert resolve_provider("anthropic") == "anthropic"

    def test_fallback_to_default(self):
        with patch("app.infra.llm.factory.settings") as mock_settings:
            mock_settings.anthropic_api_key = ""
            mock_settings.llm_provider = "openai"

            assert resolve_provider("anthropic") == "openai"
            assert resolve_provider(None) == "openai"

    def test_unknown_provider(self, clean_clients):
        with pytest.raises(ValueError):
            get_llm_client("gemini")

    def test_missing_key(self, clean_clients):
        with patch("app.infra.llm.openai_client.settings") as mock_settings:
            mock_settings.openai_api_key = ""

            with pytest.raises(ValueError):
                get_llm_client("openai")
