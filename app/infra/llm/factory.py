from typing import Literal

from app.core.config import settings
from app.core.logging import get_logger
from app.infra.llm.anthropic_client import AnthropicClient
from app.infra.llm.base import BaseLLMClient
from app.infra.llm.openai_client import OpenAIClient

logger = get_logger(__name__)

LLMProvider = Literal["openai", "anthropic"]

_clients: dict[str, BaseLLMClient] = {}


def _is_configured(provider: str) -> bool:
    if provider == "openai":
        return bool(settings.openai_api_key)
    if provider == "anthropic":
        return bool(settings.anthropic_api_key)
    return False


def resolve_provider(preferred: str | None = None) -> str:
    """선호 프로바이더에 키가 없으면 기본 프로바이더로 대체"""
    if preferred and _is_configured(preferred):
        return preferred
    if preferred and preferred != settings.llm_provider:
        logger.info("선호 프로바이더 미설정, 기본값 사용 preferred=%s", preferred)
    return settings.llm_provider


def get_llm_client(provider: str | None = None) -> BaseLLMClient:
    """프로바이더별 LLM 클라이언트 반환"""
    provider = provider or settings.llm_provider

    if provider in _clients:
        return _clients[provider]

    if provider == "openai":
        client: BaseLLMClient = OpenAIClient()
    elif provider == "anthropic":
        client = AnthropicClient()
    else:
        raise ValueError(f"지원하지 않는 LLM 프로바이더: {provider}")

    logger.info("LLM 클라이언트 초기화 provider=%s model=%s", provider, client.get_model_name())
    _clients[provider] = client
    return client


def reset_clients() -> None:
    """클라이언트 캐시 초기화 - 테스트용"""
    _clients.clear()
