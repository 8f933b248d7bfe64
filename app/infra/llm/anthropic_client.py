from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel

from app.core.config import settings
from app.infra.llm.base import BaseLLMClient


class AnthropicClient(BaseLLMClient):
    """Anthropic 클라이언트 - 직무 추천 우선 프로바이더"""

    provider = "anthropic"
    model_prefixes = ("claude-",)

    def __init__(self):
        if not settings.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY가 설정되지 않았습니다")

    def get_chat_model(
        self,
        temperature: float,
        max_tokens: int,
        model: str | None = None,
    ) -> BaseChatModel:
        """재시도 없이 호출하는 ChatAnthropic 모델 반환"""
        return ChatAnthropic(
            model=model or settings.anthropic_model,
            api_key=settings.anthropic_api_key,
            timeout=settings.anthropic_timeout,
            temperature=temperature,
            max_tokens=max_tokens,
            max_retries=0,
        )

    def get_model_name(self) -> str:
        return settings.anthropic_model
