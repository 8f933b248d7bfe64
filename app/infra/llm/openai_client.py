from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from app.core.config import settings
from app.infra.llm.base import BaseLLMClient


class OpenAIClient(BaseLLMClient):
    """OpenAI 클라이언트 - 기본 프로바이더"""

    provider = "openai"
    model_prefixes = ("gpt-", "o1", "o3", "o4")

    def __init__(self):
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY가 설정되지 않았습니다")

    def get_chat_model(
        self,
        temperature: float,
        max_tokens: int,
        model: str | None = None,
    ) -> BaseChatModel:
        """재시도 없이 호출하는 ChatOpenAI 모델 반환"""
        return ChatOpenAI(
            model=model or settings.openai_model,
            api_key=settings.openai_api_key,
            timeout=settings.openai_timeout,
            temperature=temperature,
            max_tokens=max_tokens,
            max_retries=0,
        )

    def get_model_name(self) -> str:
        return settings.openai_model
