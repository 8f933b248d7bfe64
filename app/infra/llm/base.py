from abc import ABC, abstractmethod

from langchain_core.language_models import BaseChatModel


class BaseLLMClient(ABC):
    """LLM 클라이언트 추상 클래스"""

    provider: str = ""
    model_prefixes: tuple[str, ...] = ()

    @abstractmethod
    def get_chat_model(
        self,
        temperature: float,
        max_tokens: int,
        model: str | None = None,
    ) -> BaseChatModel:
        """작업별 파라미터가 적용된 LangChain 채팅 모델 반환"""
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """기본 모델 이름 반환"""
        pass

    def accepts_model(self, model: str | None) -> bool:
        """프롬프트 설정에 지정된 모델을 이 프로바이더로 호출할 수 있는지 여부"""
        return bool(model) and model.startswith(self.model_prefixes)
