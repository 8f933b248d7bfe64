from dataclasses import dataclass

from pydantic import BaseModel

from app.domain.tasks.templates import PromptTemplate


@dataclass(frozen=True)
class TaskSpec:
    """
    LLM 작업 정의

    output_model이 None이면 자유 텍스트 생성 작업이다.
    prompt_id가 있으면 ai_prompts 테이블의 활성 행으로 프롬프트를 덮어쓸 수 있다.
    """

    name: str
    system_prompt: str
    prompt: PromptTemplate
    output_model: type[BaseModel] | None
    temperature: float
    max_tokens: int
    provider: str | None = None
    prompt_id: str | None = None


@dataclass(frozen=True)
class PromptConfig:
    """실제 호출에 사용할 프롬프트 설정"""

    system_prompt: str
    template: PromptTemplate
    temperature: float
    max_tokens: int
    model: str | None = None
    source: str = "default"

    @classmethod
    def from_spec(cls, spec: TaskSpec) -> "PromptConfig":
        return cls(
            system_prompt=spec.system_prompt,
            template=spec.prompt,
            temperature=spec.temperature,
            max_tokens=spec.max_tokens,
        )
