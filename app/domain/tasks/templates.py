"""
작업별 프롬프트 템플릿

템플릿은 {name} 또는 {{name}} 형태의 자리표시자만 치환한다. JSON 예시처럼 식별자가 아닌
중괄호는 그대로 둔다. 입력 모델에 없는 자리표시자를 참조하면 생성 시점에
TemplateError가 발생한다 (런타임이 아니라 모듈 로드/테스트 시점에 드러남).
"""

import re

from pydantic import BaseModel

PLACEHOLDER_PATTERN = re.compile(r"\{\{?([A-Za-z_][A-Za-z0-9_]*)\}?\}")


class TemplateError(ValueError):
    """템플릿 작성 오류"""


def find_placeholders(template: str) -> set[str]:
    return set(PLACEHOLDER_PATTERN.findall(template))


def input_field_names(input_model: type[BaseModel]) -> set[str]:
    """자리표시자로 쓸 수 있는 이름 (alias가 있으면 alias)"""
    return {field.alias or name for name, field in input_model.model_fields.items()}


class PromptTemplate:
    """입력 모델 -> 프롬프트 문자열로 렌더링하는 타입 템플릿"""

    def __init__(self, template: str, input_model: type[BaseModel]):
        unknown = find_placeholders(template) - input_field_names(input_model)
        if unknown:
            raise TemplateError(
                f"{input_model.__name__}에 없는 자리표시자: {', '.join(sorted(unknown))}"
            )
        self.template = template
        self.input_model = input_model

    @property
    def placeholders(self) -> set[str]:
        return find_placeholders(self.template)

    def render(self, inputs: BaseModel) -> str:
        if not isinstance(inputs, self.input_model):
            raise TypeError(f"{self.input_model.__name__} 입력이 필요합니다")

        values = inputs.model_dump(by_alias=True)
        return PLACEHOLDER_PATTERN.sub(lambda m: _to_text(values[m.group(1)]), self.template)


def _to_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)
