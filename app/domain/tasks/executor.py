"""
LLM 작업 실행기

프롬프트 렌더링 -> LLM 호출(재시도 없음) -> JSON 파싱/스키마 검증 순서로 실행한다.
문서화된 필드 기본값과 점수 보정 외에는 부분 복구를 하지 않는다.
"""

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import UpstreamInvalidResponse
from app.core.logging import get_logger
from app.domain.access.schemas import Identity
from app.domain.tasks.parsing import parse_json_response
from app.domain.tasks.spec import PromptConfig, TaskSpec
from app.domain.tasks.templates import PromptTemplate, TemplateError
from app.infra.llm.client import complete
from app.infra.llm.factory import resolve_provider
from app.infra.supabase.client import SupabaseError, select_one

logger = get_logger(__name__)

PROMPT_COLUMNS = "model, max_tokens, temperature, system_prompt, user_prompt_template"


async def resolve_prompt_config(spec: TaskSpec) -> PromptConfig:
    """ai_prompts 활성 행이 있으면 덮어쓰고, 없거나 잘못되면 기본 설정 사용"""
    default = PromptConfig.from_spec(spec)
    if not spec.prompt_id:
        return default

    try:
        row = await select_one(
            "ai_prompts",
            {"id": spec.prompt_id, "is_active": True},
            columns=PROMPT_COLUMNS,
        )
    except SupabaseError as e:
        logger.warning("프롬프트 설정 조회 실패, 기본값 사용 prompt_id=%s error=%s", spec.prompt_id, e)
        return default

    if not row or not row.get("user_prompt_template"):
        return default

    try:
        template = PromptTemplate(row["user_prompt_template"], spec.prompt.input_model)
    except TemplateError as e:
        logger.warning("DB 프롬프트 템플릿 오류, 기본값 사용 prompt_id=%s error=%s", spec.prompt_id, e)
        return default

    logger.info("DB 프롬프트 설정 사용 prompt_id=%s", spec.prompt_id)
    return PromptConfig(
        system_prompt=row.get("system_prompt") or spec.system_prompt,
        template=template,
        temperature=_number_or(row.get("temperature"), spec.temperature),
        max_tokens=int(_number_or(row.get("max_tokens"), spec.max_tokens)),
        model=row.get("model") or None,
        source="database",
    )


def _number_or(value, default):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return default


def validate_output(output_model: type[BaseModel], raw: str) -> BaseModel:
    """원문 응답을 JSON 파싱 후 출력 스키마로 검증"""
    data = parse_json_response(raw)
    try:
        return output_model.model_validate(data)
    except PydanticValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise UpstreamInvalidResponse(
            detail=f"{output_model.__name__} 검증 실패 fields={fields}"
        ) from e


async def run_task(
    spec: TaskSpec,
    inputs: BaseModel,
    identity: Identity | None = None,
    prompt_suffix: str = "",
) -> BaseModel | str:
    """작업 실행 후 검증된 출력 모델(또는 자유 텍스트) 반환

    prompt_suffix는 렌더링된 프롬프트 뒤에 그대로 붙는다 (DB 템플릿을 써도 유지됨).
    """
    config = await resolve_prompt_config(spec)
    user_prompt = config.template.render(inputs) + prompt_suffix
    provider = resolve_provider(spec.provider)

    logger.info(
        "LLM 작업 시작 task=%s provider=%s source=%s",
        spec.name,
        provider,
        config.source,
    )
    raw = await complete(
        config.system_prompt,
        user_prompt,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        provider=provider,
        model=config.model,
        tags=[spec.name],
        user_id=identity.id if identity else None,
    )

    if spec.output_model is None:
        text = (raw or "").strip()
        if not text:
            raise UpstreamInvalidResponse(detail=f"{spec.name}: 빈 응답")
        logger.info("LLM 작업 완료 task=%s chars=%d", spec.name, len(text))
        return text

    result = validate_output(spec.output_model, raw)
    logger.info("LLM 작업 완료 task=%s", spec.name)
    return result
