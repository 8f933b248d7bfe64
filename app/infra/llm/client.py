import asyncio
import os

import anthropic
import httpx
import openai
from langchain_core.messages import HumanMessage, SystemMessage
from langfuse.langchain import CallbackHandler

from app.core.config import settings
from app.core.exceptions import ServiceUnavailable
from app.core.logging import get_logger
from app.infra.llm.factory import get_llm_client

logger = get_logger(__name__)

if settings.langfuse_public_key:
    os.environ["LANGFUSE_PUBLIC_KEY"] = settings.langfuse_public_key
if settings.langfuse_secret_key:
    os.environ["LANGFUSE_SECRET_KEY"] = settings.langfuse_secret_key
if settings.langfuse_base_url:
    os.environ["LANGFUSE_HOST"] = settings.langfuse_base_url

LLM_TRANSPORT_ERRORS = (
    openai.APIError,
    anthropic.APIError,
    httpx.HTTPError,
    asyncio.TimeoutError,
)


def get_langfuse_handler() -> CallbackHandler | None:
    """Langfuse 콜백 핸들러 반환"""
    if not settings.langfuse_public_key or not settings.langfuse_secret_key:
        return None

    return CallbackHandler()


def _content_to_text(content) -> str:
    """모델 응답 content를 문자열로 변환 (Anthropic은 블록 리스트로 반환할 수 있음)"""
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


async def complete(
    system_prompt: str,
    user_prompt: str,
    *,
    temperature: float,
    max_tokens: int,
    provider: str | None = None,
    model: str | None = None,
    tags: list[str] | None = None,
    user_id: str | None = None,
) -> str:
    """
    LLM 단일 호출 후 원문 텍스트 반환

    재시도하지 않는다. 전송 계층 실패는 ServiceUnavailable로 변환된다.
    """
    try:
        client = get_llm_client(provider)
    except ValueError as e:
        raise ServiceUnavailable(detail=str(e)) from e

    if model and not client.accepts_model(model):
        logger.warning(
            "프롬프트 모델이 프로바이더와 맞지 않음, 기본 모델 사용 provider=%s model=%s",
            client.provider,
            model,
        )
        model = None

    langfuse_handler = get_langfuse_handler()
    config = {
        "callbacks": [langfuse_handler] if langfuse_handler else [],
        "metadata": {
            "langfuse_user_id": user_id,
            "langfuse_tags": tags or [],
        },
    }

    llm = client.get_chat_model(temperature=temperature, max_tokens=max_tokens, model=model)
    messages = [
        SystemMessage(content=system_prompt),
        HumanMessage(content=user_prompt),
    ]

    logger.debug(
        "LLM 호출 provider=%s model=%s tags=%s",
        client.provider,
        model or client.get_model_name(),
        tags,
    )
    try:
        result = await llm.ainvoke(messages, config=config)
    except LLM_TRANSPORT_ERRORS as e:
        logger.error("LLM 호출 실패 provider=%s error=%s", client.provider, type(e).__name__)
        raise ServiceUnavailable(detail=f"{client.provider}: {e}") from e

    return _content_to_text(result.content)
