"""
structlog 기반 로깅 설정

프로덕션은 JSON, 개발 환경은 콘솔 출력. request_id/user_id는 contextvars에서 주입한다.
초대 토큰, Bearer 토큰, API 키는 환경과 무관하게 항상 가린다.
"""

import logging
import re
import sys

import structlog

from app.core.config import settings
from app.core.context import get_request_id, get_user_id

REDACTED = "***"

REDACTION_PATTERNS = [
    # 초대 수락 링크의 원문 토큰
    re.compile(r"(token=)[^&\s\"']+", re.IGNORECASE),
    re.compile(r"(Bearer\s+)[^\s\"']+", re.IGNORECASE),
    re.compile(r"((?:apikey|api_key|x-cron-secret)[\"']?\s*[:=]\s*[\"']?)[^&\s\"',]+", re.IGNORECASE),
    # Resend 키
    re.compile(r"()\bre_[A-Za-z0-9_]{8,}"),
]

QUIET_LOGGERS = (
    "httpx",
    "httpcore",
    "hpack",
    "postgrest",
    "supabase",
    "langfuse",
    "openai",
    "anthropic",
    "pypdf",
)


def redact(value: str) -> str:
    for pattern in REDACTION_PATTERNS:
        value = pattern.sub(rf"\g<1>{REDACTED}", value)
    return value


def add_request_context(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    request_id = get_request_id()
    user_id = get_user_id()
    if request_id:
        event_dict["request_id"] = request_id
    if user_id:
        event_dict["user_id"] = user_id
    return event_dict


def redact_secrets(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = redact(value)
    return event_dict


def _renderer():
    if settings.is_production:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def setup_logging(level: str | None = None) -> None:
    """structlog와 표준 logging을 같은 포맷으로 연결"""
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    # PositionalArgumentsFormatter가 %-포맷을 먼저 적용해야 redact가 완성된 메시지를 본다
    processors: list = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        add_request_context,
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.is_production:
        processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, _renderer()],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    # uvicorn 로그도 루트 핸들러로 출력
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers.clear()
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
