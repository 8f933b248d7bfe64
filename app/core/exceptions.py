from enum import Enum

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import get_logger

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    """에러 코드 열거형"""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    EXPIRED = "EXPIRED"
    RATE_LIMITED = "RATE_LIMITED"
    UPSTREAM_INVALID_RESPONSE = "UPSTREAM_INVALID_RESPONSE"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CustomException(Exception):
    """
    모든 도메인 예외의 기반 클래스

    message는 사용자에게 그대로 노출되는 고정 문구이고,
    detail은 서버 로그에만 남는다.
    """

    def __init__(
        self,
        status_code: int,
        error_code: ErrorCode | str,
        message: str,
        detail: str | None = None,
    ):
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.detail = detail
        super().__init__(message)

    @property
    def code(self) -> str:
        """응답 본문에 실리는 에러 코드 문자열"""
        return _code_value(self.error_code)


class Unauthenticated(CustomException):
    def __init__(self, detail: str | None = None, message: str = "인증이 필요합니다"):
        super().__init__(
            status_code=401,
            error_code=ErrorCode.UNAUTHENTICATED,
            message=message,
            detail=detail,
        )


class Forbidden(CustomException):
    def __init__(self, detail: str | None = None, message: str = "접근 권한이 없습니다"):
        super().__init__(
            status_code=403,
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            detail=detail,
        )


class InvalidInput(CustomException):
    def __init__(self, detail: str | None = None, message: str = "입력값이 올바르지 않습니다"):
        super().__init__(
            status_code=400,
            error_code=ErrorCode.INVALID_INPUT,
            message=message,
            detail=detail,
        )


class NotFound(CustomException):
    def __init__(self, detail: str | None = None, message: str = "요청한 리소스를 찾을 수 없습니다"):
        super().__init__(
            status_code=404,
            error_code=ErrorCode.NOT_FOUND,
            message=message,
            detail=detail,
        )


class Conflict(CustomException):
    def __init__(self, detail: str | None = None, message: str = "이미 처리된 요청입니다"):
        super().__init__(
            status_code=409,
            error_code=ErrorCode.CONFLICT,
            message=message,
            detail=detail,
        )


class Expired(CustomException):
    def __init__(self, detail: str | None = None, message: str = "초대가 만료되었습니다"):
        super().__init__(
            status_code=410,
            error_code=ErrorCode.EXPIRED,
            message=message,
            detail=detail,
        )


class RateLimited(CustomException):
    def __init__(
        self, detail: str | None = None, message: str = "이번 달 사용 가능 횟수를 모두 사용했습니다"
    ):
        super().__init__(
            status_code=429,
            error_code=ErrorCode.RATE_LIMITED,
            message=message,
            detail=detail,
        )


class UpstreamInvalidResponse(CustomException):
    def __init__(
        self, detail: str | None = None, message: str = "AI 응답을 처리하지 못했습니다. 다시 시도해주세요"
    ):
        super().__init__(
            status_code=500,
            error_code=ErrorCode.UPSTREAM_INVALID_RESPONSE,
            message=message,
            detail=detail,
        )


class ServiceUnavailable(CustomException):
    def __init__(
        self,
        detail: str | None = None,
        message: str = "일시적으로 서비스를 사용할 수 없습니다. 잠시 후 다시 시도해주세요",
    ):
        super().__init__(
            status_code=502,
            error_code=ErrorCode.SERVICE_UNAVAILABLE,
            message=message,
            detail=detail,
        )


INTERNAL_ERROR_MESSAGE = "서버 내부 오류가 발생했습니다"


def _code_value(error_code: ErrorCode | str) -> str:
    return error_code.value if isinstance(error_code, ErrorCode) else error_code


def _error_response(status_code: int, message: str, error_code: ErrorCode | str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "error_code": _code_value(error_code)},
    )


def internal_error_response() -> JSONResponse:
    return _error_response(500, INTERNAL_ERROR_MESSAGE, ErrorCode.INTERNAL_ERROR)


def register_exception_handlers(app):
    @app.exception_handler(CustomException)
    async def custom_exception_handler(request: Request, exc: CustomException):
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            "요청 처리 실패 path=%s status=%d code=%s detail=%s",
            request.url.path,
            exc.status_code,
            exc.code,
            exc.detail,
        )
        return _error_response(exc.status_code, exc.message, exc.error_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("요청 검증 실패 path=%s errors=%s", request.url.path, exc.errors())
        return _error_response(400, "입력값이 올바르지 않습니다", ErrorCode.INVALID_INPUT)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error("처리되지 않은 예외 path=%s", request.url.path, exc_info=exc)
        return internal_error_response()
