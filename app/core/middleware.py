"""
HTTP 요청 로깅 미들웨어

- 요청마다 request_id 부여 (X-Request-ID 헤더가 있으면 재사용)
- 요청/응답 메타데이터 로깅
- CORS preflight 요청은 로깅 생략
- 처리되지 않은 예외는 CORS 미들웨어 안쪽에서 500 JSON 응답으로 변환
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.core.context import clear_context, set_request_id
from app.core.exceptions import internal_error_response
from app.core.logging import get_logger

logger = get_logger(__name__)

SKIP_PATHS = {"/health", "/docs", "/openapi.json", "/redoc", "/favicon.ico"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """HTTP 요청 로깅 및 request_id 관리 미들웨어"""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in SKIP_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        request_id = set_request_id(request.headers.get("X-Request-ID"))
        start_time = time.perf_counter()

        logger.info(
            "요청 시작",
            method=request.method,
            path=request.url.path,
            client_ip=_get_client_ip(request),
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "요청 실패",
                method=request.method,
                path=request.url.path,
                error=type(e).__name__,
                duration_ms=_elapsed_ms(start_time),
            )
            raise
        else:
            logger.info(
                "요청 완료",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=_elapsed_ms(start_time),
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_context()


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)


def _get_client_ip(request: Request) -> str:
    """클라이언트 IP 추출"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class UnhandledErrorMiddleware:
    """
    처리되지 않은 예외를 500 JSON 응답으로 변환하는 ASGI 미들웨어

    앱 수준의 Exception 핸들러는 CORS 바깥의 ServerErrorMiddleware에서 실행되므로
    CORS 헤더가 빠진다. 이 미들웨어는 CORS 안쪽에 등록한다.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as e:
            if response_started:
                raise
            logger.error("처리되지 않은 예외 path=%s", scope.get("path"), exc_info=e)
            await internal_error_response()(scope, receive, send)
