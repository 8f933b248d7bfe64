"""
서명 URL 기반 바이너리 다운로드

선언된 Content-Type/Content-Length를 먼저 검사하고,
본문은 스트리밍으로 읽으면서 실제 바이트 수를 다시 제한한다.
"""

import httpx

from app.core.config import settings
from app.core.exceptions import InvalidInput, NotFound, ServiceUnavailable
from app.core.logging import get_logger

logger = get_logger(__name__)

_client = httpx.AsyncClient(timeout=settings.fetch_timeout, follow_redirects=True)


async def close_client():
    """httpx 클라이언트 종료"""
    await _client.aclose()


def _check_declared_headers(headers: httpx.Headers, content_type_marker: str, max_bytes: int) -> None:
    content_type = headers.get("content-type", "")
    if content_type_marker not in content_type.lower():
        raise InvalidInput(
            detail=f"content-type={content_type}",
            message="PDF 파일만 분석할 수 있습니다",
        )

    declared = headers.get("content-length")
    if declared is not None:
        try:
            declared_bytes = int(declared)
        except ValueError:
            declared_bytes = None
        if declared_bytes is not None and declared_bytes > max_bytes:
            raise InvalidInput(
                detail=f"content-length={declared_bytes}",
                message="파일 크기는 10MB 이하여야 합니다",
            )


async def download(url: str, max_bytes: int, content_type_marker: str = "pdf") -> bytes:
    """
    URL에서 바이너리 다운로드

    Raises:
        NotFound: 객체가 존재하지 않는 경우
        InvalidInput: 타입 또는 크기 제한 위반
        ServiceUnavailable: 전송 계층 오류
    """
    try:
        async with _client.stream("GET", url) as response:
            if response.status_code in (400, 404):
                raise NotFound(
                    detail=f"status={response.status_code}",
                    message="파일을 찾을 수 없습니다",
                )
            if response.status_code >= 300:
                raise ServiceUnavailable(detail=f"storage status={response.status_code}")

            _check_declared_headers(response.headers, content_type_marker, max_bytes)

            buffer = bytearray()
            async for chunk in response.aiter_bytes():
                buffer.extend(chunk)
                if len(buffer) > max_bytes:
                    raise InvalidInput(
                        detail=f"actual bytes > {max_bytes}",
                        message="파일 크기는 10MB 이하여야 합니다",
                    )
    except httpx.HTTPError as e:
        logger.error("파일 다운로드 실패 error=%s", type(e).__name__)
        raise ServiceUnavailable(detail=f"download: {e}") from e

    logger.debug("파일 다운로드 완료 bytes=%d", len(buffer))
    return bytes(buffer)
