"""
Resend 이메일 발송 클라이언트

발송은 fire-and-forget: 실패해도 예외를 올리지 않고 False를 반환한다.
"""

import httpx

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

_client = httpx.AsyncClient(timeout=settings.email_timeout)


async def close_client():
    """httpx 클라이언트 종료"""
    await _client.aclose()


async def send_email(to: str, subject: str, html: str) -> bool:
    """이메일 발송, 성공 여부 반환"""
    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY 미설정, 이메일 발송 생략 subject=%s", subject)
        return False

    try:
        response = await _client.post(
            settings.resend_api_url,
            headers={
                "Authorization": f"Bearer {settings.resend_api_key}",
                "Content-Type": "application/json",
            },
            json={
                "from": settings.email_from,
                "to": [to],
                "subject": subject,
                "html": html,
            },
        )
    except httpx.HTTPError as e:
        logger.error("이메일 요청 실패 subject=%s error=%s", subject, type(e).__name__)
        return False

    if response.status_code >= 400:
        logger.error(
            "이메일 발송 실패 subject=%s status_code=%d body=%s",
            subject,
            response.status_code,
            response.text[:500],
        )
        return False

    logger.info("이메일 발송 완료 subject=%s", subject)
    return True
