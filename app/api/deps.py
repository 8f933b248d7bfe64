import hmac

from fastapi import Header

from app.core.config import settings
from app.core.context import set_user_id
from app.core.exceptions import Unauthenticated
from app.domain.access.gate import authenticate
from app.domain.access.schemas import Identity


async def get_current_identity(authorization: str | None = Header(default=None)) -> Identity:
    """Bearer 토큰을 검증해 요청자 Identity 반환 (본문 검증보다 먼저 실행)"""
    identity = await authenticate(authorization)
    set_user_id(identity.id)
    return identity


async def verify_cron_secret(x_cron_secret: str | None = Header(default=None)) -> None:
    """예약 작업 호출 검증, 시크릿 미설정 시 모든 호출 거부"""
    expected = settings.cron_secret
    if not expected or not x_cron_secret:
        raise Unauthenticated(detail="cron secret 없음")
    if not hmac.compare_digest(x_cron_secret.encode(), expected.encode()):
        raise Unauthenticated(detail="cron secret 불일치")
