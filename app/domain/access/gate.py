"""
요청 게이트: Authorization 헤더에서 Bearer 토큰을 꺼내 사용자로 교환

본문 파싱이나 다른 I/O보다 먼저 실행된다.
"""

from app.core.exceptions import InvalidInput, Unauthenticated
from app.core.logging import get_logger
from app.domain.access.schemas import Identity
from app.infra.supabase.client import SupabaseError, get_auth_user

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str:
    """Authorization 헤더 값에서 토큰 추출

    헤더가 없으면 401, "Bearer " 접두사가 없으면 400.
    """
    if not authorization:
        raise Unauthenticated(detail="Authorization 헤더 없음")
    if not authorization.startswith(BEARER_PREFIX):
        raise InvalidInput(
            detail="Bearer 접두사 없음",
            message="Authorization 헤더 형식이 올바르지 않습니다",
        )

    token = authorization[len(BEARER_PREFIX) :].strip()
    if not token:
        raise Unauthenticated(detail="빈 토큰")
    return token


async def authenticate(authorization: str | None) -> Identity:
    """헤더를 검증된 Identity로 교환"""
    token = extract_bearer_token(authorization)

    try:
        user = await get_auth_user(token)
    except SupabaseError as e:
        raise Unauthenticated(detail=f"인증 서비스 오류: {e}") from e

    if user is None or not getattr(user, "id", None):
        raise Unauthenticated(detail="유효하지 않은 토큰")

    return Identity(id=str(user.id), email=getattr(user, "email", None))
