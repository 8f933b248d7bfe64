"""
월간 사용량 원장

check-and-increment는 DB 저장 프로시저 increment_usage_with_limit 한 번으로 처리한다.
프로시저는 단일 upsert 문(ON CONFLICT ... DO UPDATE ... WHERE count < limit RETURNING)이라
동시 요청이 한도를 넘겨 증가시킬 수 없다. 애플리케이션에서 읽고-비교하고-쓰지 않는다.
"""

from datetime import datetime, timezone

from pydantic import BaseModel

from app.core.exceptions import RateLimited, ServiceUnavailable
from app.core.logging import get_logger
from app.domain.access.schemas import Identity
from app.infra.supabase.client import SupabaseError, rpc

logger = get_logger(__name__)

INCREMENT_RPC = "increment_usage_with_limit"

RESUME_ANALYSIS = "resume_analysis"


class QuotaDecision(BaseModel):
    """check-and-increment 결과"""

    allowed: bool
    count: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.count)


def current_period(now: datetime | None = None) -> str:
    """UTC 기준 "YYYY-MM" 기간 키"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m")


def _parse_result(data) -> tuple[bool, int]:
    row = data[0] if isinstance(data, list) and data else data
    if not isinstance(row, dict) or "success" not in row:
        raise ServiceUnavailable(detail=f"{INCREMENT_RPC} 응답 형식 오류: {data!r}")
    try:
        count = int(row.get("usage_count") or 0)
    except (TypeError, ValueError) as e:
        raise ServiceUnavailable(detail=f"{INCREMENT_RPC} usage_count 오류: {row!r}") from e
    return bool(row["success"]), count


async def check_and_increment(
    identity: Identity,
    feature: str,
    period: str,
    limit: int,
) -> QuotaDecision:
    """한도 내이면 원자적으로 1 증가시키고 결과 반환

    원장에 접근할 수 없으면 요청 전체를 실패시킨다 (fail-closed).
    """
    try:
        data = await rpc(
            INCREMENT_RPC,
            {
                "p_user_id": identity.id,
                "p_feature_type": feature,
                "p_month": period,
                "p_limit": limit,
            },
        )
    except SupabaseError as e:
        raise ServiceUnavailable(detail=str(e)) from e

    allowed, count = _parse_result(data)
    logger.info(
        "사용량 확인 feature=%s period=%s allowed=%s count=%d limit=%d",
        feature,
        period,
        allowed,
        count,
        limit,
    )
    return QuotaDecision(allowed=allowed, count=count, limit=limit)


async def consume(
    identity: Identity,
    feature: str,
    limit: int,
    period: str | None = None,
) -> QuotaDecision:
    """check_and_increment 후 거부되면 RateLimited"""
    decision = await check_and_increment(identity, feature, period or current_period(), limit)
    if not decision.allowed:
        raise RateLimited(detail=f"feature={feature} count={decision.count} limit={limit}")
    return decision
