from typing import Any

from app.core.exceptions import ServiceUnavailable
from app.core.logging import get_logger
from app.domain.access.schemas import Identity
from app.infra.supabase.client import SupabaseError, insert

logger = get_logger(__name__)


async def persist_result(table: str, identity: Identity, values: dict[str, Any]) -> dict:
    """
    작업 결과를 새 행으로 추가하고 저장된 행 반환

    LLM 호출 이후 저장 실패는 재시도 가능한 오류로 보고한다.
    이미 증가한 사용량은 되돌리지 않는다.
    """
    row = {"user_id": identity.id, **values}
    try:
        record = await insert(table, row)
    except SupabaseError as e:
        logger.error("결과 저장 실패 table=%s 사용량 미복구", table)
        raise ServiceUnavailable(
            detail=str(e),
            message="결과를 저장하지 못했습니다. 잠시 후 다시 시도해주세요",
        ) from e

    logger.info("결과 저장 완료 table=%s id=%s", table, record.get("id"))
    return record
