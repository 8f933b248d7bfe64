"""
리소스 소유권 검증

스토리지 경로는 I/O 없이 결정적으로 판단하고,
DB 리소스(플랜)는 행 조회 후 소유자 컬럼을 비교한다.
"""

from app.core.exceptions import Forbidden, InvalidInput, NotFound, ServiceUnavailable
from app.core.logging import get_logger
from app.domain.access.schemas import Identity
from app.infra.supabase.client import SupabaseError, select_one

logger = get_logger(__name__)

PDF_EXTENSION = ".pdf"


def validate_storage_path(identity: Identity, path: str) -> str:
    """
    스토리지 경로 소유권 및 형식 검증

    첫 번째 세그먼트가 사용자 id와 정확히 일치해야 하며(대소문자 구분),
    확장자는 .pdf(대소문자 무시)여야 한다.
    """
    if not path or not isinstance(path, str):
        raise InvalidInput(detail="filePath 없음", message="파일 경로가 필요합니다")

    segments = path.split("/")
    if segments[0] != identity.id:
        logger.warning("경로 소유권 불일치 path_owner=%s", segments[0])
        raise Forbidden(detail=f"path owner mismatch: {segments[0]}")

    if any(segment == ".." for segment in segments):
        raise Forbidden(detail="상위 경로 참조 포함")

    if len(segments) < 2 or not segments[-1]:
        raise InvalidInput(detail=f"파일명 없음: {path}", message="파일 경로가 올바르지 않습니다")

    if not path.lower().endswith(PDF_EXTENSION):
        raise InvalidInput(detail=f"확장자 오류: {path}", message="PDF 파일만 분석할 수 있습니다")

    return path


async def ensure_plan_owner(identity: Identity, plan_id: str, columns: str = "*") -> dict:
    """플랜 행을 조회해 소유자를 확인한 뒤 행 반환"""
    try:
        plan = await select_one("ninety_day_plans", {"id": plan_id}, columns=columns)
    except SupabaseError as e:
        raise ServiceUnavailable(detail=str(e)) from e

    if plan is None:
        raise NotFound(detail=f"plan={plan_id}", message="플랜을 찾을 수 없습니다")

    if plan.get("user_id") != identity.id:
        logger.warning("플랜 소유권 불일치 plan_id=%s", plan_id)
        raise Forbidden(detail=f"plan owner mismatch: {plan_id}")

    return plan
