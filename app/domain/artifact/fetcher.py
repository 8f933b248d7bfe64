from app.core.config import settings
from app.core.exceptions import NotFound
from app.core.logging import get_logger
from app.infra.storage.client import download
from app.infra.supabase.client import SupabaseError, create_signed_url

logger = get_logger(__name__)


async def fetch_artifact(path: str, bucket: str | None = None) -> bytes:
    """
    소유권 검증이 끝난 스토리지 경로의 PDF 바이트 반환

    서명 URL(기본 300초) 발급 후 다운로드한다.
    서명 URL 발급 실패는 객체가 없는 것으로 간주한다.
    """
    bucket = bucket or settings.resume_bucket

    try:
        signed_url = await create_signed_url(bucket, path, settings.signed_url_ttl_seconds)
    except SupabaseError as e:
        raise NotFound(detail=str(e), message="파일을 찾을 수 없습니다") from e

    content = await download(signed_url, max_bytes=settings.max_pdf_bytes)
    logger.info("파일 조회 완료 bucket=%s bytes=%d", bucket, len(content))
    return content
