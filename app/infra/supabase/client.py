"""
Supabase 비동기 클라이언트

service-role 키로 생성한 단일 클라이언트를 프로세스 안에서 재사용한다.
PostgREST/Storage/Auth 예외는 모두 SupabaseError로 변환해서 올려보내고,
도메인 계층이 이를 ServiceUnavailable/Conflict 등으로 다시 해석한다.
"""

from typing import Any

import httpx
from supabase import (
    AsyncClient,
    AsyncClientOptions,
    AuthError,
    PostgrestAPIError,
    StorageException,
    acreate_client,
)

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

UNIQUE_VIOLATION = "23505"

_client: AsyncClient | None = None


class SupabaseError(Exception):
    """Supabase 호출 실패"""

    def __init__(self, message: str, code: str | None = None):
        self.code = code
        super().__init__(message)

    @property
    def is_unique_violation(self) -> bool:
        return self.code == UNIQUE_VIOLATION


async def get_client() -> AsyncClient:
    """Supabase 클라이언트 반환 (최초 호출 시 생성)"""
    global _client

    if _client is not None:
        return _client

    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise SupabaseError("SUPABASE_URL 또는 SUPABASE_SERVICE_ROLE_KEY가 설정되지 않았습니다")

    _client = await acreate_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
        options=AsyncClientOptions(
            postgrest_client_timeout=settings.supabase_timeout,
            storage_client_timeout=int(settings.supabase_timeout),
        ),
    )
    logger.info("Supabase 클라이언트 초기화 url=%s", settings.supabase_url)
    return _client


async def close_client() -> None:
    """Supabase 클라이언트 정리 - 앱 종료 및 테스트용"""
    global _client
    _client = None


def _wrap(e: Exception, operation: str) -> SupabaseError:
    code = getattr(e, "code", None)
    message = getattr(e, "message", None) or str(e)
    logger.error("Supabase 호출 실패 op=%s code=%s error=%s", operation, code, message)
    return SupabaseError(f"{operation}: {message}", code=str(code) if code else None)


async def get_auth_user(token: str) -> Any | None:
    """액세스 토큰으로 사용자 조회, 유효하지 않으면 None"""
    client = await get_client()
    try:
        response = await client.auth.get_user(token)
    except AuthError as e:
        logger.info("토큰 검증 실패 error=%s", type(e).__name__)
        return None
    except httpx.HTTPError as e:
        raise _wrap(e, "auth.get_user") from e
    return response.user if response else None


async def select_one(table: str, filters: dict[str, Any], columns: str = "*") -> dict | None:
    """조건에 맞는 첫 번째 행 반환, 없으면 None"""
    rows = await select_many(table, filters, columns=columns, limit=1)
    return rows[0] if rows else None


async def select_many(
    table: str,
    filters: dict[str, Any],
    columns: str = "*",
    order_by: str | None = None,
    limit: int | None = None,
    lte: dict[str, Any] | None = None,
) -> list[dict]:
    """조건에 맞는 행 목록 반환"""
    client = await get_client()
    query = client.table(table).select(columns)
    for column, value in filters.items():
        query = query.eq(column, value)
    for column, value in (lte or {}).items():
        query = query.lte(column, value)
    if order_by:
        query = query.order(order_by)
    if limit:
        query = query.limit(limit)

    try:
        response = await query.execute()
    except (PostgrestAPIError, httpx.HTTPError) as e:
        raise _wrap(e, f"select {table}") from e
    return response.data or []


async def insert(table: str, row: dict[str, Any]) -> dict:
    """행 추가 후 저장된 행 반환"""
    client = await get_client()
    try:
        response = await client.table(table).insert(row).execute()
    except (PostgrestAPIError, httpx.HTTPError) as e:
        raise _wrap(e, f"insert {table}") from e
    if not response.data:
        raise SupabaseError(f"insert {table}: 저장된 행이 반환되지 않았습니다")
    return response.data[0]


async def update(table: str, values: dict[str, Any], filters: dict[str, Any]) -> list[dict]:
    """조건에 맞는 행 수정 후 수정된 행 목록 반환

    조건부 전이(예: status = 'pending')에 사용하며,
    빈 목록은 조건에 맞는 행이 없었음을 의미한다.
    """
    client = await get_client()
    query = client.table(table).update(values)
    for column, value in filters.items():
        query = query.eq(column, value)
    try:
        response = await query.execute()
    except (PostgrestAPIError, httpx.HTTPError) as e:
        raise _wrap(e, f"update {table}") from e
    return response.data or []


async def upsert(table: str, row: dict[str, Any], on_conflict: str) -> dict:
    """행 upsert 후 저장된 행 반환"""
    client = await get_client()
    try:
        response = await client.table(table).upsert(row, on_conflict=on_conflict).execute()
    except (PostgrestAPIError, httpx.HTTPError) as e:
        raise _wrap(e, f"upsert {table}") from e
    return response.data[0] if response.data else row


async def upsert_many(table: str, rows: list[dict[str, Any]], on_conflict: str) -> list[dict]:
    """여러 행을 한 번에 upsert 후 저장된 행 목록 반환"""
    if not rows:
        return []
    client = await get_client()
    try:
        response = await client.table(table).upsert(rows, on_conflict=on_conflict).execute()
    except (PostgrestAPIError, httpx.HTTPError) as e:
        raise _wrap(e, f"upsert {table}") from e
    return response.data or []


async def rpc(function: str, params: dict[str, Any]) -> Any:
    """저장 프로시저 호출"""
    client = await get_client()
    try:
        response = await client.rpc(function, params).execute()
    except (PostgrestAPIError, httpx.HTTPError) as e:
        raise _wrap(e, f"rpc {function}") from e
    return response.data


async def create_signed_url(bucket: str, path: str, expires_in: int) -> str:
    """스토리지 객체에 대한 서명 URL 발급"""
    client = await get_client()
    try:
        result = await client.storage.from_(bucket).create_signed_url(path, expires_in)
    except (StorageException, httpx.HTTPError) as e:
        raise _wrap(e, f"signed_url {bucket}") from e

    signed_url = result.get("signedURL") or result.get("signedUrl")
    if not signed_url:
        raise SupabaseError(f"signed_url {bucket}: URL이 반환되지 않았습니다")
    return signed_url
