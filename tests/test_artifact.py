"""스토리지 다운로드/아티팩트 조회 테스트"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from app.core.exceptions import InvalidInput, NotFound, ServiceUnavailable
from app.domain.artifact.fetcher import fetch_artifact
from app.infra.storage.client import download
from app.infra.supabase.client import SupabaseError

PDF_HEADERS = {"content-type": "application/pdf"}


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def _chunks(total: int, size: int = 1024):
    sent = 0
    while sent < total:
        step = min(size, total - sent)
        sent += step
        yield b"x" * step


class TestDownload:
    """download 함수 테스트"""

    @pytest.mark.asyncio
    async def test_success(self):
        client = _mock_client(lambda request: httpx.Response(200, headers=PDF_HEADERS, content=b"%PDF-1.4"))
        with patch("app.infra.storage.client._client", client):
            assert await download("https://storage.test/a.pdf", max_bytes=100) == b"%PDF-1.4"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [400, 404])
    async def test_missing_object(self, status_code):
        client = _mock_client(lambda request: httpx.Response(status_code))
        with patch("app.infra.storage.client._client", client):
            with pytest.raises(NotFound):
                await download("https://storage.test/a.pdf", max_bytes=100)

    @pytest.mark.asyncio
    async def test_server_error(self):
        client = _mock_client(lambda request: httpx.Response(503))
        with patch("app.infra.storage.client._client", client):
            with pytest.raises(ServiceUnavailable):
                await download("https://storage.test/a.pdf", max_bytes=100)

    @pytest.mark.asyncio
    async def test_wrong_content_type(self):
        client = _mock_client(
            lambda request: httpx.Response(200, headers={"content-type": "text/html"}, content=b"<html>")
        )
        with patch("app.infra.storage.client._client", client):
            with pytest.raises(InvalidInput):
                await download("https://storage.test/a.pdf", max_bytes=100)

    @pytest.mark.asyncio
    async def test_declared_length_over_limit(self):
        """선언된 크기가 제한을 넘으면 본문을 읽기 전에 거부"""
        client = _mock_client(lambda request: httpx.Response(200, headers=PDF_HEADERS, content=b"x" * 200))
        with patch("app.infra.storage.client._client", client):
            with pytest.raises(InvalidInput):
                await download("https://storage.test/a.pdf", max_bytes=100)

    @pytest.mark.asyncio
    async def test_undeclared_length_over_limit(self):
        """Content-Length 없이 스트리밍된 본문도 실제 크기로 제한"""
        client = _mock_client(lambda request: httpx.Response(200, headers=PDF_HEADERS, content=_chunks(5000)))
        with patch("app.infra.storage.client._client", client):
            with pytest.raises(InvalidInput):
                await download("https://storage.test/a.pdf", max_bytes=4096)

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with patch("app.infra.storage.client._client", _mock_client(handler)):
            with pytest.raises(ServiceUnavailable):
                await download("https://storage.test/a.pdf", max_bytes=100)


class TestFetchArtifact:
    """fetch_artifact 함수 테스트"""

    @pytest.mark.asyncio
    async def test_signs_then_downloads(self):
        with (
            patch(
                "app.domain.artifact.fetcher.create_signed_url",
                new_callable=AsyncMock,
                return_value="https://storage.test/signed",
            ) as mock_sign,
            patch(
                "app.domain.artifact.fetcher.download",
                new_callable=AsyncMock,
                return_value=b"%PDF",
            ) as mock_download,
        ):
            content = await fetch_artifact("user/resume.pdf")

        assert content == b"%PDF"
        mock_sign.assert_awaited_once_with("resumes", "user/resume.pdf", 300)
        assert mock_download.call_args.args[0] == "https://storage.test/signed"

    @pytest.mark.asyncio
    async def test_signing_failure_is_not_found(self):
        with patch(
            "app.domain.artifact.fetcher.create_signed_url",
            new_callable=AsyncMock,
            side_effect=SupabaseError("Object not found"),
        ):
            with pytest.raises(NotFound):
                await fetch_artifact("user/missing.pdf")
