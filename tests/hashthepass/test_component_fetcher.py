"""
Tests for the HTTP fetcher.
"""

import httpx
import pytest

from hashthepass.component_installer import ComponentFetcher
from hashthepass.hashthepass_config import InstallerConfig
from hashthepass.hashthepass_exceptions import FetchError
from tests.test_utils import RAW_BASE_URL, FakeRawHost

pytest_plugins = ("pytest_asyncio",)


class TestComponentFetcher:
    """Tests for ComponentFetcher."""

    @pytest.fixture
    def host(self):
        return FakeRawHost(
            {
                "component/dialog/master/index.js": "var dialog;",
                "component/dialog/master/gone.js": 410,
                "component/dialog/master/down.js": httpx.ReadTimeout("timed out"),
            }
        )

    @pytest.mark.asyncio
    async def test_fetch_text(self, host):
        """Test that a 200 body is returned verbatim."""
        async with host.client() as client:
            fetcher = ComponentFetcher(client=client)
            text = await fetcher.fetch_text(f"{RAW_BASE_URL}/component/dialog/master/index.js")

        assert text == "var dialog;"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("file,status", [("gone.js", 410), ("missing.js", 404)])
    async def test_error_status(self, host, file, status):
        """Test that non-success statuses raise FetchError."""
        url = f"{RAW_BASE_URL}/component/dialog/master/{file}"
        async with host.client() as client:
            fetcher = ComponentFetcher(client=client)
            with pytest.raises(FetchError) as exc_info:
                await fetcher.fetch_text(url)

        assert exc_info.value.status_code == status
        assert exc_info.value.url == url
        assert str(exc_info.value).startswith(f"failed to fetch {url}")

    @pytest.mark.asyncio
    async def test_transport_error(self, host):
        """Test that transport errors raise FetchError."""
        async with host.client() as client:
            fetcher = ComponentFetcher(client=client)
            with pytest.raises(FetchError, match="timed out"):
                await fetcher.fetch_text(f"{RAW_BASE_URL}/component/dialog/master/down.js")

    @pytest.mark.asyncio
    async def test_borrowed_client_left_open(self, host):
        """Test that a client passed in is not closed by the fetcher."""
        async with host.client() as client:
            async with ComponentFetcher(client=client):
                pass
            assert not client.is_closed

    @pytest.mark.asyncio
    async def test_own_client_closed(self):
        """Test that a client created by the fetcher is closed with it."""
        async with ComponentFetcher(InstallerConfig(timeout=5, max_connections=2)) as fetcher:
            client = fetcher.client
        assert client.is_closed
