"""
HTTP fetcher for component files.

Wraps a single httpx.AsyncClient shared by every package of an install, so
connections are pooled across the whole dependency tree.
"""

import logging
from typing import Optional

import httpx

from hashthepass.hashthepass_config import InstallerConfig
from hashthepass.hashthepass_exceptions import FetchError
from hashthepass.hashthepass_logger import HashThePassLogger


class ComponentFetcher:
    """
    Fetches raw text files over HTTP.

    Use as an async context manager, or call aclose() when done. A client
    passed in by the caller is never closed by the fetcher.
    """

    def __init__(
        self,
        config: Optional[InstallerConfig] = None,
        logger: Optional[HashThePassLogger] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            config: Installer configuration (timeout, connection limit)
            logger: Logger for progress and error messages
            client: An existing client to reuse instead of creating one
        """
        self.config = config or InstallerConfig()
        self.logger = logger or HashThePassLogger()
        self._owns_client = client is None
        if client is None:
            limits = httpx.Limits(max_connections=self.config.max_connections)
            client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout),
                limits=limits,
                follow_redirects=True,
            )
        self.client = client

    async def fetch_text(self, url: str) -> str:
        """
        GET ``url`` and return the body as text.

        Raises:
            FetchError: On a non-2xx status or a transport error
        """
        self.logger.log(f"fetching {url}", logging.DEBUG)
        try:
            response = await self.client.get(url)
        except httpx.HTTPError as e:
            raise FetchError(url, reason=str(e) or type(e).__name__) from e

        if not response.is_success:
            raise FetchError(url, status_code=response.status_code, reason=f"HTTP {response.status_code}")

        self.logger.log(f"got {url}", logging.DEBUG)
        return response.text

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "ComponentFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
