"""
HTTP Client Module - streaming page fetcher with proxy support.

This module provides the fetch capability used by the search orchestrator:
- Streams the response body into an Adaptive Transfer Buffer
- Enforces one fixed timeout for the whole transfer
- Supports HTTP/HTTPS proxy configuration
- Maps every failure onto the FetchError taxonomy

Nothing here retries: a failed fetch becomes a failed search.

Usage:
    from recipe_finder.infrastructure.http.client import HttpFetcher, configure_proxy

    # Configure proxy (optional)
    configure_proxy("http://proxy:8080")

    async with HttpFetcher() as fetcher:
        page = await fetcher.fetch("https://www.budgetbytes.com/?s=chili", label="Budget Bytes")
        html = page.text()
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any

import httpx
from typing_extensions import Self

from recipe_finder.core.exceptions import (
    ErrorContext,
    FetchError,
    FetchTimeoutError,
    HTTPStatusError,
    NetworkError,
)
from recipe_finder.infrastructure.http.transfer_buffer import MAX_TRANSFER_SIZE, TransferBuffer

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

DEFAULT_TIMEOUT = 15.0

# Global proxy configuration
_config: dict[str, Any] = {
    "http_proxy": None,
    "https_proxy": None,
}


def configure_proxy(
    http_proxy: str | None = None,
    https_proxy: str | None = None,
) -> None:
    """
    Configure HTTP/HTTPS proxy settings.

    Args:
        http_proxy: HTTP proxy URL (e.g., "http://proxy:8080")
        https_proxy: HTTPS proxy URL (e.g., "https://proxy:8080")

    Also reads from environment variables:
        - HTTP_PROXY / http_proxy
        - HTTPS_PROXY / https_proxy
    """
    # Priority: explicit args > environment variables
    _config["http_proxy"] = http_proxy or os.environ.get("HTTP_PROXY") or os.environ.get("http_proxy")
    _config["https_proxy"] = https_proxy or os.environ.get("HTTPS_PROXY") or os.environ.get("https_proxy")

    if _config["http_proxy"] or _config["https_proxy"]:
        logger.info(f"Proxy configured: HTTP={_config['http_proxy']}, HTTPS={_config['https_proxy']}")


def get_proxy_status() -> dict[str, str | None]:
    """Get current proxy configuration."""
    return {
        "http_proxy": _config["http_proxy"],
        "https_proxy": _config["https_proxy"],
    }


def _proxy_for(url: str) -> str | None:
    if url.startswith("https://"):
        return _config["https_proxy"] or _config["http_proxy"]
    return _config["http_proxy"]


def _proxy_mounts() -> dict[str, str]:
    """Proxy URL per scheme prefix, for schemes that have one."""
    mounts: dict[str, str] = {}
    for scheme in ("http://", "https://"):
        proxy = _proxy_for(scheme)
        if proxy:
            mounts[scheme] = proxy
    return mounts


@dataclass(slots=True)
class FetchedPage:
    """A downloaded page: the filled transfer buffer plus response metadata."""

    url: str
    status_code: int
    charset: str | None
    buffer: TransferBuffer

    @property
    def content(self) -> bytes:
        return self.buffer.getvalue()

    def text(self) -> str:
        return self.buffer.text(self.charset or "utf-8")


class HttpFetcher:
    """
    Async page fetcher backed by one shared httpx.AsyncClient.

    Args:
        timeout: Whole-transfer timeout in seconds
        user_agent: User-Agent header
        max_size: Hard maximum response size
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        timeout: float | None = None,
        user_agent: str | None = None,
        *,
        max_size: int = MAX_TRANSFER_SIZE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
        self._user_agent = user_agent or DEFAULT_USER_AGENT
        self._max_size = max_size
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def timeout(self) -> float:
        return self._timeout

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            kwargs: dict[str, Any] = {
                "timeout": self._timeout,
                "follow_redirects": True,
                "headers": {"User-Agent": self._user_agent},
                "limits": httpx.Limits(max_connections=4, max_keepalive_connections=2),
            }
            if self._transport is not None:
                kwargs["transport"] = self._transport
            else:
                kwargs["mounts"] = {
                    scheme: httpx.AsyncHTTPTransport(proxy=proxy) for scheme, proxy in _proxy_mounts().items()
                }
            self._client = httpx.AsyncClient(**kwargs)
        return self._client

    async def fetch(
        self,
        url: str,
        *,
        timeout: float | None = None,
        label: str | None = None,
    ) -> FetchedPage:
        """
        Download a page into a fresh TransferBuffer.

        Args:
            url: Absolute URL to fetch
            timeout: Whole-transfer timeout (uses the fetcher default if None)
            label: Source name for diagnostics

        Returns:
            FetchedPage holding the filled buffer

        Raises:
            FetchTimeoutError: Transfer did not finish in time
            HTTPStatusError: Site answered with a 4xx/5xx status
            ResponseTooLargeError / InsufficientMemoryError: Buffer refused to grow
            NetworkError: Any other transport failure
        """
        request_timeout = timeout or self._timeout
        context = ErrorContext(source_name=label, url=url)
        buffer = TransferBuffer(max_size=self._max_size, label=label)
        try:
            client = self._get_client()
            async with asyncio.timeout(request_timeout):
                async with client.stream("GET", url, headers={"Referer": url}) as response:
                    if response.status_code >= 400:
                        raise HTTPStatusError(
                            response.status_code,
                            response.reason_phrase,
                            context=context,
                        )
                    async for chunk in response.aiter_bytes():
                        buffer.write(chunk)
                    return FetchedPage(
                        url=str(response.url),
                        status_code=response.status_code,
                        charset=response.charset_encoding,
                        buffer=buffer,
                    )
        except FetchError:
            logger.exception(f"Fetch failed for {url}")
            raise
        except (TimeoutError, httpx.TimeoutException) as e:
            logger.exception(f"Timeout for {url}")
            raise FetchTimeoutError(request_timeout, context=context) from e
        except httpx.RequestError as e:
            logger.exception(f"Request error for {url}: {e}")
            raise NetworkError(f"Connection failed: {e}", context=context) from e
        except Exception as e:
            logger.exception(f"Unexpected error fetching {url}: {e}")
            raise NetworkError(f"Fetch failed: {e}", context=context) from e

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()


# Initialize from environment on module load
configure_proxy()
