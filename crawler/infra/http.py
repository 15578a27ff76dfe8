"""
Async HTTP fetching utilities with polite defaults (shared User-Agent, per-call timeouts).
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "AdvisorCuration/1.0 (RSS Reader)"


class FetchError(RuntimeError):
    """Raised when a page or feed cannot be retrieved."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class HttpFetcher:
    """
    Thin wrapper over httpx.AsyncClient. Every call carries its own timeout so a
    single slow host cannot stall the callers gathering on it.
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 15,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        headers: Dict[str, str] = {
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.8",
        }
        self.client = httpx.AsyncClient(
            headers=headers,
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> "HttpFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def get(self, url: str, timeout: Optional[float] = None) -> httpx.Response:
        try:
            response = await self.client.get(url, timeout=timeout or self.timeout)
        except httpx.TimeoutException as exc:
            raise FetchError(url, f"Timed out fetching {url}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(url, f"Request failed for {url}: {exc}") from exc
        if response.status_code >= 400:
            raise FetchError(url, f"HTTP {response.status_code} for {url}", status_code=response.status_code)
        return response

    async def get_text(self, url: str, timeout: Optional[float] = None) -> str:
        response = await self.get(url, timeout=timeout)
        return response.text

    async def head(self, url: str, timeout: Optional[float] = None) -> Optional[httpx.Response]:
        """
        Lightweight existence check. Returns None instead of raising when the
        resource is missing or the host does not answer in time.
        """
        try:
            response = await self.client.head(url, timeout=timeout or self.timeout)
        except httpx.HTTPError as exc:
            logger.debug("HEAD %s failed: %s", url, exc)
            return None
        if response.status_code >= 400:
            logger.debug("HEAD %s returned %s", url, response.status_code)
            return None
        return response
