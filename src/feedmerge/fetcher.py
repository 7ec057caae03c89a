"""Fetching raw feed bytes over HTTP, with an expiring cache in front."""

import asyncio
import logging
from typing import Protocol

import httpx

from feedmerge.cache import ExpiringCache
from feedmerge.errors import NetworkError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15  # seconds
USER_AGENT = "feedmerge/0.1 (RSS/Atom category aggregator)"


class Fetcher(Protocol):
    async def fetch(self, url: str) -> bytes:
        """Return the body at ``url`` or raise NetworkError."""
        ...


class HttpFetcher:
    """Fetch URLs with a shared ``httpx.AsyncClient``."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, client: httpx.AsyncClient | None = None):
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )

    async def fetch(self, url: str) -> bytes:
        logger.debug("Fetching %s", url)
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise NetworkError(url, str(exc) or type(exc).__name__) from exc
        return resp.content

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


class CachingFetcher:
    """A Fetcher whose results are memoized per URL in an ExpiringCache.

    Expiry and stale fallback follow ExpiringCache. Each upstream call is
    bounded by ``timeout`` seconds; running out of time counts as a
    NetworkError, so a stale value can still be served.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        cache: ExpiringCache[str, bytes],
        timeout: float | None = DEFAULT_TIMEOUT,
    ):
        self.fetcher = fetcher
        self.cache = cache
        self.timeout = timeout

    async def _fetch_upstream(self, url: str) -> bytes:
        try:
            return await asyncio.wait_for(self.fetcher.fetch(url), self.timeout)
        except TimeoutError as exc:
            raise NetworkError(url, f"timed out after {self.timeout}s") from exc

    async def fetch(self, url: str) -> bytes:
        try:
            return await self.cache.get_or_compute(url, lambda: self._fetch_upstream(url))
        except Exception as exc:
            # Waiters on one failed attempt share a single exception object.
            note = f"While fetching {url} through the cache"
            if note not in getattr(exc, "__notes__", ()):
                exc.add_note(note)
            raise

    get = fetch
