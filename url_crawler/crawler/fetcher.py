"""
Fetcher module: issues GET requests, classifies responses and applies the
per-host politeness delay and the optional retry/backoff for transport faults.
"""
from __future__ import annotations

import asyncio
import time
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Dict, Optional

from aiohttp import ClientError, ClientSession

from url_crawler.config import CrawlerConfig
from url_crawler.crawler.models import Failed, FetchOutcome, FetchResult, Rejected
from url_crawler.logger import get_logger
from url_crawler.utils import host_of

__all__ = ("Fetcher", "HostRateLimiter", "parse_last_modified")

logger = get_logger("fetcher")


class HostRateLimiter:
    """Keeps at least *interval* seconds between request starts to the same host."""

    def __init__(self, interval: float) -> None:
        self.interval = interval
        self._locks: Dict[str, asyncio.Lock] = {}
        self._last_request_ts: Dict[str, float] = {}

    async def wait(self, url: str) -> None:
        if self.interval <= 0:
            return
        host = host_of(url)
        lock = self._locks.setdefault(host, asyncio.Lock())
        async with lock:
            last = self._last_request_ts.get(host)
            if last is not None:
                wait = self.interval - (time.monotonic() - last)
                if wait > 0:
                    await asyncio.sleep(wait)
            self._last_request_ts[host] = time.monotonic()


def parse_last_modified(value: Optional[str]) -> Optional[datetime]:
    """Parse an HTTP date; anything unparseable counts as absent."""
    if not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        logger.debug("Ignoring malformed Last-Modified header: %r", value)
        return None


class Fetcher:
    """Fetches one URL and returns :class:`FetchResult`, :class:`Rejected` or :class:`Failed`."""

    def __init__(
        self,
        session: ClientSession,
        config: CrawlerConfig,
        limiter: Optional[HostRateLimiter] = None,
    ) -> None:
        self.session = session
        self.config = config
        self.limiter = limiter or HostRateLimiter(config.request_delay)

    async def fetch(self, url: str) -> FetchOutcome:
        """
        Fetch *url* once, retrying only transport faults up to ``retry_times``.

        Rejections (non-2xx status, non-HTML type) are final and never retried.
        """
        attempts = 0
        while True:
            await self.limiter.wait(url)
            try:
                return await self._request(url)
            except (ClientError, asyncio.TimeoutError, OSError) as exc:
                attempts += 1
                error = str(exc) or type(exc).__name__
                if attempts > self.config.retry_times:
                    logger.warning("Failed %s: %s", url, error)
                    return Failed(url=url, error=error)
                # exponential backoff, cap at 60s
                backoff = min(60.0, self.config.retry_backoff * 2 ** (attempts - 1))
                logger.debug(
                    "Retry %d/%d for %s after %.2f s", attempts, self.config.retry_times, url, backoff
                )
                await asyncio.sleep(backoff)

    async def _request(self, url: str) -> FetchOutcome:
        async with self.session.get(url) as resp:
            status = resp.status
            if not 200 <= status < 300:
                return Rejected(url=url, reason=f"HTTP {status}", status_code=status)
            mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
            if "html" not in mime:
                return Rejected(url=url, reason=f"content type {mime or 'missing'}", status_code=status)
            body = await resp.text(errors="replace")
            return FetchResult(
                url=url,
                body=body,
                status_code=status,
                content_type=mime,
                last_modified=parse_last_modified(resp.headers.get("Last-Modified")),
            )
