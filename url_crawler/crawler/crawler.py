from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Set

from aiohttp import ClientSession, ClientTimeout

from url_crawler.config import CrawlerConfig
from url_crawler.crawler.fetcher import Fetcher
from url_crawler.crawler.frontier import Frontier
from url_crawler.crawler.models import Failed, FetchResult, FrontierEntry, PageRecord
from url_crawler.errors import ConfigError, PersistenceError
from url_crawler.logger import get_logger
from url_crawler.parser.content_extractor import extract_page
from url_crawler.storage.persister import Persister

__all__ = ("CrawlStats", "AsyncCrawler")

logger = get_logger("crawler")


@dataclass(slots=True)
class CrawlStats:
    """Counters for one crawl run."""
    persisted: int = 0
    rejected: int = 0
    failed: int = 0
    persistence_errors: int = 0
    links_queued: int = 0
    page_ids: List[int] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"persisted={self.persisted} rejected={self.rejected} failed={self.failed} "
            f"persistence_errors={self.persistence_errors} queued={self.links_queued}"
        )


class AsyncCrawler:
    """Breadth-first crawler: fetch, extract, persist, expand.

    Up to ``config.concurrency`` pages are processed at once. The page budget
    counts committed pages; once committed plus in-flight pages reach it no
    new entries are dequeued and the in-flight ones are allowed to finish.
    """

    def __init__(
        self,
        config: CrawlerConfig,
        persister: Persister,
        frontier: Optional[Frontier] = None,
    ) -> None:
        if config.seed_url is None:
            raise ConfigError("seed_url is required to start a crawl")
        self.config = config
        self.persister = persister
        self.frontier = frontier if frontier is not None else Frontier()
        self.stats = CrawlStats()
        self.session: Optional[ClientSession] = None
        self.fetcher: Optional[Fetcher] = None

    async def __aenter__(self) -> AsyncCrawler:
        timeout = ClientTimeout(total=self.config.timeout)
        self.session = ClientSession(
            timeout=timeout,
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        self.fetcher = Fetcher(self.session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> CrawlStats:
        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        seed = str(self.config.seed_url)
        logger.info("Web crawler started: %s", seed)
        start = time.monotonic()
        self.frontier.push(seed, 0)

        pending: Set[asyncio.Task[None]] = set()
        try:
            while True:
                while self._may_dequeue(len(pending)):
                    entry = self.frontier.pop()
                    if entry is None:
                        break
                    pending.add(asyncio.create_task(self._process(entry)))
                if not pending:
                    break
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    task.result()
        finally:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        duration = time.monotonic() - start
        logger.info("Crawling completed in %.2f s: %s", duration, self.stats.summary())
        return self.stats

    def _may_dequeue(self, in_flight: int) -> bool:
        return (
            in_flight < self.config.concurrency
            and self.stats.persisted + in_flight < self.config.max_pages
        )

    async def _process(self, entry: FrontierEntry) -> None:
        assert self.fetcher is not None
        logger.info("Crawling: %s", entry.url)
        outcome = await self.fetcher.fetch(entry.url)
        if isinstance(outcome, Failed):
            self.stats.failed += 1
            return
        if not isinstance(outcome, FetchResult):
            logger.info("Skipped %s: %s", entry.url, outcome.reason)
            self.stats.rejected += 1
            return

        try:
            extracted = extract_page(outcome.body, entry.url)
        except Exception:
            logger.exception("Error parsing %s", entry.url)
            self.stats.failed += 1
            return

        page = PageRecord(
            url=entry.url,
            title=extracted.title,
            status_code=outcome.status_code,
            content_type=outcome.content_type,
            last_modified=outcome.last_modified,
            crawled_at=datetime.now(timezone.utc),
        )
        try:
            page_id = await asyncio.to_thread(self.persister.commit, page, extracted.nodes)
        except PersistenceError as exc:
            logger.warning("Page not saved, continuing: %s", exc)
            self.stats.persistence_errors += 1
            return
        self.stats.persisted += 1
        self.stats.page_ids.append(page_id)

        if entry.depth < self.config.expansion_ceiling:
            for link in extracted.links:
                if self.frontier.push(link, entry.depth + 1):
                    self.stats.links_queued += 1
