"""url_crawler.crawler: frontier, fetcher and the crawl loop."""

from url_crawler.crawler.crawler import AsyncCrawler, CrawlStats
from url_crawler.crawler.fetcher import Fetcher, HostRateLimiter
from url_crawler.crawler.frontier import Frontier
from url_crawler.crawler.models import (
    ContentNode,
    Failed,
    FetchResult,
    FrontierEntry,
    PageRecord,
    Rejected,
)

__all__ = [
    "AsyncCrawler",
    "ContentNode",
    "CrawlStats",
    "Failed",
    "FetchResult",
    "Fetcher",
    "Frontier",
    "FrontierEntry",
    "HostRateLimiter",
    "PageRecord",
    "Rejected",
]
