"""Exception types raised by UrlCrawler."""
from __future__ import annotations

__all__ = ("CrawlerError", "ConfigError", "PersistenceError")


class CrawlerError(Exception):
    """Base class for crawler errors."""


class ConfigError(CrawlerError):
    """Configuration cannot be used to start a crawl."""


class PersistenceError(CrawlerError):
    """A page and its content could not be committed; nothing was written."""

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"could not persist {url}: {cause}")
        self.url = url
        self.cause = cause
