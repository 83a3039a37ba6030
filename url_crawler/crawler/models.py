"""
Data models for the UrlCrawler pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Union


@dataclass(frozen=True, slots=True)
class FrontierEntry:
    """A discovered URL waiting to be fetched, with its crawl depth."""

    url: str
    depth: int


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Accepted HTML response."""

    url: str
    body: str
    status_code: int
    content_type: str
    last_modified: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class Rejected:
    """Definitive refusal: unsuccessful status or non-HTML content."""

    url: str
    reason: str
    status_code: Optional[int] = None


@dataclass(frozen=True, slots=True)
class Failed:
    """Transport-level fault (DNS, timeout, reset...)."""

    url: str
    error: str


FetchOutcome = Union[FetchResult, Rejected, Failed]


@dataclass(frozen=True, slots=True)
class PageRecord:
    """One fetched and accepted page, as written to the ``page`` table."""

    url: str
    status_code: int
    crawled_at: datetime
    title: Optional[str] = None
    content_type: Optional[str] = None
    last_modified: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class ContentNode:
    """Flattened text of one element in the pruned content tree.

    ``sequence_path`` is a dot-delimited list of 1-based sibling indexes
    (``"2.1.3"``); ``level`` is its 0-based depth, so the path always has
    ``level + 1`` segments. ``page_id`` stays ``None`` until the page row
    is committed.
    """

    tag_type: str
    sequence_path: str
    level: int
    text: str
    page_id: Optional[int] = None

    def segments(self) -> List[int]:
        return [int(part) for part in self.sequence_path.split(".")]

    def ancestor_paths(self) -> List[str]:
        """Paths of every ancestor, root first."""
        parts = self.sequence_path.split(".")
        return [".".join(parts[:i]) for i in range(1, len(parts))]

    def parent_path(self) -> Optional[str]:
        ancestors = self.ancestor_paths()
        return ancestors[-1] if ancestors else None
