"""
Breadth-first URL frontier: FIFO work queue plus the set of seen URL keys.
"""
from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Optional, Set

from url_crawler.crawler.models import FrontierEntry
from url_crawler.logger import get_logger
from url_crawler.utils import normalize_url

__all__ = ("Frontier",)

logger = get_logger("frontier")


class Frontier:
    """FIFO queue of :class:`FrontierEntry` with test-and-insert deduplication.

    Deduplication uses :func:`normalize_url` keys, while the entry keeps the
    URL exactly as it was discovered.
    """

    def __init__(self) -> None:
        self._queue: Deque[FrontierEntry] = deque()
        self._seen: Set[str] = set()
        self._lock = threading.Lock()

    def mark_seen(self, key: str) -> bool:
        """Insert *key*; return True only if it was not seen before."""
        with self._lock:
            if key in self._seen:
                return False
            self._seen.add(key)
            return True

    def push(self, url: str, depth: int) -> bool:
        """Enqueue *url* at *depth* unless its normalized key was already seen."""
        if not self.mark_seen(normalize_url(url)):
            return False
        self._queue.append(FrontierEntry(url=url, depth=depth))
        logger.debug("Queued (depth %d): %s", depth, url)
        return True

    def pop(self) -> Optional[FrontierEntry]:
        try:
            return self._queue.popleft()
        except IndexError:
            return None

    @property
    def seen_count(self) -> int:
        return len(self._seen)

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)
