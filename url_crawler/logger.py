"""Logging setup for the crawler.

All records go through the ``UrlCrawler`` logger. Components log through
children of it (``UrlCrawler.fetcher``, ``UrlCrawler.storage`` ...) obtained
with :func:`get_logger`, so one :func:`configure` call from the CLI decides
the level and destinations for the whole crawl::

    from url_crawler.logger import get_logger
    logger = get_logger("fetcher")
    logger.warning("Failed %s: %s", url, error)
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
ROOT_NAME: Final[str] = "UrlCrawler"

# crawl logs grow with the page budget; keep a few rotated files
_MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024
_LOG_BACKUPS: Final[int] = 3

LevelT = Union[int, str]


def _build_handlers(log_format: str, log_file: Optional[Union[str, Path]]) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=_MAX_LOG_BYTES,
                backupCount=_LOG_BACKUPS,
                encoding="utf-8",
            )
        )
    formatter = logging.Formatter(log_format)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: LevelT = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Replace the crawler's handlers: stdout, plus a rotating *log_file* if given.

    Previous handlers are closed, so calling this twice never duplicates
    output or leaks file descriptors.
    """
    root = logging.getLogger(ROOT_NAME)
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in _build_handlers(log_format, log_file):
        root.addHandler(handler)
    root.propagate = False
    return root


def get_logger(component: str) -> logging.Logger:
    """Child of the crawler logger for one component (``"frontier"``, ``"storage"`` ...)."""
    return logging.getLogger(f"{ROOT_NAME}.{component}")


def init_logging(level: LevelT = "INFO", log_file: Union[str, Path, None] = None) -> logging.Logger:
    return configure(level=level, log_file=log_file)


logger: logging.Logger = init_logging()

__all__ = ["DEFAULT_FORMAT", "ROOT_NAME", "configure", "get_logger", "init_logging", "logger"]
