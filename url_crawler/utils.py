"""url_crawler.utils: small URL helpers shared by the CLI, config and frontier."""

from __future__ import annotations

from typing import Sequence
from urllib.parse import urlsplit, urlunsplit

__all__: Sequence[str] = ("coerce_seed_url", "normalize_url", "is_crawlable_url", "host_of")


def coerce_seed_url(text: str) -> str:
    """Prefix ``https://`` when the user typed no scheme at all."""
    url = text.strip()
    if "http" not in url:
        url = "https://" + url
    return url


def normalize_url(url: str) -> str:
    """Frontier key: lowercased scheme, authority and path; query and fragment dropped."""
    parts = urlsplit(url.strip())
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", "", "")).lower()


def is_crawlable_url(url: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme.lower() in ("http", "https") and bool(parts.netloc)


def host_of(url: str) -> str:
    return urlsplit(url).netloc.lower()
