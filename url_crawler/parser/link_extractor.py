"""
Outbound link extraction for UrlCrawler.
"""
from __future__ import annotations

from typing import List, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from url_crawler.utils import is_crawlable_url

__all__ = ("as_soup", "extract_links")

Markup = Union[str, bytes, BeautifulSoup]


def as_soup(markup: Markup) -> BeautifulSoup:
    """Parse *markup* with the stdlib backend unless it is already a soup."""
    if isinstance(markup, BeautifulSoup):
        return markup
    return BeautifulSoup(markup, "html.parser")


def extract_links(markup: Markup, base_url: str) -> List[str]:
    """
    Return absolute http(s) targets of every ``<a href>`` in document order.

    Relative hrefs are resolved against *base_url*; other schemes
    (``mailto:``, ``javascript:``, ``ftp:``...) are dropped. Duplicates are kept.
    """
    soup = as_soup(markup)
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw:
            continue
        try:
            absolute = urljoin(base_url, raw)
        except ValueError:
            continue
        if is_crawlable_url(absolute):
            links.append(absolute)
    return links
