"""Content hierarchy extraction.

Turns a page's markup into an ordered list of :class:`ContentNode` values:

* inline styling wrappers (``<b>``, ``<em>``, ``<sup>``...) are unwrapped
  first, on a copy of the parsed tree, so ``<p>foo <b>bar</b></p>`` reads
  as ``<p>foo bar</p>``;
* only allow-listed structural tags with non-blank text survive; anything
  else is dropped together with its whole subtree;
* survivors are numbered 1.. among their surviving siblings, which gives
  the dotted ``sequence_path`` and the 0-based ``level``.

A node's text is the full flattened text of the element, so parents repeat
the text of their children.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Tuple

from bs4 import BeautifulSoup
from bs4.element import (
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Tag,
)

from url_crawler.crawler.models import ContentNode
from url_crawler.parser.link_extractor import Markup, as_soup, extract_links

__all__ = (
    "CONTENT_TAGS",
    "STYLING_TAGS",
    "ExtractedPage",
    "extract_content",
    "extract_page",
    "extract_title",
    "flat_text",
    "inline_styling",
)

STYLING_TAGS: FrozenSet[str] = frozenset(
    ("b", "i", "strong", "em", "u", "s", "strike", "small", "mark", "del", "ins", "sup", "sub")
)

CONTENT_TAGS: FrozenSet[str] = frozenset(
    (
        "div", "span", "p", "h1", "h2", "h3", "h4", "h5", "h6",
        "a", "td", "th", "li", "ul", "ol", "table", "tr", "section",
        "article", "header", "footer", "nav", "main", "aside", "figure",
        "figcaption", "blockquote", "code", "pre",
    )
)

# markup-level strings that are not part of an element's text
_NON_TEXT = (Comment, Declaration, Doctype, ProcessingInstruction)

# (element, sequence path, level, flattened text)
_Pending = Tuple[Tag, str, int, str]


@dataclass(slots=True)
class ExtractedPage:
    """Everything the crawl loop needs from one HTML body."""

    title: Optional[str]
    links: List[str] = field(default_factory=list)
    nodes: List[ContentNode] = field(default_factory=list)


def _tag_name(tag: Tag) -> str:
    return (tag.name or "").lower()


def flat_text(element: Tag) -> str:
    """All descendant text, including <script>, <style> and <template> contents."""
    return "".join(
        s for s in element.descendants
        if isinstance(s, NavigableString) and not isinstance(s, _NON_TEXT)
    )


def inline_styling(markup: Markup) -> BeautifulSoup:
    """Return a copy of the document with styling tags replaced by their contents."""
    soup = copy.copy(as_soup(markup))
    for tag in soup.find_all(lambda t: _tag_name(t) in STYLING_TAGS):
        tag.unwrap()
    return soup


def _content_children(element: Tag, parent_path: str, level: int) -> List[_Pending]:
    kept: List[_Pending] = []
    for child in element.children:
        if not isinstance(child, Tag) or _tag_name(child) not in CONTENT_TAGS:
            continue
        text = flat_text(child).strip()
        if not text:
            continue
        index = len(kept) + 1
        path = f"{parent_path}.{index}" if parent_path else str(index)
        kept.append((child, path, level, text))
    return kept


def extract_content(markup: Markup) -> List[ContentNode]:
    """Walk ``<body>`` and return its content nodes in document order.

    A page without ``<body>`` yields no nodes. The walk keeps its own stack,
    so nesting depth is not limited by the interpreter's recursion limit.
    """
    soup = inline_styling(markup)
    body = soup.find(lambda t: _tag_name(t) == "body")
    if body is None:
        return []

    nodes: List[ContentNode] = []
    stack = _content_children(body, "", 0)
    stack.reverse()
    while stack:
        element, path, level, text = stack.pop()
        nodes.append(
            ContentNode(tag_type=_tag_name(element), sequence_path=path, level=level, text=text)
        )
        children = _content_children(element, path, level + 1)
        children.reverse()
        stack.extend(children)
    return nodes


def extract_title(markup: Markup) -> Optional[str]:
    soup = as_soup(markup)
    title = soup.find("title")
    if title is None:
        return None
    return title.get_text().strip() or None


def extract_page(markup: Markup, base_url: str) -> ExtractedPage:
    """Parse *markup* once and return its title, outbound links and content nodes."""
    soup = as_soup(markup)
    return ExtractedPage(
        title=extract_title(soup),
        links=extract_links(soup, base_url),
        nodes=extract_content(soup),
    )
