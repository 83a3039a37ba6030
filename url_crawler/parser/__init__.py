"""url_crawler.parser: link and content extraction from HTML."""

from url_crawler.parser.content_extractor import (
    ExtractedPage,
    extract_content,
    extract_page,
    extract_title,
    inline_styling,
)
from url_crawler.parser.link_extractor import extract_links

__all__ = [
    "ExtractedPage",
    "extract_content",
    "extract_links",
    "extract_page",
    "extract_title",
    "inline_styling",
]
