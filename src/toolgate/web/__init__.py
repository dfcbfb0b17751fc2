"""Web primitives: page fetch-and-strip and browser launch."""

from toolgate.web.browser import SearchEngine, build_search_url, open_in_browser
from toolgate.web.fetch import (
    FETCH_CONTENT_PREFIX,
    fetch_page_excerpt,
    fetch_page_text,
    strip_html_to_text,
    truncate_text,
)

__all__ = [
    "FETCH_CONTENT_PREFIX",
    "SearchEngine",
    "build_search_url",
    "fetch_page_excerpt",
    "fetch_page_text",
    "open_in_browser",
    "strip_html_to_text",
    "truncate_text",
]
