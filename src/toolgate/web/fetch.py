"""
Fetch a web page and reduce it to bounded plain text.

Shared by page-excerpt enrichment in web search, the ``fetch_url`` tool and
the page pre-fetch of ``open_browser_search``.
"""

import logging

import httpx
from bs4 import BeautifulSoup

from toolgate.exceptions import InvalidArgumentError, NetworkError, ToolError

logger = logging.getLogger(__name__)

MAX_BODY_BYTES = 512 * 1024
EXCERPT_MAX_CHARS = 2200
EXCERPT_TIMEOUT = 8.0
ELLIPSIS = "…"

FETCH_CONTENT_PREFIX = (
    "Page content (use this as context to summarize or answer; user did not paste this):\n\n"
)

# Elements whose text is never page content
_NON_CONTENT_TAGS = ["script", "style", "noscript", "template"]


def strip_html_to_text(html: str) -> str:
    """Drop markup and collapse all whitespace runs to single spaces."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_NON_CONTENT_TAGS):
        tag.decompose()
    text = soup.get_text(separator=" ")
    return " ".join(text.split())


def truncate_text(text: str, max_chars: int) -> str:
    """Cut to ``max_chars`` characters, marking the cut with an ellipsis."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars].strip() + ELLIPSIS


def fetch_page_text(
    client: httpx.Client,
    url: str,
    max_chars: int,
    timeout: float = EXCERPT_TIMEOUT,
    max_bytes: int = MAX_BODY_BYTES,
) -> str:
    """
    Fetch a URL and return its text content.

    Args:
        client: HTTP client (carries headers such as User-Agent)
        url: Absolute http(s) URL
        max_chars: Character budget for the returned text
        timeout: Request timeout in seconds
        max_bytes: Body size ceiling; larger responses are rejected

    Returns:
        Collapsed plain text, truncated with an ellipsis when over budget

    Raises:
        InvalidArgumentError: If the URL is not http or https
        NetworkError: On transport failure, non-2xx status, oversized or empty body
    """
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        raise InvalidArgumentError("url must start with http:// or https://")

    body = bytearray()
    try:
        with client.stream("GET", url, timeout=timeout, follow_redirects=True) as response:
            if not response.is_success:
                raise NetworkError(f"HTTP {response.status_code} from {url}")
            for chunk in response.iter_bytes():
                body.extend(chunk)
                if len(body) > max_bytes:
                    raise NetworkError(f"response larger than {max_bytes} bytes")
    except httpx.HTTPError as e:
        raise NetworkError(str(e) or type(e).__name__) from e

    text = strip_html_to_text(body.decode("utf-8", errors="replace"))
    if not text:
        raise NetworkError("fetch failed or returned no text")
    return truncate_text(text, max_chars)


def fetch_page_excerpt(
    client: httpx.Client,
    url: str,
    max_chars: int = EXCERPT_MAX_CHARS,
    timeout: float = EXCERPT_TIMEOUT,
    max_bytes: int = MAX_BODY_BYTES,
) -> str | None:
    """Best-effort variant of ``fetch_page_text``: None instead of an error."""
    try:
        return fetch_page_text(client, url, max_chars, timeout=timeout, max_bytes=max_bytes)
    except ToolError as e:
        logger.debug(f"Page excerpt skipped for {url}: {e}")
        return None
