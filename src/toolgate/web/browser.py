"""Open URLs and search pages in the user's default browser."""

import logging
import webbrowser
from collections.abc import Callable
from urllib.parse import quote

from toolgate.exceptions import CommandFailedError, InvalidArgumentError
from toolgate.tools.models import SearchEngine

logger = logging.getLogger(__name__)


SEARCH_URL_PREFIXES: dict[SearchEngine, str] = {
    SearchEngine.DUCKDUCKGO: "https://duckduckgo.com/?q=",
    SearchEngine.BING: "https://www.bing.com/search?q=",
    SearchEngine.GOOGLE: "https://www.google.com/search?q=",
}


def build_search_url(query: str, engine: SearchEngine = SearchEngine.DUCKDUCKGO) -> str:
    """Search page URL for a query, percent-encoding everything but unreserved chars."""
    return SEARCH_URL_PREFIXES[engine] + quote(query.strip(), safe="")


def open_in_browser(url: str, opener: Callable[[str], bool] = webbrowser.open) -> str:
    """
    Launch the default browser at a URL.

    Args:
        url: URL to open
        opener: Browser launcher (``webbrowser.open`` signature)

    Returns:
        The URL that was opened

    Raises:
        InvalidArgumentError: If the URL is blank
        CommandFailedError: If no browser could be launched
    """
    url = url.strip()
    if not url:
        raise InvalidArgumentError("url cannot be empty")

    try:
        opened = opener(url)
    except webbrowser.Error as e:
        raise CommandFailedError(f"failed to open browser: {e}") from e

    if not opened:
        raise CommandFailedError("failed to open browser: no runnable browser found")

    logger.info(f"Opened browser at {url}")
    return url
