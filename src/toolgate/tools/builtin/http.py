"""
Web page tools: fetch a URL as text, and open the browser at a URL or search.

Both hand the page text back to the caller so the user never has to paste it.
"""

import logging

from toolgate.exceptions import InvalidArgumentError
from toolgate.tools.arguments import FetchUrlArgs, OpenBrowserSearchArgs
from toolgate.tools.base import Tool, ToolContext
from toolgate.tools.models import (
    Capability,
    SearchEngine,
    ToolName,
    ToolParameter,
    ToolResult,
    ToolRisk,
)
from toolgate.web.browser import build_search_url, open_in_browser
from toolgate.web.fetch import FETCH_CONTENT_PREFIX, fetch_page_excerpt, fetch_page_text

logger = logging.getLogger(__name__)

FETCH_MIN_CHARS = 500
FETCH_MAX_CHARS = 20000
FETCH_DEFAULT_CHARS = 12000


class FetchUrlTool(Tool):
    """Fetch a URL and return its plain text."""

    args_model = FetchUrlArgs

    @property
    def name(self) -> ToolName:
        return ToolName.FETCH_URL

    @property
    def description(self) -> str:
        return (
            "Fetch a URL and return the page content as plain text. Use when the user asks to "
            "summarize a link, explain a page, or gives you a URL: you receive the content as "
            "context and summarize or answer from it; the user does not need to copy-paste "
            "anything."
        )

    @property
    def capability(self) -> Capability:
        return Capability.WEB

    @property
    def scope(self) -> str:
        return "Internet (opt-in)"

    @property
    def risk(self) -> ToolRisk:
        return ToolRisk.NETWORK

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="url",
                type="string",
                description="Full URL to fetch (e.g. https://example.com/article)",
            ),
            ToolParameter(
                name="max_chars",
                type="integer",
                description="Max plain-text characters to return (for context window)",
                required=False,
                default=FETCH_DEFAULT_CHARS,
                minimum=FETCH_MIN_CHARS,
                maximum=FETCH_MAX_CHARS,
            ),
        ]

    def execute(self, args: FetchUrlArgs, context: ToolContext) -> ToolResult:
        url = args.url.strip()
        if not url:
            raise InvalidArgumentError("url required")

        requested = args.max_chars if args.max_chars is not None else FETCH_DEFAULT_CHARS
        max_chars = max(FETCH_MIN_CHARS, min(requested, FETCH_MAX_CHARS))

        config = context.search_config
        text = fetch_page_text(
            context.http_client,
            url,
            max_chars,
            timeout=config.excerpt_timeout,
            max_bytes=config.max_body_bytes,
        )
        return ToolResult.success(FETCH_CONTENT_PREFIX + text)


class OpenBrowserSearchTool(Tool):
    """Open the default browser, then fetch the opened page for the caller."""

    args_model = OpenBrowserSearchArgs

    @property
    def name(self) -> ToolName:
        return ToolName.OPEN_BROWSER_SEARCH

    @property
    def description(self) -> str:
        return (
            "Open the default browser to a URL or search page. The app also fetches the "
            "opened page (or first DuckDuckGo result) and returns its text in the tool "
            "response; use that content as context to summarize or answer and do not ask "
            "the user to paste."
        )

    @property
    def capability(self) -> Capability:
        return Capability.BROWSER

    @property
    def scope(self) -> str:
        return "Local (opens browser)"

    @property
    def risk(self) -> ToolRisk:
        return ToolRisk.LOW

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="url",
                type="string",
                description="Direct URL to open (e.g. https://duckduckgo.com/?q=...)",
                required=False,
            ),
            ToolParameter(
                name="query",
                type="string",
                description="Search query when using engine",
                required=False,
            ),
            ToolParameter(
                name="engine",
                type="string",
                description="Search engine when using query",
                required=False,
                default="duckduckgo",
                enum=[engine.value for engine in SearchEngine],
            ),
        ]

    def execute(self, args: OpenBrowserSearchArgs, context: ToolContext) -> ToolResult:
        if args.url is not None:
            url = args.url.strip()
            if not url:
                raise InvalidArgumentError("open_browser_search requires non-empty url or query")
            opened = open_in_browser(url, context.browser_opener)
            url_to_fetch: str | None = url
        else:
            query = (args.query or "").strip()
            if not query:
                raise InvalidArgumentError("open_browser_search requires url or query")
            opened = open_in_browser(build_search_url(query, args.engine), context.browser_opener)
            url_to_fetch = None
            if args.engine is SearchEngine.DUCKDUCKGO:
                url_to_fetch = context.search.primary.first_result_url(query)

        content = f"Opened browser: {opened}"
        if url_to_fetch:
            config = context.search_config
            text = fetch_page_excerpt(
                context.http_client,
                url_to_fetch,
                max_chars=config.browser_max_chars,
                timeout=config.browser_timeout,
                max_bytes=config.max_body_bytes,
            )
            if text and text.strip():
                content += "\n\n" + FETCH_CONTENT_PREFIX + text
            else:
                logger.debug(f"No page text fetched from {url_to_fetch}")
        return ToolResult.success(content)
