"""Web search tool."""

from toolgate.exceptions import InvalidArgumentError
from toolgate.tools.arguments import WebSearchArgs
from toolgate.tools.base import Tool, ToolContext
from toolgate.tools.models import Capability, ToolName, ToolParameter, ToolResult, ToolRisk


class WebSearchTool(Tool):
    """Search the web and return structured JSON results.

    Provider failures do not raise: the JSON body (with ``ok: false``) is the
    content of a failed envelope so the caller always gets parseable output.
    """

    args_model = WebSearchArgs

    @property
    def name(self) -> ToolName:
        return ToolName.WEB_SEARCH

    @property
    def description(self) -> str:
        return (
            "Search the web (DuckDuckGo). Returns title, snippet, URL, and optional page "
            "excerpts so you can summarize the pages (not just list links). Use for current "
            "info and to summarize what each result says. Cite results."
        )

    @property
    def capability(self) -> Capability:
        return Capability.WEB_SEARCH

    @property
    def scope(self) -> str:
        return "Internet (opt-in)"

    @property
    def risk(self) -> ToolRisk:
        return ToolRisk.NETWORK

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(name="query", type="string", description="Search query"),
            ToolParameter(
                name="max_results",
                type="integer",
                description="Maximum number of results",
                required=False,
                default=5,
                minimum=1,
                maximum=10,
            ),
            ToolParameter(
                name="include_page_excerpts",
                type="boolean",
                description=(
                    "When true (default), fetch each result URL and include a text excerpt "
                    "so you can summarize the page content."
                ),
                required=False,
                default=True,
            ),
        ]

    def execute(self, args: WebSearchArgs, context: ToolContext) -> ToolResult:
        if not args.query.strip():
            raise InvalidArgumentError("query required")

        outcome = context.search.search(
            args.query,
            max_results=args.max_results if args.max_results is not None else 5,
            include_page_excerpts=args.include_page_excerpts,
        )
        content = outcome.output.to_json()
        if not outcome.ok:
            return ToolResult.failure(
                outcome.error or "web_search failed", content=content, steps=outcome.diagnostic_steps
            )
        return ToolResult.success(content, outcome.diagnostic_steps)
