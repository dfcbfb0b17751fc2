"""
Web search orchestration.

Primary provider first; when it returns nothing, a fallback chain chosen by
query intent:

- time-sensitive, not officeholder: no encyclopedia lookup (its text would be
  stale); suggest a live browser search instead
- officeholder: structured Wikidata lookup, then the office's Wikipedia page
- anything else: generic Wikipedia summary

Every branch records a caller-facing ``WebSearchStep`` in the output and an
operator-facing ``DiagnosticStep``. Network failures never raise; they come
back as ``ok: false`` output.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

import httpx

from toolgate.config.schema import SearchConfig
from toolgate.search.duckduckgo import DuckDuckGoClient, parse_results
from toolgate.search.models import WebSearchOutput, WebSearchResultItem, WebSearchStep
from toolgate.search.query import (
    is_officeholder_query,
    is_time_sensitive_query,
    normalize_officeholder_query,
    rewrite_query,
)
from toolgate.search.wikidata import WikidataOfficeholderLookup
from toolgate.search.wikipedia import WikipediaFallback
from toolgate.tools.models import DiagnosticStep
from toolgate.web.fetch import fetch_page_excerpt

logger = logging.getLogger(__name__)

PROVIDER_DUCKDUCKGO = "duckduckgo"
PROVIDER_WIKIDATA = "wikidata_officeholder"
PROVIDER_WIKIPEDIA = "wikipedia_fallback"


@dataclass
class SearchOutcome:
    """Structured output plus the operator-facing trail."""

    output: WebSearchOutput
    diagnostic_steps: list[DiagnosticStep] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.output.ok

    @property
    def error(self) -> str | None:
        return self.output.error


def build_search_client(config: SearchConfig) -> httpx.Client:
    """HTTP client with a browser-like User-Agent, as the primary provider expects."""
    return httpx.Client(
        timeout=config.request_timeout,
        headers={
            "User-Agent": config.user_agent,
            "Accept-Language": config.accept_language,
        },
        follow_redirects=True,
    )


class WebSearchOrchestrator:
    """Runs one web search through the provider and fallback chain."""

    def __init__(
        self,
        client: httpx.Client,
        config: SearchConfig | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            client: Shared HTTP client for all providers and page fetches
            config: Endpoints, timeouts and excerpt limits
            today: Clock used for query rewriting
        """
        self.client = client
        self.config = config or SearchConfig()
        self.today = today

        self.primary = DuckDuckGoClient(
            client, self.config.duckduckgo_url, self.config.request_timeout
        )
        self.wikidata = WikidataOfficeholderLookup(
            client,
            self.config.wikidata_api_url,
            self.config.wikidata_timeout,
            self.config.wikimedia_user_agent,
        )
        self.wikipedia = WikipediaFallback(
            client,
            self.config.wikipedia_search_url,
            self.config.wikipedia_summary_url,
            self.config.wikipedia_timeout,
            self.config.wikimedia_user_agent,
        )

    @classmethod
    def from_config(cls, config: SearchConfig) -> "WebSearchOrchestrator":
        return cls(build_search_client(config), config)

    def search(
        self,
        query: str,
        max_results: int = 5,
        include_page_excerpts: bool = True,
    ) -> SearchOutcome:
        """
        Search the web.

        Args:
            query: User query
            max_results: Result cap (clamped to 1..10)
            include_page_excerpts: Fetch page text for the top results

        Returns:
            SearchOutcome; ``output.ok`` is false on transport, HTTP or parse failure
        """
        max_results = max(1, min(max_results, 10))
        query = query.strip()
        rewritten, recency_days = rewrite_query(
            query, self.today().year, self.config.recency_days
        )

        diag: list[DiagnosticStep] = []
        steps: list[WebSearchStep] = []

        def output(**kwargs) -> WebSearchOutput:
            return WebSearchOutput(
                query=rewritten,
                query_original=query,
                query_rewritten=rewritten,
                recency_days=recency_days,
                steps=steps,
                **kwargs,
            )

        def failed(status: int, error: str, message: str) -> SearchOutcome:
            diag.append(DiagnosticStep.error(message, {"status": status} if status else None))
            diag.append(DiagnosticStep.info("Step 5: done (with error)"))
            logger.warning(f"web_search failed for {query!r}: {error}")
            return SearchOutcome(
                output(ok=False, provider=PROVIDER_DUCKDUCKGO, status=status, error=error),
                diag,
            )

        diag.append(
            DiagnosticStep.info(
                "Step 1: validate config (provider: DuckDuckGo, no API key required)",
                {
                    "query_original": query,
                    "query_rewritten": rewritten,
                    "recency_days": recency_days,
                    "max_results": max_results,
                    "provider": PROVIDER_DUCKDUCKGO,
                },
            )
        )
        steps.append(WebSearchStep(name="validate", ok=True, detail="config ok"))
        diag.append(DiagnosticStep.info("Step 2: network check / request start"))

        try:
            response = self.primary.request(rewritten)
        except httpx.HTTPError as e:
            steps.append(WebSearchStep(name="request", ok=False, detail=str(e)))
            steps.append(WebSearchStep(name="done", ok=False, detail="request failed"))
            return failed(0, f"web_search request failed: {e}", f"Step 2 failed: {e}")

        status = response.status_code
        diag.append(DiagnosticStep.info(f"Step 3: response status {status}", {"status": status}))
        steps.append(WebSearchStep(name="request", ok=True, detail=f"HTTP {status}"))

        if not response.is_success:
            steps.append(WebSearchStep(name="parse", ok=False, detail="HTTP error"))
            steps.append(WebSearchStep(name="done", ok=False, detail="status not success"))
            return failed(status, f"HTTP {status}", "web_search disabled or request failed")

        try:
            results = parse_results(response.json(), max_results)
        except ValueError as e:
            steps.append(WebSearchStep(name="parse", ok=False, detail=str(e)))
            steps.append(WebSearchStep(name="done", ok=False, detail="parse failed"))
            return failed(status, str(e), f"Step 4: parse failed: {e}")

        diag.append(
            DiagnosticStep.info(
                f"Step 4: parse results count {len(results)}", {"result_count": len(results)}
            )
        )
        steps.append(WebSearchStep(name="parse", ok=True, detail=f"result_count {len(results)}"))

        provider = PROVIDER_DUCKDUCKGO
        suggest_browser: bool | None = None

        if not results:
            diag.append(DiagnosticStep.info("Step 4b: fallback selection (DDG returned 0 results)"))
            results, provider, suggest_browser = self._fallback(query, steps, diag)

        if include_page_excerpts and results:
            with_excerpts = self._add_excerpts(results)
            diag.append(
                DiagnosticStep.info(
                    f"Step 4c: page excerpts fetched for {with_excerpts} result(s)",
                    {"include_page_excerpts": True, "with_excerpts": with_excerpts},
                )
            )
            steps.append(
                WebSearchStep(
                    name="page_excerpts",
                    ok=True,
                    detail=f"{with_excerpts} of {len(results)} result(s) with excerpt",
                )
            )

        diag.append(
            DiagnosticStep.info(
                "Step 5: done",
                {
                    "result_count": len(results),
                    "provider": provider,
                    "suggest_open_browser_search": suggest_browser,
                },
            )
        )
        steps.append(WebSearchStep(name="done", ok=True, detail=f"{len(results)} result(s)"))
        logger.info(f"web_search {query!r}: {len(results)} result(s) from {provider}")

        return SearchOutcome(
            output(
                ok=True,
                provider=provider,
                status=status,
                results=results,
                suggest_open_browser_search=suggest_browser,
            ),
            diag,
        )

    @staticmethod
    def _record(
        steps: list[WebSearchStep],
        diag: list[DiagnosticStep],
        name: str,
        ok: bool,
        detail: str,
    ) -> None:
        """Append the same fallback outcome to the search steps and the diagnostics."""
        steps.append(WebSearchStep(name=name, ok=ok, detail=detail))
        step = DiagnosticStep.info if ok else DiagnosticStep.warn
        diag.append(step(f"Step 4b: {name}: {detail}", {"step": name, "ok": ok}))

    def _fallback(
        self, query: str, steps: list[WebSearchStep], diag: list[DiagnosticStep]
    ) -> tuple[list[WebSearchResultItem], str, bool | None]:
        """Pick and run the fallback chain for an empty primary result."""
        officeholder = is_officeholder_query(query)

        if is_time_sensitive_query(query) and not officeholder:
            self._record(
                steps,
                diag,
                "fallback_skipped",
                False,
                "time-sensitive query: Wikipedia not used; suggest open_browser_search",
            )
            return [], PROVIDER_DUCKDUCKGO, True

        if officeholder:
            office = normalize_officeholder_query(query)
            results = self.wikidata.lookup(office) if office is not None else []
            if results:
                self._record(
                    steps, diag, "wikidata_officeholder", True, f"{len(results)} result(s)"
                )
                return results, PROVIDER_WIKIDATA, None

            results = self.wikipedia.search(query, prefer_office_not_list=True)
            if results:
                self._record(
                    steps,
                    diag,
                    "wikipedia_fallback",
                    True,
                    f"{len(results)} result(s), office summary",
                )
                return results, PROVIDER_WIKIPEDIA, None

            self._record(steps, diag, "wikidata_officeholder", False, "no results")

        results = self.wikipedia.search(query)
        if results:
            self._record(steps, diag, "wikipedia_fallback", True, f"{len(results)} result(s)")
            return results, PROVIDER_WIKIPEDIA, None

        if not officeholder:
            self._record(steps, diag, "wikipedia_fallback", False, "no results")
        return [], PROVIDER_DUCKDUCKGO, None

    def _add_excerpts(self, results: list[WebSearchResultItem]) -> int:
        """Attach page text to the first few results; returns how many got one."""
        for item in results[: self.config.excerpt_max_results]:
            item.page_excerpt = fetch_page_excerpt(
                self.client,
                item.url,
                max_chars=self.config.excerpt_max_chars,
                timeout=self.config.excerpt_timeout,
                max_bytes=self.config.max_body_bytes,
            )
        return sum(1 for item in results if item.page_excerpt is not None)

    def close(self) -> None:
        self.client.close()
