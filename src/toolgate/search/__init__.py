"""
Web search for toolgate.

DuckDuckGo instant answers with query rewriting, an officeholder lookup on
Wikidata, a Wikipedia summary fallback and page-excerpt enrichment.
"""

from toolgate.search.models import WebSearchOutput, WebSearchResultItem, WebSearchStep
from toolgate.search.orchestrator import SearchOutcome, WebSearchOrchestrator
from toolgate.search.query import (
    is_officeholder_query,
    is_time_sensitive_query,
    normalize_officeholder_query,
    rewrite_query,
)

__all__ = [
    "SearchOutcome",
    "WebSearchOrchestrator",
    "WebSearchOutput",
    "WebSearchResultItem",
    "WebSearchStep",
    "is_officeholder_query",
    "is_time_sensitive_query",
    "normalize_officeholder_query",
    "rewrite_query",
]
