"""DuckDuckGo instant-answer API: request and result parsing."""

import logging
from typing import Any

import httpx

from toolgate.search.models import WebSearchResultItem

logger = logging.getLogger(__name__)

DUCKDUCKGO_API_URL = "https://api.duckduckgo.com/"


def _first_line(text: str) -> str:
    lines = text.strip().splitlines()
    return lines[0].strip() if lines else ""


def _result_from_topic(topic: dict[str, Any]) -> WebSearchResultItem | None:
    text = topic.get("Text")
    url = topic.get("FirstURL")
    if not isinstance(text, str) or not text or not isinstance(url, str) or not url:
        return None
    return WebSearchResultItem(title=_first_line(text), snippet=text, url=url)


def parse_results(body: Any, max_results: int) -> list[WebSearchResultItem]:
    """
    Flatten an instant-answer response into search results.

    The abstract (when both text and URL are present) comes first, followed by
    related topics. A related-topics entry is either a topic or a group with a
    nested ``Topics`` list; both shapes yield the same result type.

    Raises:
        ValueError: If the body is not a JSON object
    """
    if not isinstance(body, dict):
        raise ValueError("unexpected response shape: expected a JSON object")

    results: list[WebSearchResultItem] = []

    abstract = body.get("Abstract")
    abstract_url = body.get("AbstractURL")
    if isinstance(abstract, str) and isinstance(abstract_url, str):
        if abstract.strip() and abstract_url.strip():
            results.append(
                WebSearchResultItem(
                    title=_first_line(abstract),
                    snippet=abstract.strip(),
                    url=abstract_url.strip(),
                )
            )

    topics = body.get("RelatedTopics")
    if not isinstance(topics, list):
        return results

    for entry in topics:
        if len(results) >= max_results:
            break
        if not isinstance(entry, dict):
            continue
        if "Topics" in entry:
            nested = entry.get("Topics")
            if not isinstance(nested, list):
                continue
            for item in nested:
                if len(results) >= max_results:
                    break
                if isinstance(item, dict):
                    result = _result_from_topic(item)
                    if result is not None:
                        results.append(result)
        else:
            result = _result_from_topic(entry)
            if result is not None:
                results.append(result)

    return results


class DuckDuckGoClient:
    """Thin wrapper over the instant-answer endpoint."""

    def __init__(
        self,
        client: httpx.Client,
        endpoint: str = DUCKDUCKGO_API_URL,
        timeout: float = 10.0,
    ) -> None:
        self.client = client
        self.endpoint = endpoint
        self.timeout = timeout

    def request(self, query: str) -> httpx.Response:
        """
        Send the search request.

        Raises:
            httpx.HTTPError: On transport failure
        """
        return self.client.get(
            self.endpoint,
            params={"q": query.strip(), "format": "json"},
            timeout=self.timeout,
        )

    def first_result_url(self, query: str) -> str | None:
        """URL of the top result for a query, or None on any failure."""
        if not query.strip():
            return None
        try:
            response = self.request(query)
            if not response.is_success:
                return None
            results = parse_results(response.json(), 1)
        except (httpx.HTTPError, ValueError) as e:
            logger.debug(f"DuckDuckGo first-result lookup failed: {e}")
            return None
        return results[0].url if results else None
