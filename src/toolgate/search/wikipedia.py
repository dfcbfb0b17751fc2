"""Encyclopedia fallback: Wikipedia REST search plus page summary."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from toolgate.search.models import WebSearchResultItem
from toolgate.search.query import is_officeholder_query, normalize_officeholder_query

logger = logging.getLogger(__name__)

WIKIPEDIA_SEARCH_URL = "https://en.wikipedia.org/w/rest.php/v1/search/page"
WIKIPEDIA_SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/summary/"
WIKIPEDIA_PAGE_URL = "https://en.wikipedia.org/wiki/"


class WikipediaFallback:
    """Synthesizes one result from the best-matching encyclopedia page."""

    def __init__(
        self,
        client: httpx.Client,
        search_url: str = WIKIPEDIA_SEARCH_URL,
        summary_url: str = WIKIPEDIA_SUMMARY_URL,
        timeout: float = 8.0,
        user_agent: str | None = None,
    ) -> None:
        self.client = client
        self.search_url = search_url
        self.summary_url = summary_url
        self.timeout = timeout
        self.headers = {"User-Agent": user_agent} if user_agent else {}

    def _get_json(self, url: str, params: dict[str, str] | None = None) -> dict[str, Any] | None:
        try:
            response = self.client.get(
                url, params=params, headers=self.headers, timeout=self.timeout
            )
            if not response.is_success:
                logger.debug(f"Wikipedia request to {url} returned HTTP {response.status_code}")
                return None
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug(f"Wikipedia request to {url} failed: {e}")
            return None
        return body if isinstance(body, dict) else None

    @staticmethod
    def search_term(query: str, prefer_office_not_list: bool) -> str:
        """Search text; officeholder questions become the office page title."""
        q = query.strip()
        if prefer_office_not_list and is_officeholder_query(q):
            office = normalize_officeholder_query(q)
            if office is not None:
                return office.office_page_title
        return q

    @staticmethod
    def pick_title(pages: list[Any], prefer_office_not_list: bool) -> str | None:
        for page in pages:
            title = page.get("title") if isinstance(page, dict) else None
            if not isinstance(title, str) or not title:
                continue
            if prefer_office_not_list and title.lower().startswith("list of "):
                continue
            return title
        return None

    def search(self, query: str, prefer_office_not_list: bool = False) -> list[WebSearchResultItem]:
        """
        Look up a query on Wikipedia.

        Args:
            query: Original user query
            prefer_office_not_list: Rewrite officeholder questions to the office
                page and skip "List of ..." pages

        Returns:
            Zero or one result built from the page title, extract and URL
        """
        if not query.strip():
            return []

        term = self.search_term(query, prefer_office_not_list)
        body = self._get_json(self.search_url, {"q": term, "limit": "10"})
        pages = (body or {}).get("pages")
        if not isinstance(pages, list):
            return []

        title = self.pick_title(pages, prefer_office_not_list)
        if title is None:
            return []

        slug = title.replace(" ", "_")
        summary = self._get_json(self.summary_url + quote(slug, safe=""))
        if summary is None:
            return []

        extract = summary.get("extract")
        return [
            WebSearchResultItem(
                title=title,
                snippet=extract if isinstance(extract, str) else "",
                url=WIKIPEDIA_PAGE_URL + slug,
            )
        ]
