"""
Officeholder lookup through Wikidata.

Country entity -> head of state (P35) or head of government (P6) claim ->
person entity label and English Wikipedia sitelink.
"""

import logging
from typing import Any

import httpx

from toolgate.search.models import WebSearchResultItem
from toolgate.search.query import OfficeholderQuery

logger = logging.getLogger(__name__)

WIKIDATA_API_URL = "https://www.wikidata.org/w/api.php"
WIKIDATA_ENTITY_URL = "https://www.wikidata.org/wiki/"
WIKIPEDIA_PAGE_URL = "https://en.wikipedia.org/wiki/"


class WikidataOfficeholderLookup:
    """Resolves "who is the president of X" through structured claims."""

    def __init__(
        self,
        client: httpx.Client,
        api_url: str = WIKIDATA_API_URL,
        timeout: float = 10.0,
        user_agent: str | None = None,
    ) -> None:
        self.client = client
        self.api_url = api_url
        self.timeout = timeout
        self.headers = {"User-Agent": user_agent} if user_agent else {}

    def _get(self, params: dict[str, str]) -> dict[str, Any] | None:
        try:
            response = self.client.get(
                self.api_url,
                params={"format": "json", **params},
                headers=self.headers,
                timeout=self.timeout,
            )
            if not response.is_success:
                logger.debug(f"Wikidata {params.get('action')} returned HTTP {response.status_code}")
                return None
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug(f"Wikidata {params.get('action')} failed: {e}")
            return None
        return body if isinstance(body, dict) else None

    def find_entity_id(self, search: str) -> str | None:
        body = self._get(
            {
                "action": "wbsearchentities",
                "language": "en",
                "type": "item",
                "search": search,
                "limit": "1",
            }
        )
        hits = (body or {}).get("search")
        if not isinstance(hits, list) or not hits or not isinstance(hits[0], dict):
            return None
        entity_id = hits[0].get("id")
        return entity_id if isinstance(entity_id, str) else None

    def claim_target(self, entity_id: str, property_id: str) -> str | None:
        """Entity id that the first claim of ``property_id`` points to."""
        body = self._get(
            {"action": "wbgetentities", "ids": entity_id, "props": "claims", "languages": "en"}
        )
        try:
            claims = body["entities"][entity_id]["claims"][property_id]  # type: ignore[index]
            target = claims[0]["mainsnak"]["datavalue"]["value"]["id"]
        except (KeyError, IndexError, TypeError):
            return None
        return target if isinstance(target, str) else None

    def lookup(self, office: OfficeholderQuery) -> list[WebSearchResultItem]:
        """
        Find the current holder of an office.

        Returns:
            One synthesized result citing the person's page, or an empty list
            if any step of the chain fails
        """
        country_id = self.find_entity_id(office.country)
        if country_id is None:
            return []

        person_id = self.claim_target(country_id, office.property_id)
        if person_id is None:
            return []

        body = self._get(
            {
                "action": "wbgetentities",
                "ids": person_id,
                "props": "labels|sitelinks",
                "languages": "en",
            }
        )
        if body is None:
            return []

        person = (body.get("entities") or {}).get(person_id) or {}
        name = ((person.get("labels") or {}).get("en") or {}).get("value") or "Unknown"
        wiki_title = ((person.get("sitelinks") or {}).get("enwiki") or {}).get("title")

        if isinstance(wiki_title, str) and wiki_title:
            url = WIKIPEDIA_PAGE_URL + wiki_title.replace(" ", "_")
        else:
            url = WIKIDATA_ENTITY_URL + person_id

        snippet = f"Current {office.office_label} of {office.country} is {name}. Source: {url}"
        logger.info(f"Wikidata officeholder: {office.office_label} of {office.country} -> {name}")
        return [WebSearchResultItem(title=name, snippet=snippet, url=url)]
