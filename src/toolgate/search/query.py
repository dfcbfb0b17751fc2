"""
Query heuristics for web search.

Time-sensitivity detection and year rewriting, plus recognition of
"who holds national office X" questions.
"""

import re
from dataclasses import dataclass

DEFAULT_RECENCY_DAYS = 30

TIME_SENSITIVE_MARKERS: tuple[str, ...] = (
    "today",
    "yesterday",
    "few days ago",
    "a few days ago",
    "latest",
    "current",
    "this week",
    "this month",
    "this year",
    "recent",
    "just",
    "super bowl",
    "superbowl",
    "winner",
    "champion",
    "score",
    "result",
)

OFFICEHOLDER_MARKERS: tuple[str, ...] = (
    "current president of",
    "who is the president of",
    "president of the",
    "current prime minister of",
    "who is the prime minister of",
    "prime minister of the",
    "current leader of",
    "who is the leader of",
    "leader of the",
)

COUNTRY_ALIASES: dict[str, str] = {
    "usa": "United States",
    "us": "United States",
    "u.s.": "United States",
    "u.s.a.": "United States",
    "united states": "United States",
    "america": "United States",
    "uk": "United Kingdom",
    "u.k.": "United Kingdom",
    "united kingdom": "United Kingdom",
    "britain": "United Kingdom",
    "england": "United Kingdom",
    "france": "France",
    "germany": "Germany",
    "canada": "Canada",
    "australia": "Australia",
    "india": "India",
    "japan": "Japan",
}

# Wikidata properties: head of state and head of government
HEAD_OF_STATE = "P35"
HEAD_OF_GOVERNMENT = "P6"

_OFFICE_PATTERN = re.compile(r"\b(prime minister|president|leader)\s+of\s+(?:the\s+)?(.+)$")


def is_time_sensitive_query(query: str) -> bool:
    """True if the query implies recency (today, latest, this week, score, ...)."""
    lower = query.lower()
    return any(marker in lower for marker in TIME_SENSITIVE_MARKERS)


def rewrite_query(
    query: str, year: int, recency_days: int = DEFAULT_RECENCY_DAYS
) -> tuple[str, int]:
    """
    Bias a time-sensitive query toward fresh results.

    Args:
        query: Query as typed
        year: Current calendar year
        recency_days: Reported recency window (unchanged by the rewrite)

    Returns:
        (rewritten query, recency_days)
    """
    q = query.strip()
    if not q or not is_time_sensitive_query(q):
        return q, recency_days
    return f"{q} {year}", recency_days


def is_officeholder_query(query: str) -> bool:
    """True if the query asks who holds a national leadership office."""
    lower = query.lower()
    return any(marker in lower for marker in OFFICEHOLDER_MARKERS)


@dataclass(frozen=True)
class OfficeholderQuery:
    """Country and office extracted from an officeholder question."""

    country: str
    property_id: str
    office_label: str

    @property
    def office_page_title(self) -> str:
        """Encyclopedia title of the office itself, e.g. "President of France"."""
        if self.office_label == "president":
            return f"President of {self.country}"
        if self.office_label == "prime minister":
            return f"Prime Minister of {self.country}"
        return f"{self.office_label} of {self.country}"


def normalize_officeholder_query(query: str) -> OfficeholderQuery | None:
    """
    Extract the office and country from an officeholder question.

    "who is the prime minister of the uk?" -> (United Kingdom, P6, prime minister)

    Returns:
        OfficeholderQuery, or None if no office/country could be found
    """
    lower = query.lower().strip()
    match = _OFFICE_PATTERN.search(lower)
    if match is None:
        return None

    office = match.group(1)
    country = match.group(2).strip().strip(".?,!").strip()
    if country.startswith("the "):
        country = country[4:].strip()
    if not country:
        return None

    property_id = HEAD_OF_GOVERNMENT if office == "prime minister" else HEAD_OF_STATE
    normalized = COUNTRY_ALIASES.get(country, country.title())
    return OfficeholderQuery(country=normalized, property_id=property_id, office_label=office)
