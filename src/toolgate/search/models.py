"""Structured output of the web_search tool."""

from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator

TITLE_MAX_CHARS = 120


class WebSearchResultItem(BaseModel):
    """One search hit, optionally enriched with a page excerpt."""

    title: str
    snippet: str = ""
    url: str = Field(min_length=1)
    page_excerpt: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _truncate_title(cls, value: str) -> str:
        value = value.strip()
        if len(value) > TITLE_MAX_CHARS:
            return value[: TITLE_MAX_CHARS - 3] + "…"
        return value


class WebSearchStep(BaseModel):
    """Caller-facing search step (coarser than diagnostic steps)."""

    name: str
    ok: bool
    detail: str


class WebSearchOutput(BaseModel):
    """JSON body returned as the content of a web_search call."""

    ok: bool
    provider: str
    query: str
    query_original: Optional[str] = None
    query_rewritten: Optional[str] = None
    recency_days: Optional[int] = None
    status: int = 0
    results: list[WebSearchResultItem] = Field(default_factory=list)
    error: Optional[str] = None
    steps: list[WebSearchStep] = Field(default_factory=list)
    suggest_open_browser_search: Optional[bool] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def result_count(self) -> int:
        return len(self.results)

    def to_json(self) -> str:
        """Serialize, omitting absent optional fields."""
        return self.model_dump_json(exclude_none=True)
