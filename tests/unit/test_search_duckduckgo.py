"""Tests for DuckDuckGo result parsing and requests."""

import httpx
import pytest

from toolgate.search.duckduckgo import DuckDuckGoClient, parse_results
from toolgate.search.models import WebSearchOutput, WebSearchResultItem


class TestParseResults:
    def test_abstract_first(self):
        body = {
            "Abstract": "Rust is a language.\nMore detail.",
            "AbstractURL": "https://en.wikipedia.org/wiki/Rust",
            "RelatedTopics": [{"Text": "Cargo - package manager", "FirstURL": "https://ddg.test/Cargo"}],
        }

        results = parse_results(body, 5)

        assert [r.url for r in results] == [
            "https://en.wikipedia.org/wiki/Rust",
            "https://ddg.test/Cargo",
        ]
        assert results[0].title == "Rust is a language."
        assert results[0].snippet == "Rust is a language.\nMore detail."

    def test_nested_topic_groups(self):
        body = {
            "RelatedTopics": [
                {"Text": "Top", "FirstURL": "https://ddg.test/top"},
                {
                    "Name": "Group",
                    "Topics": [
                        {"Text": "Nested A", "FirstURL": "https://ddg.test/a"},
                        {"Text": "Nested B", "FirstURL": "https://ddg.test/b"},
                    ],
                },
            ]
        }
        assert [r.title for r in parse_results(body, 10)] == ["Top", "Nested A", "Nested B"]

    def test_respects_max_results(self):
        topics = [{"Text": f"T{i}", "FirstURL": f"https://ddg.test/{i}"} for i in range(8)]
        assert len(parse_results({"RelatedTopics": topics}, 3)) == 3

    def test_skips_incomplete_topics(self):
        body = {
            "Abstract": "text without url",
            "AbstractURL": "",
            "RelatedTopics": [{"Text": "", "FirstURL": "https://x"}, {"Text": "no url"}, "junk"],
        }
        assert parse_results(body, 5) == []

    def test_not_an_object(self):
        with pytest.raises(ValueError, match="unexpected response shape"):
            parse_results([], 5)


class TestModels:
    def test_long_title_truncated(self):
        item = WebSearchResultItem(title="x" * 200, url="https://a")
        assert len(item.title) == 118
        assert item.title.endswith("…")

    def test_result_count_serialized(self):
        output = WebSearchOutput(
            ok=True,
            provider="duckduckgo",
            query="q",
            results=[WebSearchResultItem(title="a", url="https://a")],
        )
        data = output.model_dump()
        assert data["result_count"] == 1
        assert "error" not in output.to_json()


class TestDuckDuckGoClient:
    def test_request_params(self, http_router):
        http_router.add("api.duckduckgo.com", json={})
        DuckDuckGoClient(http_router.client()).request("  rust  ")

        params = http_router.requests[0].url.params
        assert params["q"] == "rust"
        assert params["format"] == "json"

    def test_first_result_url(self, http_router):
        http_router.add(
            "api.duckduckgo.com",
            json={"RelatedTopics": [{"Text": "A", "FirstURL": "https://ddg.test/a"}]},
        )
        assert DuckDuckGoClient(http_router.client()).first_result_url("a") == "https://ddg.test/a"

    def test_first_result_url_failures(self, http_router):
        def refuse(request):
            raise httpx.ConnectError("down", request=request)

        http_router.add("api.duckduckgo.com", handler=refuse)
        client = DuckDuckGoClient(http_router.client())
        assert client.first_result_url("a") is None
        assert client.first_result_url("  ") is None
