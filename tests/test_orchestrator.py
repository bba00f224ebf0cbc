"""
Tests for SearchOrchestrator.

The fetcher is an AsyncMock returning real FetchedPage objects, so parsing
and extraction run against actual BeautifulSoup documents.
"""

from __future__ import annotations

import asyncio
import time

import httpx
import pytest

from conftest import build_results_page, make_page
from recipe_finder.application.search.orchestrator import (
    RESULT_CEILING,
    SearchContext,
    SearchOrchestrator,
    encode_query,
)
from recipe_finder.core.exceptions import (
    EncodingError,
    ExtractionError,
    FetchTimeoutError,
    HTTPStatusError,
    ParseError,
)
from recipe_finder.infrastructure.http.client import HttpFetcher


def _orchestrator(fetcher, source_lookup, **kwargs) -> SearchOrchestrator:
    return SearchOrchestrator(fetcher, source_lookup=source_lookup, **kwargs)


# =============================================================================
# Query encoding
# =============================================================================


class TestEncodeQuery:
    def test_space_percent_encoded(self):
        assert encode_query("roast chicken") == "roast%20chicken"

    def test_quotes_and_reserved_characters(self):
        assert encode_query('"mac & cheese"') == "%22mac%20%26%20cheese%22"

    def test_unreserved_left_alone(self):
        assert encode_query("pot-roast_2.0~") == "pot-roast_2.0~"

    def test_non_ascii_utf8(self):
        assert encode_query("crème") == "cr%C3%A8me"

    def test_singularize_first(self):
        assert encode_query("cakes", singularize_first=True) == "cake"
        assert encode_query("green beans", singularize_first=True) == "green%20beans"

    def test_lone_surrogate_fails(self):
        with pytest.raises(EncodingError) as exc_info:
            encode_query("chili\ud800")
        assert exc_info.value.code == "EncodingFailure"


# =============================================================================
# SearchContext
# =============================================================================


class TestSearchContext:
    def test_contexts_do_not_share_state(self):
        orchestrator = SearchOrchestrator(object())
        first = orchestrator.new_context("chili", 0)
        second = orchestrator.new_context("stew", 0)
        first.sink.add("Chili", "https://x.com/recipe/1")
        assert first.count == 1
        assert second.count == 0
        assert first.seen is not second.seen

    def test_extraction_failure_hides_candidates(self):
        context = SearchContext(query="chili", source_index=0)
        context.sink.add("Chili", "https://x.com/recipe/1")
        context.extraction_error = ExtractionError("boom")
        assert context.extraction_failed
        assert context.candidates() == []

    def test_error_context(self):
        context = SearchContext(query="chili", source_index=0, source_name="Delish", url="https://x.com")
        ctx = context.error_context(size=10)
        assert (ctx.source_name, ctx.url, ctx.input_value) == ("Delish", "https://x.com", "chili")
        assert ctx.metadata == {"size": 10}

    def test_result_limit_applied_to_context(self):
        orchestrator = SearchOrchestrator(object(), result_limit=5)
        assert orchestrator.new_context("chili", 0).sink.limit == 5
        assert SearchOrchestrator(object()).result_limit == RESULT_CEILING


# =============================================================================
# run_search
# =============================================================================


class TestRunSearchSuccess:
    @pytest.mark.asyncio
    async def test_candidates_extracted(self, stub_fetcher, source_lookup, roast_chicken_html):
        stub_fetcher.fetch.return_value = make_page(roast_chicken_html)
        outcome = await _orchestrator(stub_fetcher, source_lookup).run_search("roast chicken", 0)

        assert outcome.success
        assert outcome.status_message == ""
        assert not outcome.used_fallback
        assert outcome.source_name == "Test Kitchen"
        assert outcome.url == "https://www.example.com/search?q=roast%20chicken"
        assert [c.title for c in outcome.results] == ["Roast Chicken With Lemon", "Chicken Soup", "Beef Stew"]

        stub_fetcher.fetch.assert_awaited_once_with(
            "https://www.example.com/search?q=roast%20chicken",
            timeout=15.0,
            label="Test Kitchen",
        )

    @pytest.mark.asyncio
    async def test_ceiling_of_fifty(self, stub_fetcher, source_lookup):
        links = [(f"Chili {i}", f"/recipe/{i}/") for i in range(60)]
        stub_fetcher.fetch.return_value = make_page(build_results_page(links))

        outcome = await _orchestrator(stub_fetcher, source_lookup).run_search("chili", 0)

        assert len(outcome.results) == RESULT_CEILING
        assert outcome.results[-1].title == "Chili 49"

    @pytest.mark.asyncio
    async def test_duplicate_urls_collapsed(self, stub_fetcher, source_lookup):
        links = [("Chili", "/recipe/1/"), ("Chili (again)", "/recipe/1/"), ("Chili", "/recipe/1/#top")]
        stub_fetcher.fetch.return_value = make_page(build_results_page(links))

        outcome = await _orchestrator(stub_fetcher, source_lookup).run_search("chili", 0)

        assert len(outcome.results) == 1
        assert outcome.results[0].url == "https://www.example.com/recipe/1/"

    @pytest.mark.asyncio
    async def test_no_candidates_uses_fallback_link(self, stub_fetcher, source_lookup):
        outcome = await _orchestrator(stub_fetcher, source_lookup).run_search("chili", 0)

        assert outcome.success
        assert outcome.used_fallback
        assert len(outcome.results) == 1
        assert outcome.results[0].url == "https://www.example.com/recipes/"
        assert outcome.results[0].title == "Click to see Test Kitchen ..."

    @pytest.mark.asyncio
    async def test_searches_are_independent(self, stub_fetcher, source_lookup):
        stub_fetcher.fetch.return_value = make_page(build_results_page([("Chili", "/recipe/1/")]))
        orchestrator = _orchestrator(stub_fetcher, source_lookup)

        first = await orchestrator.run_search("chili", 0)
        second = await orchestrator.run_search("chili", 0)

        assert len(first.results) == len(second.results) == 1
        assert not second.used_fallback


class TestRunSearchFailures:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   ", None])
    async def test_empty_query_never_fetches(self, stub_fetcher, source_lookup, query):
        outcome = await _orchestrator(stub_fetcher, source_lookup).run_search(query, 0)

        assert not outcome.success
        assert outcome.error == "EmptyQuery"
        assert outcome.status_message == "Please enter a recipe search term (like roast chicken, or chili)"
        assert outcome.url is None
        stub_fetcher.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_source(self, stub_fetcher, source_lookup):
        outcome = await _orchestrator(stub_fetcher, source_lookup).run_search("chili", 7)

        assert not outcome.success
        assert outcome.error == "InvalidSource"
        assert outcome.status_message == "Please select a valid recipe site."
        stub_fetcher.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_index_with_real_registry(self, stub_fetcher):
        outcome = await SearchOrchestrator(stub_fetcher).run_search("chili", 20)
        assert outcome.error == "InvalidSource"

    @pytest.mark.asyncio
    async def test_encoding_failure(self, stub_fetcher, source_lookup):
        outcome = await _orchestrator(stub_fetcher, source_lookup).run_search("chili\ud800", 0)

        assert outcome.error == "EncodingFailure"
        assert outcome.url is None
        assert outcome.source_name == "Test Kitchen"
        stub_fetcher.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [HTTPStatusError(503, "Service Unavailable"), FetchTimeoutError(15.0)],
    )
    async def test_fetch_failure_keeps_url(self, stub_fetcher, source_lookup, error):
        stub_fetcher.fetch.side_effect = error
        outcome = await _orchestrator(stub_fetcher, source_lookup).run_search("chili", 0)

        assert not outcome.success
        assert outcome.error == "FetchFailure"
        assert outcome.status_message == "Failed to fetch recipes."
        assert outcome.url == "https://www.example.com/search?q=chili"
        assert outcome.results == ()

    @pytest.mark.asyncio
    async def test_error_status_body_is_not_extracted(self, source_lookup):
        body = build_results_page([("Chili Con Carne", "/recipe/9/chili-con-carne/")])

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, html=body)

        async with HttpFetcher(transport=httpx.MockTransport(handler)) as fetcher:
            outcome = await _orchestrator(fetcher, source_lookup).run_search("chili", 0)

        assert not outcome.success
        assert outcome.error == "FetchFailure"
        assert outcome.url == "https://www.example.com/search?q=chili"
        assert outcome.results == ()

    @pytest.mark.asyncio
    async def test_empty_body_is_parse_failure(self, stub_fetcher, source_lookup):
        stub_fetcher.fetch.return_value = make_page(b"")
        outcome = await _orchestrator(stub_fetcher, source_lookup).run_search("chili", 0)

        assert outcome.error == "ParseFailure"
        assert outcome.status_message == "Failed to parse HTML from site."
        assert outcome.url == "https://www.example.com/search?q=chili"

    @pytest.mark.asyncio
    async def test_unexpected_parser_exception_is_parse_failure(self, stub_fetcher, source_lookup, test_source):
        def explode(raw, encoding=None):
            raise RuntimeError("parser crashed")

        test_source.extractor.parse = explode
        outcome = await _orchestrator(stub_fetcher, source_lookup).run_search("chili", 0)
        assert outcome.error == "ParseFailure"

    @pytest.mark.asyncio
    async def test_parse_error_context_filled(self, stub_fetcher, source_lookup, test_source, caplog):
        def reject(raw, encoding=None):
            raise ParseError("bad markup")

        test_source.extractor.parse = reject
        outcome = await _orchestrator(stub_fetcher, source_lookup).run_search("chili", 0)
        assert outcome.error == "ParseFailure"
        assert "ParseFailure" in caplog.text


class TestExtractionFallback:
    @pytest.mark.asyncio
    async def test_extraction_exception_means_zero_candidates(
        self, stub_fetcher, source_lookup, test_source, roast_chicken_html
    ):
        stub_fetcher.fetch.return_value = make_page(roast_chicken_html)
        original_extract = test_source.extractor.extract

        def half_then_fail(document, term, seen, sink):
            original_extract(document, term, seen, sink)
            raise RuntimeError("layout changed")

        test_source.extractor.extract = half_then_fail
        outcome = await _orchestrator(stub_fetcher, source_lookup).run_search("chicken", 0)

        assert outcome.success
        assert outcome.used_fallback
        assert [c.url for c in outcome.results] == ["https://www.example.com/recipes/"]

    @pytest.mark.asyncio
    async def test_extraction_timeout_means_zero_candidates(self, stub_fetcher, source_lookup, test_source):
        def slow(document, term, seen, sink):
            time.sleep(0.3)

        test_source.extractor.extract = slow
        orchestrator = _orchestrator(stub_fetcher, source_lookup, extract_timeout=0.05)
        outcome = await orchestrator.run_search("chili", 0)

        assert outcome.success
        assert outcome.used_fallback
        # let the worker thread finish before the loop closes
        await asyncio.sleep(0.3)
