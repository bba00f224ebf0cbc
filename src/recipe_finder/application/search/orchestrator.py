"""
Search Orchestrator - one recipe search from raw term to candidate links.

Pipeline (strictly sequential, each step may end the search):

    validate -> encode -> fetch (TransferBuffer) -> parse -> extract -> cap

Failure policy:
    - Input, encoding, fetch and parse failures end the search with a
      failure SearchOutcome. The constructed URL is kept when known so the
      interactive surface can still offer the site.
    - Extraction failures and extraction timeouts are NOT failures: they
      count as zero candidates and the source's fallback link is used.
    - Nothing is retried.

Per-search state (dedup set, result count, source label) lives on a
SearchContext created for every call, so concurrent searches never share
counters.

Usage:
    orchestrator = SearchOrchestrator(HttpFetcher())
    outcome = await orchestrator.run_search("roast chicken", 0)
    for link in outcome.results:
        print(link.title, link.url)
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from recipe_finder.core.exceptions import (
    EmptyQueryError,
    EncodingError,
    ErrorContext,
    ExtractionError,
    ParseError,
    RecipeFinderError,
)
from recipe_finder.domain.entities import CandidateLink, SearchOutcome
from recipe_finder.sources import ResultSink, get_source
from recipe_finder.sources.text import singularize

if TYPE_CHECKING:
    from collections.abc import Callable

    from recipe_finder.infrastructure.http.client import FetchedPage, HttpFetcher
    from recipe_finder.sources import SourceDescriptor

logger = logging.getLogger(__name__)

RESULT_CEILING = 50
DEFAULT_FETCH_TIMEOUT = 15.0
DEFAULT_EXTRACT_TIMEOUT = 20.0


@dataclass
class SearchContext:
    """Mutable state of exactly one search."""

    query: str
    source_index: Any
    sink: ResultSink = field(default_factory=lambda: ResultSink(RESULT_CEILING))
    source_name: str | None = None
    url: str | None = None
    extraction_error: ExtractionError | None = None
    started_at: float = field(default_factory=time.monotonic)

    @property
    def seen(self) -> set[str]:
        return self.sink.seen

    @property
    def count(self) -> int:
        return self.sink.count

    @property
    def extraction_failed(self) -> bool:
        return self.extraction_error is not None

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at

    def candidates(self) -> list[CandidateLink]:
        if self.extraction_failed:
            return []
        return list(self.sink.links)

    def error_context(self, **metadata: Any) -> ErrorContext:
        return ErrorContext(
            source_name=self.source_name,
            url=self.url,
            input_value=self.query,
            metadata=metadata,
        )


def encode_query(query: str, *, singularize_first: bool = False) -> str:
    """
    Percent-encode a search term for a URL path or query slot.

    Only RFC 3986 unreserved characters are left as-is.

    Raises:
        EncodingError: the term cannot be encoded as UTF-8
    """
    term = singularize(query) if singularize_first else query
    try:
        return quote(term, safe="")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Cannot encode search term: {e}", context=ErrorContext(input_value=query)) from e


class SearchOrchestrator:
    """
    Runs one search per run_search() call.

    Args:
        fetcher: Object with an async fetch(url, *, timeout, label) -> FetchedPage
        fetch_timeout: Whole-transfer timeout in seconds
        extract_timeout: Timeout for parsing and for extraction, in seconds
        result_limit: Result ceiling for one search
        source_lookup: Index -> SourceDescriptor (defaults to the registry)
    """

    def __init__(
        self,
        fetcher: HttpFetcher,
        *,
        fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
        extract_timeout: float = DEFAULT_EXTRACT_TIMEOUT,
        result_limit: int = RESULT_CEILING,
        source_lookup: Callable[[int], SourceDescriptor] = get_source,
    ) -> None:
        self._fetcher = fetcher
        self._fetch_timeout = fetch_timeout
        self._extract_timeout = extract_timeout
        self._result_limit = result_limit
        self._source_lookup = source_lookup

    @property
    def result_limit(self) -> int:
        return self._result_limit

    def new_context(self, query: str, source_index: Any) -> SearchContext:
        return SearchContext(query=query, source_index=source_index, sink=ResultSink(self._result_limit))

    async def run_search(self, query: str | None, source_index: int) -> SearchOutcome:
        """
        Run the whole pipeline for one term and one source.

        Never raises for anticipated failures; they come back as a
        SearchOutcome with success=False and a taxonomy code.
        """
        context = self.new_context(query or "", source_index)

        try:
            source = self._prepare(context)
            logger.info(f"Searching {source.name} for {context.query!r}: {context.url}")

            page = await self._fetcher.fetch(context.url, timeout=self._fetch_timeout, label=source.name)
            document = await self._parse(source, page, context)
            await self._extract(source, document, context)
        except RecipeFinderError as e:
            logger.warning(f"Search failed [{e.code}] for {context.query!r} on {context.source_name}: {e}")
            return SearchOutcome(
                success=False,
                status_message=e.to_status_message(),
                url=context.url,
                source_name=context.source_name,
                error=e.code,
            )

        candidates = context.candidates()
        used_fallback = not candidates
        if used_fallback:
            fallback = source.fallback_link()
            logger.info(f"No recipes extracted from {source.name}, offering fallback {fallback.url}")
            candidates = [fallback]

        logger.info(
            f"Search on {source.name} finished in {context.elapsed:.2f}s: "
            f"{len(candidates)} candidates {context.sink.stats()}"
        )
        return SearchOutcome(
            success=True,
            status_message="",
            results=tuple(candidates),
            url=context.url,
            source_name=source.name,
            used_fallback=used_fallback,
        )

    # =========================================================================
    # Pipeline steps
    # =========================================================================

    def _prepare(self, context: SearchContext) -> SourceDescriptor:
        """Validate input, resolve the source and build the search URL."""
        if not context.query.strip():
            raise EmptyQueryError()

        source = self._source_lookup(context.source_index)
        context.source_name = source.name

        encoded = encode_query(context.query, singularize_first=source.singularize_query)
        context.url = source.build_url(encoded)
        return source

    async def _parse(self, source: SourceDescriptor, page: FetchedPage, context: SearchContext) -> Any:
        raw = page.content
        try:
            async with asyncio.timeout(self._extract_timeout):
                return await asyncio.to_thread(source.extractor.parse, raw, page.charset)
        except ParseError as e:
            e.context = context.error_context(size=len(raw))
            raise
        except TimeoutError as e:
            raise ParseError(
                f"Parsing did not finish within {self._extract_timeout}s",
                source=source.name,
                context=context.error_context(size=len(raw)),
            ) from e
        except Exception as e:
            raise ParseError(str(e), source=source.name, context=context.error_context(size=len(raw))) from e

    async def _extract(self, source: SourceDescriptor, document: Any, context: SearchContext) -> None:
        """Run the source's extraction; any failure leaves zero candidates."""
        try:
            async with asyncio.timeout(self._extract_timeout):
                await asyncio.to_thread(
                    source.extractor.extract,
                    document,
                    context.query,
                    context.seen,
                    context.sink,
                )
        except Exception as e:
            if isinstance(e, TimeoutError):
                message = f"Extraction did not finish within {self._extract_timeout}s"
            else:
                message = f"Extraction failed: {e}"
            context.extraction_error = ExtractionError(message, context=context.error_context())
            logger.warning(f"{source.name}: {message} (falling back to zero candidates)")
