"""
Recipe Finder - quote-aware recipe search over popular recipe websites.

Searches one recipe site per request, extracts recipe links from the result
page and, for quoted search terms, keeps only titles containing the quoted
words.

Usage:
    import asyncio
    from recipe_finder import HttpFetcher, SearchOrchestrator, classify, rank

    async def main():
        async with HttpFetcher() as fetcher:
            outcome = await SearchOrchestrator(fetcher).run_search('"roast chicken"', 0)
        for result in rank(outcome.results, classify('"roast chicken"')):
            print(result.match_kind.value, result.title, result.url)

    asyncio.run(main())

Features:
    - Twenty recipe sites behind one extractor interface
    - Smart-quote aware query classification
    - Perfect / partial match ranking for quoted searches
    - Memory-aware streaming transfer buffer (32 MB hard limit)
    - Console and MCP surfaces
"""

from .application.search import (
    ClassifiedQuery,
    QuoteStatus,
    SearchOrchestrator,
    SearchSupervisor,
    classify,
    rank,
)
from .domain.entities import CandidateLink, RankedResult, SearchOutcome
from .infrastructure.http import HttpFetcher, TransferBuffer

__version__ = "0.1.0"

__all__ = [
    "CandidateLink",
    "ClassifiedQuery",
    "HttpFetcher",
    "QuoteStatus",
    "RankedResult",
    "SearchOrchestrator",
    "SearchOutcome",
    "SearchSupervisor",
    "TransferBuffer",
    "classify",
    "rank",
]
