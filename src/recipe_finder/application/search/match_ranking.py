"""
Match Ranking Engine - filter and annotate candidates against quoted phrases.

Only a PAIRED query is ranked. Each loosened token is tested for substring
containment in the lowercased title:

    matched == total > 0   -> perfect match
    0 < matched < total    -> partial match
    otherwise              -> dropped

Input order is preserved; nothing is sorted. Substring matching means
"pie" also matches "pierogi".

Usage:
    classified = classify('"roast chicken"')
    ranked = rank(outcome.results, classified)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from recipe_finder.domain.entities import RankedResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    from recipe_finder.application.search.query_classifier import ClassifiedQuery
    from recipe_finder.domain.entities import CandidateLink

logger = logging.getLogger(__name__)


def count_matched_tokens(title: str, tokens: Iterable[str]) -> int:
    lowered = title.lower()
    return sum(1 for token in tokens if token in lowered)


def rank_candidate(candidate: CandidateLink, tokens: tuple[str, ...]) -> RankedResult | None:
    """Rank one candidate; None means it is dropped."""
    total = len(tokens)
    matched = count_matched_tokens(candidate.title, tokens)

    perfect = total > 0 and matched == total
    partial = 0 < matched < total
    if not (perfect or partial):
        return None

    return RankedResult(
        title=candidate.title,
        url=candidate.url,
        perfect_match=perfect,
        partial_match=partial,
        matched_token_count=matched,
        total_token_count=total,
    )


def rank(candidates: Iterable[CandidateLink], classified: ClassifiedQuery) -> list[RankedResult]:
    """
    Apply the perfect/partial match policy.

    Args:
        candidates: Extracted links in extraction order
        classified: Output of the query classifier for the same search

    Returns:
        RankedResult list in input order. For a non-PAIRED query every
        candidate passes through unranked; for a PAIRED query with no
        tokens every candidate is dropped.
    """
    if not classified.is_paired:
        return [RankedResult.unranked(candidate) for candidate in candidates]

    ranked: list[RankedResult] = []
    dropped = 0
    for candidate in candidates:
        result = rank_candidate(candidate, classified.tokens)
        if result is None:
            dropped += 1
            continue
        ranked.append(result)

    logger.debug(f"Ranked {len(ranked)} results for tokens {list(classified.tokens)}, dropped {dropped}")
    return ranked
