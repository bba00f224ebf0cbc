"""
Domain Entities: CandidateLink, RankedResult, SearchOutcome

Plain value objects passed between the orchestrator, the ranking engine and
the interactive surface. No I/O, no source-specific logic.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any


class MatchKind(str, Enum):
    """How a result relates to the quoted phrases of the query."""

    PERFECT = "perfect"
    PARTIAL = "partial"
    UNRANKED = "unranked"  # query had no paired quotes


@dataclass(frozen=True)
class CandidateLink:
    """A recipe link extracted from a source page, before ranking."""

    title: str
    url: str


@dataclass(frozen=True)
class RankedResult:
    """
    A candidate annotated with its match against the quoted phrases.

    perfect_match and partial_match are never both true. Unranked results
    (unquoted query) carry zero counts and both flags false.
    """

    title: str
    url: str
    perfect_match: bool = False
    partial_match: bool = False
    matched_token_count: int = 0
    total_token_count: int = 0

    @classmethod
    def unranked(cls, candidate: CandidateLink) -> RankedResult:
        return cls(title=candidate.title, url=candidate.url)

    @property
    def match_kind(self) -> MatchKind:
        if self.perfect_match:
            return MatchKind.PERFECT
        if self.partial_match:
            return MatchKind.PARTIAL
        return MatchKind.UNRANKED

    def to_dict(self) -> dict[str, Any]:
        result = dataclasses.asdict(self)
        result["match_kind"] = self.match_kind.value
        return result


@dataclass(frozen=True)
class SearchOutcome:
    """
    What one background search hands back to the interactive surface.

    Attributes:
        success: False for any hard failure
        status_message: Human-readable status line
        results: Candidates in extraction order (unranked)
        url: The constructed search URL, kept on failure when known
        source_name: Display name of the searched source
        error: Taxonomy code of the failure (None on success)
        used_fallback: results hold only the synthesized fallback link
    """

    success: bool
    status_message: str
    results: tuple[CandidateLink, ...] = ()
    url: str | None = None
    source_name: str | None = None
    error: str | None = None
    used_fallback: bool = False

    @property
    def has_url(self) -> bool:
        return bool(self.url)
