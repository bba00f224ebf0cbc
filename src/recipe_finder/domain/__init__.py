"""Domain layer: value objects shared by every other layer."""

from __future__ import annotations

from .entities import CandidateLink, MatchKind, RankedResult, SearchOutcome

__all__ = [
    "CandidateLink",
    "MatchKind",
    "RankedResult",
    "SearchOutcome",
]
