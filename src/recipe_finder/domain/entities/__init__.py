"""
Domain Entities

Core value objects for recipe search.
"""

from __future__ import annotations

from .recipe import CandidateLink, MatchKind, RankedResult, SearchOutcome

__all__ = [
    "CandidateLink",
    "MatchKind",
    "RankedResult",
    "SearchOutcome",
]
