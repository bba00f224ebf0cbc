"""
Recipe Search Use Case

Key Components:
- QueryClassifier: Detects quoting intent and derives match tokens
- SearchOrchestrator: Fetches, parses and extracts candidate links
- SearchSupervisor: Keeps at most one search in flight
- rank: Perfect/partial match policy for quoted searches

Architecture:
    Search term
        │
        ▼
    ┌──────────────────┐
    │ QueryClassifier  │  ← NONE / UNPAIRED / PAIRED + tokens
    └────────┬─────────┘
             │
             ▼
    ┌──────────────────┐
    │ SearchSupervisor │  ← single slot, background task
    └────────┬─────────┘
             │
             ▼
    ┌──────────────────┐
    │SearchOrchestrator│  ← fetch → parse → extract → dedup → cap
    └────────┬─────────┘
             │  SearchOutcome (bounded queue)
             ▼
    ┌──────────────────┐
    │  Match Ranking   │  ← perfect / partial / dropped
    └────────┬─────────┘
             │
             ▼
    RankedResult[]
"""

from __future__ import annotations

from .match_ranking import rank
from .orchestrator import (
    DEFAULT_EXTRACT_TIMEOUT,
    DEFAULT_FETCH_TIMEOUT,
    RESULT_CEILING,
    SearchContext,
    SearchOrchestrator,
    encode_query,
)
from .query_classifier import STOP_WORDS, ClassifiedQuery, QueryClassifier, QuoteStatus, classify
from .supervisor import SearchSupervisor

__all__ = [
    "ClassifiedQuery",
    "DEFAULT_EXTRACT_TIMEOUT",
    "DEFAULT_FETCH_TIMEOUT",
    "QueryClassifier",
    "QuoteStatus",
    "RESULT_CEILING",
    "STOP_WORDS",
    "SearchContext",
    "SearchOrchestrator",
    "SearchSupervisor",
    "classify",
    "encode_query",
    "rank",
]
