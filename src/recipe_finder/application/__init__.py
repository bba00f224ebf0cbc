"""
Application Layer - Use Cases and Business Logic Orchestration

Contains:
- search: Query classification, search orchestration, supervision and ranking
"""

from .search import (
    ClassifiedQuery,
    QuoteStatus,
    SearchOrchestrator,
    SearchSupervisor,
    classify,
    rank,
)

__all__ = [
    "ClassifiedQuery",
    "QuoteStatus",
    "SearchOrchestrator",
    "SearchSupervisor",
    "classify",
    "rank",
]
