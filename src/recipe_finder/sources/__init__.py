"""
Recipe Sources

Registry of the recipe sites a search can target. Sites are addressed by
their position in the catalog (the index shown by list_sources) or by name.

Architecture:
    ┌──────────────────────────────────────────────────────┐
    │        SearchOrchestrator.run_search(q, index)       │
    └──────────────────────────┬───────────────────────────┘
                               │ get_source(index)
    ┌──────────────────────────▼───────────────────────────┐
    │  SourceDescriptor: name | url_template | fallback    │
    │  ┌────────────────────────────────────────────────┐  │
    │  │ SourceExtractor: parse(bytes) / extract(doc)   │  │
    │  │        (AnchorExtractor + BeautifulSoup)       │  │
    │  └────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────┘

Usage:
    from recipe_finder.sources import find_source, get_source, list_sources

    for index, source in enumerate(list_sources()):
        print(index, source.name)
"""

from __future__ import annotations

import logging

from recipe_finder.core.exceptions import InvalidSourceError
from recipe_finder.sources.base import QUERY_PLACEHOLDER, ResultSink, SourceDescriptor, SourceExtractor
from recipe_finder.sources.catalog import RECIPE_SOURCES
from recipe_finder.sources.html import AnchorExtractor

logger = logging.getLogger(__name__)


def list_sources() -> tuple[SourceDescriptor, ...]:
    """All registered sources in display order."""
    return RECIPE_SOURCES


def source_count() -> int:
    return len(RECIPE_SOURCES)


def get_source(index: int) -> SourceDescriptor:
    """
    Look up a source by catalog index.

    Raises:
        InvalidSourceError: index is not an int inside the catalog
    """
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(RECIPE_SOURCES):
        raise InvalidSourceError(index)
    return RECIPE_SOURCES[index]


def find_source(name: str) -> tuple[int, SourceDescriptor]:
    """
    Look up a source by name (case-insensitive, exact or unique prefix).

    Returns:
        (index, descriptor)

    Raises:
        InvalidSourceError: no source, or more than one, matches
    """
    wanted = name.strip().lower()
    if not wanted:
        raise InvalidSourceError(name)

    for index, source in enumerate(RECIPE_SOURCES):
        if source.name.lower() == wanted:
            return index, source

    matches = [
        (index, source)
        for index, source in enumerate(RECIPE_SOURCES)
        if source.name.lower().startswith(wanted)
    ]
    if len(matches) == 1:
        return matches[0]

    logger.debug(f"Source lookup for {name!r} matched {len(matches)} sources")
    raise InvalidSourceError(name)


def resolve_source(selector: int | str) -> tuple[int, SourceDescriptor]:
    """Accept either a catalog index (int or numeric string) or a site name."""
    if isinstance(selector, str) and selector.strip().isdigit():
        selector = int(selector.strip())
    if isinstance(selector, int):
        return selector, get_source(selector)
    return find_source(selector)


__all__ = [
    "QUERY_PLACEHOLDER",
    "RECIPE_SOURCES",
    "AnchorExtractor",
    "ResultSink",
    "SourceDescriptor",
    "SourceExtractor",
    "find_source",
    "get_source",
    "list_sources",
    "resolve_source",
    "source_count",
]
