"""
Source capability contracts.

Every recipe site plugs into the search pipeline through two pieces:

- SourceExtractor: turns fetched bytes into a document and walks it for
  candidate links
- SourceDescriptor: static metadata (display name, URL template, fallback
  page) plus the extractor instance

Extractors never build result lists themselves. They hand each candidate to
the per-search ResultSink, which owns de-duplication and the result ceiling.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlsplit

from recipe_finder.domain.entities import CandidateLink
from recipe_finder.sources.text import clean_title

logger = logging.getLogger(__name__)

QUERY_PLACEHOLDER = "{query}"


class ResultSink:
    """
    Collects candidate links for one search.

    A link is accepted only if its URL has not been seen and the ceiling has
    not been reached. Titles are cleaned for display on the way in.

    Args:
        limit: Maximum number of accepted links for the whole search
        seen: Dedup set; shared with the caller so extractors can consult it
    """

    def __init__(self, limit: int, seen: set[str] | None = None) -> None:
        self.limit = limit
        self.seen: set[str] = seen if seen is not None else set()
        self.links: list[CandidateLink] = []
        self.duplicates = 0
        self.over_ceiling = 0

    @property
    def count(self) -> int:
        return len(self.links)

    @property
    def is_full(self) -> bool:
        return len(self.links) >= self.limit

    def add(self, title: str, url: str) -> bool:
        """Offer one candidate; returns True if it was accepted."""
        if self.is_full:
            self.over_ceiling += 1
            return False
        if url in self.seen:
            self.duplicates += 1
            return False

        self.seen.add(url)
        self.links.append(CandidateLink(title=clean_title(title), url=url))
        return True

    __call__ = add

    def stats(self) -> dict[str, int]:
        return {
            "accepted": len(self.links),
            "duplicates": self.duplicates,
            "over_ceiling": self.over_ceiling,
        }


@runtime_checkable
class SourceExtractor(Protocol):
    """Parsing and extraction capability of one recipe site."""

    def parse(self, raw: bytes, encoding: str | None = None) -> Any:
        """Parse fetched bytes into a document. Raises ParseError on malformed input."""
        ...

    def extract(self, document: Any, search_term: str, seen: set[str], sink: ResultSink) -> None:
        """Walk the document and offer candidate links to the sink."""
        ...


@dataclass(frozen=True)
class SourceDescriptor:
    """
    Static metadata for one recipe site.

    Attributes:
        name: Display name
        url_template: Search URL with a single {query} placeholder
        extractor: Parsing and extraction capability
        fallback_url: Page offered when nothing was extracted
        fallback_label: Link text for the fallback page
        singularize_query: Singularize the term before encoding it
    """

    name: str
    url_template: str
    extractor: SourceExtractor = field(compare=False, repr=False)
    fallback_url: str = ""
    fallback_label: str = ""
    singularize_query: bool = False

    def __post_init__(self) -> None:
        if self.url_template.count(QUERY_PLACEHOLDER) != 1:
            raise ValueError(f"{self.name}: url_template needs exactly one {QUERY_PLACEHOLDER} placeholder")

    def build_url(self, encoded_query: str) -> str:
        return self.url_template.replace(QUERY_PLACEHOLDER, encoded_query)

    @property
    def site_root(self) -> str:
        parts = urlsplit(self.url_template)
        return f"{parts.scheme}://{parts.netloc}/"

    def fallback_link(self) -> CandidateLink:
        """The single link offered when extraction produced nothing."""
        url = self.fallback_url or self.site_root
        label = self.fallback_label or f"Click to see {self.name} ..."
        return CandidateLink(title=label, url=url)
