"""
Generic anchor extractor for recipe search result pages.

Most recipe sites render their search results as plain <a href> links whose
path carries a recognizable marker (/recipe/, /recipes/, ...). AnchorExtractor
is configured per site with those markers instead of hand-writing a parser
for every page layout.

Usage:
    extractor = AnchorExtractor(
        base_url="https://www.allrecipes.com",
        href_patterns=("/recipe/",),
        exclude_patterns=("/video/",),
    )
    document = extractor.parse(page.content, page.charset)
    extractor.extract(document, "chili", sink.seen, sink)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urldefrag, urljoin

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from recipe_finder.core.exceptions import ParseError
from recipe_finder.sources.text import (
    contains_case_insensitive,
    slug_from_url,
    slug_to_title,
    split_title_and_digits,
)

if TYPE_CHECKING:
    from recipe_finder.sources.base import ResultSink

logger = logging.getLogger(__name__)

HTML_PARSER = "html.parser"

# Pagination and call-to-action anchors that share the recipe path prefix
NAVIGATION_TITLES = frozenset(
    {
        "next page",
        "previous page",
        "load more",
        "see more",
        "view all",
        "view recipe",
        "+ add a recipe",
    }
)


class AnchorExtractor:
    """
    Collect recipe links from <a href> elements.

    Args:
        base_url: Site root used to resolve relative hrefs
        href_patterns: Substrings of which at least one must appear in the
            resolved URL (empty accepts every same-site link)
        exclude_patterns: Substrings that reject a URL
        require_term_in_title: Keep only titles containing the search term
        split_rating_digits: Separate trailing rating counts from titles
        default_title: Title used when neither anchor text nor slug helps
    """

    def __init__(
        self,
        base_url: str,
        href_patterns: tuple[str, ...] = (),
        exclude_patterns: tuple[str, ...] = (),
        *,
        require_term_in_title: bool = False,
        split_rating_digits: bool = False,
        default_title: str = "Recipe",
    ) -> None:
        self.base_url = base_url
        self.href_patterns = href_patterns
        self.exclude_patterns = exclude_patterns
        self.require_term_in_title = require_term_in_title
        self.split_rating_digits = split_rating_digits
        self.default_title = default_title

    def __repr__(self) -> str:
        return f"AnchorExtractor(base_url={self.base_url!r}, href_patterns={self.href_patterns!r})"

    # =========================================================================
    # Parsing
    # =========================================================================

    def parse(self, raw: bytes, encoding: str | None = None) -> BeautifulSoup:
        if not raw or not raw.strip():
            raise ParseError("Empty document", source=self.base_url)
        try:
            return BeautifulSoup(raw, HTML_PARSER, from_encoding=encoding)
        except ParserRejectedMarkup as e:
            raise ParseError(str(e), source=self.base_url) from e

    # =========================================================================
    # Extraction
    # =========================================================================

    def resolve(self, href: str) -> str | None:
        """Absolute, fragment-free http(s) URL for an href, or None to skip it."""
        href = href.strip()
        if not href or href.startswith(("#", "javascript:", "mailto:")):
            return None
        url, _ = urldefrag(urljoin(self.base_url, href))
        if not url.startswith(("http://", "https://")):
            return None
        return url

    def accepts_url(self, url: str) -> bool:
        if any(pattern in url for pattern in self.exclude_patterns):
            return False
        if self.href_patterns:
            return any(pattern in url for pattern in self.href_patterns)
        return url.startswith(self.base_url)

    def title_for(self, anchor, url: str) -> str:
        title = anchor.get_text(" ", strip=True)
        if not title:
            title = anchor.get("title") or anchor.get("aria-label") or ""
        if not title:
            title = slug_to_title(slug_from_url(url))
        if not title:
            title = self.default_title
        if self.split_rating_digits:
            title = split_title_and_digits(title)
        return title

    def extract(self, document: BeautifulSoup, search_term: str, seen: set[str], sink: ResultSink) -> None:
        term = search_term.replace('"', "").replace("'", "").strip()
        offered = 0

        for anchor in document.find_all("a", href=True):
            url = self.resolve(anchor["href"])
            if url is None or not self.accepts_url(url):
                continue

            title = self.title_for(anchor, url)
            if title.strip().lower() in NAVIGATION_TITLES:
                continue
            if self.require_term_in_title and term and not contains_case_insensitive(title, term):
                continue

            offered += 1
            sink.add(title, url)

        logger.debug(f"{self.base_url}: offered {offered} links, {len(seen)} unique so far")
