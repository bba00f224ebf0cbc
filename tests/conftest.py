"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from recipe_finder.infrastructure.http.client import FetchedPage
from recipe_finder.infrastructure.http.transfer_buffer import TransferBuffer
from recipe_finder.sources import AnchorExtractor, SourceDescriptor

# ============================================================
# HTML Fixtures
# ============================================================


def build_results_page(links: list[tuple[str, str]]) -> str:
    """Search results page with one <a> per (title, href)."""
    items = "\n".join(f'<li><a href="{href}">{title}</a></li>' for title, href in links)
    return f"""<!DOCTYPE html>
<html>
<head><title>Search results</title></head>
<body>
  <nav><a href="/about">About us</a><a href="/recipes/">All recipes</a></nav>
  <ul class="results">
{items}
  </ul>
</body>
</html>"""


def make_page(html: str | bytes, url: str = "https://www.example.com/search?q=test") -> FetchedPage:
    """FetchedPage holding *html* in a real TransferBuffer."""
    raw = html.encode("utf-8") if isinstance(html, str) else html
    buffer = TransferBuffer(initial_capacity=1024, label="Test Kitchen", free_memory_reader=lambda: 1 << 30)
    buffer.write(raw)
    return FetchedPage(url=url, status_code=200, charset="utf-8", buffer=buffer)


@pytest.fixture
def roast_chicken_html():
    """Result page for the end-to-end "roast chicken" scenario."""
    return build_results_page(
        [
            ("Roast Chicken with Lemon", "/recipe/1/roast-chicken-with-lemon/"),
            ("Chicken Soup", "/recipe/2/chicken-soup/"),
            ("Beef Stew", "/recipe/3/beef-stew/"),
        ]
    )


# ============================================================
# Source Fixtures
# ============================================================


@pytest.fixture
def test_source():
    """A catalog-style descriptor for a fictional site."""
    return SourceDescriptor(
        name="Test Kitchen",
        url_template="https://www.example.com/search?q={query}",
        extractor=AnchorExtractor("https://www.example.com", href_patterns=("/recipe/",)),
        fallback_url="https://www.example.com/recipes/",
    )


@pytest.fixture
def source_lookup(test_source):
    """Registry stand-in with a single source at index 0."""
    from recipe_finder.core.exceptions import InvalidSourceError

    def lookup(index):
        if index != 0:
            raise InvalidSourceError(index)
        return test_source

    return lookup


# ============================================================
# Fetch Fixtures
# ============================================================


@pytest.fixture
def stub_fetcher():
    """Fetcher whose fetch() is an AsyncMock; set return_value/side_effect per test."""
    fetcher = AsyncMock()
    fetcher.fetch.return_value = make_page("<html><body></body></html>")
    return fetcher
