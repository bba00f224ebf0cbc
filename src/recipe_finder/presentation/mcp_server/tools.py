"""
MCP Tools for Recipe Search

Provides tools for:
- Searching one recipe site with quote-aware ranking
- Listing the supported recipe sites
- Explaining how a search term will be classified

Every tool returns Markdown. A search runs through the same SearchController
as the console surface; a RecordingRenderer collects its events.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from recipe_finder.application.search.query_classifier import QuoteStatus, classify
from recipe_finder.core.exceptions import InputError, SearchInProgressError
from recipe_finder.domain.entities import MatchKind
from recipe_finder.presentation.channel import (
    DEFAULT_TICK_INTERVAL,
    RecordingRenderer,
    SearchController,
    status_message_for,
)
from recipe_finder.sources import list_sources, resolve_source

if TYPE_CHECKING:
    from collections.abc import Callable

    from mcp.server.fastmcp import FastMCP

    from recipe_finder.application.search.supervisor import SearchSupervisor

logger = logging.getLogger(__name__)

MATCH_BADGES = {
    MatchKind.PERFECT: "✅ perfect",
    MatchKind.PARTIAL: "🔸 partial",
    MatchKind.UNRANKED: "",
}


# =============================================================================
# Markdown formatting
# =============================================================================


def format_search_report(query: str, source_name: str, renderer: RecordingRenderer) -> str:
    """Turn the recorded events of one search into Markdown."""
    lines = [f"## 🍳 Recipes for `{query}` on {source_name}", ""]

    if renderer.results:
        lines.append(f"Found **{len(renderer.results)}** recipe links.")
        lines.append("")
        for index, result in enumerate(renderer.results, 1):
            badge = MATCH_BADGES[result.match_kind]
            suffix = (
                f" ({badge}, {result.matched_token_count}/{result.total_token_count} words)"
                if badge
                else ""
            )
            lines.append(f"{index}. [{result.title}]({result.url}){suffix}")
        return "\n".join(lines)

    if renderer.fallback:
        url, label = renderer.fallback
        lines.append(f"⚠️ {label}")
        lines.append("")
        lines.append(f"- <{url}>")
        return "\n".join(lines)

    lines.append(f"❌ {renderer.failure or 'Search failed.'}")
    return "\n".join(lines)


def format_source_table() -> str:
    lines = [
        "## 📚 Supported recipe sites",
        "",
        "| # | Site | Search URL |",
        "|---|------|------------|",
    ]
    for index, source in enumerate(list_sources()):
        lines.append(f"| {index} | {source.name} | `{source.url_template}` |")
    lines.append("")
    lines.append('Pass either the number or the site name as `source` to `search_recipes`.')
    return "\n".join(lines)


def format_classification(query: str) -> str:
    classified = classify(query)
    lines = [
        f"## 🔍 Query analysis: `{query}`",
        "",
        f"- **Quote status**: {classified.quote_status.value}",
        f"- **Normalized**: `{classified.lowercase}`",
        f"- **Status shown while searching**: {status_message_for(classified.quote_status)}",
    ]
    if classified.quote_status is QuoteStatus.PAIRED:
        phrases = ", ".join(f'"{p}"' for p in classified.phrases) or "(none)"
        tokens = ", ".join(classified.tokens) or "(none)"
        lines.append(f"- **Quoted phrases**: {phrases}")
        lines.append(f"- **Match words**: {tokens}")
        if classified.tokens:
            lines.append("")
            lines.append(
                "Titles containing every match word are perfect matches, titles "
                "containing some are partial matches, the rest are hidden."
            )
        else:
            lines.append("")
            lines.append("⚠️ No match words remain, so every result would be hidden.")
    return "\n".join(lines)


# =============================================================================
# Tool registration
# =============================================================================


def register_recipe_tools(
    mcp: FastMCP,
    get_supervisor: Callable[[], SearchSupervisor],
    *,
    tick_interval: float = DEFAULT_TICK_INTERVAL,
) -> None:
    """Register recipe search MCP tools."""

    @mcp.tool()
    async def search_recipes(query: str, source: str = "0") -> str:
        """
        Search one recipe website and list matching recipe links.

        Put words in quotes ("roast chicken") to keep only titles containing
        them: titles with every quoted word are perfect matches, titles with
        some of them are partial matches. Unquoted searches list everything
        the site returned, up to 50 links.

        Args:
            query: Recipe search term, e.g. chili or "roast chicken"
            source: Recipe site number or name (see list_recipe_sources)

        Returns:
            Markdown list of recipe links, or a link to the site when nothing matched
        """
        try:
            source_index, descriptor = resolve_source(source)
        except InputError as e:
            return f"❌ {e.to_status_message()}\n\n{format_source_table()}"

        renderer = RecordingRenderer()
        controller = SearchController(get_supervisor(), renderer, tick_interval=tick_interval)
        try:
            await controller.submit(query, source_index)
        except SearchInProgressError as e:
            return f"⏳ {e.to_status_message()}"

        logger.info(f"search_recipes({query!r}, {descriptor.name}): {len(renderer.results)} results")
        return format_search_report(query, descriptor.name, renderer)

    @mcp.tool()
    async def list_recipe_sources() -> str:
        """
        List the recipe websites that search_recipes can query.

        Returns:
            Markdown table of site numbers, names and search URLs
        """
        return format_source_table()

    @mcp.tool()
    async def classify_recipe_query(query: str) -> str:
        """
        Explain how a search term will be interpreted before searching.

        Args:
            query: Recipe search term

        Returns:
            Quote status, quoted phrases and the words titles are matched against
        """
        return format_classification(query)
