"""
Recipe Finder MCP Server

A Model Context Protocol server exposing quote-aware recipe search over
twenty recipe websites.

Architecture:
- tools.py: Tool implementations and Markdown formatting
- container: DI container (dependency-injector) for service lifecycle
"""

from __future__ import annotations

import logging
import sys
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from recipe_finder.config import configure_logging, load_settings
from recipe_finder.container import ApplicationContainer
from recipe_finder.core.exceptions import ConfigurationError

from .tools import register_recipe_tools

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

logger = logging.getLogger(__name__)

SERVER_INSTRUCTIONS = """\
Recipe Finder searches one recipe website at a time and returns recipe links.

1. Call list_recipe_sources to see the available sites.
2. Call search_recipes with a term and a site number or name.
3. Quote words ("roast chicken") to keep only titles containing them.
   classify_recipe_query explains how a term will be matched.

Only one search runs at a time. Results are capped at 50 links.
"""

# ── Module-level DI container ──────────────────────────────────────────────
_container: ApplicationContainer | None = None


def get_container() -> ApplicationContainer:
    """Get the application DI container.

    Raises:
        RuntimeError: If ``create_server()`` has not been called yet.
    """
    if _container is None:
        msg = "Container not initialized. Call create_server() first."
        raise RuntimeError(msg)
    return _container


def _make_lifespan(
    container: ApplicationContainer,
) -> Callable[[FastMCP[Any]], AbstractAsyncContextManager[ApplicationContainer]]:
    """Create a FastMCP lifespan handler bound to *container*."""

    @asynccontextmanager
    async def _lifespan(server: FastMCP[Any]) -> AsyncIterator[ApplicationContainer]:
        logger.info("Lifecycle: startup")
        try:
            yield container
        finally:
            await container.supervisor().shutdown()
            await container.fetcher().aclose()
            logger.info("Lifecycle: shutdown, HTTP client closed")

    return _lifespan


def create_server(
    name: str = "recipe-finder",
    settings: dict[str, Any] | None = None,
) -> FastMCP:
    """
    Create and configure the Recipe Finder MCP server.

    Args:
        name: Server name.
        settings: Container configuration (default: load_settings()).

    Returns:
        Configured FastMCP server instance.
    """
    global _container
    logger.info("Initializing Recipe Finder MCP Server...")

    settings = settings if settings is not None else load_settings()

    _container = ApplicationContainer()
    _container.config.from_dict(settings)

    mcp = FastMCP(
        name,
        instructions=SERVER_INSTRUCTIONS,
        lifespan=_make_lifespan(_container),
    )

    register_recipe_tools(
        mcp,
        _container.supervisor,
        tick_interval=settings["tick_interval"],
    )

    logger.info("Recipe Finder MCP Server initialized successfully")
    return mcp


def main() -> None:
    """Run the MCP server over stdio."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    configure_logging(settings["log_level"])

    server = create_server(settings=settings)
    server.run()


if __name__ == "__main__":
    main()
