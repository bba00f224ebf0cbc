"""
Recipe Finder console surface.

Usage:
    recipe-finder roast chicken --source "Budget Bytes"
    recipe-finder '"roast chicken"' --source 0
    recipe-finder --list-sources
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import TYPE_CHECKING, TextIO

from recipe_finder import __version__
from recipe_finder.config import configure_logging, load_settings
from recipe_finder.container import ApplicationContainer
from recipe_finder.core.exceptions import ConfigurationError, InputError
from recipe_finder.domain.entities import MatchKind
from recipe_finder.presentation.channel import SearchController
from recipe_finder.sources import list_sources, resolve_source

if TYPE_CHECKING:
    from recipe_finder.domain.entities import RankedResult

logger = logging.getLogger(__name__)

MATCH_MARKERS = {
    MatchKind.PERFECT: "[*]",
    MatchKind.PARTIAL: "[~]",
    MatchKind.UNRANKED: "[ ]",
}

EXIT_OK = 0
EXIT_NO_RESULTS = 1
EXIT_USAGE = 2


class ConsoleRenderer:
    """Prints search progress and results to text streams."""

    def __init__(self, out: TextIO | None = None, progress: TextIO | None = None) -> None:
        self.out = out or sys.stdout
        self.progress = progress or sys.stderr
        self.rendered = 0
        self.failed = False
        self.fell_back = False
        self._ticking = False

    def on_search_started(self, status_message: str) -> None:
        print(status_message, file=self.progress, flush=True)

    def on_progress_tick(self) -> None:
        self._ticking = True
        print(".", end="", file=self.progress, flush=True)

    def on_search_finished(self) -> None:
        if self._ticking:
            print(file=self.progress, flush=True)
            self._ticking = False

    def on_result_ready(self, result: RankedResult) -> None:
        self.rendered += 1
        marker = MATCH_MARKERS[result.match_kind]
        print(f"{self.rendered:3d}. {marker} {result.title}", file=self.out)
        print(f"          {result.url}", file=self.out, flush=True)

    def on_search_failed(self, message: str) -> None:
        self.failed = True
        print(message, file=self.progress, flush=True)

    def on_fallback(self, url: str, label: str) -> None:
        self.fell_back = True
        print(label, file=self.out)
        print(f"     {url}", file=self.out, flush=True)


def format_source_list() -> str:
    lines = [f"{index:2d}  {source.name}" for index, source in enumerate(list_sources())]
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recipe-finder",
        description="Search one recipe website and list matching recipe links.",
        epilog='Quote words ("roast chicken") to keep only titles containing them.',
    )
    parser.add_argument("query", nargs="*", help="Recipe search term")
    parser.add_argument(
        "-s",
        "--source",
        default="0",
        help="Recipe site by index or name (default: 0, see --list-sources)",
    )
    parser.add_argument("--list-sources", action="store_true", help="List the supported recipe sites and exit")
    parser.add_argument("--log-level", default=None, help="Log level (default: RECIPE_FINDER_LOG_LEVEL or INFO)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def run_search(
    query: str,
    source_index: int,
    settings: dict,
    renderer: ConsoleRenderer,
    container: ApplicationContainer | None = None,
) -> list[RankedResult]:
    """Wire a container for one console search and render it."""
    if container is None:
        container = ApplicationContainer()
        container.config.from_dict(settings)

    fetcher = container.fetcher()
    controller = SearchController(
        container.supervisor(),
        renderer,
        tick_interval=settings["tick_interval"],
    )
    try:
        return await controller.submit(query, source_index)
    finally:
        await container.supervisor().shutdown()
        await fetcher.aclose()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_sources:
        print(format_source_list())
        return EXIT_OK

    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE

    configure_logging((args.log_level or settings["log_level"]).upper())

    try:
        source_index, source = resolve_source(args.source)
    except InputError as e:
        print(e.to_status_message(), file=sys.stderr)
        print(format_source_list(), file=sys.stderr)
        return EXIT_USAGE

    query = " ".join(args.query)
    logger.info(f"Console search on {source.name}")
    renderer = ConsoleRenderer()

    try:
        results = asyncio.run(run_search(query, source_index, settings, renderer))
    except KeyboardInterrupt:
        return 130

    if results or renderer.fell_back:
        return EXIT_OK
    return EXIT_USAGE if renderer.failed and not query.strip() else EXIT_NO_RESULTS


if __name__ == "__main__":
    sys.exit(main())
