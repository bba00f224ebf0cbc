"""
UI Synchronization Channel - hands a finished search to the interactive surface.

The background search puts its SearchOutcome, exactly once, into a bounded
asyncio.Queue(maxsize=1). The controller owns the consumer side:

    submit()
      ├─ classify term, on_search_started(status)      input disabled
      ├─ supervisor.start(...)                         background task
      ├─ every tick while the queue is empty: on_progress_tick()
      ├─ drain: on_search_finished()                   input re-enabled, list cleared
      └─ render exactly one of:
           ranked results, one per tick   -> on_result_ready(result)
           fallback link                  -> on_fallback(url, label)
           status message                 -> on_search_failed(message)

Renderers are never called from the background task.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from recipe_finder.application.search.match_ranking import rank
from recipe_finder.application.search.query_classifier import QueryClassifier, QuoteStatus
from recipe_finder.core.exceptions import EmptyQueryError
from recipe_finder.domain.entities import SearchOutcome

if TYPE_CHECKING:
    from recipe_finder.application.search.query_classifier import ClassifiedQuery
    from recipe_finder.application.search.supervisor import SearchSupervisor
    from recipe_finder.domain.entities import RankedResult

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 0.1

SEARCH_STARTED_MESSAGES: dict[QuoteStatus, str] = {
    QuoteStatus.PAIRED: "Quoted searches behave differently on each website! Searching, please wait ...",
    QuoteStatus.UNPAIRED: "Searching for recipes (Note: Please check your unmatched quote marks) ...",
    QuoteStatus.NONE: "Searching for matching recipes. Please wait ...",
}

FALLBACK_LABEL = "Matching recipes not found. Click to open the main food website."
GENERIC_FAILURE_MESSAGE = "Search failed."


def status_message_for(status: QuoteStatus) -> str:
    return SEARCH_STARTED_MESSAGES[status]


class SearchRenderer(Protocol):
    """Interactive surface callbacks. All run on the event loop."""

    def on_search_started(self, status_message: str) -> None: ...

    def on_progress_tick(self) -> None: ...

    def on_search_finished(self) -> None: ...

    def on_result_ready(self, result: RankedResult) -> None: ...

    def on_search_failed(self, message: str) -> None: ...

    def on_fallback(self, url: str, label: str) -> None: ...


@dataclass
class RecordingRenderer:
    """
    Renderer that remembers every callback.

    Used by the MCP surface to turn one search into a Markdown report, and by
    tests to assert on the exact event sequence.
    """

    events: list[tuple[str, Any]] = field(default_factory=list)
    results: list[RankedResult] = field(default_factory=list)
    status: str = ""
    failure: str | None = None
    fallback: tuple[str, str] | None = None
    ticks: int = 0
    input_enabled: bool = True

    def on_search_started(self, status_message: str) -> None:
        self.status = status_message
        self.input_enabled = False
        self.events.append(("started", status_message))

    def on_progress_tick(self) -> None:
        self.ticks += 1
        self.events.append(("tick", None))

    def on_search_finished(self) -> None:
        self.input_enabled = True
        self.status = ""
        self.results.clear()
        self.events.append(("finished", None))

    def on_result_ready(self, result: RankedResult) -> None:
        self.results.append(result)
        self.events.append(("result", result))

    def on_search_failed(self, message: str) -> None:
        self.failure = message
        self.status = message
        self.events.append(("failed", message))

    def on_fallback(self, url: str, label: str) -> None:
        self.fallback = (url, label)
        self.events.append(("fallback", (url, label)))

    @property
    def event_names(self) -> list[str]:
        return [name for name, _ in self.events]


class SearchController:
    """
    Consumer side of the channel: drives one renderer for a sequence of searches.

    Args:
        supervisor: Single-slot search supervisor
        renderer: Interactive surface
        classifier: Query classifier (stateless)
        tick_interval: Seconds between progress ticks and between rendered results
    """

    def __init__(
        self,
        supervisor: SearchSupervisor,
        renderer: SearchRenderer,
        *,
        classifier: QueryClassifier | None = None,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
    ) -> None:
        self._supervisor = supervisor
        self._renderer = renderer
        self._classifier = classifier or QueryClassifier()
        self._tick_interval = tick_interval
        self._input_enabled = True

    @property
    def input_enabled(self) -> bool:
        return self._input_enabled

    async def submit(self, query: str | None, source_index: int) -> list[RankedResult]:
        """
        Run one search end to end and render it.

        Returns:
            The ranked results that were rendered (empty for fallback or failure)

        Raises:
            SearchInProgressError: A search is already running
        """
        classified = self._classifier.classify(query)

        if not classified.original.strip():
            error = EmptyQueryError()
            logger.info("Rejected empty search term")
            self._renderer.on_search_failed(error.to_status_message())
            return []

        outbox: asyncio.Queue[SearchOutcome] = asyncio.Queue(maxsize=1)
        task = self._supervisor.start(classified.original, source_index, outbox)

        logger.info(
            f"New search: {classified.original!r} on source {source_index} "
            f"(quotes: {classified.quote_status.value}, tokens: {list(classified.tokens)})"
        )
        self._input_enabled = False
        self._renderer.on_search_started(status_message_for(classified.quote_status))

        try:
            outcome = await self._drain(outbox, task)
        finally:
            self._input_enabled = True
            self._renderer.on_search_finished()

        return await self._render(outcome, classified)

    async def _drain(self, outbox: asyncio.Queue[SearchOutcome], task: asyncio.Task[SearchOutcome]) -> SearchOutcome:
        while True:
            try:
                return await asyncio.wait_for(outbox.get(), timeout=self._tick_interval)
            except TimeoutError:
                if not outbox.empty():
                    return outbox.get_nowait()
                if task.done():
                    return self._outcome_of_dead_task(task)
                self._renderer.on_progress_tick()

    @staticmethod
    def _outcome_of_dead_task(task: asyncio.Task[SearchOutcome]) -> SearchOutcome:
        """The task ended without posting an outcome; report it as a plain failure."""
        if task.cancelled():
            logger.error("Search task was cancelled before it posted an outcome")
        else:
            error = task.exception()
            if error is None:
                return task.result()
            logger.error(f"Search task crashed: {error!r}", exc_info=error)
        return SearchOutcome(success=False, status_message=GENERIC_FAILURE_MESSAGE, error="Unexpected")

    async def _render(self, outcome: SearchOutcome, classified: ClassifiedQuery) -> list[RankedResult]:
        if outcome.success and outcome.used_fallback:
            link = outcome.results[0]
            logger.info(f"Rendering fallback link for {outcome.source_name}: {link.url}")
            self._renderer.on_fallback(link.url, link.title)
            return []

        ranked = rank(outcome.results, classified) if outcome.success else []

        if ranked:
            for index, result in enumerate(ranked):
                if index:
                    await asyncio.sleep(self._tick_interval)
                logger.info(
                    f"Result {index + 1}/{len(ranked)} [{result.match_kind.value}] "
                    f"{result.matched_token_count}/{result.total_token_count}: {result.title}"
                )
                self._renderer.on_result_ready(result)
            return ranked

        if outcome.has_url:
            logger.info(f"No results to show for {outcome.source_name}, offering {outcome.url}")
            self._renderer.on_fallback(outcome.url, FALLBACK_LABEL)
            return []

        self._renderer.on_search_failed(outcome.status_message or GENERIC_FAILURE_MESSAGE)
        return []
