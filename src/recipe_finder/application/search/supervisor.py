"""
SearchSupervisor - at most one background search at a time.

Searches run as asyncio tasks on the same loop that drives rendering. The
supervisor is a single slot: starting a search while the previous task is
still alive raises SearchInProgressError. There is no cancellation; shutdown
only waits for the running task.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from recipe_finder.core.exceptions import SearchInProgressError

if TYPE_CHECKING:
    from recipe_finder.application.search.orchestrator import SearchOrchestrator
    from recipe_finder.domain.entities import SearchOutcome

logger = logging.getLogger(__name__)


class SearchSupervisor:
    """Owns the single search slot for one interactive surface."""

    def __init__(self, orchestrator: SearchOrchestrator) -> None:
        self._orchestrator = orchestrator
        self._task: asyncio.Task[SearchOutcome] | None = None
        self._completed = 0

    @property
    def is_busy(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def completed_searches(self) -> int:
        return self._completed

    def start(
        self,
        query: str,
        source_index: int,
        outbox: asyncio.Queue[SearchOutcome] | None = None,
    ) -> asyncio.Task[SearchOutcome]:
        """
        Launch one background search.

        Args:
            query: Raw search term
            source_index: Catalog index of the target site
            outbox: Optional bounded queue that receives the outcome exactly once

        Raises:
            SearchInProgressError: The previous search has not finished
        """
        if self.is_busy:
            raise SearchInProgressError()

        self._task = asyncio.create_task(
            self._run(query, source_index, outbox),
            name=f"recipe-search:{source_index}",
        )
        return self._task

    async def _run(
        self,
        query: str,
        source_index: int,
        outbox: asyncio.Queue[SearchOutcome] | None,
    ) -> SearchOutcome:
        outcome = await self._orchestrator.run_search(query, source_index)
        self._completed += 1
        if outbox is not None:
            await outbox.put(outcome)
        return outcome

    async def wait(self) -> SearchOutcome | None:
        """Wait for the running search, if any, and return its outcome."""
        if self._task is None:
            return None
        return await self._task

    async def shutdown(self) -> None:
        """Wait for the in-flight search to finish. Never cancels it."""
        if self.is_busy:
            logger.info("Waiting for the running search to finish before shutdown")
            await self.wait()
        self._task = None
