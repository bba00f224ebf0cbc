"""
Application DI Container (dependency-injector).

Builds the fetcher, orchestrator and supervisor once per surface and lets
tests swap any of them.

Usage::

    from recipe_finder.config import load_settings
    from recipe_finder.container import ApplicationContainer

    container = ApplicationContainer()
    container.config.from_dict(load_settings())

    supervisor = container.supervisor()

    # In tests, override any provider:
    container.fetcher.override(providers.Object(fake_fetcher))
"""

from __future__ import annotations

import logging

from dependency_injector import containers, providers

logger = logging.getLogger(__name__)


def _create_fetcher(timeout: float, user_agent: str | None) -> object:
    """Lazy factory for HttpFetcher (avoids importing httpx at container import)."""
    from recipe_finder.infrastructure.http.client import HttpFetcher

    return HttpFetcher(timeout=timeout, user_agent=user_agent or None)


def _create_orchestrator(fetcher: object, timeout: float, extract_timeout: float) -> object:
    from recipe_finder.application.search.orchestrator import SearchOrchestrator

    return SearchOrchestrator(fetcher, fetch_timeout=timeout, extract_timeout=extract_timeout)


def _create_supervisor(orchestrator: object) -> object:
    from recipe_finder.application.search.supervisor import SearchSupervisor

    return SearchSupervisor(orchestrator)


class ApplicationContainer(containers.DeclarativeContainer):
    """Central DI container for Recipe Finder.

    Manages creation and lifecycle of the search services:
    - ``fetcher``: Shared httpx-backed page fetcher
    - ``orchestrator``: Fetch → parse → extract pipeline
    - ``supervisor``: Single-slot background search runner
    """

    config = providers.Configuration()

    fetcher = providers.Singleton(
        _create_fetcher,
        timeout=config.timeout,
        user_agent=config.user_agent,
    )

    orchestrator = providers.Singleton(
        _create_orchestrator,
        fetcher=fetcher,
        timeout=config.timeout,
        extract_timeout=config.extract_timeout,
    )

    supervisor = providers.Singleton(
        _create_supervisor,
        orchestrator=orchestrator,
    )


__all__ = ["ApplicationContainer"]
