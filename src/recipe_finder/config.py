"""
Runtime settings read from the environment.

Environment variables:
    RECIPE_FINDER_TIMEOUT           Fetch timeout in seconds (default 15)
    RECIPE_FINDER_EXTRACT_TIMEOUT   Parse/extraction timeout in seconds (default 20)
    RECIPE_FINDER_TICK_INTERVAL     Progress/render tick in seconds (default 0.1)
    RECIPE_FINDER_USER_AGENT        User-Agent header for page fetches
    RECIPE_FINDER_LOG_LEVEL         Root log level (default INFO)
    HTTP_PROXY / HTTPS_PROXY        Read by the HTTP client itself

The result ceiling and the transfer buffer maximum are fixed constants and
cannot be configured.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any

from recipe_finder.application.search.orchestrator import DEFAULT_EXTRACT_TIMEOUT, DEFAULT_FETCH_TIMEOUT
from recipe_finder.core.exceptions import ConfigurationError, ErrorContext
from recipe_finder.infrastructure.http.client import DEFAULT_USER_AGENT
from recipe_finder.presentation.channel import DEFAULT_TICK_INTERVAL

ENV_PREFIX = "RECIPE_FINDER_"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEFAULT_SETTINGS: dict[str, Any] = {
    "timeout": DEFAULT_FETCH_TIMEOUT,
    "extract_timeout": DEFAULT_EXTRACT_TIMEOUT,
    "tick_interval": DEFAULT_TICK_INTERVAL,
    "user_agent": DEFAULT_USER_AGENT,
    "log_level": "INFO",
}


def _positive_float(env: Mapping[str, str], key: str, default: float) -> float:
    name = f"{ENV_PREFIX}{key.upper()}"
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be a number, got {raw!r}",
            context=ErrorContext(input_value=raw),
        ) from e
    if value <= 0:
        raise ConfigurationError(
            f"{name} must be positive, got {raw!r}",
            context=ErrorContext(input_value=raw),
        )
    return value


def load_settings(env: Mapping[str, str] | None = None) -> dict[str, Any]:
    """
    Build the container configuration dict from environment variables.

    Args:
        env: Mapping to read from (default: os.environ)

    Raises:
        ConfigurationError: A numeric variable is malformed or not positive,
            the user agent is not ASCII, or the log level is unknown
    """
    env = os.environ if env is None else env

    log_level = env.get(f"{ENV_PREFIX}LOG_LEVEL", "").strip().upper() or DEFAULT_SETTINGS["log_level"]
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(
            f"{ENV_PREFIX}LOG_LEVEL is not a logging level: {log_level!r}",
            context=ErrorContext(input_value=log_level),
        )

    user_agent = env.get(f"{ENV_PREFIX}USER_AGENT", "").strip() or DEFAULT_SETTINGS["user_agent"]
    if not user_agent.isascii():
        raise ConfigurationError(
            f"{ENV_PREFIX}USER_AGENT must be ASCII, got {user_agent!r}",
            context=ErrorContext(input_value=user_agent),
        )

    return {
        "timeout": _positive_float(env, "timeout", DEFAULT_SETTINGS["timeout"]),
        "extract_timeout": _positive_float(env, "extract_timeout", DEFAULT_SETTINGS["extract_timeout"]),
        "tick_interval": _positive_float(env, "tick_interval", DEFAULT_SETTINGS["tick_interval"]),
        "user_agent": user_agent,
        "log_level": log_level,
    }


def configure_logging(level: str = "INFO") -> None:
    """Root logging setup used by both entry points."""
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
