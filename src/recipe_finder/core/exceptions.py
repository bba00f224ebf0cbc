"""
Unified Exception Hierarchy for Recipe Finder.

Every failure a search can hit maps to exactly one class here, and every
class carries the human-readable status string shown on the interactive
surface.

Exception Hierarchy:
    RecipeFinderError (base)
    ├── InputError
    │   ├── EmptyQueryError
    │   └── InvalidSourceError
    ├── EncodingError
    ├── FetchError
    │   ├── NetworkError
    │   ├── FetchTimeoutError
    │   ├── HTTPStatusError
    │   ├── ResponseTooLargeError
    │   └── InsufficientMemoryError
    ├── ParseError
    ├── ExtractionError
    ├── SearchInProgressError
    └── ConfigurationError
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = auto()      # Recoverable, user can fix the input
    ERROR = auto()        # The search failed
    CRITICAL = auto()     # Cannot continue


class ErrorCategory(Enum):
    """Categories for error classification."""
    INPUT = "input"
    ENCODING = "encoding"
    FETCH = "fetch"
    PARSE = "parse"
    EXTRACTION = "extraction"
    CONCURRENCY = "concurrency"
    CONFIGURATION = "config"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Rich context attached to an error."""
    source_name: str | None = None
    url: str | None = None
    input_value: Any = None
    suggestion: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class RecipeFinderError(Exception):
    """
    Base exception for all Recipe Finder errors.

    Provides:
    - Structured error context
    - Severity classification
    - A stable taxonomy code for the SearchOutcome
    - The status line shown to the user
    """

    code: str = "Error"
    status_message: str = "Search failed."

    def __init__(
        self,
        message: str | None = None,
        *,
        context: ErrorContext | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        category: ErrorCategory = ErrorCategory.FETCH,
    ) -> None:
        super().__init__(message or self.status_message)
        self.context = context or ErrorContext()
        self.severity = severity
        self.category = category

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "error": str(self),
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.name.lower(),
            "status": self.status_message,
        }
        if self.context.source_name:
            result["source"] = self.context.source_name
        if self.context.url:
            result["url"] = self.context.url
        if self.context.suggestion:
            result["suggestion"] = self.context.suggestion
        return result

    def to_status_message(self) -> str:
        """Single line for the status label of the interactive surface."""
        return self.status_message


# =============================================================================
# Input Errors
# =============================================================================

class InputError(RecipeFinderError):
    """Base class for bad user input. Surfaced before any task is started."""

    def __init__(
        self,
        message: str | None = None,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.INPUT,
        )


class EmptyQueryError(InputError):
    """Raised when the search term is empty."""

    code = "EmptyQuery"
    status_message = "Please enter a recipe search term (like roast chicken, or chili)"

    def __init__(self, *, context: ErrorContext | None = None) -> None:
        ctx = context or ErrorContext(suggestion="Type a dish or ingredient, e.g. roast chicken")
        super().__init__("Search term cannot be empty", context=ctx)


class InvalidSourceError(InputError):
    """Raised when the selected source does not exist in the registry."""

    code = "InvalidSource"
    status_message = "Please select a valid recipe site."

    def __init__(self, source: Any, *, context: ErrorContext | None = None) -> None:
        ctx = context or ErrorContext(input_value=source)
        super().__init__(f"Unknown recipe source: {source!r}", context=ctx)


# =============================================================================
# Encoding Errors
# =============================================================================

class EncodingError(RecipeFinderError):
    """Raised when the search term cannot be percent-encoded."""

    code = "EncodingFailure"
    status_message = "Failed to encode search term."

    def __init__(self, message: str | None = None, *, context: ErrorContext | None = None) -> None:
        super().__init__(message, context=context, category=ErrorCategory.ENCODING)


# =============================================================================
# Fetch Errors
# =============================================================================

class FetchError(RecipeFinderError):
    """Base class for everything that goes wrong while downloading a page."""

    code = "FetchFailure"
    status_message = "Failed to fetch recipes."

    def __init__(self, message: str | None = None, *, context: ErrorContext | None = None) -> None:
        super().__init__(message, context=context, category=ErrorCategory.FETCH)


class NetworkError(FetchError):
    """Raised for network connectivity issues."""

    def __init__(self, message: str = "Network connection failed", *, context: ErrorContext | None = None) -> None:
        super().__init__(message, context=context)


class FetchTimeoutError(FetchError):
    """Raised when the transfer does not finish within the fetch timeout."""

    def __init__(self, timeout: float, *, context: ErrorContext | None = None) -> None:
        super().__init__(f"Request timeout after {timeout}s", context=context)
        self.timeout = timeout


class HTTPStatusError(FetchError):
    """Raised when the site answers with a non-success status code."""

    def __init__(self, status_code: int, reason: str = "", *, context: ErrorContext | None = None) -> None:
        super().__init__(f"HTTP {status_code}: {reason}".rstrip(": "), context=context)
        self.status_code = status_code


class ResponseTooLargeError(FetchError):
    """Raised when a response would exceed the transfer buffer's hard maximum."""

    def __init__(self, required: int, maximum: int, *, context: ErrorContext | None = None) -> None:
        super().__init__(
            f"Exceeded maximum allowed download size ({maximum // (1024 * 1024)} MB): "
            f"{required} bytes required",
            context=context,
        )
        self.required = required
        self.maximum = maximum


class InsufficientMemoryError(FetchError):
    """Raised when the host does not report enough free memory to grow the buffer."""

    def __init__(self, requested: int, available: int, *, context: ErrorContext | None = None) -> None:
        super().__init__(
            f"Insufficient free memory to expand buffer to {requested} bytes "
            f"(free memory: {available} bytes)",
            context=context,
        )
        self.requested = requested
        self.available = available


# =============================================================================
# Parse / Extraction Errors
# =============================================================================

class ParseError(RecipeFinderError):
    """Raised when the fetched document cannot be parsed."""

    code = "ParseFailure"
    status_message = "Failed to parse HTML from site."

    def __init__(self, message: str, *, source: str | None = None, context: ErrorContext | None = None) -> None:
        full_msg = f"Parse error ({source}): {message}" if source else f"Parse error: {message}"
        super().__init__(full_msg, context=context, category=ErrorCategory.PARSE)


class ExtractionError(RecipeFinderError):
    """
    Raised when a source's extraction capability fails or times out.

    Never reaches the user: the orchestrator treats it as zero candidates
    and falls back to the source's default page.
    """

    code = "ExtractionFailure"
    status_message = "Failed to extract recipes from site."

    def __init__(self, message: str, *, context: ErrorContext | None = None) -> None:
        super().__init__(message, context=context, category=ErrorCategory.EXTRACTION)


# =============================================================================
# Concurrency / Configuration Errors
# =============================================================================

class SearchInProgressError(RecipeFinderError):
    """Raised when a search is started while another one is still running."""

    code = "SearchInProgress"
    status_message = "A search is already running. Please wait for it to finish."

    def __init__(self, message: str | None = None, *, context: ErrorContext | None = None) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.CONCURRENCY,
        )


class ConfigurationError(RecipeFinderError):
    """Raised for configuration-related errors."""

    code = "ConfigurationError"
    status_message = "Recipe Finder is misconfigured."

    def __init__(self, message: str, *, context: ErrorContext | None = None) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
        )
