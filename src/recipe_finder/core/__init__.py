"""
Core utilities: error taxonomy and host memory probing.
"""

from .exceptions import (
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    RecipeFinderError,
)

__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ErrorSeverity",
    "RecipeFinderError",
]
