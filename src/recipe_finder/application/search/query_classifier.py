"""
QueryClassifier - Quote-aware classification of recipe search terms.

A quoted search term ("roast chicken") signals that the user wants titles
containing those words. Recipe sites honour quotes inconsistently, so the
classifier records the quoting intent once per search and derives a loosened
token set the ranking engine can match titles against locally.

Architecture Decision:
    QueryClassifier is stateless and deterministic: classifying the same raw
    string twice yields equal ClassifiedQuery values. It never fails.

Example:
    >>> result = classify('"chicken soup" and "roast"')
    >>> result.quote_status
    <QuoteStatus.PAIRED: 'paired'>
    >>> result.phrases
    ('chicken soup', 'roast')
    >>> result.tokens
    ('chicken', 'soup', 'roast')
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

SINGLE_QUOTE = "'"
DOUBLE_QUOTE = '"'

# Typographic quote glyphs and their plain ASCII replacements
SMART_QUOTE_MAP = str.maketrans(
    {
        "‘": SINGLE_QUOTE,  # left single quotation mark
        "’": SINGLE_QUOTE,  # right single quotation mark
        "‚": SINGLE_QUOTE,  # single low-9 quotation mark
        "‛": SINGLE_QUOTE,  # single high-reversed-9 quotation mark
        "′": SINGLE_QUOTE,  # prime
        "“": DOUBLE_QUOTE,  # left double quotation mark
        "”": DOUBLE_QUOTE,  # right double quotation mark
        "„": DOUBLE_QUOTE,  # double low-9 quotation mark
        "‟": DOUBLE_QUOTE,  # double high-reversed-9 quotation mark
        "«": DOUBLE_QUOTE,  # left-pointing double angle quotation mark
        "»": DOUBLE_QUOTE,  # right-pointing double angle quotation mark
        "″": DOUBLE_QUOTE,  # double prime
    }
)

STOP_WORDS = frozenset(
    {"a", "an", "the", "and", "or", "with", "of", "in", "on", "at", "to", "for", "by"}
)


class QuoteStatus(Enum):
    """
    Quoting state of a search term.

    NONE: No quote characters present
    UNPAIRED: An odd number of quote marks (user probably forgot one)
    PAIRED: An even, nonzero number of ' or " marks, e.g. "chocolate cake"
    """
    NONE = "none"
    UNPAIRED = "unpaired"
    PAIRED = "paired"


@dataclass(frozen=True)
class ClassifiedQuery:
    """
    Result of query classification. Immutable; lives for one search.

    Attributes:
        original: The raw search term as typed
        normalized: The term with smart quotes replaced by ASCII quotes
        quote_status: Derived quoting state
        phrases: Quoted phrases, lowercased and trimmed (PAIRED only)
        tokens: Loosened token set, stop words removed (PAIRED only)
    """
    original: str
    normalized: str
    quote_status: QuoteStatus
    phrases: tuple[str, ...] = ()
    tokens: tuple[str, ...] = ()

    @property
    def is_paired(self) -> bool:
        return self.quote_status is QuoteStatus.PAIRED

    @property
    def is_empty(self) -> bool:
        return not self.original

    @property
    def lowercase(self) -> str:
        """Lowercase normalized form of the whole term."""
        return self.normalized.lower()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "original": self.original,
            "normalized": self.normalized,
            "quote_status": self.quote_status.value,
            "phrases": list(self.phrases),
            "tokens": list(self.tokens),
        }


def normalize_quotes(text: str) -> str:
    """Replace common typographic quote glyphs with ASCII ' and "."""
    return text.translate(SMART_QUOTE_MAP)


def detect_quote_status(text: str) -> QuoteStatus:
    """Classify a (normalized) term by counting its quote characters."""
    single_quotes = text.count(SINGLE_QUOTE)
    double_quotes = text.count(DOUBLE_QUOTE)

    if (single_quotes > 0 and single_quotes % 2 == 0) or (double_quotes > 0 and double_quotes % 2 == 0):
        return QuoteStatus.PAIRED
    if single_quotes > 0 or double_quotes > 0:
        return QuoteStatus.UNPAIRED
    return QuoteStatus.NONE


def extract_quoted_phrases(text: str) -> list[str]:
    """
    Extract quoted phrases left to right.

    Each opening quote captures up to the next occurrence of the same quote
    character. An opener without a partner stops the scan; phrases found
    before it are kept.
    """
    phrases: list[str] = []
    pos = 0
    length = len(text)

    while pos < length:
        char = text[pos]
        if char not in (SINGLE_QUOTE, DOUBLE_QUOTE):
            pos += 1
            continue

        end = text.find(char, pos + 1)
        if end == -1:
            break

        phrase = text[pos + 1:end].strip().lower()
        if phrase:
            phrases.append(phrase)
        pos = end + 1

    return phrases


def tokenize_and_filter_stop_words(phrase: str) -> list[str]:
    """Lowercase, split on spaces and drop stop words."""
    return [token for token in phrase.lower().split(" ") if token and token not in STOP_WORDS]


def classify(raw: str | None) -> ClassifiedQuery:
    """
    Classify a raw search term for quoting intent.

    Args:
        raw: The search term as typed (None is treated as empty)

    Returns:
        ClassifiedQuery with quote status, phrases and loosened tokens
    """
    original = raw or ""
    normalized = normalize_quotes(original)
    status = detect_quote_status(normalized)

    if status is not QuoteStatus.PAIRED:
        return ClassifiedQuery(original=original, normalized=normalized, quote_status=status)

    phrases = extract_quoted_phrases(normalized)
    tokens = tokenize_and_filter_stop_words(" ".join(phrases))
    return ClassifiedQuery(
        original=original,
        normalized=normalized,
        quote_status=status,
        phrases=tuple(phrases),
        tokens=tuple(tokens),
    )


class QueryClassifier:
    """Object wrapper around classify() for injection into controllers."""

    def classify(self, raw: str | None) -> ClassifiedQuery:
        return classify(raw)
