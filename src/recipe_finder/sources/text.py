"""
Title and query text helpers shared by recipe source extractors.

Recipe sites publish titles in many shapes: URL slugs, titles glued to their
rating counts, stray control bytes. These helpers turn them into display
strings. singularize() is used on queries for sites whose search engine
prefers singular nouns.
"""

from __future__ import annotations

import re

PROTECTED_RECIPE_WORDS = frozenset(
    {
        "anchovies", "bagels", "beans", "berries", "brownies", "buns", "carrots",
        "chaffles", "chips", "clams", "cookies", "crackers", "cupcakes", "dumplings",
        "eggs", "fries", "greens", "grits", "herbs", "lentils", "loaves", "meatballs",
        "muffins", "mussels", "nachos", "noodles", "nuts", "olives", "pancakes",
        "peppers", "pickles", "pies", "ribs", "sandwiches", "sausages", "scallops",
        "seeds", "shrimp", "snacks", "spaghetti", "spices", "sprouts", "sweets",
        "tacos", "treats", "vegetables", "veggies", "waffles", "wraps", "zoodles",
    }
)

# Multi-word ingredients whose plural form is part of the name
PROTECTED_RECIPE_PHRASES = frozenset(
    {
        "apple cider", "apple slices", "baking powder", "baking soda", "bread crumbs",
        "brown rice", "brown sugar", "cocoa powder", "chocolate chips", "cooking oil",
        "corn flakes", "cream cheese", "cream of tartar", "cream sauce",
        "dark chocolate", "fried oysters", "french fries", "green beans",
        "green onions", "green peas", "hot chili", "hot dogs", "hot sauce",
        "lemon zest", "mixed nuts", "olive oil", "orange juice", "potato chips",
        "red onions", "red pepper", "soy sauce", "strawberry jam", "sweet chili",
        "sweet corn", "sweet potatoes", "vanilla extract", "whole wheat",
    }
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z])(?=[A-Z])")
_WHITESPACE_RUN = re.compile(r"\s+")


def sanitize_title(text: str) -> str:
    """Drop ASCII control characters (below 32, and DEL)."""
    return "".join(ch for ch in text if ord(ch) >= 32 and ord(ch) != 127)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RUN.sub(" ", text).strip()


def capitalize_words(text: str) -> str:
    """
    Title-case a string word by word.

    The first letter after a space is uppercased and every other character
    lowercased, so "BEST roast-chicken" becomes "Best Roast-chicken".
    """
    chars: list[str] = []
    capitalize_next = True
    for ch in text:
        if capitalize_next and ch.isalpha():
            chars.append(ch.upper())
            capitalize_next = False
        else:
            chars.append(ch.lower())
        if ch == " ":
            capitalize_next = True
    return "".join(chars)


def slug_to_title(slug: str) -> str:
    """
    Convert a URL slug into spaced words.

    Handles kebab-case, snake_case, camelCase and PascalCase. Capitalization
    is left alone.

    Examples:
        cheesy-chicken-casserole -> cheesy chicken casserole
        CheesyChickenCasserole   -> Cheesy Chicken Casserole
    """
    trimmed = slug.strip()
    if any(ch in trimmed for ch in " _-"):
        return trimmed.replace("_", " ").replace("-", " ")
    return _CAMEL_BOUNDARY.sub(" ", trimmed)


def slug_from_url(url: str) -> str:
    """Last non-empty path segment of a URL, without query string or extension."""
    path = url.split("?", 1)[0].split("#", 1)[0].rstrip("/")
    slug = path.rsplit("/", 1)[-1]
    if "." in slug:
        slug = slug.rsplit(".", 1)[0]
    return slug


def split_title_and_digits(title: str) -> str:
    """
    Separate a trailing rating block from the title text.

    Examples:
        "Chicken Soup1,234 Ratings" -> "Chicken Soup - 1,234 Ratings"
        "Amazing Ribs(1,234 Ratings)" -> "Amazing Ribs (1,234 Ratings)"
        "Best Rib1234" -> unchanged (digits embedded in a word)
        "Taco Recipes" -> unchanged
    """
    end = -1
    for i in range(len(title) - 1, -1, -1):
        if title[i].isdigit():
            end = i
            break
    if end == -1:
        return title

    start = end
    while start > 0 and (title[start - 1].isdigit() or title[start - 1] == ","):
        start -= 1

    head = title[:start]
    digits = title[start:end + 1]
    tail = title[end + 1:]

    # already separated, or leading ("10 Best Chilis")
    if not head.strip() or head[-1].isspace():
        return title
    # digits glued to a word with no label after them are part of the name
    if head[-1].isalpha() and (not tail or tail[0].isalnum()):
        return title

    if head.endswith("("):
        return f"{head[:-1].rstrip()} ({digits}{tail}"
    return f"{head} - {digits}{tail}"


def singularize(text: str) -> str:
    """
    Naive English singular form for recipe words and short queries.

    Protected words and phrases are returned trimmed but otherwise unchanged.
    Otherwise "ies" becomes "y" and a single trailing "s" is dropped.
    """
    trimmed = text.strip()
    lowered = trimmed.lower()

    if lowered in PROTECTED_RECIPE_PHRASES or lowered in PROTECTED_RECIPE_WORDS:
        return trimmed
    if len(trimmed) > 3 and lowered.endswith("ies"):
        return f"{trimmed[:-3]}y"
    if len(trimmed) > 1 and lowered.endswith("s"):
        return trimmed[:-1]
    return trimmed


def clean_title(raw: str) -> str:
    """Full display clean-up applied to every accepted link title."""
    return capitalize_words(sanitize_title(collapse_whitespace(raw)))


def contains_case_insensitive(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()
