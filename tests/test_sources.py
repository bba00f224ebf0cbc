"""Tests for the recipe source registry, catalog, extractor and text helpers."""

from __future__ import annotations

import pytest

from conftest import build_results_page
from recipe_finder.core.exceptions import InvalidSourceError, ParseError
from recipe_finder.sources import (
    RECIPE_SOURCES,
    AnchorExtractor,
    ResultSink,
    SourceDescriptor,
    SourceExtractor,
    find_source,
    get_source,
    list_sources,
    resolve_source,
    source_count,
)
from recipe_finder.sources.text import (
    capitalize_words,
    clean_title,
    sanitize_title,
    singularize,
    slug_from_url,
    slug_to_title,
    split_title_and_digits,
)

# =============================================================================
# Text helpers
# =============================================================================


class TestTextHelpers:
    def test_sanitize_drops_control_characters(self):
        assert sanitize_title("Chili\x00 Con\x07 Carne\x7f") == "Chili Con Carne"

    def test_capitalize_words(self):
        assert capitalize_words("BEST roast-chicken EVER") == "Best Roast-chicken Ever"

    def test_clean_title_collapses_whitespace(self):
        assert clean_title("  roast\n   chicken\t") == "Roast Chicken"

    @pytest.mark.parametrize(
        ("slug", "expected"),
        [
            ("cheesy-chicken-casserole", "cheesy chicken casserole"),
            ("cheesy_chicken_casserole", "cheesy chicken casserole"),
            ("cheesyChickenCasserole", "cheesy Chicken Casserole"),
            ("CheesyChickenCasserole", "Cheesy Chicken Casserole"),
            ("  chili  ", "chili"),
        ],
    )
    def test_slug_to_title(self, slug, expected):
        assert slug_to_title(slug) == expected

    def test_slug_from_url(self):
        assert slug_from_url("https://x.com/recipe/123/beef-stew/?utm=1") == "beef-stew"
        assert slug_from_url("https://x.com/search/label/CheesyChicken.html") == "CheesyChicken"

    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("Delicious Chicken Soup1,234 Ratings", "Delicious Chicken Soup - 1,234 Ratings"),
            ("Amazing Ribs(1,234 Ratings)", "Amazing Ribs (1,234 Ratings)"),
            ("Top 10 Chili Recipes", "Top 10 Chili Recipes"),
            ("Chili 1,234 Ratings", "Chili 1,234 Ratings"),
            ("Best Rib1234", "Best Rib1234"),
            ("Taco Recipes", "Taco Recipes"),
            ("", ""),
        ],
    )
    def test_split_title_and_digits(self, title, expected):
        assert split_title_and_digits(title) == expected

    @pytest.mark.parametrize(
        ("word", "expected"),
        [
            ("cakes", "cake"),
            ("berries", "berries"),
            ("cherries", "cherry"),
            ("Eggs", "Eggs"),
            ("olive oil", "olive oil"),
            ("Sweet Potatoes", "Sweet Potatoes"),
            ("roast chickens", "roast chicken"),
            (" s ", "s"),
            ("ies", "ie"),
            ("chili", "chili"),
        ],
    )
    def test_singularize(self, word, expected):
        assert singularize(word) == expected


# =============================================================================
# ResultSink
# =============================================================================


class TestResultSink:
    def test_dedup_by_url(self):
        sink = ResultSink(limit=50)
        assert sink.add("Chili", "https://x.com/recipe/1")
        assert not sink.add("Chili Again", "https://x.com/recipe/1")
        assert sink.count == 1
        assert sink.duplicates == 1

    def test_ceiling(self):
        sink = ResultSink(limit=3)
        accepted = [sink.add(f"Recipe {i}", f"https://x.com/recipe/{i}") for i in range(5)]
        assert accepted == [True, True, True, False, False]
        assert sink.is_full
        assert sink.stats() == {"accepted": 3, "duplicates": 0, "over_ceiling": 2}

    def test_titles_cleaned(self):
        sink = ResultSink(limit=5)
        sink("easy  BEEF stew", "https://x.com/recipe/1")
        assert sink.links[0].title == "Easy Beef Stew"

    def test_shared_seen_set(self):
        seen = {"https://x.com/recipe/1"}
        sink = ResultSink(limit=5, seen=seen)
        assert not sink.add("Dup", "https://x.com/recipe/1")
        sink.add("New", "https://x.com/recipe/2")
        assert "https://x.com/recipe/2" in seen


# =============================================================================
# AnchorExtractor
# =============================================================================


class TestAnchorExtractor:
    def _extract(self, extractor: AnchorExtractor, html: str, term: str = "chili", limit: int = 50) -> ResultSink:
        sink = ResultSink(limit=limit)
        document = extractor.parse(html.encode(), "utf-8")
        extractor.extract(document, term, sink.seen, sink)
        return sink

    def test_implements_protocol(self):
        assert isinstance(AnchorExtractor("https://x.com"), SourceExtractor)

    def test_matches_patterns_and_resolves_relative(self):
        html = build_results_page([("White Chili", "/recipe/1/white-chili/"), ("Our Team", "/team/")])
        sink = self._extract(AnchorExtractor("https://x.com", href_patterns=("/recipe/",)), html)
        assert [(link.title, link.url) for link in sink.links] == [("White Chili", "https://x.com/recipe/1/white-chili/")]

    def test_exclude_patterns(self):
        html = build_results_page([("Chili", "/recipe/1/"), ("Chili Video", "/video/recipe/2/")])
        sink = self._extract(
            AnchorExtractor("https://x.com", href_patterns=("/recipe/",), exclude_patterns=("/video/",)),
            html,
        )
        assert [link.url for link in sink.links] == ["https://x.com/recipe/1/"]

    def test_fragment_dropped_and_deduplicated(self):
        html = build_results_page([("Chili", "/recipe/1/"), ("Chili Reviews", "/recipe/1/#reviews")])
        sink = self._extract(AnchorExtractor("https://x.com", href_patterns=("/recipe/",)), html)
        assert sink.count == 1
        assert sink.duplicates == 1

    def test_title_from_slug_when_anchor_empty(self):
        html = '<html><body><a href="/recipe/7/smoky-beef-chili/"><img src="a.jpg"></a></body></html>'
        sink = self._extract(AnchorExtractor("https://x.com", href_patterns=("/recipe/",)), html)
        assert sink.links[0].title == "Smoky Beef Chili"

    def test_nested_anchor_text(self):
        html = '<html><body><a href="/recipe/1/"><div><h3>Turkey <em>Chili</em></h3></div></a></body></html>'
        sink = self._extract(AnchorExtractor("https://x.com", href_patterns=("/recipe/",)), html)
        assert sink.links[0].title == "Turkey Chili"

    def test_require_term_in_title(self):
        html = build_results_page([("Beef Chili", "/recipes/1"), ("Beef Stew", "/recipes/2")])
        extractor = AnchorExtractor("https://x.com", href_patterns=("/recipes/",), require_term_in_title=True)
        sink = self._extract(extractor, html, term='"chili"')
        assert [link.title for link in sink.links] == ["Beef Chili"]

    def test_navigation_anchors_skipped(self):
        html = build_results_page([("Next Page", "/recipe/page/2"), ("Chili", "/recipe/1")])
        sink = self._extract(AnchorExtractor("https://x.com", href_patterns=("/recipe/",)), html)
        assert [link.title for link in sink.links] == ["Chili"]

    def test_rating_digits_split(self):
        html = build_results_page([("Chili1,234 Ratings", "/recipe/1")])
        extractor = AnchorExtractor("https://x.com", href_patterns=("/recipe/",), split_rating_digits=True)
        sink = self._extract(extractor, html)
        assert sink.links[0].title == "Chili - 1,234 Ratings"

    def test_same_site_default_without_patterns(self):
        html = build_results_page([("Chili", "/chili/"), ("Elsewhere", "https://other.com/chili/")])
        sink = self._extract(AnchorExtractor("https://x.com"), html)
        assert "https://other.com/chili/" not in sink.seen
        assert "https://x.com/chili/" in sink.seen

    def test_javascript_and_mailto_skipped(self):
        html = '<a href="javascript:void(0)">x</a><a href="mailto:a@b.c">y</a><a href="#top">z</a>'
        sink = self._extract(AnchorExtractor("https://x.com"), html)
        assert sink.count == 0

    def test_empty_document_is_parse_error(self):
        with pytest.raises(ParseError):
            AnchorExtractor("https://x.com").parse(b"   ")


# =============================================================================
# Registry / catalog
# =============================================================================


class TestRegistry:
    def test_twenty_sources(self):
        assert source_count() == 20
        assert len(list_sources()) == 20
        assert list_sources() is RECIPE_SOURCES

    def test_every_template_has_one_placeholder(self):
        for source in RECIPE_SOURCES:
            assert source.url_template.count("{query}") == 1
            assert source.url_template.startswith("https://")
            assert source.fallback_link().url.startswith("https://")

    def test_first_and_last(self):
        assert get_source(0).name == "AllRecipes"
        assert get_source(19).name == "Yummly"

    @pytest.mark.parametrize("index", [-1, 20, 99, "0", None, True])
    def test_invalid_index(self, index):
        with pytest.raises(InvalidSourceError):
            get_source(index)

    def test_find_by_name(self):
        index, source = find_source("food network")
        assert (index, source.name) == (10, "Food Network")

    def test_find_by_unique_prefix(self):
        index, source = find_source("sav")
        assert source.name == "Saveur"
        assert source.singularize_query

    def test_ambiguous_prefix_rejected(self):
        with pytest.raises(InvalidSourceError):
            find_source("the")

    def test_resolve_numeric_string(self):
        index, source = resolve_source(" 3 ")
        assert (index, source.name) == (3, "Budget Bytes")

    def test_build_url(self):
        assert get_source(10).build_url("roast%20chicken") == "https://www.foodnetwork.com/search/roast%20chicken-"

    def test_fallback_link_defaults(self):
        source = get_source(1)
        link = source.fallback_link()
        assert link.title == "Click to see BBC Good Food ..."
        assert link.url == "https://www.bbcgoodfood.com/search"

    def test_descriptor_rejects_bad_template(self):
        with pytest.raises(ValueError):
            SourceDescriptor(name="Broken", url_template="https://x.com/search", extractor=AnchorExtractor("https://x.com"))

    def test_site_root_used_without_fallback_url(self):
        source = SourceDescriptor(
            name="Tiny",
            url_template="https://tiny.example/search?q={query}",
            extractor=AnchorExtractor("https://tiny.example"),
        )
        assert source.fallback_link().url == "https://tiny.example/"
