"""
Recipe site catalog.

Order matters: the console and MCP surfaces select a site by its index in
RECIPE_SOURCES, which is also the order shown by --list-sources.
"""

from __future__ import annotations

from recipe_finder.sources.base import SourceDescriptor
from recipe_finder.sources.html import AnchorExtractor

RECIPE_SOURCES: tuple[SourceDescriptor, ...] = (
    SourceDescriptor(
        name="AllRecipes",
        url_template="https://www.allrecipes.com/search/results/?wt={query}",
        extractor=AnchorExtractor(
            "https://www.allrecipes.com",
            href_patterns=("/recipe/",),
            exclude_patterns=("/video/", "/ads/"),
            split_rating_digits=True,
        ),
        fallback_url="https://www.allrecipes.com/recipes/",
    ),
    SourceDescriptor(
        name="BBC Good Food",
        url_template="https://www.bbcgoodfood.com/search?q={query}",
        extractor=AnchorExtractor("https://www.bbcgoodfood.com", href_patterns=("/recipes/",)),
        fallback_url="https://www.bbcgoodfood.com/search",
    ),
    SourceDescriptor(
        name="Bon Appetit",
        url_template="https://www.bonappetit.com/search/{query}",
        extractor=AnchorExtractor("https://www.bonappetit.com", href_patterns=("/recipe/",)),
        fallback_url="https://www.bonappetit.com/recipes",
    ),
    SourceDescriptor(
        name="Budget Bytes",
        url_template="https://www.budgetbytes.com/?s={query}",
        extractor=AnchorExtractor(
            "https://www.budgetbytes.com",
            exclude_patterns=("/category/", "/tag/", "/page/", "?s=", "#"),
        ),
        fallback_url="https://www.budgetbytes.com/recipes",
    ),
    SourceDescriptor(
        name="Chowhound",
        url_template="https://www.chowhound.com/search?query={query}",
        extractor=AnchorExtractor(
            "https://www.chowhound.com",
            href_patterns=("/recipe", "chowhound.com/1"),
            exclude_patterns=("/category/",),
        ),
        fallback_url="https://www.chowhound.com/category/recipes/",
    ),
    SourceDescriptor(
        name="Cooks Illustrated / America's Test Kitchen",
        url_template="https://www.cooksillustrated.com/search?q={query}",
        extractor=AnchorExtractor("https://www.americastestkitchen.com", href_patterns=("/recipes/",)),
        fallback_url="https://www.americastestkitchen.com/recipes",
    ),
    SourceDescriptor(
        name="Delish",
        url_template="https://www.delish.com/search/{query}/",
        extractor=AnchorExtractor("https://www.delish.com", href_patterns=("/recipe/",)),
        fallback_url="https://www.delish.com/cooking/recipe-ideas/",
    ),
    SourceDescriptor(
        name="EatingWell",
        url_template="https://www.eatingwell.com/search/?q={query}",
        extractor=AnchorExtractor("https://www.eatingwell.com", href_patterns=("/recipe/",)),
        fallback_url="https://www.eatingwell.com/recipes/",
    ),
    SourceDescriptor(
        name="Epicurious",
        url_template="https://www.epicurious.com/search/{query}",
        extractor=AnchorExtractor(
            "https://www.epicurious.com",
            href_patterns=("/recipes/food/views/", "/recipes/"),
            default_title="Epicurious Recipe",
        ),
        fallback_url="https://www.epicurious.com/recipes-menus",
    ),
    SourceDescriptor(
        name="Food52",
        url_template="https://food52.com/search?q={query}",
        extractor=AnchorExtractor("https://food52.com", href_patterns=("food52.com/recipes/",)),
        fallback_url="https://food52.com/recipes",
    ),
    SourceDescriptor(
        name="Food Network",
        url_template="https://www.foodnetwork.com/search/{query}-",
        extractor=AnchorExtractor(
            "https://www.foodnetwork.com",
            href_patterns=("/recipes/",),
            require_term_in_title=True,
        ),
        fallback_url="https://www.foodnetwork.com/search/",
    ),
    SourceDescriptor(
        name="NY Times Cooking",
        url_template="https://cooking.nytimes.com/search?q={query}",
        extractor=AnchorExtractor("https://cooking.nytimes.com", href_patterns=("/recipes/",)),
        fallback_url="https://cooking.nytimes.com/",
    ),
    SourceDescriptor(
        name="The Kitchn",
        url_template="https://www.thekitchn.com/search?q={query}",
        extractor=AnchorExtractor(
            "https://www.thekitchn.com",
            href_patterns=("/recipe-",),
            exclude_patterns=("search",),
        ),
        fallback_url="https://www.thekitchn.com/collection/recipes",
    ),
    SourceDescriptor(
        name="Saveur",
        url_template="https://www.saveur.com/search/{query}/",
        extractor=AnchorExtractor("https://www.saveur.com", href_patterns=("/recipe/", "/article/")),
        fallback_url="https://www.saveur.com/recipes/",
        singularize_query=True,
    ),
    SourceDescriptor(
        name="Serious Eats",
        url_template="https://www.seriouseats.com/search?q={query}",
        extractor=AnchorExtractor(
            "https://www.seriouseats.com",
            href_patterns=("-recipe",),
            exclude_patterns=("/search",),
        ),
        fallback_url="https://www.seriouseats.com/recipes",
    ),
    SourceDescriptor(
        name="Simply Recipes",
        url_template="https://www.simplyrecipes.com/search?q={query}",
        extractor=AnchorExtractor("https://www.simplyrecipes.com", href_patterns=("simplyrecipes.com/recipes/",)),
        fallback_url="https://www.simplyrecipes.com/",
    ),
    SourceDescriptor(
        name="Smitten Kitchen",
        url_template="https://smittenkitchen.com/?s={query}",
        extractor=AnchorExtractor(
            "https://smittenkitchen.com",
            href_patterns=("smittenkitchen.com/20",),
            exclude_patterns=("#comments", "/page/"),
        ),
        fallback_url="https://smittenkitchen.com/recipes/",
    ),
    SourceDescriptor(
        name="The Spruce Eats",
        url_template="https://www.thespruceeats.com/search?q={query}",
        extractor=AnchorExtractor("https://www.thespruceeats.com", href_patterns=("/recipes/", "-recipe-")),
        fallback_url="https://www.thespruceeats.com/",
    ),
    SourceDescriptor(
        name="Taste of Home",
        url_template="https://www.tasteofhome.com/search/index?search={query}",
        extractor=AnchorExtractor("https://www.tasteofhome.com", href_patterns=("/recipes/",)),
        fallback_url="https://www.tasteofhome.com/recipes/",
    ),
    SourceDescriptor(
        name="Yummly",
        url_template="https://www.yummlyrecipes.com/?q={query}",
        extractor=AnchorExtractor(
            "https://www.yummlyrecipes.com",
            href_patterns=("yummlyrecipes.com/search/label/",),
            require_term_in_title=True,
        ),
        fallback_url="https://www.yummlyrecipes.com/",
        fallback_label="Click to see Yummly Recipes Search Page",
    ),
)
