"""Keyword extraction and keyword-to-category mapping."""

from .extractor import KeywordExtractor, extract_keywords, tokenize, STOP_WORDS
from .categories import (
    CATEGORY_KEYWORDS,
    DEFAULT_CATEGORY,
    FALLBACK_CATALOG,
    categorize_keywords,
    fallback_asset_for,
    match_category,
)

__all__ = [
    "KeywordExtractor",
    "extract_keywords",
    "tokenize",
    "STOP_WORDS",
    "CATEGORY_KEYWORDS",
    "DEFAULT_CATEGORY",
    "FALLBACK_CATALOG",
    "categorize_keywords",
    "fallback_asset_for",
    "match_category",
]
