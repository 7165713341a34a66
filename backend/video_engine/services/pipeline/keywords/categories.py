"""
Keyword categories and the stock clip catalog used for fallbacks.

Category order matters: when a keyword belongs to more than one category the
first one listed wins.
"""

from typing import Dict, Iterable, List, Optional, Tuple

DEFAULT_CATEGORY = "default"

CATEGORY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "nature": (
        "nature", "landscape", "mountain", "mountains", "ocean", "forest", "river",
        "lake", "beach", "sky", "sunset", "sunrise",
    ),
    "technology": (
        "technology", "computer", "digital", "tech", "innovation", "future", "robot",
        "ai", "artificial", "intelligence",
    ),
    "people": (
        "people", "person", "man", "woman", "child", "family", "group", "crowd", "human",
    ),
    "business": (
        "business", "office", "work", "meeting", "corporate", "professional", "company",
        "startup",
    ),
    "food": (
        "food", "meal", "restaurant", "cooking", "kitchen", "chef", "recipe", "dish",
        "cuisine",
    ),
    "travel": (
        "travel", "vacation", "trip", "journey", "adventure", "tourism", "destination",
        "explore",
    ),
    "sports": (
        "sports", "athlete", "game", "competition", "fitness", "exercise", "workout",
        "training",
    ),
}

_STOCK_BUCKET = "https://storage.googleapis.com/gtv-videos-bucket/sample"

# Canonical stock clip per category, per aspect ratio
FALLBACK_CATALOG: Dict[str, Dict[str, str]] = {
    "16:9": {
        "nature": f"{_STOCK_BUCKET}/ForBiggerEscapes.mp4",
        "technology": f"{_STOCK_BUCKET}/ForBiggerBlazes.mp4",
        "people": f"{_STOCK_BUCKET}/ForBiggerJoyrides.mp4",
        "business": f"{_STOCK_BUCKET}/ForBiggerMeltdowns.mp4",
        "food": f"{_STOCK_BUCKET}/BigBuckBunny.mp4",
        "travel": f"{_STOCK_BUCKET}/ElephantsDream.mp4",
        "sports": f"{_STOCK_BUCKET}/TearsOfSteel.mp4",
        DEFAULT_CATEGORY: f"{_STOCK_BUCKET}/Sintel.mp4",
    },
}


def categorize_keywords(keywords: Iterable[str]) -> Dict[str, bool]:
    """Flag every category that at least one keyword belongs to."""
    lowered = {keyword.lower() for keyword in keywords}
    return {
        category: any(word in lowered for word in words)
        for category, words in CATEGORY_KEYWORDS.items()
    }


def match_category(keywords: List[str]) -> str:
    """Category of the highest-ranked keyword that maps to one, else ``default``."""
    for keyword in keywords:
        word = keyword.lower()
        for category, words in CATEGORY_KEYWORDS.items():
            if word in words:
                return category
    return DEFAULT_CATEGORY


def fallback_asset_for(category: str, aspect_ratio: str) -> Optional[str]:
    """Stock clip locator for a category, or None if the aspect ratio has no catalog."""
    catalog = FALLBACK_CATALOG.get(aspect_ratio)
    if catalog is None:
        return None
    return catalog.get(category, catalog[DEFAULT_CATEGORY])
