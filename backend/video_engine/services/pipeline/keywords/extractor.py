"""
Keyword extraction for prompt enhancement and fallback selection.

Lower-cases the text, strips punctuation, drops short tokens and stop words,
then ranks what remains by frequency. Ties keep first-occurrence order, so the
same text always yields the same list.
"""

import re
from collections import Counter
from typing import List

MIN_KEYWORD_LENGTH = 4

_PUNCTUATION_RE = re.compile(r"[^\w\s]")

STOP_WORDS = frozenset({
    "a", "about", "above", "after", "again", "against", "all", "also", "am", "an",
    "and", "any", "are", "as", "at", "be", "because", "been", "before", "being",
    "below", "between", "both", "but", "by", "can", "could", "did", "do", "does",
    "doing", "down", "during", "each", "even", "every", "few", "for", "from",
    "further", "had", "has", "have", "having", "he", "her", "here", "hers",
    "herself", "him", "himself", "his", "how", "i", "if", "in", "into", "is", "it",
    "its", "itself", "just", "like", "made", "make", "many", "may", "me", "might",
    "more", "most", "much", "must", "my", "myself", "never", "no", "nor", "not",
    "now", "of", "off", "on", "once", "only", "or", "other", "ought", "our",
    "ours", "ourselves", "out", "over", "own", "same", "shall", "she", "should",
    "since", "so", "some", "still", "such", "than", "that", "the", "their",
    "theirs", "them", "themselves", "then", "there", "these", "they", "this",
    "those", "through", "to", "too", "under", "until", "up", "upon", "us", "very",
    "was", "we", "were", "what", "when", "where", "which", "while", "who", "whom",
    "whose", "why", "will", "with", "within", "without", "would", "yet", "you",
    "your", "yours", "yourself", "yourselves",
})


def tokenize(text: str) -> List[str]:
    """Lower-case, strip punctuation and split on whitespace."""
    return _PUNCTUATION_RE.sub("", text.lower()).split()


def extract_keywords(text: str, max_keywords: int = 5) -> List[str]:
    """Return up to ``max_keywords`` salient terms, most frequent first."""
    if max_keywords < 1 or not text:
        return []

    tokens = [
        token for token in tokenize(text)
        if len(token) >= MIN_KEYWORD_LENGTH and token not in STOP_WORDS
    ]

    # Counter preserves first-seen order and sorted() is stable, so ties keep it
    ranked = sorted(Counter(tokens).items(), key=lambda item: item[1], reverse=True)
    return [word for word, _ in ranked[:max_keywords]]


class KeywordExtractor:
    """Object form of :func:`extract_keywords` for injection into services."""

    def __init__(self, max_keywords: int = 5):
        self.max_keywords = max_keywords

    def extract(self, text: str, max_keywords: int | None = None) -> List[str]:
        return extract_keywords(text, self.max_keywords if max_keywords is None else max_keywords)
