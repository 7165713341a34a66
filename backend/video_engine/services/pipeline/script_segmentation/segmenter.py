"""
Script segmentation - split a script into clip-sized text segments.

Paragraphs (blank-line separated) are split into sentences, and sentences are
packed into segments while the word count stays within what can be spoken in
one clip. A sentence that alone exceeds the bound becomes its own segment,
unsplit. Segments never cross paragraph boundaries.
"""

import re
from typing import List

from video_engine.config import WORDS_PER_SECOND
from video_engine.core import ValidationError, get_logger
from video_engine.models import Segment

logger = get_logger(__name__, component="script_segmenter")

_PARAGRAPH_BREAK_RE = re.compile(r"\r?\n\s*\r?\n")
_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")


def split_paragraphs(script: str) -> List[str]:
    return [p.strip() for p in _PARAGRAPH_BREAK_RE.split(script) if p.strip()]


def split_sentences(paragraph: str) -> List[str]:
    sentences = []
    for raw in _SENTENCE_END_RE.split(paragraph.strip()):
        sentence = " ".join(raw.split())
        if sentence:
            sentences.append(sentence)
    return sentences


def count_words(text: str) -> int:
    return len(text.split())


class ScriptSegmenter:
    """Turns raw script text into ordered :class:`Segment` records."""

    def __init__(self, words_per_second: float = WORDS_PER_SECOND):
        if words_per_second <= 0:
            raise ValidationError("words_per_second must be positive")
        self.words_per_second = words_per_second

    def word_budget(self, target_clip_seconds: float) -> float:
        return target_clip_seconds * self.words_per_second

    def segment(self, script: str, target_clip_seconds: float) -> List[Segment]:
        if target_clip_seconds <= 0:
            raise ValidationError("target_clip_seconds must be positive")

        budget = self.word_budget(target_clip_seconds)
        chunks: List[List[str]] = []

        for paragraph in split_paragraphs(script or ""):
            current: List[str] = []
            current_words = 0

            for sentence in split_sentences(paragraph):
                words = count_words(sentence)
                if current_words + words <= budget:
                    current.append(sentence)
                    current_words += words
                elif current:
                    chunks.append(current)
                    current = [sentence]
                    current_words = words
                else:
                    # Oversized sentence on its own
                    chunks.append([sentence])

            if current:
                chunks.append(current)

        segments = []
        for index, sentences in enumerate(chunks):
            text = " ".join(sentences)
            segments.append(Segment(index=index, text=text, estimated_word_count=count_words(text)))

        logger.debug(
            "Segmented script",
            extra={"segments": len(segments), "word_budget": budget},
        )
        return segments
