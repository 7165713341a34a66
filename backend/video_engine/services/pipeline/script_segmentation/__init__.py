"""Script segmentation - script text to ordered clip-sized segments."""

from .segmenter import ScriptSegmenter, split_paragraphs, split_sentences, count_words

__all__ = ["ScriptSegmenter", "split_paragraphs", "split_sentences", "count_words"]
