"""Reference frame extraction for cross-clip continuity."""

from .extractor import ReferenceFrameExtractor

__all__ = ["ReferenceFrameExtractor"]
