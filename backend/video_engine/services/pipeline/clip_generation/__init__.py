"""Clip generation - provider calls with keyword-driven stock fallback."""

from .generator import ClipGenerator, describe_outcome
from .prompts import build_clip_prompt

__all__ = ["ClipGenerator", "describe_outcome", "build_clip_prompt"]
