"""
Prompt construction for clip generation.
"""

from typing import List, Optional

from video_engine.models import GenerationOptions, Segment


def _format_seconds(seconds: float) -> str:
    return str(int(seconds)) if float(seconds).is_integer() else f"{seconds:g}"


def build_clip_prompt(
    segment: Segment,
    options: GenerationOptions,
    has_reference: bool,
    keywords: Optional[List[str]] = None,
) -> str:
    """Describe one clip for the provider.

    The continuity line is only present when a reference frame travels with
    the request.
    """
    lines = [
        "Create a high-quality video clip with the following specifications:",
        f"- Content: {segment.text}",
        f"- Aspect ratio: {options.aspect_ratio}",
        f"- Resolution: {options.resolution}",
        f"- Style: {options.style}",
        f"- Duration: {_format_seconds(options.clip_duration_seconds)} seconds",
    ]
    if has_reference:
        lines.append("- Maintain visual consistency with the reference image")
    if keywords:
        lines.append(f"- Keywords: {', '.join(keywords)}")
    return "\n".join(lines)
