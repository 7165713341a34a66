"""
Clip generation with deterministic stock fallback.

Each segment is sent to the configured provider. Whatever goes wrong on the
provider side (network, timeout, a response without a video) is folded into a
provider outcome, and every outcome other than success is answered with a
stock clip chosen from the segment's keywords. The job always gets a clip.
"""

import asyncio
from typing import Optional

from video_engine.config import FALLBACK_KEYWORD_LIMIT, ProviderSettings
from video_engine.core import ProviderError, ValidationError, get_logger
from video_engine.models import Clip, GenerationOptions, ReferenceFrame, Segment
from video_engine.services.infrastructure.providers import (
    GenerationSucceeded,
    InvalidProviderResponse,
    ProviderOutcome,
    ProviderRequest,
    ProviderTimeout,
    ProviderUnavailable,
    VideoProvider,
)
from video_engine.services.pipeline.keywords import (
    FALLBACK_CATALOG,
    extract_keywords,
    fallback_asset_for,
    match_category,
)

from .prompts import build_clip_prompt

logger = get_logger(__name__, component="clip_generator")


def _usable_locator(locator: object) -> bool:
    return isinstance(locator, str) and bool(locator.strip())


def describe_outcome(outcome: ProviderOutcome) -> str:
    if isinstance(outcome, ProviderTimeout):
        return f"provider timed out after {outcome.timeout_seconds:g}s"
    if isinstance(outcome, ProviderUnavailable):
        return f"provider unavailable: {outcome.reason}"
    if isinstance(outcome, InvalidProviderResponse):
        return f"invalid provider response: {outcome.reason}"
    return "ok"


class ClipGenerator:
    """Generates one clip per segment, substituting stock footage on failure."""

    def __init__(
        self,
        provider: VideoProvider,
        settings: Optional[ProviderSettings] = None,
        keyword_limit: int = FALLBACK_KEYWORD_LIMIT,
    ):
        self.provider = provider
        self.settings = settings or ProviderSettings()
        self.keyword_limit = keyword_limit

    def _validate_options(self, options: GenerationOptions) -> None:
        if not isinstance(options, GenerationOptions):
            raise ValidationError(f"Expected GenerationOptions, got {type(options).__name__}")
        if options.aspect_ratio not in FALLBACK_CATALOG:
            raise ValidationError(f"No fallback catalog for aspect ratio {options.aspect_ratio}")

    def build_request(
        self,
        segment: Segment,
        options: GenerationOptions,
        previous_reference_frame: Optional[ReferenceFrame],
    ) -> ProviderRequest:
        keywords = (
            extract_keywords(segment.text, self.keyword_limit) if options.enhance_prompt else None
        )

        if previous_reference_frame is None:
            reference_image = None
            reference_mime_type = "image/jpeg"
        else:
            reference_image = previous_reference_frame.image_bytes
            reference_mime_type = previous_reference_frame.mime_type

        return ProviderRequest(
            prompt=build_clip_prompt(segment, options, reference_image is not None, keywords),
            aspect_ratio=options.aspect_ratio,
            resolution=options.resolution,
            style=options.style,
            duration_seconds=options.clip_duration_seconds,
            frame_rate=self.settings.frame_rate,
            temperature=self.settings.temperature,
            reference_image=reference_image,
            reference_mime_type=reference_mime_type,
        )

    async def call_provider(self, request: ProviderRequest) -> ProviderOutcome:
        """Run the provider under its own timeout and reduce failures to outcomes."""
        timeout = self.settings.provider_timeout_seconds
        try:
            return await asyncio.wait_for(self.provider.generate(request), timeout=timeout)
        except asyncio.TimeoutError:
            return ProviderTimeout(timeout)
        except ProviderError as e:
            return ProviderUnavailable(str(e))
        except Exception as e:
            logger.error(
                "Provider raised unexpectedly",
                extra={"provider": type(self.provider).__name__, "error": str(e)},
                exc_info=True,
            )
            return InvalidProviderResponse(f"{type(e).__name__}: {e}")

    def fallback_clip(self, segment: Segment, options: GenerationOptions) -> Clip:
        """Stock clip for a segment; the same text always maps to the same asset."""
        keywords = extract_keywords(segment.text, self.keyword_limit)
        category = match_category(keywords)
        return Clip(
            index=segment.index,
            source_segment=segment,
            media_locator=fallback_asset_for(category, options.aspect_ratio),
            aspect_ratio=options.aspect_ratio,
            is_fallback=True,
            fallback_category=category,
        )

    async def generate(
        self,
        segment: Segment,
        options: GenerationOptions,
        previous_reference_frame: Optional[ReferenceFrame] = None,
    ) -> Clip:
        self._validate_options(options)

        request = self.build_request(segment, options, previous_reference_frame)
        outcome = await self.call_provider(request)

        if isinstance(outcome, GenerationSucceeded) and _usable_locator(outcome.media_locator):
            logger.info(
                f"Generated clip {segment.index}",
                extra={"clip_index": segment.index, "seeded": request.has_reference},
            )
            return Clip(
                index=segment.index,
                source_segment=segment,
                media_locator=outcome.media_locator,
                thumbnail_locator=outcome.thumbnail_locator or None,
                aspect_ratio=options.aspect_ratio,
                is_fallback=False,
            )

        if isinstance(outcome, GenerationSucceeded):
            outcome = InvalidProviderResponse("empty media locator")

        clip = self.fallback_clip(segment, options)
        logger.warning(
            f"Using fallback clip for segment {segment.index}",
            extra={
                "clip_index": segment.index,
                "reason": describe_outcome(outcome),
                "fallback_category": clip.fallback_category,
            },
        )
        return clip
