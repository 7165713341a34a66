"""
Tests for ClipGenerator and prompt construction
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from video_engine.config import ProviderSettings
from video_engine.core import ProviderError, ValidationError
from video_engine.models import GenerationOptions, ReferenceFrame, Segment
from video_engine.services.infrastructure.providers import (
    GenerationSucceeded,
    InvalidProviderResponse,
    ProviderTimeout,
    ProviderUnavailable,
)
from video_engine.services.pipeline.clip_generation import ClipGenerator, build_clip_prompt, describe_outcome
from video_engine.services.pipeline.keywords import FALLBACK_CATALOG

NATURE_ASSET = FALLBACK_CATALOG["16:9"]["nature"]
FOOD_ASSET = FALLBACK_CATALOG["16:9"]["food"]


def _provider(**kwargs):
    provider = MagicMock()
    provider.generate = AsyncMock(**kwargs)
    provider.aclose = AsyncMock()
    return provider


@pytest.fixture
def segment():
    return Segment(index=1, text="The ocean meets the mountain at dawn.", estimated_word_count=7)


@pytest.fixture
def options():
    return GenerationOptions()


class TestBuildClipPrompt:

    def test_prompt_lines(self, segment, options):
        prompt = build_clip_prompt(segment, options, has_reference=False)

        assert prompt.splitlines() == [
            "Create a high-quality video clip with the following specifications:",
            "- Content: The ocean meets the mountain at dawn.",
            "- Aspect ratio: 16:9",
            "- Resolution: 1920x1080",
            "- Style: cinematic",
            "- Duration: 4 seconds",
        ]

    def test_reference_and_keywords_lines(self, segment, options):
        prompt = build_clip_prompt(segment, options, has_reference=True, keywords=["ocean", "mountain"])

        assert "- Maintain visual consistency with the reference image" in prompt
        assert prompt.endswith("- Keywords: ocean, mountain")


class TestClipGenerator:

    @pytest.mark.asyncio
    async def test_success_returns_provider_clip(self, segment, options):
        provider = _provider(return_value=GenerationSucceeded("https://cdn/clip1.mp4", "https://cdn/clip1.jpg"))
        generator = ClipGenerator(provider)

        clip = await generator.generate(segment, options)

        assert clip.is_fallback is False
        assert clip.media_locator == "https://cdn/clip1.mp4"
        assert clip.thumbnail_locator == "https://cdn/clip1.jpg"
        assert clip.index == segment.index
        assert clip.source_segment == segment
        assert clip.aspect_ratio == "16:9"

    @pytest.mark.asyncio
    async def test_reference_frame_is_forwarded(self, segment, options):
        provider = _provider(return_value=GenerationSucceeded("https://cdn/clip.mp4"))
        frame = ReferenceFrame(clip_index=0, image_bytes=b"jpeg-bytes")

        await ClipGenerator(provider).generate(segment, options, frame)

        request = provider.generate.call_args.args[0]
        assert request.reference_image == b"jpeg-bytes"
        assert "reference image" in request.prompt

    @pytest.mark.asyncio
    async def test_keywords_only_when_prompt_enhancement_enabled(self, segment):
        provider = _provider(return_value=GenerationSucceeded("https://cdn/clip.mp4"))
        generator = ClipGenerator(provider)

        await generator.generate(segment, GenerationOptions(enhance_prompt=False))
        plain = provider.generate.call_args.args[0]
        await generator.generate(segment, GenerationOptions())
        enhanced = provider.generate.call_args.args[0]

        assert "Keywords:" not in plain.prompt
        assert "- Keywords: ocean, meets, mountain, dawn" in enhanced.prompt
        assert plain.reference_image is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("outcome", [
        ProviderUnavailable("HTTP 503"),
        ProviderTimeout(60),
        InvalidProviderResponse("no video url"),
        GenerationSucceeded(""),
    ])
    async def test_failures_fall_back_to_category_asset(self, segment, options, outcome):
        clip = await ClipGenerator(_provider(return_value=outcome)).generate(segment, options)

        assert clip.is_fallback is True
        assert clip.fallback_category == "nature"
        assert clip.media_locator == NATURE_ASSET
        assert clip.source_segment == segment

    @pytest.mark.asyncio
    async def test_provider_exception_falls_back(self, options):
        segment = Segment(index=0, text="A chef cooking in the kitchen.", estimated_word_count=6)
        provider = _provider(side_effect=ProviderError("connection refused"))

        clip = await ClipGenerator(provider).generate(segment, options)

        assert clip.is_fallback is True
        assert clip.media_locator == FOOD_ASSET

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [AttributeError("'str' object has no attribute 'get'"), KeyError(0), RuntimeError("boom")])
    async def test_unexpected_provider_error_falls_back(self, segment, options, error):
        clip = await ClipGenerator(_provider(side_effect=error)).generate(segment, options)

        assert clip.is_fallback is True
        assert clip.media_locator == NATURE_ASSET

    @pytest.mark.asyncio
    @pytest.mark.parametrize("locator", [None, 42, {"url": "https://cdn.test/clip.mp4"}, "   "])
    async def test_unusable_locator_falls_back(self, segment, options, locator):
        clip = await ClipGenerator(_provider(return_value=GenerationSucceeded(locator))).generate(segment, options)

        assert clip.is_fallback is True
        assert clip.fallback_category == "nature"

    @pytest.mark.asyncio
    async def test_provider_timeout_is_enforced(self, segment, options):
        async def slow(_request):
            await asyncio.sleep(5)

        provider = MagicMock()
        provider.generate = slow
        generator = ClipGenerator(provider, ProviderSettings(provider_timeout_seconds=0.05))

        clip = await generator.generate(segment, options)

        assert clip.is_fallback is True

    @pytest.mark.asyncio
    async def test_fallback_is_deterministic(self, segment, options):
        generator = ClipGenerator(_provider(return_value=ProviderUnavailable("down")))

        first = await generator.generate(segment, options)
        second = await generator.generate(segment, options)

        assert (first.fallback_category, first.media_locator) == (second.fallback_category, second.media_locator)

    @pytest.mark.asyncio
    async def test_unrelated_text_uses_default_asset(self, options):
        segment = Segment(index=0, text="Quiet thoughts linger.", estimated_word_count=3)

        clip = await ClipGenerator(_provider(return_value=ProviderUnavailable("down"))).generate(segment, options)

        assert clip.fallback_category == "default"
        assert clip.media_locator == FALLBACK_CATALOG["16:9"]["default"]

    @pytest.mark.asyncio
    async def test_malformed_options_raise(self, segment):
        generator = ClipGenerator(_provider(return_value=ProviderUnavailable("down")))

        with pytest.raises(ValidationError):
            await generator.generate(segment, {"aspect_ratio": "16:9"})


def test_describe_outcome():
    assert describe_outcome(ProviderTimeout(60)) == "provider timed out after 60s"
    assert describe_outcome(ProviderUnavailable("HTTP 500")) == "provider unavailable: HTTP 500"
    assert describe_outcome(GenerationSucceeded("x")) == "ok"
