"""
Base classes for video generation providers

Defines the request every provider receives and the closed set of outcomes a
provider call can produce. Callers decide what to do by checking which outcome
they got rather than by catching exceptions.
"""

import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Union

from video_engine.config import VideoProviderType


@dataclass(frozen=True)
class ProviderRequest:
    """Everything a provider needs to render one clip"""
    prompt: str
    aspect_ratio: str
    resolution: str
    style: str
    duration_seconds: float
    frame_rate: int = 30
    temperature: float = 0.7
    reference_image: Optional[bytes] = field(default=None, repr=False)
    reference_mime_type: str = "image/jpeg"

    @property
    def has_reference(self) -> bool:
        return self.reference_image is not None

    def reference_image_b64(self) -> Optional[str]:
        if self.reference_image is None:
            return None
        return base64.b64encode(self.reference_image).decode("ascii")


@dataclass(frozen=True)
class GenerationSucceeded:
    media_locator: str
    thumbnail_locator: Optional[str] = None


@dataclass(frozen=True)
class ProviderUnavailable:
    """Network failure, HTTP error, missing credentials or a refused task."""
    reason: str


@dataclass(frozen=True)
class ProviderTimeout:
    timeout_seconds: float


@dataclass(frozen=True)
class InvalidProviderResponse:
    """The provider answered, but without a usable media locator."""
    reason: str


ProviderOutcome = Union[GenerationSucceeded, ProviderUnavailable, ProviderTimeout, InvalidProviderResponse]


class VideoProvider(ABC):
    """Abstract base class for generation providers

    Implementations translate transport problems into outcomes. They may still
    raise :class:`~video_engine.core.ProviderError`; callers treat that the
    same as :class:`ProviderUnavailable`.
    """

    provider_type: VideoProviderType

    @abstractmethod
    async def generate(self, request: ProviderRequest) -> ProviderOutcome:
        """Render one clip for ``request``."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the provider is configured well enough to be called."""
        pass

    async def aclose(self) -> None:
        """Release any pooled connections."""
        return None
