"""
Gemini video provider

Calls a Gemini ``generateContent`` style endpoint over HTTP. The prompt and an
optional inline JPEG reference frame go in ``contents[0].parts``; the clip URL
comes back in ``candidates[0].content.parts[*].video.url``.
"""

from typing import Any, Dict, Optional

import httpx

from video_engine.config import ProviderSettings, VideoProviderType
from video_engine.core import get_logger

from .base import (
    GenerationSucceeded,
    InvalidProviderResponse,
    ProviderOutcome,
    ProviderRequest,
    ProviderTimeout,
    ProviderUnavailable,
    VideoProvider,
)

logger = get_logger(__name__, component="gemini_provider")


def _url_of(media: Any) -> Optional[str]:
    """``media.url`` when media is an object holding a non-empty string URL"""
    if not isinstance(media, dict):
        return None
    url = media.get("url")
    return url if isinstance(url, str) and url.strip() else None


class GeminiVideoProvider(VideoProvider):
    """Gemini HTTP provider"""

    provider_type = VideoProviderType.GEMINI

    def __init__(
        self,
        settings: ProviderSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            settings: Provider settings (API key, endpoint, timeout)
            transport: Optional httpx transport, mainly for tests
        """
        self.settings = settings
        self.api_key = settings.gemini_api_key
        self.endpoint = settings.gemini_endpoint
        self.timeout = settings.provider_timeout_seconds
        self._transport = transport

    def is_available(self) -> bool:
        return bool(self.api_key)

    def build_payload(self, request: ProviderRequest) -> Dict[str, Any]:
        parts = [{"text": request.prompt}]
        reference = request.reference_image_b64()
        if reference is not None:
            parts.append({
                "inlineData": {
                    "mimeType": request.reference_mime_type,
                    "data": reference,
                }
            })

        return {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "temperature": request.temperature,
                "topP": 0.95,
                "maxOutputTokens": 2048,
            },
        }

    @staticmethod
    def parse_response(data: Any) -> ProviderOutcome:
        if not isinstance(data, dict):
            return InvalidProviderResponse("Response body is not a JSON object")

        candidates = data.get("candidates")
        if not candidates:
            return InvalidProviderResponse("Empty response from Gemini API")
        if not isinstance(candidates, list) or not isinstance(candidates[0], dict):
            return InvalidProviderResponse("Gemini candidates are not a list of objects")

        content = candidates[0].get("content") or {}
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            return InvalidProviderResponse("Gemini candidate has no content parts")

        video_url = None
        thumbnail_url = None
        for part in parts:
            if not isinstance(part, dict):
                continue
            video_url = _url_of(part.get("video")) or video_url
            thumbnail_url = _url_of(part.get("image")) or thumbnail_url

        if not video_url:
            return InvalidProviderResponse("No video URL found in Gemini API response")

        return GenerationSucceeded(media_locator=video_url, thumbnail_locator=thumbnail_url)

    async def generate(self, request: ProviderRequest) -> ProviderOutcome:
        if not self.api_key:
            return ProviderUnavailable("GEMINI_API_KEY is not configured")

        payload = self.build_payload(request)
        logger.info(
            "Requesting clip from Gemini",
            extra={"prompt_preview": request.prompt[:60], "has_reference": request.has_reference},
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException:
            return ProviderTimeout(self.timeout)
        except httpx.HTTPStatusError as e:
            return ProviderUnavailable(f"Gemini API returned HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            return ProviderUnavailable(f"Gemini API request failed: {e}")
        except ValueError:
            return InvalidProviderResponse("Gemini API returned a non-JSON body")

        return self.parse_response(data)
