"""
Kling AI video provider

Kling renders asynchronously: a generation task is submitted, then polled
until it succeeds or fails. Requests are signed with an HMAC-SHA256 token
built from the access key pair.
"""

import asyncio
import hashlib
import hmac
import math
import secrets
import time
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

logger = get_logger(__name__, component="kling_provider")

KLING_MODEL_NAME = "v1"


class _TaskRefused(Exception):
    pass


class _MalformedTask(Exception):
    pass


def _first_task(data: Dict[str, Any]) -> Dict[str, Any]:
    """First task object of ``data``; Kling returns either a list or a single object"""
    tasks = data.get("data")
    if isinstance(tasks, list):
        tasks = tasks[0] if tasks else None
    return tasks if isinstance(tasks, dict) else {}


def _first_video_url(task: Dict[str, Any]) -> Optional[str]:
    result = task.get("task_result")
    videos = result.get("videos") if isinstance(result, dict) else None
    if not isinstance(videos, list) or not videos or not isinstance(videos[0], dict):
        return None
    url = videos[0].get("url")
    return url if isinstance(url, str) and url.strip() else None


def build_auth_token(access_key_id: str, access_key_secret: str, timestamp: Optional[str] = None,
                     nonce: Optional[str] = None) -> str:
    """``KlingAI <id>:<timestamp>:<nonce>:<hex hmac of id+timestamp+nonce>``"""
    timestamp = timestamp or str(int(time.time() * 1000))
    nonce = nonce or secrets.token_hex(16)
    signature = hmac.new(
        access_key_secret.encode("utf-8"),
        f"{access_key_id}{timestamp}{nonce}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"KlingAI {access_key_id}:{timestamp}:{nonce}:{signature}"


class KlingVideoProvider(VideoProvider):
    """Kling task-based provider"""

    provider_type = VideoProviderType.KLING

    def __init__(
        self,
        settings: ProviderSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.base_url = settings.kling_base_url.rstrip("/")
        self.timeout = settings.provider_timeout_seconds
        self.poll_interval = settings.kling_poll_interval_seconds
        self._transport = transport

    def is_available(self) -> bool:
        return bool(self.settings.kling_access_key_id and self.settings.kling_access_key_secret)

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": build_auth_token(
                self.settings.kling_access_key_id,
                self.settings.kling_access_key_secret,
            ),
        }

    def build_task_body(self, request: ProviderRequest) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "prompt": request.prompt,
            "aspect_ratio": request.aspect_ratio,
            "duration": max(1, math.ceil(request.duration_seconds)),
            "model_name": KLING_MODEL_NAME,
            "external_task_id": f"task_{int(time.time() * 1000)}_{secrets.token_hex(4)}",
        }
        reference = request.reference_image_b64()
        if reference is not None:
            body["image"] = reference
        return body

    async def _submit(self, client: httpx.AsyncClient, request: ProviderRequest) -> str:
        route = "image2video" if request.has_reference else "text2video"
        response = await client.post(
            f"{self.base_url}/v1/videos/{route}",
            json=self.build_task_body(request),
            headers=self._headers(),
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise _MalformedTask("task submission response is not a JSON object")
        if data.get("code") != 0:
            raise _TaskRefused(data.get("message") or "task submission refused")
        task_id = _first_task(data).get("task_id")
        if not isinstance(task_id, str) or not task_id:
            raise _MalformedTask("task submission response has no task_id")
        return task_id

    async def _poll(self, client: httpx.AsyncClient, task_id: str, deadline: float) -> ProviderOutcome:
        loop = asyncio.get_running_loop()
        while True:
            response = await client.get(f"{self.base_url}/v1/tasks/{task_id}", headers=self._headers())
            response.raise_for_status()
            data = response.json()
            if not isinstance(data, dict):
                return InvalidProviderResponse("Kling status response is not a JSON object")
            if data.get("code") != 0:
                return ProviderUnavailable(f"Kling status check refused: {data.get('message')}")

            task = _first_task(data)
            if not task:
                return InvalidProviderResponse("Kling status response has no task data")

            status = task.get("task_status")
            if status == "succeed":
                url = _first_video_url(task)
                if not url:
                    return InvalidProviderResponse("Kling task succeeded without a video URL")
                return GenerationSucceeded(media_locator=url)
            if status == "failed":
                return ProviderUnavailable(f"Kling task failed: {task.get('task_status_msg', 'unknown error')}")

            if loop.time() + self.poll_interval > deadline:
                return ProviderTimeout(self.timeout)
            await asyncio.sleep(self.poll_interval)

    async def generate(self, request: ProviderRequest) -> ProviderOutcome:
        if not self.is_available():
            return ProviderUnavailable("KLING_API_KEY_ID / KLING_API_KEY_SECRET are not configured")

        deadline = asyncio.get_running_loop().time() + self.timeout
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                task_id = await self._submit(client, request)
                logger.info("Kling task submitted", extra={"task_id": task_id})
                return await self._poll(client, task_id, deadline)
        except _TaskRefused as e:
            return ProviderUnavailable(f"Kling refused the task: {e}")
        except _MalformedTask as e:
            return InvalidProviderResponse(str(e))
        except httpx.TimeoutException:
            return ProviderTimeout(self.timeout)
        except httpx.HTTPStatusError as e:
            return ProviderUnavailable(f"Kling API returned HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            return ProviderUnavailable(f"Kling API request failed: {e}")
        except ValueError:
            return InvalidProviderResponse("Kling API returned a non-JSON body")
