"""
Reference frame extraction - pull a still from a finished clip.

The still seeds the next clip's generation for visual continuity. Extraction
is best effort: any failure yields ``None`` and the next clip is generated
without a seed.
"""

import asyncio
import shutil
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import httpx

from video_engine.config import ProviderSettings
from video_engine.core import FrameExtractionError, get_logger
from video_engine.models import Clip, ReferenceFrame

logger = get_logger(__name__, component="reference_frames")

DOWNLOAD_CHUNK_SIZE = 1024 * 64


class ReferenceFrameExtractor:
    """Downloads a clip and grabs one JPEG frame with ffmpeg."""

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        offset_seconds: float = 1.0,
        ffmpeg_binary: str = "ffmpeg",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.offset_seconds = offset_seconds
        self.ffmpeg_binary = ffmpeg_binary
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: ProviderSettings) -> "ReferenceFrameExtractor":
        return cls(
            timeout_seconds=settings.frame_extraction_timeout_seconds,
            offset_seconds=settings.reference_frame_offset_seconds,
        )

    async def extract_frame(self, clip: Clip) -> Optional[ReferenceFrame]:
        if clip.is_fallback:
            return None

        try:
            image_bytes = await asyncio.wait_for(
                self._extract(clip.media_locator),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Reference frame extraction timed out for clip {clip.index}",
                extra={"clip_index": clip.index, "timeout_seconds": self.timeout_seconds},
            )
            return None
        except (FrameExtractionError, httpx.HTTPError, httpx.InvalidURL, ValueError, OSError) as e:
            logger.warning(
                f"Reference frame extraction failed for clip {clip.index}: {e}",
                extra={"clip_index": clip.index, "media_locator": clip.media_locator},
            )
            return None
        except Exception as e:
            logger.warning(
                f"Unexpected error extracting reference frame for clip {clip.index}: {e}",
                extra={"clip_index": clip.index, "media_locator": clip.media_locator},
                exc_info=True,
            )
            return None

        frame = ReferenceFrame(clip_index=clip.index, image_bytes=image_bytes)
        logger.debug(
            f"Extracted reference frame from clip {clip.index}",
            extra={"clip_index": clip.index, "frame_bytes": frame.size_bytes},
        )
        return frame

    async def _extract(self, media_locator: str) -> bytes:
        if shutil.which(self.ffmpeg_binary) is None:
            raise FrameExtractionError(f"{self.ffmpeg_binary} not found in PATH")

        with tempfile.TemporaryDirectory(prefix="reference_frame_") as tmp:
            workdir = Path(tmp)
            source = await self._materialize(media_locator, workdir)
            frame_path = workdir / "frame.jpg"
            await self._run_ffmpeg(source, frame_path)

            if not frame_path.exists() or frame_path.stat().st_size == 0:
                raise FrameExtractionError("ffmpeg produced no frame")
            return frame_path.read_bytes()

    async def _materialize(self, media_locator: str, workdir: Path) -> Path:
        """Return a local path for the clip, downloading it if it is remote."""
        parsed = urlparse(media_locator)

        if parsed.scheme == "file":
            local = Path(parsed.path)
        elif parsed.scheme in ("http", "https"):
            return await self._download(media_locator, workdir / "clip.mp4")
        else:
            local = Path(media_locator)

        if not local.is_file():
            raise FrameExtractionError(f"Clip media not found: {media_locator}")
        return local

    async def _download(self, url: str, destination: Path) -> Path:
        async with httpx.AsyncClient(
            timeout=self.timeout_seconds,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            async with client.stream("GET", url) as response:
                response.raise_for_status()
                with open(destination, "wb") as f:
                    async for chunk in response.aiter_bytes(DOWNLOAD_CHUNK_SIZE):
                        f.write(chunk)
        return destination

    async def _run_ffmpeg(self, source: Path, frame_path: Path) -> None:
        cmd = [
            self.ffmpeg_binary, "-y",
            "-ss", f"{self.offset_seconds:g}",
            "-i", str(source),
            "-frames:v", "1",
            "-q:v", "2",
            str(frame_path),
        ]
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            _, stderr = await process.communicate()
        finally:
            if process.returncode is None:
                process.kill()
                await process.wait()

        if process.returncode != 0:
            raise FrameExtractionError(
                f"ffmpeg exited with {process.returncode}: {stderr.decode(errors='replace')[:300]}"
            )
