"""
HTTP API tests

The job tracker dependency is replaced with one whose provider always fails,
so every job completes with stock clips and no network is touched.
"""

import logging
import time

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from video_engine.core.logging import StructuredFormatter
from video_engine.main import _configure_logging, app
from video_engine.services.infrastructure.orchestration import JobTracker, get_job_tracker
from video_engine.services.infrastructure.providers import ProviderUnavailable
from video_engine.services.infrastructure.storage import InMemoryJobRepository
from video_engine.services.pipeline.clip_generation import ClipGenerator
from video_engine.services.pipeline.script_segmentation import ScriptSegmenter


@pytest.fixture
def tracker():
    provider = MagicMock()
    provider.generate = AsyncMock(return_value=ProviderUnavailable("offline"))
    provider.aclose = AsyncMock()
    extractor = MagicMock()
    extractor.extract_frame = AsyncMock(return_value=None)
    return JobTracker(
        repository=InMemoryJobRepository(),
        segmenter=ScriptSegmenter(),
        clip_generator=ClipGenerator(provider),
        frame_extractor=extractor,
    )


@pytest.fixture
def client(tracker):
    app.dependency_overrides[get_job_tracker] = lambda: tracker
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _wait_for_terminal(client, job_id, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        data = client.get(f"/job/{job_id}").json()
        if data["status"] in ("completed", "failed"):
            return data
        time.sleep(0.02)
    raise AssertionError(f"job {job_id} did not finish")


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "version" in response.json()


def test_health_reports_checks(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] in ("healthy", "degraded")
    assert "ffmpeg" in data["checks"]["tools"]
    assert data["checks"]["provider"] == {"name": "gemini", "configured": False}
    assert data["uptime_seconds"] >= 0


def test_request_id_is_echoed(client):
    response = client.get("/", headers={"X-Request-ID": "req-abc"})

    assert response.headers["X-Request-ID"] == "req-abc"


def test_generate_and_poll_until_completed(client):
    response = client.post("/generate", json={
        "script": "The ocean glows at dusk.\n\nA mountain stands in silence.",
        "options": {"clip_duration_seconds": 4},
    })

    assert response.status_code == 202
    job_id = response.json()["job_id"]

    data = _wait_for_terminal(client, job_id)
    assert data["status"] == "completed"
    assert data["progress"] == 100
    assert data["total_segments"] == 2
    assert [clip["is_fallback"] for clip in data["clips"]] == [True, True]
    assert [clip["fallback_category"] for clip in data["clips"]] == ["nature", "nature"]
    assert data["final_asset_locator"] == data["clips"][-1]["media_locator"]


def test_generate_rejects_empty_script(client):
    response = client.post("/generate", json={"script": ""})

    assert response.status_code == 422
    assert client.get("/jobs").json()["total"] == 0


def test_generate_rejects_unknown_option(client):
    response = client.post("/generate", json={"script": "Hello.", "options": {"speed": "fast"}})

    assert response.status_code == 422


def test_unknown_job_is_404(client):
    response = client.get("/job/does-not-exist")

    assert response.status_code == 404
    assert "does-not-exist" in response.json()["detail"]


def test_list_jobs_most_recent_first(client):
    first = client.post("/generate", json={"script": "First one."}).json()["job_id"]
    second = client.post("/generate", json={"script": "Second one."}).json()["job_id"]
    _wait_for_terminal(client, first)
    _wait_for_terminal(client, second)

    data = client.get("/jobs").json()

    assert data["total"] == 2
    assert [job["job_id"] for job in data["jobs"]] == [second, first]


def test_keywords_endpoint(client):
    response = client.post("/keywords", json={"text": "Robots and computer chips everywhere", "max_keywords": 2})

    assert response.status_code == 200
    assert response.json()["keywords"] == ["robots", "computer"]
    assert response.json()["category"] == "technology"


def test_bad_drive_token_does_not_break_requests(client, monkeypatch, tmp_path):
    app.dependency_overrides.clear()
    monkeypatch.setenv("GOOGLE_DRIVE_TOKEN_FILE", str(tmp_path / "absent.json"))

    assert get_job_tracker().publisher is not None
    assert client.get("/jobs").status_code == 200


def test_json_logs_flag_switches_formatter(monkeypatch):
    monkeypatch.setenv("JSON_LOGS", "on")

    _configure_logging()

    handlers = logging.getLogger().handlers
    assert any(isinstance(handler.formatter, StructuredFormatter) for handler in handlers)
