import pytest

from video_engine.services.infrastructure.orchestration import reset_job_tracker


@pytest.fixture(autouse=True)
def isolated_provider_env(monkeypatch):
    """Keep tests independent of the developer's .env and real credentials"""
    for name in (
        "VIDEO_PROVIDER",
        "GEMINI_API_KEY",
        "KLING_API_KEY_ID",
        "KLING_API_KEY_SECRET",
        "GOOGLE_DRIVE_TOKEN_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    reset_job_tracker()
