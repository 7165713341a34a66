"""
Tests for core/exceptions and core/runtime
"""

import pytest
from unittest.mock import patch

from video_engine.core import (
    VideoEngineError,
    ValidationError,
    JobNotFoundError,
    InvalidJobTransitionError,
    InfrastructureError,
    ProviderError,
    FrameExtractionError,
    PublishError,
    parse_bool_env,
    env_int,
    env_float,
    missing_runtime_tools,
    runtime_tool_report,
)


class TestExceptionHierarchy:

    @pytest.mark.parametrize("exc_type", [ProviderError, FrameExtractionError, PublishError])
    def test_collaborator_errors_are_infrastructure_errors(self, exc_type):
        assert issubclass(exc_type, InfrastructureError)
        assert issubclass(exc_type, VideoEngineError)

    def test_validation_error_is_not_infrastructure(self):
        assert not issubclass(ValidationError, InfrastructureError)

    def test_job_not_found_carries_id(self):
        err = JobNotFoundError("abc")
        assert err.job_id == "abc"
        assert "abc" in str(err)

    def test_invalid_transition_message(self):
        err = InvalidJobTransitionError("abc", "completed", "processing")
        assert err.current == "completed"
        assert err.requested == "processing"
        assert str(err) == "Job abc cannot move from completed to processing"


class TestRuntimeHelpers:

    @pytest.mark.parametrize("raw,expected", [("true", True), ("1", True), ("YES", True), ("off", False), ("", False)])
    def test_parse_bool_env(self, raw, expected):
        assert parse_bool_env(raw) is expected

    def test_parse_bool_env_default(self):
        assert parse_bool_env(None, default=True) is True

    def test_env_int_clamps_and_falls_back(self, monkeypatch):
        monkeypatch.setenv("SOME_INT", "-5")
        assert env_int("SOME_INT", 10, 1) == 1
        monkeypatch.setenv("SOME_INT", "abc")
        assert env_int("SOME_INT", 10, 1) == 10

    def test_env_float_reads_value(self, monkeypatch):
        monkeypatch.setenv("SOME_FLOAT", "2.5")
        assert env_float("SOME_FLOAT", 1.0, 0.0) == 2.5

    def test_missing_runtime_tools(self):
        with patch("video_engine.core.runtime.shutil.which", side_effect=lambda tool: None if tool == "ffmpeg" else "/usr/bin/x"):
            assert missing_runtime_tools(["ffmpeg", "ffprobe"]) == ["ffmpeg"]

    def test_runtime_tool_report(self):
        with patch("video_engine.core.runtime.shutil.which", return_value="/usr/bin/ffmpeg"):
            report = runtime_tool_report()
        assert report == {"ffmpeg": {"available": True, "path": "/usr/bin/ffmpeg"}}
