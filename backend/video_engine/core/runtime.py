"""
Runtime environment guards and dependency checks.
"""

import os
import shutil
from typing import Dict, Iterable, List


REQUIRED_MEDIA_TOOLS = ("ffmpeg",)


def parse_bool_env(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return max(int(raw), minimum)
    except (TypeError, ValueError):
        return default


def env_float(name: str, default: float, minimum: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return max(float(raw), minimum)
    except (TypeError, ValueError):
        return default


def missing_runtime_tools(tools: Iterable[str]) -> List[str]:
    return [tool for tool in tools if shutil.which(tool) is None]


def runtime_tool_report(tools: Iterable[str] = REQUIRED_MEDIA_TOOLS) -> Dict[str, Dict[str, object]]:
    """Describe which external tools are on PATH, for the health endpoint."""
    report: Dict[str, Dict[str, object]] = {}
    for tool in tools:
        path = shutil.which(tool)
        report[tool] = {"available": path is not None, "path": path}
    return report
