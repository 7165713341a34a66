"""
Structured logging configuration

One call to ``setup_logging`` at process start, then ``get_logger(__name__,
component=...)`` everywhere else. Console output is colour text by default or
JSON lines with ``JSON_LOGS=true``; the optional log file is always JSON.

Records carry the current request and job ids (set through context vars), so a
job's provider calls, fallbacks and publish attempts can be traced from one id.
Credentials that end up in ``extra`` are masked before they are written.
"""

import json
import logging
import os
import sys
import time
from contextvars import ContextVar
from datetime import datetime, UTC
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

SENSITIVE_KEY_TOKENS = ("password", "secret", "token", "api_key", "apikey", "authorization", "key_id")
REDACTED = "***REDACTED***"

# Chatty client libraries and the level they are capped at
NOISY_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "asyncio": logging.WARNING,
    "googleapiclient.discovery_cache": logging.ERROR,
}

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
job_id_var: ContextVar[Optional[str]] = ContextVar("job_id", default=None)

# Attributes every LogRecord has; anything else on a record came from ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}
_CORRELATION_KEYS = ("request_id", "job_id")


def _correlation() -> Dict[str, str]:
    ids = {"request_id": request_id_var.get(), "job_id": job_id_var.get()}
    return {key: value for key, value in ids.items() if value}


def _is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(token in lowered for token in SENSITIVE_KEY_TOKENS)


def redact(value: Any, key: str = "") -> Any:
    """Mask credential-looking keys and summarize raw bytes (frames, uploads)."""
    if isinstance(value, dict):
        return {
            k: REDACTED if _is_sensitive_key(str(k)) else redact(v, str(k))
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(item, key) for item in value]
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    if isinstance(value, str) and key and _is_sensitive_key(key):
        return REDACTED
    return value


def _record_extra(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and key not in _CORRELATION_KEYS and not key.startswith("_")
    }


class StructuredFormatter(logging.Formatter):
    """One JSON object per line"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            **_correlation(),
        }

        extra = _record_extra(record)
        if extra:
            payload["extra"] = redact(extra)

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(payload, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Coloured single-line output for a terminal"""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelname, self.RESET)
        clock = time.strftime("%H:%M:%S", time.localtime(record.created))
        millis = int(record.msecs)

        tags = " ".join(f"{key[:3]}:{value[:8]}" for key, value in _correlation().items())
        location = f"{record.name} [{tags}]" if tags else record.name

        line = f"{color}{clock}.{millis:03d} {record.levelname:<8}{self.RESET} {location:<40} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class LoggerAdapter(logging.LoggerAdapter):
    """Adds the logger's bound fields and the active job id to every call"""

    def process(self, msg: str, kwargs: Any) -> tuple:
        merged = {**(self.extra or {}), **(kwargs.get("extra") or {})}
        job_id = job_id_var.get()
        if job_id:
            merged["job_id"] = job_id
        kwargs["extra"] = merged
        return msg, kwargs


def _file_handler(log_file: Path, level: int) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file,
        maxBytes=int(os.getenv("LOG_MAX_BYTES", str(20 * 1024 * 1024))),
        backupCount=int(os.getenv("LOG_BACKUP_COUNT", "5")),
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(StructuredFormatter())
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    use_json: bool = False,
) -> None:
    """
    Configure the root logger, replacing any handlers already attached.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (unknown names mean INFO)
        log_file: Optional rotating JSON log file
        use_json: JSON lines on stdout instead of coloured text
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(numeric_level)
    console.setFormatter(StructuredFormatter() if use_json else DevelopmentFormatter())

    handlers: List[logging.Handler] = [console]
    if log_file:
        handlers.append(_file_handler(log_file, numeric_level))

    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)

    for name, cap in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(cap)


def get_logger(name: str, **extra: Any) -> LoggerAdapter:
    """
    Logger with fields bound to every record it emits.

    Example:
        logger = get_logger(__name__, component="clip_generator")
        logger.warning("Using fallback clip", extra={"clip_index": 2})
    """
    return LoggerAdapter(logging.getLogger(name), extra)


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def set_job_id(job_id: Optional[str]) -> None:
    job_id_var.set(job_id)


def clear_context() -> None:
    request_id_var.set(None)
    job_id_var.set(None)


class LogTimer:
    """Logs start, completion and duration of a block; failures are logged at ERROR."""

    def __init__(self, logger: logging.LoggerAdapter, operation: str, level: int = logging.INFO):
        self.logger = logger
        self.operation = operation
        self.level = level
        self._started: Optional[float] = None

    @property
    def elapsed(self) -> float:
        return 0.0 if self._started is None else time.perf_counter() - self._started

    def __enter__(self) -> "LogTimer":
        self._started = time.perf_counter()
        self.logger.log(self.level, f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb) -> None:
        duration = round(self.elapsed, 3)
        if exc_type is None:
            self.logger.log(self.level, f"Completed: {self.operation}", extra={"duration_seconds": duration})
            return
        self.logger.error(
            f"Failed: {self.operation}",
            extra={"duration_seconds": duration, "error": str(exc_val) or exc_type.__name__},
            exc_info=(exc_type, exc_val, _exc_tb),
        )
