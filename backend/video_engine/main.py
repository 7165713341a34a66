"""
Video Engine API

Turns narration scripts into sequences of generated video clips. Routes live in
``video_engine.routes``; this module only assembles the application.
"""

import os
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from time import monotonic

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import API_DESCRIPTION, API_TITLE, API_VERSION, CORS_ORIGINS, load_provider_settings
from .core import (
    JobAlreadyRunningError,
    JobNotFoundError,
    ValidationError,
    clear_context,
    get_logger,
    parse_bool_env,
    runtime_tool_report,
    set_request_id,
    setup_logging,
)
from .routes import generation_router, jobs_router
from .services.infrastructure.orchestration import shutdown_job_tracker

ERROR_STATUS_CODES = {
    ValidationError: 400,
    JobNotFoundError: 404,
    JobAlreadyRunningError: 409,
}


def _configure_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO")
    file_path = os.getenv("LOG_FILE")
    json_output = parse_bool_env(os.getenv("JSON_LOGS"))
    setup_logging(level=level, log_file=Path(file_path) if file_path else None, use_json=json_output)


_configure_logging()
logger = get_logger(__name__, component="api")
_started_at = monotonic()


@asynccontextmanager
async def lifespan(application: FastAPI):
    application.state.runtime_report = runtime_tool_report()
    logger.info("Video Engine API ready", extra={"runtime_report": application.state.runtime_report})
    try:
        yield
    finally:
        await shutdown_job_tracker()
        logger.info("Video Engine API stopped")


async def domain_error_handler(_request: Request, exc: Exception):
    status_code = next(code for error_type, code in ERROR_STATUS_CODES.items() if isinstance(exc, error_type))
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def create_app() -> FastAPI:
    application = FastAPI(title=API_TITLE, description=API_DESCRIPTION, version=API_VERSION, lifespan=lifespan)

    @application.middleware("http")
    async def correlate_request(request: Request, call_next):
        """Tag the request (and every log line it causes) with X-Request-ID."""
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        set_request_id(request_id)
        started = monotonic()
        try:
            response = await call_next(request)
        finally:
            clear_context()
        response.headers["X-Request-ID"] = request_id
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        logger.info(
            "%s %s -> %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "duration_ms": round((monotonic() - started) * 1000, 1),
            },
        )
        return response

    for error_type in ERROR_STATUS_CODES:
        application.add_exception_handler(error_type, domain_error_handler)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(generation_router)
    application.include_router(jobs_router)

    @application.get("/")
    async def index():
        return {"service": API_TITLE, "version": API_VERSION}

    @application.get("/health")
    async def health():
        """
        Readiness report: ffmpeg availability, provider credentials, publisher
        configuration and uptime.

        Missing pieces degrade the pipeline (stock fallback, no continuity frames,
        no upload) without stopping it, so this always answers 200 and reports
        ``degraded`` in the body.
        """
        settings = load_provider_settings()
        tools = runtime_tool_report()
        checks = {
            "tools": tools,
            "provider": {"name": settings.provider.value, "configured": settings.provider_configured},
            "publisher": {"configured": bool(settings.drive_token_file)},
        }
        healthy = settings.provider_configured and all(tool["available"] for tool in tools.values())
        if not healthy:
            logger.warning("Health check degraded", extra={"checks": checks})

        return {
            "status": "healthy" if healthy else "degraded",
            "version": API_VERSION,
            "environment": os.getenv("ENV", "development"),
            "uptime_seconds": round(monotonic() - _started_at, 1),
            "checks": checks,
        }

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "video_engine.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("ENV", "development") == "development",
    )
