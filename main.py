"""
ReadinessScore API application

Serves the scoring admin router under ``/api/v1/scoring`` plus ``/health``
and Prometheus ``/metrics``.
"""
import time

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from batch_runner.api import router as scoring_router
from core.config import settings
from core.exceptions import ReadinessError
from core.logging import get_logger
from core.metrics import get_metrics_response, metrics

logger = get_logger("readiness_app", domain="api")

API_PREFIX = "/api/v1/scoring"
UNTRACKED_PATHS = frozenset({"/metrics"})


async def track_requests(request: Request, call_next):
    """Record count and latency for every request except metric scrapes"""
    if request.url.path in UNTRACKED_PATHS:
        return await call_next(request)

    started = time.perf_counter()
    response = await call_next(request)
    metrics.track_request(
        method=request.method,
        endpoint=request.url.path,
        status=response.status_code,
        duration=time.perf_counter() - started,
    )
    return response


async def readiness_error_handler(request: Request, exc: ReadinessError):
    logger.error(f"{exc.error_code} on {request.url.path}: {exc.message}")
    metrics.track_error(exc.error_code, "api")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}", exc_info=exc)
    metrics.track_error(exc.__class__.__name__, "api")
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": "An unexpected error occurred"},
    )


def create_app() -> FastAPI:
    """Build the FastAPI application"""
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Investment readiness scoring with versioned weight configurations",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.middleware("http")(track_requests)
    application.add_exception_handler(ReadinessError, readiness_error_handler)
    application.add_exception_handler(Exception, unhandled_error_handler)

    @application.get("/health", tags=["health"])
    async def health():
        return {
            "status": "ok",
            "version": settings.app_version,
            "environment": settings.environment,
            "cache_backend": settings.cache_backend,
        }

    @application.get("/metrics", include_in_schema=False)
    async def prometheus_metrics():
        if not settings.prometheus_enabled:
            return JSONResponse(status_code=404, content={"error": "Metrics not enabled"})
        body, content_type = get_metrics_response()
        return Response(content=body, media_type=content_type)

    @application.on_event("startup")
    async def announce_startup():
        logger.info(f"Starting {settings.app_name} {settings.app_version} ({settings.environment})")

    @application.on_event("shutdown")
    async def announce_shutdown():
        logger.info(f"Stopping {settings.app_name}")

    application.include_router(scoring_router, prefix=API_PREFIX, tags=["scoring"])
    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
