"""Health check and metrics endpoints."""

import secrets
import time
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text

from src.marketplace.core.config import get_settings
from src.marketplace.core.db import get_session
from src.marketplace.core.logging import get_logger

logger = get_logger(__name__)

HEALTH_CACHE_TTL = 10  # seconds


class _HealthCache:
    def __init__(self) -> None:
        self.report: dict[str, Any] | None = None
        self.checked_at = 0.0

    def fresh(self, now: float) -> dict[str, Any] | None:
        if self.report is None or now - self.checked_at >= HEALTH_CACHE_TTL:
            return None
        return {
            **self.report,
            "cached": True,
            "cache_age_seconds": round(now - self.checked_at, 1),
        }

    def store(self, report: dict[str, Any], now: float) -> None:
        self.report = report
        self.checked_at = now

    def clear(self) -> None:
        self.report = None
        self.checked_at = 0.0


_cache = _HealthCache()


def reset_health_cache() -> None:
    """Reset health cache (for testing)."""
    _cache.clear()


async def check_database() -> str:
    """Round-trip a trivial query; returns "healthy" or the failure reason."""
    try:
        async with get_session() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))
        return f"unhealthy: {e!s}"
    return "healthy"


def _respond(report: dict[str, Any]) -> JSONResponse:
    status_code = 200 if report["status"] == "healthy" else 503
    return JSONResponse(content=report, status_code=status_code)


def setup_health_endpoint(app: FastAPI) -> None:
    """Configure the health check endpoint."""

    @app.get("/health")
    async def health() -> JSONResponse:
        """Report database reachability, cached for HEALTH_CACHE_TTL seconds."""
        now = time.time()
        cached = _cache.fresh(now)
        if cached is not None:
            return _respond(cached)

        database = await check_database()
        report: dict[str, Any] = {
            "status": "healthy" if database == "healthy" else "unhealthy",
            "database": database,
            "cached": False,
            "timestamp": now,
        }
        _cache.store(report, now)
        return _respond(report)


def setup_metrics(app: FastAPI) -> None:
    """Expose Prometheus metrics, protected by an API key when one is configured."""
    settings = get_settings()
    instrumentator = Instrumentator().instrument(app)

    if settings.metrics_api_key:
        api_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

        async def verify_metrics_key(api_key: str | None = Depends(api_key_header)) -> None:
            if (
                api_key is None
                or settings.metrics_api_key is None
                or not secrets.compare_digest(api_key, settings.metrics_api_key)
            ):
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid or missing metrics API key",
                )

        instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(verify_metrics_key)])
    else:
        instrumentator.expose(app, endpoint="/metrics")
