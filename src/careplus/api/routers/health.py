"""
Health check endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel
from pymongo.errors import PyMongoError

from ...core.config import get_settings
from ...core.structured_logger import get_logger
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/health", tags=["health"])
logger = get_logger("careplus.api")


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    version: str
    service: str


@router.get("", response_model=ApiResponse[HealthResponse])
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns the current status of the service.
    """
    settings = get_settings()
    return ok(request, data=HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=settings.app_version,
        service=settings.app_name,
    ), message="OK")


@router.get("/ready", response_model=ApiResponse[dict])
async def readiness_check(request: Request):
    """
    Readiness check endpoint.

    Returns whether the queue store can serve requests.
    """
    settings = get_settings()
    checks = {"store_backend": settings.store.backend}
    all_ok = True

    if settings.uses_memory_store:
        checks["database"] = "not_used"
    else:
        client = getattr(request.app.state, "mongo_client", None)
        if client is None:
            checks["database"] = "not_connected"
            all_ok = False
        else:
            try:
                await client.admin.command("ping")
                checks["database"] = "ok"
            except PyMongoError as e:
                logger.warning("Database ping failed", error=str(e)[:200])
                checks["database"] = f"error: {str(e)[:50]}"
                all_ok = False

    status = "ready" if all_ok else "degraded"

    return ok(request, data={
        "status": status,
        "timestamp": datetime.now(timezone.utc),
        "checks": checks,
    }, message="OK" if all_ok else "Some services unavailable")
