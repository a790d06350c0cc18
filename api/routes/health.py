"""
Health check endpoints.

Provides endpoints for monitoring and load balancer health checks.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_record_store
from core.logging import get_logger
from core.storage import BaseRecordStore


logger = get_logger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """
    Basic health check.

    Returns 200 if the service is running.
    Used by load balancers and orchestration systems.
    """
    return {
        "status": "healthy",
        "service": "message-board",
    }


@router.get("/ready")
async def readiness_check(
    store: BaseRecordStore = Depends(get_record_store),
):
    """
    Readiness check.

    Returns 200 if the record store answers, 503 otherwise.
    """
    try:
        await store.ping()
        message_count = await store.count()
    except Exception as e:
        logger.warning("Readiness check failed", error=str(e))
        return JSONResponse(
            status_code=503,
            content={
                "status": "unavailable",
                "checks": {"store": "error"},
            },
        )

    return {
        "status": "ready",
        "checks": {"store": "ok"},
        "messages": message_count,
    }
