"""
Health check endpoint
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from datetime import datetime

from bachub.core.config import settings
from bachub.core.logging_config import logger
from bachub.storage import Storage, get_storage

router = APIRouter()


@router.get("/health")
async def health_check(storage: Storage = Depends(get_storage)):
    """Liveness plus a storage round-trip"""
    try:
        await storage.ping()
        storage_status = "healthy"
    except Exception as e:
        logger.log_error_with_context(e, context="health_check")
        storage_status = "unhealthy"

    healthy = storage_status == "healthy"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "degraded",
            "timestamp": datetime.utcnow().isoformat(),
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "storage": {
                "backend": settings.STORAGE_BACKEND,
                "status": storage_status,
            },
        },
    )
