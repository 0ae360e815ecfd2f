"""
Health check endpoints for the cache layer.
"""

import time
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ...core.config.settings import settings
from ...core.logging.logger import get_app_logger
from ...persistence.redis.redis_manager import RedisManager

logger = get_app_logger()
router = APIRouter(tags=["Health"])


@router.get("/health/cache")
async def cache_health_check() -> JSONResponse:
    """
    Report reachability of the session and app stores.

    Answers 200 when every store responds and 503 otherwise. A degraded
    cache does not stop the application; the status is informational.
    """
    start_time = time.time()
    redis_status = await RedisManager.get_health_status()

    stores = redis_status.get("stores", {})
    is_healthy = bool(stores) and all(s["status"] == "healthy" for s in stores.values())

    health_data: dict[str, Any] = {
        "status": "healthy" if is_healthy else "degraded",
        "timestamp": time.time(),
        "response_time_ms": round((time.time() - start_time) * 1000, 2),
        "environment": settings.environment,
        "version": settings.version,
        "redis": redis_status,
    }

    logger.info(
        f"Cache health check completed - Status: {health_data['status']}, "
        f"Response Time: {health_data['response_time_ms']}ms"
    )
    return JSONResponse(status_code=200 if is_healthy else 503, content=health_data)
