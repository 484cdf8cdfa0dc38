import json
from datetime import datetime
from typing import Dict

from fastapi import APIRouter, Request, status

from ecotrack.core.logger.logger import logger
from ecotrack.core.service.user.store.kv_store import KVUserStore
from ecotrack.infra.config.settings import settings

router = APIRouter()


async def check_store_health(request: Request) -> Dict[str, str]:
    """Check the user store; only the KV backend has a connection to probe."""
    store = request.app.state.user_store
    if isinstance(store, KVUserStore):
        return await store.ping()
    return {"status": "healthy", "message": "In-memory store"}


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Service status and user store connectivity."""
    correlation_id = request.headers.get("X-Request-ID", "N/A")

    store_health = await check_store_health(request)
    overall_status = "healthy" if store_health["status"] == "healthy" else "unhealthy"

    logger.info(json.dumps({
        "type": "health_check",
        "request_id": correlation_id,
        "status": overall_status,
        "dependencies": {"user_store": store_health["status"]}
    }))

    return {
        "status": overall_status,
        "service": "api_gateway",
        "version": settings.APP_VERSION,
        "backend": settings.STORE_BACKEND,
        "dependencies": {"user_store": store_health},
        "timestamp": datetime.utcnow().isoformat() + "Z"
    }
