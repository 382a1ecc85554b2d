"""Health check endpoint for infrastructure monitoring."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends

from mindfulspace.config import Settings, get_settings
from mindfulspace.dependencies import get_message_store
from mindfulspace.memory.message_store import MessageStore

logger = logging.getLogger(__name__)
router = APIRouter()


async def _check_mongodb(store: MessageStore) -> dict[str, Any]:
    """Ping MongoDB and return status."""
    try:
        await store.ping()
        return {"status": "healthy"}
    except Exception as exc:
        logger.warning("MongoDB health check failed: %s", exc)
        return {"status": "unhealthy", "error": str(exc)}


def _check_gateway(settings: Settings) -> dict[str, Any]:
    """Report whether the gateway credential is present (no network call)."""
    if settings.gateway_configured:
        return {"status": "healthy", "model": settings.gateway_model}
    return {"status": "unhealthy", "error": "GATEWAY_API_KEY is not configured"}


@router.get("")
async def health_check(
    settings: Settings = Depends(get_settings),
    store: MessageStore = Depends(get_message_store),
) -> dict[str, Any]:
    """Return aggregate health of all backend services."""
    services = {
        "mongodb": await _check_mongodb(store),
        "gateway": _check_gateway(settings),
    }

    overall = (
        "healthy"
        if all(s["status"] == "healthy" for s in services.values())
        else "degraded"
    )

    return {
        "status": overall,
        "services": services,
    }
