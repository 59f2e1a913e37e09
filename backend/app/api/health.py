"""Liveness, database and AI provider health checks."""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.deps import get_provider, get_store
from app.core.config import settings
from app.services.llm import BaseLLMProvider
from app.services.store import ConversationStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("")
async def health(provider: BaseLLMProvider = Depends(get_provider)):
    status = provider.status()
    return {
        "status": "ok",
        "app": settings.app_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "api": "operational",
            "ai": "operational" if status["available"] else "fallback_mode",
            "provider": status,
        },
    }


@router.get("/db")
async def health_db(store: ConversationStore = Depends(get_store)):
    healthy = store.health_check()
    payload = {
        "status": "healthy" if healthy else "unhealthy",
        "database": "connected" if healthy else "disconnected",
        "type": "sqlite",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if not healthy:
        return JSONResponse(status_code=503, content=payload)
    return payload


@router.get("/deep")
async def health_deep(provider: BaseLLMProvider = Depends(get_provider)):
    """Sends a canary prompt through the provider. Slow, and spends tokens."""
    started = time.monotonic()
    healthy = await provider.health_check()
    elapsed_ms = round((time.monotonic() - started) * 1000)
    logger.info(f"Deep health check: provider {'ok' if healthy else 'unavailable'} ({elapsed_ms}ms)")
    return {
        "status": "healthy" if healthy else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "api": "operational",
            "ai": "operational" if healthy else "fallback_mode",
            "provider_api": "operational" if healthy else "unavailable",
        },
        "performance": {"total_check_time_ms": elapsed_ms},
    }
