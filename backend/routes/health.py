"""Health and readiness check routes."""

import logging

from fastapi import APIRouter, Depends

from config import settings
from routes.tokens import get_token_store
from services.token_store import TokenStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ready")
async def ready(store: TokenStore = Depends(get_token_store)) -> dict:
    """Lightweight readiness check — no external calls."""
    return {
        "status": "ok",
        "service": "token-relay",
        "commit": settings.git_sha,
        "backend": store.backend_name,
    }


@router.get("/health")
async def health(store: TokenStore = Depends(get_token_store)) -> dict:
    """Deep health check that round-trips to the token storage backend."""
    result = {
        "status": "ok",
        "service": "token-relay",
        "commit": settings.git_sha,
        "backend": store.backend_name,
        "storage": "not_tested",
    }

    try:
        await store.check()
        result["storage"] = "connected"
    except Exception as e:
        logger.exception("Token storage health check failed")
        result["storage"] = "error"
        result["storage_error"] = str(e)

    return result
