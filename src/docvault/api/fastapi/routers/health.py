from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from docvault.auth import get_identity_settings
from docvault.db import db_healthcheck, get_engine

ROUTER_PREFIX = "/api"
ROUTER_TAG = "health"

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    settings = getattr(request.app.state, "identity_settings", None) or get_identity_settings()
    async with get_engine(request).session() as session:
        db_ok = await db_healthcheck(session)
    return {
        "status": "ok",
        "identityUrlConfigured": settings.url_configured,
        "identityKeyConfigured": settings.key_configured,
        "database": "ok" if db_ok else "unavailable",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
