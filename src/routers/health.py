"""Health check endpoint."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from src.dependencies import AppSession, AppSettings

router = APIRouter(tags=["system"])
logger = logging.getLogger("cyclekeeper.health")


@router.get("/health")
async def health_check(session: AppSession, settings: AppSettings) -> dict:
    """Liveness probe. Returns 200 if the API process is up.

    Reports ``degraded`` while the store holds changes that failed to persist.
    """
    dirty = session.store.dirty
    if dirty:
        logger.warning("Health check: store has unsaved changes")

    return {
        "service": settings.app_name,
        "status": "degraded" if dirty else "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "storage": "unsaved_changes" if dirty else "in_sync",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
