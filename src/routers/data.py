"""Bulk data management and export."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, Response

from src.dependencies import Store
from src.tracker.export import export_csv, export_json

router = APIRouter(prefix="/data", tags=["data"])
logger = logging.getLogger("cyclekeeper.data")


@router.post("/clear-current", status_code=204)
async def clear_current_user_data(store: Store) -> None:
    store.clear_current_user_data()


@router.post("/clear-all", status_code=204)
async def clear_all_data(store: Store) -> None:
    store.clear_all_data()


@router.post("/reset", status_code=204)
async def reset_app(store: Store) -> None:
    logger.warning("Resetting app data to defaults")
    store.reset_app()


@router.get("/export.csv", response_class=PlainTextResponse)
async def export_as_csv(store: Store) -> Response:
    return PlainTextResponse(
        export_csv(store.users),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="cyclekeeper.csv"'},
    )


@router.get("/export.json")
async def export_as_json(store: Store) -> Response:
    return Response(
        export_json(store.users),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="cyclekeeper.json"'},
    )
