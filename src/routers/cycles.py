"""Period record endpoints for the selected user."""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, HTTPException

from src.dependencies import Store
from src.models.tracking import CycleCreate, MenstrualCycle
from src.tracker.validation import is_valid_date_range

router = APIRouter(prefix="/cycles", tags=["cycles"])


@router.get("", response_model=list[MenstrualCycle])
async def list_cycles(store: Store) -> Any:
    """Most recent first."""
    return sorted(store.current_user.cycles, key=lambda c: c.start_date, reverse=True)


@router.post("", response_model=MenstrualCycle, status_code=201)
async def create_cycle(store: Store, body: CycleCreate) -> Any:
    if not is_valid_date_range(body.start_date, body.end_date):
        raise HTTPException(status_code=422, detail="end_date must not precede start_date")
    return store.add_cycle(body.start_date, body.end_date, body.flow, body.notes)


@router.get("/{cycle_id}", response_model=MenstrualCycle)
async def get_cycle(cycle_id: uuid.UUID, store: Store) -> Any:
    cycle = store.find_cycle(cycle_id)
    if cycle is None:
        raise HTTPException(status_code=404, detail="Cycle not found")
    return cycle


@router.delete("/{cycle_id}", status_code=204)
async def delete_cycle(cycle_id: uuid.UUID, store: Store) -> None:
    if not store.delete_cycle(cycle_id):
        raise HTTPException(status_code=404, detail="Cycle not found")
