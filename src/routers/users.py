"""User profile endpoints: list, add, select, and per-user settings."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from src.dependencies import Store
from src.models.users import User, UserCreate, UserSettingsUpdate, UserSummaryRead
from src.tracker.store import CycleStore
from src.tracker.validation import settings_errors

router = APIRouter(prefix="/users", tags=["users"])


def _summaries(store: CycleStore) -> list[UserSummaryRead]:
    return [
        UserSummaryRead(
            index=i,
            id=u.id,
            name=u.name,
            cycle_length=u.cycle_length,
            period_length=u.period_length,
            cycle_count=len(u.cycles),
            symptom_count=len(u.symptoms),
            selected=i == store.selected_index,
        )
        for i, u in enumerate(store.users)
    ]


@router.get("", response_model=list[UserSummaryRead])
async def list_users(store: Store) -> Any:
    return _summaries(store)


@router.post("", response_model=UserSummaryRead, status_code=201)
async def add_user(store: Store, body: UserCreate) -> Any:
    d = store.config.defaults
    errors = settings_errors(
        body.cycle_length if body.cycle_length is not None else d.cycle_length,
        body.period_length if body.period_length is not None else d.period_length,
        store.config,
    )
    if errors:
        raise HTTPException(status_code=422, detail=errors)
    store.add_user(body.name, body.cycle_length, body.period_length)
    return _summaries(store)[-1]


# ---------- Current user ----------

@router.get("/current", response_model=User)
async def get_current_user(store: Store) -> Any:
    """The selected user with all records, or the placeholder profile."""
    return store.current_user


@router.post("/select/{index}", response_model=User)
async def select_user(index: int, store: Store) -> Any:
    if not 0 <= index < len(store.users):
        raise HTTPException(status_code=404, detail=f"No user at index {index}")
    store.select_user(index)
    return store.current_user


@router.put("/current/settings", response_model=User)
async def update_settings(store: Store, body: UserSettingsUpdate) -> Any:
    errors = settings_errors(body.cycle_length, body.period_length, store.config)
    if errors:
        raise HTTPException(status_code=422, detail=errors)
    return store.update_user_settings(body.name, body.cycle_length, body.period_length)
