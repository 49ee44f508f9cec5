"""Process-wide app preferences and reminder scheduling."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, HTTPException

from src.dependencies import AppSession
from src.models.tracking import ReminderRead
from src.models.users import AppPreferences, PreferencesUpdate

router = APIRouter(tags=["preferences"])


@router.get("/preferences", response_model=AppPreferences)
async def get_preferences(session: AppSession) -> Any:
    return session.preferences.load()


@router.patch("/preferences", response_model=AppPreferences)
async def update_preferences(session: AppSession, body: PreferencesUpdate) -> Any:
    updates = body.model_dump(exclude_unset=True, exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    prefs = session.preferences.load().model_copy(update=updates)
    session.preferences.save(prefs)
    session.scheduler.schedule_all(session.store.users, prefs)
    return prefs


# ---------- Reminders ----------

@router.get("/reminders", response_model=list[ReminderRead])
async def list_reminders(session: AppSession) -> Any:
    return [asdict(r) for r in session.sink.for_user(session.store.current_user.id)]


@router.post("/reminders/schedule", response_model=list[ReminderRead])
async def schedule_reminders(session: AppSession) -> Any:
    prefs = session.preferences.load()
    reminders = session.scheduler.schedule_all(session.store.users, prefs)
    return [asdict(r) for r in reminders]
