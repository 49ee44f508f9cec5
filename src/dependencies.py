"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from src.config import Settings, get_settings
from src.tracker.persistence import PreferencesRepository
from src.tracker.reminders import InMemoryNotificationSink, ReminderScheduler
from src.tracker.store import CycleStore


@dataclass
class Session:
    """Per-process session context: the store plus its collaborators.

    Created in the app lifespan and kept on ``app.state.session``.
    """

    store: CycleStore
    preferences: PreferencesRepository
    scheduler: ReminderScheduler
    sink: InMemoryNotificationSink


def get_session(request: Request) -> Session:
    return request.app.state.session


def get_store(session: Annotated[Session, Depends(get_session)]) -> CycleStore:
    return session.store


# Annotated shortcuts for route signatures
AppSession = Annotated[Session, Depends(get_session)]
Store = Annotated[CycleStore, Depends(get_store)]
AppSettings = Annotated[Settings, Depends(get_settings)]
