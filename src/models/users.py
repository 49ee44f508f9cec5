"""Pydantic models for user profiles and process-wide app preferences."""

from __future__ import annotations

import uuid

from pydantic import ConfigDict, Field

from src.models.base import CycleKeeperBase
from src.models.tracking import MenstrualCycle, Symptom


# ---------- Users ----------

class User(CycleKeeperBase):
    """A tracked profile.  Owns its cycle and symptom records."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    cycle_length: int = Field(default=28, gt=0)
    period_length: int = Field(default=5, gt=0)
    cycles: list[MenstrualCycle] = Field(default_factory=list)
    symptoms: list[Symptom] = Field(default_factory=list)


class UserCreate(CycleKeeperBase):
    name: str = Field(min_length=1)
    cycle_length: int | None = None
    period_length: int | None = None


class UserSettingsUpdate(CycleKeeperBase):
    name: str = Field(min_length=1)
    cycle_length: int
    period_length: int


class UserSummaryRead(CycleKeeperBase):
    index: int
    id: uuid.UUID
    name: str
    cycle_length: int
    period_length: int
    cycle_count: int
    symptom_count: int
    selected: bool = False


# ---------- Preferences ----------

class AppPreferences(CycleKeeperBase):
    has_launched_before: bool = False
    notifications_enabled: bool = True
    selected_theme: str = "light"


class PreferencesUpdate(CycleKeeperBase):
    has_launched_before: bool | None = None
    notifications_enabled: bool | None = None
    selected_theme: str | None = None
