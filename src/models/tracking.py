"""Pydantic models for manual tracking: period records, symptom logs,
and the derived status/prediction views served to clients."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from enum import Enum

from pydantic import ConfigDict, Field, computed_field

from src.models.base import CycleKeeperBase


# ---------- Enums ----------

class FlowIntensity(str, Enum):
    light = "light"
    medium = "medium"
    heavy = "heavy"


class SymptomType(str, Enum):
    cramps = "cramps"
    headache = "headache"
    mood_swings = "mood_swings"
    bloating = "bloating"
    fatigue = "fatigue"
    acne = "acne"
    breast_tenderness = "breast_tenderness"


class CycleStatus(str, Enum):
    period = "period"
    ovulation = "ovulation"
    normal = "normal"


# ---------- Menstrual Cycles ----------

class MenstrualCycle(CycleKeeperBase):
    """One recorded period.  ``end_date`` of None means ongoing/unspecified."""

    model_config = ConfigDict(str_strip_whitespace=False)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    start_date: date
    end_date: date | None = None
    flow: FlowIntensity = FlowIntensity.medium
    notes: str = ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration(self) -> int:
        """Whole days from start to end, 0 when no end date is recorded."""
        if self.end_date is None:
            return 0
        return (self.end_date - self.start_date).days


class CycleCreate(CycleKeeperBase):
    model_config = ConfigDict(str_strip_whitespace=False)

    start_date: date
    end_date: date | None = None
    flow: FlowIntensity = FlowIntensity.medium
    notes: str = ""


# ---------- Symptoms ----------

class Symptom(CycleKeeperBase):
    # notes are free text and kept exactly as entered
    model_config = ConfigDict(str_strip_whitespace=False)

    # severity is stored as given; range checks belong to the input boundary
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    date: date
    type: SymptomType
    severity: int
    notes: str = ""


class SymptomCreate(CycleKeeperBase):
    model_config = ConfigDict(str_strip_whitespace=False)

    date: date
    type: SymptomType
    severity: int = 3
    notes: str = ""


# ---------- Derived views ----------

class PredictionRead(CycleKeeperBase):
    user_id: uuid.UUID
    last_period_start: date | None = None
    next_period_start: date | None = None
    ovulation_date: date | None = None
    cycle_day: int | None = None
    cycle_progress: float | None = None
    progress_display: float = 0.0
    days_until_next_period: int | None = None
    days_until_ovulation: int | None = None


class DayStatusRead(CycleKeeperBase):
    date: date
    status: CycleStatus
    label: str
    color: str


class DaySummaryRead(DayStatusRead):
    symptoms: list[Symptom] = Field(default_factory=list)
    days_since_last_period: int | None = None
    days_until_next_period: int | None = None


class ReminderRead(CycleKeeperBase):
    identifier: str
    user_id: uuid.UUID
    kind: str
    fire_at: datetime
    title: str
    body: str
