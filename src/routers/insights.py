"""Derived views: predictions, day status, and month calendars."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Any

from fastapi import APIRouter, Path, Query

from src.dependencies import Store
from src.models.tracking import DayStatusRead, DaySummaryRead, PredictionRead
from src.tracker import classifier, predictor
from src.tracker.display import (
    FLOW_STYLES,
    STATUS_STYLES,
    SYMPTOM_STYLES,
    clamp_progress,
)

router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("/prediction", response_model=PredictionRead)
async def get_prediction(
    store: Store, as_of: date | None = Query(default=None)
) -> Any:
    prediction = predictor.predict(store.current_user, as_of, store.config)
    read = PredictionRead.model_validate(prediction)
    return read.model_copy(
        update={"progress_display": clamp_progress(prediction.cycle_progress)}
    )


@router.get("/status/{day}", response_model=DayStatusRead)
async def get_day_status(day: date, store: Store) -> Any:
    status = classifier.classify(store.current_user, day, store.config)
    style = STATUS_STYLES[status]
    return DayStatusRead(date=day, status=status, label=style.label, color=style.color)


@router.get("/day/{day}", response_model=DaySummaryRead)
async def get_day_summary(day: date, store: Store) -> Any:
    summary = classifier.day_summary(store.current_user, day, store.config)
    style = STATUS_STYLES[summary.status]
    return DaySummaryRead(
        date=summary.date,
        status=summary.status,
        label=style.label,
        color=style.color,
        symptoms=summary.symptoms,
        days_since_last_period=summary.days_since_last_period,
        days_until_next_period=summary.days_until_next_period,
    )


@router.get("/calendar/{year}/{month}", response_model=list[DayStatusRead])
async def get_month(
    store: Store,
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
) -> Any:
    statuses = classifier.month_statuses(store.current_user, year, month, store.config)
    return [
        DayStatusRead(
            date=day,
            status=status,
            label=STATUS_STYLES[status].label,
            color=STATUS_STYLES[status].color,
        )
        for day, status in statuses.items()
    ]


@router.get("/legend")
async def get_legend() -> dict:
    """Labels, colors and icons for every flow, symptom and status tag."""
    return {
        "flow": {k.value: asdict(v) for k, v in FLOW_STYLES.items()},
        "symptoms": {k.value: asdict(v) for k, v in SYMPTOM_STYLES.items()},
        "status": {k.value: asdict(v) for k, v in STATUS_STYLES.items()},
    }
