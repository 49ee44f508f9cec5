"""Classify calendar days as period, ovulation, or normal.

A day is a period day when it falls inside any recorded cycle's window
``[start_date, end_date]``.  Cycles without an end date use
``start_date + period_length`` as the end.  Period status wins over the
ovulation window, which spans ``ovulation_date ± ovulation_window_days``.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from src.models.tracking import CycleStatus, MenstrualCycle, Symptom
from src.models.users import User
from src.tracker import predictor
from src.tracker.config_loader import TrackerConfig, get_tracker_config

logger = logging.getLogger("cyclekeeper.tracker.classifier")


@dataclass
class DaySummary:
    """Everything the calendar detail view shows for a single day."""

    date: date
    status: CycleStatus
    symptoms: list[Symptom] = field(default_factory=list)
    days_since_last_period: int | None = None
    days_until_next_period: int | None = None


def effective_end(cycle: MenstrualCycle, period_length: int) -> date:
    """Recorded end date, or the end implied by the configured period length."""
    if cycle.end_date is not None:
        return cycle.end_date
    return predictor.shift(cycle.start_date, period_length) or date.max


def in_period(user: User, day: date) -> bool:
    return any(
        cycle.start_date <= day <= effective_end(cycle, user.period_length)
        for cycle in user.cycles
    )


def in_ovulation_window(
    user: User, day: date, config: TrackerConfig | None = None
) -> bool:
    cfg = config or get_tracker_config()
    ov = predictor.ovulation_date(user, cfg)
    if ov is None:
        return False
    half = cfg.prediction.ovulation_window_days
    lo = predictor.shift(ov, -half) or date.min
    hi = predictor.shift(ov, half) or date.max
    return lo <= day <= hi


def classify(user: User, day: date, config: TrackerConfig | None = None) -> CycleStatus:
    """Return the cycle status of ``day`` for ``user``.

    Args:
        user:   Profile whose history is consulted.
        day:    Calendar date to classify.
        config: Tracker config (defaults to the global singleton).

    Returns:
        CycleStatus.period, CycleStatus.ovulation, or CycleStatus.normal.
    """
    if in_period(user, day):
        return CycleStatus.period
    if in_ovulation_window(user, day, config):
        return CycleStatus.ovulation
    return CycleStatus.normal


def symptoms_on(user: User, day: date) -> list[Symptom]:
    return [s for s in user.symptoms if s.date == day]


def day_summary(
    user: User, day: date, config: TrackerConfig | None = None
) -> DaySummary:
    """Status plus symptoms and countdowns for one calendar day."""
    return DaySummary(
        date=day,
        status=classify(user, day, config),
        symptoms=symptoms_on(user, day),
        days_since_last_period=predictor.days_since_last_period(user, day),
        days_until_next_period=predictor.days_until(
            predictor.next_period_start(user), day
        ),
    )


def month_statuses(
    user: User, year: int, month: int, config: TrackerConfig | None = None
) -> dict[date, CycleStatus]:
    """Classify every day of a calendar month, in date order."""
    _, n_days = calendar.monthrange(year, month)
    first = date(year, month, 1)
    statuses = {
        first + timedelta(days=i): classify(user, first + timedelta(days=i), config)
        for i in range(n_days)
    }
    logger.debug(
        "Classified %d days of %04d-%02d for %s", n_days, year, month, user.id
    )
    return statuses
