"""Fixed-offset cycle prediction.

Every function here is a pure function of a user's recorded cycles and
configured lengths:

- Last period start: the latest recorded ``start_date``
- Next period start: last start + ``cycle_length`` days
- Ovulation date: next start - luteal phase (14 days by default)
- Cycle day / progress through the current cycle

All arithmetic is done on ``datetime.date`` values, so results are whole
calendar days and unaffected by wall-clock or DST shifts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from uuid import UUID

from src.models.tracking import MenstrualCycle
from src.models.users import User
from src.tracker.config_loader import TrackerConfig, get_tracker_config

logger = logging.getLogger("cyclekeeper.tracker.predictor")


@dataclass
class CyclePrediction:
    """Snapshot of every derived value for one user on one day.

    Attributes:
        user_id:                 Profile the prediction belongs to.
        last_period_start:       Latest recorded period start.
        next_period_start:       Predicted next period start.
        ovulation_date:          Predicted ovulation date.
        cycle_day:               Day within the current cycle (1-indexed).
        cycle_progress:          days_since / cycle_length, unclamped.
        days_until_next_period:  Countdown to next_period_start.
        days_until_ovulation:    Countdown to ovulation_date (negative once past).
    """

    user_id: UUID
    last_period_start: date | None = None
    next_period_start: date | None = None
    ovulation_date: date | None = None
    cycle_day: int | None = None
    cycle_progress: float | None = None
    days_until_next_period: int | None = None
    days_until_ovulation: int | None = None


def shift(day: date, days: int) -> date | None:
    """``day`` moved by ``days``, or None when that leaves the calendar range."""
    try:
        return day + timedelta(days=days)
    except OverflowError:
        return None


def latest_cycle(user: User) -> MenstrualCycle | None:
    """Return the cycle with the latest start date.

    Ties on start date go to the most recently inserted cycle.
    """
    best: MenstrualCycle | None = None
    for cycle in user.cycles:
        if best is None or cycle.start_date >= best.start_date:
            best = cycle
    return best


def last_period_start(user: User) -> date | None:
    cycle = latest_cycle(user)
    return cycle.start_date if cycle else None


def next_period_start(user: User) -> date | None:
    last = last_period_start(user)
    if last is None:
        return None
    return shift(last, user.cycle_length)


def ovulation_date(user: User, config: TrackerConfig | None = None) -> date | None:
    """Predicted ovulation: a fixed luteal phase before the next period."""
    nxt = next_period_start(user)
    if nxt is None:
        return None
    cfg = config or get_tracker_config()
    return shift(nxt, -cfg.prediction.luteal_phase_days)


def days_since_last_period(user: User, today: date) -> int | None:
    """Whole days from the last period start to ``today``.

    Negative when ``today`` precedes the last recorded start.
    """
    last = last_period_start(user)
    if last is None:
        return None
    return (today - last).days


def cycle_day(user: User, today: date) -> int | None:
    """Day within the current cycle, 1 on the first day of the period."""
    since = days_since_last_period(user, today)
    return None if since is None else since + 1


def cycle_day_progress(user: User, today: date) -> float | None:
    """Fraction of the configured cycle elapsed since the last period start.

    Not clamped: exceeds 1.0 when overdue and goes negative for a start date
    in the future.  Renderers clamp for display.
    """
    since = days_since_last_period(user, today)
    if since is None:
        return None
    return since / user.cycle_length


def days_until(target: date | None, today: date) -> int | None:
    if target is None:
        return None
    return (target - today).days


def predict(
    user: User,
    today: date | None = None,
    config: TrackerConfig | None = None,
) -> CyclePrediction:
    """Compute every prediction field for ``user`` as of ``today``.

    Args:
        user:   Profile to predict for.
        today:  Reference date (defaults to today).
        config: Tracker config (defaults to the global singleton).

    Returns:
        CyclePrediction; all fields are None when no cycles are recorded.
    """
    as_of = today or date.today()
    nxt = next_period_start(user)
    ov = ovulation_date(user, config)
    prediction = CyclePrediction(
        user_id=user.id,
        last_period_start=last_period_start(user),
        next_period_start=nxt,
        ovulation_date=ov,
        cycle_day=cycle_day(user, as_of),
        cycle_progress=cycle_day_progress(user, as_of),
        days_until_next_period=days_until(nxt, as_of),
        days_until_ovulation=days_until(ov, as_of),
    )
    logger.debug(
        "Prediction for %s as of %s: next=%s ovulation=%s",
        user.id,
        as_of,
        nxt,
        ov,
    )
    return prediction
