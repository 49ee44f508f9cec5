"""Advisory input checks for the collection boundary.

The store accepts whatever it is given; the HTTP layer runs these predicates
first and rejects bad input with a 422.
"""

from __future__ import annotations

from datetime import date

from src.tracker.config_loader import TrackerConfig, get_tracker_config


def is_valid_cycle_length(length: int, config: TrackerConfig | None = None) -> bool:
    cfg = config or get_tracker_config()
    return cfg.validation.cycle_length.contains(length)


def is_valid_period_length(length: int, config: TrackerConfig | None = None) -> bool:
    cfg = config or get_tracker_config()
    return cfg.validation.period_length.contains(length)


def is_valid_severity(severity: int, config: TrackerConfig | None = None) -> bool:
    cfg = config or get_tracker_config()
    return cfg.validation.severity.contains(severity)


def is_valid_date_range(start: date, end: date | None) -> bool:
    """An open-ended range is valid; otherwise end must not precede start."""
    return end is None or start <= end


def settings_errors(
    cycle_length: int, period_length: int, config: TrackerConfig | None = None
) -> list[str]:
    """Human-readable problems with a settings update, empty when valid."""
    cfg = config or get_tracker_config()
    errors = []
    if not is_valid_cycle_length(cycle_length, cfg):
        r = cfg.validation.cycle_length
        errors.append(f"cycle_length must be between {r.min} and {r.max}, got {cycle_length}")
    if not is_valid_period_length(period_length, cfg):
        r = cfg.validation.period_length
        errors.append(f"period_length must be between {r.min} and {r.max}, got {period_length}")
    return errors
