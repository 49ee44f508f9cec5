"""Load, validate, and hot-reload the cyclekeeper tracker configuration.

The config lives in ``tracker_config.yaml`` alongside this module.  At startup
it is loaded once and cached.  Call ``reload_tracker_config()`` to re-read from
disk after an edit without a restart.

Usage::

    from src.tracker.config_loader import get_tracker_config

    config = get_tracker_config()
    config.prediction.luteal_phase_days          # 14
    config.validation.cycle_length.contains(30)  # True
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger("cyclekeeper.tracker.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "tracker_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class IntRange:
    """Inclusive integer range used by the advisory input checks."""

    min: int
    max: int

    def contains(self, value: int) -> bool:
        return self.min <= value <= self.max


@dataclass
class DefaultsConfig:
    """Values used when creating users at first launch or on reset."""

    cycle_length: int = 28
    period_length: int = 5
    user_names: list[str] = field(default_factory=lambda: ["User 1", "User 2"])
    placeholder_user_name: str = "Default User"


@dataclass
class ValidationConfig:
    """Advisory ranges applied at input-collection boundaries."""

    cycle_length: IntRange = field(default_factory=lambda: IntRange(21, 35))
    period_length: IntRange = field(default_factory=lambda: IntRange(3, 8))
    severity: IntRange = field(default_factory=lambda: IntRange(1, 5))


@dataclass
class PredictionConfig:
    """Fixed-offset prediction arithmetic."""

    luteal_phase_days: int = 14
    ovulation_window_days: int = 2


@dataclass
class ReminderConfig:
    """Local reminder scheduling settings."""

    period_lead_days: int = 1
    reminder_hour: int = 9


@dataclass
class TrackerConfig:
    """Complete, validated tracker configuration.

    This is the single in-memory representation of tracker_config.yaml.
    The store, predictor and reminder scheduler all read from this object.

    Attributes:
        version:     Config schema version string.
        defaults:    Default user names and cycle/period lengths.
        validation:  Advisory input ranges.
        prediction:  Luteal offset and ovulation window half-width.
        reminders:   Reminder lead time and hour of day.
    """

    version: str
    defaults: DefaultsConfig
    validation: ValidationConfig
    prediction: PredictionConfig
    reminders: ReminderConfig


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when tracker_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    import yaml  # pyyaml

    if not path.exists():
        raise FileNotFoundError(f"Tracker config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> TrackerConfig:
    """Validate the raw YAML dict and construct a TrackerConfig.

    Performs structural validation and applies defaults for optional fields.

    Args:
        raw: Parsed YAML dict.

    Returns:
        Validated TrackerConfig instance.

    Raises:
        ConfigValidationError: If any field is missing or out of range.
    """
    errors: list[str] = []

    def _int(d: dict, key: str, section: str, default: int) -> int:
        value = d.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            errors.append(f"{section}.{key} must be an integer, got {value!r}")
            return default

    def _range(d: dict, key: str, default: IntRange) -> IntRange:
        r = d.get(key, {})
        if not isinstance(r, dict):
            errors.append(f"validation.{key} must be a mapping with min/max")
            return default
        lo = _int(r, "min", f"validation.{key}", default.min)
        hi = _int(r, "max", f"validation.{key}", default.max)
        if lo > hi:
            errors.append(f"validation.{key} has min {lo} greater than max {hi}")
        return IntRange(lo, hi)

    version = str(raw.get("version", "1.0"))

    # ── Defaults ──
    d_raw = raw.get("defaults", {}) or {}
    names = d_raw.get("user_names", ["User 1", "User 2"])
    if not isinstance(names, list) or len(names) != 2:
        errors.append("defaults.user_names must list exactly two names")
        names = ["User 1", "User 2"]
    defaults = DefaultsConfig(
        cycle_length=_int(d_raw, "cycle_length", "defaults", 28),
        period_length=_int(d_raw, "period_length", "defaults", 5),
        user_names=[str(n) for n in names],
        placeholder_user_name=str(d_raw.get("placeholder_user_name", "Default User")),
    )
    if defaults.cycle_length <= 0:
        errors.append(f"defaults.cycle_length must be positive, got {defaults.cycle_length}")
    if defaults.period_length <= 0:
        errors.append(f"defaults.period_length must be positive, got {defaults.period_length}")

    # ── Validation ranges ──
    v_raw = raw.get("validation", {}) or {}
    base = ValidationConfig()
    validation = ValidationConfig(
        cycle_length=_range(v_raw, "cycle_length", base.cycle_length),
        period_length=_range(v_raw, "period_length", base.period_length),
        severity=_range(v_raw, "severity", base.severity),
    )

    # Defaults outside the advisory range are allowed but suspicious (warn only)
    if not validation.cycle_length.contains(defaults.cycle_length):
        logger.warning(
            "Default cycle length %d is outside the advisory range %d-%d",
            defaults.cycle_length,
            validation.cycle_length.min,
            validation.cycle_length.max,
        )

    # ── Prediction ──
    p_raw = raw.get("prediction", {}) or {}
    prediction = PredictionConfig(
        luteal_phase_days=_int(p_raw, "luteal_phase_days", "prediction", 14),
        ovulation_window_days=_int(p_raw, "ovulation_window_days", "prediction", 2),
    )
    if prediction.ovulation_window_days < 0:
        errors.append("prediction.ovulation_window_days must not be negative")

    # ── Reminders ──
    r_raw = raw.get("reminders", {}) or {}
    reminders = ReminderConfig(
        period_lead_days=_int(r_raw, "period_lead_days", "reminders", 1),
        reminder_hour=_int(r_raw, "reminder_hour", "reminders", 9),
    )
    if not (0 <= reminders.reminder_hour <= 23):
        errors.append(
            f"reminders.reminder_hour = {reminders.reminder_hour} is out of range [0, 23]"
        )

    if errors:
        raise ConfigValidationError(
            f"tracker_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return TrackerConfig(
        version=version,
        defaults=defaults,
        validation=validation,
        prediction=prediction,
        reminders=reminders,
    )


def load_tracker_config(path: Path | None = None) -> TrackerConfig:
    """Load and validate the tracker config from disk.

    Args:
        path: Override path to YAML. Uses the bundled tracker_config.yaml by default.

    Returns:
        Validated TrackerConfig instance.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded tracker config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: TrackerConfig | None = None
_config_lock = threading.Lock()


def get_tracker_config() -> TrackerConfig:
    """Return the global TrackerConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_tracker_config()`` to refresh after YAML changes.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_tracker_config()
    return _config


def reload_tracker_config(path: Path | None = None) -> TrackerConfig:
    """Reload the tracker config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_tracker_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info(
        "Reloaded tracker config: %s → %s",
        old_version,
        new_config.version,
    )
    return new_config
