"""cyclekeeper tracker core.

This package holds the cycle data store and the fixed-offset prediction
arithmetic.  Everything outside it (HTTP routes, export, reminders) reads
computed dates from here.

Modules:
    store: CycleStore: user list, selection, mutations, persistence
    classifier: period / ovulation / normal status for a date
    predictor: last/next period start, ovulation date, cycle progress
    persistence: key-value byte stores and user/preferences repositories
    config_loader: Load/validate/hot-reload tracker_config.yaml
    validation: Advisory input range checks
    export: CSV and JSON export
    reminders: Period and ovulation reminder scheduling
    display: Labels, colors and icons for the domain enums
"""

from src.tracker.classifier import classify
from src.tracker.config_loader import TrackerConfig, get_tracker_config
from src.tracker.errors import PersistenceError, TrackerError, UserIndexError
from src.tracker.persistence import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    PreferencesRepository,
    UserRepository,
)
from src.tracker.predictor import CyclePrediction, predict
from src.tracker.store import ChangeEvent, CycleStore

__all__ = [
    "CycleStore",
    "ChangeEvent",
    "classify",
    "predict",
    "CyclePrediction",
    "TrackerConfig",
    "get_tracker_config",
    "TrackerError",
    "PersistenceError",
    "UserIndexError",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "UserRepository",
    "PreferencesRepository",
]
