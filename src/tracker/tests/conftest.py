"""Shared fixtures for tracker core tests."""

from __future__ import annotations

from datetime import date

import pytest

from src.models.tracking import MenstrualCycle
from src.models.users import User
from src.tracker.config_loader import TrackerConfig, load_tracker_config
from src.tracker.persistence import InMemoryKeyValueStore, UserRepository
from src.tracker.store import CycleStore

# Canonical scenario: 28-day cycle, 5-day period, one cycle starting Jan 1
TEST_START = date(2024, 1, 1)
TEST_CYCLE_LENGTH = 28
TEST_PERIOD_LENGTH = 5


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tracker_config() -> TrackerConfig:
    """Load the real tracker config for tests."""
    return load_tracker_config()


# ---------------------------------------------------------------------------
# Storage fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(kv: InMemoryKeyValueStore) -> UserRepository:
    return UserRepository(kv, "SavedUsers")


@pytest.fixture
def store(repository: UserRepository, tracker_config: TrackerConfig) -> CycleStore:
    """A freshly opened store holding the two default users."""
    return CycleStore.open(repository, tracker_config)


# ---------------------------------------------------------------------------
# User fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def empty_user() -> User:
    return User(name="Ada", cycle_length=TEST_CYCLE_LENGTH, period_length=TEST_PERIOD_LENGTH)


@pytest.fixture
def scenario_user() -> User:
    """One open-ended cycle starting 2024-01-01."""
    return User(
        name="Ada",
        cycle_length=TEST_CYCLE_LENGTH,
        period_length=TEST_PERIOD_LENGTH,
        cycles=[MenstrualCycle(start_date=TEST_START)],
    )
