"""Fixtures for API tests: an app wired to in-memory storage."""

from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.dependencies import Session
from src.main import create_app, open_session
from src.tracker.persistence import InMemoryKeyValueStore


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def session(kv: InMemoryKeyValueStore) -> Session:
    return open_session(Settings(), kv=kv)


@pytest.fixture
def client(session: Session) -> Iterator[TestClient]:
    with TestClient(create_app(session)) as c:
        yield c
