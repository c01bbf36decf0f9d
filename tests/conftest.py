"""Shared pytest fixtures for the HIA website tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from flask import Flask
from flask.testing import FlaskClient

from hia import create_app
from hia.config import TestingConfig
from hia.store import DomainStore


class FakeClock:
    """Deterministic clock: each call advances one second."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(seconds=1)
        return current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> DomainStore:
    """Fresh, empty store with a deterministic clock."""
    return DomainStore(clock=clock)


@pytest.fixture
def app(store: DomainStore) -> Flask:
    """App on TestingConfig (demo payments, no OpenAI client) sharing `store`."""
    return create_app(TestingConfig, store=store)


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()
