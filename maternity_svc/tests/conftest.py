"""
Shared pytest fixtures.

Fixture Hierarchy:
    temp_store / memory_store → repositories → services → test_app → client

Each test gets a fresh store, so nothing leaks between tests.
"""
import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Set

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from maternity_svc.core import dependencies as deps
from maternity_svc.core.exceptions import PersistenceError, setup_exception_handlers
from maternity_svc.repositories import (
    InMemoryKeyValueStore,
    NotificationRepository,
    PatientRepository,
    SqliteKeyValueStore,
)
from maternity_svc.services import HealthService, PatientService

PATIENTS_KEY = "registeredUsers"
NOTIFICATIONS_KEY = "doctorNotifications"


class FailingStore(InMemoryKeyValueStore):
    """In-memory store whose writes to chosen keys fail on demand."""

    def __init__(self):
        super().__init__()
        self.fail_keys: Set[str] = set()
        self.writes = 0

    def set(self, key: str, value: Any) -> None:
        if key in self.fail_keys:
            raise PersistenceError(operation=f"write of '{key}'")
        self.writes += 1
        super().set(key, value)


class StepClock:
    """Deterministic clock advancing a fixed step on every call."""

    def __init__(self, start: Optional[datetime] = None, step: timedelta = timedelta(minutes=1)):
        self.current = start or datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + self.step
        return now


@pytest.fixture
def temp_store():
    """
    Create a SQLite key-value store in a temp file.
    """
    fd, db_path = tempfile.mkstemp(suffix='.db')
    os.close(fd)

    store = SqliteKeyValueStore(db_path=db_path)
    yield store

    for suffix in ("", "-wal", "-shm"):
        if os.path.exists(db_path + suffix):
            os.unlink(db_path + suffix)


@pytest.fixture
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def patient_repo(memory_store):
    return PatientRepository(store=memory_store, key=PATIENTS_KEY)


@pytest.fixture
def notification_repo(memory_store):
    return NotificationRepository(store=memory_store, key=NOTIFICATIONS_KEY)


@pytest.fixture
def patient_service(patient_repo):
    return PatientService(patient_repository=patient_repo)


@pytest.fixture
def health_service(patient_repo, notification_repo):
    return HealthService(
        patient_repository=patient_repo,
        notification_repository=notification_repo,
    )


@pytest.fixture
def patient(patient_service):
    """A registered patient due in 14 days, currently in week 38."""
    return patient_service.register(
        name="Jane Doe",
        due_date=datetime.now(timezone.utc) + timedelta(days=14),
        current_week=38,
        emergency_contacts=[
            {"name": "John Doe", "relationship": "Partner", "phone": "555-0100"},
            {"name": "Mary Roe", "relationship": "Mother", "phone": "555-0101"},
            {"name": "Dr. Lee", "relationship": "Midwife", "phone": "555-0102"},
        ],
    )


@pytest.fixture
def test_app(temp_store):
    """
    Create a FastAPI test app wired to a temporary SQLite store.

    Overriding get_store is enough: repositories and services are
    resolved from it through Depends().
    """
    from maternity_svc.api.routers import (
        health_router,
        notifications_router,
        patients_router,
        records_router,
    )

    app = FastAPI(title="Maternity Health Service Test")
    setup_exception_handlers(app)
    app.dependency_overrides[deps.get_store] = lambda: temp_store

    app.include_router(health_router)
    app.include_router(patients_router)
    app.include_router(records_router)
    app.include_router(notifications_router)

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Create a test client for the API."""
    return TestClient(test_app)
