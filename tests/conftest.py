# tests/conftest.py

import os

# Settings are read at import time; keep the app's own engine off disk
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from autoschedule.models import Base, User
from autoschedule.scheduling import AutoScheduler, ScheduledTask

from .fakes import InMemoryTaskStore, FakeCalendar, FakePreferenceStore, FakeScheduleLookup

# Tuesday morning, before the default 09:00-17:00 working day starts
NOW = datetime(2026, 10, 20, 8, 0)

# In-memory SQLite shared across connections
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def clock():
    return lambda: NOW


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def user(db) -> User:
    user = User(email="planner@example.com", name="Planner")
    db.add(user)
    db.commit()
    return user


@pytest.fixture()
def task_store() -> InMemoryTaskStore:
    return InMemoryTaskStore()


@pytest.fixture()
def calendar() -> FakeCalendar:
    return FakeCalendar()


@pytest.fixture()
def preferences() -> FakePreferenceStore:
    return FakePreferenceStore()


@pytest.fixture()
def schedules() -> FakeScheduleLookup:
    return FakeScheduleLookup()


@pytest.fixture()
def scheduler(task_store, preferences, schedules, calendar, clock) -> AutoScheduler:
    return AutoScheduler(task_store, preferences, schedules, calendar=calendar, clock=clock)


@pytest.fixture()
def make_task(task_store):
    """Add an auto-scheduled task for user 1 to the in-memory store."""
    counter = {"id": 0}

    def _make(**fields) -> ScheduledTask:
        counter["id"] += 1
        fields.setdefault("id", counter["id"])
        fields.setdefault("user_id", 1)
        fields.setdefault("name", f"Task {fields['id']}")
        fields.setdefault("is_auto_scheduled", True)
        return task_store.add(ScheduledTask(**fields))

    return _make
