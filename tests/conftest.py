"""
Pytest configuration and fixtures for the day planner tests.
"""

import os
from datetime import date, datetime

import pytest

# Keep the app's module-level engine off the working directory
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from dayplanner.database import Base, get_db  # noqa: E402
from dayplanner.main import app  # noqa: E402
from dayplanner.scheduling import BusyTimeSlot  # noqa: E402

DAY = date(2025, 3, 10)


def at(hour: int, minute: int = 0, day: date = DAY) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)


def busy(start: datetime, end: datetime, title: str = "Meeting", calendar_name: str = "Calendar",
         notes=None, slot_id: str = None) -> BusyTimeSlot:
    return BusyTimeSlot(
        id=slot_id or f"{title}@{start.isoformat()}",
        title=title,
        start_time=start,
        end_time=end,
        calendar_name=calendar_name,
        notes=notes,
    )


@pytest.fixture
def db_session():
    """In-memory SQLite session shared across threads, fresh per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    """FastAPI TestClient whose requests use the test session."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
