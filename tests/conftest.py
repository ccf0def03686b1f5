"""
Pytest Configuration and Fixtures

Every test gets a fresh in-memory SQLite database.
"""

import os
from datetime import time, timedelta

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import databases_sql
from main import app
from models import BookRequest, GymClassRequest
from utils import today


@pytest.fixture
def engine():
    """Provide an isolated in-memory engine with the schema created."""
    eng = databases_sql.make_engine("sqlite://")
    databases_sql.init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    """Provide a session bound to the test engine."""
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture
def client(engine):
    """Provide an API client whose requests use the test engine."""
    Session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    def override_get_db():
        session = Session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[databases_sql.get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def start_date():
    """Tomorrow in studio time."""
    return today() + timedelta(days=1)


@pytest.fixture
def class_request(start_date):
    """Provide a valid 30-day class request starting tomorrow."""
    return GymClassRequest(
        name="Yoga Class",
        start_date=start_date,
        end_date=start_date + timedelta(days=29),
        start_time=time(10, 30),
        duration=20,
        capacity=2,
    )


@pytest.fixture
def book_request(start_date):
    def _make(member_name, gym_class_id, participation_date=None):
        return BookRequest(
            member_name=member_name,
            gym_class_id=gym_class_id,
            participation_date=participation_date or start_date + timedelta(days=5),
        )
    return _make
