"""
Pytest fixtures.

Every test gets its own in-memory SQLite database; the API client swaps
the app's ``get_db`` dependency for a session bound to it.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hard75.database import Base, get_db
from hard75.main import app
from hard75.models import User, UserSettings


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def user(db_session):
    user = User(email="tester@hard75.local", full_name="Tester")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def client(db_session):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


def make_settings(**overrides) -> UserSettings:
    """Unsaved settings row with explicit values for pure calculations."""
    values = dict(
        user_id=1,
        pms_safe_enabled=True,
        cycle_length=28,
        pms_window_length=7,
        cycle_day1_date=None,
        water_goal_liters=3.8,
        pms_water_goal_liters=3.0,
    )
    values.update(overrides)
    return UserSettings(**values)
