"""
Shared fixtures: in-memory database, reference dates, users and an API client.
"""
import os
import tempfile

os.environ.setdefault("JOB_TRACKER_DATABASE_URL", "sqlite://")
os.environ.setdefault("JOB_TRACKER_LOG_DIR", os.path.join(tempfile.gettempdir(), "job-tracker-tests"))

import pytest
from datetime import date, timedelta
from types import SimpleNamespace
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobtracker.database import Base
from jobtracker.models import Application, User
from jobtracker.services.gamification_service import GamificationService
from jobtracker.services.milestone_queue import MilestoneQueueRegistry, milestone_queues


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite database per test"""
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
def today():
    return date(2026, 3, 10)


@pytest.fixture
def yesterday(today):
    return today - timedelta(days=1)


@pytest.fixture
def user(db_session):
    user = User(email="seeker@example.com", api_key="test-key")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def queues():
    return MilestoneQueueRegistry()


@pytest.fixture
def gamification(db_session, queues):
    return GamificationService(db_session, queues=queues)


@pytest.fixture(autouse=True)
def reset_milestone_queues():
    milestone_queues.reset()
    yield
    milestone_queues.reset()


@pytest.fixture
def client(db_session):
    """API client bound to the test database"""
    from fastapi.testclient import TestClient
    from jobtracker.database import get_db
    from jobtracker.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def apps(*statuses):
    """Lightweight application snapshots for the pure engine"""
    return [SimpleNamespace(id=i + 1, status=status) for i, status in enumerate(statuses)]


def create_application(db_session, user, status="applied", company="Acme", when=None):
    application = Application(
        user_id=user.id,
        company=company,
        position="Engineer",
        date_applied=when or date(2026, 3, 1),
        status=status,
    )
    db_session.add(application)
    db_session.commit()
    db_session.refresh(application)
    return application
