# tests/conftest.py
import os

# Settings are read at import time; give the test run a complete environment
# before anything under `app` is imported.
os.environ.setdefault("ENV", "local")
os.environ.setdefault("DATABASE_URL_LOCAL", "sqlite://")
os.environ.setdefault("DATABASE_URL_PROD", "sqlite://")
os.environ.setdefault("REDIS_URL_LOCAL", "redis://localhost:6379/15")
os.environ.setdefault("REDIS_URL_PROD", "redis://localhost:6379/15")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("INTERNAL_API_KEY", "test-internal-key")

import pytest
from starlette.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import MagicMock

from app import models  # noqa: F401  (registers every table on Base.metadata)
from app.main import app
from app.api import deps
from app.db.session import get_db
from app.db.base_class import Base
from app.services.enquiry_lifecycle import (
    EnquiryReconciler,
    EnquiryService,
    ReplacementOrchestrator,
)


# --- In-memory test database ---
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def query_counter():
    """Collects every SQL statement the engine executes while the test runs."""
    statements = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", _record)
    yield statements
    event.remove(engine, "before_cursor_execute", _record)


# --- Service fixtures ---
@pytest.fixture
def notifier():
    """Replacement notifier whose channels succeed without touching the network."""
    mock = MagicMock()
    mock.send_chat_alert.return_value = True
    mock.send_email_alert.return_value = True
    return mock


@pytest.fixture
def publisher():
    return MagicMock()


@pytest.fixture
def enquiry_service(notifier, publisher):
    return EnquiryService(
        reconciler=EnquiryReconciler(),
        orchestrator=ReplacementOrchestrator(notifier),
        publisher=publisher,
    )


# --- Mock Dependencies Setup ---
class MockTokenPayload:
    def __init__(self, sub="auth_user_123"):
        self.sub = sub
        self.exp = 9999999999


def override_get_current_user():
    return MockTokenPayload()


# --- Test Client Fixtures ---
@pytest.fixture(scope="function")
def client(db, enquiry_service):
    """
    TestClient backed by the in-memory database, with authentication and the
    enquiry service's outbound channels mocked.
    """
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[deps.get_current_user] = override_get_current_user
    app.dependency_overrides[deps.get_enquiry_service] = lambda: enquiry_service

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
