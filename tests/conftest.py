# tests/conftest.py

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.testclient import TestClient

from repair_cafe.main import app
from repair_cafe.core.limiter import limiter
from repair_cafe.db.base_class import Base
from repair_cafe.db.session import get_db
from repair_cafe.services import notification_service
import repair_cafe.models  # noqa: F401

# --- Test Database Setup ---
# One in-memory SQLite connection shared by every session, so rows committed
# by a request are visible to the test and to background dispatch.
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def sent_emails(monkeypatch):
    """
    Records outgoing email instead of calling Resend, and points outbox
    delivery at the test database.
    """
    sent = []

    def fake_send_email(to_email, subject, text, html):
        sent.append({"to": to_email, "subject": subject, "text": text, "html": html})
        return {"success": True, "id": f"email_{len(sent)}"}

    monkeypatch.setattr(notification_service, "send_email", fake_send_email)
    monkeypatch.setattr(notification_service, "SessionLocal", TestingSessionLocal)
    return sent


# --- Test Client Fixtures ---
@pytest.fixture(scope="function")
def client(db_session, sent_emails):
    """
    Provides a TestClient backed by the test database. Auth is real: use
    tests.utils.auth.login to attach a session cookie.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False

    with TestClient(app) as test_client:
        yield test_client

    limiter.enabled = True
    app.dependency_overrides.clear()
