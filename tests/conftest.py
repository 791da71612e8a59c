"""
Shared test fixtures.

Sets up an isolated SQLite test database so tests never touch
the real database. Tables are created before and dropped after
every test.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from tenant_ledger.auth import issue_token
from tenant_ledger.main import app, audit_recorder
from tenant_ledger.models.base import Base, get_db


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)

ORG_A = "org-a"
ORG_B = "org-b"


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    return TestSessionLocal


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    The get_db dependency is overridden so routes use the test
    session, and the audit recorder writes to the test
    database through its own sessions.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    original_factory = audit_recorder.session_factory
    audit_recorder.session_factory = TestSessionLocal
    audit_recorder.dead_letters.clear()
    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()
    audit_recorder.session_factory = original_factory
    audit_recorder.dead_letters.clear()


@pytest.fixture
def org_headers():
    return {"x-org-id": ORG_A}


@pytest.fixture
def auth_headers():
    """Org header plus a valid bearer token for user-1."""
    token = issue_token("user-1", email="user1@example.com")
    return {"x-org-id": ORG_A, "Authorization": f"Bearer {token}"}
