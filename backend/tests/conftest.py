"""
Pytest configuration and fixtures for backend tests.
"""

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment variables before importing config
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only"  # pragma: allowlist secret
os.environ["CORS_ORIGINS"] = '["http://localhost:3000"]'
os.environ["ADMIN_EMAIL"] = "admin@test.com"
os.environ["AUTO_CREATE_DB"] = "false"

from authentication.auth import create_access_token  # noqa: E402
from models.schemas import AuthContext  # noqa: E402
from repositories.database import Base, get_db  # noqa: E402
import repositories.db_models as db_models  # noqa: E402

# Test database engine (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh in-memory database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def app(db_session):
    """FastAPI app with the database dependency pointed at the test session."""
    from main import app as fastapi_app
    from helpers.rate_limiter import limiter

    # Reset rate limiter storage before each test to prevent rate limit errors
    limiter.reset()

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(app):
    """Create a test client with overridden database dependency."""
    with TestClient(app) as test_client:
        yield test_client


def _make_profile(db_session, profile_id, email, full_name, role) -> db_models.Profile:
    profile = db_models.Profile(
        id=profile_id, email=email, full_name=full_name, role=role
    )
    db_session.add(profile)
    db_session.commit()
    db_session.refresh(profile)
    return profile


@pytest.fixture
def student(db_session) -> db_models.Profile:
    """A student profile."""
    return _make_profile(
        db_session,
        "student-1",
        "ada@example.com",
        "Ada Lovelace",
        db_models.ProfileRole.STUDENT,
    )


@pytest.fixture
def other_student(db_session) -> db_models.Profile:
    """A second student who owns nothing of the first's."""
    return _make_profile(
        db_session,
        "student-2",
        "grace@example.com",
        "Grace Hopper",
        db_models.ProfileRole.STUDENT,
    )


@pytest.fixture
def admin(db_session) -> db_models.Profile:
    """An admin profile."""
    return _make_profile(
        db_session,
        "admin-1",
        "admin@example.com",
        "Admin User",
        db_models.ProfileRole.ADMIN,
    )


def _headers_for(profile: db_models.Profile) -> dict:
    token = create_access_token(profile.id, claims={"email": profile.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(student) -> dict:
    return _headers_for(student)


@pytest.fixture
def other_auth_headers(other_student) -> dict:
    return _headers_for(other_student)


@pytest.fixture
def admin_auth_headers(admin) -> dict:
    return _headers_for(admin)


@pytest.fixture
def admin_token(admin) -> str:
    return create_access_token(admin.id, claims={"email": admin.email})


@pytest.fixture
def student_context(student) -> AuthContext:
    return AuthContext(
        profile_id=student.id,
        role=student.role,
        email=student.email,
        full_name=student.full_name,
    )


@pytest.fixture
def other_context(other_student) -> AuthContext:
    return AuthContext(profile_id=other_student.id, role=other_student.role)


@pytest.fixture
def admin_context(admin) -> AuthContext:
    return AuthContext(profile_id=admin.id, role=admin.role, email=admin.email)


@pytest.fixture
def make_idea(db_session, student):
    """Factory fixture to create ideas; defaults to a submitted idea by `student`."""

    def _make_idea(author: db_models.Profile | None = None, **overrides) -> db_models.Idea:
        values = {
            "title": "Solar Backpack",
            "problem_statement": "Students run out of battery between classes.",
            "solution": "A backpack with a flexible solar panel and a power bank.",
            "category": "Energy",
            "tags": ["solar", "hardware"],
            "status": db_models.IdeaStatus.SUBMITTED,
            "is_featured": False,
        }
        values.update(overrides)
        idea = db_models.Idea(user_id=(author or student).id, **values)
        db_session.add(idea)
        db_session.commit()
        db_session.refresh(idea)
        return idea

    return _make_idea


@pytest.fixture
def draft_idea(make_idea) -> db_models.Idea:
    return make_idea(title="Draft Idea", status=db_models.IdeaStatus.DRAFT)


@pytest.fixture
def submitted_idea(make_idea) -> db_models.Idea:
    return make_idea()


@pytest.fixture
def approved_idea(make_idea) -> db_models.Idea:
    return make_idea(
        title="Campus Composting",
        category="Sustainability",
        tags=["green"],
        status=db_models.IdeaStatus.APPROVED,
    )


@pytest.fixture
def make_event(db_session):
    """Factory fixture to create events."""
    from datetime import datetime

    def _make_event(**overrides) -> db_models.Event:
        values = {
            "title": "Demo Day",
            "event_date": datetime(2026, 11, 20, 18, 0),
            "location": "Main Hall",
            "status": db_models.EventStatus.PUBLISHED,
        }
        values.update(overrides)
        event = db_models.Event(**values)
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        return event

    return _make_event


@pytest.fixture
def caplog_loguru():
    """Collect loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]))
    yield messages
    logger.remove(handler_id)
