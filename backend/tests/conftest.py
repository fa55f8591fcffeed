"""
Pytest configuration and fixtures for backend tests.
"""

import os
import sys
from datetime import datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment variables before importing config
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["CORS_ORIGINS"] = '["http://localhost:3000"]'
os.environ["ADMIN_EMAIL"] = "admin@test.com"
os.environ["ADMIN_PASSWORD"] = "TestAdmin123!"
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["PLATFORM_CONFIG_PATH"] = str(
    Path(__file__).parent / "fixtures" / "platform.config.json"
)

from authentication.auth import create_access_token, get_password_hash  # noqa: E402
from repositories.database import Base, get_db  # noqa: E402
import repositories.db_models as db_models  # noqa: E402
from services.config_service import clear_config_cache  # noqa: E402

# Test database engine (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def fresh_platform_config():
    """Reload platform configuration around every test."""
    clear_config_cache()
    yield
    clear_config_cache()


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
def db(db_session):
    """Alias for db_session for backward compatibility."""
    return db_session


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with overridden database dependency."""
    from main import app
    from helpers.rate_limiter import limiter

    # Reset rate limiter storage before each test to prevent rate limit errors
    limiter.reset()

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _make_user(db_session, email: str, username: str, is_global_admin: bool):
    user = db_models.User(
        email=email,
        username=username,
        display_name=username.title(),
        hashed_password=get_password_hash("password123"),
        is_active=True,
        is_global_admin=is_global_admin,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user(db_session) -> db_models.User:
    """Create a regular (non-admin) user."""
    return _make_user(db_session, "test@example.com", "testuser", False)


@pytest.fixture
def admin_user(db_session) -> db_models.User:
    """Create a global admin user."""
    return _make_user(db_session, "admin@example.com", "adminuser", True)


@pytest.fixture
def auth_headers(test_user) -> dict:
    """Get authentication headers for test user."""
    token = create_access_token(data={"sub": test_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_auth_headers(admin_user) -> dict:
    """Get authentication headers for admin user."""
    token = create_access_token(data={"sub": admin_user.email})
    return {"Authorization": f"Bearer {token}"}


# ============================================================================
# Idea statistics fixtures
# ============================================================================


@pytest.fixture
def proposed_status(db_session) -> db_models.IdeaStatus:
    """Status expecting official feedback."""
    status = db_models.IdeaStatus(
        code="proposed",
        title_en="Proposed",
        title_fr="Proposée",
        ordering=0,
        requires_feedback=True,
    )
    db_session.add(status)
    db_session.commit()
    db_session.refresh(status)
    return status


@pytest.fixture
def accepted_status(db_session) -> db_models.IdeaStatus:
    """Status not expecting feedback."""
    status = db_models.IdeaStatus(
        code="accepted",
        title_en="Accepted",
        title_fr="Acceptée",
        ordering=1,
        requires_feedback=False,
    )
    db_session.add(status)
    db_session.commit()
    db_session.refresh(status)
    return status


@pytest.fixture
def make_project(db_session):
    """Factory creating projects."""

    def _make(
        title_en: str = "Project",
        title_fr: str | None = None,
        project_type: db_models.ProjectType = db_models.ProjectType.IDEATION,
    ) -> db_models.Project:
        project = db_models.Project(
            title_en=title_en,
            title_fr=title_fr or f"{title_en} (fr)",
            project_type=project_type,
        )
        db_session.add(project)
        db_session.commit()
        db_session.refresh(project)
        return project

    return _make


@pytest.fixture
def make_topic(db_session):
    """Factory creating topics with unique codes."""
    counter = {"n": 0}

    def _make(title_en: str | None = None) -> db_models.Topic:
        counter["n"] += 1
        n = counter["n"]
        topic = db_models.Topic(
            code=f"topic_{n}",
            title_en=title_en or f"Topic {n}",
            title_fr=f"Sujet {n}",
        )
        db_session.add(topic)
        db_session.commit()
        db_session.refresh(topic)
        return topic

    return _make


@pytest.fixture
def make_group(db_session):
    """Factory creating a group with the given members."""

    def _make(*members: db_models.User) -> db_models.Group:
        group = db_models.Group(title_en="Group", title_fr="Groupe")
        db_session.add(group)
        db_session.flush()
        for user in members:
            db_session.add(db_models.Membership(user_id=user.id, group_id=group.id))
        db_session.commit()
        db_session.refresh(group)
        return group

    return _make


@pytest.fixture
def make_idea(db_session, proposed_status):
    """Factory creating ideas.

    `published_at` is naive UTC, as stored. Pass None for a draft.
    """
    counter = {"n": 0}

    def _make(
        project: db_models.Project,
        published_at: datetime | None,
        status: db_models.IdeaStatus | None = None,
        author: db_models.User | None = None,
        topics: tuple = (),
        with_feedback: bool = False,
    ) -> db_models.Idea:
        counter["n"] += 1
        idea = db_models.Idea(
            title=f"Idea {counter['n']}",
            project_id=project.id,
            author_id=author.id if author else None,
            idea_status_id=(status or proposed_status).id,
            published_at=published_at,
        )
        db_session.add(idea)
        db_session.flush()
        for topic in topics:
            db_session.add(db_models.IdeaTopic(idea_id=idea.id, topic_id=topic.id))
        if with_feedback:
            db_session.add(
                db_models.OfficialFeedback(idea_id=idea.id, body="Thanks, on it.")
            )
        db_session.commit()
        db_session.refresh(idea)
        return idea

    return _make


@pytest.fixture
def stats_scenario(make_project, make_topic, make_idea):
    """Ideas spread around 2023 in Montreal time.

    - Dec 2022: 1 idea in project2, already answered
    - Mar 2023: 2 ideas in project1 with topics
    - Jun 2023: 3 ideas in project1 with topics, 1 in project2
    - plus a native survey response and a draft, which never count

    All ideas are `proposed`. 7 ideas count overall, 6 still need
    feedback and 6 were published during 2023.
    """
    project1 = make_project("Parks")
    project2 = make_project("Streets")
    survey = make_project("Survey", project_type=db_models.ProjectType.NATIVE_SURVEY)
    topic_a = make_topic("Mobility")
    topic_b = make_topic("Environment")

    make_idea(project2, datetime(2022, 12, 1, 15, 0), with_feedback=True)
    make_idea(project1, datetime(2023, 3, 1, 15, 0), topics=(topic_a, topic_b))
    make_idea(project1, datetime(2023, 3, 1, 16, 0), topics=(topic_a,))
    for hour in (14, 15, 16):
        make_idea(project1, datetime(2023, 6, 1, hour, 0), topics=(topic_b,))
    make_idea(project2, datetime(2023, 6, 1, 17, 0))
    make_idea(survey, datetime(2023, 6, 1, 18, 0))
    make_idea(project1, None)

    return {
        "project1": project1,
        "project2": project2,
        "survey": survey,
        "topic_a": topic_a,
        "topic_b": topic_b,
    }
