"""
Pytest configuration and fixtures for eco3 tests.
"""
import os

# Must be set before eco3 builds its settings and engine
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from eco3.auth import create_access_token, get_password_hash
from eco3.database import Base, get_db, init_db
from eco3.limiter import limiter
from eco3.main import app
from eco3.models import Comment, Like, Post, User

# Disable rate limiting for tests
limiter.enabled = False

# Use in-memory SQLite for tests with shared connection
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "testpassword123"

# Global session for sharing across requests
_test_session = None


def get_test_db():
    """Get the shared test database session."""
    yield _test_session


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    global _test_session

    init_db(bind=engine)
    _test_session = TestingSessionLocal()
    app.dependency_overrides[get_db] = get_test_db

    yield _test_session

    app.dependency_overrides.clear()
    _test_session.close()
    _test_session = None
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Create a test client."""
    with TestClient(app) as c:
        yield c


def make_user(db, username, email, password=TEST_PASSWORD, full_name=None):
    user = User(
        username=username,
        email=email,
        password_hash=get_password_hash(password),
        full_name=full_name,
        profile_image_url="https://picsum.photos/200/300?random=1",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def test_user(db):
    """Create a test user."""
    return make_user(db, "testuser", "test@example.com", full_name="Test User")


@pytest.fixture(scope="function")
def other_user(db):
    return make_user(db, "otheruser", "other@example.com", full_name="Other User")


@pytest.fixture(scope="function")
def test_post(db, test_user):
    post = Post(
        user_id=test_user.id,
        title="Bike to work week",
        content="Logged 40 km by bike instead of car.",
        image_url="https://picsum.photos/800/600?random=2",
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


@pytest.fixture(scope="function")
def make_comment(db):
    def _make(user, post, content="Nice work!"):
        comment = Comment(user_id=user.id, post_id=post.id, content=content)
        db.add(comment)
        db.commit()
        db.refresh(comment)
        return comment
    return _make


@pytest.fixture(scope="function")
def make_like(db):
    def _make(user, post):
        like = Like(user_id=user.id, post_id=post.id)
        db.add(like)
        db.commit()
        return like
    return _make


@pytest.fixture(scope="function")
def auth_token(test_user):
    """Get an auth token for the test user."""
    return create_access_token(test_user.id, test_user.email)


@pytest.fixture(scope="function")
def auth_headers(auth_token):
    """Get auth headers for the test user."""
    return {"Authorization": f"Bearer {auth_token}"}
