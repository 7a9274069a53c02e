"""Pytest configuration and fixtures."""

import os

import msgpack
import pytest
from fastapi.testclient import TestClient

from resto_rate.api.wire import is_msgpack
from resto_rate.config import Settings, get_settings
from resto_rate.database import Base, Database, get_db
from resto_rate.main import create_app
from resto_rate.models.user import User

MSGPACK_HEADERS = {"Content-Type": "application/msgpack"}


def unpack_response(response):
    """Decode a response body according to its content type."""
    if is_msgpack(response.headers.get("content-type")):
        return msgpack.unpackb(response.content, raw=False)
    return response.json()


class AuthHeaders(dict):
    """Dict subclass that also stores the user id and session token."""

    def __init__(self, *args, user_id: str | None = None, token: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.token = token


# Use test database - PostgreSQL when DATABASE_URL is set, SQLite locally
if os.getenv("DATABASE_URL"):
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/resto_rate", "/resto_rate_test")
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

test_database = Database(SQLALCHEMY_DATABASE_URL)

test_settings = Settings(
    _env_file=None,
    database_url=SQLALCHEMY_DATABASE_URL,
    google_client_id="test-client-id",
    google_client_secret="test-client-secret",
    google_redirect_uri="http://localhost:5173/auth/callback",
    environment="test",
)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    test_database.create_all()
    yield
    test_database.close()


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = test_database.session_factory()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def settings():
    return test_settings


@pytest.fixture(scope="function")
def app(db, settings):
    """Application wired to the test database session and settings."""
    application = create_app(settings=settings, database=test_database)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_settings] = lambda: settings
    yield application
    application.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(app):
    """Create a test client with database override."""
    with TestClient(app) as test_client:
        yield test_client


def _register(client, username: str, password: str = "secret1", age: int | None = None) -> AuthHeaders:
    body = {"username": username, "password": password}
    if age is not None:
        body["age"] = age
    response = client.post("/api/auth/register", json=body)
    assert response.status_code == 200, response.text
    data = unpack_response(response)
    token = data["sessionId"]
    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=data["user"]["id"], token=token)


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return _register(client, "alice")


@pytest.fixture
def other_auth_headers(client):
    """A second, unrelated user."""
    return _register(client, "bob")


@pytest.fixture
def admin_headers(client, db):
    """A user with administrator rights."""
    headers = _register(client, "admin")
    db.query(User).filter(User.id == headers.user_id).update({"is_admin": True})
    db.commit()
    return headers


@pytest.fixture
def register_user(client):
    """Factory that registers a user and returns bearer headers for its session."""

    def _make(username: str, password: str = "secret1", age: int | None = None) -> AuthHeaders:
        return _register(client, username, password, age)

    return _make
