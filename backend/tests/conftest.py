"""
TripNest Backend - Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the whole suite.
How:   Each test that needs the app gets a fresh create_app(settings) backed
       by a SQLite file (aiosqlite) and an upload directory, both under
       tmp_path. httpx's ASGITransport does not run the lifespan, so the
       `app` fixture creates the schema itself.

Fixture Hierarchy (all function-scoped):
    ├── settings:          Settings pointing at tmp_path
    ├── app:               create_app(settings) with tables created
    ├── client:            httpx AsyncClient over ASGITransport (keeps cookies)
    ├── db_session:        AsyncSession from the app's session factory
    ├── create_user:       inserts a local user with a given role
    ├── login_as:          creates a user and signs the client in
    ├── mock_db_session:   AsyncMock session for failure paths
    └── sample_image_bytes
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Before any tripnest import: tripnest.main builds a module-level app from
# the environment, which must never point at a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from tripnest.config import Settings  # noqa: E402
from tripnest.database import create_schema  # noqa: E402
from tripnest.main import create_app  # noqa: E402
from tripnest.models.user import Role  # noqa: E402
from tripnest.schemas.user import SignupRequest  # noqa: E402
from tripnest.services.user_service import user_service  # noqa: E402

TEST_PASSWORD = "correct horse battery"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'tripnest_test.db'}",
        upload_dir=str(tmp_path / "uploads"),
        session_secret="test-session-secret",
        google_client_id="test-client-id",
        google_client_secret="test-client-secret",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(settings):
    application = create_app(settings)
    await create_schema(application.state.engine)
    yield application
    await application.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    """
    Usage:
        async def test_health(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def db_session(app):
    async with app.state.session_factory() as session:
        yield session


@pytest.fixture
def create_user(app):
    """Factory: insert a committed local user and return it."""

    async def _create(username: str, role: Role = Role.USER, password: str = TEST_PASSWORD):
        async with app.state.session_factory() as session:
            user = await user_service.signup(
                session,
                SignupRequest(username=username, password=password),
                role=role,
            )
            await session.commit()
            return user

    return _create


@pytest.fixture
def login_as(client, create_user):
    """Factory: create a user with `role` and sign the shared client in as them."""

    async def _login(role: Role = Role.USER, username: str = None):
        username = username or f"{role.value}@example.com"
        user = await create_user(username, role)
        response = await client.post(
            "/login", json={"username": username, "password": TEST_PASSWORD}
        )
        assert response.status_code == 200, response.text
        return user

    return _login


@pytest.fixture
def mock_db_session():
    """
    AsyncMock standing in for AsyncSession.

    Usage:
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception())
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_image_bytes():
    """Smallest valid JPEG: SOI + JFIF header + EOI."""
    return (
        b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
        b"\xff\xd9"
    )
