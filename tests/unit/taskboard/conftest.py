from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from taskboard.app import create_app
from taskboard.core.security import PasswordHasher, TokenIssuer
from taskboard.core.settings import TaskboardConfig, TaskboardSettings
from taskboard.db import TaskboardDB

from tests.unit.taskboard.fakes import FakeTaskRepository, FakeUserRepository

TEST_SECRET = "unit-test-secret-that-is-long-enough-for-hs256"


@pytest.fixture
def settings() -> TaskboardSettings:
    return TaskboardSettings(
        JWT_SECRET=TEST_SECRET,
        BCRYPT_ROUNDS=4,
        RATE_LIMIT_REQUESTS=10_000,
        LOG_LEVEL="DEBUG",
        LOG_JSON=False,
    )


@pytest.fixture
def config(settings) -> TaskboardConfig:
    return TaskboardConfig(TASKBOARD=settings)


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenIssuer:
    return TokenIssuer(secret=TEST_SECRET)


@pytest.fixture
def user_repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def task_repo() -> FakeTaskRepository:
    return FakeTaskRepository()


@pytest.fixture
def mock_db() -> MagicMock:
    db = MagicMock(spec=TaskboardDB)
    db.ping = AsyncMock(return_value=True)
    db.connect = AsyncMock(return_value=db)
    db.disconnect = AsyncMock()
    return db


@pytest.fixture
def app(config, mock_db, user_repo, task_repo):
    return create_app(config, db=mock_db, users=user_repo, tasks=task_repo)


@pytest.fixture
def client(app):
    """HTTP client against the app; the lifespan (Mongo connect) is not run."""
    return TestClient(app, raise_server_exceptions=False)


def register(client: TestClient, username: str = "alice", email: str = None, password: str = "secret123") -> dict:
    response = client.post(
        "/api/auth/register",
        json={"username": username, "email": email or f"{username}@example.com", "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client) -> dict:
    body = register(client, "alice")
    return {"user": body["user"], "headers": auth_headers(body["token"])}


@pytest.fixture
def bob(client) -> dict:
    body = register(client, "bob")
    return {"user": body["user"], "headers": auth_headers(body["token"])}
