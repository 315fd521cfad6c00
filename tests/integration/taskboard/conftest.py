from typing import Generator, List

import pytest
from fastapi.testclient import TestClient
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from taskboard.app import create_app
from taskboard.core.settings import TaskboardConfig, TaskboardSettings
from tests.integration.taskboard.helpers import TEST_DB_NAME, TEST_MONGO_URI

TEST_COLLECTIONS: List[str] = ["users", "tasks"]


def _mongo_available() -> bool:
    client = MongoClient(TEST_MONGO_URI, serverSelectionTimeoutMS=1000)
    try:
        client.admin.command("ping")
        return True
    except PyMongoError:
        return False
    finally:
        client.close()


@pytest.fixture(scope="session")
def mongo_available() -> bool:
    return _mongo_available()


def _drop_test_collections() -> None:
    client = MongoClient(TEST_MONGO_URI, serverSelectionTimeoutMS=5000)
    try:
        db = client[TEST_DB_NAME]
        for name in TEST_COLLECTIONS:
            db.drop_collection(name)
    finally:
        client.close()


@pytest.fixture
def config() -> TaskboardConfig:
    return TaskboardConfig(
        TASKBOARD=TaskboardSettings(
            MONGO_URI=TEST_MONGO_URI,
            MONGO_DB=TEST_DB_NAME,
            JWT_SECRET="integration-test-secret-long-enough-for-hs256",
            BCRYPT_ROUNDS=4,
            RATE_LIMIT_REQUESTS=0,
            LOG_JSON=False,
        )
    )


@pytest.fixture
def client(mongo_available, config) -> Generator[TestClient, None, None]:
    """
    In-process TestClient against a real MongoDB, with a clean database.

    The lifespan runs, so indexes are created exactly as in production.
    """
    if not mongo_available:
        pytest.skip(f"MongoDB not reachable on {TEST_MONGO_URI}")

    _drop_test_collections()
    with TestClient(create_app(config), raise_server_exceptions=False) as client:
        yield client
    _drop_test_collections()
