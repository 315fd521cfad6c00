"""Shared request helpers for the integration suite."""

import os

from fastapi.testclient import TestClient

TEST_MONGO_URI = os.getenv("TASKBOARD_TEST_MONGO_URI", "mongodb://localhost:27017")
TEST_DB_NAME = "taskboard_test"


def register(client: TestClient, username: str, password: str = "secret123") -> dict:
    response = client.post(
        "/api/auth/register",
        json={"username": username, "email": f"{username}@example.com", "password": password},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return {"user": body["user"], "headers": {"Authorization": f"Bearer {body['token']}"}}
