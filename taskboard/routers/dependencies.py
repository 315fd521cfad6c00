"""Request-scoped access to the services built by ``create_app``."""

from fastapi import Request

from taskboard.db import TaskboardDB
from taskboard.services.auth_service import AuthService
from taskboard.services.task_service import TaskService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


def get_db(request: Request) -> TaskboardDB:
    return request.app.state.db
