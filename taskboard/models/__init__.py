from .enums import TaskPriority, TaskStatus, UserRole
from .health import HealthResponse, ReadinessResponse
from .task import (
    MessageResponse,
    Task,
    TaskCreatePayload,
    TaskListQuery,
    TaskListResponse,
    TaskResponse,
    TaskUpdatePayload,
)
from .user import (
    AuthResponse,
    LoginPayload,
    ProfileResponse,
    PublicUser,
    RegisterPayload,
    User,
)

__all__ = [
    "AuthResponse",
    "HealthResponse",
    "LoginPayload",
    "MessageResponse",
    "ProfileResponse",
    "PublicUser",
    "ReadinessResponse",
    "RegisterPayload",
    "Task",
    "TaskCreatePayload",
    "TaskListQuery",
    "TaskListResponse",
    "TaskPriority",
    "TaskResponse",
    "TaskStatus",
    "TaskUpdatePayload",
    "User",
    "UserRole",
]
