"""Enums for the Taskboard application."""

from enum import Enum


class UserRole(str, Enum):
    """User role enumeration for access control."""

    USER = "user"
    ADMIN = "admin"


class TaskStatus(str, Enum):
    """Lifecycle state of a task."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
