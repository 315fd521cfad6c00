from .exceptions import (
    AuthenticationError,
    ConflictError,
    InternalError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    RateLimitError,
    TaskboardError,
    UnexpectedError,
    ValidationError,
)
from .logging import get_logger, setup_logger
from .security import PasswordHasher, TokenIdentity, TokenIssuer, require_user
from .settings import TaskboardConfig, TaskboardSettings, get_taskboard_config, reset_taskboard_config

__all__ = [
    "AuthenticationError",
    "ConflictError",
    "InternalError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "NotFoundError",
    "PasswordHasher",
    "RateLimitError",
    "TaskboardConfig",
    "TaskboardError",
    "TaskboardSettings",
    "TokenIdentity",
    "TokenIssuer",
    "UnexpectedError",
    "ValidationError",
    "get_logger",
    "get_taskboard_config",
    "require_user",
    "reset_taskboard_config",
    "setup_logger",
]
