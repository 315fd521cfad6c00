"""Configuration for the Taskboard API.

Settings live in a single ``TASKBOARD`` section. Every key can be overridden
from the environment (or a ``.env`` file) with the ``TASKBOARD__`` prefix, e.g.
``TASKBOARD__MONGO_URI=mongodb://mongo:27017``.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

SEVEN_DAYS_SECONDS = 7 * 24 * 60 * 60


class TaskboardSettings(BaseModel):
    """Taskboard service configuration settings."""

    # Service
    URL: str = "http://localhost:5000"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    ENVIRONMENT: str = "development"
    VERSION: str = "1.0.0"

    # MongoDB
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "taskboard"

    # Auth / JWT
    JWT_SECRET: SecretStr = SecretStr("change-me-taskboard-development-secret")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_IN: int = SEVEN_DAYS_SECONDS
    BCRYPT_ROUNDS: int = Field(12, ge=4, le=31)

    # Pagination
    DEFAULT_PAGE_SIZE: int = Field(10, ge=1)
    MAX_PAGE_SIZE: int = Field(100, ge=1)

    # HTTP
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    RATE_LIMIT_REQUESTS: int = 100  # 0 disables rate limiting
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60

    # Bootstrap admin (see taskboard.seed)
    ADMIN_USERNAME: str = "admin"
    ADMIN_EMAIL: str = "admin@taskboard.local"
    ADMIN_PASSWORD: SecretStr = SecretStr("admin123")

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    LOG_DIR: Optional[str] = None


class TaskboardConfig(BaseSettings):
    """Root settings object; read once at startup and passed down explicitly."""

    TASKBOARD: TaskboardSettings = Field(default_factory=TaskboardSettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


_config: Optional[TaskboardConfig] = None


def get_taskboard_config() -> TaskboardConfig:
    """Get the Taskboard configuration singleton.

    Configuration is loaded once and cached. Supports environment variable
    overrides using the TASKBOARD__ prefix.

    Examples:
        ```bash
        export TASKBOARD__PORT=8081
        export TASKBOARD__MONGO_URI=mongodb://mongo:27017
        ```

        ```python
        config = get_taskboard_config()
        print(config.TASKBOARD.MONGO_DB)  # taskboard
        ```
    """
    global _config
    if _config is None:
        _config = TaskboardConfig()
    return _config


def reset_taskboard_config() -> None:
    """Reset the config cache. Useful for testing."""
    global _config
    _config = None
