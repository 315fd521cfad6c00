"""Taskboard API application factory.

Wires configuration, the MongoDB connection, repositories and services into a
FastAPI app. Everything the handlers need hangs off ``app.state`` so tests can
swap repositories for in-memory fakes.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.core.exceptions import InternalError, TaskboardError, UnexpectedError, ValidationError
from taskboard.core.indexes import ensure_indexes
from taskboard.core.logging import get_logger, setup_logger
from taskboard.core.middleware import (
    RateLimiter,
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from taskboard.core.security import PasswordHasher, TokenIssuer
from taskboard.core.settings import TaskboardConfig, get_taskboard_config
from taskboard.db import TaskboardDB
from taskboard.repositories.task_repository import TaskRepository
from taskboard.repositories.user_repository import UserRepository
from taskboard.routers import auth_router, health_router, tasks_router
from taskboard.services.auth_service import AuthService
from taskboard.services.task_service import TaskService

logger = get_logger(__name__)


# ───────────────────────────────────────────────
# Exception handlers
# ───────────────────────────────────────────────


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _format_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message

    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Malformed JSON body"

    loc = list(first.get("loc", ()))
    if loc and loc[0] in ("body", "query", "path"):
        loc = loc[1:]
    field = ".".join(str(part) for part in loc)

    message = str(first.get("msg", "is invalid"))
    if message.startswith("Value error, "):
        message = message[len("Value error, ") :]

    return f"{field}: {message}" if field else message


async def taskboard_error_handler(request: Request, exc: TaskboardError) -> JSONResponse:
    return _error(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(_format_validation_error(exc))
    return _error(error.status_code, error.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return _error(404, "Route not found")
    return _error(exc.status_code, str(exc.detail))


async def database_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.error("database_error", path=request.url.path, exc_info=exc)
    error = InternalError()
    return _error(error.status_code, error.message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", path=request.url.path, exc_info=exc)
    error = UnexpectedError()
    return _error(error.status_code, error.message)


# ───────────────────────────────────────────────
# Lifespan
# ───────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect to MongoDB on startup and close the client on shutdown.

    A database that cannot be reached at startup is fatal: the error is logged
    and re-raised so the server process stops instead of serving 500s.
    """
    db: TaskboardDB = app.state.db
    settings = app.state.config.TASKBOARD

    try:
        await db.connect()
        await db.ping()
        await ensure_indexes(db.db)
    except PyMongoError as e:
        logger.error("database_connection_failed", mongo_db=settings.MONGO_DB, error=str(e))
        await db.disconnect()
        raise

    logger.info(
        "taskboard_started",
        mongo_db=settings.MONGO_DB,
        environment=settings.ENVIRONMENT,
        version=settings.VERSION,
    )
    try:
        yield
    finally:
        await db.disconnect()
        logger.info("taskboard_stopped")


# ───────────────────────────────────────────────
# Factory
# ───────────────────────────────────────────────


def create_app(
    config: Optional[TaskboardConfig] = None,
    *,
    db: Optional[TaskboardDB] = None,
    users: Optional[Any] = None,
    tasks: Optional[Any] = None,
) -> FastAPI:
    """Build the Taskboard FastAPI application.

    Args:
        config: Loaded configuration. Defaults to :func:`get_taskboard_config`.
        db: Database wrapper. Defaults to one built from ``MONGO_URI``/``MONGO_DB``.
        users: User repository override (tests).
        tasks: Task repository override (tests).
    """
    config = config or get_taskboard_config()
    settings = config.TASKBOARD

    setup_logger(
        "taskboard",
        level=settings.LOG_LEVEL,
        log_dir=settings.LOG_DIR,
        json_logs=settings.LOG_JSON,
    )

    if db is None:
        db = TaskboardDB(uri=settings.MONGO_URI, db_name=settings.MONGO_DB)
    if users is None:
        users = UserRepository(db)
    if tasks is None:
        tasks = TaskRepository(db)

    hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    tokens = TokenIssuer(
        secret=settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        expires_in=settings.JWT_EXPIRES_IN,
    )

    app = FastAPI(
        title="Taskboard API",
        description="Task management REST API with JWT authentication.",
        version=settings.VERSION,
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.db = db
    app.state.hasher = hasher
    app.state.tokens = tokens
    app.state.auth_service = AuthService(users=users, hasher=hasher, tokens=tokens)
    app.state.task_service = TaskService(
        tasks,
        default_limit=settings.DEFAULT_PAGE_SIZE,
        max_limit=settings.MAX_PAGE_SIZE,
    )
    app.state.rate_limiter = RateLimiter(
        max_requests=settings.RATE_LIMIT_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )
    app.state.started_at = time.monotonic()

    # Added innermost first; CORS ends up outermost.
    app.add_middleware(RateLimitMiddleware, limiter=app.state.rate_limiter)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TaskboardError, taskboard_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(PyMongoError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(auth_router)
    app.include_router(tasks_router)
    app.include_router(health_router)

    return app
