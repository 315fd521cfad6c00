import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from taskboard.core.logging import get_logger
from taskboard.db import TaskboardDB
from taskboard.models.health import HealthResponse, ReadinessResponse

from .dependencies import get_db

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Liveness probe; never touches the database."""
    settings = request.app.state.config.TASKBOARD
    return HealthResponse(
        timestamp=datetime.now(timezone.utc),
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ReadinessResponse}},
)
async def ready(request: Request, db: TaskboardDB = Depends(get_db)):
    """Readiness probe: 200 while MongoDB answers a ping, 503 otherwise."""
    try:
        await db.ping()
    except PyMongoError as e:
        logger.error("readiness_check_failed", error=str(e))
        body = ReadinessResponse(status="not ready", database="disconnected")
        return JSONResponse(status_code=503, content=body.model_dump(exclude_none=True))

    return ReadinessResponse(
        status="ready",
        database="connected",
        uptime=round(time.monotonic() - request.app.state.started_at, 3),
    )
