import math
from datetime import datetime, timezone
from typing import Callable

from taskboard.core.exceptions import NotFoundError, ValidationError
from taskboard.core.logging import get_logger
from taskboard.core.security import TokenIdentity
from taskboard.models.task import (
    MessageResponse,
    TaskCreatePayload,
    TaskListQuery,
    TaskListResponse,
    TaskResponse,
    TaskUpdatePayload,
)
from taskboard.repositories.task_repository import TaskRepository

logger = get_logger(__name__)

# Largest offset a BSON int64 can carry.
MAX_SKIP = 2**63 - 1


def utcnow() -> datetime:
    now = datetime.now(timezone.utc)
    # BSON datetimes keep milliseconds only.
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class TaskService:
    """Owner-scoped task CRUD.

    The caller's identity always comes from the verified token. Updates and
    deletes are single conditional store operations on ``{_id, user_id}``, so
    a task owned by someone else is indistinguishable from a missing one.
    """

    def __init__(
        self,
        tasks: TaskRepository,
        *,
        default_limit: int = 10,
        max_limit: int = 100,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.tasks = tasks
        self.default_limit = default_limit
        self.max_limit = max_limit
        self._clock = clock

    async def list_tasks(self, identity: TokenIdentity, query: TaskListQuery) -> TaskListResponse:
        limit = min(query.limit or self.default_limit, self.max_limit)
        page = query.page
        max_page = MAX_SKIP // limit + 1
        if page > max_page:
            raise ValidationError(f"page: Input should be less than or equal to {max_page}")

        status = query.status.value if query.status else None
        priority = query.priority.value if query.priority else None

        tasks = await self.tasks.list_for_owner(
            identity.user_id,
            status=status,
            priority=priority,
            skip=(page - 1) * limit,
            limit=limit,
        )
        total = await self.tasks.count_for_owner(identity.user_id, status=status, priority=priority)

        return TaskListResponse(
            tasks=[TaskResponse.from_task(t) for t in tasks],
            total=total,
            current_page=page,
            total_pages=math.ceil(total / limit),
        )

    async def create_task(self, identity: TokenIdentity, payload: TaskCreatePayload) -> TaskResponse:
        task = await self.tasks.create(identity.user_id, payload.to_document(), now=self._clock())
        logger.info("task_created", task_id=task.id, user=identity.username)
        return TaskResponse.from_task(task)

    async def update_task(
        self,
        identity: TokenIdentity,
        task_id: str,
        payload: TaskUpdatePayload,
    ) -> TaskResponse:
        fields = payload.to_document()

        task = await self.tasks.update_for_owner(task_id, identity.user_id, fields, now=self._clock())
        if task is None:
            raise NotFoundError("Task not found")

        logger.info("task_updated", task_id=task.id, user=identity.username, fields=sorted(fields))
        return TaskResponse.from_task(task)

    async def delete_task(self, identity: TokenIdentity, task_id: str) -> MessageResponse:
        task = await self.tasks.delete_for_owner(task_id, identity.user_id)
        if task is None:
            raise NotFoundError("Task not found")

        logger.info("task_deleted", task_id=task.id, user=identity.username)
        return MessageResponse(message="Task deleted successfully")
