from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from taskboard.core.security import TokenIdentity, require_user
from taskboard.models.task import (
    MessageResponse,
    TaskCreatePayload,
    TaskListQuery,
    TaskListResponse,
    TaskResponse,
    TaskUpdatePayload,
)
from taskboard.services.task_service import TaskService

from .dependencies import get_task_service

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    query: Annotated[TaskListQuery, Query()],
    identity: TokenIdentity = Depends(require_user),
    service: TaskService = Depends(get_task_service),
) -> TaskListResponse:
    return await service.list_tasks(identity, query)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreatePayload,
    identity: TokenIdentity = Depends(require_user),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    return await service.create_task(identity, payload)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    payload: TaskUpdatePayload,
    identity: TokenIdentity = Depends(require_user),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    return await service.update_task(identity, task_id, payload)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    identity: TokenIdentity = Depends(require_user),
    service: TaskService = Depends(get_task_service),
) -> MessageResponse:
    return await service.delete_task(identity, task_id)
