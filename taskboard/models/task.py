"""Task entity and task request/response models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .enums import TaskPriority, TaskStatus

MAX_TAG_LENGTH = 20

# Owner and bookkeeping fields are always set server-side.
SERVER_MANAGED_FIELDS = ("_id", "id", "userId", "user_id", "ownerId", "owner_id", "createdAt", "updatedAt")

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]


@dataclass
class Task:
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = None
    tags: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def normalize_tags(value: Any) -> Any:
    """Accept a list of strings or one comma-separated string."""
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        return value

    tags: List[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError("tags must be strings")
        tag = item.strip()
        if not tag:
            continue
        if len(tag) > MAX_TAG_LENGTH:
            raise ValueError(f"each tag must be at most {MAX_TAG_LENGTH} characters")
        tags.append(tag)
    return tags


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class _TaskWriteModel(BaseModel):
    """Fields shared by task create and update payloads."""

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        use_enum_values=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_server_managed_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if k not in SERVER_MANAGED_FIELDS}
        return data

    @field_validator("tags", mode="before", check_fields=False)
    @classmethod
    def _normalize_tags(cls, value: Any) -> Any:
        return normalize_tags(value)

    @field_validator("due_date", check_fields=False)
    @classmethod
    def _due_date_to_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value)

    def to_document(self) -> Dict[str, Any]:
        """Storage fields for the values the client actually sent."""
        return self.model_dump(exclude_unset=True)


class TaskCreatePayload(_TaskWriteModel):
    title: Title
    description: Optional[Description] = None
    status: TaskStatus = Field(TaskStatus.PENDING, validate_default=True)
    priority: TaskPriority = Field(TaskPriority.MEDIUM, validate_default=True)
    due_date: Optional[datetime] = Field(None, alias="dueDate")
    tags: List[str] = Field(default_factory=list)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump()


class TaskUpdatePayload(_TaskWriteModel):
    """Partial update; only the fields present in the body are written."""

    title: Optional[Title] = None
    description: Optional[Description] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = Field(None, alias="dueDate")
    tags: Optional[List[str]] = None

    @field_validator("title", "status", "priority", "tags", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("may not be null")
        return value


class TaskListQuery(BaseModel):
    """Query string of ``GET /api/tasks``."""

    page: int = Field(1, ge=1)
    limit: Optional[int] = Field(None, ge=1)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None

    @field_validator("limit", "status", "priority", mode="before")
    @classmethod
    def _blank_as_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TaskResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., alias="_id")
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)
    user_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            due_date=task.due_date,
            tags=list(task.tags),
            user_id=task.user_id,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class TaskListResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    tasks: List[TaskResponse]
    total: int
    current_page: int
    total_pages: int


class MessageResponse(BaseModel):
    message: str
