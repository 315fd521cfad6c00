from .base_repository import BaseRepository, to_object_id
from .task_repository import TaskRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "TaskRepository",
    "UserRepository",
    "to_object_id",
]
