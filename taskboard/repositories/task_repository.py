from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument

from taskboard.models.enums import TaskPriority, TaskStatus
from taskboard.models.task import Task

from .base_repository import BaseRepository, to_object_id


class TaskRepository(BaseRepository):
    """Task storage. Every read and write is scoped to the owning user."""

    collection_name = "tasks"

    @staticmethod
    def _to_model(doc: dict) -> Task:
        return Task(
            id=str(doc["_id"]),
            user_id=str(doc["user_id"]),
            title=doc["title"],
            description=doc.get("description"),
            status=TaskStatus(doc.get("status", TaskStatus.PENDING.value)),
            priority=TaskPriority(doc.get("priority", TaskPriority.MEDIUM.value)),
            due_date=doc.get("due_date"),
            tags=list(doc.get("tags") or []),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    @staticmethod
    def _owner_query(
        owner_id: ObjectId,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> Dict[str, Any]:
        query: Dict[str, Any] = {"user_id": owner_id}
        if status:
            query["status"] = status
        if priority:
            query["priority"] = priority
        return query

    async def list_for_owner(
        self,
        owner_id: str,
        *,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> List[Task]:
        """Newest first; ``_id`` breaks ties so pages never overlap."""
        oid = to_object_id(owner_id)
        if oid is None:
            return []

        cursor = (
            self._collection()
            .find(self._owner_query(oid, status, priority))
            .sort([("created_at", DESCENDING), ("_id", DESCENDING)])
            .skip(skip)
            .limit(limit)
        )
        return [self._to_model(doc) async for doc in cursor]

    async def count_for_owner(
        self,
        owner_id: str,
        *,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> int:
        oid = to_object_id(owner_id)
        if oid is None:
            return 0
        return await self._collection().count_documents(self._owner_query(oid, status, priority))

    async def create(self, owner_id: str, fields: Dict[str, Any], now: datetime) -> Task:
        data = dict(fields)
        data["user_id"] = ObjectId(owner_id)
        data["created_at"] = now
        data["updated_at"] = now

        result = await self._collection().insert_one(data)
        data["_id"] = result.inserted_id
        return self._to_model(data)

    async def update_for_owner(
        self,
        task_id: str,
        owner_id: str,
        fields: Dict[str, Any],
        now: datetime,
    ) -> Optional[Task]:
        """Atomically update the task only if ``owner_id`` owns it.

        ``updated_at`` becomes ``now``, but never less than one millisecond
        after ``created_at``.
        """
        oid = to_object_id(task_id)
        owner_oid = to_object_id(owner_id)
        if oid is None or owner_oid is None:
            return None

        # Pipeline updates read "$..." strings as field paths; client values go in as literals.
        stage = {key: {"$literal": value} for key, value in fields.items()}
        stage["updated_at"] = {"$max": [now, {"$add": ["$created_at", 1]}]}

        doc = await self._collection().find_one_and_update(
            {"_id": oid, "user_id": owner_oid},
            [{"$set": stage}],
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        return self._to_model(doc)

    async def delete_for_owner(self, task_id: str, owner_id: str) -> Optional[Task]:
        oid = to_object_id(task_id)
        owner_oid = to_object_id(owner_id)
        if oid is None or owner_oid is None:
            return None

        doc = await self._collection().find_one_and_delete({"_id": oid, "user_id": owner_oid})
        if not doc:
            return None
        return self._to_model(doc)
