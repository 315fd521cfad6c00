from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection

from taskboard.db import TaskboardDB


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse a hex id; ``None`` when it is not a valid ObjectId."""
    if not isinstance(value, str):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class BaseRepository:
    collection_name: str = ""

    def __init__(self, db: TaskboardDB) -> None:
        self._db = db

    def _collection(self) -> AsyncIOMotorCollection:
        return self._db.collection(self.collection_name)
