from datetime import datetime, timezone
from typing import Optional

from pymongo.errors import DuplicateKeyError

from taskboard.core.exceptions import ConflictError
from taskboard.models.enums import UserRole
from taskboard.models.user import User

from .base_repository import BaseRepository, to_object_id


class UserRepository(BaseRepository):
    collection_name = "users"

    @staticmethod
    def _to_model(doc: dict) -> User:
        return User(
            id=str(doc["_id"]),
            username=doc["username"],
            email=doc["email"],
            password_hash=doc["password_hash"],
            role=UserRole(doc.get("role", UserRole.USER.value)),
            is_active=doc.get("is_active", True),
            last_login=doc.get("last_login"),
            created_at=doc.get("created_at"),
        )

    async def find_by_username_or_email(self, username: str, email: str) -> Optional[User]:
        doc = await self._collection().find_one({"$or": [{"email": email}, {"username": username}]})
        if not doc:
            return None
        return self._to_model(doc)

    async def get_active_by_email(self, email: str) -> Optional[User]:
        doc = await self._collection().find_one({"email": email, "is_active": True})
        if not doc:
            return None
        return self._to_model(doc)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        oid = to_object_id(user_id)
        if oid is None:
            return None

        doc = await self._collection().find_one({"_id": oid})
        if not doc:
            return None
        return self._to_model(doc)

    async def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        role: UserRole = UserRole.USER,
    ) -> User:
        """Insert a new user; the unique indexes turn a lost race into a conflict."""
        data = {
            "username": username,
            "email": email,
            "password_hash": password_hash,
            "role": role.value,
            "is_active": True,
            "last_login": None,
            "created_at": datetime.now(timezone.utc),
        }

        try:
            result = await self._collection().insert_one(data)
        except DuplicateKeyError as e:
            raise ConflictError() from e

        data["_id"] = result.inserted_id
        return self._to_model(data)

    async def touch_last_login(self, user_id: str, when: datetime) -> None:
        oid = to_object_id(user_id)
        if oid is None:
            return
        await self._collection().update_one({"_id": oid}, {"$set": {"last_login": when}})
