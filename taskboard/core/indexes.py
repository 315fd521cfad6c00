"""MongoDB index management for Taskboard."""

from typing import TYPE_CHECKING

from pymongo import ASCENDING, DESCENDING

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorDatabase


async def ensure_indexes(db: "AsyncIOMotorDatabase") -> None:
    """
    Create required indexes on MongoDB collections.

    Call this during application startup. The unique user indexes back the
    username/email uniqueness invariant when two registrations race.
    """
    # Users collection
    await db.users.create_index("username", unique=True)
    await db.users.create_index("email", unique=True)
    await db.users.create_index("is_active")
    await db.users.create_index("created_at")

    # Tasks collection
    await db.tasks.create_index("user_id")
    await db.tasks.create_index("status")
    await db.tasks.create_index("priority")
    await db.tasks.create_index([("created_at", DESCENDING)])
    await db.tasks.create_index("due_date")
    await db.tasks.create_index([("user_id", ASCENDING), ("status", ASCENDING)])
    await db.tasks.create_index([("user_id", ASCENDING), ("priority", ASCENDING)])
    await db.tasks.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
