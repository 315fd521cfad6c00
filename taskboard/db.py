"""Async MongoDB wrapper for the Taskboard service.

Provides a clean interface for MongoDB access with proper resource management.
Uses motor (async pymongo driver) directly.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase


class TaskboardDB:
    """Async MongoDB wrapper with proper resource management.

    A thin wrapper around motor that owns the one long-lived client of the
    process. No application-specific logic; repositories ask it for
    collections.

    Example:
        ```python
        async with TaskboardDB(uri="mongodb://localhost:27017", db_name="taskboard") as db:
            await db.ping()
            users = db.collection("users")
        ```
    """

    def __init__(
        self,
        uri: str = "mongodb://localhost:27017",
        db_name: str = "taskboard",
        server_selection_timeout_ms: int = 5000,
    ):
        """Initialize with connection parameters. No connection made until connect()."""
        self._uri = uri
        self._db_name = db_name
        self._timeout_ms = server_selection_timeout_ms
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None

    @property
    def client(self) -> Optional[AsyncIOMotorClient]:
        """The MongoDB client (None if not connected)."""
        return self._client

    @property
    def db(self) -> Optional[AsyncIOMotorDatabase]:
        """The database instance (None if not connected)."""
        return self._db

    @property
    def is_connected(self) -> bool:
        """Whether the database is connected."""
        return self._client is not None

    def collection(self, name: str) -> AsyncIOMotorCollection:
        """Get a collection by name."""
        if self._db is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._db[name]

    async def connect(self) -> "TaskboardDB":
        """Connect to MongoDB. Returns self for chaining."""
        if self._client is not None:
            return self
        self._client = AsyncIOMotorClient(
            self._uri,
            tz_aware=True,
            serverSelectionTimeoutMS=self._timeout_ms,
        )
        self._db = self._client[self._db_name]
        return self

    async def ping(self) -> bool:
        """Round-trip to the server; raises a PyMongoError when unreachable."""
        if not self.is_connected:
            await self.connect()
        await self._client.admin.command("ping")
        return True

    async def disconnect(self) -> None:
        """Disconnect and cleanup."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._db = None

    async def close(self) -> None:
        """Alias for disconnect()."""
        await self.disconnect()

    async def __aenter__(self) -> "TaskboardDB":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()
