"""Database bootstrap for Taskboard.

Creates the indexes and a default admin user. It's idempotent - running it
multiple times won't duplicate data.
"""

from typing import Optional

from taskboard.core.indexes import ensure_indexes
from taskboard.core.logging import get_logger
from taskboard.core.security import PasswordHasher
from taskboard.core.settings import TaskboardConfig
from taskboard.db import TaskboardDB
from taskboard.models.enums import UserRole
from taskboard.models.user import User, normalize_email
from taskboard.repositories.user_repository import UserRepository

logger = get_logger(__name__)


async def seed_admin_user(config: TaskboardConfig, users: UserRepository) -> Optional[User]:
    """
    Create the admin user from the ``ADMIN_*`` settings if it doesn't exist.

    Returns:
        The created user, or None when a user with that username or email is
        already present.
    """
    settings = config.TASKBOARD
    email = normalize_email(settings.ADMIN_EMAIL)

    existing = await users.find_by_username_or_email(settings.ADMIN_USERNAME, email)
    if existing:
        logger.info("admin_user_exists", username=existing.username)
        return None

    hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    password_hash = await hasher.hash_async(settings.ADMIN_PASSWORD.get_secret_value())

    user = await users.create(
        username=settings.ADMIN_USERNAME,
        email=email,
        password_hash=password_hash,
        role=UserRole.ADMIN,
    )
    logger.info("admin_user_created", username=user.username, email=user.email)
    return user


async def init_database(config: TaskboardConfig, db: TaskboardDB) -> Optional[User]:
    """Ensure indexes and seed the admin user. Connects ``db`` if needed."""
    await db.connect()
    await ensure_indexes(db.db)
    logger.info("indexes_ensured", mongo_db=config.TASKBOARD.MONGO_DB)

    return await seed_admin_user(config, UserRepository(db))
