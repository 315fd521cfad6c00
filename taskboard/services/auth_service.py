"""Registration, login and profile lookup.

Passwords are hashed with bcrypt off the event loop and sessions are
stateless JWTs; the store is only consulted for the user record itself.
"""

from datetime import datetime, timezone
from typing import Optional

from taskboard.core.exceptions import ConflictError, InvalidCredentialsError, NotFoundError
from taskboard.core.logging import get_logger
from taskboard.core.security import PasswordHasher, TokenIdentity, TokenIssuer
from taskboard.models.user import (
    AuthResponse,
    LoginPayload,
    ProfileResponse,
    PublicUser,
    RegisterPayload,
)
from taskboard.repositories.user_repository import UserRepository

logger = get_logger(__name__)


class AuthService:
    def __init__(self, users: UserRepository, hasher: PasswordHasher, tokens: TokenIssuer):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    async def register(self, payload: RegisterPayload) -> AuthResponse:
        """Create a user and return a session token for it.

        Raises:
            ConflictError: If the username or the email is already taken.
        """
        existing = await self.users.find_by_username_or_email(payload.username, payload.email)
        if existing:
            raise ConflictError("User already exists")

        password_hash = await self.hasher.hash_async(payload.password)
        user = await self.users.create(
            username=payload.username,
            email=payload.email,
            password_hash=password_hash,
        )

        token = self.tokens.issue(TokenIdentity.from_user(user))
        logger.info("user_registered", user_id=user.id, username=user.username)

        return AuthResponse(
            message="User created successfully",
            token=token,
            user=PublicUser.from_user(user),
        )

    async def login(self, payload: LoginPayload, client_host: Optional[str] = None) -> AuthResponse:
        """Authenticate an active user by email and password.

        An unknown email and a wrong password fail identically so callers
        cannot probe which emails are registered.
        """
        user = await self.users.get_active_by_email(payload.email)
        if not user:
            logger.warning("login_failed", reason="unknown_email", client=client_host)
            raise InvalidCredentialsError()

        if not await self.hasher.verify_async(payload.password, user.password_hash):
            logger.warning("login_failed", reason="bad_password", user_id=user.id, client=client_host)
            raise InvalidCredentialsError()

        now = datetime.now(timezone.utc)
        await self.users.touch_last_login(user.id, now)
        user.last_login = now

        token = self.tokens.issue(TokenIdentity.from_user(user))
        logger.info("user_logged_in", user_id=user.id, username=user.username)

        return AuthResponse(
            message="Login successful",
            token=token,
            user=PublicUser.from_user(user),
        )

    async def profile(self, identity: TokenIdentity) -> ProfileResponse:
        user = await self.users.get_by_id(identity.user_id)
        if not user:
            raise NotFoundError("User not found")
        return ProfileResponse.from_user(user)
