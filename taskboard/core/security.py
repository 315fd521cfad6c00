from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool

from taskboard.models.enums import UserRole
from taskboard.models.user import User

from .exceptions import AuthenticationError, InvalidTokenError
from .logging import get_logger
from .settings import SEVEN_DAYS_SECONDS

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes; newer releases refuse longer input.
_BCRYPT_MAX_BYTES = 72
_REQUIRED_CLAIMS = ["userId", "username", "role", "iat", "exp"]

bearer_scheme = HTTPBearer(auto_error=False)


class TokenIdentity(BaseModel):
    """Identity asserted by a verified session token."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    username: str
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> "TokenIdentity":
        return cls(user_id=user.id, username=user.username, role=user.role)


class PasswordHasher:
    """Salted bcrypt hashing with a tunable work factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._encode(password), salt).decode("ascii")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check ``password`` against a stored hash; malformed hashes never match."""
        try:
            return bcrypt.checkpw(self._encode(password), password_hash.encode("ascii"))
        except (ValueError, TypeError, UnicodeEncodeError):
            return False

    async def hash_async(self, password: str) -> str:
        """Hash on the threadpool so the event loop keeps serving other requests."""
        return await run_in_threadpool(self.hash, password)

    async def verify_async(self, password: str, password_hash: str) -> bool:
        return await run_in_threadpool(self.verify, password, password_hash)


class TokenIssuer:
    """Issues and verifies signed, time-limited session tokens (JWT)."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_in: int = SEVEN_DAYS_SECONDS,
    ):
        self._secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in

    def issue(self, identity: TokenIdentity, now: Optional[datetime] = None) -> str:
        """Create a signed JWT embedding the identity and an expiry."""
        now = now or datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "userId": identity.user_id,
            "username": identity.username,
            "role": identity.role.value,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=self.expires_in)).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenIdentity:
        """Decode and validate a JWT.

        Raises:
            InvalidTokenError: On a bad signature, an expired token, or missing
                or malformed claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
            return TokenIdentity.model_validate(payload)
        except (jwt.InvalidTokenError, PydanticValidationError) as e:
            raise InvalidTokenError() from e


async def require_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenIdentity:
    """FastAPI dependency ensuring the request carries a valid Bearer token."""
    if credentials is None:
        raise AuthenticationError()

    tokens: TokenIssuer = request.app.state.tokens
    try:
        return tokens.verify(credentials.credentials)
    except InvalidTokenError:
        client = request.client.host if request.client else None
        logger.warning("invalid_token", client=client, path=request.url.path)
        raise
