"""User entity and auth request/response models."""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from .enums import UserRole

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"


def normalize_email(value: str) -> str:
    """Trim and lowercase an email address, rejecting malformed ones."""
    value = value.strip().lower()
    if len(value) > 254 or not EMAIL_PATTERN.match(value):
        raise ValueError("must be a valid email")
    return value


Email = Annotated[str, AfterValidator(normalize_email)]
Username = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=3, max_length=30, pattern=USERNAME_PATTERN),
]


@dataclass
class User:
    id: str
    username: str
    email: str
    password_hash: str
    role: UserRole = UserRole.USER
    is_active: bool = True
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


# ───────────────────────────────────────────────
# Requests
# ───────────────────────────────────────────────


class RegisterPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    username: Username = Field(..., description="3-30 letters, digits or underscores")
    email: Email
    password: str = Field(..., min_length=6, max_length=128)


class LoginPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: Email
    password: str = Field(..., min_length=1, max_length=128)


# ───────────────────────────────────────────────
# Responses
# ───────────────────────────────────────────────


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PublicUser(_CamelModel):
    """The parts of a user that are safe to hand back to its owner."""

    id: str
    username: str
    email: str
    role: UserRole
    last_login: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            last_login=user.last_login,
        )


class ProfileResponse(PublicUser):
    is_active: bool = True
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "ProfileResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            last_login=user.last_login,
            is_active=user.is_active,
            created_at=user.created_at,
        )


class AuthResponse(BaseModel):
    message: str
    token: str
    user: PublicUser
