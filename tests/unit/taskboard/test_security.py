from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import jwt
import pytest
from fastapi.security import HTTPAuthorizationCredentials

from taskboard.core.exceptions import AuthenticationError, InvalidTokenError
from taskboard.core.security import PasswordHasher, TokenIdentity, TokenIssuer, require_user
from taskboard.models.enums import UserRole

SECRET = "security-test-secret-that-is-long-enough"


@pytest.fixture
def identity() -> TokenIdentity:
    return TokenIdentity(user_id="65f0c3a1b2c3d4e5f6a7b8c9", username="alice", role=UserRole.USER)


class TestPasswordHasher:
    def test_hash_is_salted(self):
        hasher = PasswordHasher(rounds=4)

        first = hasher.hash("secret123")
        second = hasher.hash("secret123")

        assert first != second
        assert first.startswith("$2")
        assert "secret123" not in first

    def test_verify_matches_only_the_hashed_password(self):
        hasher = PasswordHasher(rounds=4)
        stored = hasher.hash("secret123")

        assert hasher.verify("secret123", stored) is True
        assert hasher.verify("secret124", stored) is False

    def test_verify_with_malformed_hash_returns_false(self):
        hasher = PasswordHasher(rounds=4)

        assert hasher.verify("secret123", "not-a-bcrypt-hash") is False
        assert hasher.verify("secret123", "") is False

    def test_long_passwords_are_truncated_consistently(self):
        hasher = PasswordHasher(rounds=4)
        password = "x" * 128
        stored = hasher.hash(password)

        assert hasher.verify(password, stored) is True

    def test_rounds_are_encoded_in_hash(self):
        stored = PasswordHasher(rounds=5).hash("secret123")
        assert stored.split("$")[2] == "05"

    @pytest.mark.asyncio
    async def test_async_wrappers(self):
        hasher = PasswordHasher(rounds=4)

        stored = await hasher.hash_async("secret123")

        assert await hasher.verify_async("secret123", stored) is True
        assert await hasher.verify_async("wrong", stored) is False


class TestTokenIssuer:
    def test_issue_and_verify_round_trip_identity(self, identity):
        issuer = TokenIssuer(secret=SECRET)

        token = issuer.issue(identity)
        verified = issuer.verify(token)

        assert verified == identity

    def test_claims_and_seven_day_expiry(self, identity):
        issuer = TokenIssuer(secret=SECRET)
        now = datetime.now(timezone.utc)

        token = issuer.issue(identity, now=now)
        claims = jwt.decode(token, SECRET, algorithms=["HS256"])

        assert claims["userId"] == identity.user_id
        assert claims["username"] == "alice"
        assert claims["role"] == "user"
        assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60

    def test_expired_token_is_rejected(self, identity):
        issuer = TokenIssuer(secret=SECRET)
        token = issuer.issue(identity, now=datetime.now(timezone.utc) - timedelta(days=8))

        with pytest.raises(InvalidTokenError):
            issuer.verify(token)

    def test_token_signed_with_other_secret_is_rejected(self, identity):
        token = TokenIssuer(secret="another-secret-that-is-also-long-enough").issue(identity)

        with pytest.raises(InvalidTokenError):
            TokenIssuer(secret=SECRET).verify(token)

    def test_tampered_token_is_rejected(self, identity):
        issuer = TokenIssuer(secret=SECRET)
        header, payload, signature = issuer.issue(identity).split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        with pytest.raises(InvalidTokenError):
            issuer.verify(tampered)

    def test_garbage_token_is_rejected(self):
        with pytest.raises(InvalidTokenError):
            TokenIssuer(secret=SECRET).verify("not.a.jwt")

    def test_missing_claims_are_rejected(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"userId": "65f0c3a1b2c3d4e5f6a7b8c9", "iat": int(now.timestamp()), "exp": int(now.timestamp()) + 60},
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            TokenIssuer(secret=SECRET).verify(token)

    def test_unknown_role_is_rejected(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "userId": "65f0c3a1b2c3d4e5f6a7b8c9",
                "username": "mallory",
                "role": "superuser",
                "iat": int(now.timestamp()),
                "exp": int(now.timestamp()) + 60,
            },
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            TokenIssuer(secret=SECRET).verify(token)


class TestRequireUser:
    @pytest.fixture
    def request_(self):
        request = MagicMock()
        request.app.state.tokens = TokenIssuer(secret=SECRET)
        request.client.host = "127.0.0.1"
        request.url.path = "/api/tasks"
        return request

    @pytest.mark.asyncio
    async def test_missing_credentials_raise_401(self, request_):
        with pytest.raises(AuthenticationError) as exc:
            await require_user(request_, credentials=None)

        assert exc.value.status_code == 401
        assert exc.value.message == "Access token required"

    @pytest.mark.asyncio
    async def test_invalid_token_raises_403(self, request_):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="bad-token")

        with pytest.raises(InvalidTokenError) as exc:
            await require_user(request_, credentials=credentials)

        assert exc.value.status_code == 403
        assert exc.value.message == "Invalid token"

    @pytest.mark.asyncio
    async def test_valid_token_returns_identity(self, request_, identity):
        token = request_.app.state.tokens.issue(identity)
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

        result = await require_user(request_, credentials=credentials)

        assert result == identity
