"""
Tests for the token service and password hashing.
"""

from datetime import timedelta

import jwt
import pytest

from bugbounty.auth.passwords import hash_password, verify_password
from bugbounty.auth.tokens import (
    InvalidTokenError,
    TokenExpiredError,
    issue_token,
    verify_token,
)
from bugbounty.config import get_settings
from bugbounty.core.models import Role, User


@pytest.fixture
def user():
    return User(
        id="user_abc123",
        email="rita@example.com",
        name="Rita",
        password_hash="unused",
        role=Role.RESEARCHER,
    )


class TestIssueAndVerify:
    def test_claims_carry_identity(self, user):
        claims = verify_token(issue_token(user))

        assert claims.id == user.id
        assert claims.email == user.email

    def test_expires_after_one_hour(self, user):
        claims = verify_token(issue_token(user))

        assert claims.exp - claims.iat == timedelta(hours=1)

    def test_expired_token_rejected(self, user):
        token = issue_token(user, expires_delta=timedelta(seconds=-5))

        with pytest.raises(TokenExpiredError):
            verify_token(token)

    def test_expired_is_an_invalid_token(self):
        assert issubclass(TokenExpiredError, InvalidTokenError)

    def test_wrong_secret_rejected(self, user):
        forged = jwt.encode(
            {"id": user.id, "email": user.email, "iat": 1700000000, "exp": 9999999999},
            "not-the-secret-key-0123456789abcdef012345",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            verify_token(forged)

    def test_malformed_rejected(self):
        with pytest.raises(InvalidTokenError):
            verify_token("not.a.jwt")

    def test_missing_identity_claim_rejected(self):
        settings = get_settings()
        token = jwt.encode(
            {"email": "x@example.com", "iat": 1700000000, "exp": 9999999999},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(InvalidTokenError):
            verify_token(token)

    def test_rotating_secret_invalidates_tokens(self, user, monkeypatch):
        token = issue_token(user)

        monkeypatch.setenv("JWT_SECRET_KEY", "rotated-secret-key-0123456789abcdef0123456")
        get_settings.cache_clear()

        with pytest.raises(InvalidTokenError):
            verify_token(token)


class TestPasswords:
    def test_verify_roundtrip(self):
        stored = hash_password("hunter2")

        assert verify_password("hunter2", stored)
        assert not verify_password("hunter3", stored)

    def test_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_hash_does_not_contain_password(self):
        assert "s3cret-value" not in hash_password("s3cret-value")

    def test_garbage_hash_never_verifies(self):
        assert not verify_password("anything", "not-a-hash")
        assert not verify_password("anything", "")
