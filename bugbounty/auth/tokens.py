# =============================================================================
# Token Service
# =============================================================================
#
# Signed, time-limited bearer tokens:
#   - issue_token()  embeds {id, email} and expires one hour after issuance
#   - verify_token() checks signature and expiry, nothing else
#
# Whether the actor still exists is the caller's concern (see policies.py).
# The signing secret is read from settings; rotating it invalidates every
# outstanding token.
#
# =============================================================================

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel

from bugbounty.config import get_settings
from bugbounty.core.models import User
from bugbounty.core.utils import utc_now


class TokenClaims(BaseModel):
    """Verified token payload."""
    id: str
    email: str
    iat: datetime
    exp: datetime


class InvalidTokenError(Exception):
    """Token is invalid, malformed or expired."""
    pass


class TokenExpiredError(InvalidTokenError):
    """Token has expired."""
    pass


def issue_token(user: User, expires_delta: timedelta | None = None) -> str:
    """Create a signed token for the given actor."""
    settings = get_settings()
    now = utc_now()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expire_minutes)

    payload = {
        "id": user.id,
        "email": user.email,
        "iat": now,
        "exp": now + expires_delta,
    }

    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> TokenClaims:
    """
    Decode and validate a token.

    Raises:
        TokenExpiredError: Token has expired
        InvalidTokenError: Signature, format or claims are invalid
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "iat", "id", "email"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(f"Invalid token: {e}")

    try:
        return TokenClaims(
            id=str(payload["id"]),
            email=str(payload["email"]),
            iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (TypeError, ValueError) as e:
        raise InvalidTokenError(f"Invalid token: {e}")
