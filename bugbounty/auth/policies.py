"""
Policies - the interface for route authentication and authorization.

Two gates:

- Role gate: `ctx: AuthContext = Depends(require_roles(Role.COMPANY))`
  resolves the bearer token to a stored actor and rejects roles outside
  the allow-list before the handler runs. It never sees resource state.
- Ownership gate: `ensure_owner(ctx, resource, message)` runs inside a
  handler after the resource has been loaded, so a missing resource is
  always a 404 before it can ever be a 403.
"""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from bugbounty.api.deps import get_storage
from bugbounty.auth.context import AuthContext
from bugbounty.auth.tokens import InvalidTokenError, verify_token
from bugbounty.auth.users import get_user_by_id
from bugbounty.core.errors import Forbidden, Unauthenticated
from bugbounty.core.models import Program, ReportWithProgram, Role
from bugbounty.storage import MetadataStorage

logger = logging.getLogger(__name__)

NO_TOKEN = "No token provided, authorization denied"
INVALID_TOKEN = "Invalid token"
USER_NOT_FOUND = "User not found"
PERMISSION_DENIED = "You do not have permission to perform this action"


# Optional bearer (doesn't fail by itself if no token; we raise our own 401)
optional_bearer = HTTPBearer(auto_error=False)


# =============================================================================
# Identity Resolution
# =============================================================================


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer),
    storage: MetadataStorage = Depends(get_storage),
) -> AuthContext:
    """
    Resolve the bearer token to a stored actor.

    Fails closed: missing token, bad token and vanished actor are all 401.
    The actor is re-read on every request so deleted users lose access
    immediately.
    """
    if not credentials or not credentials.credentials:
        raise Unauthenticated(NO_TOKEN)

    try:
        claims = verify_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.info("Rejected bearer token: %s", e)
        raise Unauthenticated(INVALID_TOKEN)

    user = await get_user_by_id(storage, claims.id)
    if not user:
        logger.info("Token for unknown user %s", claims.id)
        raise Unauthenticated(USER_NOT_FOUND)

    return AuthContext(user=user)


# =============================================================================
# Role Gate
# =============================================================================


def require_roles(*roles: Role) -> Callable:
    """
    Require an authenticated actor whose role is in the allow-list.

    Usage:
        @router.post("/programs")
        async def create_program(
            ctx: AuthContext = Depends(require_roles(Role.COMPANY)),
        ):
            ...

    With no roles given, any authenticated actor passes.
    """
    allowed = frozenset(roles)

    async def dependency(ctx: AuthContext = Depends(get_current_user)) -> AuthContext:
        if allowed and ctx.role not in allowed:
            logger.info(
                "Role %s denied (allowed: %s)",
                ctx.role.value,
                ", ".join(sorted(r.value for r in allowed)),
            )
            raise Forbidden(PERMISSION_DENIED)
        return ctx

    return dependency


def require_auth() -> Callable:
    """Just require authentication, no specific role."""
    return require_roles()


# =============================================================================
# Ownership Gate
# =============================================================================


def ensure_owner(ctx: AuthContext, resource: Program | ReportWithProgram, message: str) -> None:
    """Raise Forbidden unless the actor owns the (already loaded) resource."""
    if not ctx.owns(resource):
        logger.info("User %s denied on %s %s", ctx.user_id, type(resource).__name__, resource.id)
        raise Forbidden(message)
