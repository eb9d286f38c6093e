"""
Authentication and authorization.

Design principles:
1. One dependency per route: `Depends(require_roles(...))`
2. Roles gate routes; ownership is checked on the loaded resource
3. Every failure is a 401 or 403 with a generic message
"""

from bugbounty.auth.context import AuthContext, owns
from bugbounty.auth.policies import (
    ensure_owner,
    get_current_user,
    require_auth,
    require_roles,
)
from bugbounty.auth.tokens import (
    InvalidTokenError,
    TokenClaims,
    TokenExpiredError,
    issue_token,
    verify_token,
)
from bugbounty.auth.passwords import hash_password, verify_password
from bugbounty.auth.routes import router as auth_router

__all__ = [
    # Main interface
    "require_roles",
    "require_auth",
    "get_current_user",
    "ensure_owner",
    "owns",
    "AuthContext",
    # Tokens
    "TokenClaims",
    "InvalidTokenError",
    "TokenExpiredError",
    "issue_token",
    "verify_token",
    # Passwords
    "hash_password",
    "verify_password",
    # Router
    "auth_router",
]
