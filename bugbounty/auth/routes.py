# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints:
#   POST /auth/register     - Create account, get token
#   POST /auth/login        - Get token
#   GET  /auth/me           - Get current user
#
# register and login sit behind the "auth" rate limiter, which only
# counts failed attempts.
#
# =============================================================================

import logging

from fastapi import APIRouter, Depends, status

from bugbounty.api.deps import get_storage
from bugbounty.auth.context import AuthContext
from bugbounty.auth.policies import PERMISSION_DENIED, require_auth
from bugbounty.auth.tokens import issue_token
from bugbounty.auth.users import authenticate_user, create_user
from bugbounty.config import get_settings
from bugbounty.core.errors import Conflict, Forbidden, Unauthenticated, ValidationError
from bugbounty.core.models import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    Role,
    UserResponse,
)
from bugbounty.storage import DuplicateKeyError, MetadataStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# =============================================================================
# Public Endpoints
# =============================================================================

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest | None = None,
    storage: MetadataStorage = Depends(get_storage),
):
    """
    Create a new account.

    Returns a token and the new user (without credential) on success.
    """
    data = data or RegisterRequest()
    if not data.name or not data.email or not data.password:
        raise ValidationError("All fields are required")

    role = data.role or Role.RESEARCHER
    if role == Role.ADMIN and not get_settings().allow_admin_registration:
        logger.warning("Refused self-registration as ADMIN for %s", data.email)
        raise Forbidden(PERMISSION_DENIED)

    try:
        user = await create_user(
            storage,
            name=data.name,
            email=data.email,
            password=data.password,
            role=role,
        )
    except DuplicateKeyError as e:
        if e.field == "email":
            raise Conflict("A user with this email already exists")
        raise

    return AuthResponse(token=issue_token(user), user=UserResponse.from_user(user))


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest | None = None,
    storage: MetadataStorage = Depends(get_storage),
):
    """
    Authenticate and get a token.
    """
    data = data or LoginRequest()
    if not data.email or not data.password:
        raise ValidationError("All fields are required")

    user = await authenticate_user(storage, data.email, data.password)
    if not user:
        logger.warning("Failed login attempt for %s", data.email)
        raise Unauthenticated("Invalid email or password")

    return AuthResponse(token=issue_token(user), user=UserResponse.from_user(user))


# =============================================================================
# Protected Endpoints
# =============================================================================

@router.get("/me", response_model=MeResponse)
async def me(
    ctx: AuthContext = Depends(require_auth()),
):
    """
    Get the current authenticated user.
    """
    return MeResponse(user=UserResponse.from_user(ctx.user))
