"""
User store.

Thin layer over the metadata storage for actor records.
"""

from __future__ import annotations

import logging

from bugbounty.auth.passwords import hash_password, verify_password
from bugbounty.core.models import Role, User
from bugbounty.storage import Collections, MetadataStorage

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def create_user(
    storage: MetadataStorage,
    *,
    name: str,
    email: str,
    password: str,
    role: Role = Role.RESEARCHER,
) -> User:
    """
    Create a new user.

    Raises DuplicateKeyError (from storage) if the email is taken.
    """
    user = User(
        email=normalize_email(email),
        name=name,
        password_hash=hash_password(password),
        role=role,
    )
    await storage.save(Collections.USERS, user.id, user.model_dump())
    logger.info("Registered user %s with role %s", user.id, user.role.value)
    return user


async def get_user_by_id(storage: MetadataStorage, user_id: str) -> User | None:
    """Get user by ID."""
    doc = await storage.get(Collections.USERS, user_id)
    return User.model_validate(doc) if doc else None


async def get_user_by_email(storage: MetadataStorage, email: str) -> User | None:
    """Get user by email."""
    docs = await storage.query(Collections.USERS, {"email": normalize_email(email)})
    return User.model_validate(docs[0]) if docs else None


async def authenticate_user(storage: MetadataStorage, email: str, password: str) -> User | None:
    """Authenticate user by email and password."""
    user = await get_user_by_email(storage, email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user
