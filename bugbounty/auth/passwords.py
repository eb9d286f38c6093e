"""
Password hashing.

PBKDF2-SHA256 with a random per-password salt, stored as
"salt:hash". The hash never leaves the server.
"""

from __future__ import annotations

import hashlib
import secrets

from bugbounty.config import get_settings


def _derive(password: str, salt: str, iterations: int) -> str:
    return hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations=iterations,
    ).hex()


def hash_password(password: str) -> str:
    """
    Hash a password using PBKDF2-SHA256.

    Returns: salt:iterations:hash format string
    """
    iterations = get_settings().password_hash_iterations
    salt = secrets.token_hex(32)
    return f"{salt}:{iterations}:{_derive(password, salt, iterations)}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    try:
        salt, iterations, stored_hash = password_hash.split(":")
        return secrets.compare_digest(_derive(password, salt, int(iterations)), stored_hash)
    except (ValueError, AttributeError):
        return False
