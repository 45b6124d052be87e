"""Password hashing and verification."""

from __future__ import annotations

import asyncio
import hashlib
import hmac
import secrets

ALGORITHM = "pbkdf2_sha256"


def hash_password(password: str, iterations: int, salt: str | None = None) -> str:
    """Hash a password with a random salt using PBKDF2-SHA256.

    The result encodes algorithm, work factor and salt so it can be verified
    later: ``pbkdf2_sha256$<iterations>$<salt>$<hex digest>``.
    """
    if salt is None:
        salt = secrets.token_hex(16)

    key = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations,
    )

    return f"{ALGORITHM}${iterations}${salt}${key.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash (constant-time comparison)."""
    try:
        algorithm, iterations, salt, _ = password_hash.split("$")
        if algorithm != ALGORITHM:
            return False
        expected = hash_password(password, int(iterations), salt)
    except ValueError:
        return False
    return hmac.compare_digest(expected, password_hash)


async def hash_password_async(password: str, iterations: int) -> str:
    """Hash off the event loop; the key derivation is deliberately slow."""
    return await asyncio.to_thread(hash_password, password, iterations)
