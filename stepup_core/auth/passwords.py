"""
Password Hashing
================
Argon2id password hashing, run off the event loop.
"""

import asyncio
from functools import lru_cache

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError


def build_hasher(
    time_cost: int = 3,
    memory_cost: int = 65536,
    parallelism: int = 4,
) -> PasswordHasher:
    """
    Build an Argon2id hasher.

    Defaults are production settings (~300ms on a typical server).
    """
    return PasswordHasher(
        time_cost=time_cost,
        memory_cost=memory_cost,
        parallelism=parallelism,
        hash_len=32,
        salt_len=16,
        type=Type.ID,
    )


@lru_cache(maxsize=1)
def get_cached_hasher() -> PasswordHasher:
    """Get cached hasher instance."""
    return build_hasher()


def hash_password_sync(password: str, hasher: PasswordHasher = None) -> str:
    """Hash a password (use the async version in request handling)."""
    if not password:
        raise ValueError("Password cannot be empty")
    return (hasher or get_cached_hasher()).hash(password)


def verify_password_sync(password: str, hash: str, hasher: PasswordHasher = None) -> bool:
    """Verify a password against an Argon2id hash."""
    if not password or not hash:
        return False
    try:
        return (hasher or get_cached_hasher()).verify(hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


async def verify_password(password: str, hash: str, hasher: PasswordHasher = None) -> bool:
    """Verify a password in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, verify_password_sync, password, hash, hasher)
