"""
Primary Authentication
======================
Password authentication using Argon2id and the combined password+OTP flow.
"""

from .models import UserDetail, UserRecord
from .passwords import (
    build_hasher,
    get_cached_hasher,
    hash_password_sync,
    verify_password_sync,
    verify_password,
)
from .directory import UserDirectory, InMemoryUserDirectory
from .authenticator import (
    PrimaryAuthenticator,
    PasswordAuthenticator,
    AUTHENTICATION_FAILED,
    AUTHENTICATION_BLOCKED,
)
from .stepup import StepUpAuthenticator

__all__ = [
    # Models
    "UserDetail",
    "UserRecord",
    # Passwords
    "build_hasher",
    "get_cached_hasher",
    "hash_password_sync",
    "verify_password_sync",
    "verify_password",
    # Directory
    "UserDirectory",
    "InMemoryUserDirectory",
    # Authenticators
    "PrimaryAuthenticator",
    "PasswordAuthenticator",
    "AUTHENTICATION_FAILED",
    "AUTHENTICATION_BLOCKED",
    # Combined flow
    "StepUpAuthenticator",
]
