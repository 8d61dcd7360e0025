"""
Primary Authentication
======================
Username/password check the OTP step-up composes with.
"""

import asyncio
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, Optional

from argon2 import PasswordHasher
import structlog

from stepup_core.config import get_config
from stepup_core.errors import AuthenticationFailedError, UserNotFoundError
from stepup_core.operation import OperationContext

from .directory import UserDirectory
from .models import UserDetail
from .passwords import get_cached_hasher, verify_password

AUTHENTICATION_FAILED = "login.authenticationFailed"
AUTHENTICATION_BLOCKED = "login.authenticationBlocked"


class PrimaryAuthenticator(ABC):
    """Abstract primary credential check."""

    @abstractmethod
    async def authenticate(
        self,
        username: str,
        password: str,
        context: Optional[OperationContext] = None,
    ) -> UserDetail:
        """
        Authenticate a user.

        Raises:
            AuthenticationFailedError: With an optional remaining-attempts hint
            RemoteCommunicationError: If the backend is unavailable
        """

    @abstractmethod
    async def fetch_user_detail(self, user_id: str) -> UserDetail:
        """
        Get user details.

        Raises:
            UserNotFoundError: If the user does not exist
        """


class PasswordAuthenticator(PrimaryAuthenticator):
    """
    Verifies Argon2id password hashes from a user directory.

    Unknown users and wrong passwords fail with the same error. With
    ``max_failed_attempts`` set, consecutive failures per username are
    counted and reported as remaining attempts; an exhausted budget blocks
    the username until a successful login resets it.

    An attempt is reserved against the budget before the password is
    checked, so concurrent guesses cannot overrun it. At most
    ``max_tracked_usernames`` counters are kept; the least recently
    attempted username is forgotten first.
    """

    def __init__(
        self,
        directory: UserDirectory,
        max_failed_attempts: Optional[int] = None,
        hasher: Optional[PasswordHasher] = None,
        logger: Optional[Any] = None,
        max_tracked_usernames: int = 10000,
    ):
        self.directory = directory
        if max_failed_attempts is None:
            max_failed_attempts = get_config().auth_max_failed_attempts
        self.max_failed_attempts = max_failed_attempts
        self.max_tracked_usernames = max_tracked_usernames
        self.hasher = hasher or get_cached_hasher()
        self.logger = logger or structlog.get_logger(__name__)
        self._failures: "OrderedDict[str, int]" = OrderedDict()
        self._lock = asyncio.Lock()
        self._dummy_hash: Optional[str] = None

    def _placeholder_hash(self) -> str:
        # Verified for unknown users so both failure paths cost the same.
        if self._dummy_hash is None:
            self._dummy_hash = self.hasher.hash("placeholder-password")
        return self._dummy_hash

    async def authenticate(
        self,
        username: str,
        password: str,
        context: Optional[OperationContext] = None,
    ) -> UserDetail:
        attempt = await self._reserve_attempt(username)
        if attempt is None:
            self.logger.warning("Authentication blocked", username=username)
            raise AuthenticationFailedError(AUTHENTICATION_BLOCKED, remaining_attempts=0)

        user = await self.directory.find_by_username(username)
        password_hash = user.password_hash if user is not None else self._placeholder_hash()
        valid = await verify_password(password, password_hash, self.hasher)

        if user is None or not valid:
            remaining = (
                max(self.max_failed_attempts - attempt, 0) if self.max_failed_attempts else None
            )
            self.logger.warning(
                "Authentication failed",
                username=username,
                operation_id=context.id if context else None,
                remaining_attempts=remaining,
            )
            raise AuthenticationFailedError(AUTHENTICATION_FAILED, remaining_attempts=remaining)

        async with self._lock:
            self._failures.pop(username, None)
        self.logger.info(
            "Authentication succeeded",
            user_id=user.user_id,
            operation_id=context.id if context else None,
        )
        return user.to_detail()

    async def _reserve_attempt(self, username: str) -> Optional[int]:
        """
        Count an attempt against the username's budget.

        Returns:
            The attempt number (0 when no budget is configured), or None
            if the budget is exhausted
        """
        if not self.max_failed_attempts:
            return 0
        async with self._lock:
            count = self._failures.get(username, 0)
            if count >= self.max_failed_attempts:
                self._failures.move_to_end(username)
                return None
            self._failures[username] = count + 1
            self._failures.move_to_end(username)
            while len(self._failures) > self.max_tracked_usernames:
                self._failures.popitem(last=False)
            return count + 1

    async def fetch_user_detail(self, user_id: str) -> UserDetail:
        user = await self.directory.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(f"User not found: {user_id}")
        return user.to_detail()
