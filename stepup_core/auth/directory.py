"""
User Directory
==============
Lookup of users by username or user ID.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from .models import UserRecord


class UserDirectory(ABC):
    """Abstract user directory (backend user store)."""

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[UserRecord]:
        """Get a user by login name."""

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        """Get a user by ID."""


class InMemoryUserDirectory(UserDirectory):
    """Static user list. For development and testing."""

    def __init__(self, users: Iterable[UserRecord] = ()):
        self._by_username: Dict[str, UserRecord] = {}
        self._by_id: Dict[str, UserRecord] = {}
        for user in users:
            self.add(user)

    def add(self, user: UserRecord) -> None:
        self._by_username[user.username] = user
        self._by_id[user.user_id] = user

    async def find_by_username(self, username: str) -> Optional[UserRecord]:
        return self._by_username.get(username)

    async def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        return self._by_id.get(user_id)
