"""
Authentication Models
=====================
User identities returned by primary authentication.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UserDetail:
    """Identity of an authenticated user."""
    id: str
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    organization_id: Optional[str] = None


@dataclass(frozen=True)
class UserRecord:
    """A user known to the password directory."""
    user_id: str
    username: str
    password_hash: str
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    organization_id: Optional[str] = None

    def to_detail(self) -> UserDetail:
        return UserDetail(
            id=self.user_id,
            given_name=self.given_name,
            family_name=self.family_name,
            organization_id=self.organization_id,
        )
