"""
User model — demo accounts and role-based access.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from bff.models.base import Document, new_id, utcnow

UserRole = Literal["user", "manager", "admin"]
PRIVILEGED_ROLES = frozenset({"manager", "admin"})


class UserProfile(Document):
    first_name: str = ""
    last_name: str = ""
    phone: str = ""


class User(Document):
    id: str = Field(default_factory=new_id)
    email: str
    password: str  # demo only, stored in plain text
    role: UserRole = "user"
    profile: UserProfile = Field(default_factory=UserProfile)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES

    def public(self) -> dict:
        """Wire representation without the password."""
        return self.model_dump(mode="json", by_alias=True, exclude={"password"})
