from __future__ import annotations

from bff.models.user import User
from bff.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    collection = "users"
    model = User

    async def get_by_email(self, email: str) -> User | None:
        return await self._get_one_by_index("email", email.strip().lower())

    async def get_by_role(self, role: str) -> list[User]:
        return await self._get_by_index("role", role)
