from __future__ import annotations

from bff.models.cart import Cart
from bff.repositories.base import BaseRepository


class CartRepository(BaseRepository[Cart]):
    """One cart per user; the user id is the primary key."""

    collection = "cart"
    model = Cart
    key_field = "user_id"

    async def get_by_user_id(self, user_id: str) -> Cart | None:
        return await self.get_by_id(user_id)

    async def clear(self, user_id: str) -> None:
        await self.delete(user_id)
