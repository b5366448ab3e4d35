from __future__ import annotations

from bff.models.order import Order
from bff.repositories.base import BaseRepository


class OrderRepository(BaseRepository[Order]):
    collection = "orders"
    model = Order

    async def get_by_user_id(self, user_id: str) -> list[Order]:
        return await self._get_by_index("userId", user_id)

    async def get_by_status(self, status: str) -> list[Order]:
        return await self._get_by_index("status", status)
