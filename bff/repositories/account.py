from __future__ import annotations

from bff.models.account import Address, PaymentMethod
from bff.repositories.base import BaseRepository


class AddressRepository(BaseRepository[Address]):
    collection = "addresses"
    model = Address

    async def get_by_user_id(self, user_id: str) -> list[Address]:
        return await self._get_by_index("userId", user_id)


class PaymentMethodRepository(BaseRepository[PaymentMethod]):
    collection = "payment_methods"
    model = PaymentMethod

    async def get_by_user_id(self, user_id: str) -> list[PaymentMethod]:
        return await self._get_by_index("userId", user_id)
