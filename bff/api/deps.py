"""
Router dependencies — repository/handler wiring and access guards.

Everything here hangs off one Store; a router builds its own Handlers so
no state is shared between router instances.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from bff.api.routing import Access
from bff.core.config import Settings
from bff.core.exceptions import AuthError
from bff.db.store import Store
from bff.handlers.addresses import AddressHandler
from bff.handlers.auth import AuthHandler
from bff.handlers.carts import CartHandler
from bff.handlers.categories import CategoryHandler
from bff.handlers.files import FileHandler
from bff.handlers.orders import OrderHandler
from bff.handlers.payment_methods import PaymentMethodHandler
from bff.handlers.products import ProductHandler
from bff.handlers.users import UserHandler
from bff.models.user import User
from bff.repositories.account import AddressRepository, PaymentMethodRepository
from bff.repositories.carts import CartRepository
from bff.repositories.catalog import CategoryRepository, ProductRepository
from bff.repositories.files import FileRepository
from bff.repositories.orders import OrderRepository
from bff.repositories.users import UserRepository


# ── Repositories ────────────────────────────────────────────────────
@dataclass
class Repositories:
    users: UserRepository
    categories: CategoryRepository
    products: ProductRepository
    orders: OrderRepository
    carts: CartRepository
    addresses: AddressRepository
    payment_methods: PaymentMethodRepository
    files: FileRepository

    @classmethod
    def from_store(cls, store: Store, settings: Settings) -> "Repositories":
        return cls(
            users=UserRepository(store),
            categories=CategoryRepository(store),
            products=ProductRepository(store),
            orders=OrderRepository(store),
            carts=CartRepository(store),
            addresses=AddressRepository(store),
            payment_methods=PaymentMethodRepository(store),
            files=FileRepository(store, url_prefix=settings.FILE_URL_PREFIX),
        )


# ── Handlers ────────────────────────────────────────────────────────
@dataclass
class Handlers:
    auth: AuthHandler
    users: UserHandler
    categories: CategoryHandler
    products: ProductHandler
    orders: OrderHandler
    carts: CartHandler
    addresses: AddressHandler
    payment_methods: PaymentMethodHandler
    files: FileHandler
    default_page_limit: int = 20

    @classmethod
    def build(cls, repos: Repositories, settings: Settings) -> "Handlers":
        return cls(
            auth=AuthHandler(repos.users),
            users=UserHandler(repos.users),
            categories=CategoryHandler(repos.categories, repos.products),
            products=ProductHandler(
                repos.products,
                repos.categories,
                repos.orders,
                repos.files,
                settings.PLACEHOLDER_IMAGE_URL,
            ),
            orders=OrderHandler(
                repos.orders,
                repos.products,
                repos.addresses,
                settings.ORDER_TRANSITION_POLICY,
            ),
            carts=CartHandler(repos.carts),
            addresses=AddressHandler(repos.addresses),
            payment_methods=PaymentMethodHandler(repos.payment_methods),
            files=FileHandler(repos.files),
            default_page_limit=settings.DEFAULT_PAGE_LIMIT,
        )


# ── Access guards ───────────────────────────────────────────────────
def require_user(user: User | None) -> User:
    if user is None:
        raise AuthError("Authentication required")
    return user


def require_owner(user: User | None, path_params: dict[str, Any]) -> User:
    """Session user must own ``{user_id}`` or be a manager/admin."""
    user = require_user(user)
    if not user.is_privileged and path_params.get("user_id") != user.id:
        raise AuthError("Access denied")
    return user


def require_privileged(user: User | None) -> User:
    user = require_user(user)
    if not user.is_privileged:
        raise AuthError("Admin or manager access required")
    return user


def check_access(access: Access, user: User | None, path_params: dict[str, Any]) -> None:
    if access is Access.OWNER:
        require_owner(user, path_params)
    elif access is Access.PRIVILEGED:
        require_privileged(user)
