"""
Route table primitives — ordered (method, path-pattern) entries.

Paths use the ``/orders/{order_id}/status`` template syntax; every
endpoint is wrapped in a handler boundary so it always resolves to an
Envelope, whatever the handler raises.
"""

from __future__ import annotations

import enum
import functools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.routing import compile_path

from bff.core.exceptions import AuthError, BffError, StoreError
from bff.core.responses import Envelope, error, validation_message

if TYPE_CHECKING:
    from bff.api.deps import Handlers
    from bff.models.user import User

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class Access(enum.Enum):
    PUBLIC = "public"
    OWNER = "owner"  # session user must be {user_id} or privileged
    PRIVILEGED = "privileged"  # manager / admin only


@dataclass
class Session:
    """Who is logged in. Owned by one router instance."""

    user_id: str | None = None
    token: str | None = None

    def start(self, user_id: str, token: str) -> None:
        self.user_id, self.token = user_id, token

    def end(self) -> None:
        self.user_id = self.token = None


@dataclass
class RequestContext:
    method: str
    path: str
    path_params: dict[str, Any]
    query_params: dict[str, str]
    body: Any
    handlers: "Handlers"
    session: Session
    current_user: "User | None" = None
    enforce_access: bool = True

    def authorize_owner(self, owner_id: str) -> None:
        """Session user must be ``owner_id`` or a manager/admin."""
        if not self.enforce_access:
            return
        if self.current_user is None:
            raise AuthError("Authentication required")
        if not self.current_user.is_privileged and self.current_user.id != owner_id:
            raise AuthError("Access denied")

    def parse(self, schema: type[SchemaT]) -> SchemaT:
        """Validate the JSON body; failures surface as 400 through the boundary."""
        return schema.model_validate(self.body if self.body is not None else {})


Endpoint = Callable[[RequestContext], Awaitable[Envelope]]


def handler_boundary(failure_message: str) -> Callable[[Endpoint], Endpoint]:
    """Convert everything an endpoint raises into the fixed status taxonomy."""

    def decorator(fn: Endpoint) -> Endpoint:
        @functools.wraps(fn)
        async def wrapper(ctx: RequestContext) -> Envelope:
            try:
                return await fn(ctx)
            except PydanticValidationError as exc:
                return error(400, validation_message(exc))
            except StoreError as exc:
                logger.error("%s: %s", failure_message, exc.message, exc_info=True)
                return error(500, failure_message)
            except BffError as exc:
                return error(exc.status_code, exc.message)
            except Exception:
                logger.exception("%s", failure_message)
                return error(500, failure_message)

        return wrapper

    return decorator


@dataclass
class Route:
    method: str
    path: str
    endpoint: Endpoint
    delay: bool = False
    access: Access = Access.PUBLIC
    _regex: Any = field(init=False, repr=False)
    _convertors: dict = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        self._regex, _, self._convertors = compile_path(self.path)

    def match(self, method: str, path: str) -> dict[str, Any] | None:
        if method != self.method:
            return None
        found = self._regex.match(path)
        if found is None:
            return None
        return {
            name: self._convertors[name].convert(value)
            for name, value in found.groupdict().items()
        }


class RouteTable:
    """Ordered route list; first match wins, so register specific paths first."""

    def __init__(self, prefix: str = "", tags: list[str] | None = None) -> None:
        self.prefix = prefix.rstrip("/")
        self.tags = tags or []
        self.routes: list[Route] = []

    def add_route(
        self,
        method: str,
        path: str,
        endpoint: Endpoint,
        *,
        delay: bool = False,
        access: Access = Access.PUBLIC,
        failure: str = "Internal server error",
    ) -> Endpoint:
        wrapped = handler_boundary(failure)(endpoint)
        self.routes.append(Route(method, self.prefix + path, wrapped, delay, access))
        return endpoint

    def route(self, method: str, path: str, **options: Any) -> Callable[[Endpoint], Endpoint]:
        def decorator(fn: Endpoint) -> Endpoint:
            return self.add_route(method, path, fn, **options)

        return decorator

    def get(self, path: str, **options: Any) -> Callable[[Endpoint], Endpoint]:
        return self.route("GET", path, **options)

    def post(self, path: str, **options: Any) -> Callable[[Endpoint], Endpoint]:
        return self.route("POST", path, **options)

    def put(self, path: str, **options: Any) -> Callable[[Endpoint], Endpoint]:
        return self.route("PUT", path, **options)

    def patch(self, path: str, **options: Any) -> Callable[[Endpoint], Endpoint]:
        return self.route("PATCH", path, **options)

    def delete(self, path: str, **options: Any) -> Callable[[Endpoint], Endpoint]:
        return self.route("DELETE", path, **options)

    def include_router(self, other: "RouteTable", prefix: str = "") -> None:
        base = self.prefix + prefix.rstrip("/")
        for route in other.routes:
            self.routes.append(
                Route(route.method, base + route.path, route.endpoint, route.delay, route.access)
            )

    def match(self, method: str, path: str) -> tuple[Route, dict[str, Any]] | None:
        method = method.upper()
        for route in self.routes:
            params = route.match(method, path)
            if params is not None:
                return route, params
        return None
