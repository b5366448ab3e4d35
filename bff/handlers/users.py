"""
User endpoints — listing, lookup and CRUD.

- Listing all users requires a manager/admin session.
- /users/{user_id} routes require the owner or a manager/admin.
- Passwords never leave the handler.
"""

from __future__ import annotations

import logging

from bff.api.routing import Access, RequestContext, RouteTable
from bff.core.exceptions import ConflictError, DuplicateKeyError, NotFoundError
from bff.core.pagination import PaginationParams, filter_by_search, paginated_response, parse_pagination_params
from bff.core.responses import Envelope, created, no_content, ok
from bff.models.base import utcnow
from bff.models.user import User
from bff.repositories.users import UserRepository
from bff.schemas.user import UserCreate, UserUpdate

router = RouteTable(tags=["users"])
logger = logging.getLogger(__name__)


class UserHandler:
    def __init__(self, users: UserRepository) -> None:
        self.users = users

    async def list_page(self, params: PaginationParams) -> dict:
        users = filter_by_search(
            await self.users.get_all(),
            params.search,
            lambda u: (u.id, u.email, u.profile.first_name, u.profile.last_name, u.profile.phone),
        )
        if params.role:
            users = [u for u in users if u.role == params.role]
        page = paginated_response(users, params)
        page["data"] = [
            {k: v for k, v in row.items() if k != "password"} for row in page["data"]
        ]
        return page

    async def get(self, user_id: str) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def email_exists(self, email: str) -> bool:
        return await self.users.get_by_email(email) is not None

    async def create(self, body: UserCreate) -> User:
        if await self.email_exists(body.email):
            raise ConflictError("Email already registered")
        data = body.model_dump(exclude_none=True)
        user = User(**data)
        try:
            await self.users.insert(user)
        except DuplicateKeyError:
            # unique email index caught a concurrent registration
            raise ConflictError("Email already registered") from None
        logger.info("Created user %s (%s)", user.id, user.email)
        return user

    async def update(self, user_id: str, body: UserUpdate) -> User:
        updates = body.model_dump(exclude_unset=True, by_alias=True, mode="json")
        if body.email is not None:
            holder = await self.users.get_by_email(body.email)
            if holder is not None and holder.id != user_id:
                raise ConflictError("Email already registered")
        updates["updatedAt"] = utcnow().isoformat()
        user = await self.users.update(user_id, updates)
        logger.info("Updated user %s", user_id)
        return user

    async def delete(self, user_id: str) -> None:
        await self.get(user_id)
        await self.users.delete(user_id)
        logger.info("Deleted user %s", user_id)


@router.get("/users/check-email", failure="Failed to check email")
async def check_email(ctx: RequestContext) -> Envelope:
    email = (ctx.query_params.get("email") or "").strip()
    exists = bool(email) and await ctx.handlers.users.email_exists(email)
    return ok({"exists": exists})


@router.get("/users", delay=True, access=Access.PRIVILEGED, failure="Failed to fetch users")
async def list_users(ctx: RequestContext) -> Envelope:
    params = parse_pagination_params(ctx.query_params, ctx.handlers.default_page_limit)
    return ok(await ctx.handlers.users.list_page(params))


@router.post("/users", delay=True, failure="Failed to create user")
async def create_user(ctx: RequestContext) -> Envelope:
    user = await ctx.handlers.users.create(ctx.parse(UserCreate))
    return created(user.public())


@router.get("/users/{user_id}", access=Access.OWNER, failure="Failed to fetch user")
async def get_user(ctx: RequestContext) -> Envelope:
    user = await ctx.handlers.users.get(ctx.path_params["user_id"])
    return ok(user.public())


@router.put("/users/{user_id}", delay=True, access=Access.OWNER, failure="Failed to update user")
async def update_user(ctx: RequestContext) -> Envelope:
    user = await ctx.handlers.users.update(ctx.path_params["user_id"], ctx.parse(UserUpdate))
    return ok(user.public())


@router.delete("/users/{user_id}", delay=True, access=Access.OWNER, failure="Failed to delete user")
async def delete_user(ctx: RequestContext) -> Envelope:
    await ctx.handlers.users.delete(ctx.path_params["user_id"])
    return no_content()
