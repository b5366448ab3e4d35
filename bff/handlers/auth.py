"""
Auth endpoints — demo login / logout against plain-text passwords.

The router's Session remembers who is logged in; the token is an opaque
demo string, not a credential anyone verifies.
"""

from __future__ import annotations

import logging

from bff.api.routing import RequestContext, RouteTable
from bff.core.exceptions import AuthError
from bff.core.responses import Envelope, ok
from bff.models.user import User
from bff.repositories.users import UserRepository
from bff.schemas.user import LoginRequest

router = RouteTable(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


class AuthHandler:
    def __init__(self, users: UserRepository) -> None:
        self.users = users

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """Return the user and a demo token. Unknown email and wrong password look identical."""
        user = await self.users.get_by_email(email)
        if user is None or user.password != password:
            raise AuthError("Invalid credentials")
        return user, f"mock-token-{user.id}"


@router.post("/login", failure="Internal server error")
async def login(ctx: RequestContext) -> Envelope:
    try:
        body = ctx.parse(LoginRequest)
    except ValueError:
        raise AuthError("Invalid credentials") from None
    user, token = await ctx.handlers.auth.login(body.email, body.password)
    ctx.session.start(user.id, token)
    logger.info("User %s logged in", user.id)
    return ok({"user": user.public(), "token": token})


@router.post("/logout")
async def logout(ctx: RequestContext) -> Envelope:
    ctx.session.end()
    return ok({"message": "Logged out"})


@router.get("/me", failure="Failed to fetch current user")
async def me(ctx: RequestContext) -> Envelope:
    user = ctx.current_user
    return ok({"user": user.public() if user else None})
