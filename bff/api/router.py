"""
BFF request router — the single entry point for consumers.

``route(method, path, body, query_params)`` resolves to an Envelope with
one of the fixed statuses (200/201/204/400/401/404/409/500). The first
call bootstraps the store (schema, demo seed, legacy migration); the
session and the initialised flag belong to the router instance.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Mapping
from typing import Any
from urllib.parse import parse_qsl, urlsplit

from bff.api.api import api_router
from bff.api.deps import Handlers, Repositories, check_access
from bff.api.routing import RequestContext, RouteTable, Session
from bff.core.config import Settings
from bff.core.config import settings as default_settings
from bff.core.exceptions import BffError, StoreError
from bff.core.responses import Envelope, error
from bff.db.schema import SCHEMA_VERSION
from bff.db.store import Store
from bff.models.user import User
from bff.services.migrations import migrate_legacy_orders
from bff.services.seed import Seeder

logger = logging.getLogger(__name__)


class BffRouter:
    def __init__(
        self,
        store: Store,
        *,
        settings: Settings | None = None,
        routes: RouteTable | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or default_settings
        self.routes = routes or api_router
        self.repos = Repositories.from_store(store, self.settings)
        self.handlers = Handlers.build(self.repos, self.settings)
        self.session = Session()
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._init_lock = asyncio.Lock()
        self.initialized = False

    # ── Lifecycle ────────────────────────────────────────────────────
    async def initialize(self) -> None:
        """Open the store, seed demo data and migrate legacy rows. Idempotent."""
        if self.initialized:
            return
        async with self._init_lock:
            if self.initialized:
                return
            if self.store.is_live:
                await self.store.open_or_create(SCHEMA_VERSION)
                await Seeder(self.repos, self.settings).seed_all()
                await migrate_legacy_orders(self.store)
            else:
                logger.info("Store is inert; skipping bootstrap")
            self.initialized = True
            logger.info("%s v%s ready", self.settings.PROJECT_NAME, self.settings.VERSION)

    async def close(self) -> None:
        self.session.end()
        await self.store.close()
        self.initialized = False

    # ── Request handling ────────────────────────────────────────────
    def _latency(self) -> float:
        low, high = self.settings.LATENCY_MIN_MS, self.settings.LATENCY_MAX_MS
        return self._rng.uniform(low, high) / 1000

    async def _current_user(self) -> User | None:
        if self.session.user_id is None:
            return None
        return await self.repos.users.get_by_id(self.session.user_id)

    async def route(
        self,
        method: str,
        path: str,
        body: Any = None,
        query_params: Mapping[str, Any] | None = None,
    ) -> Envelope:
        method = method.upper()
        split = urlsplit(path)
        query = {k: str(v) for k, v in parse_qsl(split.query, keep_blank_values=True)}
        query.update({k: str(v) for k, v in (query_params or {}).items()})
        path = split.path.rstrip("/") or "/"

        try:
            await self.initialize()
        except Exception:
            # Not marked initialised, so the next request retries the bootstrap
            logger.exception("Bootstrap failed")
            return error(500, "Failed to initialise data store")

        matched = self.routes.match(method, path)
        if matched is None:
            logger.debug("%s %s -> 404 (no route)", method, path)
            return error(404, "Not found")
        route, path_params = matched

        try:
            user = await self._current_user()
            if self.settings.ENFORCE_ACCESS:
                check_access(route.access, user, path_params)
            if route.delay and self.settings.LATENCY_ENABLED:
                await self._sleep(self._latency())
            ctx = RequestContext(
                method=method,
                path=path,
                path_params=path_params,
                query_params=query,
                body=body,
                handlers=self.handlers,
                session=self.session,
                current_user=user,
                enforce_access=self.settings.ENFORCE_ACCESS,
            )
            response = await route.endpoint(ctx)
        except StoreError as exc:
            logger.error("Store failure routing %s %s: %s", method, path, exc.message)
            response = error(500, "Internal server error")
        except BffError as exc:
            response = error(exc.status_code, exc.message)
        except Exception:
            logger.exception("Unhandled error routing %s %s", method, path)
            response = error(500, "Internal server error")

        logger.debug("%s %s -> %d", method, path, response.status)
        return response
