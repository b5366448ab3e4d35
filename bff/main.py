"""
Storefront BFF simulator — application entry point.

``create_simulator()`` builds a router over the configured store.
``create_app()`` wraps a router in a FastAPI app so in-process HTTP
clients (httpx ``ASGITransport``) can drive it; no server is started.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from bff.api.router import BffRouter
from bff.core.config import settings
from bff.db.store import Store

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


def create_simulator() -> BffRouter:
    return BffRouter(Store(settings.STORE_URL or None), settings=settings)


# ── App factory ─────────────────────────────────────────────────────
def create_app(router: BffRouter | None = None) -> FastAPI:
    simulator = router or create_simulator()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        await simulator.initialize()
        logger.info("🛒 %s v%s started", settings.PROJECT_NAME, settings.VERSION)
        yield
        await simulator.close()
        logger.info("Shutdown complete")

    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Simulated storefront backend-for-frontend",
        version=settings.VERSION,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    application.state.simulator = simulator

    @application.api_route(
        f"{settings.API_PREFIX}/{{path:path}}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    )
    async def forward(path: str, request: Request) -> Response:
        body = None
        raw = await request.body()
        if raw:
            try:
                body = json.loads(raw)
            except ValueError:
                return JSONResponse(status_code=400, content={"error": "Invalid JSON body"})
        envelope = await simulator.route(
            request.method,
            f"{settings.API_PREFIX}/{path}",
            body=body,
            query_params=dict(request.query_params),
        )
        if envelope.status == 204:
            return Response(status_code=204)
        return JSONResponse(status_code=envelope.status, content=envelope.body)

    return application


app = create_app()
