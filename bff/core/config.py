"""
Centralised simulator settings loaded from environment / .env file.

Uses pydantic-settings so every value can be overridden via env vars
or the .env file at the project root.
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Project ──────────────────────────────────────────────────────
    PROJECT_NAME: str = "Storefront BFF Simulator"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # ── Store (async SQLite via aiosqlite) ──────────────────────────
    # Empty URL = no live client context; the store stays inert.
    STORE_URL: str = "sqlite+aiosqlite:///./storefront_bff.db"

    # ── Simulated network ───────────────────────────────────────────
    LATENCY_ENABLED: bool = True
    LATENCY_MIN_MS: int = 300
    LATENCY_MAX_MS: int = 800

    # ── Access rules ────────────────────────────────────────────────
    ENFORCE_ACCESS: bool = True

    # ── Domain rules ────────────────────────────────────────────────
    # free: any known status may follow any other; strict: only graph edges
    ORDER_TRANSITION_POLICY: Literal["free", "strict"] = "free"
    DEFAULT_PAGE_LIMIT: int = 20

    # ── File storage ────────────────────────────────────────────────
    PLACEHOLDER_IMAGE_URL: str = "/assets/images/product-placeholder.svg"
    FILE_URL_PREFIX: str = "/files"

    # ── Logging ──────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    # ── Bootstrap (seeded on first request) ─────────────────────────
    FIRST_ADMIN_EMAIL: str = "admin@demo"
    FIRST_ADMIN_PASSWORD: str = "Admin123!"
    SEED_CATALOG: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def _check_latency_window(self) -> "Settings":
        if self.LATENCY_MIN_MS < 0 or self.LATENCY_MIN_MS > self.LATENCY_MAX_MS:
            raise ValueError("LATENCY_MIN_MS must be between 0 and LATENCY_MAX_MS")
        return self


settings = Settings()

if not settings.STORE_URL:
    logging.getLogger(__name__).warning(
        "STORE_URL is empty: the simulator runs with an inert store "
        "and every request will see empty collections."
    )
