"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI

from config import AppSettings
from errors import register_error_handlers
from infrastructure.captcha.recaptcha import RecaptchaVerifier
from infrastructure.http_client import HttpClient
from routes.health_routes import router as health_router
from routes.recaptcha_routes import router as recaptcha_router
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging, production=settings.is_production)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        http_client = HttpClient.from_settings(settings.recaptcha)
        app.state.settings = settings
        app.state.http_client = http_client
        app.state.captcha_verifier = RecaptchaVerifier(settings.recaptcha, http_client)

        log.info(
            "recaptcha_configured",
            enabled=settings.recaptcha.enabled,
            verify_url=settings.recaptcha.verify_url,
            proxied=settings.recaptcha.http_proxy.is_active,
        )

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await http_client.aclose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(recaptcha_router)

    return app
