"""
selfserve_api.api.app

FastAPI app factory for the SelfServe hotel-services API.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from selfserve_api import __version__
from selfserve_api.api.errors import register_error_handlers
from selfserve_api.api.routers.dev_auth import router as dev_auth_router
from selfserve_api.api.routers.guest.router import router as guest_router
from selfserve_api.api.routers.health import router as health_router
from selfserve_api.api.routers.management.router import router as management_router
from selfserve_api.api.routers.me import router as me_router
from selfserve_api.db.init_db import init_db
from selfserve_api.db.session import create_engine, create_sessionmaker
from selfserve_api.observability.logging import configure_logging, get_logger
from selfserve_api.observability.middleware import RequestContextMiddleware
from selfserve_api.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        # Routers obtain sessions via dependencies (see `selfserve_api.api.deps`).
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="SelfServe Hotel API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_error_handlers(app, settings)
    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(me_router)
    app.include_router(guest_router)
    app.include_router(management_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; authorization
# lives in `selfserve_api.auth` and data access in `selfserve_api.db`.
