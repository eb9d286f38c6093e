"""
FastAPI application for the bug bounty platform.

Request pipeline: rate admission control → identity resolution → role
gate → handler (ownership gate inside) → response.

Run with:
    uvicorn bugbounty.api.app:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bugbounty import __version__
from bugbounty.api.middleware import RequestLoggingMiddleware
from bugbounty.api.programs import router as programs_router
from bugbounty.api.reports import router as reports_router
from bugbounty.auth import auth_router
from bugbounty.config import get_settings
from bugbounty.core.errors import setup_exception_handlers
from bugbounty.logging_config import configure_logging
from bugbounty.ratelimit import (
    LimitsWindowStore,
    RateLimitMiddleware,
    RateLimitPolicy,
    WindowStore,
)
from bugbounty.storage import MetadataStorage, create_local_storage

logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup app resources."""
    settings = get_settings()

    from bugbounty.integrations.sentry import init_sentry
    if init_sentry():
        logger.info("Sentry error tracking enabled")

    if settings.allow_admin_registration:
        logger.warning(
            "Self-registration with the ADMIN role is enabled; "
            "set ALLOW_ADMIN_REGISTRATION=false to refuse it"
        )

    if settings.seed_sample_data:
        from bugbounty.seed import seed
        await seed(app.state.storage)

    logger.info("Bug Bounty API starting in %s mode", settings.environment)

    yield

    logger.info("Bug Bounty API shutting down")


# =============================================================================
# App Setup
# =============================================================================


def create_app(
    storage: MetadataStorage | None = None,
    rate_store: WindowStore | None = None,
) -> FastAPI:
    """
    Build the application.

    Storage and the rate window store are injectable; by default both
    live in process memory.
    """
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Bug Bounty Platform API",
        description="Programs, vulnerability reports and role-based access control",
        version=__version__,
        docs_url="/api-docs",
        lifespan=lifespan,
    )

    app.state.storage = storage if storage is not None else create_local_storage()

    setup_exception_handlers(app)

    if settings.rate_limit_enabled:
        if rate_store is None:
            rate_store = LimitsWindowStore(uri=settings.rate_limit_storage_uri)
        app.state.rate_store = rate_store
        app.add_middleware(
            RateLimitMiddleware,
            policy=RateLimitPolicy(rate_store, prefix=settings.api_prefix),
            trust_proxy_headers=settings.trust_proxy_headers,
        )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(programs_router, prefix=settings.api_prefix)
    app.include_router(reports_router, prefix=settings.api_prefix)

    @app.get(settings.api_prefix or "/", tags=["meta"])
    async def welcome():
        return {"message": "Welcome to the Bug Bounty Platform API!"}

    @app.get("/health", tags=["meta"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "bugbounty-api"}

    return app


app = create_app()
