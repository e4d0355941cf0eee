"""Mutual Aid API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map MutualAidError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Security headers (nosniff, frame denial, no referrer) on every response
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - All routes mounted under settings.api_prefix; docs served at {prefix}/docs
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mutual_aid.api.error_handlers import register_error_handlers
from mutual_aid.api.routes import health, help_requests
from mutual_aid.config import get_settings
from mutual_aid.infrastructure import database
from mutual_aid.infrastructure.observability import (
    RequestLoggingMiddleware, setup_logging,
)
from mutual_aid.infrastructure.security_headers import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Mutual Aid API started")
    yield
    await manager.dispose()
    logger.info("Mutual Aid API shutting down")


settings = get_settings()

app = FastAPI(
    title="Mutual Aid API",
    version="1.0.0",
    lifespan=lifespan,
    docs_url=f"{settings.api_prefix}/docs" if settings.docs_enabled else None,
    openapi_url=f"{settings.api_prefix}/openapi.json" if settings.docs_enabled else None,
    redoc_url=None,
)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router, prefix=settings.api_prefix)
app.include_router(help_requests.router, prefix=settings.api_prefix)

register_error_handlers(app)
