"""querygate API — FastAPI application entry point.

Invariants:
    - ConfigurationError raised before the app exists when the database binding
      or the shared secret is missing or invalid, so the process never serves
    - Routes registered explicitly (no auto-discovery)
    - Middleware order: request logging (outermost) → bearer auth → routes
    - Global error handlers map every failure to {"error": str}

Design Decisions:
    - create_app() factory takes settings and an optional backend: tests inject
      fakes, production builds SqlDatabase from DATABASE_URL
    - Module-level `app` for `uvicorn querygate.main:app`
    - Only a backend built here is disposed on shutdown; an injected one belongs
      to the caller
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from querygate.api.bearer_auth import BearerAuthMiddleware
from querygate.api.error_handlers import register_error_handlers
from querygate.api.request_logging import RequestLoggingMiddleware
from querygate.api.routes import index, query
from querygate.api.routes.index import describe_routes
from querygate.config import Settings, get_settings
from querygate.core.authenticate import require_shared_secret
from querygate.core.backend_protocols import QueryBackend
from querygate.core.errors import ConfigurationError
from querygate.infrastructure.database import SqlDatabase
from querygate.infrastructure.observability import setup_logging
from querygate.services.query_dispatch import QueryDispatcher

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    logger.info("querygate API started")
    yield
    if app.state.owned_backend is not None:
        await app.state.owned_backend.close()
    logger.info("querygate API shutting down")


def create_app(
    settings: Settings | None = None, backend: QueryBackend | None = None,
) -> FastAPI:
    """Build the gateway. Raises ConfigurationError on unusable configuration."""
    settings = settings or get_settings()

    if backend is None and not settings.database_url:
        raise ConfigurationError(
            "DATABASE_URL is not set: a database binding is required "
            "to serve queries",
        )
    secret = require_shared_secret(settings.app_secret)

    owned_backend = None
    if backend is None:
        backend = owned_backend = SqlDatabase(settings.database_url)

    app = FastAPI(
        title="querygate API",
        description="Authenticated HTTP gateway for SQL queries",
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.dispatcher = QueryDispatcher(backend)
    app.state.owned_backend = owned_backend

    # add_middleware prepends: the last one added runs first
    app.add_middleware(BearerAuthMiddleware, secret=secret)
    app.add_middleware(RequestLoggingMiddleware)

    routers = [index.router, query.router]
    for router in routers:
        app.include_router(router)
    app.state.route_listing = describe_routes(routers)

    register_error_handlers(app)
    return app


app = create_app()
