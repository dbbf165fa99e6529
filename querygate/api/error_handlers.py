"""Error Handlers — global exception handlers for the gateway API.

Invariants:
    - GatewayError → its http_status with {"error": message}
    - RequestValidationError → 400 {"error": "invalid request body: ..."}
    - HTTPException (unknown path, wrong method) → its status, JSON body
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Four handlers registered by one function, called from create_app()
    - Validation detail flattened into the error string: the wire envelope has
      no room for a structured list
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from querygate.core.errors import GatewayError, InternalError, QueryValidationError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_gateway_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_gateway_error_handler(app: FastAPI) -> None:

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        """Handle all gateway errors raised outside the dispatcher boundary."""
        logger.error(
            f"GatewayError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        error = QueryValidationError(describe_validation_errors(exc))
        logger.warning(
            f"Validation error on {request.url.path}: {error.message}",
            extra={"error_code": error.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error.to_response(),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all, never leaks internal details."""
        error = InternalError()
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            extra={"error_code": error.code, "path": request.url.path},
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error.to_response(),
        )


def describe_validation_errors(exc: RequestValidationError) -> str:
    """Flatten Pydantic errors into "field: reason; field: reason"."""
    parts = []
    for e in exc.errors():
        field = ".".join(str(loc) for loc in e["loc"] if loc != "body")
        parts.append(f"{field}: {e['msg']}" if field else e["msg"])
    return "; ".join(parts)
