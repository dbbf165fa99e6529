"""Bearer Auth Middleware — guards every /query path with the shared secret.

Invariants:
    - Runs before body parsing and validation: unauthenticated requests never
      reach a route handler or the backend
    - Failure is always 401 {"error": "Unauthorized"} + WWW-Authenticate header
    - Paths outside the protected prefix pass through untouched

Design Decisions:
    - Middleware over a route dependency: FastAPI parses the JSON body before it
      resolves dependencies, so a dependency would answer 400 to an
      unauthenticated malformed body
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from querygate.core.authenticate import is_authorized
from querygate.core.errors import AuthenticationError

logger = logging.getLogger(__name__)

PROTECTED_PREFIX = "/query"


class BearerAuthMiddleware(BaseHTTPMiddleware):

    def __init__(
        self, app: ASGIApp, secret: str, protected_prefix: str = PROTECTED_PREFIX,
    ):
        super().__init__(app)
        self._secret = secret
        self._prefix = protected_prefix.rstrip("/")

    def is_protected(self, path: str) -> bool:
        return path == self._prefix or path.startswith(self._prefix + "/")

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint):
        if not self.is_protected(request.url.path):
            return await call_next(request)
        if is_authorized(request.headers.get("authorization"), self._secret):
            return await call_next(request)

        error = AuthenticationError()
        logger.warning(
            "Rejected request without valid bearer token",
            extra={
                "method": request.method,
                "path": request.url.path,
                "error_code": error.code,
            },
        )
        return JSONResponse(
            status_code=error.http_status,
            content=error.to_response(),
            headers={"WWW-Authenticate": 'Bearer realm=""'},
        )
