"""Request Logging Middleware — one log line per request with status and timing.

Invariants:
    - Logs method, path, status_code and duration_ms as structured extras
    - Never logs headers or bodies (they carry the secret and query text)
"""

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = logging.getLogger("querygate.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = round((time.perf_counter() - started) * 1000, 3)
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {elapsed}ms",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": elapsed,
            },
        )
        return response
