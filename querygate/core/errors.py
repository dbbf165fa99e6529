"""Error Hierarchy — typed, categorized exceptions for every gateway failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - to_response() always produces the wire envelope {"error": <message>}
    - Request errors (400/401) never reach the backend; backend errors are 500
    - No stack traces or internal details in user-facing messages

Design Decisions:
    - Single hierarchy with GatewayError base: FastAPI global handler catches all
    - ConfigurationError carries http_status 500 but is raised before serving starts
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories, one per failure class of the pipeline."""
    CONFIGURATION = "configuration"
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    BACKEND = "backend"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs, never for the response body."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the error envelope returned to clients."""
        return {"error": self.message}


# ─── Startup Errors ─────────────────────────────────────────────

class ConfigurationError(GatewayError):
    """Gateway cannot be built from the supplied configuration."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


# ─── Request Errors (400-level) ─────────────────────────────────

class AuthenticationError(GatewayError):
    """Bearer credential missing, malformed or wrong. Never says which."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Unauthorized", "AUTHENTICATION_ERROR", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class QueryValidationError(GatewayError):
    """Request body does not match the route's schema."""
    def __init__(self, detail: str | None = None, context: ErrorContext | None = None):
        message = "invalid request body"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


# ─── Execution Errors (500-level) ───────────────────────────────

class BackendExecutionError(GatewayError):
    """The database rejected or failed a prepare/bind/execute call."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "BACKEND_EXECUTION_ERROR", ErrorCategory.BACKEND,
            ErrorSeverity.ERROR, context, 500,
        )


class InternalError(GatewayError):
    """Unexpected failure inside the gateway itself."""
    def __init__(self, message: str = "internal error", context: ErrorContext | None = None):
        super().__init__(
            message, "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
