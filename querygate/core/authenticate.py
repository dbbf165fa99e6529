"""Bearer Authentication — pure checks for the shared-secret credential.

Invariants:
    - A secret shorter than MIN_SECRET_LENGTH is a ConfigurationError
    - is_authorized() is True only for "Bearer <secret>", scheme case-sensitive
    - Comparison is constant-time (hmac.compare_digest)
    - No reason is returned on failure: missing, malformed and wrong look the same

Design Decisions:
    - Pure functions: the HTTP middleware (api/bearer_auth.py) only wires them in
"""

import hmac

from querygate.core.domain_types import MIN_SECRET_LENGTH
from querygate.core.errors import ConfigurationError

BEARER_SCHEME = "Bearer"


def require_shared_secret(secret: str | None) -> str:
    """Validate the configured secret at startup. Returns it unchanged."""
    if not secret:
        raise ConfigurationError(
            "APP_SECRET is not set: a shared secret is required to serve queries",
        )
    if len(secret) < MIN_SECRET_LENGTH:
        raise ConfigurationError(
            f"shared secret not long enough: must be at least "
            f"{MIN_SECRET_LENGTH} characters long",
        )
    return secret


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token of a well-formed Bearer header, else None."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme != BEARER_SCHEME or not token or " " in token:
        return None
    return token


def is_authorized(authorization: str | None, secret: str) -> bool:
    token = extract_bearer_token(authorization)
    if token is None:
        return False
    return hmac.compare_digest(token.encode("utf-8"), secret.encode("utf-8"))
