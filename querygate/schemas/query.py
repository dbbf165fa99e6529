"""Query Schemas — request bodies for /query/all/, /query/exec/ and /query/batch/.

Invariants:
    - PreparedQuery.queryText: 1-10_000 chars, stripped, non-empty after strip
    - ExecQuery.queryText: 1-1_000_000 chars, stripped, non-empty after strip
    - BatchQuery.batch: at least one PreparedQuery
    - params accepts only scalars (str, int, float, bool, null)
    - Unknown extra fields are ignored

Design Decisions:
    - Length constraints run on the raw string, strip runs after (field_validator)
    - Python attribute names are snake_case, the wire keeps "queryText" via alias
    - Response models exist for the OpenAPI document only; routes return Envelopes
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from querygate.core.domain_types import (
    MAX_EXEC_TEXT_LENGTH,
    MAX_QUERY_TEXT_LENGTH,
    Scalar,
)


def _strip_query_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("queryText cannot be empty or whitespace")
    return v


class PreparedQuery(BaseModel):
    """One statement plus optional positional parameters."""
    model_config = ConfigDict(populate_by_name=True)

    query_text: str = Field(
        alias="queryText", min_length=1, max_length=MAX_QUERY_TEXT_LENGTH,
    )
    params: list[Scalar] | None = None

    @field_validator("query_text")
    @classmethod
    def strip_query_text(cls, v: str) -> str:
        return _strip_query_text(v)


class ExecQuery(BaseModel):
    """Raw text for exec. May hold several newline-separated statements."""
    model_config = ConfigDict(populate_by_name=True)

    query_text: str = Field(
        alias="queryText", min_length=1, max_length=MAX_EXEC_TEXT_LENGTH,
    )

    @field_validator("query_text")
    @classmethod
    def strip_query_text(cls, v: str) -> str:
        return _strip_query_text(v)


class BatchQuery(BaseModel):
    batch: list[PreparedQuery] = Field(min_length=1)


# --- Responses (documentation) ------------------------------------------------

class QueryResponse(BaseModel):
    results: list[dict[str, Any]] | None = None
    error: str | None = None
    meta: dict[str, Any] | None = None


class ExecResponse(BaseModel):
    count: int = Field(ge=0)
    duration_ms: float = Field(alias="durationMs", ge=0)


class ErrorResponse(BaseModel):
    error: str
