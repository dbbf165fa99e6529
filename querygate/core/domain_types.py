"""Domain Types — values that flow between schemas, dispatcher and backend.

Invariants:
    - Scalar is a closed variant: str, int, float, bool or None (never lists/objects)
    - QueryResult.rows maps column name -> scalar, one dict per row
    - ExecResult.count and ExecResult.duration_ms are non-negative
    - Size limits are the only constraints the gateway puts on query text

Design Decisions:
    - Frozen dataclasses over Pydantic for backend results: they never cross a
      validation boundary, the envelope builder serializes them explicitly
    - meta stays an untyped dict: it is opaque to the gateway
"""

from dataclasses import dataclass
from typing import Any, Union


# ─── Limits ──────────────────────────────────────────────────────

MIN_SECRET_LENGTH = 16
MAX_QUERY_TEXT_LENGTH = 10_000
MAX_EXEC_TEXT_LENGTH = 1_000_000


# ─── Value Types ─────────────────────────────────────────────────

Scalar = Union[str, int, float, bool, None]
Row = dict[str, Any]


# ─── Results ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class QueryResult:
    """Outcome of one statement. error set only for per-item batch failures."""
    rows: list[Row] | None = None
    error: str | None = None
    meta: dict[str, Any] | None = None


@dataclass(frozen=True)
class ExecResult:
    """Aggregate outcome of a raw multi-statement exec."""
    count: int
    duration_ms: float

    def __post_init__(self):
        if self.count < 0:
            raise ValueError("count must be non-negative")
        if self.duration_ms < 0:
            raise ValueError("duration_ms must be non-negative")
