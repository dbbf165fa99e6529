"""Response Envelopes — uniform success/error shapes returned to clients.

Invariants:
    - Query-shaped success bodies use "results"/"meta"
    - Exec success bodies use "count"/"durationMs"
    - Batch bodies are a list, one entry per submitted statement, absent fields omitted
    - Every error body is exactly {"error": <str>} with a non-2xx status
    - Only 200, 400, 401 and 500 are produced here

Design Decisions:
    - Envelope is a plain (status_code, body) value: routes turn it into a
      JSONResponse, tests assert on it without an HTTP client
"""

from dataclasses import dataclass
from typing import Any, Sequence

from querygate.core.domain_types import ExecResult, QueryResult

HTTP_OK = 200


@dataclass(frozen=True)
class Envelope:
    status_code: int
    body: dict[str, Any] | list[dict[str, Any]]


def query_envelope(result: QueryResult) -> Envelope:
    """Single-query success: rows plus backend metadata."""
    return Envelope(HTTP_OK, {
        "results": list(result.rows or []),
        "meta": dict(result.meta or {}),
    })


def batch_item(result: QueryResult) -> dict[str, Any]:
    item: dict[str, Any] = {}
    if result.rows is not None:
        item["results"] = list(result.rows)
    if result.error is not None:
        item["error"] = result.error
    if result.meta is not None:
        item["meta"] = dict(result.meta)
    return item


def batch_envelope(results: Sequence[QueryResult]) -> Envelope:
    """Batch success: order of results is order of submission."""
    return Envelope(HTTP_OK, [batch_item(r) for r in results])


def exec_envelope(result: ExecResult) -> Envelope:
    return Envelope(HTTP_OK, {
        "count": result.count,
        "durationMs": result.duration_ms,
    })


def error_envelope(message: str, status_code: int) -> Envelope:
    """Error body. Rejects 2xx so a failure can never look like a success."""
    if 200 <= status_code < 300:
        raise ValueError(f"error envelope needs a non-2xx status, got {status_code}")
    return Envelope(status_code, {"error": message})
