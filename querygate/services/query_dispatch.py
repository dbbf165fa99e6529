"""Query Dispatch — routes a validated request to the backend and shapes the outcome.

Invariants:
    - One operation per endpoint: run_all, run_batch, run_exec
    - Every operation returns an Envelope, it never raises
    - BackendExecutionError → 500 "failed to <action>: <backend message>"
    - Any other exception → 500 "failed to <action>: internal error" (traceback logged only)
    - Batch submits all statements in one backend call; results keep submission order
    - No retries, no caching: an identical request repeats the backend call

Design Decisions:
    - Single _at_boundary() helper is the only place exceptions are caught, so
      the error taxonomy is enforced in one spot for all three operations
    - Transactionality of batch/exec belongs to the backend, not the dispatcher
"""

import logging
from typing import Awaitable, Callable

from querygate.core.backend_protocols import QueryBackend, Statement
from querygate.core.envelope import (
    Envelope,
    batch_envelope,
    error_envelope,
    exec_envelope,
    query_envelope,
)
from querygate.core.errors import BackendExecutionError, InternalError
from querygate.schemas.query import BatchQuery, ExecQuery, PreparedQuery

logger = logging.getLogger(__name__)

ACTION_RUN = "run query"
ACTION_BATCH = "batch query"
ACTION_EXEC = "exec query"


class QueryDispatcher:
    """Executes the three query shapes against an injected backend."""

    def __init__(self, backend: QueryBackend):
        self._backend = backend

    @property
    def backend(self) -> QueryBackend:
        return self._backend

    async def run_all(self, query: PreparedQuery) -> Envelope:
        """Prepare, bind if params given, return all rows plus metadata."""
        async def work() -> Envelope:
            result = await self._prepare(query).all()
            return query_envelope(result)

        return await self._at_boundary(ACTION_RUN, work)

    async def run_batch(self, batch: BatchQuery) -> Envelope:
        """Prepare every entry, then submit the ordered list in one call."""
        async def work() -> Envelope:
            statements = [self._prepare(q) for q in batch.batch]
            results = await self._backend.batch(statements)
            if len(results) != len(statements):
                raise InternalError(
                    f"backend returned {len(results)} results "
                    f"for {len(statements)} statements",
                )
            return batch_envelope(results)

        return await self._at_boundary(ACTION_BATCH, work)

    async def run_exec(self, query: ExecQuery) -> Envelope:
        """Forward raw text verbatim. Only count and duration come back."""
        async def work() -> Envelope:
            result = await self._backend.exec(query.query_text)
            return exec_envelope(result)

        return await self._at_boundary(ACTION_EXEC, work)

    def _prepare(self, query: PreparedQuery) -> Statement:
        stmt = self._backend.prepare(query.query_text)
        if query.params:
            stmt = stmt.bind(*query.params)
        return stmt

    async def _at_boundary(
        self, action: str, work: Callable[[], Awaitable[Envelope]],
    ) -> Envelope:
        try:
            return await work()
        except BackendExecutionError as e:
            msg = f"failed to {action}: {e.message}"
            logger.error(msg, extra={"error_code": e.code})
            return error_envelope(msg, e.http_status)
        except Exception as e:
            internal = e if isinstance(e, InternalError) else InternalError()
            logger.error(
                f"Unexpected error while trying to {action}: {e}",
                extra={"error_code": internal.code},
                exc_info=True,
            )
            return error_envelope(
                f"failed to {action}: internal error", internal.http_status,
            )
