"""Backend Protocols — the database capability the dispatcher depends on.

Invariants:
    - Core NEVER imports a concrete backend, dependency arrows point inward only
    - Statements are immutable: bind() returns a new statement
    - Backend failures surface as BackendExecutionError (core/errors.py), never
      as raw driver exceptions
    - batch() returns exactly one QueryResult per statement, in submission order

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - prepare() and bind() are sync (no IO), all/exec/batch are async (network)
"""

from typing import Protocol, Sequence

from querygate.core.domain_types import ExecResult, QueryResult, Scalar


class Statement(Protocol):
    """A prepared statement, optionally bound to positional parameters."""
    text: str
    params: tuple[Scalar, ...]

    def bind(self, *params: Scalar) -> "Statement": ...
    async def all(self) -> QueryResult: ...


class QueryBackend(Protocol):
    """Contract for the bound database, implemented by infrastructure/."""
    def prepare(self, text: str) -> Statement: ...
    async def exec(self, text: str) -> ExecResult: ...
    async def batch(self, statements: Sequence[Statement]) -> list[QueryResult]: ...
