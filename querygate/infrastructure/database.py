"""SQL Database Adapter — the bound database capability on SQLAlchemy's asyncio engine.

Invariants:
    - Every call runs inside engine.begin(): commit on success, rollback on exception
    - All SQLAlchemy/driver exceptions mapped to BackendExecutionError (core/errors.py),
      including ones the driver raises outside its DBAPI hierarchy while binding
    - Parameters are bound positionally by the driver, placeholder style is the driver's
    - batch() runs every statement on one connection in one transaction, in order
    - exec() splits on newlines, skips blank lines, runs the rest in one transaction
    - Row values leave this module JSON-ready (bytes become a list of ints)

Design Decisions:
    - exec_driver_sql over text(): text() only knows named :params, clients send
      positional ones
    - Connection lifecycle (pooling, pre-ping, recycle) left to SQLAlchemy, the
      gateway is not a pool manager
    - Transactional batch: a failing statement fails the whole request with one
      500 rather than a partially applied batch
    - SQLite: the driver's own transaction handling is switched off and BEGIN is
      emitted from a "begin" listener, otherwise DDL commits outside the
      transaction and survives a rollback
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Sequence

from sqlalchemy import event
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from querygate.core.backend_protocols import Statement
from querygate.core.domain_types import ExecResult, QueryResult, Row, Scalar
from querygate.core.errors import BackendExecutionError, ErrorContext

logger = logging.getLogger(__name__)

EXEC_STATEMENT_SEPARATOR = "\n"


class SqlStatement:
    """Immutable prepared statement tied to the SqlDatabase that created it."""

    def __init__(
        self, database: "SqlDatabase", text: str, params: tuple[Scalar, ...] = (),
    ):
        self._database = database
        self.text = text
        self.params = params

    def bind(self, *params: Scalar) -> "SqlStatement":
        return SqlStatement(self._database, self.text, tuple(params))

    async def all(self) -> QueryResult:
        return await self._database.run(self)

    def __repr__(self) -> str:
        return f"SqlStatement(text={self.text!r}, params={self.params!r})"


class SqlDatabase:
    """Implements QueryBackend (core/backend_protocols.py) for any async SQLAlchemy URL."""

    def __init__(self, database_url: str, engine: AsyncEngine | None = None):
        self.engine = engine or create_async_engine(
            database_url,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        if self.engine.dialect.name == "sqlite":
            use_explicit_transactions(self.engine)

    def prepare(self, text: str) -> SqlStatement:
        return SqlStatement(self, text)

    async def run(self, statement: Statement) -> QueryResult:
        """Execute one statement and return all rows plus metadata."""
        async with self.transaction("all") as conn:
            return await _execute(conn, statement)

    async def batch(self, statements: Sequence[Statement]) -> list[QueryResult]:
        async with self.transaction("batch") as conn:
            return [await _execute(conn, stmt) for stmt in statements]

    async def exec(self, text: str) -> ExecResult:
        started = time.perf_counter()
        count = 0
        async with self.transaction("exec") as conn:
            for sql in split_exec_statements(text):
                await _exec_driver_sql(conn, sql)
                count += 1
        return ExecResult(count=count, duration_ms=_elapsed_ms(started))

    @asynccontextmanager
    async def transaction(
        self, operation: str,
    ) -> AsyncGenerator[AsyncConnection, None]:
        """Provide a connection in a transaction, mapping failures to BackendExecutionError."""
        try:
            async with self.engine.begin() as conn:
                yield conn
        except DBAPIError as e:
            message = describe_db_error(e)
            logger.error(f"DB driver error during {operation}: {message}")
            raise BackendExecutionError(
                message, ErrorContext(operation=operation),
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"SQLAlchemy error during {operation}: {e}")
            raise BackendExecutionError(
                str(e), ErrorContext(operation=operation),
            ) from e

    async def close(self) -> None:
        await self.engine.dispose()


def use_explicit_transactions(engine: AsyncEngine) -> None:
    """Make engine.begin() a real SQLite transaction, DDL included.

    The sqlite3 driver only opens a transaction before DML on its own, so a
    CREATE TABLE ahead of a failing statement would already be committed.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


def split_exec_statements(text: str) -> list[str]:
    """Statements of an exec body: one per line, blank lines dropped."""
    return [
        line.strip() for line in text.split(EXEC_STATEMENT_SEPARATOR)
        if line.strip()
    ]


def describe_db_error(e: DBAPIError) -> str:
    """Driver message without SQLAlchemy's statement/params/background-link suffix."""
    if e.orig is not None:
        return str(e.orig)
    return str(e)


def encode_value(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return list(bytes(value))
    return value


async def _execute(conn: AsyncConnection, statement: Statement) -> QueryResult:
    started = time.perf_counter()
    result = await _exec_driver_sql(conn, statement.text, statement.params)

    rows: list[Row] = []
    changes = 0
    if result.returns_rows:
        rows = [
            {key: encode_value(value) for key, value in row.items()}
            for row in result.mappings()
        ]
    else:
        changes = max(result.rowcount, 0)

    return QueryResult(rows=rows, meta={
        "duration": _elapsed_ms(started),
        "changes": changes,
        "last_row_id": _last_row_id(result) if changes else None,
        "rows_read": len(rows),
        "rows_written": changes,
    })


async def _exec_driver_sql(
    conn: AsyncConnection, sql: str, params: Sequence[Scalar] = (),
) -> CursorResult:
    try:
        if params:
            return await conn.exec_driver_sql(sql, tuple(params))
        return await conn.exec_driver_sql(sql)
    except SQLAlchemyError:
        raise
    except Exception as e:
        # e.g. OverflowError from sqlite3 binding an int wider than 64 bits
        logger.error(f"Driver error binding or running statement: {e}")
        raise BackendExecutionError(str(e)) from e


def _last_row_id(result: CursorResult) -> int | None:
    # not every async driver cursor exposes lastrowid
    try:
        return result.lastrowid
    except AttributeError:
        return None


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)
