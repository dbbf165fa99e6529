"""SQL Database Adapter — the capability against an in-memory SQLite database.

Invariants:
    - Positional params bound by the driver
    - Driver errors surface as BackendExecutionError with the driver's message
    - exec counts newline-separated statements, skipping blank lines
    - batch is one transaction: a failing statement rolls back the others
    - DDL ahead of a failing statement is rolled back too
    - Driver errors raised while binding keep the driver's message
"""

import pytest

from querygate.core.errors import BackendExecutionError
from querygate.infrastructure.database import (
    encode_value,
    split_exec_statements,
)

CREATE_USERS = "CREATE TABLE users (id INTEGER PRIMARY KEY, email TEXT)"


# ─── pure helpers ────────────────────────────────────────────────

def test_split_exec_statements_skips_blank_lines():
    text = "INSERT INTO t VALUES (1)\n\n  \nINSERT INTO t VALUES (2)\n"
    assert split_exec_statements(text) == [
        "INSERT INTO t VALUES (1)", "INSERT INTO t VALUES (2)",
    ]


def test_encode_value_turns_bytes_into_int_list():
    assert encode_value(b"\x01\xff") == [1, 255]
    assert encode_value("text") == "text"
    assert encode_value(None) is None


# ─── all ─────────────────────────────────────────────────────────

async def test_select_one(sql_database):
    result = await sql_database.prepare("SELECT 1").all()
    assert result.rows == [{"1": 1}]
    assert result.meta["rows_read"] == 1
    assert result.meta["changes"] == 0
    assert result.meta["duration"] >= 0


async def test_bind_positional_params(sql_database):
    stmt = sql_database.prepare("SELECT ? AS a, ? AS b, ? AS c").bind("x", 2, None)
    result = await stmt.all()
    assert result.rows == [{"a": "x", "b": 2, "c": None}]


async def test_bind_returns_new_statement(sql_database):
    stmt = sql_database.prepare("SELECT ? AS a")
    bound = stmt.bind(1)
    assert stmt.params == ()
    assert bound.params == (1,)


async def test_blob_values_are_json_ready(sql_database):
    result = await sql_database.prepare("SELECT X'0102' AS data").all()
    assert result.rows == [{"data": [1, 2]}]


async def test_write_reports_changes_and_last_row_id(sql_database):
    await sql_database.exec(CREATE_USERS)
    result = await sql_database.prepare(
        "INSERT INTO users (email) VALUES (?)",
    ).bind("a@example.com").all()
    assert result.rows == []
    assert result.meta["changes"] == 1
    assert result.meta["rows_written"] == 1
    assert result.meta["last_row_id"] == 1


async def test_syntax_error_is_backend_execution_error(sql_database):
    with pytest.raises(BackendExecutionError) as exc_info:
        await sql_database.prepare("SELEC 1").all()
    assert "syntax error" in exc_info.value.message
    assert "[SQL:" not in exc_info.value.message


# ─── exec ────────────────────────────────────────────────────────

async def test_exec_counts_statements(sql_database):
    result = await sql_database.exec(
        f"{CREATE_USERS}\nINSERT INTO users VALUES (1, 'a@example.com')\n"
        "INSERT INTO users VALUES (2, 'b@example.com')",
    )
    assert result.count == 3
    assert result.duration_ms >= 0
    rows = (await sql_database.prepare("SELECT id FROM users ORDER BY id").all()).rows
    assert rows == [{"id": 1}, {"id": 2}]


async def test_exec_failure_is_backend_execution_error(sql_database):
    with pytest.raises(BackendExecutionError, match="no such table"):
        await sql_database.exec("INSERT INTO missing VALUES (1)")


# ─── batch ───────────────────────────────────────────────────────

async def test_batch_results_in_submission_order(sql_database):
    results = await sql_database.batch([
        sql_database.prepare("SELECT 'first' AS v"),
        sql_database.prepare("SELECT ? AS v").bind("second"),
        sql_database.prepare("SELECT 'third' AS v"),
    ])
    assert [r.rows[0]["v"] for r in results] == ["first", "second", "third"]


async def test_batch_failure_rolls_back_earlier_statements(sql_database):
    await sql_database.exec(CREATE_USERS)
    with pytest.raises(BackendExecutionError):
        await sql_database.batch([
            sql_database.prepare("INSERT INTO users VALUES (1, 'a@example.com')"),
            sql_database.prepare("INSERT INTO nowhere VALUES (1)"),
        ])
    rows = (await sql_database.prepare("SELECT COUNT(*) AS n FROM users").all()).rows
    assert rows == [{"n": 0}]


async def test_batch_failure_rolls_back_earlier_ddl(sql_database):
    with pytest.raises(BackendExecutionError, match="syntax error"):
        await sql_database.batch([
            sql_database.prepare("CREATE TABLE t (x INTEGER)"),
            sql_database.prepare("SELEC 1"),
        ])
    with pytest.raises(BackendExecutionError, match="no such table"):
        await sql_database.prepare("SELECT * FROM t").all()


async def test_exec_failure_rolls_back_earlier_ddl(sql_database):
    with pytest.raises(BackendExecutionError):
        await sql_database.exec("CREATE TABLE e (x INTEGER)\nSELEC 1")
    with pytest.raises(BackendExecutionError, match="no such table"):
        await sql_database.prepare("SELECT * FROM e").all()


async def test_exec_ddl_commits_on_success(sql_database):
    await sql_database.exec("CREATE TABLE kept (x INTEGER)")
    result = await sql_database.prepare("SELECT COUNT(*) AS n FROM kept").all()
    assert result.rows == [{"n": 0}]


# ─── driver errors outside the DBAPI hierarchy ───────────────────

async def test_unbindable_param_is_backend_execution_error(sql_database):
    with pytest.raises(BackendExecutionError, match="too large"):
        await sql_database.prepare("SELECT ?").bind(2**70).all()


async def test_unbindable_param_fails_the_whole_batch(sql_database):
    await sql_database.exec(CREATE_USERS)
    with pytest.raises(BackendExecutionError, match="too large"):
        await sql_database.batch([
            sql_database.prepare("INSERT INTO users VALUES (1, 'a@example.com')"),
            sql_database.prepare("SELECT ?").bind(2**70),
        ])
    rows = (await sql_database.prepare("SELECT COUNT(*) AS n FROM users").all()).rows
    assert rows == [{"n": 0}]
