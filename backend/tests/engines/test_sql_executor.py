"""Unit tests for engines.sql.executor (storage engines)."""

import sqlite3
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from stager.core.config import Settings
from stager.core.errors import MaterializationError
from stager.engines.sql import SQLiteEngine, SQLiteShellEngine, get_storage_engine


def _rows(db: Path, sql: str) -> list[tuple]:
    conn = sqlite3.connect(db)
    try:
        return conn.execute(sql).fetchall()
    finally:
        conn.close()


class TestSQLiteEngine:
    def test_applies_statements(self, tmp_path: Path):
        db = tmp_path / "out.sqlite"
        result = SQLiteEngine().apply_batch(
            db,
            ["CREATE TABLE t (a TEXT);", "INSERT INTO t VALUES ('x');", "INSERT INTO t VALUES ('y');"],
        )
        assert result.applied == 3
        assert result.ok
        assert _rows(db, "SELECT a FROM t ORDER BY a") == [("x",), ("y",)]

    def test_continues_after_failing_statement(self, tmp_path: Path):
        db = tmp_path / "out.sqlite"
        result = SQLiteEngine().apply_batch(
            db,
            [
                "BEGIN TRANSACTION;",
                "CREATE TABLE t (a);",
                "INSERT INTO nope VALUES (1);",
                "INSERT INTO t VALUES (2);",
                "COMMIT;",
            ],
        )
        assert result.applied == 4
        assert len(result.errors) == 1
        assert result.errors[0].index == 2
        assert "nope" in result.errors[0].message
        assert _rows(db, "SELECT a FROM t") == [(2,)]

    def test_open_transaction_committed(self, tmp_path: Path):
        db = tmp_path / "out.sqlite"
        SQLiteEngine().apply_batch(db, ["BEGIN;", "CREATE TABLE t (a);", "INSERT INTO t VALUES (1);"])
        assert _rows(db, "SELECT a FROM t") == [(1,)]

    def test_timeout_raises(self, tmp_path: Path):
        db = tmp_path / "out.sqlite"
        endless = (
            "WITH RECURSIVE c(x) AS (SELECT 1 UNION ALL SELECT x + 1 FROM c) "
            "SELECT count(*) FROM c;"
        )
        with pytest.raises(MaterializationError, match="exceeded"):
            SQLiteEngine(timeout=0.05).apply_batch(db, [endless])

    def test_is_available(self):
        assert SQLiteEngine().is_available() is True


class TestSQLiteShellEngine:
    @patch("stager.engines.sql.executor.subprocess.run")
    def test_stderr_lines_become_errors(self, mock_run: MagicMock, tmp_path: Path):
        mock_run.return_value = subprocess.CompletedProcess(
            args=["sqlite3"],
            returncode=1,
            stdout="",
            stderr="Parse error near line 2: no such table: nope\n",
        )
        db = tmp_path / "out.sqlite"
        result = SQLiteShellEngine(timeout=5).apply_batch(
            db, ["CREATE TABLE t (a);", "INSERT INTO nope VALUES (1)"]
        )
        assert result.applied == 1
        assert len(result.errors) == 1
        assert "no such table" in result.errors[0].message

        args, kwargs = mock_run.call_args
        assert args[0] == ["sqlite3", str(db)]
        assert kwargs["input"] == "CREATE TABLE t (a);\nINSERT INTO nope VALUES (1);"
        assert kwargs["timeout"] == 5

    @patch("stager.engines.sql.executor.subprocess.run", side_effect=FileNotFoundError())
    def test_missing_binary(self, _mock_run: MagicMock, tmp_path: Path):
        with pytest.raises(MaterializationError, match="not found"):
            SQLiteShellEngine("no-such-sqlite3").apply_batch(tmp_path / "x.sqlite", ["SELECT 1;"])

    @patch(
        "stager.engines.sql.executor.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="sqlite3", timeout=1),
    )
    def test_timeout(self, _mock_run: MagicMock, tmp_path: Path):
        with pytest.raises(MaterializationError, match="exceeded"):
            SQLiteShellEngine(timeout=1).apply_batch(tmp_path / "x.sqlite", ["SELECT 1;"])

    @patch("stager.engines.sql.executor.shutil.which", return_value=None)
    def test_is_available(self, _mock_which: MagicMock):
        assert SQLiteShellEngine().is_available() is False


def test_get_storage_engine_selects_by_setting(tmp_path: Path) -> None:
    cli = get_storage_engine(Settings(BASE_PATH=tmp_path, SQL_ENGINE="sqlite-cli", SQLITE_CLI_PATH="/usr/bin/sqlite3"))
    assert isinstance(cli, SQLiteShellEngine)
    assert cli.executable == "/usr/bin/sqlite3"
    assert isinstance(get_storage_engine(Settings(BASE_PATH=tmp_path)), SQLiteEngine)
