"""
Storage engines that apply a batch of SQL statements to a database file.

Both engines keep going after a failing statement (the way the sqlite3 shell
does without ``-bail``) and report the failures in the returned BatchResult.

- SQLiteEngine: in-process ``sqlite3`` (default).
- SQLiteShellEngine: pipes the batch to the ``sqlite3`` command-line shell.
"""

import logging
import re
import shutil
import sqlite3
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from stager.core.config import Settings
from stager.core.errors import MaterializationError

logger = logging.getLogger(__name__)

# Progress handler fires every N SQLite VM instructions.
_PROGRESS_STEPS = 10_000

# "Parse error near line 3: no such table: x" / "Runtime error near line 7: ..." /
# "Error: near line 2: ..." depending on shell version.
_SHELL_ERROR = re.compile(r"^(?:Parse error|Runtime error|Error)\b.*$", re.MULTILINE)


@dataclass
class StatementError:
    index: int
    statement: str
    message: str


@dataclass
class BatchResult:
    applied: int = 0
    errors: list[StatementError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class StorageEngine(Protocol):
    def apply_batch(self, db_path: Path, statements: list[str]) -> BatchResult: ...

    def is_available(self) -> bool: ...


def _excerpt(sql: str, limit: int = 200) -> str:
    s = " ".join(sql.split())
    return s[:limit] + "..." if len(s) > limit else s


class SQLiteEngine:
    """Apply statements one by one through the ``sqlite3`` module."""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    def is_available(self) -> bool:
        return True

    def apply_batch(self, db_path: Path, statements: list[str]) -> BatchResult:
        result = BatchResult()
        deadline = time.monotonic() + self.timeout if self.timeout else None
        timed_out = False

        def _progress() -> int:
            nonlocal timed_out
            if deadline is not None and time.monotonic() > deadline:
                timed_out = True
                return 1
            return 0

        try:
            # isolation_level=None: the dump's own BEGIN/COMMIT drive transactions
            conn = sqlite3.connect(str(db_path), isolation_level=None)
        except sqlite3.Error as e:
            raise MaterializationError(f"Cannot open database {db_path}: {e}") from e

        try:
            conn.set_progress_handler(_progress, _PROGRESS_STEPS)
            for index, stmt in enumerate(statements):
                try:
                    conn.execute(stmt)
                    result.applied += 1
                except (sqlite3.Error, ValueError) as e:
                    # ValueError: embedded NUL, rejected before reaching SQLite
                    if timed_out:
                        raise MaterializationError(
                            f"SQL batch exceeded {self.timeout}s at statement {index}"
                        ) from e
                    logger.warning(
                        "SQL statement %d failed: %s. SQL: %s", index, e, _excerpt(stmt)
                    )
                    result.errors.append(StatementError(index, _excerpt(stmt), str(e)))
            if conn.in_transaction:
                conn.commit()
        finally:
            conn.close()
        return result


class SQLiteShellEngine:
    """Pipe the batch to the sqlite3 command-line shell."""

    def __init__(self, executable: str = "sqlite3", timeout: float | None = None) -> None:
        self.executable = executable
        self.timeout = timeout

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def apply_batch(self, db_path: Path, statements: list[str]) -> BatchResult:
        script = "\n".join(
            s if s.rstrip().endswith(";") else s + ";" for s in statements
        )
        try:
            proc = subprocess.run(
                [self.executable, str(db_path)],
                input=script,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise MaterializationError(f"sqlite3 shell not found: {self.executable}") from e
        except subprocess.TimeoutExpired as e:
            raise MaterializationError(
                f"sqlite3 shell exceeded {self.timeout}s on {db_path}"
            ) from e

        messages = _SHELL_ERROR.findall(proc.stderr or "")
        if proc.returncode != 0 and not messages and proc.stderr:
            messages = [proc.stderr.strip()]
        result = BatchResult(applied=max(len(statements) - len(messages), 0))
        for msg in messages:
            logger.warning("SQL execution warning: %s", msg)
            result.errors.append(StatementError(-1, "", msg))
        return result


def get_storage_engine(settings: Settings) -> StorageEngine:
    """Build the storage engine selected by ``SQL_ENGINE``."""
    if settings.SQL_ENGINE == "sqlite-cli":
        return SQLiteShellEngine(settings.SQLITE_CLI_PATH, timeout=settings.SQL_BATCH_TIMEOUT)
    return SQLiteEngine(timeout=settings.SQL_BATCH_TIMEOUT)
