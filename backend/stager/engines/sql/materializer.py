"""
Turn SQL dump text into a SQLite database file.

normalize unistr() -> write scratch .sql -> fresh empty db -> apply statements
-> delete scratch. Failing statements are warnings; only an engine that cannot
run at all raises MaterializationError.
"""

import logging
from pathlib import Path

from stager.core.errors import MaterializationError
from stager.engines.sql.executor import BatchResult, StorageEngine
from stager.engines.sql.filters import normalize_unistr
from stager.engines.sql.parser import split_statements

logger = logging.getLogger(__name__)


def scratch_path_for(output_path: Path) -> Path:
    return output_path.with_name(f"{output_path.stem}_temp.sql")


class SQLMaterializer:
    def __init__(self, engine: StorageEngine, *, encoding: str = "utf-8") -> None:
        self.engine = engine
        self.encoding = encoding

    def materialize(self, sql_text: str, output_path: Path) -> BatchResult:
        """Create *output_path* as a new SQLite database holding *sql_text*."""
        scratch = scratch_path_for(output_path)
        try:
            scratch.write_text(normalize_unistr(sql_text), encoding=self.encoding)
            output_path.unlink(missing_ok=True)
            output_path.touch()
            statements = split_statements(scratch.read_text(encoding=self.encoding))
            result = self.engine.apply_batch(output_path, statements)
        except MaterializationError:
            raise
        except OSError as e:
            logger.error("SQLite creation failed for %s: %s", output_path, e)
            raise MaterializationError(f"Error creating SQLite database: {e}") from e
        finally:
            scratch.unlink(missing_ok=True)

        if result.errors:
            logger.warning(
                "%s: %d of %d statements failed",
                output_path.name,
                len(result.errors),
                len(statements),
            )
        logger.debug("%s: applied %d statements", output_path.name, result.applied)
        return result
