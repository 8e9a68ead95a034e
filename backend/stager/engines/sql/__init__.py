"""
SQL dump handling: placeholder substitution, unistr() normalization,
statement splitting and materialization into SQLite files.
"""

from stager.engines.sql.executor import (
    BatchResult,
    SQLiteEngine,
    SQLiteShellEngine,
    StatementError,
    StorageEngine,
    get_storage_engine,
)
from stager.engines.sql.filters import normalize_unistr
from stager.engines.sql.materializer import SQLMaterializer
from stager.engines.sql.parser import split_statements
from stager.engines.sql.template_engine import Binding, DumpTemplate, SQLTemplateEngine

__all__ = [
    "BatchResult",
    "Binding",
    "DumpTemplate",
    "SQLMaterializer",
    "SQLTemplateEngine",
    "SQLiteEngine",
    "SQLiteShellEngine",
    "StatementError",
    "StorageEngine",
    "get_storage_engine",
    "normalize_unistr",
    "split_statements",
]
