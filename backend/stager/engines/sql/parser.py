"""
Split a SQLite dump into individual statements.

The dump is cut on ``;`` outside quoted strings, quoted identifiers and
comments. Chunks are then merged until ``sqlite3.complete_statement`` accepts
them, which keeps ``CREATE TRIGGER ... BEGIN ...; END;`` bodies together.
"""

import re
import sqlite3

_COMMENTS = re.compile(r"--[^\n]*|/\*.*?(\*/|$)", re.DOTALL)

# Opening quote -> closing quote. SQLite has no backslash escapes; a doubled
# closing quote inside a literal stands for itself.
_QUOTES = {"'": "'", '"': '"', "`": "`", "[": "]"}


def _split_on_semicolons(sql: str) -> list[str]:
    """Cut *sql* after every top-level ``;`` (the ``;`` is kept on the chunk)."""
    chunks: list[str] = []
    current: list[str] = []
    i = 0
    length = len(sql)

    while i < length:
        ch = sql[i]

        if ch in _QUOTES:
            close = _QUOTES[ch]
            end = i + 1
            while end < length:
                if sql[end] == close:
                    if close != "]" and end + 1 < length and sql[end + 1] == close:
                        end += 2
                        continue
                    break
                end += 1
            current.append(sql[i : end + 1])
            i = end + 1
            continue

        if ch == "-" and i + 1 < length and sql[i + 1] == "-":
            end = sql.find("\n", i)
            if end == -1:
                current.append(sql[i:])
                i = length
            else:
                current.append(sql[i : end + 1])
                i = end + 1
            continue

        if ch == "/" and i + 1 < length and sql[i + 1] == "*":
            end = sql.find("*/", i + 2)
            if end == -1:
                current.append(sql[i:])
                i = length
            else:
                current.append(sql[i : end + 2])
                i = end + 2
            continue

        current.append(ch)
        i += 1
        if ch == ";":
            chunks.append("".join(current))
            current = []

    tail = "".join(current)
    if tail.strip():
        chunks.append(tail)
    return chunks


def _is_blank(sql: str) -> bool:
    """True if *sql* holds nothing but whitespace, comments and semicolons."""
    return not _COMMENTS.sub("", sql).strip(" \t\r\n;")


def split_statements(sql: str) -> list[str]:
    """
    Return the complete statements of *sql*, stripped, in order.

    A trailing statement without a terminating ``;`` is returned as-is.
    """
    statements: list[str] = []
    buffer = ""
    for chunk in _split_on_semicolons(sql):
        buffer += chunk
        # complete_statement rejects NUL; it cannot change where a statement ends
        if sqlite3.complete_statement(buffer.replace("\x00", " ")):
            if not _is_blank(buffer):
                statements.append(buffer.strip())
            buffer = ""
    if not _is_blank(buffer):
        statements.append(buffer.strip())
    return statements
