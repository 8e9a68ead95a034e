"""
Text filters applied to SQL dumps before they reach SQLite.

Upstream dumps encode non-ASCII text with ``unistr('...')``, a function SQLite
does not have. ``normalize_unistr`` rewrites every such call into a plain
single-quoted literal.
"""

import logging
import re

logger = logging.getLogger(__name__)

# Single-quote escape for SQL strings
_SQL_QUOTE_ESCAPE = str.maketrans({"'": "''"})

# unistr('it''s') / unistr("text"), any case, optional whitespace
_UNISTR_CALL = re.compile(
    r"""unistr\s*\(\s*(?:'((?:[^']|'')*)'|"([^"]*)")\s*\)""",
    re.IGNORECASE,
)

# \XXXX (one UTF-16 code unit) or \\ (literal backslash)
_UNISTR_ESCAPE = re.compile(r"\\(\\|[0-9A-Fa-f]{4})")


def sql_string(value: str) -> str:
    """Quote *value* as a single-quoted SQL literal, doubling embedded quotes."""
    return "'" + value.translate(_SQL_QUOTE_ESCAPE) + "'"


def decode_unistr(text: str) -> str:
    """
    Decode ``\\XXXX`` escapes into UTF-16 code units and combine surrogate pairs.

    Raises UnicodeDecodeError when the code units do not form valid UTF-16
    (e.g. a lone surrogate).
    """

    def _unit(m: re.Match[str]) -> str:
        token = m.group(1)
        if token == "\\":
            return "\\"
        return chr(int(token, 16))

    raw = _UNISTR_ESCAPE.sub(_unit, text)
    return raw.encode("utf-16-le", "surrogatepass").decode("utf-16-le")


def normalize_unistr(sql: str) -> str:
    """Replace each ``unistr(literal)`` call with an equivalent quoted literal."""

    def _replace(m: re.Match[str]) -> str:
        if m.group(1) is not None:
            literal = m.group(1).replace("''", "'")
        else:
            literal = m.group(2)
        try:
            return sql_string(decode_unistr(literal))
        except UnicodeDecodeError:
            logger.warning("Could not decode unistr literal, keeping it verbatim: %r", literal[:80])
            return sql_string(literal)

    return _UNISTR_CALL.sub(_replace, sql)
