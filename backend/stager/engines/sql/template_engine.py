"""
Placeholder substitution for SQL dump templates.

A ``DumpTemplate`` names the template file and the literal tokens it carries.
``SQLTemplateEngine.render`` applies an ordered list of token -> value
bindings with plain string replacement; there is no escaping because the
tokens sit inside literals the dump author already quoted.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from stager.core.errors import TemplateNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Binding:
    token: str
    value: str


@dataclass(frozen=True)
class DumpTemplate:
    """A SQL dump file under the base path and the tokens it is expected to contain."""

    name: str
    filename: str
    tokens: tuple[str, ...]

    def bind(self, *values: str) -> list[Binding]:
        """Pair ``tokens`` with *values* positionally."""
        if len(values) != len(self.tokens):
            raise ValueError(
                f"{self.name} expects {len(self.tokens)} values, got {len(values)}"
            )
        return [Binding(t, v) for t, v in zip(self.tokens, values, strict=True)]

    def read(self, base_path: Path, encoding: str = "utf-8") -> str:
        path = base_path / self.filename
        if not path.is_file():
            logger.error("Template not found: %s", path)
            raise TemplateNotFoundError(f"Error: File {path} not found")
        # undecodable bytes become U+FFFD rather than failing the run
        return path.read_text(encoding=encoding, errors="replace")


class SQLTemplateEngine:
    """Applies bindings to dump text."""

    def render(self, template: str, bindings: list[Binding]) -> str:
        """Replace every occurrence of each binding's token, in binding order."""
        out = template
        for b in bindings:
            if not b.token:
                raise ValueError("Binding token must not be empty")
            if b.token not in out:
                logger.warning("Placeholder %r not found in template", b.token)
                continue
            out = out.replace(b.token, b.value)
        return out
