"""
Directory-name generators for artifact directories.

The generator is injected into ArtifactGenerator so tests can substitute a
fixed sequence of names.
"""

import secrets
from collections.abc import Iterable, Iterator
from typing import Protocol


class NameGenerator(Protocol):
    def __call__(self) -> str: ...


class TokenNameGenerator:
    """Random lowercase hex tokens from ``secrets`` (16 chars = 64 bits by default)."""

    def __init__(self, length: int = 16) -> None:
        if length < 2 or length % 2:
            raise ValueError("length must be an even number >= 2")
        self.length = length

    def __call__(self) -> str:
        return secrets.token_hex(self.length // 2)


class SequenceNameGenerator:
    """Yields the given names in order; raises RuntimeError once exhausted."""

    def __init__(self, names: Iterable[str]) -> None:
        self._names: Iterator[str] = iter(names)

    def __call__(self) -> str:
        try:
            return next(self._names)
        except StopIteration:
            raise RuntimeError("name sequence exhausted") from None
