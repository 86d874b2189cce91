from __future__ import annotations

import fnmatch
import re
from collections.abc import Iterable


class IgnoreGlobs:
    """Shell-style patterns matched against entry names, never full paths."""

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        self.patterns: tuple[str, ...] = tuple(
            p.strip() for p in patterns if p and p.strip()
        )
        self._compiled: list[re.Pattern[str]] = [
            re.compile(fnmatch.translate(pattern)) for pattern in self.patterns
        ]

    def __bool__(self) -> bool:
        return bool(self._compiled)

    def __repr__(self) -> str:
        return f"IgnoreGlobs({list(self.patterns)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IgnoreGlobs):
            return NotImplemented
        return self.patterns == other.patterns

    def __hash__(self) -> int:
        return hash(self.patterns)

    def is_match(self, name: str) -> bool:
        return any(pattern.match(name) for pattern in self._compiled)
