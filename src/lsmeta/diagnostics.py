from __future__ import annotations

import os
from pathlib import Path

from rich.console import Console


def error_message(exc: OSError) -> str:
    return exc.strerror or str(exc)


class ErrorReporter:
    """Writes one `<path>: <message>.` line per absorbed I/O failure."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True, highlight=False)
        self.reported = 0

    def report(self, path: Path | str, exc: OSError) -> None:
        self.reported += 1
        self.console.print(
            f"{os.fspath(path)}: {error_message(exc)}.",
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )
