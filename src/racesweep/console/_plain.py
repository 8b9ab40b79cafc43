"""racesweep.console._plain -- Plain-text backend.

print()-based output with no external dependencies.
Used when the status stream is not a TTY, or on request.
"""

from __future__ import annotations

import sys
from typing import IO


class PlainBackend:
    """ConsoleProtocol implementation using only built-in print()."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream

    def _print(self, text: str = "") -> None:
        # Resolve sys.stdout lazily so pytest's capsys sees default output
        print(text, file=self._stream or sys.stdout, flush=True)

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        self._print(f"  {message}")

    def success(self, message: str) -> None:
        self._print(f"  [ok] {message}")

    def warning(self, message: str) -> None:
        self._print(f"  [warn] {message}")

    def error(self, message: str) -> None:
        self._print(f"  [error] {message}")

    # -- Structured output --------------------------------------------------

    def panel(self, content: str, *, title: str = "", style: str = "") -> None:
        width = 60
        header = f" {title} " if title else ""
        border = header.center(width, "=")
        self._print()
        self._print(border)
        for line in content.splitlines():
            self._print(f"  {line}")
        self._print("=" * width)
        self._print()

    def kv(self, data: dict[str, str], *, title: str = "") -> None:
        if title:
            self._print()
            self._print(f"  {title}:")
        if not data:
            return
        max_key = max(len(k) for k in data)
        for k, v in data.items():
            self._print(f"  {k.rjust(max_key)}: {v}")

    # -- Sweep progress -----------------------------------------------------

    def step(self, current: int, total: int | None, description: str) -> None:
        counter = f"{current}/{total}" if total else str(current)
        self._print()
        self._print(f"  [{counter}] {description}")

    def step_detail(self, message: str) -> None:
        self._print(f"    {message}")
