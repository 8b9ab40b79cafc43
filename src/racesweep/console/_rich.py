"""racesweep.console._rich -- Rich-based backend.

Provides coloured, structured terminal output using the Rich library.
"""

from __future__ import annotations

from typing import IO

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

_THEME = Theme(
    {
        "info": "blue",
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "step.num": "bold cyan",
        "dim": "dim",
    }
)


class RichBackend:
    """ConsoleProtocol implementation backed by Rich."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._con = Console(file=stream, theme=_THEME, highlight=False)

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        self._con.print(Text(f"  {message}", style="info"))

    def success(self, message: str) -> None:
        self._con.print(Text(f"  \u2713 {message}", style="success"))

    def warning(self, message: str) -> None:
        self._con.print(Text(f"  \u26a0 {message}", style="warning"))

    def error(self, message: str) -> None:
        self._con.print(Text(f"  \u2717 {message}", style="error"))

    # -- Structured output --------------------------------------------------

    def panel(self, content: str, *, title: str = "", style: str = "") -> None:
        # Raw benchmark output may contain '[' -- never parse it as markup
        self._con.print(
            Panel(Text(content), title=title or None, border_style=style or "dim"),
        )

    def kv(self, data: dict[str, str], *, title: str = "") -> None:
        t = Table(
            title=title or None,
            box=box.SIMPLE,
            show_header=False,
            show_edge=False,
            pad_edge=True,
        )
        t.add_column("Key", style="bold", justify="right")
        t.add_column("Value")
        for k, v in data.items():
            t.add_row(k, v)
        self._con.print(t)

    # -- Sweep progress -----------------------------------------------------

    def step(self, current: int, total: int | None, description: str) -> None:
        counter = f"{current}/{total}" if total else str(current)
        line = Text("\n  ")
        line.append(f"[{counter}]", style="step.num")
        line.append(f" {description}")
        self._con.print(line)

    def step_detail(self, message: str) -> None:
        self._con.print(Text(f"    {message}", style="dim"))
