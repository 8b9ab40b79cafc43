"""racesweep.console._protocol -- ConsoleProtocol definition.

Pure standard-library typing.Protocol for the status stream.
No external dependencies allowed in this file.
"""

from __future__ import annotations

from typing import Protocol


class ConsoleProtocol(Protocol):
    """racesweep status-stream protocol.

    **General messages**::

        console.info("Skipping benchmark for arity-4...")
        console.success("Sweep finished")
        console.warning("Unknown tree type 'foo'")
        console.error("Cannot open 'out.csv' for append")

    **Structured output**::

        console.panel(raw_output, title="ERROR: benchmark executable failed")
        console.kv({"Type": "verkle", "Grid points": "50"})

    **Sweep progress**::

        console.step(3, 50, "Updating 200,000 out of 1,000,000 leaves ...")
        console.step_detail("1,234,567 updates / sec")
    """

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        """Informational message."""
        ...

    def success(self, message: str) -> None:
        """Success / positive-outcome message."""
        ...

    def warning(self, message: str) -> None:
        """Warning message."""
        ...

    def error(self, message: str) -> None:
        """Error message."""
        ...

    # -- Structured output --------------------------------------------------

    def panel(self, content: str, *, title: str = "", style: str = "") -> None:
        """Display *content* in a clearly delimited block."""
        ...

    def kv(self, data: dict[str, str], *, title: str = "") -> None:
        """Display key-value pairs."""
        ...

    # -- Sweep progress -----------------------------------------------------

    def step(self, current: int, total: int | None, description: str) -> None:
        """Display a progress line ``[current/total] description``."""
        ...

    def step_detail(self, message: str) -> None:
        """Display an indented detail line under the current step."""
        ...
