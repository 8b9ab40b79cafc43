"""Port interfaces for racesweep.

All ports are defined as typing.Protocol -- structural subtyping means any class
with matching method signatures satisfies the Protocol without inheritance.

This module has ZERO external imports -- only stdlib and typing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from racesweep.domain.models import BenchmarkSpec, CsvRow, RunResult


class InvokerPort(Protocol):
    """Runs the benchmark executable for a single grid point."""

    def invoke(self, spec: BenchmarkSpec) -> RunResult:
        """Run one benchmark and return its raw, unparsed result."""
        ...


class ExtractorPort(Protocol):
    """Turns raw executable output into metric fields."""

    def extract(self, result: RunResult) -> RunResult:
        """Return a copy of *result* with the metric fields filled in."""
        ...


class SinkPort(Protocol):
    """Append-only destination for CSV rows."""

    def open(self) -> None:
        """Prepare the destination and write the header line."""
        ...

    def write(self, row: CsvRow) -> None:
        """Append one data row."""
        ...

    def close(self) -> None:
        """Release the destination."""
        ...
