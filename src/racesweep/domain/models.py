"""Core data types for racesweep.

All types are frozen dataclasses with complete type annotations.
This module has ZERO imports from outside the Python standard library.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class HarnessMode(Enum):
    """Which sweep the CLI was asked to run."""

    SWEEP_BATCH = "sweep-batch"
    SWEEP_GRID = "sweep-grid"
    SWEEP_GRID_FILE = "sweep-grid-file"


class FlagStyle(Enum):
    """How grid-point fields are spelled on the executable's command line."""

    EQUALS = "equals"  # -t=<type> --arity=<n> -l=<n> -u=<n>
    SPACED = "spaced"  # -t=<type> -a <n> -l <n> -u <n>


# ---------------------------------------------------------------------------
# Grid axes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Active:
    """An axis value that takes part in the sweep."""

    value: int


@dataclass(frozen=True)
class Skipped:
    """An axis value carrying the skip marker; kept only for diagnostics."""

    value: str


AxisEntry = Active | Skipped


@dataclass(frozen=True)
class BenchmarkSpec:
    """One grid point to execute."""

    tree_type: str
    arity: int
    num_leaves: int
    batch_size: int


@dataclass(frozen=True)
class SkipDirective:
    """A grid point excluded from execution by a skip marker.

    ``scope`` holds the enclosing (outer) axis values, so that a skipped
    inner value can still be reported with the combination it belongs to.
    """

    axis: str
    value: str
    scope: tuple[tuple[str, str], ...] = ()

    def describe(self) -> str:
        """Human-readable name of the skipped combination."""
        parts = [*self.scope, (self.axis, self.value)]
        return " ".join(_axis_label(axis, value) for axis, value in parts)


def _axis_label(axis: str, value: str) -> str:
    if axis == "arity":
        return f"arity-{value}"
    if axis == "num_leaves":
        return f"{value} leaves"
    return f"batch size {value}"


GridPoint = BenchmarkSpec | SkipDirective


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RunResult:
    """Outcome of one executable invocation.

    ``exit_code`` is None when the process could not be spawned at all.
    Metric fields stay None until the extractor fills them in.
    """

    raw_output: str
    success: bool
    exit_code: int | None = None
    upds_per_sec: int | None = None
    hashes_per_sec: int | None = None
    num_hashes: int | None = None
    exponentiation_time: str | None = None


@dataclass(frozen=True)
class CsvRow:
    """One persisted measurement, in header column order."""

    tree_type: str
    arity: int
    num_leaves: int
    batch_size: int
    upds_per_sec: int | None
    hashes_per_sec: int | None
    num_hashes: int | None

    @classmethod
    def from_run(cls, spec: BenchmarkSpec, result: RunResult) -> CsvRow:
        return cls(
            tree_type=spec.tree_type,
            arity=spec.arity,
            num_leaves=spec.num_leaves,
            batch_size=spec.batch_size,
            upds_per_sec=result.upds_per_sec,
            hashes_per_sec=result.hashes_per_sec,
            num_hashes=result.num_hashes,
        )

    def cells(self) -> list[str]:
        """Column values as strings; absent metrics become empty cells."""
        return [
            self.tree_type,
            str(self.arity),
            str(self.num_leaves),
            str(self.batch_size),
            _cell(self.upds_per_sec),
            _cell(self.hashes_per_sec),
            _cell(self.num_hashes),
        ]


def _cell(value: int | None) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class SweepSummary:
    """Counters for one finished sweep."""

    ran: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SweepConfig:
    """Validated configuration for one CLI invocation."""

    mode: HarnessMode
    tree_type: str
    arities: tuple[AxisEntry, ...]
    leaf_counts: tuple[AxisEntry, ...]
    batch_sizes: tuple[AxisEntry, ...]
    command: tuple[str, ...]
    output: Path | None = None
    cwd: Path | None = None
    timeout: float | None = None

    @property
    def flag_style(self) -> FlagStyle:
        if self.mode is HarnessMode.SWEEP_BATCH:
            return FlagStyle.EQUALS
        return FlagStyle.SPACED
