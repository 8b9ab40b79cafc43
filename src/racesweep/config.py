"""
racesweep/config.py -- Default grids, CSV headers, and configuration loading.

All sweep constants live here. The CLI turns raw arguments (plus an optional
YAML grid file) into a validated SweepConfig via ``build_sweep_config``.
"""

from __future__ import annotations

import os
import shlex
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from racesweep.domain.errors import ConfigError
from racesweep.domain.models import Active, AxisEntry, HarnessMode, Skipped, SweepConfig
from racesweep.grid import batch_size_series, parse_axis, parse_axis_entry, split_arities

if TYPE_CHECKING:
    from collections.abc import Sequence

# ---------------------------------------------------------------------------
# Grid defaults
# ---------------------------------------------------------------------------

SKIP_MARKER = "#"

DEFAULT_LEAF_COUNTS: tuple[str, ...] = (
    "1,000,000",
    "10,000,000",
    "100,000,000",
    "1,000,000,000",
    "2,000,000,000",
)

DEFAULT_ARITIES: tuple[str, ...] = (
    "2",
    "4",
    "8",
    "16",
    "32",
    "64",
    "128",
    "256",
    "512",
    "1024",
)

# Number of leaf updates per run in the leaf-count x arity grid
DEFAULT_NUM_UPDATES = "200,000"

# Leaf count used while sweeping batch sizes
BATCH_SWEEP_NUM_LEAVES = "2,000,000,000"

TREE_TYPES: tuple[str, ...] = (
    "merkle_sha3",
    "merkle_tiny_sha3",
    "merkle_blake2s",
    "merkle_blake2b",
    "merkle++",
    "verkle",
)

# ---------------------------------------------------------------------------
# Executable
# ---------------------------------------------------------------------------

# Benchmark command -- the grid-point flags are appended to it
DEFAULT_BENCH_CMD = "cargo run --release --"
BENCH_CMD_ENV = "RACESWEEP_BENCH_CMD"

# ---------------------------------------------------------------------------
# CSV headers
# ---------------------------------------------------------------------------

BATCH_HEADER: tuple[str, ...] = (
    "type",
    "arity",
    "num_leaves",
    "batch_size",
    "upds_per_sec",
    "hashes_per_sec",
    "num_hashes",
)
GRID_HEADER: tuple[str, ...] = (
    "type",
    "arity",
    "num_leaves",
    "num_updates",
    "upds_per_sec",
    "hashes_per_sec",
    "num_hashes",
)


def header_for(mode: HarnessMode) -> tuple[str, ...]:
    """Return the CSV header emitted by *mode*."""
    return BATCH_HEADER if mode is HarnessMode.SWEEP_BATCH else GRID_HEADER


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

_GRID_KEYS = ("leaf_counts", "arities", "batch_sizes")

# Axes a grid file may override, per mode; the other axes come from arguments
_MODE_GRID_KEYS: dict[HarnessMode, frozenset[str]] = {
    HarnessMode.SWEEP_BATCH: frozenset({"batch_sizes"}),
    HarnessMode.SWEEP_GRID: frozenset({"leaf_counts", "arities"}),
    HarnessMode.SWEEP_GRID_FILE: frozenset({"leaf_counts", "arities"}),
}


def load_grid_file(path: Path) -> dict[str, list[str]]:
    """Read axis overrides from a YAML grid file.

    Only ``leaf_counts``, ``arities`` and ``batch_sizes`` are recognised;
    each must be a list. Values are returned as strings so that skip markers
    and thousands separators survive until axis parsing.
    """
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read grid config '{path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in grid config '{path}': {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Grid config '{path}' must be a mapping")

    unknown = sorted(set(data) - set(_GRID_KEYS))
    if unknown:
        raise ConfigError(f"Unknown keys in grid config '{path}': {', '.join(unknown)}")

    grid: dict[str, list[str]] = {}
    for key in _GRID_KEYS:
        if key not in data:
            continue
        values = data[key]
        if not isinstance(values, list) or not values:
            raise ConfigError(f"'{key}' in grid config '{path}' must be a non-empty list")
        grid[key] = [str(v) for v in values]
    return grid


def resolve_command(bench_cmd: str | None) -> tuple[str, ...]:
    """Pick the benchmark command: CLI option, then environment, then default."""
    raw = bench_cmd or os.environ.get(BENCH_CMD_ENV) or DEFAULT_BENCH_CMD
    try:
        parts = tuple(shlex.split(raw))
    except ValueError as exc:
        raise ConfigError(f"Cannot parse benchmark command {raw!r}: {exc}") from exc
    if not parts:
        raise ConfigError("Benchmark command is empty")
    return parts


def _single_value(raw: str, name: str) -> int:
    entry = parse_axis_entry(raw, marker=SKIP_MARKER)
    if isinstance(entry, Skipped):
        raise ConfigError(f"{name} cannot be skipped: {raw!r}")
    return entry.value


_GRID_VALUE_HINT = (
    'write each value as a whole number and quote any that carry commas or a '
    'skip marker, e.g. "1,000,000" or "#4"'
)


def _grid_axis(
    grid: dict[str, list[str]],
    key: str,
    default: Sequence[str],
    grid_file: Path | None,
    *,
    thousands: bool = True,
) -> tuple[AxisEntry, ...]:
    """Parse one axis, from the grid file when it overrides *key*."""
    if key not in grid:
        return parse_axis(default, marker=SKIP_MARKER, thousands=thousands)
    try:
        return parse_axis(grid[key], marker=SKIP_MARKER, thousands=thousands)
    except ConfigError as exc:
        raise ConfigError(
            f"{exc} under '{key}' in grid config '{grid_file}': {_GRID_VALUE_HINT}"
        ) from exc


def build_sweep_config(
    mode: HarnessMode,
    tree_type: str,
    *,
    arities: str | None = None,
    output: str | None = None,
    batch_size: str | None = None,
    num_leaves: str | None = None,
    grid_file: Path | None = None,
    bench_cmd: str | None = None,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> SweepConfig:
    """Validate raw CLI values and assemble a SweepConfig.

    Every malformed value is reported as a ConfigError before any benchmark
    runs.
    """
    tree_type = tree_type.strip()
    if not tree_type:
        raise ConfigError("Tree type must not be empty")

    grid = load_grid_file(grid_file) if grid_file is not None else {}
    misplaced = sorted(set(grid) - _MODE_GRID_KEYS[mode])
    if misplaced:
        raise ConfigError(f"{mode.value} does not take {', '.join(misplaced)} from a grid config")

    if mode is HarnessMode.SWEEP_BATCH:
        if arities is None:
            raise ConfigError("sweep-batch requires a list of arities")
        arity_values = split_arities(arities)
        if not arity_values:
            raise ConfigError("Arity list is empty")
        arity_axis = parse_axis(arity_values, marker=SKIP_MARKER, thousands=False)
        leaf_axis: tuple[AxisEntry, ...] = (
            Active(_single_value(num_leaves or BATCH_SWEEP_NUM_LEAVES, "Leaf count")),
        )
        batch_axis = _grid_axis(
            grid, "batch_sizes", [str(v) for v in batch_size_series()], grid_file
        )
    else:
        arity_axis = _grid_axis(grid, "arities", DEFAULT_ARITIES, grid_file, thousands=False)
        leaf_axis = _grid_axis(grid, "leaf_counts", DEFAULT_LEAF_COUNTS, grid_file)
        batch_axis = (Active(_single_value(batch_size or DEFAULT_NUM_UPDATES, "Batch size")),)

    if mode is HarnessMode.SWEEP_GRID:
        output_path = None
    else:
        if not output:
            raise ConfigError(f"{mode.value} requires an output CSV file")
        output_path = Path(output)

    if timeout is not None and timeout <= 0:
        raise ConfigError(f"Timeout must be positive, got {timeout}")

    return SweepConfig(
        mode=mode,
        tree_type=tree_type,
        arities=arity_axis,
        leaf_counts=leaf_axis,
        batch_sizes=batch_axis,
        command=resolve_command(bench_cmd),
        output=output_path,
        cwd=cwd,
        timeout=timeout,
    )
