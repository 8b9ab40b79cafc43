"""Parameter grid construction.

Axis values are resolved once into ``Active`` or ``Skipped`` entries; the
builders then walk the nested axes in a fixed order and yield either a
``BenchmarkSpec`` to run or a ``SkipDirective`` to report.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from racesweep.domain.errors import ConfigError
from racesweep.domain.models import (
    Active,
    AxisEntry,
    BenchmarkSpec,
    GridPoint,
    HarnessMode,
    Skipped,
    SkipDirective,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from racesweep.domain.models import SweepConfig

logger = logging.getLogger("racesweep.grid")

# 1, 2, 4, ... 2^20
BATCH_SERIES_DOUBLINGS = 20


def batch_size_series(doublings: int = BATCH_SERIES_DOUBLINGS) -> tuple[int, ...]:
    """Return the batch sizes 1, 2, 4, ... up to ``2**doublings`` inclusive."""
    sizes = [1]
    for _ in range(doublings):
        sizes.append(sizes[-1] * 2)
    return tuple(sizes)


def parse_axis_entry(raw: str, marker: str = "#", *, thousands: bool = True) -> AxisEntry:
    """Resolve one configured axis value.

    A value starting with *marker* is skipped; the marker is stripped and the
    remainder kept as text for reporting. Anything else must be a positive
    integer, written with thousands separators only when *thousands* is set.
    Arities never take separators, so ``"2,4"`` is rejected rather than read
    as 24.
    """
    text = str(raw).strip()
    if text.startswith(marker):
        return Skipped(text.replace(marker, "").strip())

    digits = text.replace(",", "") if thousands else text
    try:
        value = int(digits)
    except ValueError:
        raise ConfigError(f"Not a number: {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"Expected a positive integer, got {raw!r}")
    return Active(value)


def parse_axis(
    values: Iterable[str], marker: str = "#", *, thousands: bool = True
) -> tuple[AxisEntry, ...]:
    return tuple(parse_axis_entry(v, marker=marker, thousands=thousands) for v in values)


def split_arities(text: str) -> list[str]:
    """Split the space-separated arity argument, e.g. ``"2 4 #8 16"``."""
    return text.split()


def _skip(axis: str, value: str, scope: tuple[tuple[str, str], ...] = ()) -> SkipDirective:
    directive = SkipDirective(axis=axis, value=value, scope=scope)
    logger.info("Skipping %s", directive.describe())
    return directive


def build_batch_grid(
    tree_type: str,
    num_leaves: int,
    arities: Sequence[AxisEntry],
    batch_sizes: Sequence[AxisEntry],
) -> Iterator[GridPoint]:
    """Walk arity (outer) x batch size (inner) at a fixed leaf count."""
    for arity in arities:
        if isinstance(arity, Skipped):
            yield _skip("arity", arity.value)
            continue
        for batch in batch_sizes:
            if isinstance(batch, Skipped):
                yield _skip("batch_size", batch.value, (("arity", str(arity.value)),))
                continue
            yield BenchmarkSpec(
                tree_type=tree_type,
                arity=arity.value,
                num_leaves=num_leaves,
                batch_size=batch.value,
            )


def build_leaf_grid(
    tree_type: str,
    batch_size: int,
    leaf_counts: Sequence[AxisEntry],
    arities: Sequence[AxisEntry],
) -> Iterator[GridPoint]:
    """Walk leaf count (outer) x arity (inner) at a fixed batch size."""
    for leaves in leaf_counts:
        if isinstance(leaves, Skipped):
            yield _skip("num_leaves", leaves.value)
            continue
        for arity in arities:
            if isinstance(arity, Skipped):
                yield _skip("arity", arity.value, (("num_leaves", str(leaves.value)),))
                continue
            yield BenchmarkSpec(
                tree_type=tree_type,
                arity=arity.value,
                num_leaves=leaves.value,
                batch_size=batch_size,
            )


def _fixed(axis: Sequence[AxisEntry], name: str) -> int:
    if len(axis) != 1 or not isinstance(axis[0], Active):
        raise ConfigError(f"Expected a single {name}, got {axis!r}")
    return axis[0].value


def build_grid(config: SweepConfig) -> Iterator[GridPoint]:
    """Return the grid for the configured harness mode."""
    if config.mode is HarnessMode.SWEEP_BATCH:
        return build_batch_grid(
            config.tree_type,
            _fixed(config.leaf_counts, "leaf count"),
            config.arities,
            config.batch_sizes,
        )
    return build_leaf_grid(
        config.tree_type,
        _fixed(config.batch_sizes, "batch size"),
        config.leaf_counts,
        config.arities,
    )
