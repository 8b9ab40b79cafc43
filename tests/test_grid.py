"""Tests for racesweep/grid.py -- axis parsing and grid ordering."""

from __future__ import annotations

import pytest

from racesweep.domain.errors import ConfigError
from racesweep.domain.models import (
    Active,
    BenchmarkSpec,
    HarnessMode,
    Skipped,
    SkipDirective,
    SweepConfig,
)
from racesweep.grid import (
    batch_size_series,
    build_batch_grid,
    build_grid,
    build_leaf_grid,
    parse_axis,
    parse_axis_entry,
    split_arities,
)

# ---------------------------------------------------------------------------
# Batch-size series
# ---------------------------------------------------------------------------


class TestBatchSizeSeries:
    def test_has_21_values(self) -> None:
        assert len(batch_size_series()) == 21

    def test_starts_at_one_and_ends_at_2_pow_20(self) -> None:
        series = batch_size_series()
        assert series[0] == 1
        assert series[-1] == 1_048_576

    def test_strictly_doubling(self) -> None:
        series = batch_size_series()
        assert all(b == 2 * a for a, b in zip(series, series[1:]))


# ---------------------------------------------------------------------------
# Axis entries
# ---------------------------------------------------------------------------


class TestParseAxisEntry:
    def test_plain_number(self) -> None:
        assert parse_axis_entry("16") == Active(16)

    def test_thousands_separators_removed(self) -> None:
        assert parse_axis_entry("2,000,000,000") == Active(2_000_000_000)

    def test_surrounding_whitespace_trimmed(self) -> None:
        assert parse_axis_entry("  10,000,000 ") == Active(10_000_000)

    def test_marker_produces_skipped(self) -> None:
        assert parse_axis_entry("#4") == Skipped("4")

    def test_skipped_value_is_trimmed(self) -> None:
        assert parse_axis_entry("  # 1,000,000 ") == Skipped("1,000,000")

    def test_custom_marker(self) -> None:
        assert parse_axis_entry("!8", marker="!") == Skipped("8")

    @pytest.mark.parametrize("raw", ["abc", "", "1.5", "2^20"])
    def test_non_numbers_rejected(self, raw: str) -> None:
        with pytest.raises(ConfigError):
            parse_axis_entry(raw)

    @pytest.mark.parametrize("raw", ["0", "-4"])
    def test_non_positive_rejected(self, raw: str) -> None:
        with pytest.raises(ConfigError):
            parse_axis_entry(raw)

    def test_separators_refused_without_thousands(self) -> None:
        with pytest.raises(ConfigError, match="Not a number: '2,4'"):
            parse_axis_entry("2,4", thousands=False)

    def test_parse_axis_keeps_order(self) -> None:
        assert parse_axis(["2", "#4", "8"]) == (Active(2), Skipped("4"), Active(8))

    def test_split_arities(self) -> None:
        assert split_arities(" 2 4\t#8  16 ") == ["2", "4", "#8", "16"]


# ---------------------------------------------------------------------------
# Grid enumeration
# ---------------------------------------------------------------------------


class TestBatchGrid:
    def test_arity_outer_batch_inner(self) -> None:
        points = list(
            build_batch_grid("verkle", 100, (Active(2), Active(4)), (Active(1), Active(2)))
        )
        assert [(p.arity, p.batch_size) for p in points] == [(2, 1), (2, 2), (4, 1), (4, 2)]
        assert all(isinstance(p, BenchmarkSpec) and p.num_leaves == 100 for p in points)

    def test_skipped_arity_yields_one_directive(self) -> None:
        points = list(
            build_batch_grid("verkle", 100, (Skipped("2"), Active(4)), (Active(1), Active(2)))
        )
        assert points[0] == SkipDirective(axis="arity", value="2")
        assert [p.arity for p in points[1:] if isinstance(p, BenchmarkSpec)] == [4, 4]
        assert len(points) == 3

    def test_skipped_batch_size_scoped_to_arity(self) -> None:
        points = list(build_batch_grid("verkle", 100, (Active(8),), (Active(1), Skipped("2"))))
        assert points[1] == SkipDirective(axis="batch_size", value="2", scope=(("arity", "8"),))
        assert points[1].describe() == "arity-8 batch size 2"

    def test_skipped_value_never_becomes_a_spec(self) -> None:
        points = list(
            build_batch_grid(
                "verkle",
                100,
                (Active(2), Skipped("4"), Active(8)),
                (Skipped("1"), Active(2)),
            )
        )
        specs = [p for p in points if isinstance(p, BenchmarkSpec)]
        assert {s.arity for s in specs} == {2, 8}
        assert {s.batch_size for s in specs} == {2}


class TestLeafGrid:
    def test_leaves_outer_arity_inner(self) -> None:
        points = list(
            build_leaf_grid("merkle++", 200_000, (Active(10), Active(20)), (Active(2), Active(4)))
        )
        assert [(p.num_leaves, p.arity) for p in points] == [(10, 2), (10, 4), (20, 2), (20, 4)]
        assert all(p.batch_size == 200_000 for p in points)

    def test_skipped_leaf_count(self) -> None:
        points = list(build_leaf_grid("merkle++", 5, (Skipped("1,000,000"),), (Active(2),)))
        assert points == [SkipDirective(axis="num_leaves", value="1,000,000")]
        assert points[0].describe() == "1,000,000 leaves"

    def test_skipped_arity_scoped_to_leaves(self) -> None:
        points = list(build_leaf_grid("merkle++", 5, (Active(10),), (Skipped("4"),)))
        assert points[0].describe() == "10 leaves arity-4"


class TestBuildGrid:
    def _config(self, mode: HarnessMode, **overrides: object) -> SweepConfig:
        fields: dict[str, object] = {
            "mode": mode,
            "tree_type": "verkle",
            "arities": (Active(2),),
            "leaf_counts": (Active(100),),
            "batch_sizes": (Active(1), Active(2)),
            "command": ("bench",),
        }
        fields.update(overrides)
        return SweepConfig(**fields)  # type: ignore[arg-type]

    def test_batch_mode_uses_single_leaf_count(self) -> None:
        points = list(build_grid(self._config(HarnessMode.SWEEP_BATCH)))
        assert [p.batch_size for p in points] == [1, 2]

    def test_grid_mode_requires_single_batch_size(self) -> None:
        with pytest.raises(ConfigError):
            build_grid(self._config(HarnessMode.SWEEP_GRID))

    def test_grid_mode(self) -> None:
        config = self._config(
            HarnessMode.SWEEP_GRID_FILE,
            batch_sizes=(Active(7),),
            leaf_counts=(Active(10), Active(20)),
        )
        points = list(build_grid(config))
        assert [(p.num_leaves, p.batch_size) for p in points] == [(10, 7), (20, 7)]
