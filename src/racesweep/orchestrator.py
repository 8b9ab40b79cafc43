"""
racesweep/orchestrator.py -- The sweep loop.

Walks the grid one point at a time:
  BenchmarkSpec  -> invoke -> extract -> write row
  failed run     -> raw output block on the status stream, no row
  SkipDirective  -> one-line notice, no invocation

Runs are strictly sequential; a failing point never stops the sweep.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from racesweep.console import console
from racesweep.domain.models import BenchmarkSpec, CsvRow, SkipDirective, SweepSummary

if TYPE_CHECKING:
    from collections.abc import Iterable

    from racesweep.domain.models import GridPoint, RunResult
    from racesweep.domain.ports import ExtractorPort, InvokerPort, SinkPort

logger = logging.getLogger("racesweep.orchestrator")

FAILURE_TITLE = "ERROR: benchmark executable failed"


def describe_run(spec: BenchmarkSpec) -> str:
    return (
        f"Updating {spec.batch_size:,} out of {spec.num_leaves:,} leaves "
        f"in arity-{spec.arity} {spec.tree_type} tree..."
    )


def _fmt(value: int | None) -> str:
    return "-" if value is None else f"{value:,}"


class SweepOrchestrator:
    """Drives one sweep over a prepared grid.

    The sink must already be open (header written); the orchestrator only
    appends rows to it.
    """

    def __init__(self, invoker: InvokerPort, extractor: ExtractorPort, sink: SinkPort) -> None:
        self._invoker = invoker
        self._extractor = extractor
        self._sink = sink

    def run(self, points: Iterable[GridPoint]) -> SweepSummary:
        grid = list(points)
        total = sum(1 for p in grid if isinstance(p, BenchmarkSpec))
        ran = succeeded = failed = skipped = 0

        for point in grid:
            if isinstance(point, SkipDirective):
                console.info(f"Skipping benchmark for {point.describe()}...")
                skipped += 1
                continue

            ran += 1
            console.step(ran, total, describe_run(point))
            result = self._invoker.invoke(point)
            if result.success:
                self._record(point, result)
                succeeded += 1
            else:
                self._report_failure(point, result)
                failed += 1

        summary = SweepSummary(ran=ran, succeeded=succeeded, failed=failed, skipped=skipped)
        logger.info(
            "Sweep done: %d run, %d ok, %d failed, %d skipped",
            summary.ran,
            summary.succeeded,
            summary.failed,
            summary.skipped,
        )
        return summary

    def _record(self, spec: BenchmarkSpec, result: RunResult) -> None:
        parsed = self._extractor.extract(result)
        console.step_detail(f"{_fmt(parsed.upds_per_sec)} updates / sec")
        console.step_detail(f"{_fmt(parsed.hashes_per_sec)} hashes / sec")
        console.step_detail(f"{_fmt(parsed.num_hashes)} total hashes")
        if parsed.exponentiation_time:
            console.step_detail(parsed.exponentiation_time)

        missing = [
            name
            for name, value in (
                ("upds_per_sec", parsed.upds_per_sec),
                ("hashes_per_sec", parsed.hashes_per_sec),
                ("num_hashes", parsed.num_hashes),
            )
            if value is None
        ]
        if missing:
            logger.warning("Metrics missing for %s: %s", spec, ", ".join(missing))

        self._sink.write(CsvRow.from_run(spec, parsed))

    def _report_failure(self, spec: BenchmarkSpec, result: RunResult) -> None:
        status = "not started" if result.exit_code is None else f"exit status {result.exit_code}"
        logger.error("Benchmark failed (%s): %s", status, spec)
        console.panel(result.raw_output, title=f"{FAILURE_TITLE} ({status})", style="red")
