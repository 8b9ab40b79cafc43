#!/usr/bin/env python3
"""
racesweep CLI -- run benchmark sweeps over Merkle/Verkle tree parameters.

Usage:
  racesweep sweep-batch <type> <arities> <output-csv> [--num-leaves N]
  racesweep sweep-grid <type>
  racesweep sweep-grid-file <type> <output-csv> [<batch-size>]

Common options:
  --bench-cmd CMD   benchmark command (default: cargo run --release --)
  --cwd DIR         working directory for the benchmark command
  --timeout SECS    abandon a single run after SECS seconds
  --grid-config F   YAML file overriding the grid axes
  --console MODE    auto | rich | plain
  --log-file F      write a debug/audit log to F
"""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from pathlib import Path
from typing import NoReturn

from racesweep.config import TREE_TYPES, build_sweep_config, header_for
from racesweep.console import configure, console
from racesweep.domain.errors import ConfigError
from racesweep.domain.models import BenchmarkSpec, HarnessMode, SweepConfig
from racesweep.extractor import MetricExtractor
from racesweep.grid import build_grid
from racesweep.invoker import BenchmarkInvoker
from racesweep.orchestrator import SweepOrchestrator
from racesweep.sink import CsvFileSink, StreamSink

logger = logging.getLogger("racesweep")

_TYPES_HELP = "<type> can be either " + ", ".join(f"'{t}'" for t in TREE_TYPES)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    common = _ArgumentParser(add_help=False)
    common.add_argument("--bench-cmd", default=None, help="Benchmark command (shell-quoted)")
    common.add_argument("--cwd", type=Path, default=None, help="Working directory for the benchmark")
    common.add_argument("--timeout", type=float, default=None, help="Seconds before a run is abandoned")
    common.add_argument("--grid-config", type=Path, default=None, help="YAML grid override file")
    common.add_argument(
        "--console",
        choices=("auto", "rich", "plain"),
        default="auto",
        help="Status output style (default: auto)",
    )
    common.add_argument("--log-file", type=Path, default=None, help="Write a log file")
    common.add_argument("--verbose", action="store_true", help="Enable debug logging")
    common.add_argument("--quiet", action="store_true", help="Only log warnings and errors")

    parser = _ArgumentParser(
        prog="racesweep",
        description="racesweep -- Merkle/Verkle benchmark sweeps",
        epilog=_TYPES_HELP,
    )
    sub = parser.add_subparsers(dest="command")

    # racesweep sweep-batch
    batch_p = sub.add_parser(
        HarnessMode.SWEEP_BATCH.value,
        parents=[common],
        help="Sweep batch sizes 1..2^20 for each arity",
        epilog=_TYPES_HELP,
    )
    batch_p.add_argument("type", help="Tree type")
    batch_p.add_argument("arities", help="Space-separated arities, e.g. '2 4 8 16'")
    batch_p.add_argument("output", help="CSV file to append to")
    batch_p.add_argument("--num-leaves", default=None, help="Leaf count (default: 2,000,000,000)")

    # racesweep sweep-grid
    grid_p = sub.add_parser(
        HarnessMode.SWEEP_GRID.value,
        parents=[common],
        help="Sweep leaf counts x arities, CSV to standard output",
        epilog=_TYPES_HELP,
    )
    grid_p.add_argument("type", help="Tree type")

    # racesweep sweep-grid-file
    grid_file_p = sub.add_parser(
        HarnessMode.SWEEP_GRID_FILE.value,
        parents=[common],
        help="Sweep leaf counts x arities, CSV appended to a file",
        epilog=_TYPES_HELP,
    )
    grid_file_p.add_argument("type", help="Tree type")
    grid_file_p.add_argument("output", help="CSV file to append to")
    grid_file_p.add_argument("batch_size", nargs="?", default=None, help="Updates per run (default: 200,000)")

    return parser


def _config_from_args(args: argparse.Namespace) -> SweepConfig:
    mode = HarnessMode(args.command)
    return build_sweep_config(
        mode,
        args.type,
        arities=getattr(args, "arities", None),
        output=getattr(args, "output", None),
        batch_size=getattr(args, "batch_size", None),
        num_leaves=getattr(args, "num_leaves", None),
        grid_file=args.grid_config,
        bench_cmd=args.bench_cmd,
        cwd=args.cwd,
        timeout=args.timeout,
    )


def _setup_logging(args: argparse.Namespace) -> None:
    """Configure the file-based audit log, if one was requested."""
    if args.log_file is None:
        return
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    try:
        args.log_file.parent.mkdir(parents=True, exist_ok=True)
        args.log_file.touch()
    except OSError as exc:
        raise ConfigError(f"Cannot write log file '{args.log_file}': {exc}") from exc
    logging.basicConfig(
        filename=str(args.log_file),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        level=level,
    )


# ---------------------------------------------------------------------------
# Sweep
# ---------------------------------------------------------------------------


def run_sweep(config: SweepConfig) -> None:
    """Run one sweep end to end; exits with status 1 on ConfigError."""
    if config.tree_type not in TREE_TYPES:
        console.warning(f"Unknown tree type '{config.tree_type}', passing it through")
        logger.warning("Unknown tree type %r", config.tree_type)

    header = header_for(config.mode)
    if config.output is None:
        sink: CsvFileSink | StreamSink = StreamSink(sys.stdout, header)
    else:
        sink = CsvFileSink(config.output, header)

    try:
        grid = list(build_grid(config))
        sink.open()
    except ConfigError as exc:
        console.error(str(exc))
        sys.exit(1)

    console.kv(
        {
            "Mode": config.mode.value,
            "Tree type": config.tree_type,
            "Benchmarks": str(sum(1 for p in grid if isinstance(p, BenchmarkSpec))),
            "Command": shlex.join(config.command),
            "Output": str(config.output) if config.output is not None else "<stdout>",
        },
        title="Sweep",
    )

    orchestrator = SweepOrchestrator(
        BenchmarkInvoker(config.command, config.flag_style, cwd=config.cwd, timeout=config.timeout),
        MetricExtractor(),
        sink,
    )
    try:
        summary = orchestrator.run(grid)
    except KeyboardInterrupt:
        console.warning("Interrupted.")
        logger.warning("Sweep interrupted")
        sys.exit(130)
    finally:
        sink.close()

    outcome = (
        f"Sweep finished: {summary.succeeded} of {summary.ran} benchmarks succeeded, "
        f"{summary.skipped} skipped"
    )
    if summary.failed:
        console.warning(outcome)
    else:
        console.success(outcome)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    # -- Console configuration (status stream) ------------------------------
    # sweep-grid prints CSV rows on stdout, so status moves to stderr
    stream = sys.stderr if args.command == HarnessMode.SWEEP_GRID.value else sys.stdout
    configure(backend=args.console, stream=stream)

    try:
        # -- Logging configuration (file-based audit log) -------------------
        _setup_logging(args)
        config = _config_from_args(args)
    except ConfigError as exc:
        console.error(str(exc))
        sys.exit(1)

    logger.info("Starting %s for %s", config.mode.value, config.tree_type)
    run_sweep(config)


if __name__ == "__main__":
    main()
