"""Shared pytest fixtures for racesweep tests.

Provides fake port implementations, spec/result factories, and a synthetic
benchmark executable that stands in for the real tree benchmark.
"""

from __future__ import annotations

import shlex
import sys
import textwrap
from typing import TYPE_CHECKING

import pytest

import racesweep.console
from racesweep.console._plain import PlainBackend
from racesweep.domain.models import BenchmarkSpec, CsvRow, RunResult

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


# ── Console isolation ─────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _plain_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset the console singleton so no test inherits another's stream."""
    monkeypatch.setattr(racesweep.console, "_backend", PlainBackend())


# ── Factories ─────────────────────────────────────────────────────────────


@pytest.fixture()
def make_spec() -> Callable[..., BenchmarkSpec]:
    """Factory for BenchmarkSpec with sensible defaults."""

    def _factory(
        *,
        tree_type: str = "merkle_sha3",
        arity: int = 2,
        num_leaves: int = 1_000_000,
        batch_size: int = 200_000,
    ) -> BenchmarkSpec:
        return BenchmarkSpec(
            tree_type=tree_type,
            arity=arity,
            num_leaves=num_leaves,
            batch_size=batch_size,
        )

    return _factory


SAMPLE_OUTPUT = textwrap.dedent(
    """\
    Allocating memory for arity-2 height-30 merkle_sha3, to benchmark updating 200,000 out of 1,073,741,824 leaves

    Sampled 200,000 random updates in 41.2ms

    Updated 200,000 leaves in 1.62s
    Updates per second: 123,456

    Total hashes computed: 5,432,100
    Hashes per second: 3,353,148
    """
)


# ── Fake Port Implementations ─────────────────────────────────────────────


class FakeInvoker:
    """InvokerPort returning canned results, keyed by arity."""

    def __init__(
        self,
        output: str = SAMPLE_OUTPUT,
        fail_arities: frozenset[int] = frozenset(),
    ) -> None:
        self._output = output
        self._fail_arities = fail_arities
        self.calls: list[BenchmarkSpec] = []

    def invoke(self, spec: BenchmarkSpec) -> RunResult:
        self.calls.append(spec)
        if spec.arity in self._fail_arities:
            return RunResult(raw_output="thread 'main' panicked", success=False, exit_code=2)
        return RunResult(raw_output=self._output, success=True, exit_code=0)


class FakeSink:
    """SinkPort collecting rows in memory."""

    def __init__(self) -> None:
        self.opened = False
        self.closed = False
        self.rows: list[CsvRow] = []

    def open(self) -> None:
        self.opened = True

    def write(self, row: CsvRow) -> None:
        self.rows.append(row)

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def make_invoker() -> Callable[..., FakeInvoker]:
    """Factory for FakeInvoker; pass the arities that should fail."""

    def _factory(*fail_arities: int, output: str = SAMPLE_OUTPUT) -> FakeInvoker:
        return FakeInvoker(output=output, fail_arities=frozenset(fail_arities))

    return _factory


@pytest.fixture()
def sample_output() -> str:
    """Captured output of a successful benchmark run."""
    return SAMPLE_OUTPUT


@pytest.fixture()
def fake_sink() -> FakeSink:
    return FakeSink()


# ── Synthetic benchmark executable ────────────────────────────────────────

_BENCH_SCRIPT = '''\
import pathlib
import sys

args = sys.argv[1:]
with pathlib.Path(__file__).with_name("calls.log").open("a") as log:
    log.write(" ".join(args) + "\\n")

arity = None
for i, arg in enumerate(args):
    if arg.startswith("--arity="):
        arity = arg.split("=", 1)[1]
    elif arg == "-a":
        arity = args[i + 1]

if arity in {fail_arities!r}:
    print("thread 'main' panicked at 'out of memory'")
    sys.exit({fail_status})

print("Updated some leaves in 1.2s")
print("Updates per second: 1,234,567")
print("Total hashes computed: 9,876,543")
print("Hashes per second: 2,000,000", file=sys.stderr)
'''


@pytest.fixture()
def bench_cmd(tmp_path: Path) -> Callable[..., str]:
    """Write a fake benchmark script and return a shell-quoted command for it.

    The script appends its arguments to ``calls.log`` next to itself, exits
    with *fail_status* when the arity is in *fail_arities*, and otherwise
    prints the metric lines the extractor looks for.
    """

    def _factory(*, fail_arities: tuple[str, ...] = (), fail_status: int = 2) -> str:
        script = tmp_path / "bench" / "fake_bench.py"
        script.parent.mkdir(exist_ok=True)
        script.write_text(
            _BENCH_SCRIPT.format(fail_arities=set(fail_arities), fail_status=fail_status),
            encoding="utf-8",
        )
        return f"{shlex.quote(sys.executable)} {shlex.quote(str(script))}"

    return _factory


@pytest.fixture()
def bench_calls(tmp_path: Path) -> Callable[[], list[str]]:
    """Return a reader for the argument lines logged by the fake benchmark."""

    def _read() -> list[str]:
        log = tmp_path / "bench" / "calls.log"
        if not log.exists():
            return []
        return log.read_text(encoding="utf-8").splitlines()

    return _read
