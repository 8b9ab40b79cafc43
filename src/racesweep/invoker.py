"""BenchmarkInvoker -- runs the external benchmark executable for one grid point.

The process is run synchronously with stderr folded into stdout. Any
outcome, including a failure to spawn, comes back as a RunResult; nothing
here raises into the sweep loop.
"""

from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING

from racesweep.domain.models import BenchmarkSpec, FlagStyle, RunResult

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

logger = logging.getLogger("racesweep.invoker")


def build_args(spec: BenchmarkSpec, style: FlagStyle) -> list[str]:
    """Map *spec* onto the executable's flags.

    Both spellings are accepted by the benchmark binary and each harness mode
    keeps its own, so existing result files stay reproducible.
    """
    if style is FlagStyle.EQUALS:
        return [
            f"-t={spec.tree_type}",
            f"--arity={spec.arity}",
            f"-l={spec.num_leaves}",
            f"-u={spec.batch_size}",
        ]
    return [
        f"-t={spec.tree_type}",
        "-a",
        str(spec.arity),
        "-l",
        str(spec.num_leaves),
        "-u",
        str(spec.batch_size),
    ]


class BenchmarkInvoker:
    """Concrete implementation of InvokerPort using subprocess."""

    def __init__(
        self,
        command: Sequence[str],
        style: FlagStyle,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialise the invoker.

        Args:
            command: Executable and leading arguments, e.g. ``cargo run --release --``.
            style: Flag spelling used for the grid-point arguments.
            cwd: Working directory for the executable (default: inherit).
            timeout: Seconds before a run is abandoned; None waits forever.
        """
        self._command = list(command)
        self._style = style
        self._cwd = cwd
        self._timeout = timeout

    def argv(self, spec: BenchmarkSpec) -> list[str]:
        return [*self._command, *build_args(spec, self._style)]

    def invoke(self, spec: BenchmarkSpec) -> RunResult:
        """Run the benchmark for *spec* and capture its combined output.

        Returns:
            A RunResult with ``success`` set only for exit status zero.
        """
        argv = self.argv(spec)
        logger.debug("Running: %s", " ".join(argv))
        try:
            proc = subprocess.run(
                argv,
                cwd=self._cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as exc:
            logger.warning("Benchmark timed out after %ss: %s", self._timeout, spec)
            partial = exc.output or ""
            if isinstance(partial, bytes):
                partial = partial.decode(errors="replace")
            return RunResult(
                raw_output=f"{partial}\nTimed out after {self._timeout}s".lstrip("\n"),
                success=False,
            )
        except OSError as exc:
            logger.warning("Cannot start benchmark %s: %s", argv[0], exc)
            return RunResult(raw_output=f"Cannot run {argv[0]}: {exc}", success=False)

        if proc.returncode != 0:
            logger.warning("Benchmark exited with status %d: %s", proc.returncode, spec)
        return RunResult(
            raw_output=proc.stdout or "",
            success=proc.returncode == 0,
            exit_code=proc.returncode,
        )
