"""MetricExtractor -- scrapes throughput figures from benchmark output.

The benchmark prints human-formatted lines such as::

    Updates per second: 1,234,567
    Total hashes computed: 9,876,543

Each metric is found by a case-sensitive marker substring; the first
matching line wins. Missing markers are not an error, the field is None.
"""

from __future__ import annotations

import dataclasses
import logging

from racesweep.domain.models import RunResult

logger = logging.getLogger("racesweep.extractor")

UPDATES_MARKER = "Updates per second"
HASHES_MARKER = "Hashes per second"
NUM_HASHES_MARKER = "hashes computed"
EXP_TIME_MARKER = "Average time per exponentiation"


def _find_line(output: str, marker: str) -> str | None:
    for line in output.splitlines():
        if marker in line:
            return line
    logger.debug("Marker not found in output: %r", marker)
    return None


def _digits(line: str) -> int | None:
    digits = "".join(c for c in line.replace(",", "") if c in "0123456789")
    return int(digits) if digits else None


class MetricExtractor:
    """Concrete implementation of ExtractorPort for the benchmark's text output."""

    def updates_per_second(self, output: str) -> int | None:
        line = _find_line(output, UPDATES_MARKER)
        return _digits(line) if line is not None else None

    def hashes_per_second(self, output: str) -> int | None:
        line = _find_line(output, HASHES_MARKER)
        return _digits(line) if line is not None else None

    def num_hashes(self, output: str) -> int | None:
        line = _find_line(output, NUM_HASHES_MARKER)
        return _digits(line) if line is not None else None

    def exponentiation_time(self, output: str) -> str | None:
        """Return the exponentiation line verbatim; it carries units."""
        line = _find_line(output, EXP_TIME_MARKER)
        return line.strip() if line is not None else None

    def extract(self, result: RunResult) -> RunResult:
        """Return a copy of *result* with every metric field filled in."""
        output = result.raw_output
        return dataclasses.replace(
            result,
            upds_per_sec=self.updates_per_second(output),
            hashes_per_sec=self.hashes_per_second(output),
            num_hashes=self.num_hashes(output),
            exponentiation_time=self.exponentiation_time(output),
        )
