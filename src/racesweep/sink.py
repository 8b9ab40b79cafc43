"""Result sinks -- append-only CSV destinations.

``open()`` writes the header once per sweep, unconditionally, before any
grid point runs. Existing content is never truncated or rewritten, so
repeated sweeps against one file accumulate (header included).
"""

from __future__ import annotations

import csv
import logging
from typing import IO, TYPE_CHECKING, Any

from racesweep.domain.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path
    from types import TracebackType

    from racesweep.domain.models import CsvRow

logger = logging.getLogger("racesweep.sink")


class StreamSink:
    """SinkPort writing CSV lines to an already-open text stream."""

    def __init__(self, stream: IO[str], header: Sequence[str]) -> None:
        self._stream = stream
        self._header = list(header)
        self._writer = csv.writer(stream, lineterminator="\n")

    def open(self) -> None:
        self._writer.writerow(self._header)
        self._stream.flush()

    def write(self, row: CsvRow) -> None:
        self._writer.writerow(row.cells())
        self._stream.flush()

    def close(self) -> None:
        self._stream.flush()

    def __enter__(self) -> StreamSink:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class CsvFileSink:
    """SinkPort appending to a CSV file on disk.

    Each row is flushed as soon as it is written, so an interrupted sweep
    keeps every completed measurement.
    """

    def __init__(self, path: Path, header: Sequence[str]) -> None:
        self.path = path
        self._header = list(header)
        self._file: IO[str] | None = None
        self._writer: Any = None

    def open(self) -> None:
        """Create the file if needed, open it for append and write the header.

        Raises:
            ConfigError: The destination cannot be created or opened.
        """
        try:
            self._file = open(self.path, "a", newline="", encoding="utf-8")  # noqa: SIM115
        except OSError as exc:
            raise ConfigError(f"Cannot open '{self.path}' for append: {exc}") from exc
        self._writer = csv.writer(self._file, lineterminator="\n")
        self._writer.writerow(self._header)
        self._file.flush()
        logger.info("Appending results to %s", self.path)

    def write(self, row: CsvRow) -> None:
        if self._file is None or self._writer is None:
            raise RuntimeError("CsvFileSink.write() called before open()")
        self._writer.writerow(row.cells())
        self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            self._writer = None

    def __enter__(self) -> CsvFileSink:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
