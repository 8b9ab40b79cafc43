"""racesweep.console -- human-readable status output.

Usage (any module)::

    from racesweep.console import console

    console.info("Hello")
    console.step(1, 50, "Updating 200,000 out of 1,000,000 leaves...")
    console.panel(raw_output, title="ERROR")

Configuration (call once in ``cli.py:main()``)::

    from racesweep.console import configure

    configure(backend="auto", stream=sys.stderr)  # "rich" | "plain" | "auto"
"""

from __future__ import annotations

import sys
from typing import IO, TYPE_CHECKING

from racesweep.console._plain import PlainBackend

if TYPE_CHECKING:
    from racesweep.console._protocol import ConsoleProtocol

# ---------------------------------------------------------------------------
# Global singleton -- defaults to PlainBackend on stdout
# ---------------------------------------------------------------------------

_backend: ConsoleProtocol = PlainBackend()


def configure(*, backend: str = "auto", stream: IO[str] | None = None) -> None:
    """Select the console backend and the stream it writes to.

    Should be called **once** at startup (in ``cli.py:main()``).

    Args:
        backend: ``"rich"`` -- always use Rich.
                 ``"plain"`` -- always use plain text.
                 ``"auto"`` (default) -- Rich when *stream* is a TTY;
                 plain otherwise.
        stream: Status stream; defaults to standard output. The
                ``sweep-grid`` mode passes standard error so that CSV rows
                own standard output.
    """
    global _backend  # noqa: PLW0603

    out = stream if stream is not None else sys.stdout

    if backend == "auto":
        isatty = getattr(out, "isatty", None)
        backend = "rich" if isatty is not None and isatty() else "plain"

    if backend == "rich":
        from racesweep.console._rich import RichBackend

        _backend = RichBackend(out)
    else:
        _backend = PlainBackend(out)


# ---------------------------------------------------------------------------
# Proxy object -- ``from racesweep.console import console``
# ---------------------------------------------------------------------------


class _ConsoleProxy:
    """Transparent proxy that delegates to the current ``_backend``.

    This lets callers import ``console`` once at module level and
    automatically pick up any later ``configure()`` call.
    """

    def __getattr__(self, name: str) -> object:
        return getattr(_backend, name)


console: ConsoleProtocol = _ConsoleProxy()  # type: ignore[assignment]
