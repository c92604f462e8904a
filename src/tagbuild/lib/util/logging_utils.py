# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Operator-facing log sinks.

The resolver and the driver never print directly; they receive a ``Log``
and call ``info``/``warn``/``error`` on it. ``ConsoleLog`` is what the CLI
passes in, ``NullLog`` and ``RecordingLog`` keep tests quiet.
"""

import sys
import time
from typing import Protocol, TextIO

from .._util.ansi import red, supports_color, yellow


class Log(Protocol):
    def info(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


def _log_debug(message: str) -> None:
    """Append a timestamped line to ``state_root()/tagbuild.log``.

    Best-effort: any IO error is ignored so this never affects callers.
    """
    try:
        from ..core.paths import state_root

        log_path = state_root() / "tagbuild.log"
        log_path.parent.mkdir(parents=True, exist_ok=True)
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(f"[{timestamp}] {message}\n")
    except Exception:
        pass


class ConsoleLog:
    """Print info to stdout, warnings and errors to stderr.

    Warnings are yellow and errors red when the stream supports color.
    Each line is also mirrored to the debug log unless *debug_file* is False.
    """

    def __init__(
        self,
        out: TextIO | None = None,
        err: TextIO | None = None,
        *,
        debug_file: bool = True,
    ) -> None:
        self._out = out if out is not None else sys.stdout
        self._err = err if err is not None else sys.stderr
        self._debug_file = debug_file

    def _emit(self, level: str, message: str, stream: TextIO, paint) -> None:
        text = paint(message, supports_color(stream)) if paint else message
        print(text, file=stream)
        if self._debug_file:
            _log_debug(f"{level}: {message}")

    def info(self, message: str) -> None:
        self._emit("INFO", message, self._out, None)

    def warn(self, message: str) -> None:
        self._emit("WARN", message, self._err, yellow)

    def error(self, message: str) -> None:
        self._emit("ERROR", message, self._err, red)


class NullLog:
    """Discard everything."""

    def info(self, message: str) -> None:
        pass

    def warn(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass


class RecordingLog:
    """Collect ``(level, message)`` pairs in memory."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.records.append(("info", message))

    def warn(self, message: str) -> None:
        self.records.append(("warn", message))

    def error(self, message: str) -> None:
        self.records.append(("error", message))

    def messages(self, level: str) -> list[str]:
        return [m for lvl, m in self.records if lvl == level]
