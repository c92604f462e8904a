# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""ANSI color helpers for console output.

Used by :mod:`tagbuild.lib.util.logging_utils` to color warnings and errors
and by the CLI for the ``config`` overview.
"""

import os
import sys
from typing import TextIO


def supports_color(stream: TextIO | None = None) -> bool:
    """Check if *stream* (default: stdout) supports color output.

    NO_COLOR (https://no-color.org/) always wins. FORCE_COLOR (when set and
    not ``"0"``) forces color on even when the stream is not a TTY.
    Otherwise falls back to ``isatty()``.
    """
    if "NO_COLOR" in os.environ:
        return False
    force = os.environ.get("FORCE_COLOR")
    if force is not None and force != "0":
        return True
    stream = stream if stream is not None else sys.stdout
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def color(text: str, code: str, enabled: bool) -> str:
    """Wrap *text* in the ANSI SGR *code* when *enabled* is True."""
    if not enabled:
        return text
    return f"\x1b[{code}m{text}\x1b[0m"


def yellow(text: str, enabled: bool) -> str:
    return color(text, "33", enabled)


def green(text: str, enabled: bool) -> str:
    return color(text, "32", enabled)


def red(text: str, enabled: bool) -> str:
    return color(text, "31", enabled)


def gray(text: str, enabled: bool) -> str:
    return color(text, "90", enabled)


def yes_no(value: bool, enabled: bool) -> str:
    """Return green ``"yes"`` or red ``"no"`` based on *value*."""
    return green("yes", enabled) if value else red("no", enabled)
