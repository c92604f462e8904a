# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Process execution seam shared by the git, target and container helpers.

Everything that shells out goes through a ``Runner`` with the signature of
``subprocess.run``. The default is ``subprocess.run`` itself; tests pass a
fake or patch ``subprocess.run``.
"""

import os
import subprocess
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

Runner = Callable[..., subprocess.CompletedProcess]


def run_command(
    argv: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    capture: bool = True,
    runner: Runner | None = None,
) -> subprocess.CompletedProcess:
    """Run *argv* without a shell and return the completed process.

    With *capture* the output is collected as text, otherwise it streams to
    the terminal. *env* entries are layered over ``os.environ``. Never raises
    on a non-zero exit; ``OSError`` from starting the process (e.g.
    ``FileNotFoundError`` for a missing executable) propagates to the caller.
    """
    run = runner or subprocess.run
    kwargs: dict = {"check": False}
    if cwd is not None:
        kwargs["cwd"] = str(cwd)
    if env:
        kwargs["env"] = {**os.environ, **env}
    if capture:
        kwargs["capture_output"] = True
        kwargs["text"] = True
    return run(list(argv), **kwargs)


def describe_failure(result: subprocess.CompletedProcess) -> str:
    """Return a one-line reason for a failed process (stderr, else the exit code)."""
    stderr = (getattr(result, "stderr", None) or "").strip()
    if stderr:
        return stderr.splitlines()[-1]
    return f"exit code {result.returncode}"
