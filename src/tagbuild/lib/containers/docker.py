# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import shlex
from dataclasses import dataclass, field
from pathlib import Path

from ..core.errors import ContainerBuildFailure
from .runtime import Runner, run_command

DEFAULT_BUILDER = ("docker", "buildx", "build")


@dataclass(frozen=True)
class BuildInvocation:
    """Everything needed to build (and optionally push) one image.

    ``argv()`` renders it as::

        <builder> [--push] -t <tag>... -f <dockerfile> <context> --build-arg K=V...
    """

    tags: tuple[str, ...]
    dockerfile: Path
    context: Path
    build_args: dict[str, str] = field(default_factory=dict)
    push: bool = False
    builder: tuple[str, ...] = DEFAULT_BUILDER

    def argv(self) -> list[str]:
        cmd = list(self.builder)
        if self.push:
            cmd.append("--push")
        for tag in self.tags:
            cmd += ["-t", tag]
        cmd += ["-f", str(self.dockerfile), str(self.context)]
        for k, v in self.build_args.items():
            cmd += ["--build-arg", f"{k}={v}"]
        return cmd

    def display(self) -> str:
        """Shell-quoted command line, for logs only."""
        return shlex.join(self.argv())


def run_container_build(invocation: BuildInvocation, runner: Runner | None = None) -> None:
    """Run the container build, streaming its output to the terminal.

    Raises ContainerBuildFailure when the builder is missing, cannot be
    started or exits non-zero.
    """
    try:
        result = run_command(invocation.argv(), capture=False, runner=runner)
    except FileNotFoundError:
        raise ContainerBuildFailure(f"{invocation.builder[0]} not found; please install it")
    except OSError as exc:
        raise ContainerBuildFailure(f"Could not run {invocation.builder[0]}: {exc}")
    if result.returncode != 0:
        raise ContainerBuildFailure(
            f"{' '.join(invocation.builder)} exited with code {result.returncode}"
        )
