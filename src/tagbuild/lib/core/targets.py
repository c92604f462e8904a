# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Run a project's named build target."""

from ..containers.runtime import Runner, run_command
from ..util.logging_utils import Log
from .errors import BuildFailure
from .projects import Project, Target, parse_command

DEFAULT_CONFIGURATION = "production"


def effective_target(target: Target, configuration: str | None) -> Target:
    """Return *target* with the named configuration merged over it.

    ``command`` and ``cwd`` are replaced, ``env`` is merged key by key. An
    unknown configuration name leaves the target unchanged.
    """
    overrides = target.configurations.get(configuration or "")
    if not overrides:
        return target
    where = f"target '{target.name}' configuration '{configuration}'"
    command = target.command
    if "command" in overrides:
        command = parse_command(overrides["command"], where)
    return Target(
        name=target.name,
        command=command,
        cwd=overrides.get("cwd", target.cwd),
        env={**target.env, **{str(k): str(v) for k, v in (overrides.get("env") or {}).items()}},
        configurations=target.configurations,
    )


def run_target(
    project: Project,
    target_name: str,
    log: Log,
    *,
    configuration: str | None = DEFAULT_CONFIGURATION,
    runner: Runner | None = None,
) -> None:
    """Run *target_name* of *project* and wait for it to finish.

    Output streams to the terminal. Raises BuildFailure when the target is
    not defined, its executable is missing or cannot be started, or it exits
    non-zero.
    """
    target = project.targets.get(target_name)
    if target is None:
        known = ", ".join(sorted(project.targets)) or "none"
        raise BuildFailure(
            f"Build target '{target_name}' is not defined for '{project.id}' "
            f"(defined targets: {known})"
        )

    target = effective_target(target, configuration)
    cwd = project.root / target.cwd if target.cwd else project.root
    log.info(f"\nRunning build target '{target_name}' for '{project.id}'...")
    log.info(f"$ {' '.join(target.command)}")
    try:
        result = run_command(target.command, cwd=cwd, env=target.env, capture=False, runner=runner)
    except FileNotFoundError:
        raise BuildFailure(
            f"Build target '{target_name}' for '{project.id}' failed: "
            f"{target.command[0]} not found"
        )
    except OSError as exc:
        raise BuildFailure(f"Build target '{target_name}' for '{project.id}' failed: {exc}")
    if result.returncode != 0:
        raise BuildFailure(
            f"Build target '{target_name}' for '{project.id}' failed "
            f"(exit code {result.returncode})"
        )
    log.info(f"Build target '{target_name}' for '{project.id}' completed successfully")
