# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Resolve version, build, tag and (optionally) push a container image.

Steps run strictly in order and each one waits for the previous:

  1. look up the project in the workspace
  2. resolve the release version (manifest, then git tags)
  3. run the project's build target (``production`` configuration)
  4. derive the image tags from the version and the HEAD revision
  5. run the container build with those tags and build args

Any failure logs an error and returns False before the next step starts.
"""

from dataclasses import dataclass

from .containers.docker import BuildInvocation, run_container_build
from .containers.git import head_revision, list_tags_at_head
from .containers.runtime import Runner
from .core.errors import TagBuildError
from .core.images import build_tags, short_sha
from .core.options import TagAndBuildOptions, resolve_path
from .core.projects import Workspace
from .core.targets import run_target
from .core.version import ResolvedVersion, resolve_project_version
from .util.logging_utils import Log


@dataclass(frozen=True)
class TagPlan:
    """What a build would produce, before anything is built."""

    resolved: ResolvedVersion
    revision: str
    tags: list[str]
    invocation: BuildInvocation

    @property
    def short_sha(self) -> str:
        return short_sha(self.revision)


def _plan(
    options: TagAndBuildOptions,
    workspace: Workspace,
    log: Log,
    runner: Runner | None,
    *,
    run_build: bool,
) -> TagPlan:
    project = workspace.project(options.app_name)
    config = options.resolution_config()

    resolved = resolve_project_version(
        project.root / options.manifest,
        lambda: list_tags_at_head(workspace.root, runner=runner),
        config,
        log,
    )

    if run_build:
        run_target(project, options.build_target, log, runner=runner)

    revision = head_revision(workspace.root, runner=runner)
    sha = short_sha(revision)
    tags = build_tags(resolved, options.docker_repository, options.app_name, config, sha)
    log.info(f"\nGenerated Docker Tags: {', '.join(tags)}")

    invocation = BuildInvocation(
        tags=tuple(tags),
        dockerfile=resolve_path(project.root, options.dockerfile or "Dockerfile"),
        context=resolve_path(project.root, options.context or "."),
        build_args={"APP_VERSION": resolved.version, "BUILD_SHA": sha},
        push=options.push,
        builder=options.builder,
    )
    return TagPlan(resolved=resolved, revision=revision, tags=tags, invocation=invocation)


def plan_tags(
    options: TagAndBuildOptions,
    workspace: Workspace,
    log: Log,
    runner: Runner | None = None,
) -> TagPlan:
    """Resolve the version and tags without running the build or the container build.

    Raises TagBuildError subclasses on failure.
    """
    return _plan(options, workspace, log, runner, run_build=False)


def tag_and_build(
    options: TagAndBuildOptions,
    workspace: Workspace,
    log: Log,
    *,
    runner: Runner | None = None,
    dry_run: bool = False,
) -> bool:
    """Run the whole pipeline for ``options.app_name``. Returns True on success.

    With *dry_run* the build target and the container build are skipped and
    only the planned command is logged.
    """
    log.info(f"\n---Starting Docker Image Tag & Build executor for {options.app_name}---\n")
    log.info(f"Executor Options: {options.as_dict()}")

    try:
        plan = _plan(options, workspace, log, runner, run_build=not dry_run)
        log.info(f"\nExecuting Docker build command:\n{plan.invocation.display()}\n")
        if dry_run:
            log.info("Dry run: skipping Docker build")
            return True
        run_container_build(plan.invocation, runner=runner)
    except TagBuildError as exc:
        log.error(f"\nError: {exc}")
        return False

    action = "built, tagged and pushed" if options.push else "built and tagged"
    log.info(f"\n--- Successfully {action} Docker image(s) for '{options.app_name}' ---")
    return True
