#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import argparse
import json
import os
import sys
from pathlib import Path

import argcomplete

from .. import __version__
from ..lib._util.ansi import gray as _gray, supports_color as _supports_color, yes_no as _yes_no
from ..lib.core.config import (
    global_config_path as _global_config_path,
    global_config_search_paths as _global_config_search_paths,
)
from ..lib.core.errors import TagBuildError
from ..lib.core.options import load_options, options_stack
from ..lib.core.paths import state_root as _state_root
from ..lib.core.projects import Workspace, load_workspace
from ..lib.tag_and_build import plan_tags, tag_and_build
from ..lib.util.logging_utils import ConsoleLog


def _complete_project_ids(prefix: str, parsed_args, **kwargs):  # pragma: no cover - shell integration
    try:
        workspace_dir = getattr(parsed_args, "workspace", None)
        ids = list(load_workspace(Path(workspace_dir) if workspace_dir else None).projects)
    except Exception:
        return []
    return [i for i in ids if i.startswith(prefix)]


def _load_workspace(args) -> Workspace:
    try:
        return load_workspace(Path(args.workspace) if args.workspace else None)
    except TagBuildError as exc:
        raise SystemExit(f"Error: {exc}")


def _cli_overrides(args) -> dict:
    """Collect option overrides from flags; unset flags are left out."""
    overrides: dict = {}
    for key in ("docker_repository", "build_target", "dockerfile", "context", "tag_prefix"):
        value = getattr(args, key, None)
        if value is not None:
            overrides[key] = value
    if getattr(args, "push", None) is not None:
        overrides["push"] = args.push
    if getattr(args, "generate_major_minor", None) is not None:
        overrides["generate_major_minor"] = args.generate_major_minor
    if getattr(args, "tags", None):
        overrides["additional_tags"] = ["_inherit", *args.tags]
    return overrides


def _add_option_flags(p: argparse.ArgumentParser) -> None:
    _a = p.add_argument("app_name", help="Project ID in workspace.yml")
    _a.completer = _complete_project_ids  # type: ignore[attr-defined]
    p.add_argument("--docker-repository", help="Registry/repository path, e.g. ghcr.io/acme")
    p.add_argument("--build-target", help="Target to run before the image build")
    p.add_argument("--dockerfile", help="Dockerfile path relative to the project root")
    p.add_argument("--context", help="Build context relative to the project root")
    p.add_argument("--tag-prefix", help="Prefix between '<app>/' and the version in git tags")
    p.add_argument(
        "--tag",
        dest="tags",
        action="append",
        metavar="TAG",
        help="Additional image tag (repeatable, appended after configured ones)",
    )
    p.add_argument(
        "--generate-major-minor",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Also tag <major>.<minor> and <major>",
    )


def _cmd_run(args) -> int:
    workspace = _load_workspace(args)
    log = ConsoleLog()
    try:
        options = load_options(workspace.project(args.app_name), _cli_overrides(args))
    except TagBuildError as exc:
        log.error(f"Error: {exc}")
        return 1
    ok = tag_and_build(options, workspace, log, dry_run=args.dry_run)
    return 0 if ok else 1


def _cmd_tags(args) -> int:
    workspace = _load_workspace(args)
    # Progress goes to stderr so stdout carries only the result
    log = ConsoleLog(out=sys.stderr)
    try:
        options = load_options(workspace.project(args.app_name), _cli_overrides(args))
        plan = plan_tags(options, workspace, log)
    except TagBuildError as exc:
        log.error(f"Error: {exc}")
        return 1
    if args.json:
        print(
            json.dumps(
                {
                    "version": plan.resolved.version,
                    "source": plan.resolved.source.value,
                    "sha": plan.short_sha,
                    "tags": plan.tags,
                    "command": plan.invocation.argv(),
                },
                indent=2,
            )
        )
    else:
        for tag in plan.tags:
            print(tag)
    return 0


def _cmd_projects(args) -> int:
    workspace = _load_workspace(args)
    if not workspace.projects:
        print(f"No projects found in {workspace.config_path}")
        return 0
    print(f"Projects in {workspace.config_path}:")
    for p in workspace.projects.values():
        targets = ", ".join(sorted(p.targets)) or "-"
        marker = " [tag-and-build]" if p.tag_and_build else ""
        print(f"- {p.id}{marker} root={p.root} targets={targets}")
    return 0


def _cmd_config(args) -> int:
    """Show config search paths and, for an app, the resolved options with provenance."""
    color_enabled = _supports_color()
    print("Configuration (read):")
    gcfg = _global_config_path()
    print(
        f"- Global config file: {_gray(str(gcfg), color_enabled)} "
        f"(exists: {_yes_no(gcfg.is_file(), color_enabled)})"
    )
    print("- Global config search order:")
    for p in _global_config_search_paths():
        print(f"  • {_gray(str(p), color_enabled)} (exists: {_yes_no(p.is_file(), color_enabled)})")
    print(f"- Debug log: {_gray(str(_state_root() / 'tagbuild.log'), color_enabled)}")

    print("Environment overrides (if set):")
    for var in (
        "TAGBUILD_WORKSPACE",
        "TAGBUILD_CONFIG_FILE",
        "TAGBUILD_CONFIG_DIR",
        "TAGBUILD_STATE_DIR",
        "XDG_CONFIG_HOME",
    ):
        val = os.environ.get(var)
        if val is not None:
            print(f"- {var}={_gray(val, color_enabled)}")

    if not args.app_name:
        return 0

    workspace = _load_workspace(args)
    try:
        project = workspace.project(args.app_name)
        stack = options_stack(project)
        resolved = stack.resolve()
    except TagBuildError as exc:
        raise SystemExit(f"Error: {exc}")
    print(f"Resolved tag-and-build options for '{args.app_name}':")
    origin = stack.provenance()
    for key in sorted(resolved):
        print(f"  {key} = {resolved[key]!r} [{_gray(origin.get(key, '?'), color_enabled)}]")
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="tagbuild",
        description="tagbuild: resolve an app's release version, build it and tag the image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Version sources (first wins):\n"
            "  1. \"version\" in the project's manifest (package.json)\n"
            "  2. git tag at HEAD named <app>/<tag_prefix><version>, e.g. frontend/v1.2.3\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"tagbuild {__version__}")
    parser.add_argument(
        "-w",
        "--workspace",
        help="Workspace root containing workspace.yml (default: search upward from cwd)",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run", help="Resolve version, run the build target, build the image")
    _add_option_flags(p_run)
    p_run.add_argument(
        "--push",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Push the image after building",
    )
    p_run.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the container build command without building anything",
    )

    p_tags = sub.add_parser("tags", help="Print the image tags that 'run' would apply")
    _add_option_flags(p_tags)
    p_tags.add_argument("--json", action="store_true", help="Print version, tags and command as JSON")

    sub.add_parser("projects", help="List projects in the workspace")

    p_config = sub.add_parser("config", help="Show configuration paths and resolved options")
    _a = p_config.add_argument("app_name", nargs="?", help="Show resolved options for this app")
    _a.completer = _complete_project_ids  # type: ignore[attr-defined]

    argcomplete.autocomplete(parser)
    args = parser.parse_args(argv)

    handlers = {
        "run": _cmd_run,
        "tags": _cmd_tags,
        "projects": _cmd_projects,
        "config": _cmd_config,
    }
    raise SystemExit(handlers[args.cmd](args))


if __name__ == "__main__":
    main()
