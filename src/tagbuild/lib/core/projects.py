# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import re
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml  # pip install pyyaml

from .config import WORKSPACE_FILE, find_workspace_root
from .errors import MissingProjectConfig, WorkspaceConfigError

# ---------- Workspace model ----------


@dataclass
class Target:
    name: str
    command: list[str]
    # Relative to the project root; None runs in the project root itself
    cwd: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    # Named overrides (e.g. "production") merged over command/cwd/env
    configurations: dict[str, dict[str, Any]] = field(default_factory=dict)


@dataclass
class Project:
    id: str
    root: Path
    targets: dict[str, Target] = field(default_factory=dict)
    # Raw "tag-and-build:" block; see tagbuild.lib.core.options
    tag_and_build: dict[str, Any] = field(default_factory=dict)


@dataclass
class Workspace:
    root: Path
    projects: dict[str, Project]

    @property
    def config_path(self) -> Path:
        return self.root / WORKSPACE_FILE

    def project(self, app_name: str) -> Project:
        """Return the project registered as *app_name*.

        Raises MissingProjectConfig if the workspace does not know it.
        """
        try:
            return self.projects[app_name]
        except KeyError:
            known = ", ".join(sorted(self.projects)) or "none"
            raise MissingProjectConfig(
                f"Project configuration for '{app_name}' not found in {self.config_path} "
                f"(known projects: {known})"
            )


# ---------- Parsing ----------


def parse_command(value: Any, where: str) -> list[str]:
    """Accept a command as a shell-like string or a list of arguments."""
    if isinstance(value, str) and value.strip():
        return shlex.split(value)
    if isinstance(value, list) and value and all(isinstance(v, str) for v in value):
        return list(value)
    raise WorkspaceConfigError(f"{where}: 'command' must be a non-empty string or list")


def _parse_target(project_id: str, name: str, cfg: Any) -> Target:
    where = f"project '{project_id}' target '{name}'"
    if isinstance(cfg, (str, list)):
        return Target(name=name, command=parse_command(cfg, where))
    if not isinstance(cfg, dict):
        raise WorkspaceConfigError(f"{where}: expected a mapping")

    env = cfg.get("env", {}) or {}
    if not isinstance(env, dict):
        raise WorkspaceConfigError(f"{where}: 'env' must be a mapping")
    configurations = cfg.get("configurations", {}) or {}
    if not isinstance(configurations, dict) or not all(
        isinstance(c, dict) for c in configurations.values()
    ):
        raise WorkspaceConfigError(f"{where}: 'configurations' must map names to mappings")

    return Target(
        name=name,
        command=parse_command(cfg.get("command"), where),
        cwd=cfg.get("cwd"),
        env={str(k): str(v) for k, v in env.items()},
        configurations=configurations,
    )


def _parse_project(workspace_root: Path, project_id: str, cfg: Any) -> Project:
    if not re.fullmatch(r"[A-Za-z0-9][A-Za-z0-9._-]*", project_id):
        raise WorkspaceConfigError(f"Invalid project id '{project_id}' in {WORKSPACE_FILE}")
    if not isinstance(cfg, dict):
        raise WorkspaceConfigError(f"Project '{project_id}' must be a mapping")

    root = Path(str(cfg.get("root", project_id))).expanduser()
    if not root.is_absolute():
        root = workspace_root / root

    targets_cfg = cfg.get("targets", {}) or {}
    if not isinstance(targets_cfg, dict):
        raise WorkspaceConfigError(f"Project '{project_id}': 'targets' must be a mapping")
    targets = {
        str(name): _parse_target(project_id, str(name), tcfg) for name, tcfg in targets_cfg.items()
    }

    tab_cfg = cfg.get("tag-and-build", {}) or {}
    if not isinstance(tab_cfg, dict):
        raise WorkspaceConfigError(f"Project '{project_id}': 'tag-and-build' must be a mapping")

    return Project(id=project_id, root=root.resolve(), targets=targets, tag_and_build=tab_cfg)


def load_workspace(root: Path | None = None) -> Workspace:
    """Load ``workspace.yml`` from *root* (or the discovered workspace root).

    Raises WorkspaceConfigError if the file is missing or malformed.
    """
    root = (root or find_workspace_root()).resolve()
    cfg_path = root / WORKSPACE_FILE
    if not cfg_path.is_file():
        raise WorkspaceConfigError(f"Missing {WORKSPACE_FILE} in {root}")
    try:
        cfg = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise WorkspaceConfigError(f"Failed to parse {cfg_path}: {exc}")
    if not isinstance(cfg, dict):
        raise WorkspaceConfigError(f"{cfg_path} must be a mapping")

    projects_cfg = cfg.get("projects", {}) or {}
    if not isinstance(projects_cfg, dict):
        raise WorkspaceConfigError(f"{cfg_path}: 'projects' must be a mapping")

    projects = {
        str(pid): _parse_project(root, str(pid), pcfg) for pid, pcfg in projects_cfg.items()
    }
    return Workspace(root=root, projects=projects)
