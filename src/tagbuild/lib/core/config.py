# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import os
import sys
from pathlib import Path
from typing import Any

import yaml  # pip install pyyaml

from .errors import WorkspaceConfigError
from .paths import config_root

WORKSPACE_FILE = "workspace.yml"

# ---------- Global config ----------


def global_config_search_paths() -> list[Path]:
    """Return the ordered list of paths that will be checked for global config.

    - If TAGBUILD_CONFIG_FILE is set, only that single path is considered.
    - Otherwise, check in order:
        1) <config_root()>/config.yml (TAGBUILD_CONFIG_DIR or the user config dir)
        2) sys.prefix/etc/tagbuild/config.yml
        3) /etc/tagbuild/config.yml
    """
    env_file = os.environ.get("TAGBUILD_CONFIG_FILE")
    if env_file:
        return [Path(env_file).expanduser().resolve()]

    user_cfg = config_root() / "config.yml"
    sp_cfg = Path(sys.prefix) / "etc" / "tagbuild" / "config.yml"
    etc_cfg = Path("/etc/tagbuild/config.yml")
    return [user_cfg, sp_cfg, etc_cfg]


def global_config_path() -> Path:
    """Global config file path.

    First existing candidate wins. An explicit TAGBUILD_CONFIG_FILE is
    returned even if missing so the user sees where it was looked for.
    If none exist, return the last candidate.
    """
    candidates = global_config_search_paths()
    if len(candidates) == 1:
        return candidates[0]

    for c in candidates:
        if c.is_file():
            return c.resolve()
    return candidates[-1]


def load_global_config() -> dict[str, Any]:
    cfg_path = global_config_path()
    if not cfg_path.is_file():
        return {}
    try:
        data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise WorkspaceConfigError(f"Failed to parse global config {cfg_path}: {exc}")
    if not isinstance(data, dict):
        raise WorkspaceConfigError(f"Global config {cfg_path} must be a mapping")
    return data


def get_global_section(key: str) -> dict[str, Any]:
    """Return a top-level section from the global config, defaulting to ``{}``.

    Non-mapping values (e.g. ``tag_and_build: "oops"``) are treated as empty.
    """
    value = load_global_config().get(key, {})
    if not isinstance(value, dict):
        return {}
    return value or {}


# ---------- Workspace root ----------


def find_workspace_root(start: Path | None = None) -> Path:
    """Locate the workspace root.

    Order:
    - TAGBUILD_WORKSPACE, if set (must contain workspace.yml).
    - The nearest ancestor of *start* (default: cwd) containing workspace.yml.

    Raises WorkspaceConfigError when no workspace is found.
    """
    env = os.environ.get("TAGBUILD_WORKSPACE")
    if env:
        root = Path(env).expanduser().resolve()
        if not (root / WORKSPACE_FILE).is_file():
            raise WorkspaceConfigError(f"TAGBUILD_WORKSPACE={env} has no {WORKSPACE_FILE}")
        return root

    here = (start or Path.cwd()).resolve()
    for candidate in (here, *here.parents):
        if (candidate / WORKSPACE_FILE).is_file():
            return candidate
    raise WorkspaceConfigError(
        f"No {WORKSPACE_FILE} found in {here} or any parent directory "
        "(use --workspace or TAGBUILD_WORKSPACE)"
    )
