# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Executor options for ``tag-and-build``.

Options are layered (global config < workspace.yml < CLI) with
:class:`~tagbuild.lib._util.config_stack.ConfigStack` and then validated into
a frozen :class:`TagAndBuildOptions`.
"""

import re
import shlex
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from .._util.config_stack import ConfigScope, ConfigStack
from ..containers.docker import DEFAULT_BUILDER
from .config import get_global_section, global_config_path
from .errors import WorkspaceConfigError
from .projects import Project
from .version import DEFAULT_TAG_PREFIX, ResolutionConfig

DEFAULT_MANIFEST = "package.json"


@dataclass(frozen=True)
class TagAndBuildOptions:
    app_name: str
    docker_repository: str
    build_target: str
    dockerfile: str = "Dockerfile"
    context: str = "."
    push: bool = False
    additional_tags: tuple[str, ...] = ()
    generate_major_minor: bool = False
    tag_prefix: str = DEFAULT_TAG_PREFIX
    manifest: str = DEFAULT_MANIFEST
    builder: tuple[str, ...] = DEFAULT_BUILDER

    def resolution_config(self) -> ResolutionConfig:
        return ResolutionConfig(
            app_name=self.app_name,
            tag_prefix=self.tag_prefix or DEFAULT_TAG_PREFIX,
            generate_major_minor=self.generate_major_minor,
            additional_tags=self.additional_tags,
        )

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["additional_tags"] = list(self.additional_tags)
        data["builder"] = list(self.builder)
        return data


# ---------- Parsing ----------

_REQUIRED = ("app_name", "docker_repository", "build_target")
_KNOWN = frozenset(TagAndBuildOptions.__dataclass_fields__)


def _snake(key: str) -> str:
    """``dockerRepository`` / ``docker-repository`` -> ``docker_repository``."""
    key = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", key)
    return key.replace("-", "_").lower()


def normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Accept camelCase and kebab-case spellings of option names."""
    return {_snake(str(k)): v for k, v in data.items()}


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "yes", "1", "false", "no", "0"):
        return value.lower() in ("true", "yes", "1")
    raise WorkspaceConfigError(f"Option '{key}' must be a boolean, got {value!r}")


def _as_str(key: str, value: Any) -> str:
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    raise WorkspaceConfigError(f"Option '{key}' must be a string, got {value!r}")


def options_from_mapping(data: dict[str, Any]) -> TagAndBuildOptions:
    """Validate a merged options mapping.

    Raises WorkspaceConfigError for unknown keys, missing required keys or
    values of the wrong type.
    """
    data = normalize_keys(data)
    unknown = sorted(set(data) - _KNOWN)
    if unknown:
        raise WorkspaceConfigError(f"Unknown tag-and-build option(s): {', '.join(unknown)}")
    missing = [k for k in _REQUIRED if not data.get(k)]
    if missing:
        raise WorkspaceConfigError(
            f"Missing required tag-and-build option(s): {', '.join(missing)}"
        )

    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key in ("push", "generate_major_minor"):
            kwargs[key] = _as_bool(key, value)
        elif key == "additional_tags":
            if not isinstance(value, list):
                raise WorkspaceConfigError("Option 'additional_tags' must be a list of strings")
            kwargs[key] = tuple(_as_str(key, v) for v in value)
        elif key == "builder":
            parts = shlex.split(value) if isinstance(value, str) else value
            if not isinstance(parts, list) or not parts:
                raise WorkspaceConfigError("Option 'builder' must be a command string or list")
            kwargs[key] = tuple(_as_str(key, p) for p in parts)
        else:
            kwargs[key] = _as_str(key, value)
    return TagAndBuildOptions(**kwargs)


def _config_layer(data: dict[str, Any], where: str) -> dict[str, Any]:
    data = normalize_keys(data)
    if "app_name" in data:
        raise WorkspaceConfigError(
            f"'app_name' cannot be set in {where}; it is always the project id"
        )
    return data


def options_stack(project: Project, cli_overrides: dict[str, Any] | None = None) -> ConfigStack:
    """Build the option layers for *project*, lowest priority first.

    ``app_name`` is the project id. Only the CLI layer may set it (to the
    project it was asked for); the config file layers may not.
    """
    stack = ConfigStack()
    stack.push(ConfigScope("default", None, {"app_name": project.id}))
    gpath = global_config_path()
    stack.push(
        ConfigScope(
            "global",
            gpath,
            _config_layer(get_global_section("tag_and_build"), f"{gpath} (tag_and_build)"),
        )
    )
    stack.push(
        ConfigScope(
            "project",
            None,
            _config_layer(project.tag_and_build, f"the tag-and-build block of '{project.id}'"),
        )
    )
    if cli_overrides:
        stack.push(ConfigScope("cli", None, normalize_keys(cli_overrides)))
    return stack


def load_options(
    project: Project, cli_overrides: dict[str, Any] | None = None
) -> TagAndBuildOptions:
    return options_from_mapping(options_stack(project, cli_overrides).resolve())


def resolve_path(base: Path, value: str) -> Path:
    """Resolve an option path relative to *base* (the project root) to an absolute path."""
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base / path
    return path.resolve()
