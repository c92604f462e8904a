# SPDX-FileCopyrightText: 2026 Jiri Vyskocil
# SPDX-License-Identifier: Apache-2.0

"""Release version resolution for an app.

The version an image carries comes from one of two places, tried in order:

  1. MANIFEST - the ``version`` field of the project's JSON manifest
     (``package.json`` by default). Any non-empty string is accepted as-is.

  2. REVISION TAG - a git tag pointing at HEAD named
     ``<app_name>/<tag_prefix><version>``, e.g. ``frontend/v1.2.3``. The
     first matching tag in listing order wins.

The two sources fail differently. A manifest that cannot be read is only a
warning and counts as "no version"; the tag lookup is the last resort, so a
failure to list tags is fatal and propagates as ``RevisionTagQueryFailure``.
"""

import enum
import json
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..util.logging_utils import Log
from .errors import ManifestReadFailure, NoVersionFound

DEFAULT_TAG_PREFIX = "v"


class VersionSource(enum.Enum):
    MANIFEST = "manifest"
    REVISION_TAG = "revision-tag"


@dataclass(frozen=True)
class ResolutionConfig:
    app_name: str
    tag_prefix: str = DEFAULT_TAG_PREFIX
    generate_major_minor: bool = False
    additional_tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class ResolvedVersion:
    version: str
    major: str
    minor_compound: str  # "<major>.<minor>"
    source: VersionSource

    @classmethod
    def from_string(cls, version: str, source: VersionSource) -> "ResolvedVersion":
        """Split *version* on dots; the first two segments give major and major.minor."""
        segments = version.split(".")
        return cls(
            version=version,
            major=segments[0],
            minor_compound=".".join(segments[:2]),
            source=source,
        )


def tag_pattern(config: ResolutionConfig) -> re.Pattern[str]:
    """Return the regex matching ``<app_name>/<tag_prefix><rest>`` revision tags."""
    prefix = config.tag_prefix or DEFAULT_TAG_PREFIX
    return re.compile(rf"^{re.escape(config.app_name)}/{re.escape(prefix)}(.*)$")


# ---------- Strategies ----------


def _from_manifest(
    manifest_version: str | None, config: ResolutionConfig, log: Log
) -> ResolvedVersion | None:
    if not manifest_version:
        return None
    log.info(f"Found version {manifest_version} in manifest")
    return ResolvedVersion.from_string(manifest_version, VersionSource.MANIFEST)


def _from_revision_tags(
    list_tags: Callable[[], Sequence[str]], config: ResolutionConfig, log: Log
) -> ResolvedVersion | None:
    log.info("Attempting to derive version from Git tags...")
    # RevisionTagQueryFailure propagates
    tags = list_tags()
    pattern = tag_pattern(config)

    match = next((m for m in map(pattern.match, tags) if m), None)
    if match is None:
        log.warn(f"Warning: No relevant Git tags found for {config.app_name}")
        return None

    version = match.group(1)
    if not version:
        raise NoVersionFound(
            f"Could not find Git tag for {config.app_name} matching pattern "
            f"{pattern.pattern}\n"
            "Please ensure your project has been released and a corresponding Git tag "
            f"exists (e.g., {config.app_name}/{config.tag_prefix or DEFAULT_TAG_PREFIX}1.2.3)."
        )
    log.info(f"Extracted version {version} from Git tag {match.group(0)}")
    return ResolvedVersion.from_string(version, VersionSource.REVISION_TAG)


def resolve(
    manifest_version: str | None,
    revision_tags: Sequence[str] | Callable[[], Sequence[str]],
    config: ResolutionConfig,
    log: Log,
) -> ResolvedVersion:
    """Determine the authoritative version for ``config.app_name``.

    Args:
        manifest_version: The manifest's ``version`` value, or None when the
            manifest is absent, unreadable or has no version.
        revision_tags: Tags pointing at HEAD, or a zero-argument callable
            returning them. A callable is only invoked when the manifest
            yields nothing.
        config: App name and tag prefix used for tag matching.
        log: Sink for progress and diagnostic messages.

    Raises:
        NoVersionFound: Neither source yielded a version.
        RevisionTagQueryFailure: Raised by *revision_tags* when it is a
            callable and listing tags failed.
    """
    list_tags = revision_tags if callable(revision_tags) else lambda: revision_tags

    resolved = _from_manifest(manifest_version, config, log)
    if resolved is None:
        resolved = _from_revision_tags(list_tags, config, log)
    if resolved is None:
        raise NoVersionFound(
            f"Could not determine version for '{config.app_name}'. Please ensure your "
            "project has a version set in its manifest or a corresponding Git tag exists."
        )
    return resolved


# ---------- Manifest ----------


def read_manifest_version(path: Path, app_name: str, log: Log) -> str | None:
    """Return the ``version`` field of the JSON manifest at *path*, or None.

    Read and parse errors are downgraded to a warning; the caller falls
    back to git tags.
    """
    try:
        data = _load_manifest(path)
    except ManifestReadFailure as exc:
        log.warn(
            f"Warning: Could not read manifest for '{app_name}' at {path}: {exc}. "
            "Attempting to derive from Git tags."
        )
        return None

    version = data.get("version")
    if isinstance(version, str) and version:
        return version
    if version not in (None, ""):
        log.warn(f"Warning: Ignoring non-string version {version!r} in {path}")
        return None
    log.warn(
        f"Warning: Version is not set in manifest for '{app_name}'. "
        "Attempting to derive from Git tags."
    )
    return None


def _load_manifest(path: Path) -> dict:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestReadFailure(str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise ManifestReadFailure(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestReadFailure("manifest is not a JSON object")
    return data


def resolve_project_version(
    manifest_path: Path,
    list_tags: Callable[[], Sequence[str]],
    config: ResolutionConfig,
    log: Log,
) -> ResolvedVersion:
    """Read the manifest at *manifest_path* and resolve, falling back to *list_tags*."""
    manifest_version = read_manifest_version(manifest_path, config.app_name, log)
    return resolve(manifest_version, list_tags, config, log)
