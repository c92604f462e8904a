# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Container image tag conventions for released apps.

For ``repository=registry.example.com/team``, ``app_name=frontend`` and
version ``1.2.3`` the full tag set is, in order::

    registry.example.com/team/frontend:1.2.3
    registry.example.com/team/frontend:1.2      (generate_major_minor)
    registry.example.com/team/frontend:1        (generate_major_minor)
    registry.example.com/team/frontend:<extra>  (each of additional_tags)
    registry.example.com/team/frontend:sha-abc1234
"""

from .version import ResolutionConfig, ResolvedVersion

SHORT_SHA_LENGTH = 7


def short_sha(revision: str) -> str:
    """Return the first 7 characters of a revision identifier."""
    return revision.strip()[:SHORT_SHA_LENGTH]


def image_name(repository: str, app_name: str) -> str:
    """Return ``<repository>/<app_name>`` (a trailing slash on *repository* is dropped)."""
    return f"{repository.rstrip('/')}/{app_name}"


def build_tags(
    resolved: ResolvedVersion,
    repository: str,
    app_name: str,
    config: ResolutionConfig,
    revision_sha_short: str,
) -> list[str]:
    """Return the ordered image references to tag the build with.

    The plain version tag is always first and the ``sha-`` tag always last.
    Derived major/minor labels are skipped when they would repeat an earlier
    label. ``additional_tags`` are appended verbatim and not de-duplicated.
    """
    base = image_name(repository, app_name)
    labels = [resolved.version]

    if config.generate_major_minor:
        if resolved.minor_compound != resolved.version:
            labels.append(resolved.minor_compound)
        if resolved.major not in (resolved.version, resolved.minor_compound):
            labels.append(resolved.major)

    labels.extend(config.additional_tags)
    labels.append(f"sha-{revision_sha_short}")
    return [f"{base}:{label}" for label in labels]
