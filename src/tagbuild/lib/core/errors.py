# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Failure types raised by the resolver, the workspace registry and the driver.

Every fatal condition is a :class:`TagBuildError`; the driver turns it into
a logged error and a ``False`` result. :class:`ManifestReadFailure` is the
only one that callers downgrade to a warning.
"""


class TagBuildError(Exception):
    """Base class for all tagbuild failures."""


class WorkspaceConfigError(TagBuildError):
    """workspace.yml or the global config is missing, unreadable or invalid."""


class MissingProjectConfig(TagBuildError):
    """The requested app is not registered in the workspace."""


class ManifestReadFailure(TagBuildError):
    """The project manifest could not be read or parsed."""


class NoVersionFound(TagBuildError):
    """Neither the manifest nor a revision tag yielded a version."""


class RevisionTagQueryFailure(TagBuildError):
    """Listing the tags that point at HEAD failed."""


class RevisionQueryFailure(TagBuildError):
    """Resolving the current revision identifier failed."""


class BuildFailure(TagBuildError):
    """The project's build target did not succeed."""


class ContainerBuildFailure(TagBuildError):
    """The container build (or push) did not succeed."""
