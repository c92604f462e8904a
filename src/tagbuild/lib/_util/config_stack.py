# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Layered option resolution for executor settings.

The ``tag-and-build`` options of a project are assembled from several
layers, lowest priority first:

- ``global``: the ``tag_and_build:`` section of the global config file
- ``project``: the ``tag-and-build:`` block in ``workspace.yml``
- ``cli``: flags given on the command line

Merging rules (see :func:`deep_merge`):

* Dicts are merged recursively.
* A ``None`` value in a higher layer removes the key.
* Lists replace the lower list unless they contain ``"_inherit"``, in which
  case the lower list is spliced in at that position.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

_INHERIT = "_inherit"


def deep_merge(base: dict, override: dict) -> dict:
    """Merge *override* into *base*, returning a new dict."""
    merged: dict = {}
    for key in list(base) + [k for k in override if k not in base]:
        if key not in override:
            merged[key] = base[key]
            continue
        ov = override[key]
        if ov is None:
            continue
        bv = base.get(key)
        if isinstance(ov, dict) and isinstance(bv, dict):
            merged[key] = deep_merge(bv, {k: v for k, v in ov.items() if k != _INHERIT})
        elif isinstance(ov, list):
            merged[key] = _merge_lists(bv if isinstance(bv, list) else [], ov)
        else:
            merged[key] = ov
    return merged


def _merge_lists(base: list, override: list) -> list:
    if _INHERIT not in override:
        return list(override)
    result: list = []
    for item in override:
        if item == _INHERIT:
            result.extend(base)
        else:
            result.append(item)
    return result


@dataclass(frozen=True)
class ConfigScope:
    """A single layer in the config stack."""

    level: str
    source: Path | None
    data: dict


class ConfigStack:
    """Ordered collection of config scopes, lowest-priority first."""

    def __init__(self) -> None:
        self._scopes: list[ConfigScope] = []

    def push(self, scope: ConfigScope) -> None:
        self._scopes.append(scope)

    def resolve(self) -> dict:
        """Deep-merge all scopes in order and return the result."""
        result: dict = {}
        for scope in self._scopes:
            result = deep_merge(result, scope.data)
        return result

    def provenance(self) -> dict[str, str]:
        """Map each resolved top-level key to the level that set it last."""
        origin: dict[str, str] = {}
        for scope in self._scopes:
            for key, value in scope.data.items():
                if value is None:
                    origin.pop(key, None)
                else:
                    origin[key] = scope.level
        return origin

    @property
    def scopes(self) -> list[ConfigScope]:
        return list(self._scopes)

