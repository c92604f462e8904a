# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""tagbuild package.

Modules:
- tagbuild.cli: CLI entry point package (tagbuild)
- tagbuild.lib.core: Configuration, workspace projects, version resolution, image tags
- tagbuild.lib.containers: Git queries and container image builds
- tagbuild.lib.tag_and_build: The resolve, build, tag and push driver
- tagbuild.lib._util: Internal helpers (ANSI colors, layered config)
"""

__all__ = [
    "cli",
    "lib",
]

# Version information - single source of truth using importlib.metadata
try:
    from importlib.metadata import version

    __version__ = version("tagbuild")
except Exception:
    # Package not installed (running from a source checkout)
    __version__ = "unknown"
