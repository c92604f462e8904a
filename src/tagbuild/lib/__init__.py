# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Library layer shared by the CLI.

``tagbuild.lib.core`` holds the pure logic (version resolution, tag
derivation, configuration), ``tagbuild.lib.containers`` wraps the external
processes (git, docker) and ``tagbuild.lib.tag_and_build`` strings them
together.
"""
