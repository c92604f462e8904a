# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Git queries: tags at HEAD and the HEAD revision."""

from pathlib import Path

from ..core.errors import RevisionQueryFailure, RevisionTagQueryFailure
from .runtime import Runner, describe_failure, run_command


def list_tags_at_head(repo_root: Path, runner: Runner | None = None) -> list[str]:
    """Return the tags pointing at HEAD in listing order, blank lines dropped.

    Raises RevisionTagQueryFailure when git is missing, cannot be started or
    the command fails.
    """
    try:
        result = run_command(
            ["git", "tag", "--points-at", "HEAD"], cwd=repo_root, runner=runner
        )
    except FileNotFoundError:
        raise RevisionTagQueryFailure("git not found; please install git")
    except OSError as exc:
        raise RevisionTagQueryFailure(f"Could not run git in {repo_root}: {exc}")
    if result.returncode != 0:
        raise RevisionTagQueryFailure(
            f"'git tag --points-at HEAD' failed in {repo_root}: {describe_failure(result)}"
        )
    return [line.strip() for line in (result.stdout or "").splitlines() if line.strip()]


def head_revision(repo_root: Path, runner: Runner | None = None) -> str:
    """Return the full identifier of HEAD.

    Raises RevisionQueryFailure when git is missing, the command fails or
    prints nothing (e.g. a repository without commits).
    """
    try:
        result = run_command(["git", "rev-parse", "HEAD"], cwd=repo_root, runner=runner)
    except FileNotFoundError:
        raise RevisionQueryFailure("git not found; please install git")
    except OSError as exc:
        raise RevisionQueryFailure(f"Could not run git in {repo_root}: {exc}")
    revision = (result.stdout or "").strip()
    if result.returncode != 0 or not revision:
        raise RevisionQueryFailure(
            f"'git rev-parse HEAD' failed in {repo_root}: {describe_failure(result)}"
        )
    return revision
