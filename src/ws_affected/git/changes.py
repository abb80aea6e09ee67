"""Changed file detection between two git references."""

from __future__ import annotations

import logging
from pathlib import Path

from ws_affected.errors import GitError, NoCommonAncestorError
from ws_affected.git.repo import run_git_command

logger = logging.getLogger(__name__)


def get_divergence_commit(root: Path, base: str, head: str) -> str:
    """Find the commit from which ``head`` diverged from ``base``.

    The head branch may not have been rebased onto base, so the diff is taken
    from the merge base rather than from the tip of base.

    Args:
        root: Repository directory.
        base: Base reference, e.g. ``master``.
        head: Head reference, e.g. ``HEAD``.

    Returns:
        Commit SHA of the divergence point.

    Raises:
        NoCommonAncestorError: If the references share no history.
        GitError: If git fails for another reason (unknown ref, not a repo).
    """
    cmd = ["merge-base", base, head]
    result = run_git_command(cmd, cwd=root, check=False)
    sha = result.stdout.strip()
    # merge-base exits 1 with no output when the histories are unrelated
    if result.returncode == 1 and not sha:
        raise NoCommonAncestorError(base, head)
    if result.returncode != 0:
        raise GitError(
            result.stderr.strip() or f"Command failed with exit code {result.returncode}",
            command=" ".join(["git", *cmd]),
        )
    return sha


def get_changed_files(root: Path, base: str, head: str) -> list[str]:
    """List files changed on ``head`` since it diverged from ``base``.

    Args:
        root: Repository directory.
        base: Base reference.
        head: Head reference.

    Returns:
        Repository-relative file paths, in git's order.

    Raises:
        NoCommonAncestorError: If the references share no history.
        GitError: If a git command fails.
    """
    commit = get_divergence_commit(root, base, head)
    logger.debug("Diffing %s..%s (divergence commit %s)", base, head, commit)
    result = run_git_command(
        ["diff-tree", "-z", "--no-commit-id", "--name-only", "-r", commit, head],
        cwd=root,
    )
    # -z output is NUL separated and never C-quoted
    return [path for path in result.stdout.split("\0") if path]
