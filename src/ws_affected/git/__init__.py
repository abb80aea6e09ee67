"""Git integration."""

from ws_affected.git.changes import get_changed_files, get_divergence_commit
from ws_affected.git.repo import get_repo_root, run_git_command

__all__ = [
    "get_changed_files",
    "get_divergence_commit",
    "get_repo_root",
    "run_git_command",
]
