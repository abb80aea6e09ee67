"""ws-affected - affected workspaces of an npm-style monorepo.

Provides:
- Workspace discovery and a dependency graph built from package.json manifests
- Git-based detection of the workspaces affected by a branch
- Bounded-concurrency execution of package scripts across workspaces
"""

from ws_affected.config import WsAffectedConfig, load_config
from ws_affected.errors import (
    ConfigurationError,
    DuplicateWorkspaceError,
    GitError,
    NoCommonAncestorError,
    UnknownWorkspaceError,
    WorkspaceNotFoundError,
    WsAffectedError,
)
from ws_affected.execution import (
    RunSummary,
    Task,
    TaskResult,
    TaskScheduler,
    TaskStatus,
)
from ws_affected.filters import resolve_affected
from ws_affected.workspace import DependencyGraph, DepTypes, Workspace, WorkspaceNode

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "Workspace",
    "WorkspaceNode",
    "DependencyGraph",
    "DepTypes",
    "WsAffectedConfig",
    "load_config",
    "resolve_affected",
    # Execution
    "Task",
    "TaskResult",
    "TaskStatus",
    "RunSummary",
    "TaskScheduler",
    # Errors
    "WsAffectedError",
    "ConfigurationError",
    "WorkspaceNotFoundError",
    "UnknownWorkspaceError",
    "DuplicateWorkspaceError",
    "GitError",
    "NoCommonAncestorError",
]
