"""Workspace discovery."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ws_affected.config import WsAffectedConfig, load_config
from ws_affected.errors import WorkspaceNotFoundError
from ws_affected.workspace.graph import DependencyGraph
from ws_affected.workspace.manifest import (
    MANIFEST_FILE,
    has_workspaces,
    load_workspace_nodes,
    read_root_manifest,
)
from ws_affected.workspace.node import WorkspaceNode

logger = logging.getLogger(__name__)


def find_workspace_root(start: Path | None = None) -> Path:
    """Find the nearest directory whose package.json declares workspaces.

    Args:
        start: Directory to start from. Defaults to the current directory.

    Returns:
        Absolute path of the workspace root.

    Raises:
        WorkspaceNotFoundError: If no such directory exists.
        ConfigurationError: If a package.json on the way is not valid JSON.
    """
    start = (start or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        if has_workspaces(directory / MANIFEST_FILE):
            return directory
    raise WorkspaceNotFoundError(start)


@dataclass(frozen=True)
class Workspace:
    """A discovered monorepo.

    Attributes:
        root: Workspace root directory.
        config: Tool configuration.
        graph: Dependency graph of all workspaces, built once.
    """

    root: Path
    config: WsAffectedConfig
    graph: DependencyGraph

    @classmethod
    def discover(cls, path: Path | None = None) -> Workspace:
        """Discover the workspace containing ``path``.

        Raises:
            WorkspaceNotFoundError: If no workspace root is found.
            ConfigurationError: If the root manifest or config file is invalid.
            DuplicateWorkspaceError: If two workspaces share a name.
        """
        root = find_workspace_root(path)
        return cls.load(root)

    @classmethod
    def load(cls, root: Path) -> Workspace:
        """Load the workspace rooted exactly at ``root``."""
        root = root.resolve()
        manifest = read_root_manifest(root / MANIFEST_FILE)
        config = load_config(root)
        graph = DependencyGraph(load_workspace_nodes(root, manifest.workspaces))
        logger.debug("Discovered %d workspaces under %s", len(graph), root)
        return cls(root=root, config=config, graph=graph)

    @property
    def names(self) -> list[str]:
        return self.graph.names

    def get(self, name: str) -> WorkspaceNode:
        return self.graph.get(name)
