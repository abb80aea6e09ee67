"""Workspace discovery and dependency graph."""

from ws_affected.workspace.graph import DependencyGraph
from ws_affected.workspace.manifest import PackageManifest, RootManifest, read_manifest
from ws_affected.workspace.node import DependencyCategory, DepTypes, WorkspaceNode
from ws_affected.workspace.workspace import Workspace, find_workspace_root

__all__ = [
    "DependencyCategory",
    "DependencyGraph",
    "DepTypes",
    "PackageManifest",
    "RootManifest",
    "Workspace",
    "WorkspaceNode",
    "find_workspace_root",
    "read_manifest",
]
