"""Map changed files to affected workspaces."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from ws_affected.workspace.graph import DependencyGraph
from ws_affected.workspace.node import DepTypes, WorkspaceNode


def find_owner(graph: DependencyGraph, path: Path) -> WorkspaceNode | None:
    """Find the workspace whose directory contains an absolute file path.

    The test is on path components, so ``packages/foo-bar/x`` is not owned by
    ``packages/foo``.
    """
    for node in graph:
        if node.owns(path):
            return node
    return None


def get_touched_workspaces(
    graph: DependencyGraph,
    root: Path,
    changed_files: Iterable[str | Path],
) -> list[str]:
    """Get workspaces that directly contain at least one changed file.

    Args:
        graph: Dependency graph.
        root: Directory the changed paths are relative to.
        changed_files: Changed file paths. Files outside every workspace are
            ignored.

    Returns:
        Workspace names, deduplicated, in order of first changed file.
    """
    touched: dict[str, None] = {}
    for changed_file in changed_files:
        owner = find_owner(graph, root / changed_file)
        if owner is not None:
            touched.setdefault(owner.name, None)
    return list(touched)


def resolve_affected(
    graph: DependencyGraph,
    root: Path,
    changed_files: Iterable[str | Path],
    *,
    transitive: bool = False,
) -> list[str]:
    """Resolve the affected set for a list of changed files.

    The affected set is every touched workspace plus its dependents across all
    dependency categories.

    Args:
        graph: Dependency graph.
        root: Directory the changed paths are relative to.
        changed_files: Changed file paths.
        transitive: Include dependents of dependents.

    Returns:
        Affected workspace names in order of discovery.
    """
    affected: dict[str, None] = {}
    for name in get_touched_workspaces(graph, root, changed_files):
        for dependent in graph.dependents(
            name, DepTypes.ALL, inclusive=True, transitive=transitive
        ):
            affected.setdefault(dependent, None)
    return list(affected)
