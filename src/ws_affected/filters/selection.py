"""Workspace selection modes."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ws_affected.errors import ConfigurationError, NoCommonAncestorError
from ws_affected.filters.affected import resolve_affected
from ws_affected.workspace.graph import DependencyGraph
from ws_affected.workspace.node import DepTypes

if TYPE_CHECKING:
    from ws_affected.workspace.workspace import Workspace

logger = logging.getLogger(__name__)


def validate_names(graph: DependencyGraph, names: Iterable[str]) -> list[str]:
    """Check that every name is a workspace.

    Returns:
        The names, deduplicated, in the order given.

    Raises:
        UnknownWorkspaceError: On the first unknown name.
    """
    validated: dict[str, None] = {}
    for name in names:
        validated.setdefault(graph.get(name).name, None)
    return list(validated)


def get_affected_workspaces(
    workspace: Workspace,
    base: str,
    head: str,
    *,
    transitive: bool = False,
) -> list[str]:
    """Workspaces affected by the changes on ``head`` since it left ``base``.

    Returns an empty list when the references share no history.
    """
    from ws_affected.git import get_changed_files, get_repo_root

    repo_root = get_repo_root(workspace.root).resolve()
    try:
        changed_files = get_changed_files(repo_root, base, head)
    except NoCommonAncestorError as e:
        logger.warning("%s. Nothing is affected.", e.message)
        return []

    logger.debug("%d files changed between %s and %s", len(changed_files), base, head)
    return resolve_affected(workspace.graph, repo_root, changed_files, transitive=transitive)


def select_workspaces(
    workspace: Workspace,
    *,
    names: list[str] | None = None,
    all_workspaces: bool = False,
    base: str = "master",
    head: str = "HEAD",
    transitive: bool = False,
) -> list[str]:
    """Select the workspaces an operation applies to.

    Selection modes, in order of precedence:
    1. ``all_workspaces``: every workspace in the graph
    2. ``names``: exactly the named workspaces
    3. default: the affected set computed from git

    Raises:
        ConfigurationError: If both ``names`` and ``all_workspaces`` are given.
        UnknownWorkspaceError: If a named workspace does not exist.
    """
    if names and all_workspaces:
        raise ConfigurationError("--workspace and --all-workspaces cannot be combined")

    if all_workspaces:
        return workspace.graph.names
    if names:
        return validate_names(workspace.graph, names)
    return get_affected_workspaces(workspace, base, head, transitive=transitive)


def expand_workspaces(
    graph: DependencyGraph,
    names: Iterable[str],
    *,
    dependencies: bool = False,
    dep_types: DepTypes = DepTypes.ALL,
    transitive: bool = False,
) -> list[str]:
    """Union the inclusive dependents (or dependencies) of several workspaces.

    Raises:
        UnknownWorkspaceError: If a name is not a workspace.
    """
    expanded: dict[str, None] = {}
    for name in validate_names(graph, names):
        if dependencies:
            related = graph.dependencies(name, dep_types, inclusive=True, transitive=transitive)
        else:
            related = graph.dependents(name, dep_types, inclusive=True, transitive=transitive)
        for related_name in related:
            expanded.setdefault(related_name, None)
    return list(expanded)
