"""Workspace dependency graph."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable, Iterator
from types import MappingProxyType

from ws_affected.errors import DuplicateWorkspaceError, UnknownWorkspaceError
from ws_affected.workspace.node import DepTypes, WorkspaceNode

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Read-only graph of workspaces keyed by name.

    Edges come from the dependency names each workspace declares. Names that
    are not workspaces themselves (external packages) are pruned when the
    graph is built, so every remaining edge points at a node of the graph.

    Dependents and dependencies are single-hop by default: only workspaces
    that directly declare (or are directly declared by) the seed are returned.
    Pass ``transitive=True`` to walk the full closure instead.
    """

    def __init__(self, nodes: Iterable[WorkspaceNode]) -> None:
        """Build the graph.

        Args:
            nodes: Discovered workspace nodes, in discovery order.

        Raises:
            DuplicateWorkspaceError: If two nodes share a name.
        """
        collected: dict[str, WorkspaceNode] = {}
        for node in nodes:
            existing = collected.get(node.name)
            if existing is not None:
                raise DuplicateWorkspaceError(node.name, existing.directory, node.directory)
            collected[node.name] = node

        pruned: dict[str, WorkspaceNode] = {}
        for name, node in collected.items():
            dependencies = {
                category: tuple(dep for dep in deps if dep in collected)
                for category, deps in node.dependencies.items()
            }
            external = sum(len(deps) for deps in node.dependencies.values()) - sum(
                len(deps) for deps in dependencies.values()
            )
            if external:
                logger.debug("Pruned %d external dependencies of %s", external, name)
            pruned[name] = dataclasses.replace(
                node,
                scripts=MappingProxyType(dict(node.scripts)),
                dependencies=MappingProxyType(dependencies),
            )

        self._nodes = MappingProxyType(pruned)

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __iter__(self) -> Iterator[WorkspaceNode]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, name: str) -> WorkspaceNode:
        return self.get(name)

    @property
    def names(self) -> list[str]:
        """Workspace names in discovery order."""
        return list(self._nodes)

    def get(self, name: str) -> WorkspaceNode:
        """Get a workspace node by name.

        Raises:
            UnknownWorkspaceError: If no workspace has this name.
        """
        try:
            return self._nodes[name]
        except KeyError:
            raise UnknownWorkspaceError(name, self._nodes) from None

    def direct_dependents(self, name: str, dep_types: DepTypes = DepTypes.ALL) -> list[str]:
        """Workspaces whose filtered dependency list contains ``name``."""
        return [
            node.name for node in self._nodes.values() if name in node.dependency_names(dep_types)
        ]

    def direct_dependencies(self, name: str, dep_types: DepTypes = DepTypes.ALL) -> list[str]:
        """Filtered dependency list of ``name``."""
        return self.get(name).dependency_names(dep_types)

    def dependents(
        self,
        name: str,
        dep_types: DepTypes = DepTypes.ALL,
        *,
        inclusive: bool = False,
        transitive: bool = False,
    ) -> list[str]:
        """Workspaces that depend on ``name``.

        Unknown names are not an error here: they simply have no dependents.

        Args:
            name: Seed workspace name.
            dep_types: Dependency categories to follow.
            inclusive: Also return ``name`` itself when it is a workspace.
            transitive: Follow dependents of dependents.

        Returns:
            Workspace names in discovery order, seed first when inclusive.
        """
        result: dict[str, None] = {}
        if inclusive and name in self._nodes:
            result[name] = None

        if not transitive:
            for dependent in self.direct_dependents(name, dep_types):
                result.setdefault(dependent, None)
            return list(result)

        return list(self._walk(name, result, lambda n: self.direct_dependents(n, dep_types)))

    def dependencies(
        self,
        name: str,
        dep_types: DepTypes = DepTypes.ALL,
        *,
        inclusive: bool = False,
        transitive: bool = False,
    ) -> list[str]:
        """Workspaces that ``name`` depends on.

        Args:
            name: Seed workspace name.
            dep_types: Dependency categories to follow.
            inclusive: Also return ``name`` itself.
            transitive: Follow dependencies of dependencies.

        Returns:
            Workspace names, seed first when inclusive, then in declaration order.

        Raises:
            UnknownWorkspaceError: If ``name`` is not a workspace.
        """
        direct = self.direct_dependencies(name, dep_types)
        result: dict[str, None] = {}
        if inclusive:
            result[name] = None

        if not transitive:
            for dependency in direct:
                result.setdefault(dependency, None)
            return list(result)

        return list(self._walk(name, result, lambda n: self.direct_dependencies(n, dep_types)))

    @staticmethod
    def _walk(
        seed: str,
        result: dict[str, None],
        neighbours: Callable[[str], list[str]],
    ) -> dict[str, None]:
        # Breadth-first; the seed is never re-added by a cycle unless inclusive.
        visited = {seed}
        queue = [seed]
        while queue:
            current = queue.pop(0)
            for neighbour in neighbours(current):
                if neighbour in visited:
                    continue
                visited.add(neighbour)
                result.setdefault(neighbour, None)
                queue.append(neighbour)
        return result
