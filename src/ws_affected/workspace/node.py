"""Workspace node and dependency category types."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class DependencyCategory(Enum):
    """Dependency sections of a workspace manifest."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"
    PEER = "peer"
    OPTIONAL = "optional"


class DepTypes(str, Enum):
    """Dependency-type filter used when walking the graph.

    ``prod`` covers the production and peer categories, ``all`` covers every
    category.
    """

    ALL = "all"
    PRODUCTION = "prod"

    @property
    def categories(self) -> tuple[DependencyCategory, ...]:
        if self is DepTypes.PRODUCTION:
            return (DependencyCategory.PRODUCTION, DependencyCategory.PEER)
        return tuple(DependencyCategory)


@dataclass(frozen=True)
class WorkspaceNode:
    """A single workspace of the monorepo.

    Attributes:
        name: Declared package name, unique within the graph.
        directory: Absolute path of the workspace directory.
        scripts: Script name to command mapping.
        dependencies: Declared dependency names per category, in manifest order.
    """

    name: str
    directory: Path
    scripts: Mapping[str, str] = field(default_factory=dict)
    dependencies: Mapping[DependencyCategory, tuple[str, ...]] = field(default_factory=dict)

    def dependency_names(self, dep_types: DepTypes = DepTypes.ALL) -> list[str]:
        """Dependency names under the selected categories, deduplicated in order."""
        names: dict[str, None] = {}
        for category in dep_types.categories:
            for name in self.dependencies.get(category, ()):
                names.setdefault(name, None)
        return list(names)

    def has_script(self, script_name: str) -> bool:
        return bool(self.scripts.get(script_name))

    def owns(self, path: Path) -> bool:
        """Check whether an absolute file path lies inside this workspace."""
        try:
            path.relative_to(self.directory)
        except ValueError:
            return False
        return path != self.directory
