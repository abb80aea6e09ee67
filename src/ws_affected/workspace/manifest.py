"""package.json manifest loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ws_affected.errors import ConfigurationError
from ws_affected.workspace.node import DependencyCategory, WorkspaceNode

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"


class PackageManifest(BaseModel):
    """The parts of a workspace package.json this tool reads."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(min_length=1)
    scripts: dict[str, str] = Field(default_factory=dict)
    dependencies: dict[str, Any] = Field(default_factory=dict)
    dev_dependencies: dict[str, Any] = Field(default_factory=dict, alias="devDependencies")
    peer_dependencies: dict[str, Any] = Field(default_factory=dict, alias="peerDependencies")
    optional_dependencies: dict[str, Any] = Field(
        default_factory=dict, alias="optionalDependencies"
    )

    @field_validator(
        "scripts",
        "dependencies",
        "dev_dependencies",
        "peer_dependencies",
        "optional_dependencies",
        mode="before",
    )
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def dependency_lists(self) -> dict[DependencyCategory, tuple[str, ...]]:
        """Declared dependency names grouped by category."""
        return {
            DependencyCategory.PRODUCTION: tuple(self.dependencies),
            DependencyCategory.DEVELOPMENT: tuple(self.dev_dependencies),
            DependencyCategory.PEER: tuple(self.peer_dependencies),
            DependencyCategory.OPTIONAL: tuple(self.optional_dependencies),
        }

    def to_node(self, directory: Path) -> WorkspaceNode:
        return WorkspaceNode(
            name=self.name,
            directory=directory,
            scripts=dict(self.scripts),
            dependencies=self.dependency_lists(),
        )


class RootManifest(BaseModel):
    """Root package.json: only the workspace globs matter."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    workspaces: list[str]

    @field_validator("workspaces", mode="before")
    @classmethod
    def _normalize_workspaces(cls, value: Any) -> Any:
        # yarn accepts {"packages": [...], "nohoist": [...]}
        if isinstance(value, dict):
            return value.get("packages", [])
        return value


def _read_json(path: Path) -> Any:
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def read_manifest(directory: Path) -> PackageManifest | None:
    """Read a workspace manifest.

    Args:
        directory: Candidate workspace directory.

    Returns:
        The validated manifest, or None if the directory holds no usable
        package.json.
    """
    path = directory / MANIFEST_FILE
    try:
        data = _read_json(path)
        return PackageManifest.model_validate(data)
    except (OSError, ValueError) as e:
        # pydantic's ValidationError and json's JSONDecodeError are both ValueErrors
        logger.debug("Skipping %s: %s", directory, e)
        return None


def has_workspaces(path: Path) -> bool:
    """Check whether a package.json declares a workspaces field.

    Raises:
        ConfigurationError: If the file exists but is not valid JSON.
    """
    try:
        data = _read_json(path)
    except FileNotFoundError:
        return False
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Failed to read {MANIFEST_FILE}: {e}", path) from e
    return isinstance(data, dict) and "workspaces" in data


def read_root_manifest(path: Path) -> RootManifest:
    """Read and validate the root package.json.

    Raises:
        ConfigurationError: If the file is missing, unreadable or has no
            usable workspaces field.
    """
    try:
        data = _read_json(path)
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            f"Failed to read {MANIFEST_FILE}. Either it is missing or it is not valid JSON", path
        ) from e

    try:
        return RootManifest.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f'This project does not have a valid "workspaces" field in {MANIFEST_FILE}', path
        ) from e


def iter_workspace_dirs(root: Path, patterns: list[str]) -> list[Path]:
    """Expand workspace globs into candidate directories.

    Args:
        root: Workspace root directory.
        patterns: Globs from the root manifest, e.g. ``packages/*``.

    Returns:
        Candidate directories in a stable order, without duplicates.
    """
    dirs: dict[Path, None] = {}
    for pattern in patterns:
        pattern = pattern.strip().removeprefix("./").rstrip("/")
        if not pattern or pattern.startswith("!"):
            continue
        for match in sorted(root.glob(pattern)):
            if match.is_dir():
                dirs.setdefault(match, None)
    return list(dirs)


def load_workspace_nodes(root: Path, patterns: list[str]) -> list[WorkspaceNode]:
    """Load a node for every candidate directory with a valid manifest."""
    nodes: list[WorkspaceNode] = []
    for directory in iter_workspace_dirs(root, patterns):
        manifest = read_manifest(directory)
        if manifest is None:
            continue
        nodes.append(manifest.to_node(directory))
    return nodes
