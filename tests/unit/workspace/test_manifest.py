"""Tests for package.json loading."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from ws_affected.errors import ConfigurationError
from ws_affected.workspace.manifest import (
    PackageManifest,
    has_workspaces,
    iter_workspace_dirs,
    load_workspace_nodes,
    read_manifest,
    read_root_manifest,
)
from ws_affected.workspace.node import DependencyCategory

WriteManifest = Callable[[Path, dict[str, Any]], Path]


class TestPackageManifest:
    """Tests for PackageManifest."""

    def test_reads_dependency_sections(self) -> None:
        manifest = PackageManifest.model_validate(
            {
                "name": "pkg",
                "dependencies": {"a": "1"},
                "devDependencies": {"b": "1"},
                "peerDependencies": {"c": "1"},
                "optionalDependencies": {"d": "1"},
            }
        )

        assert manifest.dependency_lists() == {
            DependencyCategory.PRODUCTION: ("a",),
            DependencyCategory.DEVELOPMENT: ("b",),
            DependencyCategory.PEER: ("c",),
            DependencyCategory.OPTIONAL: ("d",),
        }

    def test_missing_sections_are_empty(self) -> None:
        manifest = PackageManifest.model_validate({"name": "pkg", "scripts": None})

        assert manifest.scripts == {}
        assert all(not deps for deps in manifest.dependency_lists().values())

    def test_to_node(self, temp_dir: Path) -> None:
        manifest = PackageManifest.model_validate(
            {"name": "pkg", "scripts": {"lint": "eslint ."}}
        )

        node = manifest.to_node(temp_dir)

        assert node.name == "pkg"
        assert node.directory == temp_dir
        assert node.has_script("lint")
        assert not node.has_script("test")


class TestReadManifest:
    """Tests for read_manifest."""

    def test_valid(self, temp_dir: Path, write_manifest: WriteManifest) -> None:
        write_manifest(temp_dir, {"name": "pkg", "version": "1.0.0"})

        manifest = read_manifest(temp_dir)

        assert manifest is not None
        assert manifest.name == "pkg"

    def test_missing_file(self, temp_dir: Path) -> None:
        assert read_manifest(temp_dir) is None

    def test_invalid_json(self, temp_dir: Path) -> None:
        (temp_dir / "package.json").write_text("{")

        assert read_manifest(temp_dir) is None

    def test_missing_name(self, temp_dir: Path, write_manifest: WriteManifest) -> None:
        write_manifest(temp_dir, {"version": "1.0.0"})

        assert read_manifest(temp_dir) is None


class TestRootManifest:
    """Tests for root manifest handling."""

    def test_list_form(self, temp_dir: Path, write_manifest: WriteManifest) -> None:
        path = write_manifest(temp_dir, {"workspaces": ["packages/*", "apps/*"]})

        assert read_root_manifest(path).workspaces == ["packages/*", "apps/*"]

    def test_yarn_object_form(self, temp_dir: Path, write_manifest: WriteManifest) -> None:
        path = write_manifest(
            temp_dir, {"workspaces": {"packages": ["packages/*"], "nohoist": ["**/x"]}}
        )

        assert read_root_manifest(path).workspaces == ["packages/*"]

    def test_missing_file_is_fatal(self, temp_dir: Path) -> None:
        with pytest.raises(ConfigurationError):
            read_root_manifest(temp_dir / "package.json")

    def test_missing_workspaces_is_fatal(
        self, temp_dir: Path, write_manifest: WriteManifest
    ) -> None:
        path = write_manifest(temp_dir, {"name": "root"})

        with pytest.raises(ConfigurationError, match="workspaces"):
            read_root_manifest(path)

    def test_has_workspaces(self, temp_dir: Path, write_manifest: WriteManifest) -> None:
        path = temp_dir / "package.json"
        assert has_workspaces(path) is False

        write_manifest(temp_dir, {"name": "leaf"})
        assert has_workspaces(path) is False

        write_manifest(temp_dir, {"workspaces": []})
        assert has_workspaces(path) is True

    def test_has_workspaces_invalid_json(self, temp_dir: Path) -> None:
        (temp_dir / "package.json").write_text("nope")

        with pytest.raises(ConfigurationError):
            has_workspaces(temp_dir / "package.json")


class TestDiscovery:
    """Tests for expanding workspace globs."""

    def test_star_pattern_lists_subdirectories(self, workspace_dir: Path) -> None:
        dirs = iter_workspace_dirs(workspace_dir, ["packages/*"])

        assert [d.name for d in dirs] == [
            "broken",
            "no-manifest",
            "pkg-a",
            "pkg-b",
            "pkg-c",
            "pkg-d",
        ]

    def test_plain_directory_pattern(self, workspace_dir: Path) -> None:
        dirs = iter_workspace_dirs(workspace_dir, ["./packages/pkg-a/"])

        assert dirs == [workspace_dir / "packages" / "pkg-a"]

    def test_skips_files_negations_and_missing_roots(self, workspace_dir: Path) -> None:
        (workspace_dir / "packages" / "README.md").write_text("# packages")

        dirs = iter_workspace_dirs(workspace_dir, ["packages/*", "!packages/pkg-a", "apps/*"])

        assert workspace_dir / "packages" / "README.md" not in dirs
        assert all(d.is_dir() for d in dirs)

    def test_skips_invalid_workspaces(self, workspace_dir: Path) -> None:
        nodes = load_workspace_nodes(workspace_dir, ["packages/*"])

        assert [n.name for n in nodes] == ["pkg-a", "pkg-b", "pkg-c", "pkg-d"]
