"""Shared test fixtures for ws-affected tests."""

from __future__ import annotations

import json
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

# Load .env from project root (doesn't override existing env vars)
load_dotenv(Path(__file__).parent.parent / ".env")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def write_manifest() -> Callable[[Path, dict[str, Any]], Path]:
    """Return a helper that writes a package.json into a directory."""

    def _write(directory: Path, manifest: dict[str, Any]) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "package.json"
        path.write_text(json.dumps(manifest, indent=2))
        return path

    return _write


@pytest.fixture
def workspace_dir(
    temp_dir: Path, write_manifest: Callable[[Path, dict[str, Any]], Path]
) -> Path:
    """Create a sample npm workspace.

    pkg-a -> pkg-b -> pkg-c (production), pkg-d -> pkg-c (development).
    """
    write_manifest(
        temp_dir,
        {"name": "monorepo", "private": True, "workspaces": ["packages/*"]},
    )
    packages = temp_dir / "packages"

    write_manifest(
        packages / "pkg-a",
        {
            "name": "pkg-a",
            "version": "1.0.0",
            "scripts": {"lint": "eslint .", "test": "jest"},
            "dependencies": {"pkg-b": "*", "lodash": "^4.17.21"},
        },
    )
    write_manifest(
        packages / "pkg-b",
        {
            "name": "pkg-b",
            "version": "1.0.0",
            "scripts": {"lint": "eslint .", "build": "tsc"},
            "dependencies": {"pkg-c": "*"},
        },
    )
    write_manifest(
        packages / "pkg-c",
        {
            "name": "pkg-c",
            "version": "1.0.0",
            "scripts": {"test": "jest"},
            "devDependencies": {"typescript": "^5.0.0"},
        },
    )
    write_manifest(
        packages / "pkg-d",
        {
            "name": "pkg-d",
            "version": "1.0.0",
            "devDependencies": {"pkg-c": "*"},
        },
    )

    # Directories that are not workspaces
    (packages / "no-manifest").mkdir()
    (packages / "broken").mkdir()
    (packages / "broken" / "package.json").write_text("{ not json")

    return temp_dir
