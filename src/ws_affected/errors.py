"""ws-affected error types."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path


class WsAffectedError(Exception):
    """Base class for all ws-affected errors.

    Attributes:
        message: Human readable description of the error.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(WsAffectedError):
    """Invalid root manifest, config file or option combination."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)


class WorkspaceNotFoundError(WsAffectedError):
    """No package.json declaring workspaces was found."""

    def __init__(self, start: Path) -> None:
        self.start = start
        super().__init__(
            f"No package.json with a 'workspaces' field found in {start} or any parent directory"
        )


class UnknownWorkspaceError(WsAffectedError):
    """A requested workspace name has no node in the dependency graph."""

    def __init__(self, name: str, available: Iterable[str] = ()) -> None:
        self.name = name
        self.available = sorted(available)
        message = f"Unknown workspace '{name}'"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class DuplicateWorkspaceError(WsAffectedError):
    """Two workspace directories declare the same package name."""

    def __init__(self, name: str, first: Path, second: Path) -> None:
        self.name = name
        self.first = first
        self.second = second
        super().__init__(f"Duplicate workspace name '{name}' in {first} and {second}")


class GitError(WsAffectedError):
    """A git command failed."""

    def __init__(self, message: str, command: str | None = None) -> None:
        self.command = command
        if command:
            message = f"{message} (command: {command})"
        super().__init__(message)


class NoCommonAncestorError(GitError):
    """Base and head share no commit to diff against."""

    def __init__(self, base: str, head: str) -> None:
        self.base = base
        self.head = head
        super().__init__(f"No common commit found between '{base}' and '{head}'")
