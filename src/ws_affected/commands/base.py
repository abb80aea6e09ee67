"""Base command infrastructure."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar

from ws_affected.errors import ConfigurationError
from ws_affected.workspace import Workspace

TResult = TypeVar("TResult")


@dataclass
class CommandContext:
    """Context passed to all commands.

    Attributes:
        workspace: The workspace instance.
    """

    workspace: Workspace


class _CommandBase:
    def __init__(self, context: CommandContext) -> None:
        """Initialize command.

        Args:
            context: Command context.
        """
        self.context = context
        self.workspace = context.workspace
        self.config = context.workspace.config

    def validate(self) -> list[str]:
        """Validate that the command can be executed.

        Returns:
            List of validation errors (empty if valid).
        """
        return []

    def check(self) -> None:
        """Raise the first validation error, if any."""
        errors = self.validate()
        if errors:
            raise ConfigurationError(errors[0])


class Command(_CommandBase, ABC, Generic[TResult]):
    """Base class for asynchronous commands.

    Commands encapsulate the logic for a specific operation.
    They receive a context and return a result.
    """

    @abstractmethod
    async def execute(self) -> TResult:
        """Execute the command.

        Returns:
            Command-specific result.
        """
        ...


class SyncCommand(_CommandBase, ABC, Generic[TResult]):
    """Base class for synchronous commands."""

    @abstractmethod
    def execute(self) -> TResult:
        """Execute the command synchronously.

        Returns:
            Command-specific result.
        """
        ...
