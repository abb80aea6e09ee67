"""ws-affected commands."""

from ws_affected.commands.base import Command, CommandContext, SyncCommand
from ws_affected.commands.list import (
    ListCommand,
    ListOptions,
    ListResult,
    handle_list_command,
    list_workspaces,
)
from ws_affected.commands.run import RunCommand, RunOptions, handle_run_command, run_scripts

__all__ = [
    # Base
    "Command",
    "SyncCommand",
    "CommandContext",
    # List
    "ListCommand",
    "ListOptions",
    "ListResult",
    "list_workspaces",
    "handle_list_command",
    # Run
    "RunCommand",
    "RunOptions",
    "run_scripts",
    "handle_run_command",
]
