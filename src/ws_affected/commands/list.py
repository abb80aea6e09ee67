"""List command implementation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import typer
from rich.console import Console

from ws_affected.commands.base import CommandContext, SyncCommand
from ws_affected.errors import WsAffectedError
from ws_affected.workspace.node import DepTypes

if TYPE_CHECKING:
    from ws_affected.workspace.workspace import Workspace


@dataclass
class ListResult:
    """Result of list command."""

    names: list[str] = field(default_factory=list)


@dataclass
class ListOptions:
    """Options for list command.

    Unset options fall back to the workspace configuration.
    """

    workspaces: list[str] | None = None
    all_workspaces: bool = False
    dependencies: bool = False
    base: str | None = None
    head: str | None = None
    dep_types: DepTypes | None = None
    transitive: bool | None = None


class ListCommand(SyncCommand[ListResult]):
    """List workspaces.

    With explicit workspaces, lists their dependents (or dependencies)
    inclusive of the workspaces themselves. Otherwise lists all workspaces or
    the affected ones.
    """

    def __init__(self, context: CommandContext, options: ListOptions | None = None) -> None:
        super().__init__(context)
        self.options = options or ListOptions()

    def validate(self) -> list[str]:
        errors = super().validate()
        if self.options.dependencies and not self.options.workspaces:
            errors.append("Listing dependencies requires --workspace")
        if self.options.workspaces and self.options.all_workspaces:
            errors.append("--workspace and --all-workspaces cannot be combined")
        return errors

    @property
    def dep_types(self) -> DepTypes:
        return self.options.dep_types or DepTypes(self.config.dep_types)

    @property
    def transitive(self) -> bool:
        if self.options.transitive is None:
            return self.config.transitive
        return self.options.transitive

    def execute(self) -> ListResult:
        """Execute the list command."""
        from ws_affected.filters import expand_workspaces, select_workspaces

        self.check()

        if self.options.workspaces:
            names = expand_workspaces(
                self.workspace.graph,
                self.options.workspaces,
                dependencies=self.options.dependencies,
                dep_types=self.dep_types,
                transitive=self.transitive,
            )
        else:
            names = select_workspaces(
                self.workspace,
                all_workspaces=self.options.all_workspaces,
                base=self.options.base or self.config.base,
                head=self.options.head or self.config.head,
                transitive=self.transitive,
            )
        return ListResult(names=names)


def list_workspaces(
    workspace: Workspace,
    *,
    workspaces: list[str] | None = None,
    all_workspaces: bool = False,
    dependencies: bool = False,
    base: str | None = None,
    head: str | None = None,
    dep_types: DepTypes | None = None,
    transitive: bool | None = None,
) -> ListResult:
    """Convenience function to list workspaces.

    Args:
        workspace: Workspace to list.
        workspaces: Seed workspaces whose dependents/dependencies are listed.
        all_workspaces: List every workspace.
        dependencies: List dependencies instead of dependents.
        base: Base git reference for the affected set.
        head: Head git reference for the affected set.
        dep_types: Dependency categories to follow.
        transitive: Walk the graph transitively.

    Returns:
        List result with workspace names.
    """
    context = CommandContext(workspace=workspace)
    options = ListOptions(
        workspaces=workspaces,
        all_workspaces=all_workspaces,
        dependencies=dependencies,
        base=base,
        head=head,
        dep_types=dep_types,
        transitive=transitive,
    )
    return ListCommand(context, options).execute()


def handle_list_command(
    workspace: Workspace,
    *,
    console: Console,
    error_console: Console,
    workspaces: list[str] | None = None,
    all_workspaces: bool = False,
    dependencies: bool = False,
    base: str | None = None,
    head: str | None = None,
    dep_types: DepTypes | None = None,
    transitive: bool | None = None,
    json_output: bool = False,
) -> None:
    """Print the listed workspaces, one per line or as JSON."""
    try:
        result = list_workspaces(
            workspace,
            workspaces=workspaces,
            all_workspaces=all_workspaces,
            dependencies=dependencies,
            base=base,
            head=head,
            dep_types=dep_types,
            transitive=transitive,
        )
    except WsAffectedError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e

    if json_output:
        console.print_json(json.dumps(result.names))
    elif result.names:
        console.print("\n".join(result.names), markup=False, highlight=False)
