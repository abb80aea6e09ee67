"""ws-affected CLI application."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from ws_affected.errors import WsAffectedError
from ws_affected.workspace import DepTypes, Workspace

HELP = """\
Find the workspaces of an npm-style monorepo affected by the changes on a
branch, and run package scripts across them.

Dependents of a workspace are the workspaces that declare it as a
dependency; dependencies are the workspaces it declares. Lookups are
single-hop unless --transitive is given.
"""


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from ws_affected import __version__

        print(f"ws-affected {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="ws-affected",
    help=HELP,
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
error_console = Console(stderr=True)


@app.callback()
def _app_callback(
    version: Annotated[  # noqa: ARG001
        bool,
        typer.Option("--version", "-V", help="Show version and exit", callback=version_callback),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Affected workspaces of a monorepo."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
        force=True,
    )


def get_workspace(path: Path | None = None) -> Workspace:
    """Load workspace from current directory or specified path."""
    try:
        return Workspace.discover(path)
    except WsAffectedError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e


WorkspaceOption = Annotated[
    list[str] | None,
    typer.Option("--workspace", "-w", help="Workspace to use (repeatable)"),
]
AllWorkspacesOption = Annotated[
    bool,
    typer.Option("--all-workspaces", "-a", help="Use all workspaces"),
]
BaseOption = Annotated[
    str | None,
    typer.Option("--base", "-b", help="Base branch to compare against [default: master]"),
]
HeadOption = Annotated[
    str | None,
    typer.Option("--head", help="Head branch to compare [default: HEAD]"),
]
DepTypesOption = Annotated[
    DepTypes | None,
    typer.Option(
        "--dep-types",
        help="Dependencies to follow: 'all' or 'prod' (dependencies and peerDependencies)",
        case_sensitive=False,
    ),
]
TransitiveOption = Annotated[
    bool | None,
    typer.Option(
        "--transitive/--direct",
        help="Follow dependents/dependencies transitively instead of a single hop",
        show_default=False,
    ),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output as JSON"),
]


@app.command("list")
def list_cmd(
    workspace: WorkspaceOption = None,
    all_workspaces: AllWorkspacesOption = False,
    base: BaseOption = None,
    head: HeadOption = None,
    dep_types: DepTypesOption = None,
    transitive: TransitiveOption = None,
    json_output: JsonOption = False,
) -> None:
    """List affected workspaces, or the dependents (inclusive) of --workspace."""
    from ws_affected.commands import handle_list_command

    ws = get_workspace()
    handle_list_command(
        ws,
        console=console,
        error_console=error_console,
        workspaces=workspace,
        all_workspaces=all_workspaces,
        base=base,
        head=head,
        dep_types=dep_types,
        transitive=transitive,
        json_output=json_output,
    )


@app.command("list-dependencies")
def list_dependencies_cmd(
    workspace: WorkspaceOption = None,
    dep_types: DepTypesOption = None,
    transitive: TransitiveOption = None,
    json_output: JsonOption = False,
) -> None:
    """List the dependencies (inclusive) of --workspace."""
    from ws_affected.commands import handle_list_command

    ws = get_workspace()
    handle_list_command(
        ws,
        console=console,
        error_console=error_console,
        workspaces=workspace,
        dependencies=True,
        dep_types=dep_types,
        transitive=transitive,
        json_output=json_output,
    )


@app.command("run")
def run_cmd(
    scripts: Annotated[
        list[str],
        typer.Argument(help="Scripts to run, e.g. lint 'test --watch=false'"),
    ],
    workspace: WorkspaceOption = None,
    all_workspaces: AllWorkspacesOption = False,
    base: BaseOption = None,
    head: HeadOption = None,
    concurrency: Annotated[
        int | None,
        typer.Option(
            "--concurrency",
            "-c",
            help="Parallel tasks: 0 = number of CPUs, -n = CPUs minus n [default: 0]",
        ),
    ] = None,
    print_success: Annotated[
        bool | None,
        typer.Option(
            "--print-success/--no-print-success",
            "-u",
            help="Print output for successful scripts as well",
            show_default=False,
        ),
    ] = None,
    transitive: TransitiveOption = None,
) -> None:
    """Run scripts on affected workspaces (or --workspace / --all-workspaces)."""
    from ws_affected.commands import handle_run_command

    ws = get_workspace()
    asyncio.run(
        handle_run_command(
            ws,
            scripts,
            console=console,
            error_console=error_console,
            workspaces=workspace,
            all_workspaces=all_workspaces,
            base=base,
            head=head,
            concurrency=concurrency,
            transitive=transitive,
            print_success=print_success,
        )
    )


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
