"""Run command implementation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import typer
from rich.console import Console

from ws_affected.commands.base import Command, CommandContext
from ws_affected.errors import WsAffectedError
from ws_affected.execution import RunSummary, TaskResult, TaskScheduler, plan_tasks

if TYPE_CHECKING:
    from ws_affected.workspace.workspace import Workspace


@dataclass
class RunOptions:
    """Options for run command.

    Unset options fall back to the workspace configuration.
    """

    scripts: list[str]
    workspaces: list[str] | None = None
    all_workspaces: bool = False
    base: str | None = None
    head: str | None = None
    concurrency: int | None = None
    transitive: bool | None = None


class RunCommand(Command[RunSummary]):
    """Run scripts across selected workspaces.

    Explicitly named workspaces are used as-is, without their dependents.
    Workspaces that do not define a script are skipped for that script.
    """

    def __init__(
        self,
        context: CommandContext,
        options: RunOptions,
        on_result: Callable[[TaskResult], None] | None = None,
    ) -> None:
        super().__init__(context)
        self.options = options
        self.on_result = on_result

    def validate(self) -> list[str]:
        """Validate the command."""
        errors = super().validate()
        if not any(script.strip() for script in self.options.scripts):
            errors.append("No script to run")
        return errors

    def get_workspaces(self) -> list[str]:
        """Get names of workspaces to run scripts in."""
        from ws_affected.filters import select_workspaces

        transitive = self.options.transitive
        return select_workspaces(
            self.workspace,
            names=self.options.workspaces,
            all_workspaces=self.options.all_workspaces,
            base=self.options.base or self.config.base,
            head=self.options.head or self.config.head,
            transitive=self.config.transitive if transitive is None else transitive,
        )

    async def execute(self) -> RunSummary:
        """Execute the scripts."""
        self.check()

        scripts = [script.strip() for script in self.options.scripts if script.strip()]
        tasks = plan_tasks(self.workspace.graph, self.get_workspaces(), scripts)

        concurrency = self.options.concurrency
        scheduler = TaskScheduler(
            concurrency=self.config.concurrency if concurrency is None else concurrency,
            client=self.config.client,
            env=dict(self.config.env),
        )
        return await scheduler.execute(tasks, on_result=self.on_result)


async def run_scripts(
    workspace: Workspace,
    scripts: list[str],
    *,
    workspaces: list[str] | None = None,
    all_workspaces: bool = False,
    base: str | None = None,
    head: str | None = None,
    concurrency: int | None = None,
    transitive: bool | None = None,
    on_result: Callable[[TaskResult], None] | None = None,
) -> RunSummary:
    """Convenience function to run scripts.

    Args:
        workspace: Workspace to run in.
        scripts: Script requests, optionally with arguments.
        workspaces: Run only in these workspaces.
        all_workspaces: Run in every workspace.
        base: Base git reference for the affected set.
        head: Head git reference for the affected set.
        concurrency: Parallel tasks (0 = CPU count, negative = CPU count minus n).
        transitive: Include transitive dependents in the affected set.
        on_result: Callback for each completed task.

    Returns:
        Run summary with all task results.
    """
    context = CommandContext(workspace=workspace)
    options = RunOptions(
        scripts=scripts,
        workspaces=workspaces,
        all_workspaces=all_workspaces,
        base=base,
        head=head,
        concurrency=concurrency,
        transitive=transitive,
    )
    cmd = RunCommand(context, options, on_result=on_result)
    return await cmd.execute()


async def handle_run_command(
    workspace: Workspace,
    scripts: list[str],
    *,
    console: Console,
    error_console: Console,
    workspaces: list[str] | None = None,
    all_workspaces: bool = False,
    base: str | None = None,
    head: str | None = None,
    concurrency: int | None = None,
    transitive: bool | None = None,
    print_success: bool | None = None,
) -> None:
    """Run scripts and report results to the console.

    Raises:
        typer.Exit: With status 1 if any task failed or the run could not start.
    """
    from ws_affected.cli.output import TaskReporter

    if print_success is None:
        print_success = workspace.config.print_success
    reporter = TaskReporter(console, print_success=print_success)

    try:
        summary = await run_scripts(
            workspace,
            scripts,
            workspaces=workspaces,
            all_workspaces=all_workspaces,
            base=base,
            head=head,
            concurrency=concurrency,
            transitive=transitive,
            on_result=reporter.task_finished,
        )
    except WsAffectedError as err:
        error_console.print(f"[red]Error:[/red] {err.message}")
        raise typer.Exit(1) from err

    reporter.summary(summary)
    if not summary.all_success:
        raise typer.Exit(summary.exit_code)
