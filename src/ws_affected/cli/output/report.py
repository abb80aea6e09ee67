"""Console rendering of task results."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from ws_affected.execution.results import RunSummary, TaskResult


def format_elapsed(duration_ms: int) -> str:
    """Format a batch duration: seconds, then minutes, then hours."""
    if duration_ms < 60_000:
        return f"{duration_ms / 1000:.2f}s"
    if duration_ms < 3_600_000:
        minutes, rest = divmod(duration_ms, 60_000)
        return f"{minutes}m {rest // 1000}s"
    hours, rest = divmod(duration_ms, 3_600_000)
    return f"{hours}h {rest // 60_000}m"


class TaskReporter:
    """Print task results as they complete and a final summary.

    Failures are always printed with their output. Successes print a single
    line unless ``print_success`` is set.
    """

    def __init__(self, console: Console, *, print_success: bool = False) -> None:
        self.console = console
        self.print_success = print_success

    def _print_block(self, result: TaskResult, color: str, mark: str, status: str) -> None:
        self.console.print(
            f"[bold {color}]{mark}[/bold {color}] {escape(result.label)} "
            f"[yellow]$[/yellow] {escape(result.command)}"
        )
        if result.output:
            for line in result.output.splitlines():
                self.console.print(f"[{color}]│[/{color}] {escape(line)}")
        self.console.print(
            f"[{color}]└─[/{color}] [bold {color}]{status}[/bold {color}] "
            f"[dim]({result.duration_ms}ms)[/dim]"
        )

    def task_finished(self, result: TaskResult) -> None:
        """Render one completed task."""
        if result.skipped:
            return
        if result.failed:
            self._print_block(result, "red", "✖", "Failed")
            if self.print_success:
                self.console.print()
        elif self.print_success:
            self._print_block(result, "green", "✓", "Success")
            self.console.print()
        else:
            self.console.print(
                f"[bold green]✔[/bold green] {escape(result.label)} "
                f"[dim]({result.duration_ms}ms)[/dim]"
            )

    def summary(self, summary: RunSummary) -> None:
        """Render total time and the list of failed tasks."""
        self.console.print(
            f"\n⏱️  Took {format_elapsed(summary.duration_ms)} ({summary.executed_count} tasks)"
        )
        if summary.failures:
            self.console.print()
            for failure in summary.failures:
                self.console.print(f"[bold red]✖ {escape(failure)}[/bold red]")
