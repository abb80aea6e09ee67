"""CLI output helpers."""

from ws_affected.cli.output.report import TaskReporter, format_elapsed

__all__ = ["TaskReporter", "format_elapsed"]
