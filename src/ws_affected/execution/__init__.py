"""Task execution."""

from ws_affected.execution.results import RunSummary, Task, TaskResult, TaskStatus
from ws_affected.execution.runner import build_argv, run_command, run_task
from ws_affected.execution.scheduler import TaskScheduler, plan_tasks, resolve_concurrency

__all__ = [
    "RunSummary",
    "Task",
    "TaskResult",
    "TaskScheduler",
    "TaskStatus",
    "build_argv",
    "plan_tasks",
    "resolve_concurrency",
    "run_command",
    "run_task",
]
