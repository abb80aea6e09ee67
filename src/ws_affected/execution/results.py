"""Task and result types."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto

from ws_affected.workspace.node import WorkspaceNode


def leading_token(script: str) -> str:
    """Script name part of a script request such as ``test --watch=false``."""
    parts = script.split(maxsplit=1)
    return parts[0] if parts else ""


class TaskStatus(Enum):
    """Outcome of a single task."""

    SUCCESS = auto()
    FAILURE = auto()
    SKIPPED = auto()


@dataclass(frozen=True)
class Task:
    """A script requested in one workspace.

    Attributes:
        workspace: Workspace to run in.
        script: Script request; may carry extra arguments after the name.
    """

    workspace: WorkspaceNode
    script: str

    @property
    def script_name(self) -> str:
        return leading_token(self.script)

    @property
    def label(self) -> str:
        return f"{self.script_name}:{self.workspace.name}"

    @property
    def is_noop(self) -> bool:
        """True when the workspace does not define the script."""
        return not self.workspace.has_script(self.script_name)


@dataclass
class TaskResult:
    """Result of running one task.

    Attributes:
        workspace_name: Workspace the task ran in.
        script: Full script request, including extra arguments.
        status: Task outcome.
        exit_code: Process exit code; -1 if the process could not be spawned.
        output: Combined stdout and stderr, stripped.
        duration_ms: Wall-clock time from spawn to exit.
        command: Command line that was executed.
    """

    workspace_name: str
    script: str
    status: TaskStatus
    exit_code: int = 0
    output: str = ""
    duration_ms: int = 0
    command: str = ""

    @property
    def success(self) -> bool:
        return self.status == TaskStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status == TaskStatus.FAILURE

    @property
    def skipped(self) -> bool:
        return self.status == TaskStatus.SKIPPED

    @property
    def script_defined(self) -> bool:
        """Whether the workspace defines the script at all."""
        return not self.skipped

    @property
    def script_name(self) -> str:
        return leading_token(self.script)

    @property
    def label(self) -> str:
        return f"{self.script_name}:{self.workspace_name}"

    @classmethod
    def success_result(
        cls,
        task: Task,
        *,
        output: str = "",
        duration_ms: int = 0,
        command: str = "",
    ) -> TaskResult:
        return cls(
            workspace_name=task.workspace.name,
            script=task.script,
            status=TaskStatus.SUCCESS,
            exit_code=0,
            output=output,
            duration_ms=duration_ms,
            command=command,
        )

    @classmethod
    def failure_result(
        cls,
        task: Task,
        *,
        exit_code: int,
        output: str = "",
        duration_ms: int = 0,
        command: str = "",
    ) -> TaskResult:
        return cls(
            workspace_name=task.workspace.name,
            script=task.script,
            status=TaskStatus.FAILURE,
            exit_code=exit_code,
            output=output,
            duration_ms=duration_ms,
            command=command,
        )

    @classmethod
    def skipped_result(cls, task: Task) -> TaskResult:
        return cls(
            workspace_name=task.workspace.name,
            script=task.script,
            status=TaskStatus.SKIPPED,
        )


@dataclass
class RunSummary:
    """Aggregate result of a scheduler run.

    Attributes:
        results: Executed task results, in completion order.
        skipped: Results of tasks whose script was not defined, in
            submission order.
        duration_ms: Wall-clock time of the whole batch.
    """

    results: list[TaskResult] = field(default_factory=list)
    skipped: list[TaskResult] = field(default_factory=list)
    duration_ms: int = 0

    def __iter__(self) -> Iterator[TaskResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    @property
    def executed_count(self) -> int:
        return len(self.results)

    @property
    def failures(self) -> list[str]:
        """Short descriptors of failed tasks, in completion order."""
        return [f"{r.label} failed" for r in self.results if r.failed]

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results if r.failed)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def all_success(self) -> bool:
        return self.failure_count == 0

    @property
    def exit_code(self) -> int:
        return 0 if self.all_success else 1
