"""Bounded-concurrency task scheduling."""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections.abc import AsyncIterator, Callable, Iterable, Sequence

from ws_affected.execution.results import RunSummary, Task, TaskResult
from ws_affected.execution.runner import run_task
from ws_affected.workspace.graph import DependencyGraph

logger = logging.getLogger(__name__)


def resolve_concurrency(concurrency: int, parallelism: int | None = None) -> int:
    """Turn a requested concurrency into an effective worker count.

    Args:
        concurrency: 0 for the host's parallelism, a negative number to run
            that many fewer than the host's parallelism, or a positive count.
        parallelism: Host parallelism; defaults to the CPU count.

    Returns:
        Worker count, at least 1.
    """
    if parallelism is None:
        parallelism = os.cpu_count() or 1
    if concurrency == 0:
        return max(1, parallelism)
    if concurrency < 0:
        return max(1, parallelism + concurrency)
    return concurrency


def plan_tasks(
    graph: DependencyGraph,
    workspaces: Iterable[str],
    scripts: Sequence[str],
) -> list[Task]:
    """Build tasks for every (workspace, script) pair.

    Outer loop over workspaces, inner loop over scripts.

    Raises:
        UnknownWorkspaceError: If a workspace name is not in the graph.
    """
    nodes = [graph.get(name) for name in workspaces]
    return [Task(workspace=node, script=script) for node in nodes for script in scripts]


class TaskScheduler:
    """Run tasks as external processes with bounded parallelism.

    A fixed pool of workers pulls tasks from a FIFO queue, so tasks start in
    submission order and at most ``concurrency`` processes are in flight.
    Failures never cancel other tasks: every submitted task runs to
    completion. There is no per-task timeout, so a hung process holds its
    worker until it exits.

    Attributes:
        concurrency: Effective maximum number of concurrent processes.
        client: Package manager executable used to run scripts.
        env: Extra environment variables for every task.
    """

    def __init__(
        self,
        concurrency: int = 0,
        *,
        client: str = "npm",
        env: dict[str, str] | None = None,
    ) -> None:
        """Initialize scheduler.

        Args:
            concurrency: Requested concurrency, see ``resolve_concurrency``.
            client: Package manager executable.
            env: Extra environment variables.
        """
        self.concurrency = resolve_concurrency(concurrency)
        self.client = client
        self.env = dict(env or {})
        logger.debug("Task concurrency resolved to %d", self.concurrency)

    async def _run(self, task: Task) -> TaskResult:
        try:
            return await run_task(task, client=self.client, env=self.env)
        except Exception as e:
            # Every queued task must produce exactly one result
            logger.exception("Task %s raised", task.label)
            return TaskResult.failure_result(task, exit_code=-1, output=str(e))

    async def _worker(
        self,
        queue: asyncio.Queue[Task | None],
        done: asyncio.Queue[TaskResult],
    ) -> None:
        while True:
            task = await queue.get()
            if task is None:
                return
            await done.put(await self._run(task))

    async def stream(self, tasks: Sequence[Task]) -> AsyncIterator[TaskResult]:
        """Stream results of executed tasks as they complete.

        Tasks whose workspace does not define the script are skipped without
        taking a worker and yield nothing.

        Args:
            tasks: Tasks in submission order.

        Yields:
            Task results in completion order.
        """
        runnable = [task for task in tasks if not task.is_noop]
        if not runnable:
            return

        queue: asyncio.Queue[Task | None] = asyncio.Queue()
        done: asyncio.Queue[TaskResult] = asyncio.Queue()

        worker_count = min(self.concurrency, len(runnable))
        for task in runnable:
            queue.put_nowait(task)
        for _ in range(worker_count):
            queue.put_nowait(None)

        workers = [
            asyncio.create_task(self._worker(queue, done)) for _ in range(worker_count)
        ]
        try:
            for _ in range(len(runnable)):
                yield await done.get()
            await asyncio.gather(*workers)
        finally:
            for worker in workers:
                if not worker.done():
                    worker.cancel()

    async def execute(
        self,
        tasks: Sequence[Task],
        *,
        on_result: Callable[[TaskResult], None] | None = None,
    ) -> RunSummary:
        """Run all tasks and wait for every one of them.

        Args:
            tasks: Tasks in submission order.
            on_result: Called with each executed result as it completes.

        Returns:
            Summary built after all tasks have finished.
        """
        start_time = time.monotonic()
        summary = RunSummary(
            skipped=[TaskResult.skipped_result(task) for task in tasks if task.is_noop]
        )

        async for result in self.stream(tasks):
            summary.results.append(result)
            if on_result:
                on_result(result)

        summary.duration_ms = int((time.monotonic() - start_time) * 1000)
        return summary
