"""Test bounded-concurrency scheduling."""

import asyncio
from pathlib import Path
from unittest.mock import patch

import pytest

from ws_affected.errors import UnknownWorkspaceError
from ws_affected.execution.results import Task, TaskResult
from ws_affected.execution.scheduler import TaskScheduler, plan_tasks, resolve_concurrency
from ws_affected.workspace.graph import DependencyGraph
from ws_affected.workspace.node import WorkspaceNode


def make_node(name: str, scripts: tuple[str, ...] = ("lint",)) -> WorkspaceNode:
    return WorkspaceNode(
        name=name,
        directory=Path("/repo/packages") / name,
        scripts={script: f"echo {script}" for script in scripts},
    )


class FakeRunner:
    """Stands in for run_task and records how many tasks overlap."""

    def __init__(self, delays: dict[str, float] | None = None, failing: set[str] | None = None):
        self.delays = delays or {}
        self.failing = failing or set()
        self.in_flight = 0
        self.max_in_flight = 0
        self.started: list[str] = []

    async def __call__(self, task: Task, **kwargs) -> TaskResult:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.started.append(task.label)
        try:
            await asyncio.sleep(self.delays.get(task.workspace.name, 0.01))
        finally:
            self.in_flight -= 1
        if task.workspace.name in self.failing:
            return TaskResult.failure_result(task, exit_code=1, output="boom", duration_ms=10)
        return TaskResult.success_result(task, output="ok", duration_ms=10)


@pytest.fixture
def nodes():
    return [make_node(f"pkg{i}") for i in range(8)]


class TestResolveConcurrency:
    """Tests for resolve_concurrency."""

    def test_zero_uses_parallelism(self):
        assert resolve_concurrency(0, parallelism=4) == 4

    def test_negative_reduces_parallelism(self):
        assert resolve_concurrency(-1, parallelism=4) == 3

    def test_negative_is_floored_at_one(self):
        assert resolve_concurrency(-10, parallelism=4) == 1

    def test_positive_is_used_as_is(self):
        assert resolve_concurrency(16, parallelism=4) == 16

    def test_defaults_to_cpu_count(self):
        with patch("ws_affected.execution.scheduler.os.cpu_count", return_value=4):
            assert resolve_concurrency(0) == 4
            assert TaskScheduler(concurrency=-1).concurrency == 3

    def test_unknown_cpu_count(self):
        with patch("ws_affected.execution.scheduler.os.cpu_count", return_value=None):
            assert resolve_concurrency(0) == 1


class TestPlanTasks:
    """Tests for plan_tasks."""

    def test_workspace_major_order(self):
        graph = DependencyGraph([make_node("a"), make_node("b")])

        tasks = plan_tasks(graph, ["b", "a"], ["lint", "test --watch=false"])

        assert [(t.workspace.name, t.script) for t in tasks] == [
            ("b", "lint"),
            ("b", "test --watch=false"),
            ("a", "lint"),
            ("a", "test --watch=false"),
        ]

    def test_unknown_workspace(self):
        graph = DependencyGraph([make_node("a")])

        with pytest.raises(UnknownWorkspaceError):
            plan_tasks(graph, ["a", "missing"], ["lint"])

    def test_script_name_is_leading_token(self):
        task = Task(make_node("a", scripts=("test",)), "test --watch=false")

        assert task.script_name == "test"
        assert task.label == "test:a"
        assert not task.is_noop


class TestTaskScheduler:
    """Tests for TaskScheduler."""

    @pytest.mark.parametrize("concurrency", [1, 2, 3, 8])
    async def test_concurrency_bound(self, nodes, concurrency):
        runner = FakeRunner()
        tasks = [Task(node, "lint") for node in nodes]

        with patch("ws_affected.execution.scheduler.run_task", new=runner):
            summary = await TaskScheduler(concurrency=concurrency).execute(tasks)

        assert summary.executed_count == 8
        assert runner.max_in_flight <= concurrency
        assert runner.max_in_flight == min(concurrency, len(tasks))

    async def test_tasks_start_in_submission_order(self, nodes):
        runner = FakeRunner()
        tasks = [Task(node, "lint") for node in nodes]

        with patch("ws_affected.execution.scheduler.run_task", new=runner):
            await TaskScheduler(concurrency=1).execute(tasks)

        assert runner.started == [t.label for t in tasks]

    async def test_results_in_completion_order(self):
        runner = FakeRunner(delays={"slow": 0.1, "fast": 0.0})
        tasks = [Task(make_node("slow"), "lint"), Task(make_node("fast"), "lint")]

        with patch("ws_affected.execution.scheduler.run_task", new=runner):
            summary = await TaskScheduler(concurrency=2).execute(tasks)

        assert [r.workspace_name for r in summary.results] == ["fast", "slow"]

    async def test_missing_script_is_a_noop(self):
        runner = FakeRunner()
        tasks = [
            Task(make_node("with-lint", scripts=("lint",)), "lint"),
            Task(make_node("without-lint", scripts=("test",)), "lint"),
        ]

        with patch("ws_affected.execution.scheduler.run_task", new=runner):
            summary = await TaskScheduler(concurrency=2).execute(tasks)

        assert summary.executed_count == 1
        assert runner.started == ["lint:with-lint"]
        assert [r.workspace_name for r in summary.skipped] == ["without-lint"]
        assert summary.skipped[0].script_defined is False
        assert summary.all_success

    async def test_noops_do_not_hold_a_slot(self):
        runner = FakeRunner()
        tasks = [Task(make_node(f"empty{i}", scripts=()), "lint") for i in range(5)]
        tasks.append(Task(make_node("real"), "lint"))

        with patch("ws_affected.execution.scheduler.run_task", new=runner):
            summary = await TaskScheduler(concurrency=1).execute(tasks)

        assert runner.started == ["lint:real"]
        assert summary.executed_count == 1
        assert len(summary.skipped) == 5

    async def test_empty_script_command_is_a_noop(self):
        node = WorkspaceNode(name="a", directory=Path("/repo/a"), scripts={"lint": ""})

        assert Task(node, "lint").is_noop

    async def test_failure_does_not_stop_other_tasks(self, nodes):
        runner = FakeRunner(failing={"pkg2"})
        tasks = [Task(node, "lint") for node in nodes]

        with patch("ws_affected.execution.scheduler.run_task", new=runner):
            summary = await TaskScheduler(concurrency=2).execute(tasks)

        assert summary.executed_count == 8
        assert summary.failure_count == 1
        assert summary.success_count == 7
        assert summary.failures == ["lint:pkg2 failed"]
        assert summary.exit_code == 1

    async def test_all_success_exit_code(self, nodes):
        with patch("ws_affected.execution.scheduler.run_task", new=FakeRunner()):
            summary = await TaskScheduler(concurrency=4).execute(
                [Task(node, "lint") for node in nodes]
            )

        assert summary.failures == []
        assert summary.exit_code == 0
        assert summary.duration_ms >= 0

    async def test_on_result_called_per_executed_task(self, nodes):
        seen = []
        tasks = [Task(node, "lint") for node in nodes[:3]]
        tasks.append(Task(make_node("no-lint", scripts=()), "lint"))

        with patch("ws_affected.execution.scheduler.run_task", new=FakeRunner()):
            await TaskScheduler(concurrency=2).execute(tasks, on_result=seen.append)

        assert sorted(r.workspace_name for r in seen) == ["pkg0", "pkg1", "pkg2"]

    async def test_stream(self, nodes):
        tasks = [Task(node, "lint") for node in nodes]

        with patch("ws_affected.execution.scheduler.run_task", new=FakeRunner()):
            results = [r async for r in TaskScheduler(concurrency=3).stream(tasks)]

        assert len(results) == 8

    async def test_no_tasks(self):
        summary = await TaskScheduler(concurrency=2).execute([])

        assert summary.executed_count == 0
        assert summary.exit_code == 0

    async def test_runner_exception_becomes_failure(self):
        tasks = [Task(make_node("a"), "lint"), Task(make_node("b"), "lint")]

        async def flaky(task, **kwargs):
            if task.workspace.name == "a":
                raise RuntimeError("exploded")
            return TaskResult.success_result(task)

        with patch("ws_affected.execution.scheduler.run_task", new=flaky):
            summary = await TaskScheduler(concurrency=1).execute(tasks)

        assert summary.failures == ["lint:a failed"]
        failed = next(r for r in summary.results if r.failed)
        assert failed.output == "exploded"
        assert failed.exit_code == -1

    async def test_passes_client_and_env(self):
        calls = []

        async def record(task, **kwargs):
            calls.append(kwargs)
            return TaskResult.success_result(task)

        with patch("ws_affected.execution.scheduler.run_task", new=record):
            scheduler = TaskScheduler(concurrency=1, client="pnpm", env={"CI": "1"})
            await scheduler.execute([Task(make_node("a"), "lint")])

        assert calls == [{"client": "pnpm", "env": {"CI": "1"}}]
