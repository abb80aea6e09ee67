"""Process execution for workspace scripts."""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import shlex
import time
from collections.abc import Callable, Sequence
from pathlib import Path

from ws_affected.execution.results import Task, TaskResult

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 65536


async def _read_stream(
    stream: asyncio.StreamReader,
    buffer: list[str],
    callback: Callable[[str], None] | None = None,
) -> None:
    """Read from stream in chunks into a shared buffer.

    Chunked reads put no limit on line length. The callback still receives
    complete lines.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    pending = ""
    while True:
        chunk = await stream.read(READ_CHUNK_SIZE)
        text = decoder.decode(chunk, final=not chunk)
        if text:
            buffer.append(text)
            if callback:
                pending += text
                *lines, pending = pending.split("\n")
                for line in lines:
                    callback(line.rstrip())
        if not chunk:
            break
    if callback and pending:
        callback(pending.rstrip())


async def run_command(
    argv: Sequence[str],
    cwd: Path,
    *,
    env: dict[str, str] | None = None,
    on_output: Callable[[str], None] | None = None,
) -> tuple[int, str, int]:
    """Run a process without a shell and capture its combined output.

    Both output streams feed one buffer, so lines from stdout and stderr are
    interleaved in arrival order.

    Args:
        argv: Program and arguments.
        cwd: Working directory.
        env: Environment variables (merged with current env).
        on_output: Callback for each output line.

    Returns:
        Tuple of (exit_code, output, duration_ms). The exit code is -1 when
        the process could not be started.
    """
    run_env = os.environ.copy()
    if env:
        run_env.update(env)

    start_time = time.monotonic()

    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=run_env,
        )
    except OSError as e:
        duration_ms = int((time.monotonic() - start_time) * 1000)
        return -1, str(e), duration_ms

    if process.stdout is None or process.stderr is None:
        raise RuntimeError("Process stdout/stderr is None")

    buffer: list[str] = []
    try:
        await asyncio.gather(
            _read_stream(process.stdout, buffer, on_output),
            _read_stream(process.stderr, buffer, on_output),
            process.wait(),
        )
    finally:
        # A reader that raised leaves the child running
        if process.returncode is None:
            process.kill()
            await process.wait()

    duration_ms = int((time.monotonic() - start_time) * 1000)
    return process.returncode or 0, "".join(buffer).strip(), duration_ms


def build_argv(task: Task, client: str = "npm") -> list[str]:
    """Build the package-manager invocation for a task.

    Raises:
        ValueError: If the script request has unbalanced quotes.
    """
    return [client, "run", "-w", task.workspace.name, "--if-present", *shlex.split(task.script)]


async def run_task(
    task: Task,
    *,
    client: str = "npm",
    env: dict[str, str] | None = None,
    on_output: Callable[[str], None] | None = None,
) -> TaskResult:
    """Run a task's script in its workspace.

    Args:
        task: Task to run.
        client: Package manager executable.
        env: Additional environment variables.
        on_output: Callback for each output line.

    Returns:
        Task result. Never raises for process failures.
    """
    try:
        argv = build_argv(task, client)
    except ValueError as e:
        return TaskResult.failure_result(task, exit_code=-1, output=f"Invalid script: {e}")

    command = shlex.join(argv)

    run_env = {
        "FORCE_COLOR": "1",
        "WS_AFFECTED_WORKSPACE": task.workspace.name,
        "WS_AFFECTED_WORKSPACE_PATH": str(task.workspace.directory),
    }
    if env:
        run_env.update(env)

    logger.debug("Running %s in %s", command, task.workspace.directory)
    exit_code, output, duration_ms = await run_command(
        argv,
        cwd=task.workspace.directory,
        env=run_env,
        on_output=on_output,
    )

    if exit_code == 0:
        return TaskResult.success_result(
            task, output=output, duration_ms=duration_ms, command=command
        )
    return TaskResult.failure_result(
        task, exit_code=exit_code, output=output, duration_ms=duration_ms, command=command
    )
