"""Invocation of the target project's test runner.

Two modes:

- manifest: run the list command (``cargo test -- --list`` by default)
  and return its stdout.
- single test: run the test command with ``{test}`` replaced by one
  test identifier and return what the test printed.

Every call blocks until the child exits.  No timeout applies unless
one is configured, in which case the child's whole process group is
killed when it expires.
"""

from __future__ import annotations

import logging
import os
import shlex
import signal
import subprocess
from dataclasses import dataclass
from pathlib import Path

from blockbench.bench.config import BenchConfig
from blockbench.errors import InvocationError

log = logging.getLogger("blockbench")


# ---------------------------------------------------------------------------
# CommandResult
# ---------------------------------------------------------------------------


@dataclass
class CommandResult:
    """Decoded output of one finished runner process."""

    command: list[str]
    exit_code: int
    stdout: str
    stderr: str


# ---------------------------------------------------------------------------
# Core execution
# ---------------------------------------------------------------------------


def run_command(
    command: list[str],
    *,
    cwd: Path,
    env: dict[str, str] | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run *command* to completion and decode its output as UTF-8.

    Args:
        command: Argument list; no shell is involved.
        cwd: Working directory (the target project root).
        env: Variables layered over ``os.environ``.
        timeout: Seconds before the process group is killed.  ``None``
            waits indefinitely.

    Raises:
        InvocationError: If the process cannot be started, times out,
            or writes output that is not valid UTF-8.
    """
    run_env = dict(os.environ)
    if env:
        run_env.update(env)

    log.debug("Running: %s (in %s)", shlex.join(command), cwd)
    try:
        proc = subprocess.Popen(
            command,
            cwd=str(cwd),
            env=run_env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as exc:
        raise InvocationError(command, f"Failed to launch test runner: {exc}") from exc

    try:
        stdout_b, stderr_b = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        _kill_process_group(proc.pid)
        try:
            proc.communicate(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.communicate()
        raise InvocationError(command, f"Test runner timed out after {timeout}s") from exc

    try:
        stdout = stdout_b.decode("utf-8")
        stderr = stderr_b.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvocationError(command, f"Test runner output is not valid UTF-8: {exc}") from exc

    log.debug("Exit status %d: %s", proc.returncode, shlex.join(command))
    return CommandResult(
        command=command,
        exit_code=proc.returncode,
        stdout=stdout,
        stderr=stderr,
    )


def _kill_process_group(pid: int) -> None:
    """Kill the runner and any test binaries it spawned."""
    try:
        os.killpg(os.getpgid(pid), signal.SIGKILL)
    except OSError:
        pass


# ---------------------------------------------------------------------------
# TestInvoker
# ---------------------------------------------------------------------------


class TestInvoker:
    """Runs the target project's test runner in manifest or single-test mode."""

    __test__ = False  # Not a pytest test class despite the name.

    def __init__(self, config: BenchConfig) -> None:
        self.config = config

    @property
    def project_path(self) -> Path:
        return self.config.project_path

    def list_command(self) -> list[str]:
        return shlex.split(self.config.list_command)

    def test_command(self, test_id: str) -> list[str]:
        """Build the argument list for one test.

        The placeholder is substituted after splitting so identifiers
        are passed through verbatim as a single argument.
        """
        return [
            arg.replace("{test}", test_id) for arg in shlex.split(self.config.test_command)
        ]

    def manifest(self) -> str:
        """Return the runner's list of tests as text.

        Raises:
            InvocationError: If the list command cannot run or exits
                with a non-zero status.
        """
        result = run_command(
            self.list_command(),
            cwd=self.project_path,
            env=self.config.env,
            timeout=self.config.timeout,
        )
        if result.exit_code != 0:
            detail = result.stderr.strip().splitlines()[-1:] or ["no error output"]
            raise InvocationError(
                result.command,
                f"Listing tests failed with exit status {result.exit_code}: {detail[0]}",
            )
        return result.stdout

    def run_test(self, test_id: str) -> str:
        """Run one test and return its captured output.

        A failing test is not an error here; whether its output holds
        usable metrics is decided by the extractor.
        """
        result = run_command(
            self.test_command(test_id),
            cwd=self.project_path,
            env=self.config.env,
            timeout=self.config.timeout,
        )
        if result.exit_code != 0:
            log.debug("Test %s exited with status %d", test_id, result.exit_code)
        if self.config.include_stderr and result.stderr:
            return result.stdout + result.stderr
        return result.stdout
