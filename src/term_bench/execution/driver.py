"""Execution driver for a single emulator run.

Launches the emulator-under-test inside a sandbox, feeding it a cached
workload artifact, and times the interval from spawn to exit. The sandbox
resource lock is taken and the sandbox started before the timer begins;
both are released on every exit path, including timeout and cancellation.
"""

from __future__ import annotations

import asyncio
import shlex
import time
from pathlib import Path
from typing import TYPE_CHECKING

from term_bench.config.defaults import (
    DEFAULT_EMULATOR_COMMAND,
    DEFAULT_KILL_GRACE_SECONDS,
    DEFAULT_RUN_TIMEOUT_SECONDS,
    DEFAULT_SHELL,
)
from term_bench.execution.exceptions import EmulatorUnavailable, ExecutionError
from term_bench.logging_config import get_logger
from term_bench.models.results import ExecutionResult, ExitStatus
from term_bench.process import terminate_process
from term_bench.sandbox.lock import SandboxLock
from term_bench.utils import utc_now

if TYPE_CHECKING:
    from term_bench.config.settings import Settings
    from term_bench.models.benchmark import BenchmarkSpec
    from term_bench.sandbox.base import BaseSandbox

__all__ = ["ExecutionDriver", "expand_command"]

logger = get_logger(__name__)


def expand_command(template: str, values: dict[str, str]) -> list[str]:
    """Split a command template and substitute ``{placeholder}`` tokens.

    A token consisting of exactly one placeholder receives the raw value.
    Placeholders embedded in a larger token (e.g. the ``-c`` string passed
    to the shell) receive the shell-quoted value.

    Args:
        template: Command line with placeholders, split with shlex.
        values: Placeholder name to value.

    Returns:
        The argument vector.

    Example:
        >>> expand_command("term -e {shell} -c 'cat {artifact}'",
        ...                {"shell": "/bin/sh", "artifact": "/tmp/a b.vte"})
        ['term', '-e', '/bin/sh', '-c', "cat '/tmp/a b.vte'"]

    """
    argv: list[str] = []
    for token in shlex.split(template):
        for key, value in values.items():
            placeholder = "{" + key + "}"
            if token == placeholder:
                token = value
                break
            token = token.replace(placeholder, shlex.quote(value))
        argv.append(token)
    return argv


class ExecutionDriver:
    """Runs the emulator-under-test against one artifact and times it.

    The driver owns no persistent state. Runs on the same host resource
    are serialized by one SandboxLock per resource name.

    Attributes:
        sandbox: Default sandbox for runs that do not pass their own.
        emulator_command: Default emulator command template.

    """

    def __init__(
        self,
        sandbox: BaseSandbox,
        emulator_command: str = DEFAULT_EMULATOR_COMMAND,
        shell: str = DEFAULT_SHELL,
        timeout_seconds: float = DEFAULT_RUN_TIMEOUT_SECONDS,
        kill_grace_seconds: float = DEFAULT_KILL_GRACE_SECONDS,
        lock_dir: Path | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            sandbox: Default sandbox for runs.
            emulator_command: Command template; ``{shell}``, ``{artifact}``,
                ``{width}`` and ``{height}`` are substituted per run.
            shell: Value substituted for ``{shell}``.
            timeout_seconds: Hard wall-clock cutoff for one run.
            kill_grace_seconds: Delay between SIGTERM and SIGKILL at the cutoff.
            lock_dir: Directory for host-wide lock files.

        """
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self.sandbox = sandbox
        self.emulator_command = emulator_command
        self._shell = shell
        self._timeout_seconds = timeout_seconds
        self._kill_grace_seconds = kill_grace_seconds
        self._lock_dir = lock_dir or Path("/tmp/term-bench")
        self._locks: dict[str, SandboxLock] = {}

    @classmethod
    def from_settings(cls, settings: Settings, sandbox: BaseSandbox) -> ExecutionDriver:
        """Create a driver from application settings."""
        return cls(
            sandbox=sandbox,
            emulator_command=settings.emulator.command,
            shell=settings.emulator.shell,
            timeout_seconds=settings.emulator.timeout_seconds,
            kill_grace_seconds=settings.emulator.kill_grace_seconds,
            lock_dir=settings.sandbox.lock_dir,
        )

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    def lock_for(self, sandbox: BaseSandbox) -> SandboxLock:
        """Return the lock guarding the host resource ``sandbox`` occupies."""
        lock = self._locks.get(sandbox.resource)
        if lock is None:
            lock = SandboxLock(sandbox.resource, self._lock_dir)
            self._locks[sandbox.resource] = lock
        return lock

    def build_command(
        self,
        artifact_path: Path,
        spec: BenchmarkSpec,
        emulator_command: str | None = None,
    ) -> list[str]:
        """Expand the emulator command template for one run."""
        argv = expand_command(
            emulator_command or self.emulator_command,
            {
                "shell": self._shell,
                "artifact": str(artifact_path),
                "width": str(spec.terminal_width),
                "height": str(spec.terminal_height),
            },
        )
        if not argv:
            raise EmulatorUnavailable("Emulator command is empty")
        return argv

    async def run_once(
        self,
        artifact_path: Path,
        spec: BenchmarkSpec,
        emulator_command: str | None = None,
        sandbox: BaseSandbox | None = None,
    ) -> ExecutionResult:
        """Run the emulator once against an artifact.

        Args:
            artifact_path: Complete workload artifact to replay.
            spec: The benchmark the artifact belongs to; its geometry sizes
                the sandbox display.
            emulator_command: Template overriding the driver default.
            sandbox: Sandbox overriding the driver default.

        Returns:
            ExecutionResult with a success, failure(code) or timeout status.

        Raises:
            EmulatorUnavailable: If the emulator executable cannot be found.
            SandboxUnavailable: If the sandbox cannot be started.
            ExecutionError: If the artifact does not exist.

        """
        sandbox = sandbox or self.sandbox
        argv = self.build_command(artifact_path, spec, emulator_command)

        if not artifact_path.is_file():
            raise ExecutionError(f"Workload artifact not found: {artifact_path}")
        if not sandbox.has_executable(argv[0]):
            raise EmulatorUnavailable(
                f"Emulator '{argv[0]}' is not installed or not in PATH"
            )
        sandbox.ensure_available()

        async with self.lock_for(sandbox):
            async with sandbox.session(spec.geometry):
                await self.require_executable(sandbox, argv[0])
                return await self._spawn_and_time(sandbox, argv, spec)

    @staticmethod
    async def require_executable(sandbox: BaseSandbox, executable: str) -> None:
        """Raise EmulatorUnavailable unless the started sandbox can launch ``executable``."""
        if not await sandbox.executable_available(executable):
            raise EmulatorUnavailable(
                f"Emulator '{executable}' is not installed inside the '{sandbox.name}' sandbox"
            )

    async def _spawn_and_time(
        self,
        sandbox: BaseSandbox,
        argv: list[str],
        spec: BenchmarkSpec,
    ) -> ExecutionResult:
        cmd = sandbox.wrap_command(argv)
        logger.debug("run_starting", benchmark=spec.label, command=shlex.join(cmd))

        timestamp = utc_now()
        started = time.perf_counter()
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
                env=sandbox.environment(),
                start_new_session=True,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise EmulatorUnavailable(f"Cannot start emulator '{cmd[0]}': {e}") from e

        try:
            return_code = await asyncio.wait_for(
                proc.wait(), timeout=self._timeout_seconds
            )
        except asyncio.TimeoutError:
            elapsed = time.perf_counter() - started
            await terminate_process(proc, self._kill_grace_seconds)
            logger.warning(
                "run_timeout",
                benchmark=spec.label,
                timeout_seconds=self._timeout_seconds,
                elapsed=round(elapsed, 3),
            )
            return ExecutionResult(
                spec=spec,
                wall_clock_seconds=elapsed,
                timestamp=timestamp,
                exit_status=ExitStatus.timeout(),
            )
        except BaseException:
            await terminate_process(proc, self._kill_grace_seconds)
            raise

        elapsed = time.perf_counter() - started
        # Reap anything the emulator left behind in its process group.
        await terminate_process(proc, self._kill_grace_seconds)

        status = ExitStatus.success() if return_code == 0 else ExitStatus.failure(return_code)
        log = logger.debug if status.ok else logger.warning
        log(
            "run_complete",
            benchmark=spec.label,
            seconds=round(elapsed, 4),
            status=status.describe(),
        )
        return ExecutionResult(
            spec=spec,
            wall_clock_seconds=elapsed,
            timestamp=timestamp,
            exit_status=status,
        )
