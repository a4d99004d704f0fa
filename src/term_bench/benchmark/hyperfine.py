"""Sampling backend that delegates repetition to hyperfine.

hyperfine runs the emulator command with its own warm-up and measured
runs and exports the individual wall-clock times as JSON. The sandbox
is started once around the whole hyperfine invocation, under the same
resource lock the driver uses.
"""

from __future__ import annotations

import asyncio
import json
import shlex
import shutil
import tempfile
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Any

from term_bench.benchmark.collector import validate_run_counts
from term_bench.benchmark.exceptions import MeasurementFailed, TimerUnavailable
from term_bench.config.defaults import DEFAULT_HYPERFINE_COMMAND
from term_bench.execution.exceptions import EmulatorUnavailable
from term_bench.logging_config import bound_context, get_logger
from term_bench.models.results import ExecutionResult, ExitStatus, SampleDistribution
from term_bench.process import terminate_process
from term_bench.utils import utc_now

if TYPE_CHECKING:
    from term_bench.execution.driver import ExecutionDriver
    from term_bench.models.benchmark import BenchmarkSpec
    from term_bench.workload.generator import WorkloadGenerator

__all__ = ["HyperfineCollector", "parse_export"]

logger = get_logger(__name__)

_OUTPUT_TAIL = 500


def parse_export(data: dict[str, Any]) -> list[float]:
    """Extract per-run wall-clock times from a hyperfine JSON export.

    Args:
        data: Parsed ``--export-json`` document.

    Returns:
        Times in seconds, in run order.

    Raises:
        ValueError: If the document has no usable ``results[0].times``.

    """
    results = data.get("results")
    if not isinstance(results, list) or not results:
        raise ValueError("hyperfine export has no results")
    times = results[0].get("times")
    if not isinstance(times, list) or not times:
        raise ValueError("hyperfine export has no per-run times")
    return [float(t) for t in times]


class HyperfineCollector:
    """Measures one spec by running hyperfine inside the sandbox.

    Same ``measure`` contract as TimingCollector. hyperfine aborts on the
    first failing run, so a failure is reported as MeasurementFailed
    without per-run retries.

    """

    def __init__(
        self,
        generator: WorkloadGenerator,
        driver: ExecutionDriver,
        command: str = DEFAULT_HYPERFINE_COMMAND,
    ) -> None:
        self.generator = generator
        self.driver = driver
        self._command = shlex.split(command)

    def build_command(
        self,
        target: str,
        warmup_runs: int,
        measured_runs: int,
        export_path: Path,
    ) -> list[str]:
        """Construct the hyperfine command line for one measurement."""
        return [
            *self._command,
            "-w",
            str(warmup_runs),
            "-r",
            str(measured_runs),
            "-s",
            "basic",
            "--export-json",
            str(export_path),
            target,
        ]

    async def measure(
        self,
        spec: BenchmarkSpec,
        warmup_runs: int,
        measured_runs: int,
    ) -> SampleDistribution:
        """Collect samples for a spec through hyperfine.

        Raises:
            InvalidConfiguration: If the run counts are unusable.
            TimerUnavailable: If hyperfine is not installed.
            EmulatorUnavailable: If the emulator executable cannot be found.
            MeasurementFailed: If hyperfine fails or its export is unusable.

        """
        validate_run_counts(warmup_runs, measured_runs)
        if not self._command or shutil.which(self._command[0]) is None:
            raise TimerUnavailable(
                f"Timing tool '{self._command[0] if self._command else ''}' "
                "is not installed or not in PATH"
            )

        with bound_context(benchmark=spec.label):
            artifact = await self.generator.ensure_artifact(spec)
            sandbox = self.driver.sandbox
            argv = self.driver.build_command(artifact, spec)
            if not sandbox.has_executable(argv[0]):
                raise EmulatorUnavailable(
                    f"Emulator '{argv[0]}' is not installed or not in PATH"
                )
            sandbox.ensure_available()

            async with self.driver.lock_for(sandbox):
                async with sandbox.session(spec.geometry):
                    await self.driver.require_executable(sandbox, argv[0])
                    started_at = utc_now()
                    times = await self._run(
                        spec,
                        shlex.join(sandbox.wrap_command(argv)),
                        warmup_runs,
                        measured_runs,
                        sandbox.environment(),
                    )

        samples = []
        offset = 0.0
        for seconds in times:
            samples.append(
                ExecutionResult(
                    spec=spec,
                    wall_clock_seconds=seconds,
                    timestamp=started_at + timedelta(seconds=offset),
                    exit_status=ExitStatus.success(),
                )
            )
            offset += seconds

        logger.info("hyperfine_measurement_complete", benchmark=spec.label, n=len(samples))
        return SampleDistribution(
            spec=spec,
            samples=samples,
            warmup_discarded=warmup_runs,
            attempts=warmup_runs + len(samples),
        )

    async def _run(
        self,
        spec: BenchmarkSpec,
        target: str,
        warmup_runs: int,
        measured_runs: int,
        env: dict[str, str],
    ) -> list[float]:
        with tempfile.TemporaryDirectory(prefix="term-bench-hyperfine-") as tmp:
            export_path = Path(tmp) / "export.json"
            cmd = self.build_command(target, warmup_runs, measured_runs, export_path)
            logger.debug("hyperfine_starting", command=shlex.join(cmd))

            try:
                proc = await asyncio.create_subprocess_exec(
                    *cmd,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.DEVNULL,
                    stderr=asyncio.subprocess.PIPE,
                    env=env,
                    start_new_session=True,
                )
            except (FileNotFoundError, PermissionError) as e:
                raise TimerUnavailable(f"Cannot start '{cmd[0]}': {e}") from e

            timeout = self.driver.timeout_seconds * (warmup_runs + measured_runs)
            try:
                _, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
            except asyncio.TimeoutError:
                await terminate_process(proc)
                raise MeasurementFailed(
                    spec, f"hyperfine did not finish within {timeout:.0f}s"
                ) from None
            except BaseException:
                await terminate_process(proc)
                raise

            if proc.returncode != 0:
                tail = stderr.decode(errors="replace").strip()[-_OUTPUT_TAIL:]
                raise MeasurementFailed(
                    spec, f"hyperfine exited with status {proc.returncode}: {tail}"
                )

            try:
                with export_path.open("r", encoding="utf-8") as f:
                    return parse_export(json.load(f))
            except (OSError, ValueError) as e:
                raise MeasurementFailed(spec, f"Unreadable hyperfine export: {e}") from e
