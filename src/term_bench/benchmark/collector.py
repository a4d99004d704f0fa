"""Repeated sampling around the execution driver.

TimingCollector runs the driver ``warmup_runs + measured_runs`` times
strictly in sequence, discards the warm-ups, and retries a failed
measured run a bounded number of times before giving up on the spec.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from term_bench.benchmark.exceptions import MeasurementFailed
from term_bench.config.defaults import DEFAULT_MAX_ATTEMPTS
from term_bench.config.exceptions import InvalidConfiguration
from term_bench.logging_config import bound_context, get_logger
from term_bench.models.results import SampleDistribution

if TYPE_CHECKING:
    from pathlib import Path

    from term_bench.execution.driver import ExecutionDriver
    from term_bench.models.benchmark import BenchmarkSpec
    from term_bench.models.results import ExecutionResult
    from term_bench.workload.generator import WorkloadGenerator

__all__ = ["TimingCollector", "validate_run_counts"]

logger = get_logger(__name__)


def validate_run_counts(warmup_runs: int, measured_runs: int) -> None:
    """Reject run counts that cannot produce a distribution.

    Raises:
        InvalidConfiguration: If ``measured_runs`` is below one or
            ``warmup_runs`` is negative.

    """
    if measured_runs < 1:
        raise InvalidConfiguration(
            f"measured_runs must be at least 1, got {measured_runs}"
        )
    if warmup_runs < 0:
        raise InvalidConfiguration(f"warmup_runs must not be negative, got {warmup_runs}")


class TimingCollector:
    """Measures one spec with warm-up runs and bounded retries.

    Only failed runs (non-zero exit or timeout) are retried. Errors that
    signal a missing collaborator propagate on the first occurrence.

    Attributes:
        generator: Artifact cache used before the first run.
        driver: Runs the emulator once per invocation.
        max_attempts: Attempts allowed per measured run.

    """

    def __init__(
        self,
        generator: WorkloadGenerator,
        driver: ExecutionDriver,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise InvalidConfiguration(f"max_attempts must be at least 1, got {max_attempts}")
        self.generator = generator
        self.driver = driver
        self.max_attempts = max_attempts

    async def measure(
        self,
        spec: BenchmarkSpec,
        warmup_runs: int,
        measured_runs: int,
    ) -> SampleDistribution:
        """Collect ``measured_runs`` successful samples for a spec.

        Args:
            spec: Benchmark to measure.
            warmup_runs: Runs executed first and discarded whatever their outcome.
            measured_runs: Successful runs retained in the distribution.

        Returns:
            SampleDistribution holding exactly ``measured_runs`` samples in
            chronological order.

        Raises:
            InvalidConfiguration: If the run counts are unusable.
            MeasurementFailed: If a measured run fails ``max_attempts`` times.

        """
        validate_run_counts(warmup_runs, measured_runs)

        with bound_context(benchmark=spec.label):
            artifact = await self.generator.ensure_artifact(spec)
            logger.info(
                "measurement_starting",
                warmup_runs=warmup_runs,
                measured_runs=measured_runs,
                artifact=str(artifact),
            )

            invocations = 0
            for warmup in range(1, warmup_runs + 1):
                result = await self.driver.run_once(artifact, spec)
                invocations += 1
                logger.debug(
                    "warmup_complete",
                    run=warmup,
                    total=warmup_runs,
                    seconds=round(result.wall_clock_seconds, 4),
                    status=result.exit_status.describe(),
                )

            samples: list[ExecutionResult] = []
            for run_number in range(1, measured_runs + 1):
                result, attempts = await self._measure_one(artifact, spec, run_number)
                invocations += attempts
                samples.append(result)
                logger.info(
                    "measured_run_complete",
                    run=run_number,
                    total=measured_runs,
                    seconds=round(result.wall_clock_seconds, 4),
                )

        distribution = SampleDistribution(
            spec=spec,
            samples=samples,
            warmup_discarded=warmup_runs,
            attempts=invocations,
        )
        summary = distribution.summary()
        logger.info(
            "measurement_complete",
            benchmark=spec.label,
            mean=round(summary.mean, 4),
            stddev=round(summary.stddev, 4),
            n=summary.n,
            invocations=invocations,
        )
        return distribution

    async def _measure_one(
        self,
        artifact: Path,
        spec: BenchmarkSpec,
        run_number: int,
    ) -> tuple[ExecutionResult, int]:
        last_error = ""
        for attempt in range(1, self.max_attempts + 1):
            result = await self.driver.run_once(artifact, spec)
            if result.succeeded:
                return result, attempt

            last_error = (
                f"run {run_number} attempt {attempt} ended with "
                f"{result.exit_status.describe()}"
            )
            logger.warning(
                "measurement_retry",
                run=run_number,
                attempt=attempt,
                max_attempts=self.max_attempts,
                status=result.exit_status.describe(),
            )

        raise MeasurementFailed(spec, last_error)
