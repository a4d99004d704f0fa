"""Result models for runs, distributions and persisted records.

This module defines the value produced by a single emulator run, the
distribution assembled by repeated sampling, and the record written to
the result store.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import Field

from term_bench.models.base import BaseSchema, FrozenSchema
from term_bench.models.benchmark import BenchmarkSpec
from term_bench.models.enums import ExitKind

__all__ = [
    "DistributionSummary",
    "ExecutionResult",
    "ExitStatus",
    "ResultRecord",
    "SampleDistribution",
]


class ExitStatus(FrozenSchema):
    """How an emulator run ended.

    Attributes:
        kind: Success or failure.
        code: Process exit code (negative for signals), None on timeout.
        timed_out: Whether the run was killed at the wall-clock cutoff.

    """

    kind: ExitKind
    code: int | None = None
    timed_out: bool = False

    @classmethod
    def success(cls) -> ExitStatus:
        return cls(kind=ExitKind.success, code=0)

    @classmethod
    def failure(cls, code: int) -> ExitStatus:
        return cls(kind=ExitKind.failure, code=code)

    @classmethod
    def timeout(cls) -> ExitStatus:
        return cls(kind=ExitKind.failure, code=None, timed_out=True)

    @property
    def ok(self) -> bool:
        return self.kind is ExitKind.success

    def describe(self) -> str:
        """Short text used in logs and error messages."""
        if self.ok:
            return "success"
        if self.timed_out:
            return "failure(timeout)"
        return f"failure({self.code})"


class ExecutionResult(FrozenSchema):
    """One measured emulator run.

    Attributes:
        spec: Benchmark the run replayed.
        wall_clock_seconds: Duration from spawn to exit of the emulator.
        timestamp: When the run started (UTC).
        exit_status: How the run ended.

    """

    spec: BenchmarkSpec
    wall_clock_seconds: float = Field(..., ge=0.0)
    timestamp: datetime
    exit_status: ExitStatus

    @property
    def succeeded(self) -> bool:
        return self.exit_status.ok


class DistributionSummary(BaseSchema):
    """Summary statistics over retained durations, in seconds.

    Attributes:
        mean: Arithmetic mean.
        stddev: Sample standard deviation (0.0 for a single sample).
        min: Fastest run.
        max: Slowest run.
        n: Number of samples.
        ci_95: Bootstrap 95% confidence interval of the mean.

    """

    mean: float = Field(..., ge=0.0)
    stddev: float = Field(..., ge=0.0)
    min: float = Field(..., ge=0.0)
    max: float = Field(..., ge=0.0)
    n: int = Field(..., ge=1)
    ci_95: tuple[float, float]


class SampleDistribution(BaseSchema):
    """Measured runs for one spec after warm-up runs were discarded.

    Attributes:
        spec: Benchmark that was measured.
        samples: Retained runs in chronological order.
        warmup_discarded: Number of warm-up runs executed and dropped.
        attempts: Total emulator invocations, including warm-ups and retries.

    """

    spec: BenchmarkSpec
    samples: list[ExecutionResult]
    warmup_discarded: int = Field(default=0, ge=0)
    attempts: int = Field(default=0, ge=0)

    @property
    def durations(self) -> list[float]:
        return [s.wall_clock_seconds for s in self.samples]

    def summary(self) -> DistributionSummary:
        """Compute mean, standard deviation, min and max of the samples.

        Raises:
            ValueError: If the distribution holds no samples.

        """
        from term_bench.benchmark.statistics import summarize

        return summarize(self.durations)


class ResultRecord(BaseSchema):
    """Persisted summary of one measurement.

    Attributes:
        benchmark: Record directory name (spec name plus sub-mode).
        label: Human-readable benchmark identifier.
        spec: The measured spec, geometry included.
        mean: Mean wall-clock seconds.
        stddev: Sample standard deviation in seconds.
        min: Fastest run in seconds.
        max: Slowest run in seconds.
        sample_count: Number of retained runs.
        warmup_count: Number of discarded warm-up runs.
        sample_timestamps: Start time of every retained run.
        recorded_at: When the record was written.
        throughput_bytes_per_second: Byte volume divided by mean duration.
        path: File the record was read from or written to (not serialized).

    """

    benchmark: str
    label: str
    spec: BenchmarkSpec
    mean: float = Field(..., ge=0.0)
    stddev: float = Field(..., ge=0.0)
    min: float = Field(..., ge=0.0)
    max: float = Field(..., ge=0.0)
    sample_count: int = Field(..., ge=1)
    warmup_count: int = Field(default=0, ge=0)
    sample_timestamps: list[datetime] = Field(default_factory=list)
    recorded_at: datetime
    throughput_bytes_per_second: float | None = None
    path: Path | None = Field(default=None, exclude=True)

    @classmethod
    def from_distribution(
        cls,
        distribution: SampleDistribution,
        recorded_at: datetime,
    ) -> ResultRecord:
        """Build a record from a freshly measured distribution."""
        summary = distribution.summary()
        spec = distribution.spec
        throughput = spec.byte_volume / summary.mean if summary.mean > 0 else None
        return cls(
            benchmark=spec.record_name,
            label=spec.label,
            spec=spec,
            mean=summary.mean,
            stddev=summary.stddev,
            min=summary.min,
            max=summary.max,
            sample_count=summary.n,
            warmup_count=distribution.warmup_discarded,
            sample_timestamps=[s.timestamp for s in distribution.samples],
            recorded_at=recorded_at,
            throughput_bytes_per_second=throughput,
        )
