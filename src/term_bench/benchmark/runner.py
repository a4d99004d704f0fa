"""Suite runner for measuring several benchmarks in sequence.

This module provides the BenchmarkRunner class that measures each spec
of a suite, persists the result, and keeps going when one spec fails.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from pydantic import Field

from term_bench.benchmark.collector import validate_run_counts
from term_bench.benchmark.exceptions import MeasurementFailed
from term_bench.config.exceptions import ConfigurationError
from term_bench.exceptions import TermBenchError
from term_bench.logging_config import get_logger
from term_bench.models.base import BaseSchema
from term_bench.models.benchmark import BenchmarkSpec
from term_bench.models.results import ResultRecord

if TYPE_CHECKING:
    from term_bench.benchmark.storage import ResultStore
    from term_bench.models.results import SampleDistribution

__all__ = ["BenchmarkRunner", "Collector", "SpecFailure", "SuiteOutcome"]

logger = get_logger(__name__)


class Collector(Protocol):
    """Anything that can measure a spec (TimingCollector, HyperfineCollector)."""

    async def measure(
        self,
        spec: BenchmarkSpec,
        warmup_runs: int,
        measured_runs: int,
    ) -> SampleDistribution: ...


class SpecFailure(BaseSchema):
    """A spec whose measurement did not produce a record.

    Attributes:
        spec: The failed benchmark.
        error: Error message.
        exit_code: Exit code of the error type.

    """

    spec: BenchmarkSpec
    error: str
    exit_code: int = 1


class SuiteOutcome(BaseSchema):
    """Result of running a suite.

    Attributes:
        records: Records written, in execution order.
        failures: Specs that failed, in execution order.
        timed_out: Whether the suite was cut off by the overall timeout.

    """

    records: list[ResultRecord] = Field(default_factory=list)
    failures: list[SpecFailure] = Field(default_factory=list)
    timed_out: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.failures and not self.timed_out

    @property
    def exit_code(self) -> int:
        """0 when every spec produced a record, otherwise the measurement failure code."""
        return 0 if self.succeeded else MeasurementFailed.exit_code


class BenchmarkRunner:
    """Measures a list of specs one at a time and stores each result.

    Attributes:
        collector: Sampling backend.
        store: Destination of result records.

    """

    def __init__(self, collector: Collector, store: ResultStore) -> None:
        self.collector = collector
        self.store = store

    async def run_spec(
        self,
        spec: BenchmarkSpec,
        warmup_runs: int,
        measured_runs: int,
    ) -> ResultRecord:
        """Measure one spec and persist its record."""
        distribution = await self.collector.measure(spec, warmup_runs, measured_runs)
        return self.store.record(distribution)

    async def run_suite(
        self,
        specs: Sequence[BenchmarkSpec],
        warmup_runs: int,
        measured_runs: int,
        timeout_seconds: float | None = None,
    ) -> SuiteOutcome:
        """Run every spec in order.

        A failing spec is logged and recorded in the outcome; the runner
        then continues with the next spec.

        Args:
            specs: Benchmarks in execution order.
            warmup_runs: Discarded runs per spec.
            measured_runs: Retained runs per spec.
            timeout_seconds: Overall cutoff for the whole suite.

        Returns:
            SuiteOutcome listing written records and failures.

        Raises:
            InvalidConfiguration: If the run counts are unusable.

        """
        validate_run_counts(warmup_runs, measured_runs)
        outcome = SuiteOutcome()

        logger.info(
            "suite_starting",
            specs=len(specs),
            warmup_runs=warmup_runs,
            measured_runs=measured_runs,
        )

        try:
            await asyncio.wait_for(
                self._run_all(specs, warmup_runs, measured_runs, outcome),
                timeout=timeout_seconds,
            )
        except asyncio.TimeoutError:
            outcome.timed_out = True
            logger.error(
                "suite_timeout",
                timeout_seconds=timeout_seconds,
                completed=len(outcome.records) + len(outcome.failures),
                total=len(specs),
            )

        logger.info(
            "suite_complete",
            succeeded=len(outcome.records),
            failed=len(outcome.failures),
            timed_out=outcome.timed_out,
        )
        return outcome

    async def _run_all(
        self,
        specs: Sequence[BenchmarkSpec],
        warmup_runs: int,
        measured_runs: int,
        outcome: SuiteOutcome,
    ) -> None:
        for index, spec in enumerate(specs, start=1):
            logger.info("suite_spec_starting", benchmark=spec.label, index=index, total=len(specs))
            try:
                record = await self.run_spec(spec, warmup_runs, measured_runs)
            except ConfigurationError:
                raise
            except TermBenchError as e:
                logger.error(
                    "suite_spec_failed",
                    benchmark=spec.label,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                outcome.failures.append(
                    SpecFailure(spec=spec, error=str(e), exit_code=e.exit_code)
                )
                continue
            outcome.records.append(record)
