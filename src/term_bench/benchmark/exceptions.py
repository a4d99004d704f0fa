"""Domain-specific exceptions for measurement, storage and reporting.

This module defines exceptions for repeated sampling failures, the
external timing tool, and result record storage.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from term_bench.exceptions import TermBenchError

if TYPE_CHECKING:
    from term_bench.models.benchmark import BenchmarkSpec

__all__ = [
    "BenchmarkError",
    "MeasurementFailed",
    "StorageError",
    "TimerUnavailable",
]


class BenchmarkError(TermBenchError):
    """Exception for measurement and orchestration errors."""

    pass


class MeasurementFailed(BenchmarkError):
    """A measured run kept failing after every allowed attempt.

    Attributes:
        spec: The benchmark whose measurement failed.
        last_error: Description of the final failed attempt.

    """

    exit_code = 6

    def __init__(self, spec: BenchmarkSpec, last_error: str) -> None:
        self.spec = spec
        self.last_error = last_error
        super().__init__(f"Measurement of '{spec.label}' failed: {last_error}")


class TimerUnavailable(BenchmarkError):
    """The external timing tool could not be found or started."""

    exit_code = 4


class StorageError(BenchmarkError):
    """Exception for result record storage and loading failures."""

    pass
