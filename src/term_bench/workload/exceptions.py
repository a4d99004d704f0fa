"""Exceptions raised by the workload generator adapter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from term_bench.exceptions import TermBenchError

if TYPE_CHECKING:
    from term_bench.models.benchmark import BenchmarkSpec

__all__ = ["GeneratorFailed", "GeneratorUnavailable", "WorkloadError"]


class WorkloadError(TermBenchError):
    """Base exception for artifact generation errors."""

    exit_code = 3


class GeneratorUnavailable(WorkloadError):
    """The generator executable could not be found or started."""


class GeneratorFailed(WorkloadError):
    """The generator ran but did not produce a complete artifact.

    Attributes:
        spec: Spec whose artifact was being generated.
        return_code: Generator exit status, None when it was killed at the cutoff.
        timed_out: Whether generation exceeded its time limit.
        stderr: Tail of the generator's error output.

    """

    def __init__(
        self,
        spec: BenchmarkSpec,
        return_code: int | None,
        *,
        timed_out: bool = False,
        stderr: str = "",
    ) -> None:
        self.spec = spec
        self.return_code = return_code
        self.timed_out = timed_out
        self.stderr = stderr
        if timed_out:
            reason = "timed out"
        else:
            reason = f"exited with status {return_code}"
        message = f"Generator for '{spec.label}' {reason}"
        if stderr:
            message += f": {stderr}"
        super().__init__(message)
