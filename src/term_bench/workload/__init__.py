"""Workload artifact generation and caching.

The WorkloadGenerator exclusively owns artifact lifecycle: it creates an
artifact on first request and never mutates or expires it afterwards.
"""

from term_bench.workload.exceptions import (
    GeneratorFailed,
    GeneratorUnavailable,
    WorkloadError,
)
from term_bench.workload.generator import ARTIFACT_SUFFIX, WorkloadGenerator

__all__ = [
    "ARTIFACT_SUFFIX",
    "GeneratorFailed",
    "GeneratorUnavailable",
    "WorkloadError",
    "WorkloadGenerator",
]
