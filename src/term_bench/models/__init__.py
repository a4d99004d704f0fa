"""Data models for term-bench.

This module provides Pydantic models for benchmark specs, suite files,
run results, sample distributions and persisted result records.
"""

from term_bench.models.base import BaseSchema, FrozenSchema
from term_bench.models.benchmark import (
    BenchmarkSpec,
    Geometry,
    SuiteConfig,
    SuiteDefaults,
)
from term_bench.models.enums import ExitKind, ReportVerdict, SandboxKind, TimerKind
from term_bench.models.results import (
    DistributionSummary,
    ExecutionResult,
    ExitStatus,
    ResultRecord,
    SampleDistribution,
)

__all__ = [
    # Base
    "BaseSchema",
    "FrozenSchema",
    # Enums
    "ExitKind",
    "ReportVerdict",
    "SandboxKind",
    "TimerKind",
    # Spec models
    "BenchmarkSpec",
    "Geometry",
    "SuiteConfig",
    "SuiteDefaults",
    # Result models
    "DistributionSummary",
    "ExecutionResult",
    "ExitStatus",
    "ResultRecord",
    "SampleDistribution",
]
