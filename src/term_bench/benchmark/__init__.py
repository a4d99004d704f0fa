"""Measurement, storage and reporting for term-bench.

This module provides the repeated-sampling collectors, the append-only
result store, the reporter, and the suite runner.
"""

from term_bench.benchmark.collector import TimingCollector, validate_run_counts
from term_bench.benchmark.exceptions import (
    BenchmarkError,
    MeasurementFailed,
    StorageError,
    TimerUnavailable,
)
from term_bench.benchmark.hyperfine import HyperfineCollector
from term_bench.benchmark.report import ReportSummary, classify, report
from term_bench.benchmark.runner import BenchmarkRunner, SpecFailure, SuiteOutcome
from term_bench.benchmark.statistics import bootstrap_ci, percent_change, summarize
from term_bench.benchmark.storage import ResultStore

__all__ = [
    "BenchmarkError",
    "BenchmarkRunner",
    "bootstrap_ci",
    "classify",
    "HyperfineCollector",
    "MeasurementFailed",
    "percent_change",
    "report",
    "ReportSummary",
    "ResultStore",
    "SpecFailure",
    "StorageError",
    "summarize",
    "SuiteOutcome",
    "TimerUnavailable",
    "TimingCollector",
    "validate_run_counts",
]
