"""Emulator execution for term-bench.

Provides the ExecutionDriver, which runs the emulator-under-test once
against a cached workload artifact inside a sandbox and times the run.
"""

from term_bench.execution.driver import ExecutionDriver, expand_command
from term_bench.execution.exceptions import EmulatorUnavailable, ExecutionError

__all__ = [
    "EmulatorUnavailable",
    "ExecutionDriver",
    "ExecutionError",
    "expand_command",
]
