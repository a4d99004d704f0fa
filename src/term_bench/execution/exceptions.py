"""Exceptions raised by the execution driver."""

from term_bench.exceptions import TermBenchError

__all__ = ["EmulatorUnavailable", "ExecutionError"]


class ExecutionError(TermBenchError):
    """Base exception for errors launching an emulator run."""


class EmulatorUnavailable(ExecutionError):
    """The emulator executable could not be found or started.

    Fatal, never retried.
    """

    exit_code = 4
