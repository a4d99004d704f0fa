"""Base exceptions for term-bench.

This module defines the root exception hierarchy for the whole harness.
All domain-specific exceptions inherit from TermBenchError and carry the
process exit code the CLI reports for them.
"""

__all__ = ["TermBenchError"]


class TermBenchError(Exception):
    """Base exception for all term-bench errors.

    Attributes:
        exit_code: Exit code reported by the CLI when this error aborts a command.

    """

    exit_code: int = 1
