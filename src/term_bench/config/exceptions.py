"""Exceptions for config module.

This module defines exceptions related to configuration loading,
parsing, and validation errors.
"""

from term_bench.exceptions import TermBenchError

__all__ = ["ConfigurationError", "InvalidConfiguration"]


class ConfigurationError(TermBenchError):
    """Base exception for configuration-related errors."""

    exit_code = 2


class InvalidConfiguration(ConfigurationError):
    """Raised when a benchmark or measurement is configured with unusable values.

    Always raised before any external process is spawned.
    """
