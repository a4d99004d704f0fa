"""Exceptions for sandbox setup and resource acquisition."""

from term_bench.exceptions import TermBenchError

__all__ = ["SandboxUnavailable"]


class SandboxUnavailable(TermBenchError):
    """The virtual display or container runtime is missing or failed to start.

    Fatal for the run: retrying cannot make a missing collaborator appear.
    """

    exit_code = 5
