"""Enumeration types for term-bench."""

from enum import Enum

__all__ = [
    "ExitKind",
    "ReportVerdict",
    "SandboxKind",
    "TimerKind",
]


class ExitKind(str, Enum):
    """Outcome of a single emulator run.

    Attributes:
        success: The emulator exited with status 0.
        failure: The emulator exited non-zero or was killed at the cutoff.
    """

    success = "success"
    failure = "failure"


class SandboxKind(str, Enum):
    """Isolation strategy for emulator runs.

    Attributes:
        local: Use the host display as-is (no isolation).
        xvfb: Private virtual X display on the host.
        docker: Virtual X display inside a container.
    """

    local = "local"
    xvfb = "xvfb"
    docker = "docker"


class TimerKind(str, Enum):
    """Repeated-sampling backend.

    Attributes:
        internal: The harness spawns and times every run itself.
        hyperfine: Repetition and timing are delegated to hyperfine.
    """

    internal = "internal"
    hyperfine = "hyperfine"


class ReportVerdict(str, Enum):
    """Classification of the latest record against its predecessor."""

    regression = "regression"
    improvement = "improvement"
    unchanged = "unchanged"
    no_history = "no-history"
    no_data = "no-data"
    incomparable = "incomparable"
