"""Base command class for CLI commands.

This module defines the abstract base class for CLI commands following
the Command pattern, plus the helpers every command uses to turn parsed
arguments into settings and pipeline components.
"""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod
from argparse import Namespace
from pathlib import Path
from typing import Any

from pydantic import Field

from term_bench.benchmark.collector import TimingCollector
from term_bench.benchmark.hyperfine import HyperfineCollector
from term_bench.benchmark.runner import Collector
from term_bench.benchmark.storage import ResultStore
from term_bench.config.defaults import DEFAULT_TERMINAL_HEIGHT, DEFAULT_TERMINAL_WIDTH
from term_bench.config.settings import Settings, get_settings
from term_bench.execution.driver import ExecutionDriver
from term_bench.models.base import BaseSchema
from term_bench.models.benchmark import BenchmarkSpec, Geometry
from term_bench.models.enums import SandboxKind, TimerKind
from term_bench.models.results import ResultRecord
from term_bench.sandbox import create_sandbox
from term_bench.workload.generator import WorkloadGenerator

__all__ = [
    "BaseCommand",
    "CommandResult",
    "resolve_geometry",
    "resolve_settings",
]


class CommandResult(BaseSchema):
    """Result of a command execution.

    Attributes:
        exit_code: Exit code for the CLI (0 for success).
        records: Result records written or reported.
        message: Text printed to stdout.

    """

    exit_code: int
    records: list[ResultRecord] = Field(default_factory=list)
    message: str | None = None


def resolve_settings(args: Namespace) -> Settings:
    """Apply global CLI flags on top of environment-derived settings.

    Args:
        args: Parsed command-line arguments.

    Returns:
        A settings copy; the cached singleton is left untouched.

    """
    settings = get_settings()

    storage: dict[str, Any] = {}
    if getattr(args, "results_dir", None):
        storage["results_dir"] = Path(args.results_dir)
    if getattr(args, "artifacts_dir", None):
        storage["artifacts_dir"] = Path(args.artifacts_dir)
    if getattr(args, "threshold", None) is not None:
        storage["regression_threshold_percent"] = args.threshold

    emulator: dict[str, Any] = {}
    if getattr(args, "emulator", None):
        emulator["command"] = args.emulator
    if getattr(args, "timeout", None) is not None:
        emulator["timeout_seconds"] = args.timeout

    sandbox: dict[str, Any] = {}
    if getattr(args, "sandbox", None):
        sandbox["kind"] = SandboxKind(args.sandbox)

    measurement: dict[str, Any] = {}
    if getattr(args, "warmup_runs", None) is not None:
        measurement["warmup_runs"] = args.warmup_runs
    if getattr(args, "measured_runs", None) is not None:
        measurement["measured_runs"] = args.measured_runs
    if getattr(args, "timer", None):
        measurement["timer"] = TimerKind(args.timer)
    if getattr(args, "suite_timeout", None) is not None:
        measurement["suite_timeout_seconds"] = args.suite_timeout

    return settings.model_copy(
        update={
            "storage": settings.storage.model_copy(update=storage),
            "emulator": settings.emulator.model_copy(update=emulator),
            "sandbox": settings.sandbox.model_copy(update=sandbox),
            "measurement": settings.measurement.model_copy(update=measurement),
        }
    )


def resolve_geometry(args: Namespace) -> Geometry:
    """Geometry from ``--width/--height``, falling back to the current terminal.

    The terminal size is read once here and then stored in the spec, so
    a later resize never changes which artifact a spec refers to.
    """
    width = getattr(args, "width", None)
    height = getattr(args, "height", None)
    if width is None or height is None:
        size = shutil.get_terminal_size(
            fallback=(DEFAULT_TERMINAL_WIDTH, DEFAULT_TERMINAL_HEIGHT)
        )
        width = width or size.columns
        height = height or size.lines
    return Geometry(width=width, height=height)


class BaseCommand(ABC):
    """Abstract base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the command name for logging and display."""
        pass

    @abstractmethod
    async def execute(self, args: Namespace) -> CommandResult:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.

        Returns:
            CommandResult with exit code and any records.

        """
        pass

    @staticmethod
    def spec_from_args(args: Namespace) -> BenchmarkSpec:
        """Build the BenchmarkSpec named on the command line."""
        geometry = resolve_geometry(args)
        return BenchmarkSpec(
            name=args.name,
            extra_args=tuple(args.extra_args or ()),
            byte_volume=args.byte_volume,
            terminal_width=geometry.width,
            terminal_height=geometry.height,
        )

    @staticmethod
    def build_generator(settings: Settings) -> WorkloadGenerator:
        return WorkloadGenerator.from_settings(
            settings.generator, settings.storage.artifacts_dir
        )

    @staticmethod
    def build_driver(settings: Settings) -> ExecutionDriver:
        sandbox = create_sandbox(settings.sandbox, settings.storage.artifacts_dir)
        return ExecutionDriver.from_settings(settings, sandbox)

    @staticmethod
    def build_store(settings: Settings) -> ResultStore:
        return ResultStore(
            settings.storage.results_dir,
            filename_safe=settings.storage.filename_safe_timestamps,
        )

    def build_collector(self, settings: Settings) -> Collector:
        """Create the sampling backend selected by the ``timer`` setting."""
        generator = self.build_generator(settings)
        driver = self.build_driver(settings)
        if settings.measurement.timer is TimerKind.hyperfine:
            return HyperfineCollector(
                generator, driver, command=settings.measurement.hyperfine_command
            )
        return TimingCollector(
            generator, driver, max_attempts=settings.measurement.max_attempts
        )
