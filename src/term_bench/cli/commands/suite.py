"""Run suite command implementation.

This module implements the command for measuring every benchmark of a
suite file, or of the built-in suite when no file is given.
"""

from argparse import Namespace
from pathlib import Path

from term_bench.benchmark.runner import BenchmarkRunner
from term_bench.cli.commands.base import (
    BaseCommand,
    CommandResult,
    resolve_geometry,
    resolve_settings,
)
from term_bench.cli.formatters import format_suite_outcome
from term_bench.config.loader import default_suite, load_suite
from term_bench.logging_config import get_logger
from term_bench.models.benchmark import SuiteConfig

__all__ = ["RunSuiteCommand"]

logger = get_logger(__name__)


class RunSuiteCommand(BaseCommand):
    """Command to run a benchmark suite."""

    @property
    def name(self) -> str:
        """Get the command name."""
        return "suite"

    def load(self, args: Namespace) -> SuiteConfig:
        """Load the suite file, or build the built-in suite at the CLI geometry."""
        suite_file = getattr(args, "suite_file", None)
        if suite_file:
            return load_suite(Path(suite_file))
        geometry = resolve_geometry(args)
        return default_suite(geometry.width, geometry.height)

    async def execute(self, args: Namespace) -> CommandResult:
        """Execute the suite command.

        Run counts come from the CLI, then the suite file defaults, then
        settings.

        Args:
            args: Parsed arguments with the suite path and options.

        Returns:
            CommandResult with every written record; exit code 6 if any
            benchmark failed.

        """
        settings = resolve_settings(args)
        suite = self.load(args)

        if args.suite_file:
            default_warmup = suite.defaults.warmup_runs
            default_measured = suite.defaults.measured_runs
        else:
            default_warmup = settings.measurement.warmup_runs
            default_measured = settings.measurement.measured_runs

        warmup_runs = default_warmup if args.warmup_runs is None else args.warmup_runs
        measured_runs = default_measured if args.measured_runs is None else args.measured_runs

        logger.info("suite_loaded", suite=suite.name, benchmarks=len(suite.benchmarks))

        runner = BenchmarkRunner(self.build_collector(settings), self.build_store(settings))
        outcome = await runner.run_suite(
            suite.benchmarks,
            warmup_runs=warmup_runs,
            measured_runs=measured_runs,
            timeout_seconds=settings.measurement.suite_timeout_seconds,
        )

        return CommandResult(
            exit_code=outcome.exit_code,
            records=outcome.records,
            message=format_suite_outcome(
                outcome, json_output=getattr(args, "json_output", False)
            ),
        )
