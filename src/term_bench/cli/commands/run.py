"""Run command implementation.

This module implements the command that measures one benchmark spec and
appends its record to the result store.
"""

from argparse import Namespace

from term_bench.cli.commands.base import BaseCommand, CommandResult, resolve_settings
from term_bench.cli.formatters import format_record
from term_bench.logging_config import get_logger

__all__ = ["RunCommand"]

logger = get_logger(__name__)


class RunCommand(BaseCommand):
    """Command to measure a single benchmark."""

    @property
    def name(self) -> str:
        """Get the command name."""
        return "run"

    async def execute(self, args: Namespace) -> CommandResult:
        """Measure the spec and persist the result.

        Args:
            args: Parsed arguments with the spec and measurement options.

        Returns:
            CommandResult with the written record.

        Raises:
            InvalidConfiguration: If the run counts are unusable.
            MeasurementFailed: If a measured run keeps failing.

        """
        settings = resolve_settings(args)
        spec = self.spec_from_args(args)
        collector = self.build_collector(settings)
        store = self.build_store(settings)

        distribution = await collector.measure(
            spec,
            settings.measurement.warmup_runs,
            settings.measurement.measured_runs,
        )
        record = store.record(distribution)

        return CommandResult(
            exit_code=0,
            records=[record],
            message=format_record(record, json_output=getattr(args, "json_output", False)),
        )
