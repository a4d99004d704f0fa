"""Report command implementation.

This module implements the command that compares the latest record of a
benchmark against the record before it.
"""

from argparse import Namespace

from term_bench.benchmark.report import report
from term_bench.cli.commands.base import BaseCommand, CommandResult, resolve_settings
from term_bench.cli.formatters import format_reports
from term_bench.logging_config import get_logger

__all__ = ["ReportCommand"]

logger = get_logger(__name__)


class ReportCommand(BaseCommand):
    """Command to report on recorded history."""

    @property
    def name(self) -> str:
        """Get the command name."""
        return "report"

    async def execute(self, args: Namespace) -> CommandResult:
        """Render a report for one benchmark, or for every recorded one.

        Args:
            args: Parsed arguments with the benchmark name.

        Returns:
            CommandResult with the rendered report. A report that finds a
            regression still exits 0.

        """
        settings = resolve_settings(args)
        store = self.build_store(settings)
        threshold = settings.storage.regression_threshold_percent

        names = [args.benchmark] if getattr(args, "benchmark", None) else store.benchmarks()
        if not names:
            return CommandResult(
                exit_code=0,
                message=f"No results recorded in {store.results_dir}",
            )

        summaries = []
        for name in names:
            history, failures = store.load_history(name)
            if failures:
                logger.warning("report_skipped_records", benchmark=name, count=len(failures))
            summary = report(name, history, regression_threshold_percent=threshold)
            if summary.is_regression:
                logger.warning(
                    "regression_detected",
                    benchmark=name,
                    delta_percent=round(summary.delta_percent or 0.0, 2),
                )
            summaries.append(summary)

        return CommandResult(
            exit_code=0,
            records=[s.latest for s in summaries if s.latest is not None],
            message=format_reports(summaries, json_output=getattr(args, "json_output", False)),
        )
