"""CLI command implementations.

This module exports the command classes for the CLI.
"""

from term_bench.cli.commands.base import BaseCommand, CommandResult
from term_bench.cli.commands.generate import GenerateCommand
from term_bench.cli.commands.report import ReportCommand
from term_bench.cli.commands.run import RunCommand
from term_bench.cli.commands.suite import RunSuiteCommand

__all__ = [
    "BaseCommand",
    "CommandResult",
    "GenerateCommand",
    "ReportCommand",
    "RunCommand",
    "RunSuiteCommand",
]
