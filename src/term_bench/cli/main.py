"""CLI main entry point.

This module provides the main entry point for the term-bench CLI.
"""

import argparse
import asyncio
import sys
import traceback

from term_bench.cli.commands import (
    BaseCommand,
    GenerateCommand,
    ReportCommand,
    RunCommand,
    RunSuiteCommand,
)
from term_bench.cli.parser import create_parser
from term_bench.cli.validators import validate_args
from term_bench.config.exceptions import InvalidConfiguration
from term_bench.exceptions import TermBenchError
from term_bench.logging_config import configure_logging, get_logger

__all__ = ["main", "CommandDispatcher"]

logger = get_logger(__name__)

EXIT_INTERRUPTED = 130


class CommandDispatcher:
    """Dispatches CLI commands to appropriate handlers.

    Attributes:
        _commands: Command handlers keyed by subcommand name.

    """

    def __init__(self) -> None:
        """Initialize the command dispatcher with all command handlers."""
        handlers: list[BaseCommand] = [
            GenerateCommand(),
            RunCommand(),
            RunSuiteCommand(),
            ReportCommand(),
        ]
        self._commands = {handler.name: handler for handler in handlers}

    async def dispatch(self, args: argparse.Namespace) -> int:
        """Dispatch to the appropriate command based on arguments.

        Args:
            args: Parsed command-line arguments.

        Returns:
            Exit code (0 for success, non-zero for errors).

        """
        handler = self._commands.get(args.command)
        if handler is None:
            print(f"Error: Unknown command '{args.command}'", file=sys.stderr)
            return 1

        result = await handler.execute(args)
        if result.message:
            print(result.message)
        return result.exit_code


def main(argv: list[str] | None = None) -> int:
    """Run the CLI application.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code: 0 success, 1 unexpected error, 2 invalid configuration,
        3 generator failure, 4 emulator unavailable, 5 sandbox unavailable,
        6 measurement failure, 130 interrupted.

    """
    parser = create_parser()
    args = parser.parse_args(argv)

    verbose = getattr(args, "verbose", False)
    configure_logging(verbose=verbose, json_output=getattr(args, "json_logs", False))

    error = validate_args(args)
    if error:
        print(error, file=sys.stderr)
        return InvalidConfiguration.exit_code

    try:
        dispatcher = CommandDispatcher()
        return asyncio.run(dispatcher.dispatch(args))

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED

    except TermBenchError as e:
        logger.error("command_failed", command=args.command, error=str(e), error_type=type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code

    except Exception as e:
        logger.exception("fatal_error", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        if verbose:
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
