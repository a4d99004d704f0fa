"""CLI argument parser configuration.

This module provides the argument parser for the term-bench CLI.
"""

import argparse

from term_bench import __version__
from term_bench.models.enums import SandboxKind, TimerKind

__all__ = ["create_parser"]


def _add_spec_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments that identify one BenchmarkSpec."""
    parser.add_argument(
        "name",
        help="Generator benchmark name (e.g. scrolling, alt-screen-random-write)",
    )
    parser.add_argument(
        "--arg",
        action="append",
        dest="extra_args",
        default=None,
        metavar="ARG",
        help=(
            "Extra generator argument, repeatable and kept in order; "
            "use --arg=VALUE when VALUE starts with '-'"
        ),
    )
    parser.add_argument(
        "--bytes",
        "-b",
        type=int,
        required=True,
        dest="byte_volume",
        metavar="N",
        help="Size of the generated workload in bytes",
    )
    _add_geometry_arguments(parser)


def _add_geometry_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--width",
        type=int,
        metavar="COLS",
        help="Terminal columns (default: current terminal)",
    )
    parser.add_argument(
        "--height",
        type=int,
        metavar="ROWS",
        help="Terminal rows (default: current terminal)",
    )


def _add_measure_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--warmup",
        type=int,
        metavar="N",
        dest="warmup_runs",
        help="Warm-up runs discarded before measuring",
    )
    parser.add_argument(
        "--samples",
        "-n",
        type=int,
        metavar="N",
        dest="measured_runs",
        help="Measured runs retained in the distribution",
    )
    parser.add_argument(
        "--timer",
        choices=[kind.value for kind in TimerKind],
        default=None,
        help="Sampling backend (default: internal)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Print results as JSON instead of formatted text",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Returns:
        An ArgumentParser configured with all CLI options.

    """
    parser = argparse.ArgumentParser(
        prog="term-bench",
        description=(
            "term-bench - Measure terminal emulator throughput under synthetic "
            "workloads and track it over time."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate (or reuse) a 50 MB scrolling workload at 80x24
  term-bench generate scrolling --bytes 50000000 --width 80 --height 24

  # Measure it: 1 warm-up run, 5 measured runs
  term-bench run scrolling --bytes 50000000 --warmup 1 --samples 5

  # Sub-mode arguments are passed one --arg at a time
  term-bench run scrolling-in-region --bytes 50000000 --arg=--lines-from-bottom --arg 1

  # Run the built-in suite inside docker
  term-bench --sandbox docker suite

  # Compare the latest result with the previous one
  term-bench report scrolling
""",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit log events as JSON lines on stderr",
    )
    parser.add_argument(
        "--results-dir",
        type=str,
        metavar="DIR",
        help="Directory for result records (default: ./results)",
    )
    parser.add_argument(
        "--artifacts-dir",
        type=str,
        metavar="DIR",
        help="Directory for cached workloads (default: ./benchmarks)",
    )
    parser.add_argument(
        "--emulator",
        type=str,
        metavar="TEMPLATE",
        help="Emulator command template, e.g. \"alacritty -e {shell} -c 'cat {artifact}'\"",
    )
    parser.add_argument(
        "--sandbox",
        choices=[kind.value for kind in SandboxKind],
        default=None,
        help="Isolation for emulator runs (default: xvfb)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Hard wall-clock cutoff for a single emulator run",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    generate = subparsers.add_parser(
        "generate",
        help="Generate a workload artifact if it is not cached",
    )
    _add_spec_arguments(generate)
    generate.add_argument(
        "--force",
        action="store_true",
        help="Delete a cached artifact and regenerate it",
    )

    run = subparsers.add_parser(
        "run",
        help="Measure one benchmark and record the result",
    )
    _add_spec_arguments(run)
    _add_measure_arguments(run)

    suite = subparsers.add_parser(
        "suite",
        help="Measure every benchmark of a suite file (or the built-in suite)",
    )
    suite.add_argument(
        "suite_file",
        nargs="?",
        metavar="FILE",
        help="Suite YAML file (default: built-in suite)",
    )
    _add_geometry_arguments(suite)
    _add_measure_arguments(suite)
    suite.add_argument(
        "--suite-timeout",
        type=float,
        metavar="SECONDS",
        help="Overall cutoff for the whole suite",
    )

    report = subparsers.add_parser(
        "report",
        help="Compare the latest result of a benchmark with the previous one",
    )
    report.add_argument(
        "benchmark",
        nargs="?",
        help="Benchmark record name (default: every recorded benchmark)",
    )
    report.add_argument(
        "--threshold",
        type=float,
        metavar="PERCENT",
        help="Changes within this percentage are reported as unchanged",
    )
    report.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Print the report as JSON",
    )

    return parser
