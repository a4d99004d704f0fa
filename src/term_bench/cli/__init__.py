"""Command-line interface for term-bench."""

from term_bench.cli.main import CommandDispatcher, main

__all__ = ["CommandDispatcher", "main"]
