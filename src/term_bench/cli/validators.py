"""Validation utilities for CLI arguments.

Checks run before any settings are built or any process is spawned.
"""

import argparse
from pathlib import Path

__all__ = ["validate_args"]


def validate_args(args: argparse.Namespace) -> str | None:
    """Validate CLI arguments for consistency.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Error message if validation fails, None if valid.

    """
    # getattr: each subcommand defines a different subset of options.
    byte_volume = getattr(args, "byte_volume", None)
    if byte_volume is not None and byte_volume < 0:
        return f"Error: --bytes must not be negative, got {byte_volume}"

    for option in ("width", "height"):
        value = getattr(args, option, None)
        if value is not None and value < 1:
            return f"Error: --{option} must be at least 1, got {value}"

    warmup = getattr(args, "warmup_runs", None)
    if warmup is not None and warmup < 0:
        return f"Error: --warmup must not be negative, got {warmup}"

    samples = getattr(args, "measured_runs", None)
    if samples is not None and samples < 1:
        return f"Error: --samples must be at least 1, got {samples}"

    for option in ("timeout", "suite_timeout"):
        value = getattr(args, option, None)
        if value is not None and value <= 0:
            flag = option.replace("_", "-")
            return f"Error: --{flag} must be positive, got {value}"

    suite_file = getattr(args, "suite_file", None)
    if suite_file is not None:
        path = Path(suite_file)
        if not path.exists():
            return f"Error: Suite file not found: {suite_file}"
        if path.suffix not in (".yaml", ".yml"):
            return f"Error: Suite file must be YAML: {suite_file}"

    return None
