"""Shared utilities for term-bench.

This module contains helpers used by both the artifact cache and the
result store to derive filesystem paths from benchmark identifiers.
"""

from __future__ import annotations

from datetime import datetime, timezone

__all__ = ["format_bytes", "sanitize_path_component", "utc_now"]


def sanitize_path_component(name: str) -> str:
    """Sanitize a string for safe use as a single path component.

    Prevents path traversal by replacing separators and keeping only
    alphanumerics and ``-_.``.

    Args:
        name: The string to sanitize.

    Returns:
        A filesystem-safe version of the string.

    """
    if not name:
        return "unnamed"

    replacements = {"/": "-", "\\": "-", "..": "_"}
    safe = name
    for old, new in replacements.items():
        safe = safe.replace(old, new)

    safe = "".join(c if c.isalnum() or c in "-_." else "_" for c in safe)

    while safe and safe[0] in ".-":
        safe = safe[1:]

    return safe or "unnamed"


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_bytes(num_bytes: float) -> str:
    """Format a byte count using binary units (``50.0 MiB``)."""
    value = float(num_bytes)
    if abs(value) < 1024.0:
        return f"{int(value)} B"
    for unit in ("KiB", "MiB", "GiB"):
        value /= 1024.0
        if abs(value) < 1024.0:
            break
    return f"{value:.1f} {unit}"
