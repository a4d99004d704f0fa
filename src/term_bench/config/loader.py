"""Suite file loader.

This module loads benchmark suites from YAML files, parsing them into
strongly-typed models with validation, and builds the built-in default
suite used when no file is given.

Example suite file::

    name: nightly
    defaults:
      width: 80
      height: 24
      warmup_runs: 1
      measured_runs: 5
    benchmarks:
      - name: scrolling
        bytes: 50_000_000
      - name: scrolling-in-region
        args: [--lines-from-bottom, 1]
        bytes: 50_000_000
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from term_bench.config.defaults import DEFAULT_SUITE
from term_bench.config.exceptions import ConfigurationError
from term_bench.config.validators import FieldValidator
from term_bench.models.benchmark import BenchmarkSpec, SuiteConfig, SuiteDefaults

__all__ = ["default_suite", "load_suite", "load_yaml_file"]


def load_yaml_file(path: Path, label: str = "File") -> dict[str, Any]:
    """Load a YAML file and check that it holds a mapping.

    Args:
        path: Path to the YAML file.
        label: Human-readable label for error messages (e.g. "Suite file").

    Returns:
        Parsed dictionary from the YAML file.

    Raises:
        ConfigurationError: If the file is missing, unparsable, empty, or
            not a mapping.

    """
    if not path.exists():
        raise ConfigurationError(f"{label} not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML file {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read YAML file {path}: {e}") from e

    if data is None:
        raise ConfigurationError(f"Empty YAML file: {path}")

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid YAML structure: expected mapping, got {type(data).__name__}"
        )

    return data


def load_suite(path: Path | str) -> SuiteConfig:
    """Load and validate a benchmark suite from a YAML file.

    Args:
        path: Path to the suite file.

    Returns:
        SuiteConfig: The parsed suite.

    Raises:
        ConfigurationError: If required fields are missing or invalid.

    Example:
        >>> suite = load_suite("suites/nightly.yaml")
        >>> [spec.label for spec in suite.benchmarks]
        ['scrolling', 'scrolling-in-region --lines-from-bottom 1']

    """
    path = Path(path)
    data = load_yaml_file(path, label="Suite file")
    return _parse_suite(data, path)


def default_suite(width: int, height: int) -> SuiteConfig:
    """Build the built-in suite at the given geometry."""
    return SuiteConfig(
        name="default",
        description="Scrolling, alt-screen, region scrolling and unicode workloads",
        defaults=SuiteDefaults(width=width, height=height),
        benchmarks=[
            BenchmarkSpec(
                name=name,
                extra_args=extra_args,
                byte_volume=byte_volume,
                terminal_width=width,
                terminal_height=height,
            )
            for name, extra_args, byte_volume in DEFAULT_SUITE
        ],
    )


def _parse_suite(data: dict[str, Any], source_path: Path) -> SuiteConfig:
    context = f"suite: {source_path}"
    v = FieldValidator(data, context)

    name = v.require("name", str, empty_check=True)
    description = v.optional("description", str, default="") or ""

    defaults = SuiteDefaults()
    if "defaults" in data:
        defaults = _parse_defaults(data["defaults"], source_path)

    benchmarks_data = data.get("benchmarks")
    if benchmarks_data is None:
        raise ConfigurationError(f"Missing required field 'benchmarks' in {context}")
    if not isinstance(benchmarks_data, list):
        raise ConfigurationError(f"Invalid 'benchmarks': expected list in {context}")
    if not benchmarks_data:
        raise ConfigurationError(
            f"Empty 'benchmarks': at least one benchmark required in {context}"
        )

    benchmarks = [
        _parse_benchmark(entry, index, defaults, context)
        for index, entry in enumerate(benchmarks_data)
    ]

    return SuiteConfig(
        name=name,
        description=description,
        defaults=defaults,
        benchmarks=benchmarks,
    )


def _parse_defaults(data: Any, source_path: Path) -> SuiteDefaults:
    context = f"defaults in {source_path}"
    v = FieldValidator(data, context)
    v.require_mapping()

    base = SuiteDefaults()
    return SuiteDefaults(
        width=v.optional_int("width", default=base.width, minimum=1),
        height=v.optional_int("height", default=base.height, minimum=1),
        warmup_runs=v.optional_int("warmup_runs", default=base.warmup_runs, minimum=0),
        measured_runs=v.optional_int(
            "measured_runs", default=base.measured_runs, minimum=1
        ),
    )


def _parse_benchmark(
    data: Any,
    index: int,
    defaults: SuiteDefaults,
    parent_context: str,
) -> BenchmarkSpec:
    context = f"benchmarks[{index}] in {parent_context}"
    v = FieldValidator(data, context)
    v.require_mapping()

    try:
        return BenchmarkSpec(
            name=v.require("name", str, empty_check=True),
            extra_args=tuple(v.optional_str_list("args")),
            byte_volume=v.require_int("bytes", minimum=0),
            terminal_width=v.optional_int("width", default=defaults.width, minimum=1),
            terminal_height=v.optional_int(
                "height", default=defaults.height, minimum=1
            ),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid benchmark in {context}: {e}") from e
