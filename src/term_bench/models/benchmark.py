"""Benchmark identity and suite configuration models.

This module defines the immutable BenchmarkSpec that keys every cached
workload artifact and result record, and the models parsed from suite
YAML files.
"""

from __future__ import annotations

import hashlib
import json
import shlex

from pydantic import Field, field_validator, model_validator

from term_bench.config.defaults import (
    DEFAULT_MEASURED_RUNS,
    DEFAULT_TERMINAL_HEIGHT,
    DEFAULT_TERMINAL_WIDTH,
    DEFAULT_WARMUP_RUNS,
)
from term_bench.models.base import BaseSchema, FrozenSchema
from term_bench.utils import sanitize_path_component

__all__ = [
    "BenchmarkSpec",
    "Geometry",
    "SuiteConfig",
    "SuiteDefaults",
]

_DIGEST_LENGTH = 12


class Geometry(FrozenSchema):
    """Terminal size in character cells.

    Attributes:
        width: Columns.
        height: Rows.

    """

    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


class BenchmarkSpec(FrozenSchema):
    """One workload: generator mode, byte budget and terminal geometry.

    Geometry is part of the identity: the same generator mode at a
    different size produces a different artifact and a separate history.

    Attributes:
        name: Generator benchmark name (e.g. ``scrolling``).
        extra_args: Additional generator arguments (e.g. a scroll-region
            sub-mode and its numeric parameter).
        byte_volume: Target size of the generated stream in bytes.
        terminal_width: Columns the workload is generated for.
        terminal_height: Rows the workload is generated for.

    """

    name: str = Field(..., min_length=1)
    extra_args: tuple[str, ...] = ()
    byte_volume: int = Field(..., ge=0)
    terminal_width: int = Field(default=DEFAULT_TERMINAL_WIDTH, ge=1)
    terminal_height: int = Field(default=DEFAULT_TERMINAL_HEIGHT, ge=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Reject names that cannot be passed to the generator as one argument."""
        if any(ch.isspace() for ch in value):
            raise ValueError("benchmark name must not contain whitespace")
        return value

    @property
    def geometry(self) -> Geometry:
        """Terminal geometry the workload targets."""
        return Geometry(width=self.terminal_width, height=self.terminal_height)

    @property
    def label(self) -> str:
        """Human-readable identifier, e.g. ``scrolling-in-region --lines-from-bottom 1``."""
        if not self.extra_args:
            return self.name
        return f"{self.name} {shlex.join(self.extra_args)}"

    @property
    def cache_key(self) -> str:
        """Deterministic, filesystem-safe key derived from every field.

        The byte volume and geometry follow ``record_name`` in a fixed
        format, so two specs share a key only if they are equal.

        """
        return f"{self.record_name}-{self.byte_volume}b-{self.geometry}"

    @property
    def record_name(self) -> str:
        """Directory name under which result records for this spec are stored.

        A bare generator name is used as-is so ``report scrolling`` finds
        its history. Once arguments are present, or sanitizing changed the
        name, a short digest of the exact name and argument list is
        appended so distinct argument vectors never share a directory.

        """
        mode = sanitize_path_component("_".join([self.name, *self.extra_args]))
        if not self.extra_args and mode == self.name:
            return mode
        return f"{mode}-{self._identity_digest()}"

    def _identity_digest(self) -> str:
        payload = json.dumps([self.name, list(self.extra_args)])
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:_DIGEST_LENGTH]


class SuiteDefaults(BaseSchema):
    """Defaults applied to every benchmark in a suite file.

    Attributes:
        width: Terminal columns when a benchmark does not set its own.
        height: Terminal rows when a benchmark does not set its own.
        warmup_runs: Discarded runs per benchmark.
        measured_runs: Retained runs per benchmark.

    """

    width: int = Field(default=DEFAULT_TERMINAL_WIDTH, ge=1)
    height: int = Field(default=DEFAULT_TERMINAL_HEIGHT, ge=1)
    warmup_runs: int = Field(default=DEFAULT_WARMUP_RUNS, ge=0)
    measured_runs: int = Field(default=DEFAULT_MEASURED_RUNS, ge=1)


class SuiteConfig(BaseSchema):
    """A named list of benchmarks run one after another.

    Attributes:
        name: Suite name, used in log output.
        description: Free-form description.
        defaults: Values applied to every benchmark.
        benchmarks: Benchmarks in execution order.

    """

    name: str
    description: str = ""
    defaults: SuiteDefaults = Field(default_factory=SuiteDefaults)
    benchmarks: list[BenchmarkSpec]

    @model_validator(mode="after")
    def validate_at_least_one_benchmark(self) -> SuiteConfig:
        """Ensure the suite is not empty."""
        if not self.benchmarks:
            raise ValueError("At least one benchmark must be defined")
        return self
