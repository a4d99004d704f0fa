"""Application settings using pydantic-settings.

Every setting can be overridden through environment variables; CLI flags
take precedence over both.

Environment Variables:
    TERM_BENCH_GENERATOR_COMMAND: Workload generator executable
    TERM_BENCH_GENERATOR_TERM: Terminal type passed to the generator
    TERM_BENCH_GENERATOR_TIMEOUT_SECONDS: Cutoff for artifact generation
    TERM_BENCH_EMULATOR_COMMAND: Emulator command template
    TERM_BENCH_EMULATOR_SHELL: Shell the emulator runs the feeder in
    TERM_BENCH_EMULATOR_TIMEOUT_SECONDS: Hard cutoff for a single run
    TERM_BENCH_EMULATOR_KILL_GRACE_SECONDS: Delay between SIGTERM and SIGKILL
    TERM_BENCH_SANDBOX_KIND: local, xvfb or docker
    TERM_BENCH_SANDBOX_DISPLAY: X display number used for the virtual display
    TERM_BENCH_SANDBOX_DOCKER_IMAGE: Image used by the docker sandbox
    TERM_BENCH_SANDBOX_LOCK_DIR: Directory holding the host-wide lock files
    TERM_BENCH_MEASURE_WARMUP_RUNS: Discarded warm-up runs per measurement
    TERM_BENCH_MEASURE_MEASURED_RUNS: Retained runs per measurement
    TERM_BENCH_MEASURE_MAX_ATTEMPTS: Attempts per measured run before failing
    TERM_BENCH_MEASURE_TIMER: internal or hyperfine
    TERM_BENCH_RESULTS_DIR: Root directory of result records
    TERM_BENCH_ARTIFACTS_DIR: Directory of cached workload artifacts
"""

from __future__ import annotations

import tempfile
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from term_bench.config.defaults import (
    DEFAULT_ARTIFACTS_DIR,
    DEFAULT_COLOR_DEPTH,
    DEFAULT_DISPLAY,
    DEFAULT_DOCKER_IMAGE,
    DEFAULT_EMULATOR_COMMAND,
    DEFAULT_GENERATOR_COMMAND,
    DEFAULT_GENERATOR_TERM,
    DEFAULT_HYPERFINE_COMMAND,
    DEFAULT_KILL_GRACE_SECONDS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MEASURED_RUNS,
    DEFAULT_REGRESSION_THRESHOLD_PERCENT,
    DEFAULT_RESULTS_DIR,
    DEFAULT_RUN_TIMEOUT_SECONDS,
    DEFAULT_SANDBOX_STARTUP_SECONDS,
    DEFAULT_SHELL,
    DEFAULT_WARMUP_RUNS,
    DEFAULT_XVFB_COMMAND,
    MAX_ATTEMPTS_MAX,
    MAX_ATTEMPTS_MIN,
)
from term_bench.models.enums import SandboxKind, TimerKind

__all__ = [
    "EmulatorSettings",
    "GeneratorSettings",
    "MeasurementSettings",
    "SandboxSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
]


class GeneratorSettings(BaseSettings):
    """Settings for the workload generator adapter.

    Attributes:
        command: Generator executable (name on PATH or absolute path).
        term: Terminal type passed with ``--term``; empty to omit the flag.
        timeout_seconds: Cutoff for one generation, None for no cutoff.

    """

    model_config = SettingsConfigDict(
        env_prefix="TERM_BENCH_GENERATOR_",
        extra="ignore",
    )

    command: str = Field(
        default=DEFAULT_GENERATOR_COMMAND,
        description="Workload generator executable",
    )
    term: str = Field(
        default=DEFAULT_GENERATOR_TERM,
        description="Terminal type passed to the generator",
    )
    timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Cutoff for artifact generation in seconds",
    )


class EmulatorSettings(BaseSettings):
    """Settings for the emulator-under-test.

    Attributes:
        command: Command template. ``{shell}``, ``{artifact}``, ``{width}``
            and ``{height}`` are substituted per run.
        shell: Shell used by the emulator to run the feeding command.
        timeout_seconds: Hard wall-clock cutoff for one run.
        kill_grace_seconds: Time between SIGTERM and SIGKILL on cutoff.

    """

    model_config = SettingsConfigDict(
        env_prefix="TERM_BENCH_EMULATOR_",
        extra="ignore",
    )

    command: str = Field(
        default=DEFAULT_EMULATOR_COMMAND,
        description="Emulator command template",
    )
    shell: str = Field(
        default=DEFAULT_SHELL,
        description="Shell the emulator runs the feeding command in",
    )
    timeout_seconds: float = Field(
        default=DEFAULT_RUN_TIMEOUT_SECONDS,
        gt=0,
        description="Hard wall-clock cutoff for a single run in seconds",
    )
    kill_grace_seconds: float = Field(
        default=DEFAULT_KILL_GRACE_SECONDS,
        ge=0,
        description="Delay between SIGTERM and SIGKILL in seconds",
    )


class SandboxSettings(BaseSettings):
    """Settings for the isolated execution environment.

    Attributes:
        kind: Which sandbox wraps emulator runs.
        xvfb_command: Virtual X server executable.
        display: Display the virtual server listens on.
        color_depth: Color depth of the virtual screen.
        startup_seconds: How long to wait for the display to come up.
        docker_image: Image for the docker sandbox (must provide Xvfb).
        lock_dir: Directory for host-wide lock files.

    """

    model_config = SettingsConfigDict(
        env_prefix="TERM_BENCH_SANDBOX_",
        extra="ignore",
    )

    kind: SandboxKind = Field(
        default=SandboxKind.xvfb,
        description="Sandbox wrapping emulator runs",
    )
    xvfb_command: str = Field(
        default=DEFAULT_XVFB_COMMAND,
        description="Virtual X server executable",
    )
    display: str = Field(
        default=DEFAULT_DISPLAY,
        pattern=r"^:\d+$",
        description="X display used by the virtual server",
    )
    color_depth: int = Field(
        default=DEFAULT_COLOR_DEPTH,
        ge=8,
        le=32,
        description="Color depth of the virtual screen",
    )
    startup_seconds: float = Field(
        default=DEFAULT_SANDBOX_STARTUP_SECONDS,
        gt=0,
        description="Maximum wait for the virtual display to accept clients",
    )
    docker_image: str = Field(
        default=DEFAULT_DOCKER_IMAGE,
        description="Image used by the docker sandbox",
    )
    lock_dir: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "term-bench",
        description="Directory holding host-wide lock files",
    )


class MeasurementSettings(BaseSettings):
    """Settings for repeated sampling.

    Attributes:
        warmup_runs: Runs executed and discarded before measuring.
        measured_runs: Runs retained in the distribution.
        max_attempts: Attempts per measured run before the measurement fails.
        timer: Sampling backend.
        hyperfine_command: Executable used by the hyperfine backend.
        suite_timeout_seconds: Overall cutoff for a suite run.

    """

    model_config = SettingsConfigDict(
        env_prefix="TERM_BENCH_MEASURE_",
        extra="ignore",
    )

    warmup_runs: int = Field(default=DEFAULT_WARMUP_RUNS, ge=0)
    measured_runs: int = Field(default=DEFAULT_MEASURED_RUNS, ge=1)
    max_attempts: int = Field(
        default=DEFAULT_MAX_ATTEMPTS,
        ge=MAX_ATTEMPTS_MIN,
        le=MAX_ATTEMPTS_MAX,
    )
    timer: TimerKind = TimerKind.internal
    hyperfine_command: str = DEFAULT_HYPERFINE_COMMAND
    suite_timeout_seconds: float | None = Field(default=None, gt=0)


class StorageSettings(BaseSettings):
    """Settings for artifacts and result records.

    Attributes:
        results_dir: Root directory of persisted result records.
        artifacts_dir: Directory of cached workload artifacts.
        regression_threshold_percent: Mean change below which a report
            calls two runs unchanged.
        filename_safe_timestamps: Write record file names without colons.

    """

    model_config = SettingsConfigDict(
        env_prefix="TERM_BENCH_",
        extra="ignore",
    )

    results_dir: Path = Path(DEFAULT_RESULTS_DIR)
    artifacts_dir: Path = Path(DEFAULT_ARTIFACTS_DIR)
    regression_threshold_percent: float = Field(
        default=DEFAULT_REGRESSION_THRESHOLD_PERCENT,
        ge=0.0,
    )
    filename_safe_timestamps: bool = False


class Settings(BaseSettings):
    """Root settings container.

    Use get_settings() to access the cached singleton instance.

    """

    model_config = SettingsConfigDict(
        env_prefix="TERM_BENCH_",
        extra="ignore",
    )

    generator: GeneratorSettings = Field(default_factory=GeneratorSettings)
    emulator: EmulatorSettings = Field(default_factory=EmulatorSettings)
    sandbox: SandboxSettings = Field(default_factory=SandboxSettings)
    measurement: MeasurementSettings = Field(default_factory=MeasurementSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings singleton.

    Returns:
        The Settings instance with values from environment variables.

    """
    return Settings()
