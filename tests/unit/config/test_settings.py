"""Unit tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from term_bench.config.settings import (
    EmulatorSettings,
    MeasurementSettings,
    SandboxSettings,
    get_settings,
)
from term_bench.models.enums import SandboxKind, TimerKind


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self) -> None:
        settings = get_settings()
        assert settings.generator.command == "vtebench"
        assert settings.sandbox.kind is SandboxKind.xvfb
        assert settings.measurement.timer is TimerKind.internal
        assert settings.storage.results_dir == Path("results")
        assert "{artifact}" in settings.emulator.command

    def test_singleton(self) -> None:
        assert get_settings() is get_settings()


class TestEnvironmentOverrides:
    """Tests for TERM_BENCH_* environment variables."""

    def test_emulator(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERM_BENCH_EMULATOR_COMMAND", "kitty -e {shell} -c 'cat {artifact}'")
        monkeypatch.setenv("TERM_BENCH_EMULATOR_TIMEOUT_SECONDS", "12.5")
        settings = EmulatorSettings()
        assert settings.command.startswith("kitty")
        assert settings.timeout_seconds == 12.5

    def test_measurement(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERM_BENCH_MEASURE_MEASURED_RUNS", "9")
        monkeypatch.setenv("TERM_BENCH_MEASURE_TIMER", "hyperfine")
        settings = get_settings()
        assert settings.measurement.measured_runs == 9
        assert settings.measurement.timer is TimerKind.hyperfine

    def test_storage(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("TERM_BENCH_RESULTS_DIR", str(tmp_path))
        assert get_settings().storage.results_dir == tmp_path

    def test_sandbox_kind(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERM_BENCH_SANDBOX_KIND", "docker")
        assert SandboxSettings().kind is SandboxKind.docker


class TestValidation:
    """Tests for rejected values."""

    def test_zero_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERM_BENCH_EMULATOR_TIMEOUT_SECONDS", "0")
        with pytest.raises(ValidationError):
            EmulatorSettings()

    def test_max_attempts_range(self) -> None:
        with pytest.raises(ValidationError):
            MeasurementSettings(max_attempts=0)

    def test_display_format(self) -> None:
        with pytest.raises(ValidationError):
            SandboxSettings(display="99")
