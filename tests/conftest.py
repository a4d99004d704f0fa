"""Pytest configuration and shared fixtures for the term-bench test suite.

External collaborators (workload generator, emulator) are replaced by
small POSIX shell scripts written into ``tmp_path``. Every script appends
one line to an invocation log so tests can count how often it ran.
"""

import stat
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from term_bench.config.settings import get_settings
from term_bench.models.benchmark import BenchmarkSpec
from term_bench.models.results import (
    ExecutionResult,
    ExitStatus,
    ResultRecord,
    SampleDistribution,
)
from term_bench.sandbox.local import LocalSandbox


def write_script(path: Path, body: str) -> Path:
    """Write an executable ``/bin/sh`` script and return its path."""
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def count_lines(path: Path) -> int:
    """Number of lines in an invocation log (0 if it was never written)."""
    if not path.exists():
        return 0
    return len(path.read_text().splitlines())


@pytest.fixture
def generator_log(tmp_path: Path) -> Path:
    """Lines appended by the fake generators, one per invocation."""
    return tmp_path / "generator.log"


@pytest.fixture
def emulator_log(tmp_path: Path) -> Path:
    """Lines appended by the fake emulators, one per invocation."""
    return tmp_path / "emulator.log"


@pytest.fixture
def fake_generator(tmp_path: Path, generator_log: Path) -> Path:
    """Generator writing ``-b N`` zero bytes to stdout."""
    return write_script(
        tmp_path / "fake-vtebench",
        f"""echo "$@" >> '{generator_log}'
bytes=0
while [ $# -gt 0 ]; do
  case "$1" in
    -b) bytes="$2"; shift 2 ;;
    *) shift ;;
  esac
done
head -c "$bytes" /dev/zero
""",
    )


@pytest.fixture
def failing_generator(tmp_path: Path, generator_log: Path) -> Path:
    """Generator that writes part of a stream and then exits with status 3."""
    return write_script(
        tmp_path / "broken-vtebench",
        f"""echo "$@" >> '{generator_log}'
printf 'partial output'
echo 'generator exploded' >&2
exit 3
""",
    )


@pytest.fixture
def fake_emulator(tmp_path: Path, emulator_log: Path) -> Path:
    """Emulator that runs ``<shell> -c <command>`` given as ``-e <shell> -c <command>``."""
    return write_script(
        tmp_path / "fake-term",
        f"""echo "run" >> '{emulator_log}'
shift
exec "$@" > /dev/null
""",
    )


@pytest.fixture
def hanging_emulator(tmp_path: Path) -> Path:
    """Emulator that never terminates on its own."""
    return write_script(tmp_path / "hanging-term", "exec sleep 60\n")


@pytest.fixture
def failing_emulator(tmp_path: Path, emulator_log: Path) -> Path:
    """Emulator that always exits with status 7."""
    return write_script(
        tmp_path / "failing-term",
        f"""echo "run" >> '{emulator_log}'
exit 7
""",
    )


@pytest.fixture
def emulator_template(fake_emulator: Path) -> str:
    return f"{fake_emulator} -e {{shell}} -c 'cat {{artifact}}'"


@pytest.fixture
def local_sandbox() -> LocalSandbox:
    return LocalSandbox()


@pytest.fixture
def lock_dir(tmp_path: Path) -> Path:
    return tmp_path / "locks"


@pytest.fixture
def scrolling_spec() -> BenchmarkSpec:
    return BenchmarkSpec(
        name="scrolling",
        byte_volume=4096,
        terminal_width=80,
        terminal_height=24,
    )


def make_result(
    spec: BenchmarkSpec,
    seconds: float,
    status: ExitStatus | None = None,
    timestamp: datetime | None = None,
) -> ExecutionResult:
    """Build an ExecutionResult for mocks."""
    return ExecutionResult(
        spec=spec,
        wall_clock_seconds=seconds,
        timestamp=timestamp or datetime.now(timezone.utc),
        exit_status=status or ExitStatus.success(),
    )


def make_distribution(spec: BenchmarkSpec, durations: list[float]) -> SampleDistribution:
    start = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
    return SampleDistribution(
        spec=spec,
        samples=[
            make_result(spec, seconds, timestamp=start + timedelta(seconds=i))
            for i, seconds in enumerate(durations)
        ],
        warmup_discarded=1,
        attempts=len(durations) + 1,
    )


def make_record(
    spec: BenchmarkSpec,
    mean: float,
    recorded_at: datetime,
) -> ResultRecord:
    """Build a ResultRecord with a given mean."""
    return ResultRecord(
        benchmark=spec.record_name,
        label=spec.label,
        spec=spec,
        mean=mean,
        stddev=0.1,
        min=mean - 0.1,
        max=mean + 0.1,
        sample_count=3,
        warmup_count=1,
        recorded_at=recorded_at,
        throughput_bytes_per_second=spec.byte_volume / mean,
    )


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop the cached settings so environment changes take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
