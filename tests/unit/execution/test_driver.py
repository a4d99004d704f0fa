"""Unit tests for the execution driver.

Tests command expansion, timing, timeouts, failure statuses, and the
sandbox resource lock.
"""

import asyncio
import time
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from conftest import count_lines

from term_bench.execution.driver import ExecutionDriver, expand_command
from term_bench.execution.exceptions import EmulatorUnavailable, ExecutionError
from term_bench.models.benchmark import BenchmarkSpec
from term_bench.models.enums import ExitKind
from term_bench.sandbox.docker_sandbox import DockerSandbox
from term_bench.sandbox.exceptions import SandboxUnavailable
from term_bench.sandbox.local import LocalSandbox
from term_bench.sandbox.xvfb import XvfbSandbox


@pytest.fixture
def artifact(tmp_path: Path) -> Path:
    path = tmp_path / "scrolling-4096b-80x24.vte"
    path.write_bytes(b"\x1b[2J" + b"x" * 4092)
    return path


@pytest.fixture
def driver(local_sandbox: LocalSandbox, emulator_template: str, lock_dir: Path) -> ExecutionDriver:
    return ExecutionDriver(
        local_sandbox,
        emulator_command=emulator_template,
        timeout_seconds=10,
        kill_grace_seconds=0.5,
        lock_dir=lock_dir,
    )


class TestExpandCommand:
    """Tests for emulator command template expansion."""

    def test_whole_token_gets_raw_value(self) -> None:
        """Test a token that is only a placeholder is replaced verbatim."""
        argv = expand_command("term --file {artifact}", {"artifact": "/tmp/a b.vte"})
        assert argv == ["term", "--file", "/tmp/a b.vte"]

    def test_embedded_placeholder_is_quoted(self) -> None:
        """Test placeholders inside a shell string are shell-quoted."""
        argv = expand_command(
            "term -e {shell} -c 'cat {artifact}'",
            {"shell": "/bin/sh", "artifact": "/tmp/a b.vte"},
        )
        assert argv == ["term", "-e", "/bin/sh", "-c", "cat '/tmp/a b.vte'"]

    def test_geometry_placeholders(self) -> None:
        """Test width and height substitution."""
        argv = expand_command(
            "term --dimensions {width} {height}", {"width": "80", "height": "24"}
        )
        assert argv == ["term", "--dimensions", "80", "24"]


class TestRunOnce:
    """Tests for a single emulator run."""

    @pytest.mark.asyncio
    async def test_successful_run(
        self,
        driver: ExecutionDriver,
        artifact: Path,
        scrolling_spec: BenchmarkSpec,
        emulator_log: Path,
    ) -> None:
        """Test a clean run yields a success with a non-negative duration."""
        result = await driver.run_once(artifact, scrolling_spec)

        assert result.succeeded
        assert result.exit_status.kind is ExitKind.success
        assert result.wall_clock_seconds >= 0
        assert result.spec == scrolling_spec
        assert result.timestamp.tzinfo is not None
        assert count_lines(emulator_log) == 1

    @pytest.mark.asyncio
    async def test_empty_artifact(
        self, driver: ExecutionDriver, tmp_path: Path, scrolling_spec: BenchmarkSpec
    ) -> None:
        """Test a zero-byte artifact gives a near-zero, non-negative duration."""
        empty = tmp_path / "empty.vte"
        empty.write_bytes(b"")
        result = await driver.run_once(empty, scrolling_spec)
        assert result.succeeded
        assert 0 <= result.wall_clock_seconds < 5

    @pytest.mark.asyncio
    async def test_non_zero_exit_is_failure(
        self,
        local_sandbox: LocalSandbox,
        failing_emulator: Path,
        artifact: Path,
        scrolling_spec: BenchmarkSpec,
        lock_dir: Path,
    ) -> None:
        """Test a non-zero exit is reported, not raised."""
        driver = ExecutionDriver(
            local_sandbox, emulator_command=str(failing_emulator), lock_dir=lock_dir
        )
        result = await driver.run_once(artifact, scrolling_spec)

        assert not result.succeeded
        assert result.exit_status.code == 7
        assert result.exit_status.timed_out is False

    @pytest.mark.asyncio
    async def test_emulator_override(
        self,
        driver: ExecutionDriver,
        failing_emulator: Path,
        artifact: Path,
        scrolling_spec: BenchmarkSpec,
    ) -> None:
        """Test the per-call emulator command replaces the default."""
        result = await driver.run_once(
            artifact, scrolling_spec, emulator_command=str(failing_emulator)
        )
        assert result.exit_status.code == 7

    @pytest.mark.asyncio
    async def test_timeout_kills_unbounded_emulator(
        self,
        local_sandbox: LocalSandbox,
        hanging_emulator: Path,
        artifact: Path,
        scrolling_spec: BenchmarkSpec,
        lock_dir: Path,
    ) -> None:
        """Test an emulator that never exits is cut off and marked timed out."""
        driver = ExecutionDriver(
            local_sandbox,
            emulator_command=str(hanging_emulator),
            timeout_seconds=0.5,
            kill_grace_seconds=0.5,
            lock_dir=lock_dir,
        )

        started = time.monotonic()
        result = await driver.run_once(artifact, scrolling_spec)
        elapsed = time.monotonic() - started

        assert result.exit_status.timed_out is True
        assert result.exit_status.kind is ExitKind.failure
        assert result.wall_clock_seconds == pytest.approx(0.5, abs=0.4)
        assert elapsed < 3.0
        assert not driver.lock_for(local_sandbox).held

    @pytest.mark.asyncio
    async def test_missing_emulator(
        self,
        local_sandbox: LocalSandbox,
        artifact: Path,
        scrolling_spec: BenchmarkSpec,
        lock_dir: Path,
    ) -> None:
        """Test a missing emulator binary raises before anything is spawned."""
        driver = ExecutionDriver(
            local_sandbox,
            emulator_command="no-such-terminal -e {shell}",
            lock_dir=lock_dir,
        )
        with pytest.raises(EmulatorUnavailable) as exc_info:
            await driver.run_once(artifact, scrolling_spec)
        assert exc_info.value.exit_code == 4

    @pytest.mark.asyncio
    async def test_emulator_missing_from_docker_image(
        self,
        driver: ExecutionDriver,
        artifact: Path,
        scrolling_spec: BenchmarkSpec,
        tmp_path: Path,
    ) -> None:
        """Test an emulator absent from the image raises EmulatorUnavailable and removes the container."""
        sandbox = DockerSandbox(mount_dir=tmp_path / "mount")
        commands: list[list[str]] = []

        async def docker(cmd: list[str]) -> tuple[int, str]:
            commands.append(cmd)
            return (127, "") if 'command -v "$1"' in cmd else (0, "")

        with (
            patch.object(DockerSandbox, "is_available", return_value=True),
            patch.object(DockerSandbox, "_docker", new=AsyncMock(side_effect=docker)),
        ):
            with pytest.raises(EmulatorUnavailable) as exc_info:
                await driver.run_once(artifact, scrolling_spec, sandbox=sandbox)

        assert exc_info.value.exit_code == 4
        assert "docker" in str(exc_info.value)
        assert commands[-1][:3] == ["docker", "rm", "-f"]
        assert not any(part.startswith("DISPLAY=") for cmd in commands for part in cmd)
        assert sandbox.container is None
        assert not driver.lock_for(sandbox).held

    @pytest.mark.asyncio
    async def test_missing_artifact(
        self, driver: ExecutionDriver, tmp_path: Path, scrolling_spec: BenchmarkSpec
    ) -> None:
        """Test a missing artifact is rejected."""
        with pytest.raises(ExecutionError):
            await driver.run_once(tmp_path / "missing.vte", scrolling_spec)

    @pytest.mark.asyncio
    async def test_unavailable_sandbox(
        self,
        driver: ExecutionDriver,
        artifact: Path,
        scrolling_spec: BenchmarkSpec,
    ) -> None:
        """Test a sandbox whose tools are missing raises SandboxUnavailable."""
        sandbox = LocalSandbox()
        with patch.object(LocalSandbox, "is_available", return_value=False):
            with pytest.raises(SandboxUnavailable) as exc_info:
                await driver.run_once(artifact, scrolling_spec, sandbox=sandbox)
        assert exc_info.value.exit_code == 5

    @pytest.mark.asyncio
    async def test_sandbox_started_before_and_stopped_after(
        self,
        driver: ExecutionDriver,
        artifact: Path,
        scrolling_spec: BenchmarkSpec,
    ) -> None:
        """Test the sandbox session wraps the run at the spec geometry."""
        sandbox = LocalSandbox()
        with (
            patch.object(LocalSandbox, "start", new_callable=AsyncMock) as start,
            patch.object(LocalSandbox, "stop", new_callable=AsyncMock) as stop,
        ):
            await driver.run_once(artifact, scrolling_spec, sandbox=sandbox)

        start.assert_awaited_once_with(scrolling_spec.geometry)
        stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cancellation_tears_down(
        self,
        local_sandbox: LocalSandbox,
        hanging_emulator: Path,
        artifact: Path,
        scrolling_spec: BenchmarkSpec,
        lock_dir: Path,
    ) -> None:
        """Test cancelling a run kills the child and releases the lock."""
        driver = ExecutionDriver(
            local_sandbox,
            emulator_command=str(hanging_emulator),
            kill_grace_seconds=0.5,
            lock_dir=lock_dir,
        )
        task = asyncio.create_task(driver.run_once(artifact, scrolling_spec))
        await asyncio.sleep(0.3)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert not driver.lock_for(local_sandbox).held


class TestResourceExclusivity:
    """Tests for serialized access to the sandbox resource."""

    @pytest.mark.asyncio
    async def test_concurrent_runs_never_overlap(
        self,
        driver: ExecutionDriver,
        tmp_path: Path,
        local_sandbox: LocalSandbox,
    ) -> None:
        """Test runs for different specs requested together execute one at a time."""
        specs = [
            BenchmarkSpec(name="scrolling", byte_volume=2048),
            BenchmarkSpec(name="alt-screen-random-write", byte_volume=2048),
            BenchmarkSpec(name="unicode-random-write", byte_volume=2048),
        ]
        artifacts = []
        for spec in specs:
            path = tmp_path / f"{spec.cache_key}.vte"
            path.write_bytes(b"y" * spec.byte_volume)
            artifacts.append(path)

        results = await asyncio.gather(
            *(driver.run_once(a, s) for a, s in zip(artifacts, specs, strict=True))
        )

        assert all(r.succeeded for r in results)
        windows = driver.lock_for(local_sandbox).windows
        assert len(windows) == 3
        for i, first in enumerate(windows):
            for second in windows[i + 1 :]:
                assert not first.overlaps(second)

    @pytest.mark.asyncio
    async def test_different_sandbox_kinds_share_the_host(
        self,
        emulator_template: str,
        artifact: Path,
        scrolling_spec: BenchmarkSpec,
        lock_dir: Path,
    ) -> None:
        """Test a local run and an Xvfb run on one host never overlap."""
        local = LocalSandbox()
        xvfb = XvfbSandbox(display=":42")
        local_driver = ExecutionDriver(local, emulator_command=emulator_template, lock_dir=lock_dir)
        xvfb_driver = ExecutionDriver(xvfb, emulator_command=emulator_template, lock_dir=lock_dir)

        with (
            patch.object(XvfbSandbox, "is_available", return_value=True),
            patch.object(XvfbSandbox, "start", new_callable=AsyncMock),
            patch.object(XvfbSandbox, "stop", new_callable=AsyncMock),
        ):
            results = await asyncio.gather(
                local_driver.run_once(artifact, scrolling_spec),
                xvfb_driver.run_once(artifact, scrolling_spec),
                local_driver.run_once(artifact, scrolling_spec),
                xvfb_driver.run_once(artifact, scrolling_spec),
            )

        assert all(r.succeeded for r in results)
        local_lock = local_driver.lock_for(local)
        xvfb_lock = xvfb_driver.lock_for(xvfb)
        assert local_lock.path == xvfb_lock.path
        assert len(local_lock.windows) == 2
        assert len(xvfb_lock.windows) == 2
        for first in local_lock.windows:
            for second in xvfb_lock.windows:
                assert not first.overlaps(second)
