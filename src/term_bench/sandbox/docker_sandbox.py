"""Docker sandbox for running emulators inside an isolated container.

A long-lived container is started for each run with the artifact
directory mounted at the same path, a virtual display is started inside
it, and the emulator is launched with ``docker exec``. Container startup
happens before the run timer starts.
"""

from __future__ import annotations

import asyncio
import shlex
import shutil
import subprocess
import time
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

from term_bench.config.defaults import (
    DEFAULT_COLOR_DEPTH,
    DEFAULT_DISPLAY,
    DEFAULT_DOCKER_IMAGE,
    DEFAULT_SANDBOX_STARTUP_SECONDS,
)
from term_bench.logging_config import get_logger
from term_bench.sandbox.base import BaseSandbox
from term_bench.sandbox.exceptions import SandboxUnavailable
from term_bench.sandbox.xvfb import screen_size

if TYPE_CHECKING:
    from term_bench.models.benchmark import Geometry

__all__ = ["DockerSandbox"]

logger = get_logger(__name__)

_POLL_INTERVAL = 0.1


class DockerSandbox(BaseSandbox):
    """Runs emulators inside a Docker container with its own virtual display.

    The image must provide Xvfb and the emulator-under-test.

    Args:
        mount_dir: Host directory mounted read-write at the same path
            (the artifact cache).
        image: Docker image name/tag.
        display: Display served inside the container.
        color_depth: Screen color depth.
        startup_seconds: Maximum wait for the container display.

    """

    def __init__(
        self,
        mount_dir: Path,
        image: str = DEFAULT_DOCKER_IMAGE,
        display: str = DEFAULT_DISPLAY,
        color_depth: int = DEFAULT_COLOR_DEPTH,
        startup_seconds: float = DEFAULT_SANDBOX_STARTUP_SECONDS,
    ) -> None:
        self._mount_dir = mount_dir
        self._image = image
        self._display = display
        self._color_depth = color_depth
        self._startup_seconds = startup_seconds
        self._container: str | None = None

    @property
    def name(self) -> str:
        return "docker"

    @property
    def container(self) -> str | None:
        return self._container

    def is_available(self) -> bool:
        return shutil.which("docker") is not None

    def build_run_command(self, container_name: str) -> list[str]:
        """Construct the ``docker run`` command for the long-lived container."""
        mount = str(self._mount_dir.resolve())
        return [
            "docker",
            "run",
            "-d",
            "--rm",
            "--name",
            container_name,
            "-v",
            f"{mount}:{mount}:rw",
            self._image,
            "sleep",
            "infinity",
        ]

    def build_display_command(self, geometry: Geometry) -> list[str]:
        """Construct the command that starts Xvfb inside the container."""
        return [
            "docker",
            "exec",
            "-d",
            self._require_container(),
            "Xvfb",
            self._display,
            "-screen",
            "0",
            screen_size(geometry, self._color_depth),
            "-nolisten",
            "tcp",
        ]

    def has_executable(self, executable: str) -> bool:  # noqa: ARG002
        # The image is only searchable once the container runs.
        return True

    async def executable_available(self, executable: str) -> bool:
        """Look ``executable`` up on the PATH inside the running container."""
        rc, _ = await self._docker(self.build_lookup_command(executable))
        return rc == 0

    def build_lookup_command(self, executable: str) -> list[str]:
        """Construct the command that resolves ``executable`` in the container."""
        return [
            "docker",
            "exec",
            self._require_container(),
            "sh",
            "-c",
            'command -v "$1"',
            "sh",
            executable,
        ]

    def wrap_command(self, argv: list[str]) -> list[str]:
        return [
            "docker",
            "exec",
            "-e",
            f"DISPLAY={self._display}",
            self._require_container(),
            *argv,
        ]

    async def start(self, geometry: Geometry) -> None:
        """Start the container and its virtual display.

        Raises:
            SandboxUnavailable: If docker fails or the display never comes up.

        """
        self._mount_dir.mkdir(parents=True, exist_ok=True)
        container_name = f"term-bench-{uuid4().hex[:12]}"

        rc, output = await self._docker(self.build_run_command(container_name))
        if rc != 0:
            raise SandboxUnavailable(f"docker run failed with exit code {rc}: {output}")
        self._container = container_name
        logger.info("docker_container_started", container=container_name, image=self._image)

        rc, output = await self._docker(self.build_display_command(geometry))
        if rc != 0:
            raise SandboxUnavailable(f"Starting Xvfb in container failed: {output}")

        await self._wait_ready()

    async def stop(self) -> None:
        container, self._container = self._container, None
        if container is None:
            return
        rc, output = await self._docker(["docker", "rm", "-f", container])
        if rc != 0:
            logger.warning("docker_container_remove_failed", container=container, output=output)

    def _require_container(self) -> str:
        if self._container is None:
            raise SandboxUnavailable("Docker sandbox has not been started")
        return self._container

    async def _wait_ready(self) -> None:
        socket = f"/tmp/.X11-unix/X{self._display.lstrip(':')}"
        probe = ["docker", "exec", self._require_container(), "test", "-e", socket]
        deadline = time.monotonic() + self._startup_seconds

        while time.monotonic() < deadline:
            rc, _ = await self._docker(probe)
            if rc == 0:
                return
            await asyncio.sleep(_POLL_INTERVAL)

        raise SandboxUnavailable(
            f"Display {self._display} did not come up in container "
            f"within {self._startup_seconds:.0f}s"
        )

    @staticmethod
    async def _docker(cmd: list[str]) -> tuple[int, str]:
        """Run a docker CLI command and return (exit code, combined output)."""
        logger.debug("docker_command", command=shlex.join(cmd))
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except FileNotFoundError as e:
            raise SandboxUnavailable(
                "Docker is not installed or not in PATH. "
                "Install Docker to use --sandbox docker."
            ) from e
        stdout, _ = await proc.communicate()
        return await proc.wait(), stdout.decode(errors="replace").strip()
