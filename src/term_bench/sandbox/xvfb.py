"""Virtual X display sandbox.

Starts a private Xvfb server sized to the workload geometry before each
run and points the emulator at it through ``DISPLAY``. Rendering to an
off-screen framebuffer removes compositor, vsync and input noise from the
measurement.
"""

from __future__ import annotations

import asyncio
import os
import shlex
import shutil
import time
from pathlib import Path
from typing import TYPE_CHECKING

from term_bench.config.defaults import (
    DEFAULT_COLOR_DEPTH,
    DEFAULT_DISPLAY,
    DEFAULT_SANDBOX_STARTUP_SECONDS,
    DEFAULT_XVFB_COMMAND,
)
from term_bench.logging_config import get_logger
from term_bench.process import terminate_process
from term_bench.sandbox.base import BaseSandbox
from term_bench.sandbox.exceptions import SandboxUnavailable

if TYPE_CHECKING:
    from term_bench.models.benchmark import Geometry

__all__ = ["XvfbSandbox", "screen_size"]

logger = get_logger(__name__)

# Approximate cell size of a monospace font at the emulator's default size.
CELL_WIDTH_PX = 10
CELL_HEIGHT_PX = 20
# Room for window decorations and padding around the grid.
SCREEN_MARGIN_PX = 64

_X11_SOCKET_DIR = Path("/tmp/.X11-unix")
_POLL_INTERVAL = 0.05


def screen_size(geometry: Geometry, color_depth: int = DEFAULT_COLOR_DEPTH) -> str:
    """Return the Xvfb ``-screen`` argument for a terminal geometry.

    Example:
        >>> screen_size(Geometry(width=80, height=24))
        '864x544x24'

    """
    width = geometry.width * CELL_WIDTH_PX + SCREEN_MARGIN_PX
    height = geometry.height * CELL_HEIGHT_PX + SCREEN_MARGIN_PX
    return f"{width}x{height}x{color_depth}"


class XvfbSandbox(BaseSandbox):
    """Runs emulators against a private Xvfb display.

    Args:
        command: Xvfb executable.
        display: Display to serve (e.g. ``:99``).
        color_depth: Screen color depth.
        startup_seconds: Maximum wait for the server socket to appear.

    """

    def __init__(
        self,
        command: str = DEFAULT_XVFB_COMMAND,
        display: str = DEFAULT_DISPLAY,
        color_depth: int = DEFAULT_COLOR_DEPTH,
        startup_seconds: float = DEFAULT_SANDBOX_STARTUP_SECONDS,
    ) -> None:
        self._command = shlex.split(command)
        self._display = display
        self._color_depth = color_depth
        self._startup_seconds = startup_seconds
        self._proc: asyncio.subprocess.Process | None = None

    @property
    def name(self) -> str:
        return "xvfb"

    @property
    def display(self) -> str:
        return self._display

    def is_available(self) -> bool:
        return bool(self._command) and shutil.which(self._command[0]) is not None

    def build_command(self, geometry: Geometry) -> list[str]:
        """Construct the Xvfb server command line."""
        return [
            *self._command,
            self._display,
            "-screen",
            "0",
            screen_size(geometry, self._color_depth),
            "-nolisten",
            "tcp",
        ]

    def environment(self) -> dict[str, str]:
        env = dict(os.environ)
        env["DISPLAY"] = self._display
        return env

    async def start(self, geometry: Geometry) -> None:
        """Start Xvfb and wait until it accepts clients.

        Raises:
            SandboxUnavailable: If the server exits or never creates its socket.

        """
        if self._socket_path().exists():
            raise SandboxUnavailable(
                f"Display {self._display} is already in use ({self._socket_path()} exists)"
            )

        cmd = self.build_command(geometry)
        logger.debug("xvfb_starting", command=shlex.join(cmd))
        try:
            self._proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
                start_new_session=True,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise SandboxUnavailable(f"Cannot start Xvfb: {e}") from e

        await self._wait_ready(self._proc)

    async def stop(self) -> None:
        proc, self._proc = self._proc, None
        if proc is not None:
            await terminate_process(proc)

    def _socket_path(self) -> Path:
        return _X11_SOCKET_DIR / f"X{self._display.lstrip(':')}"

    async def _wait_ready(self, proc: asyncio.subprocess.Process) -> None:
        deadline = time.monotonic() + self._startup_seconds
        socket_path = self._socket_path()

        while time.monotonic() < deadline:
            if proc.returncode is not None:
                raise SandboxUnavailable(
                    f"Xvfb exited with status {proc.returncode} on {self._display}"
                )
            if socket_path.exists():
                return
            await asyncio.sleep(_POLL_INTERVAL)

        raise SandboxUnavailable(
            f"Xvfb did not come up on {self._display} "
            f"within {self._startup_seconds:.0f}s"
        )
