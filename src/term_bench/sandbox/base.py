"""Base sandbox abstraction for emulator execution.

A sandbox provides the isolated environment an emulator run happens in:
a virtual display sized to the workload geometry and, where required, a
container boundary. Sandboxes are started before the run timer begins
and stopped after the child exits, so their startup cost is never part
of a measurement.
"""

from __future__ import annotations

import os
import shutil
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from term_bench.logging_config import get_logger
from term_bench.sandbox.exceptions import SandboxUnavailable

if TYPE_CHECKING:
    from term_bench.models.benchmark import Geometry

__all__ = ["HOST_RESOURCE", "BaseSandbox"]

logger = get_logger(__name__)

HOST_RESOURCE = "host"


class BaseSandbox(ABC):
    """Abstract base class for sandbox implementations.

    All sandboxes must implement:
    - name: Property returning the sandbox identifier
    - is_available(): Check that the required tools are installed
    - start() / stop(): Bring the environment up and tear it down
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the sandbox identifier (e.g. "xvfb", "docker")."""
        ...

    @property
    def resource(self) -> str:
        """Name of the host resource a run occupies, used as the lock key.

        Every sandbox kind competes for the same CPU and memory, so they
        all share one name and at most one emulator run is timed per host.

        """
        return HOST_RESOURCE

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether all tools the sandbox needs are installed."""
        ...

    @abstractmethod
    async def start(self, geometry: Geometry) -> None:
        """Bring up the environment for a run at the given geometry.

        Raises:
            SandboxUnavailable: If the environment cannot be started.

        """
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Tear the environment down. Must be safe to call after a failed start."""
        ...

    def wrap_command(self, argv: list[str]) -> list[str]:
        """Return the command that runs ``argv`` inside the sandbox."""
        return list(argv)

    def environment(self) -> dict[str, str]:
        """Return the environment for the child process."""
        return dict(os.environ)

    def has_executable(self, executable: str) -> bool:
        """Check whether ``executable`` can be launched inside the sandbox."""
        return shutil.which(executable) is not None

    async def executable_available(self, executable: str) -> bool:
        """Check for ``executable`` once the sandbox has been started.

        Sandboxes whose filesystem is only reachable while running check
        here instead of in ``has_executable``.

        """
        return self.has_executable(executable)

    def ensure_available(self) -> None:
        """Raise SandboxUnavailable if the sandbox cannot be used on this host."""
        if not self.is_available():
            raise SandboxUnavailable(
                f"Sandbox '{self.name}' is not available on this host"
            )

    @asynccontextmanager
    async def session(self, geometry: Geometry) -> AsyncIterator[BaseSandbox]:
        """Run the block with the environment started, stopping it on every exit path."""
        self.ensure_available()
        try:
            await self.start(geometry)
            logger.debug("sandbox_started", sandbox=self.name, geometry=str(geometry))
            yield self
        finally:
            await self.stop()
            logger.debug("sandbox_stopped", sandbox=self.name)
