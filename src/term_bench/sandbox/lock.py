"""Scoped acquisition of the singleton sandbox resource.

The virtual display and container runtime are exclusively owned by one
emulator run at a time per host. SandboxLock serializes runs inside the
process with an asyncio lock and across processes with an advisory
``flock`` on a lock file, and releases both on every exit path.
"""

from __future__ import annotations

import asyncio
import fcntl
import os
import time
from pathlib import Path
from types import TracebackType
from typing import IO, NamedTuple

from term_bench.logging_config import get_logger
from term_bench.utils import sanitize_path_component

__all__ = ["LockWindow", "SandboxLock"]

logger = get_logger(__name__)

_POLL_INTERVAL = 0.05


class LockWindow(NamedTuple):
    """Interval during which the resource was held (``time.monotonic`` values)."""

    acquired: float
    released: float

    def overlaps(self, other: LockWindow) -> bool:
        return self.acquired < other.released and other.acquired < self.released


class SandboxLock:
    """Mutual exclusion for one host resource.

    Use as an async context manager around sandbox start, the emulator
    run and sandbox teardown::

        async with lock:
            async with sandbox.session(spec.geometry):
                ...

    Attributes:
        resource: Name of the guarded resource.
        path: Lock file used for host-wide exclusion.
        windows: Completed hold intervals, oldest first.

    """

    def __init__(self, resource: str, lock_dir: Path) -> None:
        self.resource = resource
        self.path = lock_dir / f"{sanitize_path_component(resource)}.lock"
        self.windows: list[LockWindow] = []
        self._lock = asyncio.Lock()
        self._file: IO[str] | None = None
        self._acquired_at: float | None = None

    @property
    def held(self) -> bool:
        return self._acquired_at is not None

    async def acquire(self) -> None:
        """Wait until this process and no other on the host holds the resource."""
        await self._lock.acquire()
        try:
            await self._acquire_file()
        except BaseException:
            self._lock.release()
            raise
        self._acquired_at = time.monotonic()
        logger.debug("sandbox_lock_acquired", resource=self.resource)

    def release(self) -> None:
        acquired_at, self._acquired_at = self._acquired_at, None
        try:
            self._release_file()
        finally:
            if acquired_at is not None:
                self.windows.append(LockWindow(acquired_at, time.monotonic()))
            self._lock.release()
        logger.debug("sandbox_lock_released", resource=self.resource)

    async def __aenter__(self) -> SandboxLock:
        await self.acquire()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()

    async def _acquire_file(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        lock_file = self.path.open("a+", encoding="utf-8")
        waiting_logged = False
        try:
            # Non-blocking attempts keep the wait cancellable.
            while True:
                try:
                    fcntl.flock(lock_file, fcntl.LOCK_EX | fcntl.LOCK_NB)
                    break
                except BlockingIOError:
                    if not waiting_logged:
                        logger.info("sandbox_lock_waiting", resource=self.resource, path=str(self.path))
                        waiting_logged = True
                    await asyncio.sleep(_POLL_INTERVAL)
        except BaseException:
            lock_file.close()
            raise

        lock_file.seek(0)
        lock_file.truncate()
        lock_file.write(str(os.getpid()))
        lock_file.flush()
        self._file = lock_file

    def _release_file(self) -> None:
        lock_file, self._file = self._file, None
        if lock_file is None:
            return
        try:
            fcntl.flock(lock_file, fcntl.LOCK_UN)
        finally:
            lock_file.close()
