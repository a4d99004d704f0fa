"""Child process helpers shared by the generator adapter and the driver.

Children are started in their own session so that the whole process
group (emulator plus the shell and feeder it spawned) can be signalled.
"""

from __future__ import annotations

import asyncio
import os
import signal
from contextlib import suppress

from term_bench.logging_config import get_logger

__all__ = ["terminate_process"]

logger = get_logger(__name__)


def _signal_group(proc: asyncio.subprocess.Process, sig: int) -> None:
    with suppress(ProcessLookupError, PermissionError):
        os.killpg(proc.pid, sig)


async def terminate_process(
    proc: asyncio.subprocess.Process,
    grace_seconds: float = 2.0,
) -> int | None:
    """Stop a child and its process group, escalating from SIGTERM to SIGKILL.

    Safe to call on a process that already exited.

    Args:
        proc: Child started with ``start_new_session=True``.
        grace_seconds: Time allowed between SIGTERM and SIGKILL.

    Returns:
        The child's return code once reaped.

    """
    if proc.returncode is not None:
        # The leader is gone but stray group members may still hold the display.
        _signal_group(proc, signal.SIGKILL)
        return proc.returncode

    _signal_group(proc, signal.SIGTERM)
    try:
        await asyncio.wait_for(asyncio.shield(proc.wait()), timeout=grace_seconds)
    except asyncio.TimeoutError:
        logger.warning("process_kill", pid=proc.pid, grace_seconds=grace_seconds)
        _signal_group(proc, signal.SIGKILL)
        await proc.wait()
    _signal_group(proc, signal.SIGKILL)
    return proc.returncode
