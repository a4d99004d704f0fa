"""Local sandbox that runs emulators on the host display.

Provides no isolation; the emulator renders to whatever ``DISPLAY`` the
harness inherited. Useful on a developer machine and in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from term_bench.sandbox.base import BaseSandbox

if TYPE_CHECKING:
    from term_bench.models.benchmark import Geometry

__all__ = ["LocalSandbox"]


class LocalSandbox(BaseSandbox):
    """Runs emulators directly on the host.

    Note:
        Timings taken on a shared desktop pick up compositor and input
        noise. Prefer XvfbSandbox for numbers that are compared over time.

    """

    @property
    def name(self) -> str:
        return "local"

    def is_available(self) -> bool:
        """Local sandbox is always available."""
        return True

    async def start(self, geometry: Geometry) -> None:  # noqa: ARG002
        return None

    async def stop(self) -> None:
        return None
