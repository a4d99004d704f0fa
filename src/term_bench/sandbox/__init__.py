"""Sandbox implementations for isolated emulator execution.

Available sandboxes:
- XvfbSandbox: Private virtual X display on the host
- DockerSandbox: Virtual X display inside a Docker container
- LocalSandbox: Host display, no isolation

Base class:
- BaseSandbox: Abstract base class for all sandbox implementations
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from term_bench.models.enums import SandboxKind
from term_bench.sandbox.base import BaseSandbox
from term_bench.sandbox.docker_sandbox import DockerSandbox
from term_bench.sandbox.exceptions import SandboxUnavailable
from term_bench.sandbox.local import LocalSandbox
from term_bench.sandbox.lock import LockWindow, SandboxLock
from term_bench.sandbox.xvfb import XvfbSandbox

if TYPE_CHECKING:
    from term_bench.config.settings import SandboxSettings

__all__ = [
    "BaseSandbox",
    "create_sandbox",
    "DockerSandbox",
    "LocalSandbox",
    "LockWindow",
    "SandboxLock",
    "SandboxUnavailable",
    "XvfbSandbox",
]


def create_sandbox(settings: SandboxSettings, artifacts_dir: Path) -> BaseSandbox:
    """Create the sandbox selected by ``settings.kind``.

    Args:
        settings: Sandbox settings.
        artifacts_dir: Artifact cache, mounted into container sandboxes.

    Returns:
        An unstarted sandbox.

    """
    if settings.kind is SandboxKind.local:
        return LocalSandbox()
    if settings.kind is SandboxKind.docker:
        return DockerSandbox(
            mount_dir=artifacts_dir,
            image=settings.docker_image,
            display=settings.display,
            color_depth=settings.color_depth,
            startup_seconds=settings.startup_seconds,
        )
    return XvfbSandbox(
        command=settings.xvfb_command,
        display=settings.display,
        color_depth=settings.color_depth,
        startup_seconds=settings.startup_seconds,
    )
