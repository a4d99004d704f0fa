"""Workload generator adapter.

Invokes the external generator (``vtebench`` by default) for a
BenchmarkSpec and caches the resulting byte stream under a path derived
from every field of the spec. An artifact is generated once and replayed
by every later run until it is explicitly deleted.
"""

from __future__ import annotations

import asyncio
import os
import shlex
import shutil
import tempfile
from pathlib import Path
from typing import IO, TYPE_CHECKING

from term_bench.config.defaults import DEFAULT_GENERATOR_COMMAND, DEFAULT_GENERATOR_TERM
from term_bench.logging_config import get_logger
from term_bench.process import terminate_process
from term_bench.workload.exceptions import GeneratorFailed, GeneratorUnavailable

if TYPE_CHECKING:
    from term_bench.config.settings import GeneratorSettings
    from term_bench.models.benchmark import BenchmarkSpec

__all__ = ["ARTIFACT_SUFFIX", "WorkloadGenerator"]

logger = get_logger(__name__)

ARTIFACT_SUFFIX = ".vte"
_PARTIAL_SUFFIX = ".partial"
_STDERR_TAIL = 500


class WorkloadGenerator:
    """Generates and caches workload artifacts.

    The cache is a content-addressed lookup: ``spec.cache_key`` maps to
    ``<artifacts_dir>/<cache_key>.vte``. Generation writes to a hidden
    temporary file in the same directory and renames it into place only
    after the generator exits cleanly, so a truncated stream is never
    visible at the final path.

    Attributes:
        artifacts_dir: Directory holding cached artifacts.

    """

    def __init__(
        self,
        artifacts_dir: Path,
        command: str = DEFAULT_GENERATOR_COMMAND,
        term: str | None = DEFAULT_GENERATOR_TERM,
        timeout_seconds: float | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            artifacts_dir: Directory holding cached artifacts.
            command: Generator executable, optionally with leading arguments.
            term: Terminal type passed with ``--term``; None or empty to omit.
            timeout_seconds: Cutoff for one generation, None for no cutoff.

        """
        self.artifacts_dir = artifacts_dir
        self._command = shlex.split(command)
        self._term = term or None
        self._timeout_seconds = timeout_seconds
        self._locks: dict[str, asyncio.Lock] = {}

    @classmethod
    def from_settings(
        cls,
        settings: GeneratorSettings,
        artifacts_dir: Path,
    ) -> WorkloadGenerator:
        """Create an adapter from generator settings."""
        return cls(
            artifacts_dir=artifacts_dir,
            command=settings.command,
            term=settings.term,
            timeout_seconds=settings.timeout_seconds,
        )

    def artifact_path(self, spec: BenchmarkSpec) -> Path:
        """Return the deterministic artifact path for a spec."""
        return self.artifacts_dir / f"{spec.cache_key}{ARTIFACT_SUFFIX}"

    def has_artifact(self, spec: BenchmarkSpec) -> bool:
        return self.artifact_path(spec).is_file()

    def delete_artifact(self, spec: BenchmarkSpec) -> bool:
        """Delete a cached artifact so the next request regenerates it.

        Returns:
            True if an artifact was removed.

        """
        path = self.artifact_path(spec)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.info("artifact_deleted", benchmark=spec.label, path=str(path))
        return True

    def build_command(self, spec: BenchmarkSpec) -> list[str]:
        """Build the generator command line for a spec."""
        cmd = list(self._command)
        if self._term:
            cmd.extend(["--term", self._term])
        cmd.extend(
            [
                "-w",
                str(spec.terminal_width),
                "-h",
                str(spec.terminal_height),
                "-b",
                str(spec.byte_volume),
                spec.name,
                *spec.extra_args,
            ]
        )
        return cmd

    async def ensure_artifact(self, spec: BenchmarkSpec) -> Path:
        """Return the artifact for a spec, generating it on first request.

        Args:
            spec: The workload to generate.

        Returns:
            Path to the complete artifact.

        Raises:
            GeneratorUnavailable: If the generator executable is missing.
            GeneratorFailed: If the generator exits non-zero or times out.

        """
        path = self.artifact_path(spec)
        lock = self._locks.setdefault(spec.cache_key, asyncio.Lock())

        async with lock:
            if path.is_file():
                logger.debug("artifact_cached", benchmark=spec.label, path=str(path))
                return path
            await self._generate(spec, path)

        return path

    async def _generate(self, spec: BenchmarkSpec, path: Path) -> None:
        cmd = self.build_command(spec)
        self._ensure_generator()
        self.artifacts_dir.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{spec.cache_key}.",
            suffix=_PARTIAL_SUFFIX,
            dir=self.artifacts_dir,
        )
        tmp_path = Path(tmp_name)
        committed = False

        logger.info(
            "artifact_generating",
            benchmark=spec.label,
            bytes=spec.byte_volume,
            geometry=str(spec.geometry),
            command=shlex.join(cmd),
        )

        try:
            with os.fdopen(fd, "wb") as out:
                return_code, stderr = await self._run_generator(spec, cmd, out)

            if return_code != 0:
                raise GeneratorFailed(spec, return_code, stderr=stderr)

            os.replace(tmp_path, path)
            committed = True
        finally:
            if not committed:
                tmp_path.unlink(missing_ok=True)

        logger.info(
            "artifact_generated",
            benchmark=spec.label,
            path=str(path),
            size=path.stat().st_size,
        )

    async def _run_generator(
        self,
        spec: BenchmarkSpec,
        cmd: list[str],
        out: IO[bytes],
    ) -> tuple[int, str]:
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=out,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise GeneratorUnavailable(
                f"Cannot start workload generator '{cmd[0]}': {e}"
            ) from e

        try:
            _, stderr_bytes = await asyncio.wait_for(
                proc.communicate(), timeout=self._timeout_seconds
            )
        except asyncio.TimeoutError:
            await terminate_process(proc)
            raise GeneratorFailed(spec, None, timed_out=True) from None
        except BaseException:
            # Cancellation: tear the generator down before propagating.
            await terminate_process(proc)
            raise

        stderr = stderr_bytes.decode(errors="replace").strip()[-_STDERR_TAIL:]
        return await proc.wait(), stderr

    def _ensure_generator(self) -> None:
        """Verify that the generator executable can be found."""
        executable = self._command[0] if self._command else ""
        if not executable or shutil.which(executable) is None:
            raise GeneratorUnavailable(
                f"Workload generator '{executable}' is not installed or not in PATH"
            )
