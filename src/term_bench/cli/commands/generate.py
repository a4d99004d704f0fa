"""Generate command implementation.

This module implements the command that creates (or reuses) the cached
workload artifact for one benchmark spec.
"""

from argparse import Namespace

from term_bench.cli.commands.base import BaseCommand, CommandResult, resolve_settings
from term_bench.logging_config import get_logger
from term_bench.utils import format_bytes

__all__ = ["GenerateCommand"]

logger = get_logger(__name__)


class GenerateCommand(BaseCommand):
    """Command to generate a workload artifact."""

    @property
    def name(self) -> str:
        """Get the command name."""
        return "generate"

    async def execute(self, args: Namespace) -> CommandResult:
        """Ensure the artifact exists, regenerating it with ``--force``.

        Args:
            args: Parsed arguments with the spec and ``force`` flag.

        Returns:
            CommandResult whose message is the artifact path and size.

        """
        settings = resolve_settings(args)
        spec = self.spec_from_args(args)
        generator = self.build_generator(settings)

        if getattr(args, "force", False):
            generator.delete_artifact(spec)

        path = await generator.ensure_artifact(spec)
        size = path.stat().st_size
        logger.info("generate_complete", benchmark=spec.label, path=str(path), size=size)

        return CommandResult(
            exit_code=0,
            message=f"{path} ({format_bytes(size)})",
        )
