"""Append-only storage of result records.

Each measurement is written to its own file,
``<results_dir>/<benchmark>/<iso8601-utc>.json``. Files are created with
exclusive-create mode so an existing record is never overwritten; when
two records land on the same timestamp a counter suffix is appended.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from term_bench.benchmark.exceptions import StorageError
from term_bench.logging_config import get_logger
from term_bench.models.results import ResultRecord
from term_bench.utils import sanitize_path_component, utc_now

if TYPE_CHECKING:
    from term_bench.models.results import SampleDistribution

__all__ = ["ResultStore", "record_filename"]

logger = get_logger(__name__)

_MAX_COLLISIONS = 1000


def record_filename(recorded_at: datetime, counter: int = 0, filename_safe: bool = False) -> str:
    """Return the file name for a record written at ``recorded_at``.

    Example:
        >>> record_filename(datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc))
        '2024-05-01T12:00:00+00:00.json'
        >>> record_filename(datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc), 2, True)
        '2024-05-01T12-00-00+00-00-2.json'

    """
    stamp = recorded_at.isoformat(timespec="seconds")
    if filename_safe:
        stamp = stamp.replace(":", "-")
    suffix = f"-{counter}" if counter else ""
    return f"{stamp}{suffix}.json"


class ResultStore:
    """Manages the historical corpus of result records.

    Attributes:
        results_dir: Root directory of all records.
        filename_safe: Replace colons in file names.

    """

    def __init__(self, results_dir: Path, filename_safe: bool = False) -> None:
        """Initialize the store.

        Args:
            results_dir: Root directory of all records.
            filename_safe: Write colon-free timestamps in file names.

        """
        self.results_dir = results_dir
        self.filename_safe = filename_safe

    def benchmark_dir(self, benchmark: str) -> Path:
        return self.results_dir / sanitize_path_component(benchmark)

    def record(
        self,
        distribution: SampleDistribution,
        recorded_at: datetime | None = None,
    ) -> ResultRecord:
        """Persist the summary of a distribution as a new record.

        Args:
            distribution: Freshly measured distribution.
            recorded_at: Record timestamp, defaults to now (UTC).

        Returns:
            The written record with ``path`` set.

        Raises:
            StorageError: If the file cannot be written.
            ValueError: If the distribution holds no samples.

        """
        record = ResultRecord.from_distribution(distribution, recorded_at or utc_now())
        directory = self.benchmark_dir(record.benchmark)

        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create {directory}: {e}") from e

        payload = json.dumps(record.model_dump(mode="json"), indent=2)

        for counter in range(_MAX_COLLISIONS):
            path = directory / record_filename(record.recorded_at, counter, self.filename_safe)
            try:
                with path.open("x", encoding="utf-8") as f:
                    f.write(payload)
                    f.write("\n")
            except FileExistsError:
                continue
            except OSError as e:
                raise StorageError(f"Failed to write record to {path}: {e}") from e

            record.path = path
            logger.info(
                "record_saved",
                benchmark=record.benchmark,
                path=str(path),
                mean=round(record.mean, 4),
            )
            return record

        raise StorageError(
            f"Too many records for {record.benchmark} at {record.recorded_at.isoformat()}"
        )

    def load_record(self, path: Path) -> ResultRecord:
        """Load one record file.

        Raises:
            StorageError: If the file cannot be read, parsed or validated.

        """
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StorageError(f"Failed to parse record from {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read record from {path}: {e}") from e

        try:
            record = ResultRecord.model_validate(data)
        except ValidationError as e:
            raise StorageError(f"Failed to validate record from {path}: {e}") from e
        record.path = path
        return record

    def load_history(
        self,
        benchmark: str,
    ) -> tuple[list[ResultRecord], list[tuple[Path, str]]]:
        """Load all records of a benchmark, oldest first.

        Returns:
            Tuple of (successfully loaded records, list of (failed_path, error_msg)).

        """
        directory = self.benchmark_dir(benchmark)
        if not directory.is_dir():
            return [], []

        records: list[ResultRecord] = []
        failures: list[tuple[Path, str]] = []

        for path in directory.glob("*.json"):
            try:
                records.append(self.load_record(path))
            except StorageError as e:
                logger.warning("record_load_failed", path=str(path), error=str(e))
                failures.append((path, str(e)))

        records.sort(key=lambda r: (r.recorded_at, _counter_of(r.path)))
        return records, failures

    def history(self, benchmark: str) -> list[ResultRecord]:
        """Load all readable records of a benchmark, oldest first."""
        records, _ = self.load_history(benchmark)
        return records

    def benchmarks(self) -> list[str]:
        """Names of all benchmarks with a record directory."""
        if not self.results_dir.is_dir():
            return []
        return sorted(p.name for p in self.results_dir.iterdir() if p.is_dir())


def _counter_of(path: Path | None) -> tuple[int, str]:
    """Sort key placing ``T-1.json`` after ``T.json`` and ``T-2.json`` after that."""
    if path is None:
        return 0, ""
    stem = path.stem
    head, _, tail = stem.rpartition("-")
    if head and tail.isdigit() and len(tail) < 4:
        return int(tail), path.name
    return 0, path.name
