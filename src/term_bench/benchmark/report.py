"""Comparison of the latest result record against history.

``report`` is a pure function over already-loaded records: it picks the
most recent record, computes the percentage change of its mean against
the closest earlier record of the same workload, and classifies the
change. A slower mean is a regression.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import Field

from term_bench.benchmark.statistics import percent_change
from term_bench.config.defaults import DEFAULT_REGRESSION_THRESHOLD_PERCENT
from term_bench.models.base import BaseSchema
from term_bench.models.enums import ReportVerdict
from term_bench.models.results import ResultRecord
from term_bench.utils import format_bytes

__all__ = ["ReportSummary", "classify", "report"]

_RULE_WIDTH = 60


def classify(delta_percent: float | None, threshold_percent: float) -> ReportVerdict:
    """Map a mean change to a verdict.

    Args:
        delta_percent: Change of the mean in percent, None if unknown.
        threshold_percent: Magnitude at or below which the change is ignored.

    Returns:
        regression for a slower mean, improvement for a faster one,
        incomparable when no percentage can be computed.

    """
    if delta_percent is None:
        return ReportVerdict.incomparable
    if delta_percent > threshold_percent:
        return ReportVerdict.regression
    if delta_percent < -threshold_percent:
        return ReportVerdict.improvement
    return ReportVerdict.unchanged


class ReportSummary(BaseSchema):
    """Latest record of a benchmark compared to its predecessor.

    Attributes:
        benchmark: Benchmark name.
        latest: Most recent record, None when there is no history.
        previous: Closest earlier record with the same spec as ``latest``.
        delta_percent: Change of the mean wall-clock time in percent.
        verdict: Classification of the change.
        history_size: Number of records considered.

    """

    benchmark: str
    latest: ResultRecord | None = None
    previous: ResultRecord | None = None
    delta_percent: float | None = None
    verdict: ReportVerdict
    history_size: int = Field(default=0, ge=0)

    @property
    def is_regression(self) -> bool:
        return self.verdict is ReportVerdict.regression

    def render(self) -> str:
        """Render the summary as human-readable text."""
        lines = [f"Benchmark: {self.benchmark}", "=" * _RULE_WIDTH]

        if self.latest is None:
            lines.append("No results recorded.")
            return "\n".join(lines)

        lines.extend(_render_record("Latest", self.latest))

        if self.previous is None:
            lines.append("")
            lines.append(
                f"No previous results at {format_bytes(self.latest.spec.byte_volume)} "
                f"and {self.latest.spec.geometry} to compare against."
            )
            return "\n".join(lines)

        lines.append("")
        lines.extend(_render_record("Previous", self.previous))
        lines.append("")
        lines.append("-" * _RULE_WIDTH)

        if self.delta_percent is None:
            lines.append(
                f"Change: n/a, previous mean is zero ({self.verdict.value.upper()})"
            )
        else:
            sign = "+" if self.delta_percent >= 0 else ""
            lines.append(
                f"Change: {sign}{self.delta_percent:.1f}% mean wall-clock time "
                f"({self.verdict.value.upper()})"
            )
        return "\n".join(lines)


def _render_record(title: str, record: ResultRecord) -> list[str]:
    lines = [
        f"{title}: {record.recorded_at.isoformat(timespec='seconds')}",
        f"  Workload:   {record.label} "
        f"({format_bytes(record.spec.byte_volume)}, {record.spec.geometry})",
        f"  Mean:       {record.mean:.4f}s ± {record.stddev:.4f}s",
        f"  Min / Max:  {record.min:.4f}s / {record.max:.4f}s",
        f"  Samples:    {record.sample_count} (+{record.warmup_count} warm-up)",
    ]
    if record.throughput_bytes_per_second is not None:
        lines.append(
            f"  Throughput: {format_bytes(record.throughput_bytes_per_second)}/s"
        )
    return lines


def report(
    benchmark_name: str,
    history: Sequence[ResultRecord],
    regression_threshold_percent: float = DEFAULT_REGRESSION_THRESHOLD_PERCENT,
) -> ReportSummary:
    """Compare the most recent record against the one before it.

    Only records whose spec equals the latest one are comparable; a
    record taken at another byte volume or geometry is skipped.

    Args:
        benchmark_name: Benchmark being reported.
        history: Records of the benchmark; order does not matter.
        regression_threshold_percent: Changes within this magnitude are
            reported as unchanged.

    Returns:
        ReportSummary with verdict ``no-data`` for an empty history,
        ``no-history`` when no earlier record shares the latest spec and
        ``incomparable`` when the previous mean is zero.

    Example:
        Means 2.0s then 3.0s give ``delta_percent == 50.0`` and verdict
        ``regression``.

    """
    ordered = sorted(history, key=lambda r: r.recorded_at)

    if not ordered:
        return ReportSummary(benchmark=benchmark_name, verdict=ReportVerdict.no_data)

    latest = ordered[-1]
    comparable = [r for r in ordered[:-1] if r.spec == latest.spec]
    if not comparable:
        return ReportSummary(
            benchmark=benchmark_name,
            latest=latest,
            verdict=ReportVerdict.no_history,
            history_size=len(ordered),
        )

    previous = comparable[-1]
    delta = percent_change(previous.mean, latest.mean)
    return ReportSummary(
        benchmark=benchmark_name,
        latest=latest,
        previous=previous,
        delta_percent=delta,
        verdict=classify(delta, regression_threshold_percent),
        history_size=len(ordered),
    )
