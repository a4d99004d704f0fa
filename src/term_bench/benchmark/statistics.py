"""Summary statistics over wall-clock samples.

Durations are summarized with the sample standard deviation and a
bootstrap confidence interval of the mean. The bootstrap uses a fixed
seed so the same samples always render the same interval.
"""

from __future__ import annotations

import math
import random
import statistics as stats
from collections.abc import Sequence

from term_bench.models.results import DistributionSummary

__all__ = ["bootstrap_ci", "percent_change", "summarize"]


def bootstrap_ci(
    values: Sequence[float],
    confidence_level: float = 0.95,
    n_bootstrap: int = 1000,
) -> tuple[float, float]:
    """Compute bootstrap confidence interval for the mean.

    Args:
        values: Sample durations.
        confidence_level: Confidence level (default 0.95).
        n_bootstrap: Number of bootstrap iterations.

    Returns:
        Tuple of (lower bound, upper bound).

    """
    if len(values) < 2:
        mean = stats.mean(values) if values else 0.0
        return mean, mean

    rng = random.Random(42)
    population = list(values)
    means = sorted(
        stats.fmean(rng.choices(population, k=len(population)))
        for _ in range(n_bootstrap)
    )

    alpha = 1.0 - confidence_level
    lower_idx = max(0, min(int(math.floor(alpha / 2 * n_bootstrap)), n_bootstrap - 1))
    upper_idx = max(
        0, min(int(math.ceil((1 - alpha / 2) * n_bootstrap)) - 1, n_bootstrap - 1)
    )
    return means[lower_idx], means[upper_idx]


def summarize(durations: Sequence[float]) -> DistributionSummary:
    """Compute mean, sample standard deviation, min and max.

    Args:
        durations: Retained wall-clock durations in seconds.

    Returns:
        DistributionSummary over the durations.

    Raises:
        ValueError: If no durations are given.

    """
    if not durations:
        raise ValueError("Cannot summarize an empty distribution")

    values = list(durations)
    return DistributionSummary(
        mean=stats.fmean(values),
        stddev=stats.stdev(values) if len(values) > 1 else 0.0,
        min=min(values),
        max=max(values),
        n=len(values),
        ci_95=bootstrap_ci(values),
    )


def percent_change(previous: float, latest: float) -> float | None:
    """Relative change from ``previous`` to ``latest`` in percent.

    Returns None when ``previous`` is zero.
    """
    if previous == 0:
        return None
    return (latest - previous) / previous * 100.0
