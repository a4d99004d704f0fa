"""Output formatting utilities for CLI.

This module provides functions for formatting result records, suite
outcomes and reports for stdout.
"""

import json

from term_bench.benchmark.report import ReportSummary
from term_bench.benchmark.runner import SuiteOutcome
from term_bench.models.results import ResultRecord
from term_bench.utils import format_bytes

__all__ = [
    "format_record",
    "format_reports",
    "format_suite_outcome",
]


def format_record(record: ResultRecord, json_output: bool = False) -> str:
    """Format one freshly written record.

    Args:
        record: The record.
        json_output: Whether to format as JSON.

    Returns:
        Formatted string output.

    """
    if json_output:
        return json.dumps(_record_json(record), indent=2)

    lines = [
        "",
        f"{record.label} ({format_bytes(record.spec.byte_volume)}, {record.spec.geometry})",
        f"  Mean:       {record.mean:.4f}s ± {record.stddev:.4f}s",
        f"  Min / Max:  {record.min:.4f}s / {record.max:.4f}s",
        f"  Samples:    {record.sample_count} (+{record.warmup_count} warm-up)",
    ]
    if record.throughput_bytes_per_second is not None:
        lines.append(f"  Throughput: {format_bytes(record.throughput_bytes_per_second)}/s")
    if record.path is not None:
        lines.append(f"  Saved to:   {record.path}")
    return "\n".join(lines)


def format_suite_outcome(outcome: SuiteOutcome, json_output: bool = False) -> str:
    """Format the result of a suite run as a table or JSON."""
    if json_output:
        data = {
            "records": [_record_json(r) for r in outcome.records],
            "failures": [
                {
                    "benchmark": f.spec.label,
                    "error": f.error,
                    "exit_code": f.exit_code,
                }
                for f in outcome.failures
            ],
            "timed_out": outcome.timed_out,
        }
        return json.dumps(data, indent=2)

    header = f"{'Benchmark':<45} {'Mean':>10} {'Stddev':>10} {'Throughput':>14}"
    lines = ["", "Suite Results", "=" * len(header), header, "-" * len(header)]
    for record in outcome.records:
        throughput = (
            f"{format_bytes(record.throughput_bytes_per_second)}/s"
            if record.throughput_bytes_per_second is not None
            else "-"
        )
        lines.append(
            f"{record.label[:45]:<45} {record.mean:>9.3f}s {record.stddev:>9.3f}s "
            f"{throughput:>14}"
        )
    for failure in outcome.failures:
        lines.append(f"{failure.spec.label[:45]:<45} {'FAILED':>10}  {failure.error}")

    lines.append("-" * len(header))
    lines.append(
        f"{len(outcome.records)} succeeded, {len(outcome.failures)} failed"
        + (" (suite timed out)" if outcome.timed_out else "")
    )
    return "\n".join(lines)


def format_reports(summaries: list[ReportSummary], json_output: bool = False) -> str:
    """Format one or more report summaries."""
    if json_output:
        data = [s.model_dump(mode="json") for s in summaries]
        return json.dumps(data[0] if len(data) == 1 else data, indent=2)
    return "\n\n".join(s.render() for s in summaries)


def _record_json(record: ResultRecord) -> dict:
    data = record.model_dump(mode="json")
    if record.path is not None:
        data["path"] = str(record.path)
    return data
