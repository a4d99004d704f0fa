"""Unit tests for CLI output formatting."""

import json
from datetime import datetime, timezone

from conftest import make_record

from term_bench.benchmark.report import report
from term_bench.benchmark.runner import SpecFailure, SuiteOutcome
from term_bench.cli.formatters import format_record, format_reports, format_suite_outcome
from term_bench.models.benchmark import BenchmarkSpec

T0 = datetime(2024, 5, 1, tzinfo=timezone.utc)


def test_format_record_text(scrolling_spec: BenchmarkSpec) -> None:
    output = format_record(make_record(scrolling_spec, 2.0, T0))
    assert "scrolling (4.0 KiB, 80x24)" in output
    assert "2.0000s" in output
    assert "Throughput: 2.0 KiB/s" in output


def test_format_record_json(scrolling_spec: BenchmarkSpec) -> None:
    data = json.loads(format_record(make_record(scrolling_spec, 2.0, T0), json_output=True))
    assert data["mean"] == 2.0
    assert data["spec"]["name"] == "scrolling"
    assert "path" not in data


def test_format_suite_outcome(scrolling_spec: BenchmarkSpec) -> None:
    failed = BenchmarkSpec(name="unicode-random-write", byte_volume=10)
    outcome = SuiteOutcome(
        records=[make_record(scrolling_spec, 1.5, T0)],
        failures=[SpecFailure(spec=failed, error="failure(7)", exit_code=6)],
    )

    text = format_suite_outcome(outcome)
    assert "scrolling" in text
    assert "FAILED" in text
    assert "1 succeeded, 1 failed" in text

    data = json.loads(format_suite_outcome(outcome, json_output=True))
    assert data["failures"][0]["benchmark"] == "unicode-random-write"
    assert data["timed_out"] is False


def test_format_reports_json(scrolling_spec: BenchmarkSpec) -> None:
    single = format_reports([report("scrolling", [])], json_output=True)
    assert json.loads(single)["verdict"] == "no-data"

    several = format_reports(
        [report("scrolling", []), report("unicode", [])], json_output=True
    )
    assert len(json.loads(several)) == 2
