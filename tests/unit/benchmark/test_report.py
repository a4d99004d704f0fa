"""Unit tests for the reporter."""

from datetime import datetime, timedelta, timezone

import pytest
from conftest import make_record

from term_bench.benchmark.report import classify, report
from term_bench.models.benchmark import BenchmarkSpec
from term_bench.models.enums import ReportVerdict

T0 = datetime(2024, 5, 1, tzinfo=timezone.utc)


class TestClassify:
    """Tests for classify."""

    def test_threshold(self) -> None:
        assert classify(4.0, 5.0) is ReportVerdict.unchanged
        assert classify(6.0, 5.0) is ReportVerdict.regression
        assert classify(-6.0, 5.0) is ReportVerdict.improvement

    def test_zero_change(self) -> None:
        assert classify(0.0, 0.0) is ReportVerdict.unchanged

    def test_unknown_change_is_incomparable(self) -> None:
        assert classify(None, 5.0) is ReportVerdict.incomparable


class TestReport:
    """Tests for report."""

    def test_regression_of_fifty_percent(self, scrolling_spec: BenchmarkSpec) -> None:
        """Test means 2.0s then 3.0s are flagged as a 50% regression."""
        history = [
            make_record(scrolling_spec, 2.0, T0),
            make_record(scrolling_spec, 3.0, T0 + timedelta(days=1)),
        ]

        summary = report("scrolling", history)

        assert summary.delta_percent == pytest.approx(50.0)
        assert summary.verdict is ReportVerdict.regression
        assert summary.is_regression
        assert summary.latest is history[1]
        assert summary.previous is history[0]
        rendered = summary.render()
        assert "+50.0%" in rendered
        assert "REGRESSION" in rendered

    def test_improvement(self, scrolling_spec: BenchmarkSpec) -> None:
        history = [
            make_record(scrolling_spec, 4.0, T0),
            make_record(scrolling_spec, 3.0, T0 + timedelta(days=1)),
        ]
        summary = report("scrolling", history)
        assert summary.delta_percent == pytest.approx(-25.0)
        assert summary.verdict is ReportVerdict.improvement
        assert "-25.0%" in summary.render()

    def test_compares_against_immediately_preceding(self, scrolling_spec: BenchmarkSpec) -> None:
        """Test only the record right before the latest is used."""
        history = [
            make_record(scrolling_spec, 1.0, T0),
            make_record(scrolling_spec, 3.0, T0 + timedelta(days=2)),
            make_record(scrolling_spec, 2.0, T0 + timedelta(days=1)),
        ]
        summary = report("scrolling", history)
        assert summary.previous is not None
        assert summary.previous.mean == 2.0
        assert summary.delta_percent == pytest.approx(50.0)
        assert summary.history_size == 3

    def test_single_record(self, scrolling_spec: BenchmarkSpec) -> None:
        summary = report("scrolling", [make_record(scrolling_spec, 2.0, T0)])
        assert summary.verdict is ReportVerdict.no_history
        assert summary.previous is None
        assert "No previous results" in summary.render()

    def test_empty_history(self) -> None:
        summary = report("scrolling", [])
        assert summary.verdict is ReportVerdict.no_data
        assert "No results recorded" in summary.render()

    def test_threshold_suppresses_noise(self, scrolling_spec: BenchmarkSpec) -> None:
        history = [
            make_record(scrolling_spec, 2.0, T0),
            make_record(scrolling_spec, 2.02, T0 + timedelta(days=1)),
        ]
        summary = report("scrolling", history, regression_threshold_percent=2.0)
        assert summary.verdict is ReportVerdict.unchanged

    def test_different_volume_is_not_compared(self, scrolling_spec: BenchmarkSpec) -> None:
        """Test a larger workload is not reported as a regression of a smaller one."""
        small = scrolling_spec.model_copy(update={"byte_volume": 1000})
        large = scrolling_spec.model_copy(update={"byte_volume": 50_000_000})
        history = [
            make_record(small, 0.01, T0),
            make_record(large, 2.0, T0 + timedelta(days=1)),
        ]

        summary = report("scrolling", history)

        assert summary.verdict is ReportVerdict.no_history
        assert summary.previous is None
        assert summary.delta_percent is None
        assert summary.history_size == 2
        assert "No previous results at" in summary.render()

    def test_skips_records_of_other_geometry(self, scrolling_spec: BenchmarkSpec) -> None:
        """Test the closest record with the same spec is the baseline."""
        wide = scrolling_spec.model_copy(update={"terminal_width": 200})
        history = [
            make_record(scrolling_spec, 2.0, T0),
            make_record(wide, 9.0, T0 + timedelta(days=1)),
            make_record(scrolling_spec, 2.1, T0 + timedelta(days=2)),
        ]

        summary = report("scrolling", history, regression_threshold_percent=10.0)

        assert summary.previous is history[0]
        assert summary.delta_percent == pytest.approx(5.0)
        assert summary.verdict is ReportVerdict.unchanged

    def test_zero_previous_mean_is_incomparable(self, scrolling_spec: BenchmarkSpec) -> None:
        """Test a zero baseline gets its own verdict instead of unchanged."""
        history = [
            make_record(scrolling_spec, 1.0, T0).model_copy(update={"mean": 0.0}),
            make_record(scrolling_spec, 2.0, T0 + timedelta(days=1)),
        ]

        summary = report("scrolling", history)

        assert summary.delta_percent is None
        assert summary.verdict is ReportVerdict.incomparable
        assert not summary.is_regression
        rendered = summary.render()
        assert "n/a" in rendered
        assert "INCOMPARABLE" in rendered
