"""Unit tests for benchmark identity models."""

import pytest
from pydantic import ValidationError

from term_bench.models.benchmark import BenchmarkSpec, Geometry, SuiteConfig


class TestBenchmarkSpec:
    """Tests for BenchmarkSpec."""

    def test_label_without_args(self) -> None:
        assert BenchmarkSpec(name="scrolling", byte_volume=1).label == "scrolling"

    def test_label_with_args(self) -> None:
        spec = BenchmarkSpec(
            name="scrolling-in-region",
            extra_args=("--lines-from-bottom", "1"),
            byte_volume=1,
        )
        assert spec.label == "scrolling-in-region --lines-from-bottom 1"
        assert spec.record_name.startswith("scrolling-in-region_--lines-from-bottom_1-")

    def test_cache_key_includes_geometry(self) -> None:
        small = BenchmarkSpec(name="scrolling", byte_volume=10, terminal_width=80, terminal_height=24)
        large = BenchmarkSpec(name="scrolling", byte_volume=10, terminal_width=200, terminal_height=50)
        assert small.cache_key == "scrolling-10b-80x24"
        assert large.cache_key == "scrolling-10b-200x50"
        assert small.cache_key != large.cache_key

    def test_cache_key_includes_volume_and_args(self) -> None:
        keys = {
            BenchmarkSpec(name="scrolling", byte_volume=10).cache_key,
            BenchmarkSpec(name="scrolling", byte_volume=11).cache_key,
            BenchmarkSpec(name="scrolling", extra_args=("-x",), byte_volume=10).cache_key,
        }
        assert len(keys) == 3

    def test_argument_vectors_that_sanitize_alike_stay_distinct(self) -> None:
        specs = [
            BenchmarkSpec(name="a", extra_args=("b_c",), byte_volume=10),
            BenchmarkSpec(name="a_b", extra_args=("c",), byte_volume=10),
            BenchmarkSpec(name="a", extra_args=("b", "c"), byte_volume=10),
            BenchmarkSpec(name="a", extra_args=("b/c",), byte_volume=10),
        ]
        assert len({spec.cache_key for spec in specs}) == len(specs)
        assert len({spec.record_name for spec in specs}) == len(specs)

    def test_scroll_region_variants_map_to_separate_artifacts(self) -> None:
        specs = [
            BenchmarkSpec(
                name="scrolling-in-region", extra_args=("--lines-from-bottom", "1"), byte_volume=10
            ),
            BenchmarkSpec(
                name="scrolling-in-region", extra_args=("--lines-from-bottom 1",), byte_volume=10
            ),
            BenchmarkSpec(
                name="scrolling-in-region_--lines-from-bottom", extra_args=("1",), byte_volume=10
            ),
        ]
        assert len({spec.cache_key for spec in specs}) == 3
        assert len({spec.record_name for spec in specs}) == 3
        assert all(spec.cache_key.endswith("-10b-80x24") for spec in specs)

    def test_sanitized_name_does_not_collide_with_plain_name(self) -> None:
        plain = BenchmarkSpec(name="a_b", byte_volume=10)
        odd = BenchmarkSpec(name="a/b", byte_volume=10)
        assert plain.record_name == "a_b"
        assert odd.record_name != plain.record_name
        assert odd.cache_key != plain.cache_key

    def test_volume_embedded_in_name_does_not_collide(self) -> None:
        a = BenchmarkSpec(name="x", extra_args=("1b-80x24",), byte_volume=2)
        b = BenchmarkSpec(name="x_1b-80x24", byte_volume=2)
        assert a.cache_key != b.cache_key

    def test_record_name_is_stable(self) -> None:
        a = BenchmarkSpec(name="scrolling-in-region", extra_args=("--lines-from-bottom", "1"), byte_volume=1)
        b = BenchmarkSpec(name="scrolling-in-region", extra_args=("--lines-from-bottom", "1"), byte_volume=99)
        assert a.record_name == b.record_name

    def test_equal_specs_share_key(self) -> None:
        a = BenchmarkSpec(name="unicode-random-write", byte_volume=4_000_000)
        b = BenchmarkSpec(name="unicode-random-write", byte_volume=4_000_000)
        assert a == b
        assert hash(a) == hash(b)
        assert a.cache_key == b.cache_key

    def test_cache_key_is_path_safe(self) -> None:
        spec = BenchmarkSpec(name="../escape", extra_args=("a/b",), byte_volume=1)
        assert "/" not in spec.cache_key
        assert not spec.cache_key.startswith(".")

    def test_frozen(self) -> None:
        spec = BenchmarkSpec(name="scrolling", byte_volume=1)
        with pytest.raises(ValidationError):
            spec.byte_volume = 2

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"name": "", "byte_volume": 1},
            {"name": "has space", "byte_volume": 1},
            {"name": "scrolling", "byte_volume": -1},
            {"name": "scrolling", "byte_volume": 1, "terminal_width": 0},
        ],
    )
    def test_rejects_invalid(self, kwargs: dict) -> None:
        with pytest.raises(ValidationError):
            BenchmarkSpec(**kwargs)

    def test_zero_bytes_allowed(self) -> None:
        assert BenchmarkSpec(name="scrolling", byte_volume=0).byte_volume == 0

    def test_geometry(self) -> None:
        spec = BenchmarkSpec(name="s", byte_volume=1, terminal_width=132, terminal_height=43)
        assert spec.geometry == Geometry(width=132, height=43)
        assert str(spec.geometry) == "132x43"


class TestSuiteConfig:
    """Tests for SuiteConfig."""

    def test_requires_benchmarks(self) -> None:
        with pytest.raises(ValidationError):
            SuiteConfig(name="empty", benchmarks=[])
