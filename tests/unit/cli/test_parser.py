"""Unit tests for the argument parser and argument validation."""

from pathlib import Path

import pytest

from term_bench.cli.commands.base import BaseCommand
from term_bench.cli.parser import create_parser
from term_bench.cli.validators import validate_args


@pytest.fixture
def parser():
    return create_parser()


class TestParser:
    """Tests for create_parser."""

    def test_run_arguments(self, parser) -> None:
        args = parser.parse_args(
            [
                "--sandbox",
                "docker",
                "--timeout",
                "30",
                "run",
                "scrolling-in-region",
                "-b",
                "1000",
                "--width",
                "100",
                "-n",
                "7",
                "--arg=--lines-from-bottom",
                "--arg",
                "1",
            ]
        )
        assert args.command == "run"
        assert args.sandbox == "docker"
        assert args.timeout == 30.0
        assert args.name == "scrolling-in-region"
        assert args.extra_args == ["--lines-from-bottom", "1"]
        assert args.byte_volume == 1000
        assert args.width == 100
        assert args.height is None
        assert args.measured_runs == 7
        assert args.warmup_runs is None
        assert args.timer is None

    def test_extra_args_default_to_none(self, parser) -> None:
        args = parser.parse_args(["run", "scrolling", "-b", "10"])
        assert args.extra_args is None

    def test_option_like_extra_args_after_options(self, parser) -> None:
        """Test generator flags survive when harness options follow them."""
        args = parser.parse_args(
            [
                "generate",
                "scrolling-in-region",
                "--arg=--lines-from-bottom",
                "--arg=1",
                "-b",
                "10",
                "--height",
                "30",
            ]
        )
        assert args.extra_args == ["--lines-from-bottom", "1"]
        assert args.byte_volume == 10
        assert args.height == 30

    def test_extra_args_reach_the_spec(self, parser) -> None:
        args = parser.parse_args(
            ["run", "scrolling-in-region", "-b", "10", "--arg=--lines-from-bottom", "--arg", "1"]
        )
        spec = BaseCommand.spec_from_args(args)
        assert spec.extra_args == ("--lines-from-bottom", "1")
        assert spec.label == "scrolling-in-region --lines-from-bottom 1"

    def test_bytes_required(self, parser) -> None:
        with pytest.raises(SystemExit):
            parser.parse_args(["run", "scrolling"])

    def test_suite_defaults(self, parser) -> None:
        args = parser.parse_args(["suite"])
        assert args.suite_file is None
        assert args.suite_timeout is None

    def test_report(self, parser) -> None:
        args = parser.parse_args(["report", "scrolling", "--threshold", "5"])
        assert args.benchmark == "scrolling"
        assert args.threshold == 5.0

    def test_unknown_sandbox(self, parser) -> None:
        with pytest.raises(SystemExit):
            parser.parse_args(["--sandbox", "vm", "report"])


class TestValidateArgs:
    """Tests for validate_args."""

    def test_valid(self, parser) -> None:
        args = parser.parse_args(["run", "scrolling", "-b", "0", "--warmup", "0"])
        assert validate_args(args) is None

    @pytest.mark.parametrize(
        ("argv", "flag"),
        [
            (["run", "scrolling", "-b", "-1"], "--bytes"),
            (["run", "scrolling", "-b", "1", "--width", "0"], "--width"),
            (["run", "scrolling", "-b", "1", "--warmup", "-1"], "--warmup"),
            (["run", "scrolling", "-b", "1", "--samples", "0"], "--samples"),
            (["--timeout", "0", "run", "scrolling", "-b", "1"], "--timeout"),
            (["suite", "--suite-timeout", "-5"], "--suite-timeout"),
        ],
    )
    def test_invalid(self, parser, argv: list[str], flag: str) -> None:
        error = validate_args(parser.parse_args(argv))
        assert error is not None
        assert flag in error

    def test_suite_file_must_exist(self, parser, tmp_path: Path) -> None:
        args = parser.parse_args(["suite", str(tmp_path / "missing.yaml")])
        assert "not found" in validate_args(args)

    def test_suite_file_must_be_yaml(self, parser, tmp_path: Path) -> None:
        suite = tmp_path / "suite.json"
        suite.write_text("{}")
        args = parser.parse_args(["suite", str(suite)])
        assert "YAML" in validate_args(args)
