"""
Tests for CLI command helpers
"""

import argparse

from reviewbench.commands import analyze, evaluate, report
from reviewbench.commands.analyze import resolve_test_files
from reviewbench.config import Settings


class TestResolveTestFiles:
    """Tests for choosing source files to analyze."""

    def test_explicit_files(self):
        assert resolve_test_files(Settings(), ["x.vhd"]) == ["x.vhd"]

    def test_configured_list(self, tmp_path):
        settings = Settings(test_files_dir=str(tmp_path), test_files=["a.vhd"])
        assert resolve_test_files(settings) == [str(tmp_path / "a.vhd")]

    def test_glob_fallback(self, tmp_path):
        (tmp_path / "b.vhd").write_text("", encoding="utf-8")
        (tmp_path / "a.vhd").write_text("", encoding="utf-8")
        (tmp_path / "a.json").write_text("{}", encoding="utf-8")
        settings = Settings(test_files_dir=str(tmp_path))
        assert resolve_test_files(settings) == [str(tmp_path / "a.vhd"), str(tmp_path / "b.vhd")]


class TestParsers:
    """Tests for subcommand registration."""

    def test_evaluate_defaults(self):
        parser = argparse.ArgumentParser()
        subparsers = parser.add_subparsers(dest="command")
        for command in (analyze, evaluate, report):
            command.register_parser(subparsers)

        args = parser.parse_args(["evaluate", "--variant", "confidence"])
        assert args.variant == "confidence"
        assert args.output == "results/normalyzed/arbiter_evaluation.csv"
        assert args.arbiter is None

        args = parser.parse_args(["analyze", "--models", "GPT-5 Nano"])
        assert args.models == ["GPT-5 Nano"]
