"""
Tests for score and summary reports
"""

import csv
import json

import pytest

from conftest import make_candidate
from reviewbench.arbitration import (
    CandidateVerdict,
    FalsePositive,
    Match,
    compute_score_record,
    failed_score_record,
)
from reviewbench.config import ModelPricing
from reviewbench.models import TokenUsage
from reviewbench.reporter import (
    create_summary_report,
    generate_markdown_report,
    generate_summary_report,
    write_scores_csv,
    write_scores_json,
)


@pytest.fixture
def records(fixture_info):
    candidate = make_candidate("A", 3, TokenUsage(1000, 500, 1500))
    verdict = CandidateVerdict(
        agent_name="A",
        matches=[Match("gt-1", 0, confidence=0.9), Match("gt-2", 2, confidence=0.7)],
        false_positives=[FalsePositive(1)],
    )
    return [
        compute_score_record(
            fixture_info, 2, candidate, verdict, pricing=ModelPricing(3.0, 15.0)
        ),
        failed_score_record(fixture_info, 2, make_candidate("B", 1)),
    ]


def _read_csv(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


class TestScoresCsv:
    """Tests for the CSV score sink."""

    def test_cost_variant(self, tmp_path, records):
        path = write_scores_csv(records, str(tmp_path / "out" / "scores.csv"))
        header, first, second = _read_csv(path)

        assert header[:4] == ["Test File", "Model", "Category", "Difficulty"]
        assert header[-6:] == [
            "Input Tokens",
            "Output Tokens",
            "Total Tokens",
            "Cost (USD)",
            "Processing Time (ms)",
            "Success",
        ]
        assert "Arbiter Confidence (%)" not in header

        row = dict(zip(header, first))
        assert row["Model"] == "A"
        assert row["True Positives"] == "2"
        assert row["Precision (%)"] == "66.67"
        assert row["F1 Score (%)"] == "80.00"
        assert row["Cost (USD)"] == "0.010500"
        assert row["Success"] == "true"

        failed = dict(zip(header, second))
        assert failed["Success"] == "false"
        assert failed["Precision (%)"] == "0.00"

    def test_confidence_variant(self, tmp_path, records):
        path = write_scores_csv(records, str(tmp_path / "scores.csv"), variant="confidence")
        header, first, _ = _read_csv(path)
        assert "Cost (USD)" not in header
        assert dict(zip(header, first))["Arbiter Confidence (%)"] == "80.00"

    def test_unknown_variant(self, tmp_path, records):
        with pytest.raises(ValueError):
            write_scores_csv(records, str(tmp_path / "scores.csv"), variant="fancy")


class TestOtherFormats:
    """Tests for JSON and Markdown outputs."""

    def test_json(self, tmp_path, records):
        path = write_scores_json(records, str(tmp_path / "scores.json"))
        data = json.loads(open(path, encoding="utf-8").read())
        assert [a["model"] for a in data["agents"]] == ["A", "B"]
        assert data["agents"][1]["failed"] == 1
        assert data["results"][0]["f1Score"] == 80.0

    def test_markdown(self, tmp_path, records):
        path = generate_markdown_report(records, str(tmp_path / "report.md"))
        text = open(path, encoding="utf-8").read()
        assert "# Code Review Benchmark Report" in text
        assert "| A | 1 | 0 | 66.67 | 100.00 | 80.00 | 100.00 | 1500 | 0.010500 |" in text
        assert "**Failed evaluations:** 1" in text


class TestSummaryReport:
    """Tests for the analysis-phase summary."""

    def test_create_summary_report(self):
        files = [
            {
                "testFile": {"filename": "a.vhd", "category": "logic", "difficulty": "easy"},
                "results": [
                    {"model": "A", "success": True, "processingTimeMs": 1000},
                    {"model": "B", "success": True, "processingTimeMs": 400},
                ],
            },
            {
                "testFile": {"filename": "b.vhd", "category": "style", "difficulty": "hard"},
                "results": [
                    {"model": "A", "success": True, "processingTimeMs": 2000},
                    {"model": "B", "success": False, "processingTimeMs": 0},
                ],
            },
        ]
        report = create_summary_report(files)

        assert report["summary"] == {"totalTestFiles": 2, "totalTests": 2, "totalResponses": 4}
        a, b = report["modelPerformance"]
        assert a["averageProcessingTime"] == 1500
        assert b["failed"] == 1
        assert report["testFilePerformance"][1]["successfulModels"] == 1
        assert report["recommendations"] == [
            "Best performing model: A (2/2 successful)",
            "Fastest model: B (400ms average)",
            "Models with failures: B (1 failures)",
        ]

    def test_no_responses(self, tmp_path):
        path = generate_summary_report(str(tmp_path), str(tmp_path / "reports" / "summary.json"))
        report = json.loads(open(path, encoding="utf-8").read())
        assert report["recommendations"] == []
        assert report["modelPerformance"] == []
