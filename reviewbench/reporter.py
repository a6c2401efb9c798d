"""
Benchmark Reporter

Writes ScoreRecords as CSV/JSON, a per-agent Markdown report, and the
analysis-phase summary report built from stored response files.
"""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .arbitration.metrics import summarize_by_agent
from .arbitration.types import ScoreRecord

BASE_COLUMNS = [
    ("Test File", "test_file"),
    ("Model", "agent_name"),
    ("Category", "category"),
    ("Difficulty", "difficulty"),
    ("Ground Truth Issues", "ground_truth_findings"),
    ("AI Found Issues", "candidate_findings"),
    ("True Positives", "true_positives"),
    ("False Positives", "false_positives"),
    ("False Negatives", "false_negatives"),
    ("Precision (%)", "precision"),
    ("Recall (%)", "recall"),
    ("F1 Score (%)", "f1"),
    ("Match Rate (%)", "match_rate"),
]

VARIANT_COLUMNS = {
    "confidence": [("Arbiter Confidence (%)", "average_confidence")],
    "cost": [
        ("Input Tokens", "input_tokens"),
        ("Output Tokens", "output_tokens"),
        ("Total Tokens", "total_tokens"),
        ("Cost (USD)", "cost"),
    ],
}

TRAILING_COLUMNS = [
    ("Processing Time (ms)", "processing_time_ms"),
    ("Success", "success"),
]


def score_columns(variant: str = "cost") -> List[tuple]:
    if variant not in VARIANT_COLUMNS:
        raise ValueError(f"Unknown report variant: {variant}")
    return BASE_COLUMNS + VARIANT_COLUMNS[variant] + TRAILING_COLUMNS


def write_scores_csv(records: Sequence[ScoreRecord], output_path: str, variant: str = "cost") -> str:
    """
    Write ScoreRecords as CSV, one row per (fixture, agent).

    Args:
        records: Records in reporting order
        output_path: Destination file
        variant: "cost" for token/cost columns, "confidence" for arbiter confidence

    Returns:
        Path to the saved file
    """
    columns = score_columns(variant)
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow([header for header, _ in columns])
        for record in records:
            formatted = record.formatted()
            writer.writerow([formatted[key] for _, key in columns])

    return str(output_file)


def write_scores_json(records: Sequence[ScoreRecord], output_path: str) -> str:
    """Write ScoreRecords and per-agent summaries as JSON."""
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "generatedAt": datetime.now().isoformat(),
        "agents": [
            {
                "model": s.agent_name,
                "evaluated": s.evaluated,
                "failed": s.failed,
                "precision": round(s.precision, 2),
                "recall": round(s.recall, 2),
                "f1Score": round(s.f1, 2),
                "matchRate": round(s.match_rate, 2),
                "totalTokens": s.total_tokens,
                "cost": round(s.cost, 6),
            }
            for s in summarize_by_agent(records)
        ],
        "results": [r.to_dict() for r in records],
    }
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    return str(output_file)


def generate_markdown_report(records: Sequence[ScoreRecord], output_path: str) -> str:
    """
    Generate human-readable Markdown report.

    Args:
        records: ScoreRecords of an evaluation run
        output_path: Path to save the report

    Returns:
        Path to the saved report
    """
    summaries = summarize_by_agent(records)
    lines = [
        "# Code Review Benchmark Report",
        "",
        f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "",
        f"- **Fixtures:** {len({r.test_file for r in records})}",
        f"- **Evaluations:** {len(records)}",
        f"- **Failed evaluations:** {sum(1 for r in records if not r.success)}",
        "",
        "## Per-Agent Metrics",
        "",
        "| Model | Evaluated | Failed | Precision (%) | Recall (%) | F1 (%) | Match Rate (%) "
        "| Tokens | Cost (USD) |",
        "|-------|-----------|--------|---------------|------------|--------|----------------"
        "|--------|------------|",
    ]
    for s in summaries:
        lines.append(
            f"| {s.agent_name} | {s.evaluated} | {s.failed} | {s.precision:.2f} | "
            f"{s.recall:.2f} | {s.f1:.2f} | {s.match_rate:.2f} | {s.total_tokens} | "
            f"{s.cost:.6f} |"
        )

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return str(output_file)


# =============================================================================
# Analysis-phase summary
# =============================================================================


def create_summary_report(response_files: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Aggregate stored response files into per-model and per-file statistics.

    Args:
        response_files: Parsed response JSON documents

    Returns:
        Report dictionary (summary, modelPerformance, testFilePerformance,
        recommendations)
    """
    model_stats: Dict[str, Dict[str, Any]] = {}
    file_stats: Dict[str, Dict[str, Any]] = {}

    for data in response_files:
        test_file = data.get("testFile", {})
        filename = test_file.get("filename", "unknown")
        for response in data.get("results", []):
            stat = model_stats.setdefault(
                response["model"],
                {
                    "model": response["model"],
                    "totalTests": 0,
                    "successful": 0,
                    "failed": 0,
                    "totalProcessingTime": 0,
                    "averageProcessingTime": 0,
                },
            )
            stat["totalTests"] += 1
            if response.get("success"):
                stat["successful"] += 1
                stat["totalProcessingTime"] += response.get("processingTimeMs", 0)
            else:
                stat["failed"] += 1

            file_stat = file_stats.setdefault(
                filename,
                {
                    "filename": filename,
                    "category": test_file.get("category"),
                    "difficulty": test_file.get("difficulty"),
                    "totalModels": 0,
                    "successfulModels": 0,
                },
            )
            file_stat["totalModels"] += 1
            if response.get("success"):
                file_stat["successfulModels"] += 1

    for stat in model_stats.values():
        if stat["successful"] > 0:
            stat["averageProcessingTime"] = round(stat["totalProcessingTime"] / stat["successful"])

    models = list(model_stats.values())
    return {
        "generatedAt": datetime.now().isoformat(),
        "summary": {
            "totalTestFiles": len(file_stats),
            "totalTests": len(response_files),
            "totalResponses": sum(s["totalTests"] for s in models),
        },
        "modelPerformance": models,
        "testFilePerformance": list(file_stats.values()),
        "recommendations": generate_recommendations(models),
    }


def generate_recommendations(model_stats: Sequence[Dict[str, Any]]) -> List[str]:
    """Best model by successes, fastest model, and models with failures."""
    if not model_stats:
        return []

    best = max(model_stats, key=lambda s: s["successful"])
    fastest = min(model_stats, key=lambda s: s["averageProcessingTime"])
    recommendations = [
        f"Best performing model: {best['model']} "
        f"({best['successful']}/{best['totalTests']} successful)",
        f"Fastest model: {fastest['model']} ({fastest['averageProcessingTime']}ms average)",
    ]

    failed = [s for s in model_stats if s["failed"] > 0]
    if failed:
        recommendations.append(
            "Models with failures: "
            + ", ".join(f"{s['model']} ({s['failed']} failures)" for s in failed)
        )
    return recommendations


def generate_summary_report(responses_dir: str, output_path: str) -> str:
    """Build the summary report from a responses directory and save it as JSON."""
    response_files = []
    for path in sorted(Path(responses_dir).glob("*.json")):
        with open(path, "r", encoding="utf-8") as f:
            response_files.append(json.load(f))

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(create_summary_report(response_files), f, indent=2, ensure_ascii=False)

    return str(output_file)
