"""
Fixture Dataset

Loads ground-truth files and stored candidate responses, and groups them
into per-fixture inputs for the arbiter evaluator.

Ground-truth file (test-files/<name>.json):
    {"testFile": {"id", "filename", "category", "difficulty"},
     "groundTruth": {"issues": [...]}}

Response file (results/responses/<id>_<timestamp>.json):
    {"testFile": {"id", "filename", ...}, "results": [...], "summary": {...}}
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .extraction import normalize_analysis, normalize_ground_truth
from .models import CandidateResultSet, Fixture, FixtureInfo, TokenUsage

logger = logging.getLogger(__name__)


@dataclass
class GroundTruthFile:
    """Expected findings for one source file."""

    info: FixtureInfo
    issues: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GroundTruthFile":
        return cls(
            info=FixtureInfo.from_dict(data["testFile"]),
            issues=normalize_ground_truth(data.get("groundTruth", {}).get("issues", [])),
        )


@dataclass
class ResponseFile:
    """Candidate results stored by one analysis run of one source file."""

    info: FixtureInfo
    results: List[CandidateResultSet] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResponseFile":
        info = FixtureInfo.from_dict(data["testFile"])
        return cls(info=info, results=[candidate_from_dict(r) for r in data.get("results", [])])


def candidate_from_dict(data: Dict[str, Any]) -> CandidateResultSet:
    """Rebuild a CandidateResultSet from its stored form."""
    analysis = normalize_analysis(data.get("response") or {})
    usage = data.get("tokensUsed")
    return CandidateResultSet(
        agent_name=data["model"],
        findings=analysis.findings,
        token_usage=TokenUsage.from_dict(usage) if isinstance(usage, dict) else None,
        processing_time_ms=int(data.get("processingTimeMs", 0) or 0),
        success=bool(data.get("success", True)),
        error=data.get("error"),
        confidence=analysis.confidence,
        reasoning=analysis.reasoning,
        test_file_id=data.get("testFileId", ""),
        timestamp=str(data.get("timestamp", "")),
    )


def _read_json(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_ground_truth_files(test_files_dir: str) -> List[GroundTruthFile]:
    """
    Load every ground-truth JSON file in a directory.

    Args:
        test_files_dir: Directory holding source files and their *.json ground truth

    Returns:
        Ground-truth files sorted by file name
    """
    directory = Path(test_files_dir)
    if not directory.is_dir():
        raise FileNotFoundError(f"Test files directory not found: {directory}")

    files = []
    for path in sorted(directory.glob("*.json")):
        files.append(GroundTruthFile.from_dict(_read_json(path)))
    return files


def load_response_files(responses_dir: str) -> Dict[str, List[ResponseFile]]:
    """
    Load stored responses grouped by the source file name they review.

    Args:
        responses_dir: Directory of response JSON files

    Returns:
        Mapping of fixture filename to its response files (sorted by file name)
    """
    directory = Path(responses_dir)
    if not directory.is_dir():
        raise FileNotFoundError(f"Responses directory not found: {directory}")

    grouped: Dict[str, List[ResponseFile]] = {}
    for path in sorted(directory.glob("*.json")):
        response_file = ResponseFile.from_dict(_read_json(path))
        grouped.setdefault(response_file.info.filename, []).append(response_file)
    return grouped


def build_fixtures(
    ground_truth_files: List[GroundTruthFile],
    responses: Dict[str, List[ResponseFile]],
) -> List[Fixture]:
    """
    Combine ground truth and candidate responses into fixtures.

    When several response files carry results for the same agent, the
    latest one (by file order) replaces the earlier ones.

    Returns:
        One Fixture per ground-truth file, in ground-truth order
    """
    fixtures = []
    for gt_file in ground_truth_files:
        by_agent: Dict[str, CandidateResultSet] = {}
        for response_file in responses.get(gt_file.info.filename, []):
            for candidate in response_file.results:
                if candidate.agent_name in by_agent:
                    logger.warning(
                        f"{gt_file.info.filename}: multiple results for "
                        f"{candidate.agent_name}, using the latest"
                    )
                    del by_agent[candidate.agent_name]
                by_agent[candidate.agent_name] = candidate

        fixtures.append(
            Fixture(
                info=gt_file.info,
                ground_truth=list(gt_file.issues),
                candidates=list(by_agent.values()),
            )
        )
    return fixtures


def load_fixtures(test_files_dir: str, responses_dir: str) -> List[Fixture]:
    """Load ground truth and responses and group them into fixtures."""
    return build_fixtures(
        load_ground_truth_files(test_files_dir),
        load_response_files(responses_dir),
    )
