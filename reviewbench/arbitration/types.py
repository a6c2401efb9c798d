"""
Arbitration Types

Verdict and score records produced by the arbitration exchange and the
metrics engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class MatchType(str, Enum):
    EXACT = "exact"
    SEMANTIC = "semantic"
    PARTIAL = "partial"


@dataclass(frozen=True)
class Match:
    """A candidate finding the judge paired with a ground-truth finding."""

    ground_truth_id: str
    candidate_index: int
    match_type: MatchType = MatchType.SEMANTIC
    confidence: float = 0.0
    reasoning: str = ""


@dataclass(frozen=True)
class FalsePositive:
    """A candidate finding with no ground-truth counterpart."""

    candidate_index: int
    reasoning: str = ""


@dataclass(frozen=True)
class FalseNegative:
    """A ground-truth finding the candidate did not report."""

    ground_truth_id: str
    reasoning: str = ""


@dataclass
class CandidateVerdict:
    """The judge's classification of one candidate's findings."""

    agent_name: str
    matches: List[Match] = field(default_factory=list)
    false_positives: List[FalsePositive] = field(default_factory=list)
    false_negatives: List[FalseNegative] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.agent_name,
            "matches": [
                {
                    "groundTruthId": m.ground_truth_id,
                    "aiIssueIndex": m.candidate_index,
                    "matchType": m.match_type.value,
                    "confidence": m.confidence,
                    "reasoning": m.reasoning,
                }
                for m in self.matches
            ],
            "falsePositives": [
                {"aiIssueIndex": fp.candidate_index, "reasoning": fp.reasoning}
                for fp in self.false_positives
            ],
            "falseNegatives": [
                {"groundTruthId": fn.ground_truth_id, "reasoning": fn.reasoning}
                for fn in self.false_negatives
            ],
        }


@dataclass
class ArbitrationVerdict:
    """Every candidate verdict returned by one arbitration exchange."""

    candidates: List[CandidateVerdict] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"modelResults": [c.to_dict() for c in self.candidates]}


@dataclass(frozen=True)
class ScoreRecord:
    """Metrics for one (fixture, agent) pair.

    Percentages are on a 0-100 scale.
    """

    test_file: str
    agent_name: str
    category: str
    difficulty: str
    ground_truth_findings: int
    candidate_findings: int
    true_positives: int = 0
    false_positives: int = 0
    false_negatives: int = 0
    precision: float = 0.0
    recall: float = 0.0
    f1: float = 0.0
    match_rate: float = 0.0
    average_confidence: float = 0.0
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    cost: float = 0.0
    processing_time_ms: int = 0
    arbitration_time_ms: int = 0
    success: bool = False

    def formatted(self) -> Dict[str, str]:
        """Presentation view: percentages to 2 decimals, cost to 6 decimals."""
        return {
            "test_file": self.test_file,
            "agent_name": self.agent_name,
            "category": self.category,
            "difficulty": self.difficulty,
            "ground_truth_findings": str(self.ground_truth_findings),
            "candidate_findings": str(self.candidate_findings),
            "true_positives": str(self.true_positives),
            "false_positives": str(self.false_positives),
            "false_negatives": str(self.false_negatives),
            "precision": f"{self.precision:.2f}",
            "recall": f"{self.recall:.2f}",
            "f1": f"{self.f1:.2f}",
            "match_rate": f"{self.match_rate:.2f}",
            "average_confidence": f"{self.average_confidence:.2f}",
            "input_tokens": str(self.input_tokens),
            "output_tokens": str(self.output_tokens),
            "total_tokens": str(self.total_tokens),
            "cost": f"{self.cost:.6f}",
            "processing_time_ms": str(self.processing_time_ms),
            "arbitration_time_ms": str(self.arbitration_time_ms),
            "success": "true" if self.success else "false",
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "testFile": self.test_file,
            "model": self.agent_name,
            "category": self.category,
            "difficulty": self.difficulty,
            "groundTruthIssues": self.ground_truth_findings,
            "aiFoundIssues": self.candidate_findings,
            "truePositives": self.true_positives,
            "falsePositives": self.false_positives,
            "falseNegatives": self.false_negatives,
            "precision": round(self.precision, 2),
            "recall": round(self.recall, 2),
            "f1Score": round(self.f1, 2),
            "matchRate": round(self.match_rate, 2),
            "arbiterConfidence": round(self.average_confidence, 2),
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "totalTokens": self.total_tokens,
            "cost": round(self.cost, 6),
            "processingTimeMs": self.processing_time_ms,
            "arbitrationTimeMs": self.arbitration_time_ms,
            "success": self.success,
        }
