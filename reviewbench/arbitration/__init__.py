"""
Arbitration Module

Maps each candidate's reported findings onto the ground truth through a
single judge exchange per fixture, and derives accuracy and cost metrics
from the verdict.
"""

from .evaluator import ArbiterEvaluator, EvaluationRun, FixtureOutcome
from .metrics import (
    AgentSummary,
    average_confidence,
    calculate_cost,
    calculate_match_rate,
    calculate_precision_recall_f1,
    compute_score_record,
    failed_score_record,
    summarize_by_agent,
)
from .protocol import (
    ArbitrationProtocol,
    match_verdicts,
    parse_verdict,
    validate_candidate_verdict,
)
from .types import (
    ArbitrationVerdict,
    CandidateVerdict,
    FalseNegative,
    FalsePositive,
    Match,
    MatchType,
    ScoreRecord,
)

__all__ = [
    # Evaluator
    "ArbiterEvaluator",
    "EvaluationRun",
    "FixtureOutcome",
    # Protocol
    "ArbitrationProtocol",
    "match_verdicts",
    "parse_verdict",
    "validate_candidate_verdict",
    # Metrics
    "AgentSummary",
    "average_confidence",
    "calculate_cost",
    "calculate_match_rate",
    "calculate_precision_recall_f1",
    "compute_score_record",
    "failed_score_record",
    "summarize_by_agent",
    # Types
    "ArbitrationVerdict",
    "CandidateVerdict",
    "FalseNegative",
    "FalsePositive",
    "Match",
    "MatchType",
    "ScoreRecord",
]
