"""
Metrics Engine

Turns a candidate verdict into a ScoreRecord. Every ratio is expressed on a
0-100 scale and is 0 (never NaN) when its denominator is empty.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..models import CandidateResultSet, FixtureInfo, TokenUsage
from .types import CandidateVerdict, Match, ScoreRecord


def calculate_precision_recall_f1(tp: int, fp: int, fn: int) -> Tuple[float, float, float]:
    """
    Calculate precision, recall, and F1 score as percentages.

    Args:
        tp: True positives count
        fp: False positives count
        fn: False negatives count

    Returns:
        Tuple of (precision, recall, f1), each in [0, 100]
    """
    precision = tp / (tp + fp) * 100 if (tp + fp) > 0 else 0.0
    recall = tp / (tp + fn) * 100 if (tp + fn) > 0 else 0.0
    f1 = 2 * precision * recall / (precision + recall) if (precision + recall) > 0 else 0.0
    return precision, recall, f1


def calculate_match_rate(tp: int, ground_truth_count: int) -> float:
    """Share of ground truth matched, capped at 100 in case the judge over-matches."""
    if ground_truth_count <= 0:
        return 0.0
    return min(100.0, tp / ground_truth_count * 100)


def average_confidence(matches: Sequence[Match]) -> float:
    """Mean judge confidence over matches, in [0, 1]."""
    if not matches:
        return 0.0
    return sum(m.confidence for m in matches) / len(matches)


def calculate_cost(usage: Optional[TokenUsage], pricing) -> float:
    """
    USD cost of a candidate's analysis call.

    Args:
        usage: The candidate's token usage, if reported
        pricing: The candidate's own ModelPricing, or None when unknown

    Returns:
        Cost in USD (0 when usage or pricing is missing)
    """
    if usage is None or pricing is None:
        return 0.0
    return (
        usage.input_tokens / 1_000_000 * pricing.input_per_1m
        + usage.output_tokens / 1_000_000 * pricing.output_per_1m
    )


def compute_score_record(
    info: FixtureInfo,
    ground_truth_count: int,
    candidate: CandidateResultSet,
    verdict: CandidateVerdict,
    pricing=None,
    arbitration_time_ms: int = 0,
) -> ScoreRecord:
    """
    Compute the ScoreRecord for one candidate on one fixture.

    Args:
        info: The fixture under review
        ground_truth_count: Number of ground-truth findings (G)
        candidate: The candidate's result set
        verdict: The judge's verdict for this candidate
        pricing: The candidate's pricing (None -> zero cost)
        arbitration_time_ms: Time spent in the fixture's judge exchange

    Returns:
        ScoreRecord with success=True
    """
    tp = len(verdict.matches)
    fp = len(verdict.false_positives)
    fn = len(verdict.false_negatives)
    precision, recall, f1 = calculate_precision_recall_f1(tp, fp, fn)
    usage = candidate.token_usage or TokenUsage()

    return ScoreRecord(
        test_file=info.filename,
        agent_name=candidate.agent_name,
        category=info.category,
        difficulty=info.difficulty,
        ground_truth_findings=ground_truth_count,
        candidate_findings=len(candidate.findings),
        true_positives=tp,
        false_positives=fp,
        false_negatives=fn,
        precision=precision,
        recall=recall,
        f1=f1,
        match_rate=calculate_match_rate(tp, ground_truth_count),
        average_confidence=average_confidence(verdict.matches) * 100,
        input_tokens=usage.input_tokens,
        output_tokens=usage.output_tokens,
        total_tokens=usage.total_tokens,
        cost=calculate_cost(candidate.token_usage, pricing),
        processing_time_ms=candidate.processing_time_ms,
        arbitration_time_ms=arbitration_time_ms,
        success=True,
    )


def failed_score_record(
    info: FixtureInfo,
    ground_truth_count: int,
    candidate: CandidateResultSet,
) -> ScoreRecord:
    """Degraded placeholder for a candidate whose fixture could not be judged."""
    return ScoreRecord(
        test_file=info.filename,
        agent_name=candidate.agent_name,
        category=info.category,
        difficulty=info.difficulty,
        ground_truth_findings=ground_truth_count,
        candidate_findings=len(candidate.findings),
        success=False,
    )


@dataclass
class AgentSummary:
    """Aggregate of one agent's ScoreRecords across fixtures."""

    agent_name: str
    evaluated: int = 0
    failed: int = 0
    true_positives: int = 0
    false_positives: int = 0
    false_negatives: int = 0
    precision: float = 0.0
    recall: float = 0.0
    f1: float = 0.0
    match_rate: float = 0.0
    total_tokens: int = 0
    cost: float = 0.0


def summarize_by_agent(records: Iterable[ScoreRecord]) -> List[AgentSummary]:
    """
    Average per-fixture metrics for each agent over its successful records.

    Agents keep first-appearance order; failed placeholders count toward
    ``failed`` only.
    """
    summaries: Dict[str, AgentSummary] = {}
    successes: Dict[str, List[ScoreRecord]] = {}

    for record in records:
        summary = summaries.setdefault(record.agent_name, AgentSummary(record.agent_name))
        bucket = successes.setdefault(record.agent_name, [])
        if not record.success:
            summary.failed += 1
            continue
        summary.evaluated += 1
        summary.true_positives += record.true_positives
        summary.false_positives += record.false_positives
        summary.false_negatives += record.false_negatives
        summary.total_tokens += record.total_tokens
        summary.cost += record.cost
        bucket.append(record)

    for name, summary in summaries.items():
        bucket = successes[name]
        if bucket:
            summary.precision = sum(r.precision for r in bucket) / len(bucket)
            summary.recall = sum(r.recall for r in bucket) / len(bucket)
            summary.f1 = sum(r.f1 for r in bucket) / len(bucket)
            summary.match_rate = sum(r.match_rate for r in bucket) / len(bucket)

    return list(summaries.values())
