"""
Arbitration Protocol

Builds the single judge request for a fixture, invokes the judge through
the retry wrapper, and parses its reply into per-candidate verdicts.

Candidate findings are referenced by their zero-based position in the
request, so the candidate lists must not be re-ordered or filtered between
building the request and interpreting the verdict.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple

from ..errors import (
    ArbitrationError,
    InvalidArbitrationShape,
    ReviewBenchError,
    UnknownCandidateInVerdict,
)
from ..extraction import extract_json_record
from ..llm.base import BaseLLMClient
from ..llm.prompts import build_arbiter_prompt
from ..llm.retry import DEFAULT_RETRY_POLICY, RetryPolicy, call_with_retry
from ..models import CandidateResultSet, Fixture, GroundTruthFinding
from .types import (
    ArbitrationVerdict,
    CandidateVerdict,
    FalseNegative,
    FalsePositive,
    Match,
    MatchType,
)

logger = logging.getLogger(__name__)

_MATCH_TYPES = {t.value: t for t in MatchType}


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ("" if value is None else str(value))


def _index(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("boolean is not an index")
    return int(value)


def _confidence(value: Any) -> float:
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return 0.0
    clamped = min(1.0, max(0.0, confidence))
    if clamped != confidence:
        logger.warning(f"Judge confidence {value!r} outside [0, 1], clamped to {clamped}")
    return clamped


def _parse_match(entry: Dict[str, Any]) -> Match:
    match_type = entry.get("matchType")
    return Match(
        ground_truth_id=str(entry["groundTruthId"]),
        candidate_index=_index(entry["aiIssueIndex"]),
        match_type=_MATCH_TYPES.get(_text(match_type).lower(), MatchType.SEMANTIC),
        confidence=_confidence(entry.get("confidence", 0.0)),
        reasoning=_text(entry.get("reasoning")),
    )


def _parse_false_positive(entry: Dict[str, Any]) -> FalsePositive:
    return FalsePositive(
        candidate_index=_index(entry["aiIssueIndex"]),
        reasoning=_text(entry.get("reasoning")),
    )


def _parse_false_negative(entry: Dict[str, Any]) -> FalseNegative:
    return FalseNegative(
        ground_truth_id=str(entry["groundTruthId"]),
        reasoning=_text(entry.get("reasoning")),
    )


def _parse_entries(agent: str, key: str, raw: Any, parse) -> list:
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning(f"Verdict for {agent}: '{key}' is not a list, ignoring it")
        return []

    entries = []
    for entry in raw:
        try:
            entries.append(parse(entry))
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
            logger.warning(f"Verdict for {agent}: skipping malformed {key} entry {entry!r} ({e})")
    return entries


def parse_candidate_verdict(raw: Dict[str, Any]) -> CandidateVerdict:
    """Parse one element of the judge's modelResults array."""
    agent = _text(raw.get("model"))
    return CandidateVerdict(
        agent_name=agent,
        matches=_parse_entries(agent, "matches", raw.get("matches"), _parse_match),
        false_positives=_parse_entries(
            agent, "falsePositives", raw.get("falsePositives"), _parse_false_positive
        ),
        false_negatives=_parse_entries(
            agent, "falseNegatives", raw.get("falseNegatives"), _parse_false_negative
        ),
    )


def parse_verdict(raw_text: str) -> ArbitrationVerdict:
    """
    Recover the judge's verdict from its raw reply.

    Args:
        raw_text: The judge's response text

    Returns:
        ArbitrationVerdict in the judge's candidate order

    Raises:
        ExtractionError: No usable JSON record in the reply
        InvalidArbitrationShape: The record lacks a modelResults list
    """
    record = extract_json_record(raw_text)
    results = record.get("modelResults") if isinstance(record, dict) else None
    if not isinstance(results, list):
        raise InvalidArbitrationShape("Response does not contain modelResults")

    verdict = ArbitrationVerdict()
    for raw in results:
        if not isinstance(raw, dict):
            logger.warning(f"Skipping malformed modelResults entry: {raw!r}")
            continue
        verdict.candidates.append(parse_candidate_verdict(raw))
    return verdict


def match_verdicts(
    verdict: ArbitrationVerdict,
    candidates: Sequence[CandidateResultSet],
) -> List[Tuple[CandidateResultSet, CandidateVerdict]]:
    """
    Pair each candidate verdict with the candidate it names.

    Names must match exactly. Verdicts naming an unknown candidate are
    logged and skipped; when the judge repeats a name, the first verdict wins.

    Returns:
        (candidate, verdict) pairs in verdict order
    """
    by_name = {c.agent_name: c for c in candidates}
    seen = set()
    pairs = []
    for candidate_verdict in verdict.candidates:
        candidate = by_name.get(candidate_verdict.agent_name)
        if candidate is None:
            logger.warning(str(UnknownCandidateInVerdict(candidate_verdict.agent_name)))
            continue
        if candidate.agent_name in seen:
            logger.warning(f"Duplicate verdict for {candidate.agent_name}, keeping the first")
            continue
        seen.add(candidate.agent_name)
        pairs.append((candidate, candidate_verdict))
    return pairs


def validate_candidate_verdict(
    verdict: CandidateVerdict,
    ground_truth: Sequence[GroundTruthFinding],
    candidate: CandidateResultSet,
) -> List[str]:
    """
    List the verdict's invariant violations.

    Checks that referenced ground-truth ids exist, that finding indices are
    in range, and that no ground-truth id is both matched and missed.

    Returns:
        Human-readable violation messages (empty when consistent)
    """
    known_ids = {gt.id for gt in ground_truth}
    finding_count = len(candidate.findings)
    problems = []

    for m in verdict.matches:
        if m.ground_truth_id not in known_ids:
            problems.append(f"match references unknown ground truth id {m.ground_truth_id!r}")
        if not 0 <= m.candidate_index < finding_count:
            problems.append(f"match references finding index {m.candidate_index} out of range")
    for fp in verdict.false_positives:
        if not 0 <= fp.candidate_index < finding_count:
            problems.append(
                f"false positive references finding index {fp.candidate_index} out of range"
            )
    for fn in verdict.false_negatives:
        if fn.ground_truth_id not in known_ids:
            problems.append(
                f"false negative references unknown ground truth id {fn.ground_truth_id!r}"
            )

    matched = {m.ground_truth_id for m in verdict.matches}
    for gt_id in sorted(matched & {fn.ground_truth_id for fn in verdict.false_negatives}):
        problems.append(f"ground truth id {gt_id!r} is both matched and a false negative")

    return problems


class ArbitrationProtocol:
    """Runs one judge exchange per fixture."""

    def __init__(
        self,
        judge: BaseLLMClient,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        language: str = "VHDL",
        sleep=None,
    ):
        """
        Initialize the protocol.

        Args:
            judge: Client used as the arbiter (any ``send_prompt`` backend)
            retry_policy: Backoff applied to the judge call
            language: Source language named in the request
            sleep: Sleep function for retry backoff (injectable for tests)
        """
        self.judge = judge
        self.retry_policy = retry_policy
        self.language = language
        self._sleep = sleep

    def build_request(
        self,
        ground_truth: Sequence[GroundTruthFinding],
        candidates: Sequence[CandidateResultSet],
    ) -> str:
        return build_arbiter_prompt(ground_truth, candidates, language=self.language)

    def invoke_judge(self, prompt: str) -> str:
        """Send the request through the retry wrapper."""
        kwargs = {"is_retryable": self.judge.is_retryable_error, "policy": self.retry_policy}
        if self._sleep is not None:
            kwargs["sleep"] = self._sleep
        return call_with_retry(self.judge.send_prompt, prompt, **kwargs)

    def arbitrate(self, fixture: Fixture) -> ArbitrationVerdict:
        """
        Judge every candidate of a fixture in a single exchange.

        Args:
            fixture: Ground truth plus one or more candidate result sets

        Returns:
            The parsed ArbitrationVerdict

        Raises:
            ReviewBenchError: Any failure building, sending or parsing the
                exchange; the caller treats it as a whole-fixture failure
        """
        try:
            prompt = self.build_request(fixture.ground_truth, fixture.candidates)
        except Exception as e:
            raise ArbitrationError(f"Building request failed: {type(e).__name__}: {e}") from e

        try:
            raw_response = self.invoke_judge(prompt)
        except ReviewBenchError:
            raise
        except Exception as e:
            raise ArbitrationError(f"Judge call failed: {type(e).__name__}: {e}") from e

        try:
            return parse_verdict(raw_response)
        except ReviewBenchError:
            raise
        except Exception as e:
            raise ArbitrationError(f"Parsing verdict failed: {type(e).__name__}: {e}") from e

    def judged_pairs(
        self,
        fixture: Fixture,
        verdict: ArbitrationVerdict,
    ) -> List[Tuple[CandidateResultSet, CandidateVerdict]]:
        """Pair verdicts with candidates and log any invariant violations."""
        pairs = match_verdicts(verdict, fixture.candidates)
        for candidate, candidate_verdict in pairs:
            for problem in validate_candidate_verdict(
                candidate_verdict, fixture.ground_truth, candidate
            ):
                logger.warning(f"{fixture.filename} / {candidate.agent_name}: {problem}")
        return pairs


def unjudged_candidates(
    candidates: Sequence[CandidateResultSet],
    pairs: Sequence[Tuple[CandidateResultSet, CandidateVerdict]],
) -> List[CandidateResultSet]:
    """Candidates the judge returned no verdict for."""
    judged = {c.agent_name for c, _ in pairs}
    return [c for c in candidates if c.agent_name not in judged]
