"""
Arbiter Evaluator

Runs the arbitration exchange fixture by fixture and turns each verdict into
ScoreRecords. A failed fixture never aborts the run: every candidate of that
fixture receives a degraded record with success=False.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from tqdm import tqdm

from ..errors import ReviewBenchError
from ..models import Fixture
from .metrics import compute_score_record, failed_score_record
from .protocol import ArbitrationProtocol, unjudged_candidates
from .types import ArbitrationVerdict, ScoreRecord

logger = logging.getLogger(__name__)


@dataclass
class FixtureOutcome:
    """Records and status for one fixture."""

    filename: str
    records: List[ScoreRecord] = field(default_factory=list)
    success: bool = False
    error: Optional[str] = None
    verdict: Optional[ArbitrationVerdict] = None
    elapsed_ms: int = 0


@dataclass
class EvaluationRun:
    """Outcome of an evaluation run, in fixture order."""

    outcomes: List[FixtureOutcome] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def records(self) -> List[ScoreRecord]:
        return [r for outcome in self.outcomes for r in outcome.records]

    @property
    def successful(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.success)


class ArbiterEvaluator:
    """Scores every candidate of every fixture through the arbiter."""

    def __init__(
        self,
        protocol: ArbitrationProtocol,
        pricing_lookup: Callable[[str], object] = lambda name: None,
        fixture_delay_s: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        show_progress: bool = False,
    ):
        """
        Initialize the evaluator.

        Args:
            protocol: Arbitration protocol bound to a judge client
            pricing_lookup: Maps an agent name to its ModelPricing (or None)
            fixture_delay_s: Pause after each fixture, success or failure
            sleep: Sleep function used for pacing (injectable for tests)
            show_progress: Display a tqdm progress bar
        """
        self.protocol = protocol
        self.pricing_lookup = pricing_lookup
        self.fixture_delay_s = fixture_delay_s
        self._sleep = sleep
        self.show_progress = show_progress

    def evaluate_fixture(self, fixture: Fixture) -> FixtureOutcome:
        """
        Arbitrate one fixture and score each of its candidates.

        Args:
            fixture: Ground truth and candidate result sets

        Returns:
            FixtureOutcome with one record per candidate
        """
        outcome = FixtureOutcome(filename=fixture.filename)
        gt_count = len(fixture.ground_truth)

        start = time.monotonic()
        try:
            verdict = self.protocol.arbitrate(fixture)
        except ReviewBenchError as e:
            outcome.error = str(e)
            logger.error(f"Arbitration failed for {fixture.filename}: {e}")
            outcome.records = [
                failed_score_record(fixture.info, gt_count, c) for c in fixture.candidates
            ]
            return outcome
        outcome.elapsed_ms = int((time.monotonic() - start) * 1000)
        outcome.verdict = verdict
        outcome.success = True

        pairs = self.protocol.judged_pairs(fixture, verdict)
        for candidate, candidate_verdict in pairs:
            outcome.records.append(
                compute_score_record(
                    fixture.info,
                    gt_count,
                    candidate,
                    candidate_verdict,
                    pricing=self.pricing_lookup(candidate.agent_name),
                    arbitration_time_ms=outcome.elapsed_ms,
                )
            )

        for candidate in unjudged_candidates(fixture.candidates, pairs):
            logger.warning(f"No verdict for {candidate.agent_name} on {fixture.filename}")
            outcome.records.append(failed_score_record(fixture.info, gt_count, candidate))

        return outcome

    def run(self, fixtures: Iterable[Fixture]) -> EvaluationRun:
        """
        Evaluate fixtures one at a time, pacing the judge between them.

        Args:
            fixtures: Fixtures in reporting order

        Returns:
            EvaluationRun covering every (fixture, candidate) pair loaded
        """
        run = EvaluationRun()
        fixtures = list(fixtures)

        for fixture in tqdm(fixtures, desc="Arbitrating", disable=not self.show_progress):
            if not fixture.candidates:
                logger.warning(f"No responses found for {fixture.filename}, skipping")
                run.skipped.append(fixture.filename)
                continue

            logger.info(
                f"Evaluating {fixture.filename}: {len(fixture.ground_truth)} ground truth "
                f"issues, {len(fixture.candidates)} candidates"
            )
            outcome = self.evaluate_fixture(fixture)
            run.outcomes.append(outcome)
            if outcome.success:
                logger.info(f"{fixture.filename}: judged in {outcome.elapsed_ms}ms")

            if self.fixture_delay_s > 0:
                self._sleep(self.fixture_delay_s)

        return run
