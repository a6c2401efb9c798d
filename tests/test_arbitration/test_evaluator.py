"""
Tests for the arbiter evaluator

Every (fixture, candidate) pair yields exactly one ScoreRecord, whether the
fixture was judged or not.
"""

import json

from conftest import FakeLLMClient, StatusError, make_candidate
from reviewbench.arbitration import ArbiterEvaluator, ArbitrationProtocol
from reviewbench.config import ModelPricing
from reviewbench.models import Fixture, FixtureInfo


def _evaluator(judge, sleeper, **kwargs):
    protocol = ArbitrationProtocol(judge, sleep=sleeper)
    return ArbiterEvaluator(protocol, sleep=sleeper, **kwargs)


class TestEvaluateFixture:
    """Tests for a single fixture."""

    def test_scores_every_candidate(self, fixture, verdict_text, sleeper):
        pricing = {"A": ModelPricing(3.0, 15.0)}
        evaluator = _evaluator(
            FakeLLMClient([verdict_text]), sleeper, pricing_lookup=pricing.get
        )
        outcome = evaluator.evaluate_fixture(fixture)

        assert outcome.success is True
        assert [r.agent_name for r in outcome.records] == ["A", "B"]

        a, b = outcome.records
        assert (a.true_positives, a.false_positives, a.false_negatives) == (2, 1, 0)
        assert a.formatted()["precision"] == "66.67"
        assert a.formatted()["f1"] == "80.00"
        assert a.formatted()["average_confidence"] == "80.00"
        assert a.formatted()["cost"] == "0.010500"

        assert (b.true_positives, b.false_positives, b.false_negatives) == (1, 0, 1)
        assert b.formatted()["recall"] == "50.00"
        assert b.formatted()["match_rate"] == "50.00"
        assert b.cost == 0.0

    def test_judge_exhausted(self, fixture, sleeper):
        """Three overloads: the fixture fails and every candidate gets a zero record."""
        judge = FakeLLMClient([StatusError(503)] * 3)
        outcome = _evaluator(judge, sleeper).evaluate_fixture(fixture)

        assert outcome.success is False
        assert "3 attempts" in outcome.error
        assert len(outcome.records) == 2
        for record in outcome.records:
            assert record.success is False
            assert (record.true_positives, record.false_positives, record.false_negatives) == (0, 0, 0)
            assert record.precision == record.recall == record.f1 == record.match_rate == 0.0
        assert sleeper.calls == [1, 2]

    def test_unparseable_reply(self, fixture, sleeper):
        outcome = _evaluator(FakeLLMClient(["no verdict today"]), sleeper).evaluate_fixture(fixture)
        assert outcome.success is False
        assert [r.success for r in outcome.records] == [False, False]

    def test_candidate_missing_from_verdict(self, fixture, verdict_payload, sleeper):
        verdict_payload["modelResults"].pop()
        judge = FakeLLMClient([json.dumps(verdict_payload)])
        outcome = _evaluator(judge, sleeper).evaluate_fixture(fixture)

        assert outcome.success is True
        assert [(r.agent_name, r.success) for r in outcome.records] == [("A", True), ("B", False)]


class TestRun:
    """Tests for a multi-fixture run."""

    def test_pacing_and_failure_isolation(self, fixture, verdict_text, sleeper):
        second = Fixture(
            info=FixtureInfo(id="f2", filename="f2.vhd"),
            ground_truth=fixture.ground_truth,
            candidates=[make_candidate("A", 1)],
        )
        judge = FakeLLMClient([ValueError("judge crashed"), verdict_text])
        evaluator = _evaluator(judge, sleeper, fixture_delay_s=1.0)
        run = evaluator.run([second, fixture])

        assert run.failed == 1
        assert run.successful == 1
        assert [r.test_file for r in run.records] == ["f2.vhd", fixture.filename, fixture.filename]
        assert [r.success for r in run.records] == [False, True, True]
        # One pacing delay after each fixture, failed or not
        assert sleeper.calls == [1.0, 1.0]

    def test_fixture_without_candidates_skipped(self, fixture, verdict_text, sleeper):
        empty = Fixture(info=FixtureInfo(id="e", filename="empty.vhd"), ground_truth=[])
        judge = FakeLLMClient([verdict_text])
        run = _evaluator(judge, sleeper, fixture_delay_s=0).run([empty, fixture])

        assert run.skipped == ["empty.vhd"]
        assert len(run.outcomes) == 1
        assert len(judge.prompts) == 1
        assert sleeper.calls == []

    def test_empty_ground_truth(self, sleeper):
        """No ground truth and no findings: metrics are 0, never NaN."""
        fixture = Fixture(
            info=FixtureInfo(id="g", filename="golden.vhd"),
            ground_truth=[],
            candidates=[make_candidate("A", 0)],
        )
        reply = json.dumps(
            {"modelResults": [{"model": "A", "matches": [], "falsePositives": [], "falseNegatives": []}]}
        )
        run = _evaluator(FakeLLMClient([reply]), sleeper, fixture_delay_s=0).run([fixture])

        (record,) = run.records
        assert record.success is True
        assert record.precision == record.recall == record.f1 == record.match_rate == 0.0


class TestMalformedJudgeReplies:
    """A bad judge reply fails its own fixture; later fixtures are still scored."""

    def _second_fixture(self, fixture):
        return Fixture(
            info=FixtureInfo(id="f2", filename="f2.vhd"),
            ground_truth=fixture.ground_truth,
            candidates=fixture.candidates,
        )

    def test_deeply_nested_reply(self, fixture, verdict_text, sleeper):
        depth = 100_000
        nested = '{"modelResults": ' + "[" * depth + "]" * depth + "}"
        judge = FakeLLMClient([nested, verdict_text])
        run = _evaluator(judge, sleeper, fixture_delay_s=0).run(
            [fixture, self._second_fixture(fixture)]
        )

        assert (run.failed, run.successful) == (1, 1)
        assert [(r.test_file, r.success) for r in run.records] == [
            (fixture.filename, False),
            (fixture.filename, False),
            ("f2.vhd", True),
            ("f2.vhd", True),
        ]

    def test_non_finite_index_reply(self, fixture, verdict_text, sleeper):
        reply = (
            '{"modelResults": [{"model": "A", "falsePositives": [{"aiIssueIndex": 1e999}]},'
            ' {"model": "B", "matches": [{"groundTruthId": "gt-1", "aiIssueIndex": 0}]}]}'
        )
        judge = FakeLLMClient([reply, verdict_text])
        run = _evaluator(judge, sleeper, fixture_delay_s=0).run(
            [fixture, self._second_fixture(fixture)]
        )

        assert run.failed == 0
        assert len(run.records) == 4
        a = run.records[0]
        assert (a.agent_name, a.success, a.false_positives) == ("A", True, 0)

    def test_request_building_failure(self, fixture, verdict_text, sleeper, monkeypatch):
        judge = FakeLLMClient([verdict_text])
        evaluator = _evaluator(judge, sleeper, fixture_delay_s=0)
        original = evaluator.protocol.build_request
        calls = []

        def flaky_build(ground_truth, candidates):
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("cannot render request")
            return original(ground_truth, candidates)

        monkeypatch.setattr(evaluator.protocol, "build_request", flaky_build)
        run = evaluator.run([fixture, self._second_fixture(fixture)])

        assert [r.success for r in run.records] == [False, False, True, True]
        assert "cannot render request" in run.outcomes[0].error
