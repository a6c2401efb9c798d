"""
Pytest Configuration and Fixtures

Shared fixtures for all tests. No test talks to a real provider: clients
are scripted BaseLLMClient fakes.
"""

import json
from typing import Any, Dict, List

import pytest

from reviewbench.llm.base import BaseLLMClient, LLMResponse
from reviewbench.models import (
    CandidateResultSet,
    Category,
    Finding,
    Fixture,
    FixtureInfo,
    GroundTruthFinding,
    LineRange,
    Severity,
    TokenUsage,
)


class StatusError(Exception):
    """Provider-style error carrying an HTTP status."""

    def __init__(self, status_code: int, message: str = "provider error"):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code


class FakeLLMClient(BaseLLMClient):
    """Client replaying scripted replies; exceptions in the script are raised."""

    def __init__(self, replies: List[Any], model: str = "fake-model", available: bool = True):
        super().__init__(model)
        self.replies = list(replies)
        self.prompts: List[str] = []
        self.available = available

    def is_available(self) -> bool:
        return self.available

    def complete(self, prompt: str) -> LLMResponse:
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, LLMResponse):
            return reply
        return LLMResponse(content=reply, usage=TokenUsage(100, 50, 150), model=self.model)


class RecordingSleep:
    """Sleep replacement that records requested delays."""

    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def fixture_info() -> FixtureInfo:
    """Identity of a small logic-category source file."""
    return FixtureInfo(
        id="12_counter_logic_easy_vhd",
        filename="12_counter_logic_easy.vhd",
        category="logic",
        difficulty="easy",
    )


@pytest.fixture
def ground_truth() -> List[GroundTruthFinding]:
    """Two expected findings."""
    return [
        GroundTruthFinding(
            id="gt-1",
            finding=Finding(
                description="Counter never resets",
                lines=(LineRange(12, 14),),
                category=Category.LOGIC,
                severity=Severity.HIGH,
            ),
            reasoning="Reset branch assigns the wrong signal",
        ),
        GroundTruthFinding(
            id="gt-2",
            finding=Finding(
                description="Missing signal in sensitivity list",
                lines=(LineRange(9, 9),),
                category=Category.SYNTAX,
                severity=Severity.MEDIUM,
            ),
        ),
    ]


def make_candidate(name: str, count: int, usage: TokenUsage = None) -> CandidateResultSet:
    return CandidateResultSet(
        agent_name=name,
        findings=[Finding(description=f"{name} finding {i}") for i in range(count)],
        token_usage=usage,
        processing_time_ms=1200,
        test_file_id="12_counter_logic_easy_vhd",
    )


@pytest.fixture
def candidates() -> List[CandidateResultSet]:
    """Candidate A reports 3 findings, candidate B reports 1."""
    return [
        make_candidate("A", 3, TokenUsage(1000, 500, 1500)),
        make_candidate("B", 1, TokenUsage(2000, 1000, 3000)),
    ]


@pytest.fixture
def fixture(fixture_info, ground_truth, candidates) -> Fixture:
    return Fixture(info=fixture_info, ground_truth=ground_truth, candidates=candidates)


@pytest.fixture
def verdict_payload() -> Dict[str, Any]:
    """Judge reply for the two-candidate fixture.

    A: 2 matches, 1 false positive, 0 false negatives.
    B: 1 match, 0 false positives, 1 false negative.
    """
    return {
        "modelResults": [
            {
                "model": "A",
                "matches": [
                    {"groundTruthId": "gt-1", "aiIssueIndex": 0, "matchType": "exact",
                     "confidence": 0.9, "reasoning": "same issue"},
                    {"groundTruthId": "gt-2", "aiIssueIndex": 2, "matchType": "semantic",
                     "confidence": 0.7, "reasoning": "same root cause"},
                ],
                "falsePositives": [{"aiIssueIndex": 1, "reasoning": "not a bug"}],
                "falseNegatives": [],
            },
            {
                "model": "B",
                "matches": [
                    {"groundTruthId": "gt-1", "aiIssueIndex": 0, "matchType": "partial",
                     "confidence": 0.6, "reasoning": "partially"},
                ],
                "falsePositives": [],
                "falseNegatives": [{"groundTruthId": "gt-2", "reasoning": "missed"}],
            },
        ]
    }


@pytest.fixture
def verdict_text(verdict_payload) -> str:
    """The verdict wrapped in prose and a code fence, as judges tend to reply."""
    return "Here is my evaluation:\n```json\n" + json.dumps(verdict_payload) + "\n```\nDone."
