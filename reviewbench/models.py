"""
Benchmark Data Model

Findings, ground truth and candidate result sets exchanged between the
analysis phase, the fixture loader and the arbiter evaluator.

Field names on the wire are camelCase to stay compatible with stored
fixture and response files.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Category(str, Enum):
    SYNTAX = "syntax"
    LOGIC = "logic"
    STYLE = "style"
    EFFICIENCY = "efficiency"


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class LineRange:
    """A contiguous, 1-indexed, inclusive block of source lines."""

    start: int
    end: int

    def to_dict(self) -> Dict[str, int]:
        return {"start": self.start, "end": self.end}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LineRange":
        return cls(start=int(data["start"]), end=int(data["end"]))


PLACEHOLDER_LINES = (LineRange(0, 0),)


@dataclass(frozen=True)
class Finding:
    """A single normalized issue reported against a source file."""

    description: str
    lines: tuple = PLACEHOLDER_LINES
    category: Category = Category.STYLE
    severity: Severity = Severity.MEDIUM
    suggestions: tuple = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "lines": [r.to_dict() for r in self.lines],
            "category": self.category.value,
            "severity": self.severity.value,
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class GroundTruthFinding:
    """An expected finding, defined once per fixture."""

    id: str
    finding: Finding
    reasoning: str = ""

    @property
    def description(self) -> str:
        return self.finding.description

    def to_dict(self) -> Dict[str, Any]:
        result = {"id": self.id}
        result.update(self.finding.to_dict())
        result["reasoning"] = self.reasoning
        return result


@dataclass
class TokenUsage:
    """Token counts reported by a provider for one call."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "totalTokens": self.total_tokens,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenUsage":
        return cls(
            input_tokens=int(data.get("inputTokens", 0) or 0),
            output_tokens=int(data.get("outputTokens", 0) or 0),
            total_tokens=int(data.get("totalTokens", 0) or 0),
        )


@dataclass
class AnalysisResult:
    """A candidate's parsed analysis of one source file."""

    findings: List[Finding] = field(default_factory=list)
    confidence: float = 0.0
    reasoning: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "issuesFound": [f.to_dict() for f in self.findings],
            "confidence": self.confidence,
            "reasoning": self.reasoning,
        }


@dataclass
class CandidateResultSet:
    """One reviewed agent's full output for one fixture."""

    agent_name: str
    findings: List[Finding] = field(default_factory=list)
    token_usage: Optional[TokenUsage] = None
    processing_time_ms: int = 0
    success: bool = True
    error: Optional[str] = None
    confidence: float = 0.0
    reasoning: str = ""
    test_file_id: str = ""
    timestamp: str = ""

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "model": self.agent_name,
            "timestamp": self.timestamp,
            "testFileId": self.test_file_id,
            "response": AnalysisResult(
                findings=self.findings,
                confidence=self.confidence,
                reasoning=self.reasoning,
            ).to_dict(),
            "processingTimeMs": self.processing_time_ms,
            "success": self.success,
        }
        if self.error is not None:
            result["error"] = self.error
        if self.token_usage is not None:
            result["tokensUsed"] = self.token_usage.to_dict()
        return result


@dataclass
class FixtureInfo:
    """Identity of a source file under review."""

    id: str
    filename: str
    category: str = "mixed"
    difficulty: str = "easy"

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "filename": self.filename,
            "category": self.category,
            "difficulty": self.difficulty,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FixtureInfo":
        return cls(
            id=data.get("id", ""),
            filename=data["filename"],
            category=data.get("category", "mixed"),
            difficulty=data.get("difficulty", "easy"),
        )


@dataclass
class Fixture:
    """A source file, its ground truth, and every candidate that reviewed it."""

    info: FixtureInfo
    ground_truth: List[GroundTruthFinding] = field(default_factory=list)
    candidates: List[CandidateResultSet] = field(default_factory=list)

    @property
    def filename(self) -> str:
        return self.info.filename
