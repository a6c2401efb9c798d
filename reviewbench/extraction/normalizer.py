"""
Finding Normalizer

Maps loosely-typed records recovered from model output onto the canonical
Finding schema. Normalization never raises: every element yields a
best-effort Finding with defaults applied.
"""

import json
from typing import Any, Dict, Iterable, List

from ..models import (
    PLACEHOLDER_LINES,
    AnalysisResult,
    Category,
    Finding,
    GroundTruthFinding,
    LineRange,
    Severity,
)
from .extractor import extract_json_record

_CATEGORIES = {c.value: c for c in Category}
_SEVERITIES = {s.value: s for s in Severity}


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def normalize_line_range(raw: Any) -> LineRange:
    """Coerce one line reference; anything unreadable becomes {0, 0}."""
    if isinstance(raw, dict):
        start = _as_int(raw.get("start", 0))
        end = _as_int(raw.get("end", start))
        return LineRange(start=start, end=end)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        line = _as_int(raw)
        return LineRange(start=line, end=line)
    return LineRange(0, 0)


def normalize_lines(raw: Any) -> tuple:
    if not isinstance(raw, list) or not raw:
        return PLACEHOLDER_LINES
    return tuple(normalize_line_range(item) for item in raw)


def _enum_value(raw: Any, choices: Dict[str, Any], default):
    if isinstance(raw, str):
        return choices.get(raw.strip().lower(), default)
    return default


def normalize_finding(raw: Any) -> Finding:
    """
    Build a Finding from an arbitrarily shaped element.

    Args:
        raw: One element of an issuesFound array

    Returns:
        Finding with defaults for every missing or unrecognised field
    """
    if not isinstance(raw, dict):
        return Finding(description=_as_text(raw))

    description = raw.get("description")
    if description is None:
        description = raw

    suggestions = raw.get("suggestions")
    if not isinstance(suggestions, list):
        suggestions = []

    return Finding(
        description=_as_text(description),
        lines=normalize_lines(raw.get("lines")),
        category=_enum_value(raw.get("category"), _CATEGORIES, Category.STYLE),
        severity=_enum_value(raw.get("severity"), _SEVERITIES, Severity.MEDIUM),
        suggestions=tuple(_as_text(s) for s in suggestions if s is not None),
    )


def normalize_findings(items: Any) -> List[Finding]:
    """Normalize every element; non-list input yields no findings."""
    if not isinstance(items, list):
        return []
    return [normalize_finding(item) for item in items]


def _as_confidence(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def normalize_analysis(record: Dict[str, Any]) -> AnalysisResult:
    """Normalize a whole analysis record (issuesFound, confidence, reasoning)."""
    if not isinstance(record, dict):
        return AnalysisResult()
    reasoning = record.get("reasoning")
    return AnalysisResult(
        findings=normalize_findings(record.get("issuesFound")),
        confidence=_as_confidence(record.get("confidence")),
        reasoning=_as_text(reasoning) if reasoning else "",
    )


def parse_analysis_response(text: str) -> AnalysisResult:
    """Extract and normalize a candidate's raw analysis response."""
    return normalize_analysis(extract_json_record(text))


def normalize_ground_truth(items: Iterable[Dict[str, Any]]) -> List[GroundTruthFinding]:
    """
    Build ground-truth findings from a fixture's issue list.

    Issues without an id are given a positional one (gt-1, gt-2, ...).
    """
    result = []
    for position, item in enumerate(items or [], start=1):
        item = item if isinstance(item, dict) else {"description": item}
        issue_id = item.get("id") or f"gt-{position}"
        reasoning = item.get("reasoning")
        result.append(
            GroundTruthFinding(
                id=str(issue_id),
                finding=normalize_finding(item),
                reasoning=_as_text(reasoning) if reasoning else "",
            )
        )
    return result
