"""
Response Extraction

Recovers structured records from raw model output and normalizes them
into canonical findings.
"""

from .extractor import (
    extract_json_record,
    find_json_object,
    repair_json_text,
    strip_code_fences,
)
from .normalizer import (
    normalize_analysis,
    normalize_finding,
    normalize_findings,
    normalize_ground_truth,
    normalize_line_range,
    parse_analysis_response,
)

__all__ = [
    # Extractor
    "extract_json_record",
    "find_json_object",
    "repair_json_text",
    "strip_code_fences",
    # Normalizer
    "normalize_analysis",
    "normalize_finding",
    "normalize_findings",
    "normalize_ground_truth",
    "normalize_line_range",
    "parse_analysis_response",
]
