"""
Structured-Response Extractor

Recovers the single top-level JSON object embedded in free-form model
output: prose before or after the record, markdown code fences, and
invalid escape sequences or raw control characters inside strings.
"""

import json
import re
from typing import Any, Dict

from ..errors import MalformedJson, NoJsonFound, UnterminatedJson

# Opening fences may carry a language tag (```json, ```vhdl); closing ones don't
_FENCE_RE = re.compile(r"```[A-Za-z0-9_+.-]*\n?")

# A backslash plus the escaped character when the pair is a valid JSON escape
_ESCAPE_RE = re.compile(r'\\(\\|["/bfnrtu])?')

_JSON_WHITESPACE = {"\t", "\n", "\r"}


def strip_code_fences(text: str) -> str:
    """Remove every fenced code-block marker, tagged or bare."""
    return _FENCE_RE.sub("", text).strip()


def find_json_object(text: str) -> str:
    """
    Locate the first brace-balanced object in text.

    Braces are counted on raw characters; braces inside string literals
    are not treated specially.

    Args:
        text: Text with fences already removed

    Returns:
        Substring from the first "{" to its matching "}" inclusive

    Raises:
        NoJsonFound: If the text has no opening brace
        UnterminatedJson: If the brace count never returns to zero
    """
    start = text.find("{")
    if start == -1:
        raise NoJsonFound()

    depth = 0
    for idx in range(start, len(text)):
        char = text[idx]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : idx + 1]

    raise UnterminatedJson()


def _double_lone_backslash(match: "re.Match") -> str:
    if match.group(1):
        return match.group(0)
    return "\\\\"


def _escape_control_char(char: str) -> str:
    return "\\u%04x" % ord(char)


def repair_json_text(candidate: str) -> str:
    """
    Apply the recovery pass used after a failed parse.

    Lone backslashes are doubled, and raw control characters (0x00-0x1F,
    0x7F) are rewritten as \\u00XX escapes. Tabs, newlines and carriage
    returns between tokens are valid JSON whitespace and are kept.

    Args:
        candidate: Brace-balanced record text

    Returns:
        Repaired text
    """
    escaped = _ESCAPE_RE.sub(_double_lone_backslash, candidate)

    out = []
    in_string = False
    backslash = False
    for char in escaped:
        if in_string:
            if backslash:
                backslash = False
            elif char == "\\":
                backslash = True
            elif char == '"':
                in_string = False
            if ord(char) < 0x20 or char == "\x7f":
                out.append(_escape_control_char(char))
                continue
        else:
            if char == '"':
                in_string = True
            elif (ord(char) < 0x20 or char == "\x7f") and char not in _JSON_WHITESPACE:
                out.append(_escape_control_char(char))
                continue
        out.append(char)
    return "".join(out)


def extract_json_record(text: str) -> Dict[str, Any]:
    """
    Recover the structured record embedded in a model response.

    Args:
        text: Raw response text

    Returns:
        The parsed top-level object

    Raises:
        NoJsonFound: No opening brace in the text
        UnterminatedJson: Unbalanced braces
        MalformedJson: Parsing failed before and after repair, or the record
            is nested too deeply to parse
    """
    candidate = find_json_object(strip_code_fences(text or ""))

    try:
        return json.loads(candidate)
    except RecursionError as e:
        raise MalformedJson(e) from e
    except json.JSONDecodeError:
        pass

    try:
        return json.loads(repair_json_text(candidate))
    except (json.JSONDecodeError, RecursionError) as e:
        raise MalformedJson(e) from e
