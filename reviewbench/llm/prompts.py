"""
Prompt Templates

Contains the code-review prompt sent to candidate models and the
arbitration prompt sent to the judge.
"""

import json
from typing import Sequence

# =============================================================================
# Code review prompt (analysis phase)
# =============================================================================

REVIEW_PROMPT_TEMPLATE = """Analyze the following {language} code for errors and issues. \
Report all issues you can identify with appropriate confidence levels. Critical and high \
severity issues should be reported if 90%+ confident. Medium and low severity issues should \
be reported if 70%+ confident.

Provide your analysis in JSON format with the following EXACT structure:

{{
  "issuesFound": [
    {{
      "description": "specific issue description",
      "lines": [{{"start": 21, "end": 21}}],
      "category": "syntax|logic|style|efficiency",
      "severity": "critical|high|medium|low",
      "suggestions": ["specific suggestion to fix this issue"]
    }}
  ],
  "confidence": 0.0-1.0,
  "reasoning": "brief explanation of your analysis"
}}

CATEGORY DEFINITIONS (use exactly these):
- "syntax": Compilation errors that prevent code from compiling (missing semicolons, \
parentheses, undeclared identifiers, type mismatches)
- "logic": Functional errors that cause incorrect behavior (wrong or missing assignments, \
incorrect logic expressions, unreachable states)
- "style": Code style violations (inconsistent capitalization within the file, missing \
whitespace in lists, old-style constructs)
- "efficiency": Suboptimal implementations that waste resources (redundant logic, \
unnecessary processes, inefficient loops)

SEVERITY GUIDELINES (use these exact mappings):
- "critical": Code will NOT compile or will cause immediate simulation errors
- "high": Code compiles but has functional errors causing incorrect behavior
- "medium": Code works correctly but has style violations or moderate efficiency issues
- "low": Minor style issues with minimal impact

LINE NUMBER ACCURACY REQUIREMENTS:
1. Line numbers are 1-indexed (first line of the code is line 1)
2. Count ALL lines including blank lines in the code block
3. For multi-line issues, use the exact start and end line numbers
4. For single-line issues, start and end should be the same number

ISSUE GROUPING RULES:
- Group similar issues of the same type into a single issue entry with multiple line references
- For consecutive lines with the same issue, use a single range: {{"start": 41, "end": 45}}
- For non-consecutive lines, use separate entries: [{{"start": 10, "end": 10}}, {{"start": 25, "end": 25}}]
- Only create separate issues for fundamentally different problems
- If code appears correct with no identifiable issues, return an empty array: "issuesFound": []

{language} Code:
```{fence}
{code}
```

Respond ONLY with valid JSON. Do not include any text outside the JSON structure."""


def build_review_prompt(code: str, language: str = "VHDL") -> str:
    """
    Build the prompt asking a candidate model to review source code.

    Args:
        code: Source file content
        language: Display name of the source language

    Returns:
        Prompt text
    """
    return REVIEW_PROMPT_TEMPLATE.format(
        language=language,
        fence=language.lower(),
        code=code,
    )


# =============================================================================
# Arbitration prompt
# =============================================================================

ARBITER_PROMPT_TEMPLATE = """You are an expert {language} code reviewer evaluating how well \
AI models identified issues in {language} code.

GROUND TRUTH ISSUES (expected issues):
{ground_truth_section}

AI MODEL RESPONSES:
{candidates_section}

TASK:
For each AI model, determine which of their found issues match the ground truth issues.
Consider semantic similarity - issues can be described differently but refer to the same problem.
Refer to an AI issue only by its [index] within that model's list.

You must respond with ONLY valid JSON in this exact format:
{{
  "modelResults": [
    {{
      "model": "Model Name",
      "matches": [
        {{
          "groundTruthId": "issue_id_from_ground_truth",
          "aiIssueIndex": 0,
          "matchType": "exact" | "semantic" | "partial",
          "confidence": 0.0-1.0,
          "reasoning": "Brief explanation of why this matches"
        }}
      ],
      "falsePositives": [
        {{
          "aiIssueIndex": 2,
          "reasoning": "Why this is not a real issue"
        }}
      ],
      "falseNegatives": [
        {{
          "groundTruthId": "issue_id",
          "reasoning": "Why AI missed this issue"
        }}
      ]
    }}
  ]
}}

Respond ONLY with valid JSON. Do not include any text outside the JSON structure."""


def _lines_json(lines: Sequence) -> str:
    return json.dumps([r.to_dict() for r in lines])


def format_ground_truth_section(ground_truth: Sequence) -> str:
    """Render ground-truth findings with id, lines, category and reasoning."""
    blocks = []
    for issue in ground_truth:
        blocks.append(
            f"\nID: {issue.id}\n"
            f"Description: {issue.finding.description}\n"
            f"Lines: {_lines_json(issue.finding.lines)}\n"
            f"Category: {issue.finding.category.value}\n"
            f"Severity: {issue.finding.severity.value}\n"
            f"Reasoning: {issue.reasoning}\n"
        )
    return "\n---\n".join(blocks)


def format_candidate_section(agent_name: str, findings: Sequence) -> str:
    """Render one candidate's findings, each tagged with its zero-based index."""
    entries = "".join(
        f"\n[{idx}] Description: {finding.description}\n"
        f"    Lines: {_lines_json(finding.lines)}\n"
        f"    Category: {finding.category.value}\n"
        f"    Severity: {finding.severity.value}\n"
        for idx, finding in enumerate(findings)
    )
    return f"\nModel: {agent_name}\nIssues Found ({len(findings)} total):\n{entries}\n"


def build_arbiter_prompt(ground_truth: Sequence, candidates: Sequence, language: str = "VHDL") -> str:
    """
    Build the single arbitration request for one fixture.

    Args:
        ground_truth: GroundTruthFinding sequence
        candidates: CandidateResultSet sequence, in request order
        language: Display name of the source language

    Returns:
        Prompt text
    """
    return ARBITER_PROMPT_TEMPLATE.format(
        language=language,
        ground_truth_section=format_ground_truth_section(ground_truth),
        candidates_section="\n".join(
            format_candidate_section(c.agent_name, c.findings) for c in candidates
        ),
    )
