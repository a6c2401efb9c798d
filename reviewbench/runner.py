"""
Analysis Runner

Runs every configured candidate model over every source file and stores
the parsed findings as response files for later arbitration.
"""

import json
import logging
import re
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from tqdm import tqdm

from .extraction import parse_analysis_response
from .llm.base import BaseLLMClient
from .llm.prompts import build_review_prompt
from .llm.retry import DEFAULT_RETRY_POLICY, RetryPolicy, call_with_retry
from .models import CandidateResultSet, FixtureInfo

logger = logging.getLogger(__name__)

_COMPLEXITY_RE = re.compile(r"\b(if|case|for|while|process|entity|architecture)\b", re.IGNORECASE)
_CATEGORY_KEYWORDS = ("syntax", "logic", "efficiency", "style")


def generate_file_id(filename: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "_", filename).lower()


def detect_category(filename: str) -> str:
    """Category from the file name; files without a keyword are 'mixed'."""
    lower = filename.lower()
    for keyword in _CATEGORY_KEYWORDS:
        if keyword in lower:
            return keyword
    return "mixed"


def detect_difficulty(content: str) -> str:
    """Difficulty from line count and control-structure keyword count."""
    lines = len(content.split("\n"))
    # split keeps the captured keywords: n keywords -> 2n + 1 pieces
    complexity = len(_COMPLEXITY_RE.split(content))

    if lines > 100 or complexity > 20:
        return "hard"
    if lines > 50 or complexity > 10:
        return "medium"
    return "easy"


def load_source_file(path: str) -> Optional[Dict[str, Any]]:
    """Read a source file and derive its fixture identity."""
    file_path = Path(path)
    if not file_path.exists():
        logger.warning(f"Test file not found: {file_path}")
        return None

    content = file_path.read_text(encoding="utf-8")
    info = FixtureInfo(
        id=generate_file_id(file_path.name),
        filename=file_path.name,
        category=detect_category(file_path.name),
        difficulty=detect_difficulty(content),
    )
    return {"info": info, "content": content}


def summarize_results(results: Sequence[CandidateResultSet]) -> Dict[str, Any]:
    """Totals and average processing time over successful results."""
    successful = [r for r in results if r.success]
    average = 0
    if successful:
        average = round(sum(r.processing_time_ms for r in successful) / len(successful))
    return {
        "totalTests": len(results),
        "successful": len(successful),
        "failed": len(results) - len(successful),
        "averageProcessingTime": average,
        "models": [
            {"model": r.agent_name, "success": r.success, "processingTime": r.processing_time_ms}
            for r in results
        ],
    }


class AnalysisRunner:
    """Collects candidate reviews for a set of source files."""

    def __init__(
        self,
        clients: Dict[str, BaseLLMClient],
        output_dir: str,
        request_delay_s: float = 1.0,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        language: str = "VHDL",
        sleep: Callable[[float], None] = time.sleep,
        show_progress: bool = True,
    ):
        """
        Initialize the runner.

        Args:
            clients: Candidate clients keyed by agent name, in run order
            output_dir: Root output directory (responses/ is created inside)
            request_delay_s: Pause after each successful request
            retry_policy: Backoff applied to each candidate call
            language: Source language named in the review prompt
            sleep: Sleep function (injectable for tests)
            show_progress: Display a tqdm progress bar
        """
        self.clients = clients
        self.output_dir = Path(output_dir)
        self.request_delay_s = request_delay_s
        self.retry_policy = retry_policy
        self.language = language
        self._sleep = sleep
        self.show_progress = show_progress

    @property
    def responses_dir(self) -> Path:
        return self.output_dir / "responses"

    def analyze(self, agent_name: str, client: BaseLLMClient, info: FixtureInfo, code: str):
        """
        Ask one candidate to review one source file.

        Failures are captured in the returned result set (success=False)
        rather than raised.
        """
        prompt = build_review_prompt(code, language=self.language)
        timestamp = datetime.now().isoformat()
        start = time.monotonic()
        try:
            response = call_with_retry(
                client.send_prompt_with_usage,
                prompt,
                is_retryable=client.is_retryable_error,
                policy=self.retry_policy,
                sleep=self._sleep,
            )
            analysis = parse_analysis_response(response.content)
        except Exception as e:
            logger.error(f"Error with {agent_name} on {info.filename}: {e}")
            message = str(e) or type(e).__name__
            return CandidateResultSet(
                agent_name=agent_name,
                success=False,
                error=message,
                reasoning=message,
                test_file_id=info.id,
                timestamp=timestamp,
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info(f"{agent_name} completed {info.filename} in {elapsed_ms}ms")
        return CandidateResultSet(
            agent_name=agent_name,
            findings=analysis.findings,
            token_usage=response.usage,
            processing_time_ms=elapsed_ms,
            success=True,
            confidence=analysis.confidence,
            reasoning=analysis.reasoning,
            test_file_id=info.id,
            timestamp=timestamp,
        )

    def run_file(self, info: FixtureInfo, code: str) -> List[CandidateResultSet]:
        """Run every candidate on one file and save the response file."""
        results = []
        for agent_name, client in self.clients.items():
            result = self.analyze(agent_name, client, info, code)
            results.append(result)
            if result.success and self.request_delay_s > 0:
                self._sleep(self.request_delay_s)

        self.save_results(info, results)
        return results

    def save_results(self, info: FixtureInfo, results: Sequence[CandidateResultSet]) -> Path:
        """Write <output>/responses/<id>_<timestamp>.json."""
        self.responses_dir.mkdir(parents=True, exist_ok=True)
        timestamp = re.sub(r"[:.]", "-", datetime.now().isoformat())
        output_file = self.responses_dir / f"{info.id}_{timestamp}.json"

        data = {
            "testFile": info.to_dict(),
            "results": [r.to_dict() for r in results],
            "summary": summarize_results(results),
        }
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        logger.info(f"Results saved to: {output_file.name}")
        return output_file

    def run(self, test_files: Sequence[str]) -> Dict[str, List[CandidateResultSet]]:
        """
        Analyze every source file with every candidate.

        Args:
            test_files: Paths of source files; missing files are skipped

        Returns:
            Results keyed by source file name
        """
        sources = [s for s in (load_source_file(p) for p in test_files) if s]
        all_results = {}
        for source in tqdm(sources, desc="Analyzing", disable=not self.show_progress):
            info = source["info"]
            all_results[info.filename] = self.run_file(info, source["content"])
        return all_results
