"""
Evaluate Command

Arbitrate stored candidate responses against ground truth and write the
per-(fixture, agent) scores.
"""

import sys
from pathlib import Path

from ..config import DEFAULT_CONFIG_PATH

DEFAULT_OUTPUT = "results/normalyzed/arbiter_evaluation.csv"


def register_parser(subparsers):
    """Register evaluate command parser."""
    eval_parser = subparsers.add_parser(
        "evaluate", help="Score stored responses against ground truth via the arbiter"
    )
    eval_parser.add_argument(
        "--config",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    eval_parser.add_argument(
        "--arbiter",
        type=str,
        default=None,
        help="Name of the configured model acting as judge (overrides config)",
    )
    eval_parser.add_argument(
        "--output",
        type=str,
        default=DEFAULT_OUTPUT,
        help=f"Output CSV path (default: {DEFAULT_OUTPUT})",
    )
    eval_parser.add_argument(
        "--variant",
        type=str,
        choices=["cost", "confidence"],
        default="cost",
        help="CSV columns: token/cost or arbiter confidence (default: cost)",
    )
    eval_parser.add_argument(
        "--format",
        type=str,
        choices=["csv", "json", "markdown", "all"],
        default="csv",
        help="Output format (default: csv)",
    )
    eval_parser.add_argument(
        "--language",
        type=str,
        default="VHDL",
        help="Source language named in the judge request (default: VHDL)",
    )


def run(args):
    """Run arbiter evaluation."""
    from ..arbitration import ArbiterEvaluator, ArbitrationProtocol, summarize_by_agent
    from ..config import load_settings
    from ..dataset import load_fixtures
    from ..errors import ConfigError
    from ..llm import create_llm_client
    from ..reporter import generate_markdown_report, write_scores_csv, write_scores_json

    try:
        settings = load_settings(args.config)
        if args.arbiter:
            settings.arbiter = args.arbiter
        arbiter = settings.arbiter_model()
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    judge = create_llm_client(arbiter, settings)
    if not judge.is_available():
        print(f"Error: Arbiter {arbiter.name} is not available (missing API key?)")
        sys.exit(1)

    print(f"Arbiter: {arbiter.name} ({judge.client_name})")
    print(f"Loading fixtures from: {settings.test_files_dir}")

    try:
        fixtures = load_fixtures(settings.test_files_dir, str(settings.responses_dir))
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)

    protocol = ArbitrationProtocol(judge, retry_policy=settings.retry, language=args.language)
    evaluator = ArbiterEvaluator(
        protocol,
        pricing_lookup=settings.pricing_for,
        fixture_delay_s=settings.fixture_delay_ms / 1000,
        show_progress=True,
    )
    evaluation = evaluator.run(fixtures)
    records = evaluation.records

    output = Path(args.output)
    if args.format in ("csv", "all"):
        path = write_scores_csv(records, str(output), variant=args.variant)
        print(f"CSV saved to: {path}")
    if args.format in ("json", "all"):
        path = write_scores_json(records, str(output.with_suffix(".json")))
        print(f"JSON saved to: {path}")
    if args.format in ("markdown", "all"):
        path = generate_markdown_report(records, str(output.with_suffix(".md")))
        print(f"Markdown report saved to: {path}")

    # Print summary
    print("\n" + "=" * 50)
    print("Arbiter Evaluation Results")
    print("=" * 50)
    print(f"Fixtures: {evaluation.successful} successful, {evaluation.failed} failed")
    if evaluation.skipped:
        print(f"Skipped (no responses): {', '.join(evaluation.skipped)}")
    print(f"Records: {len(records)}")

    for summary in summarize_by_agent(records):
        print(f"\n{summary.agent_name}:")
        print(f"  Precision: {summary.precision:.2f}%")
        print(f"  Recall: {summary.recall:.2f}%")
        print(f"  F1 Score: {summary.f1:.2f}%")
        print(f"  Cost: ${summary.cost:.6f}")
        if summary.failed:
            print(f"  Failed: {summary.failed}")
