"""
Review Bench CLI

Command-line interface for the code-review benchmark.
"""

import argparse
import sys

from dotenv import load_dotenv

from .commands import analyze, evaluate, report


def main():
    """CLI entry point for the code-review benchmark."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Code Review Agent Benchmark",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Collect candidate reviews
  reviewbench analyze --config config/config.yaml
  reviewbench analyze --files test-files/counter_logic.vhd

  # Arbitrate stored responses against ground truth
  reviewbench evaluate --variant confidence
  reviewbench evaluate --output results/normalyzed/arbiter_evaluation.csv

  # Summarize the analysis phase
  reviewbench report
""",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Register all commands
    analyze.register_parser(subparsers)
    evaluate.register_parser(subparsers)
    report.register_parser(subparsers)

    args = parser.parse_args()

    if args.command == "analyze":
        analyze.run(args)
    elif args.command == "evaluate":
        evaluate.run(args)
    elif args.command == "report":
        report.run(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
