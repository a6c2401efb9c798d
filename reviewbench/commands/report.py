"""
Report Command

Summarize stored analysis responses per model and per test file.
"""

import sys
from pathlib import Path

from ..config import DEFAULT_CONFIG_PATH


def register_parser(subparsers):
    """Register report command parser."""
    report_parser = subparsers.add_parser(
        "report", help="Generate summary report from stored responses"
    )
    report_parser.add_argument(
        "--config",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    report_parser.add_argument(
        "--responses",
        type=str,
        default=None,
        help="Directory of response files (default: <output>/responses)",
    )
    report_parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output path (default: <output>/reports/summary_report.json)",
    )


def run(args):
    """Run summary report generation."""
    from ..config import load_settings
    from ..errors import ConfigError
    from ..reporter import generate_summary_report

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    responses_dir = Path(args.responses) if args.responses else settings.responses_dir
    if not responses_dir.is_dir():
        print(f"Error: Responses directory not found: {responses_dir}")
        sys.exit(1)

    output = args.output or str(settings.reports_dir / "summary_report.json")
    report_path = generate_summary_report(str(responses_dir), output)
    print(f"Summary report saved to: {report_path}")
