"""
Analyze Command

Ask every configured candidate model to review every source file.
"""

import sys
from pathlib import Path

from ..config import DEFAULT_CONFIG_PATH


def register_parser(subparsers):
    """Register analyze command parser."""
    analyze_parser = subparsers.add_parser(
        "analyze", help="Collect candidate reviews for the test files"
    )
    analyze_parser.add_argument(
        "--config",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    analyze_parser.add_argument(
        "--files",
        type=str,
        nargs="+",
        default=None,
        help="Source files to review (default: test_files from config, else *.vhd)",
    )
    analyze_parser.add_argument(
        "--models",
        type=str,
        nargs="+",
        default=None,
        help="Names of configured models to run (default: all)",
    )
    analyze_parser.add_argument(
        "--language",
        type=str,
        default="VHDL",
        help="Source language named in the review prompt (default: VHDL)",
    )


def resolve_test_files(settings, files=None):
    """Explicit files, then the configured list, then every *.vhd file."""
    if files:
        return list(files)
    if settings.test_files:
        return [str(Path(settings.test_files_dir) / name) for name in settings.test_files]
    return [str(p) for p in sorted(Path(settings.test_files_dir).glob("*.vhd"))]


def run(args):
    """Run the analysis phase."""
    from ..config import load_settings
    from ..errors import ConfigError
    from ..llm import create_llm_client
    from ..runner import AnalysisRunner

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    models = settings.models
    if args.models:
        models = [m for m in models if m.name in args.models]
        if not models:
            print(f"Error: None of the requested models are configured: {args.models}")
            sys.exit(1)

    clients = {}
    for model in models:
        client = create_llm_client(model, settings)
        if not client.is_available():
            print(f"Warning: {model.name} is not available (missing API key?), skipping")
            continue
        clients[model.name] = client

    if not clients:
        print("Error: No available models")
        sys.exit(1)

    test_files = resolve_test_files(settings, args.files)
    if not test_files:
        print(f"Error: No test files found in {settings.test_files_dir}")
        sys.exit(1)

    print(f"Models: {', '.join(clients)}")
    print(f"Test files: {len(test_files)}")

    runner = AnalysisRunner(
        clients=clients,
        output_dir=settings.output_dir,
        request_delay_s=settings.request_delay_ms / 1000,
        retry_policy=settings.retry,
        language=args.language,
    )
    all_results = runner.run(test_files)

    total = sum(len(r) for r in all_results.values())
    successful = sum(1 for results in all_results.values() for r in results if r.success)

    print("\n" + "=" * 50)
    print("Analysis Complete")
    print("=" * 50)
    print(f"Files analyzed: {len(all_results)}")
    print(f"Responses: {successful}/{total} successful")
    print(f"Responses saved to: {runner.responses_dir}")
