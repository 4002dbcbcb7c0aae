"""Command line interface for the slop detector.

    slop-detector [PATH] [--files F ...] [--config FILE] [--quick] [--apply]
                  [--compact] [--max N] [--json] [--language L]
                  [--severity S ...] [--workers N] [-v]

Exit codes: 0 when no critical finding exists, 2 when one does, 1 when
the configuration is invalid.
"""

import argparse
import json
import sys
from pathlib import Path

from . import __version__
from .config import ConfigError, load_config
from .detector_logging import setup_logging
from .engine import ScanEngine
from .formatters import DEFAULT_MAX_FINDINGS, format_findings_for_display, format_handoff_prompt

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_CRITICAL = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    p = argparse.ArgumentParser(
        prog="slop-detector",
        description="Detect code slop: debug leftovers, placeholders, secrets, "
        "excessive documentation and unsupported quality claims",
    )
    p.add_argument("path", nargs="?", default=".", help="repository root (default: .)")
    p.add_argument(
        "--files",
        nargs="+",
        help="scan only these files (relative to PATH); skips discovery",
    )
    p.add_argument("--config", help="path to a JSON config file")
    p.add_argument(
        "--quick",
        action="store_true",
        help="pattern rules only, skip structural analyzers",
    )
    p.add_argument(
        "--apply",
        action="store_true",
        help="handoff prompt in apply mode (default: report)",
    )
    p.add_argument("--compact", action="store_true", help="compact table output")
    p.add_argument(
        "--max",
        type=int,
        default=DEFAULT_MAX_FINDINGS,
        dest="max_findings",
        help=f"rows in compact output (default: {DEFAULT_MAX_FINDINGS})",
    )
    p.add_argument("--json", action="store_true", help="print the result as JSON")
    p.add_argument(
        "--display",
        action="store_true",
        help="print terminal output grouped by severity instead of a handoff prompt",
    )
    p.add_argument("--language", action="append", help="only scan this language")
    p.add_argument(
        "--severity",
        nargs="+",
        choices=["critical", "high", "medium", "low"],
        help="only report rules of these severities",
    )
    p.add_argument("--workers", type=int, help="analyze files in parallel")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv: list[str] | None = None) -> int:
    """Run a scan from the command line.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    root = Path(args.path)
    try:
        config = load_config(
            path=args.config,
            project_path=root,
            thoroughness="quick" if args.quick else None,
            languages=args.language,
            severities=args.severity,
            max_workers=args.workers,
        )
    except ConfigError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    result = ScanEngine(config=config).scan(args.files, repo_root=root)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    elif args.display:
        print(format_findings_for_display(result))
    else:
        print(
            format_handoff_prompt(
                result,
                mode="apply" if args.apply else "report",
                compact=args.compact,
                max_findings=args.max_findings,
            )
        )

    return EXIT_CRITICAL if result.has_critical else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
