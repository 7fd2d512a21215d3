"""
Command-line interface for the Snapshot Drift Detector.

Compares two snapshot roots (local directories or s3:// prefixes) and prints
the drift report. Every flag falls back to its environment variable (see
config.py), so the tool can also be driven entirely from the environment.

Usage:
    snapshot-drift --baseline ./pre --current ./post
    snapshot-drift --baseline ./pre --current ./post --diff-mode line
    snapshot-drift --baseline s3://bucket/pre --current s3://bucket/post --output-format json

Exit codes: 0 no drift, 1 drift detected, 2 configuration or input error.
"""

import argparse
import json
import sys
from typing import List, Optional

from .config import load_config
from .drift_detector import detect_drift, format_report, report_to_dict
from .exceptions import FatalInputError
from .utils import setup_logging

EXIT_NO_DRIFT = 0
EXIT_DRIFT = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Detect configuration drift between two resource snapshots",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  snapshot-drift --baseline ./pre --current ./post
  snapshot-drift --baseline ./pre --current ./post --match-mode prefix --diff-mode line
        """,
    )
    parser.add_argument("--baseline", help="Baseline snapshot root (dir or s3://bucket/prefix)")
    parser.add_argument("--current", help="Current snapshot root (dir or s3://bucket/prefix)")
    parser.add_argument(
        "--match-mode",
        choices=["identifier", "exact", "prefix"],
        help="How resources are paired across snapshots (default: identifier)",
    )
    parser.add_argument(
        "--diff-mode",
        choices=["structural", "line"],
        help="How changed documents are described (default: structural)",
    )
    parser.add_argument(
        "--equality-mode",
        choices=["structural", "bytes"],
        help="How paired documents are judged equal (default: structural)",
    )
    parser.add_argument("--file-pattern", help="Filter for participating files (default: *.json)")
    parser.add_argument("--identifier-field", help="Dotted identity field (default: id)")
    parser.add_argument("--prefix-separator", help="Separator for prefix matching (default: -)")
    parser.add_argument(
        "--ambiguity-policy",
        choices=["first", "exclude"],
        help="Handling of keys claimed by several documents (default: first)",
    )
    parser.add_argument("--summary-document", help="Root-level document compared as a whole")
    parser.add_argument("--report-file", help="Also write the text report to this file")
    parser.add_argument("--max-workers", help="Categories compared in parallel (default: 4)")
    parser.add_argument("--region", help="AWS region for S3 snapshots")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--output-format",
        choices=["json", "pretty"],
        default="pretty",
        help="Output format for the drift report (default: pretty)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command-line drift detector."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(
            {
                "baseline_path": args.baseline,
                "current_path": args.current,
                "match_mode": args.match_mode,
                "diff_mode": args.diff_mode,
                "equality_mode": args.equality_mode,
                "file_pattern": args.file_pattern,
                "identifier_field": args.identifier_field,
                "prefix_separator": args.prefix_separator,
                "ambiguity_policy": args.ambiguity_policy,
                "summary_document": args.summary_document,
                "report_file": args.report_file,
                "max_workers": args.max_workers,
                "aws_region": args.region,
                "log_level": args.log_level,
            }
        )
    except ValueError as e:
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR

    logger = setup_logging(config.log_level)
    logger.info("Starting snapshot drift detection")

    try:
        report = detect_drift(config)
    except FatalInputError as e:
        logger.error(f"Cannot compare snapshots: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_ERROR

    text = format_report(report)
    if args.output_format == "json":
        print(json.dumps(report_to_dict(report), indent=2, ensure_ascii=False))
    else:
        print(text)

    if config.report_file:
        try:
            with open(config.report_file, "w", encoding="utf-8") as f:
                f.write(text + "\n")
        except OSError as e:
            logger.error(f"Cannot write report file: {e}")
            print(f"ERROR: Cannot write report file {config.report_file}: {e}", file=sys.stderr)
            return EXIT_ERROR
        logger.info(f"Report written to {config.report_file}")

    if report.drift_detected:
        logger.warning("Drift detected! Exiting with code 1")
        return EXIT_DRIFT
    logger.info("No drift detected. Exiting with code 0")
    return EXIT_NO_DRIFT


if __name__ == "__main__":
    sys.exit(main())
