#!/usr/bin/env python3
"""
CLI for regenerating the iOS dimensions dataset.

Every run measures the selected simulators from scratch and replaces
dimensions.json / logs.json wholesale.

Usage:
  python dimensions_cli.py
  python dimensions_cli.py --list-devices
  python dimensions_cli.py --device "iPhone 15" --device "iPad Pro (11-inch) (4th generation)"
  python dimensions_cli.py --output-dir ./src/data --build-timeout 3600
  python dimensions_cli.py --dry-run --log-level INFO

Exit codes:
  0  dataset generated (or devices listed)
  1  requirements missing (Xcode, xcparse, macOS)
  2  unexpected failure (toolchain error, malformed attachment, ...)
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from ios_dimensions.domain import Dataset
from pipeline.config import LOG_LEVELS
from pipeline.framework import (
    Completed,
    ConsoleObserver,
    NullObserver,
    PreflightAbort,
    RunOutcome,
    UnexpectedFailure,
)
from pipeline.wiring import build_pipeline, load_settings

EXIT_OK = 0
EXIT_PREFLIGHT = 1
EXIT_FAILURE = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Measure iOS simulator screen dimensions.")

    parser.add_argument("--project", help="Path to the measurement .xcodeproj")
    parser.add_argument("--scheme", help="Xcode scheme running the measurement UI tests")
    parser.add_argument("--output-dir", help="Directory receiving dimensions.json and logs.json")
    parser.add_argument("--scratch-root", help="Parent directory for per-device derived data")
    parser.add_argument("--build-timeout", type=int, help="Seconds allowed per xcodebuild run (0 = none)")
    parser.add_argument(
        "--device",
        action="append",
        default=[],
        metavar="NAME",
        help="Simulator name to measure (repeatable). Default: every iPhone/iPad of the newest iOS runtime",
    )
    parser.add_argument("--list-devices", action="store_true", help="List measurable simulators and exit")
    parser.add_argument("--dry-run", action="store_true", help="Measure but do not write any file")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="Diagnostic log level (stderr)")
    return parser.parse_args(argv)


def report(outcome: RunOutcome) -> int:
    """Print the outcome and map it to an exit code."""
    if isinstance(outcome, PreflightAbort):
        print(outcome.message, file=sys.stderr)
        return EXIT_PREFLIGHT

    if isinstance(outcome, UnexpectedFailure):
        print(f"\n❌ {outcome.message}", file=sys.stderr)
        if outcome.traceback:
            print(outcome.traceback, file=sys.stderr)
        return EXIT_FAILURE

    dataset: Optional[Dataset] = outcome.dataset
    if dataset is not None:
        print(f"\n✅ {len(dataset.records)} unique dimensions on {dataset.platform}")
    for name, path in sorted(outcome.artifacts.items()):
        print(f"  {name:<10}: {path}")
    return EXIT_OK


def print_devices(outcome: Completed) -> None:
    for result in outcome.stage_results:
        if result.name == "discover_devices":
            print(f"\n{result.summary.get('platform')}")
            for name in result.summary.get("devices") or []:
                print(f"  {name}")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    if args.build_timeout is not None and args.build_timeout < 0:
        print("--build-timeout must be >= 0", file=sys.stderr)
        return EXIT_PREFLIGHT

    try:
        settings = load_settings(
            project=args.project,
            scheme=args.scheme,
            output_dir=args.output_dir,
            scratch_root=args.scratch_root,
            build_timeout_seconds=args.build_timeout,
            log_level=args.log_level,
        )
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_PREFLIGHT

    pipeline = build_pipeline(settings)
    observer = NullObserver() if args.quiet else ConsoleObserver()

    if args.list_devices:
        outcome = pipeline.discover(devices=args.device, observer=observer)
        if isinstance(outcome, Completed):
            print_devices(outcome)
        return report(outcome)

    return report(pipeline.generate(devices=args.device, dry_run=args.dry_run, observer=observer))


if __name__ == "__main__":
    raise SystemExit(main())
