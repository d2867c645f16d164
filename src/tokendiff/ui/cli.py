# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from tokendiff.app import (
    compare_baselines,
    load_baseline_file,
    read_baseline_document,
    validate_baseline,
)
from tokendiff.config import ConfigurationError, configure_logging, get_compare_config
from tokendiff.domain.model import BumpType
from tokendiff.domain.reconciliation import parse_version

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from tokendiff.domain.reconciliation import ReconciliationReport, ValidationResult

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tokendiff",
        description="Compare token registry baselines and suggest a version bump",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Check alias references of a baseline")
    validate.add_argument("file", type=str, help="Baseline JSON file")

    compare = subparsers.add_parser("compare", help="Compare two baselines")
    compare.add_argument("old", type=str, help="Previous baseline JSON file")
    compare.add_argument("new", type=str, help="Current baseline JSON file")
    compare.add_argument(
        "--current-version",
        type=str,
        help="Version of the previous baseline (defaults to config)",
    )
    compare.add_argument(
        "--json",
        action="store_true",
        help="Print the full report as JSON",
    )
    compare.add_argument(
        "--fail-on-breaking",
        action="store_true",
        default=None,
        help="Exit with status 1 when the suggested bump is major",
    )
    compare.add_argument(
        "--allow-invalid",
        action="store_true",
        help="Do not fail when the new baseline has broken or circular aliases",
    )

    return parser.parse_args(list(argv))


def _print_validation(source: str, result: ValidationResult) -> None:
    if result.valid:
        print(f"{source}: valid")
    else:
        print(f"{source}: {result.error_count} error(s)")
    for broken in result.broken_aliases:
        print(f"  broken alias {broken.token_path} -> {broken.alias_reference}: {broken.error}")
    for cycle in result.circular_references:
        print(f"  {cycle.error}")
    for warning in result.warnings:
        print(f"  warning: {warning}")


def _print_report(report: ReconciliationReport) -> None:
    bump = report.version
    print(f"{bump.current} -> {bump.suggested} ({bump.change_type}): {bump.summary}")
    for change in report.changes:
        print(f"  [{change.severity}] {change.category} {change.path}: {change.description}")
    for broken in report.validation.broken_aliases:
        print(f"  broken alias {broken.token_path} -> {broken.alias_reference}: {broken.error}")
    for cycle in report.validation.circular_references:
        print(f"  {cycle.error}")
    for warning in report.warnings:
        print(f"  warning: {warning}")


def _run_validate(args: argparse.Namespace) -> int:
    try:
        raw = read_baseline_document(args.file)
    except (OSError, ValueError):
        log.exception("Could not read baseline %s", args.file)
        return 2

    result = validate_baseline(raw)
    _print_validation(args.file, result)
    return 0 if result.valid else 1


def _run_compare(args: argparse.Namespace) -> int:
    try:
        config = get_compare_config()
        current_version = args.current_version or config.base_version
        parse_version(current_version)
        old = load_baseline_file(args.old)
        new = load_baseline_file(args.new)
    except (OSError, ValueError, ConfigurationError):
        log.exception("CLI validation error")
        return 2

    fail_on_breaking = (
        config.fail_on_breaking if args.fail_on_breaking is None else args.fail_on_breaking
    )
    report = compare_baselines(
        old.snapshot,
        new.snapshot,
        current_version=current_version,
    )
    report = replace(report, input_warnings=old.warnings + new.warnings)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False, default=str))
    else:
        _print_report(report)

    if not report.accepted and not args.allow_invalid:
        log.error("New baseline %s has invalid alias references", args.new)
        return 1
    if fail_on_breaking and report.version.change_type is BumpType.MAJOR:
        log.error("Breaking changes detected (%s)", report.version.summary)
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "validate":
            status = _run_validate(parsed_args)
        elif parsed_args.command == "compare":
            status = _run_compare(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error during comparison")
        sys.exit(1)

    if status:
        sys.exit(status)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
