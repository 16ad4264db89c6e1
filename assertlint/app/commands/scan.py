"""scan command: run checkers over Go test files and report findings."""

from __future__ import annotations

import argparse
import json
import sys

from assertlint.engine.analysis import ScanResult, scan_path
from assertlint.engine.checkers import UnknownCheckerError, enabled_checkers
from assertlint.file_discovery import get_project_root
from assertlint.languages.go import GoParserUnavailableError
from assertlint.state import build_report, filter_ignored, make_finding
from assertlint.utils import colorize, log


def _merged(cli_values: list[str] | None, config_values: list[str]) -> list[str]:
    cli_values = list(cli_values or [])
    return cli_values + [v for v in config_values if v not in cli_values]


def _print_findings(findings: list[dict]) -> None:
    for f in findings:
        location = f"{f['file']}:{f['line']}:{f['column']}"
        print(f"{location}: {colorize(f['detector'], 'yellow')}: {f['summary']}")


def _print_summary(result: ScanResult, n_findings: int, suppressed: int) -> None:
    parts = [f"{result.files_scanned} files checked"]
    if result.skipped:
        parts.append(f"{result.skipped} skipped")
    if suppressed:
        parts.append(f"{suppressed} suppressed")
    color = "red" if n_findings else "green"
    noun = "finding" if n_findings == 1 else "findings"
    log(f"  {', '.join(parts)}")
    print(colorize(f"{n_findings} {noun}", color), file=sys.stderr)


def cmd_scan(args: argparse.Namespace) -> None:
    """Scan a path and print findings. Exits 1 when anything is reported."""
    config = args.config
    try:
        checkers = enabled_checkers(
            _merged(args.enable, config["enable"]),
            _merged(args.disable, config["disable"]),
        )
    except UnknownCheckerError as exc:
        print(colorize(f"  {exc}", "red"), file=sys.stderr)
        sys.exit(2)

    path = args.path if args.path is not None else str(get_project_root())
    jobs = args.jobs if args.jobs is not None else config["jobs"]
    test_files_only = config["test_files_only"] and not args.all_files
    try:
        result = scan_path(path, checkers=checkers, test_files_only=test_files_only, jobs=jobs)
    except (FileNotFoundError, GoParserUnavailableError) as exc:
        print(colorize(f"  {exc}", "red"), file=sys.stderr)
        sys.exit(2)

    findings = [make_finding(filepath, diag) for filepath, diag in result.findings]
    findings, suppressed = filter_ignored(findings, config["ignore"])

    if args.json:
        report = build_report(
            findings,
            files_scanned=result.files_scanned,
            skipped=result.skipped,
            suppressed=suppressed,
        )
        print(json.dumps(report, indent=2))
    else:
        _print_findings(findings)
        _print_summary(result, len(findings), suppressed)

    if findings:
        sys.exit(1)


__all__ = ["cmd_scan"]
