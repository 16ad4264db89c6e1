"""CLI parser construction helpers."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version as get_version

USAGE_EXAMPLES = """
commands:
  scan       Check Go test files for testify misuse
  checkers   List registered checkers
  config     Project configuration
  ignore     Suppress findings matching a pattern

examples:
  assertlint scan
  assertlint scan ./pkg --json
  assertlint scan --all-files --jobs 4
  assertlint --exclude mocks scan
  assertlint ignore "float-compare::legacy/*"
"""


class _NoAbbrevArgumentParser(argparse.ArgumentParser):
    """Argparse parser variant that disables long-option abbreviation."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("allow_abbrev", False)
        super().__init__(*args, **kwargs)


def _cli_version_string() -> str:
    """Return the best available CLI version label."""
    try:
        return f"assertlint {get_version('assertlint')}"
    except PackageNotFoundError:
        return "assertlint (version unknown)"


def _add_scan_parser(sub, checker_names: list[str]) -> None:
    p_scan = sub.add_parser("scan", help="Check Go test files for testify misuse")
    p_scan.add_argument(
        "path", type=str, nargs="?", default=None,
        help="File or directory to scan (default: project root)",
    )
    p_scan.add_argument("--json", action="store_true", help="Print findings as JSON")
    p_scan.add_argument(
        "--enable", action="append", default=None, metavar="NAME",
        help=f"Enable a checker ({', '.join(checker_names)}; repeatable)",
    )
    p_scan.add_argument(
        "--disable", action="append", default=None, metavar="NAME",
        help="Disable a checker (repeatable)",
    )
    p_scan.add_argument(
        "--all-files", action="store_true",
        help="Scan every .go file, not only *_test.go",
    )
    p_scan.add_argument(
        "--jobs", type=int, default=None, metavar="N",
        help="Parallel file workers (default: config 'jobs', 0 = one per CPU)",
    )


def _add_checkers_parser(sub) -> None:
    sub.add_parser("checkers", help="List registered checkers")


def _add_config_parser(sub) -> None:
    p_config = sub.add_parser("config", help="Show/set/unset project configuration")
    config_sub = p_config.add_subparsers(dest="config_action")
    config_sub.add_parser("show", help="Show all config values")
    c_set = config_sub.add_parser("set", help="Set a config value")
    c_set.add_argument("config_key", type=str, help="Config key name")
    c_set.add_argument("config_value", type=str, help="Value to set")
    c_unset = config_sub.add_parser("unset", help="Reset a config key to default")
    c_unset.add_argument("config_key", type=str, help="Config key name")


def _add_ignore_parser(sub) -> None:
    p_ignore = sub.add_parser("ignore", help="Suppress findings matching a pattern")
    p_ignore.add_argument(
        "pattern", type=str,
        help="Finding id glob, e.g. float-compare::legacy/* (file paths match too)",
    )


def create_parser(*, checker_names: list[str]) -> argparse.ArgumentParser:
    """Build top-level CLI parser with all subcommands."""
    parser = _NoAbbrevArgumentParser(
        prog="assertlint",
        description="assertlint — static checks for Go testify assertions",
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Path pattern to exclude (component/prefix match; repeatable)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug details (skipped files, recovered syntax errors)",
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=_cli_version_string(),
    )
    sub = parser.add_subparsers(
        dest="command",
        required=True,
        parser_class=_NoAbbrevArgumentParser,
    )
    _add_scan_parser(sub, checker_names)
    _add_checkers_parser(sub)
    _add_config_parser(sub)
    _add_ignore_parser(sub)
    return parser


__all__ = ["USAGE_EXAMPLES", "create_parser"]
