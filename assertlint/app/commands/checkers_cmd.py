"""checkers command: list registered checkers."""

from __future__ import annotations

import argparse

from assertlint.engine.checkers import checker_names, get_checker
from assertlint.utils import print_table


def cmd_checkers(args: argparse.Namespace) -> None:
    """Print every registered checker and whether it runs by default."""
    config = args.config
    rows = []
    for name in checker_names():
        checker = get_checker(name)
        enabled = (checker.enabled_by_default or name in config["enable"]) and (
            name not in config["disable"]
        )
        doc = (type(checker).__doc__ or "").strip().splitlines()
        rows.append([name, "yes" if enabled else "no", doc[0] if doc else ""])
    print_table(["Checker", "Enabled", "Description"], rows)


__all__ = ["cmd_checkers"]
