"""ignore command: add finding patterns to the config ignore list."""

from __future__ import annotations

import argparse
import sys

from assertlint import config as config_mod
from assertlint.utils import colorize


def cmd_ignore(args: argparse.Namespace) -> None:
    """Suppress findings whose id matches a pattern in future scans."""
    config = args.config
    config_mod.add_ignore_pattern(config, args.pattern)
    try:
        config_mod.save_config(config)
    except OSError as exc:
        print(colorize(f"  could not save config: {exc}", "red"), file=sys.stderr)
        sys.exit(1)

    print(colorize(f"Added ignore pattern: {args.pattern}", "green"))


__all__ = ["cmd_ignore"]
