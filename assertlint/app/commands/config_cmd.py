"""config command: show, set and unset project configuration."""

from __future__ import annotations

import argparse
import json
import sys

from assertlint import config as config_mod
from assertlint.utils import colorize


def _save_or_exit(config: dict) -> None:
    try:
        config_mod.save_config(config)
    except OSError as exc:
        print(colorize(f"  could not save config: {exc}", "red"), file=sys.stderr)
        sys.exit(1)


def _config_show(config: dict) -> None:
    for key, schema in config_mod.CONFIG_SCHEMA.items():
        value = json.dumps(config.get(key, schema.default))
        print(f"  {colorize(key, 'bold')} = {value}")
        print(colorize(f"      {schema.description}", "dim"))


def _config_set(config: dict, key: str, raw: str) -> None:
    try:
        config_mod.set_config_value(config, key, raw)
    except (KeyError, ValueError) as exc:
        message = exc.args[0] if exc.args else str(exc)
        print(colorize(f"  {message}", "red"), file=sys.stderr)
        sys.exit(2)
    _save_or_exit(config)
    print(colorize(f"Set {key} = {json.dumps(config[key])}", "green"))


def _config_unset(config: dict, key: str) -> None:
    try:
        config_mod.unset_config_value(config, key)
    except KeyError as exc:
        print(colorize(f"  {exc.args[0]}", "red"), file=sys.stderr)
        sys.exit(2)
    _save_or_exit(config)
    print(colorize(f"Reset {key} to {json.dumps(config[key])}", "green"))


def cmd_config(args: argparse.Namespace) -> None:
    """Dispatch ``config show|set|unset``."""
    config = args.config
    action = getattr(args, "config_action", None)
    if action == "set":
        _config_set(config, args.config_key, args.config_value)
    elif action == "unset":
        _config_unset(config, args.config_key)
    else:
        _config_show(config)


__all__ = ["cmd_config"]
