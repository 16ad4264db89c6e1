"""Central command registry for CLI command handler resolution."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

CommandHandler = Callable[[Any], None]

_COMMAND_HANDLERS: dict[str, CommandHandler] | None = None


def _build_handlers() -> dict[str, CommandHandler]:
    """Import all command modules and build the handler dict on first access."""
    from assertlint.app.commands.checkers_cmd import cmd_checkers
    from assertlint.app.commands.config_cmd import cmd_config
    from assertlint.app.commands.ignore_cmd import cmd_ignore
    from assertlint.app.commands.scan import cmd_scan

    return {
        "scan": cmd_scan,
        "checkers": cmd_checkers,
        "config": cmd_config,
        "ignore": cmd_ignore,
    }


def get_command_handlers() -> dict[str, CommandHandler]:
    """Return cached command handler dict, building on first access."""
    global _COMMAND_HANDLERS
    if _COMMAND_HANDLERS is None:
        _COMMAND_HANDLERS = _build_handlers()
    return _COMMAND_HANDLERS


__all__ = ["CommandHandler", "get_command_handlers"]
