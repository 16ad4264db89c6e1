"""CLI entry point: parse args, load shared context, dispatch command handlers."""

from __future__ import annotations

import logging
import sys

from assertlint.app.cli_support.parser import create_parser as _create_parser
from assertlint.app.commands.registry import get_command_handlers
from assertlint.config import load_config
from assertlint.core.runtime_state import runtime_scope
from assertlint.engine.checkers import checker_names
from assertlint.file_discovery import set_exclusions
from assertlint.utils import colorize

logger = logging.getLogger(__name__)


def create_parser():
    """Return the top-level argparse parser."""
    return _create_parser(checker_names=checker_names())


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _apply_persisted_exclusions(args, config: dict):
    """Merge CLI --exclude with persisted config.exclude and apply globally."""
    cli_exclusions = getattr(args, "exclude", None) or []
    persisted = config.get("exclude", [])
    combined = list(cli_exclusions) + [e for e in persisted if e not in cli_exclusions]
    if not combined:
        return
    set_exclusions(combined)
    if cli_exclusions:
        print(
            colorize(f"  Excluding: {', '.join(combined)}", "dim"),
            file=sys.stderr,
        )
        return
    print(
        colorize(f"  Excluding (from config): {', '.join(combined)}", "dim"),
        file=sys.stderr,
    )


def _load_shared_runtime(args) -> None:
    """Load config and attach it to parsed args."""
    config = load_config()
    _apply_persisted_exclusions(args, config)
    args.config = config


def _resolve_handler(command: str):
    return get_command_handlers()[command]


def main(argv: list[str] | None = None) -> None:
    # Ensure Unicode output works on Windows terminals (cp1252 etc.)
    for stream in (sys.stdout, sys.stderr):
        if hasattr(stream, "reconfigure"):
            try:
                stream.reconfigure(encoding="utf-8", errors="replace")
            except (AttributeError, OSError):
                logger.debug(
                    "Skipping stream reconfigure for %s (not supported)",
                    getattr(stream, "name", "<stream>"),
                )

    parser = create_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        with runtime_scope():
            _load_shared_runtime(args)

            handler = _resolve_handler(args.command)
            handler(args)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(1)


if __name__ == "__main__":
    main()
