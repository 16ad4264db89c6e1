"""tree-sitter setup for the Go grammar.

Parsers come from ``tree-sitter-language-pack``. A tree-sitter parser must
not be shared between threads, so each scan worker builds its own on first
use.
"""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)

GRAMMAR = "go"

# Raised by tree-sitter or the language pack when a grammar cannot be loaded.
PARSE_INIT_ERRORS: tuple[type[Exception], ...] = (
    ImportError, LookupError, ValueError, RuntimeError, OSError,
)


class GoParserUnavailableError(RuntimeError):
    """The tree-sitter Go grammar could not be loaded."""


_local = threading.local()


def _get_parser(grammar: str):
    from tree_sitter_language_pack import get_parser

    return get_parser(grammar)


def get_go_parser():
    """Return this thread's tree-sitter parser for Go."""
    parser = getattr(_local, "parser", None)
    if parser is None:
        try:
            parser = _get_parser(GRAMMAR)
        except PARSE_INIT_ERRORS as exc:
            logger.debug("tree-sitter init failed: %s", exc)
            raise GoParserUnavailableError(
                f"tree-sitter {GRAMMAR} grammar unavailable: {exc}"
            ) from exc
        _local.parser = parser
    return parser


__all__ = ["GRAMMAR", "GoParserUnavailableError", "PARSE_INIT_ERRORS", "get_go_parser"]
