"""Call checkers. Importing this package registers every built-in checker."""

from assertlint.engine.checkers import float_compare  # noqa: F401
from assertlint.engine.checkers.registry import (
    UnknownCheckerError,
    checker_names,
    enabled_checkers,
    get_checker,
    register_checker,
)

__all__ = [
    "UnknownCheckerError",
    "checker_names",
    "enabled_checkers",
    "get_checker",
    "register_checker",
]
