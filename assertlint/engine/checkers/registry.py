"""Checker registry: registration and name resolution."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

T = TypeVar("T")

_registry: dict[str, type] = {}


class UnknownCheckerError(KeyError):
    """Raised when a checker name is not registered."""

    def __init__(self, name: str):
        available = ", ".join(sorted(_registry)) or "(none)"
        super().__init__(name)
        self.name = name
        self.message = f"Unknown checker: {name!r}. Available: {available}"

    def __str__(self) -> str:
        return self.message


def register_checker(cls: T) -> T:
    """Decorator to register a checker class under its ``name``."""
    name = getattr(cls, "name", "")
    if not name:
        raise ValueError(f"Checker {cls!r} has no name")
    if name in _registry and _registry[name] is not cls:
        raise ValueError(f"Checker {name!r} is already registered")
    _registry[name] = cls
    return cls


def checker_names() -> list[str]:
    """Return registered checker names, sorted."""
    return sorted(_registry)


def get_checker(name: str):
    """Instantiate a registered checker by name."""
    if name not in _registry:
        raise UnknownCheckerError(name)
    return _registry[name]()


def enabled_checkers(
    enable: Iterable[str] = (), disable: Iterable[str] = ()
) -> list:
    """Resolve the active checker set.

    Starts from the checkers enabled by default, adds ``enable``, then
    removes ``disable``. Every name must be registered.
    """
    enable, disable = list(enable), list(disable)
    for name in (*enable, *disable):
        if name not in _registry:
            raise UnknownCheckerError(name)
    selected = [
        name
        for name in checker_names()
        if (getattr(_registry[name], "enabled_by_default", True) or name in enable)
        and name not in disable
    ]
    return [get_checker(name) for name in selected]
