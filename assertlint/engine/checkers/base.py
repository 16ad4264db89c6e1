"""Shared types for call checkers: the analysis pass, diagnostics, base class."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from assertlint.engine.checkers.call_meta import CallMeta
    from assertlint.languages.go.check import TypesInfo
    from assertlint.languages.go.syntax import File, Pos


@dataclass(frozen=True)
class Pass:
    """Per-file analysis context handed to every checker."""

    filename: str
    file: File | None
    types_info: TypesInfo


@dataclass(frozen=True)
class Diagnostic:
    rule: str
    message: str
    pos: Pos
    end: Pos
    suggested_fixes: tuple = ()
    call: str = ""
    selector: str = ""


class CallChecker:
    """Base class for checkers that inspect one testify call at a time."""

    name: ClassVar[str] = ""
    enabled_by_default: ClassVar[bool] = True

    def check(self, pass_: Pass, call: CallMeta) -> Diagnostic | None:
        raise NotImplementedError


def new_diagnostic(checker: str, call: CallMeta, message: str) -> Diagnostic:
    """Build a diagnostic anchored at the whole call expression."""
    return Diagnostic(
        rule=checker,
        message=message,
        pos=call.pos,
        end=call.end,
        call=call.fn.name,
        selector=call.selector_x_str,
    )
