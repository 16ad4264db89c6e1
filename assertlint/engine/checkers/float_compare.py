"""float-compare: exact equality assertions on floating-point values."""

from __future__ import annotations

import enum

from assertlint.engine.checkers.base import CallChecker, Diagnostic, Pass, new_diagnostic
from assertlint.engine.checkers.call_meta import CallMeta
from assertlint.engine.checkers.registry import register_checker
from assertlint.engine.checkers.typeinfo import is_float, is_float_compare
from assertlint.languages.go.syntax import Tok


class AssertionKind(enum.StrEnum):
    EQUAL = "equal"
    TRUE = "true"
    FALSE = "false"
    OTHER = "other"


_KIND_BY_NAME = {
    "Equal": AssertionKind.EQUAL,
    "EqualValues": AssertionKind.EQUAL,
    "Exactly": AssertionKind.EQUAL,
    "True": AssertionKind.TRUE,
    "False": AssertionKind.FALSE,
}


def assertion_kind(name_f_trimmed: str) -> AssertionKind:
    return _KIND_BY_NAME.get(name_f_trimmed, AssertionKind.OTHER)


@register_checker
class FloatCompare(CallChecker):
    """Flags exact comparisons of floating-point values.

    Rounding makes ``==`` on floats unreliable, so these should use a
    tolerance instead::

        assert.Equal(t, 42.42, result)       // use assert.InEpsilon (or InDelta)
        assert.EqualValues(t, 42.42, result)
        assert.Exactly(t, 42.42, result)
        assert.True(t, result == 42.42)
        assert.False(t, result != 42.42)

    Only the first two arguments of Equal, EqualValues and Exactly are
    looked at; the rest are the optional failure message.
    """

    name = "float-compare"

    def check(self, pass_: Pass, call: CallMeta) -> Diagnostic | None:
        if not self._invalid(pass_, call):
            return None
        suffix = "f" if call.fn.is_fmt else ""
        message = (
            f"use {call.selector_x_str}.InEpsilon{suffix} (or InDelta{suffix})"
        )
        return new_diagnostic(self.name, call, message)

    @staticmethod
    def _invalid(pass_: Pass, call: CallMeta) -> bool:
        kind = assertion_kind(call.fn.name_f_trimmed)
        args = call.args
        if kind is AssertionKind.EQUAL:
            return len(args) > 1 and (is_float(pass_, args[0]) or is_float(pass_, args[1]))
        if kind is AssertionKind.TRUE:
            return len(args) > 0 and is_float_compare(pass_, args[0], Tok.EQL)
        if kind is AssertionKind.FALSE:
            return len(args) > 0 and is_float_compare(pass_, args[0], Tok.NEQ)
        return False
