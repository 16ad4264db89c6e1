"""Type predicates shared by checkers."""

from __future__ import annotations

from assertlint.engine.checkers.base import Pass
from assertlint.languages.go.syntax import Tok
from assertlint.languages.go.syntax import BinaryExpr, Node
from assertlint.languages.go.types import Basic, BasicInfo


def is_float(pass_: Pass, expr: Node) -> bool:
    """True if the static type of *expr* has a floating-point underlying type.

    Named types count by their underlying type, so ``type Celsius float64``
    is a float. Untyped float constants count too. Anything the checker could
    not resolve is not a float.
    """
    t = pass_.types_info.type_of(expr)
    if t is None:
        return False
    under = t.underlying()
    return isinstance(under, Basic) and bool(under.info & BasicInfo.IS_FLOAT)


def is_float_compare(pass_: Pass, expr: Node, op: Tok) -> bool:
    """True if *expr* is ``x <op> y`` with at least one float operand."""
    if not isinstance(expr, BinaryExpr) or expr.op is not op:
        return False
    return is_float(pass_, expr.x) or is_float(pass_, expr.y)
