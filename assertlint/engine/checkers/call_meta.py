"""Recognize testify assertion calls and describe them for checkers.

Four call shapes are recognized::

    assert.Equal(t, a, b)            // package function, t is dropped
    a := assert.New(t); a.Equal(a, b)
    s.Equal(a, b)                    // s embeds suite.Suite
    s.Require().Equal(a, b)

Everything else, including methods a suite type declares itself, is not a
testify call and yields no descriptor.
"""

from __future__ import annotations

from dataclasses import dataclass

from assertlint.engine.checkers.base import Pass
from assertlint.languages.go import stdlib
from assertlint.languages.go.check import ObjKind
from assertlint.languages.go.syntax import CallExpr, Ident, Node, Pos, SelectorExpr, expr_string
from assertlint.languages.go.types import Named, Type, deref, embeds


@dataclass(frozen=True)
class FnMeta:
    name: str
    name_f_trimmed: str
    is_fmt: bool


@dataclass(frozen=True)
class CallMeta:
    pos: Pos
    end: Pos
    is_pkg: bool
    is_assert: bool
    selector: SelectorExpr
    selector_x_str: str
    fn: FnMeta
    args: tuple[Node, ...]
    args_raw: tuple[Node, ...]


def fn_meta(name: str) -> FnMeta:
    """Split a testify function name into its base name and format flag."""
    is_fmt = name.endswith("f")
    return FnMeta(name=name, name_f_trimmed=name[:-1] if is_fmt else name, is_fmt=is_fmt)


def _is_check_name(name: str) -> bool:
    return name in stdlib.ASSERT_ASSERTIONS.methods


def _object_family(t: Type | None, name: str) -> bool | None:
    """Which family a method call on a value of type *t* belongs to.

    Returns True for assert, False for require, None when the method is not
    a testify assertion.
    """
    base = deref(t)
    if base is stdlib.ASSERT_ASSERTIONS:
        return True
    if base is stdlib.REQUIRE_ASSERTIONS:
        return False
    if not isinstance(base, Named) or name in base.methods:
        return None
    if embeds(base, stdlib.SUITE):
        return None if name in stdlib.SUITE.methods else True
    if embeds(base, stdlib.ASSERT_ASSERTIONS):
        return True
    if embeds(base, stdlib.REQUIRE_ASSERTIONS):
        return False
    return None


def new_call_meta(pass_: Pass, call: CallExpr) -> CallMeta | None:
    """Describe *call* if it is a testify assertion, else return None."""
    se = call.fun
    if not isinstance(se, SelectorExpr):
        return None
    name = se.sel.name
    if not _is_check_name(name):
        return None

    info = pass_.types_info
    is_pkg = False
    if isinstance(se.x, Ident):
        obj = info.object_of(se.x)
        if obj is not None and obj.kind is ObjKind.PKG:
            if not (stdlib.is_assert_pkg(obj.path) or stdlib.is_require_pkg(obj.path)):
                return None
            if not call.args:
                return None
            is_pkg = True
            is_assert = stdlib.is_assert_pkg(obj.path)

    if not is_pkg:
        family = _object_family(info.type_of(se.x), name)
        if family is None:
            return None
        is_assert = family

    return CallMeta(
        pos=call.pos,
        end=call.end,
        is_pkg=is_pkg,
        is_assert=is_assert,
        selector=se,
        selector_x_str=expr_string(se.x),
        fn=fn_meta(name),
        args=call.args[1:] if is_pkg else call.args,
        args_raw=call.args,
    )
