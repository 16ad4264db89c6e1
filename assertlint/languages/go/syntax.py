"""Go syntax tree nodes.

Nodes are frozen dataclasses compared by identity, so they can key the type
tables built by the checker. Every node carries the position of its first
token.
"""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Iterator
from dataclasses import dataclass
from typing import NamedTuple


class Tok(enum.StrEnum):
    """Literal kinds, operators and the keywords the tree records."""

    INT = "INT"
    FLOAT = "FLOAT"
    IMAG = "IMAG"
    CHAR = "CHAR"
    STRING = "STRING"

    ADD = "+"
    SUB = "-"
    MUL = "*"
    QUO = "/"
    REM = "%"
    AND = "&"
    OR = "|"
    XOR = "^"
    SHL = "<<"
    SHR = ">>"
    AND_NOT = "&^"

    ADD_ASSIGN = "+="
    SUB_ASSIGN = "-="
    MUL_ASSIGN = "*="
    QUO_ASSIGN = "/="
    REM_ASSIGN = "%="
    AND_ASSIGN = "&="
    OR_ASSIGN = "|="
    XOR_ASSIGN = "^="
    SHL_ASSIGN = "<<="
    SHR_ASSIGN = ">>="
    AND_NOT_ASSIGN = "&^="

    LAND = "&&"
    LOR = "||"
    ARROW = "<-"
    INC = "++"
    DEC = "--"

    EQL = "=="
    LSS = "<"
    GTR = ">"
    ASSIGN = "="
    NOT = "!"
    TILDE = "~"

    NEQ = "!="
    LEQ = "<="
    GEQ = ">="
    DEFINE = ":="

    BREAK = "break"
    CONTINUE = "continue"
    FALLTHROUGH = "fallthrough"
    GOTO = "goto"

    CONST = "const"
    IMPORT = "import"
    TYPE = "type"
    VAR = "var"


COMPARISON_OPS = frozenset({Tok.EQL, Tok.NEQ, Tok.LSS, Tok.LEQ, Tok.GTR, Tok.GEQ})


class GoSyntaxError(ValueError):
    """Raised (or recorded on a File) for Go source that does not parse."""

    def __init__(self, msg: str, filename: str = "<input>", line: int = 0, col: int = 0):
        super().__init__(f"{filename}:{line}:{col}: {msg}")
        self.msg = msg
        self.filename = filename
        self.line = line
        self.col = col


class Pos(NamedTuple):
    line: int
    col: int

    def __str__(self) -> str:
        return f"{self.line}:{self.col}"


_node = dataclass(frozen=True, eq=False, slots=True)


@_node
class Node:
    pos: Pos


# ── Expressions ───────────────────────────────────────────


@_node
class BadExpr(Node):
    pass


@_node
class Ident(Node):
    name: str


@_node
class Ellipsis(Node):
    elt: Node | None


@_node
class BasicLit(Node):
    kind: Tok
    value: str


@_node
class FuncLit(Node):
    type: FuncType
    body: BlockStmt


@_node
class CompositeLit(Node):
    type: Node | None
    elts: tuple[Node, ...]


@_node
class ParenExpr(Node):
    x: Node


@_node
class SelectorExpr(Node):
    x: Node
    sel: Ident


@_node
class IndexExpr(Node):
    x: Node
    indices: tuple[Node, ...]


@_node
class SliceExpr(Node):
    x: Node
    low: Node | None
    high: Node | None
    max: Node | None


@_node
class TypeAssertExpr(Node):
    x: Node
    type: Node | None  # None for x.(type)


@_node
class CallExpr(Node):
    fun: Node
    args: tuple[Node, ...]
    has_ellipsis: bool
    end: Pos


@_node
class StarExpr(Node):
    x: Node


@_node
class UnaryExpr(Node):
    op: Tok
    x: Node


@_node
class BinaryExpr(Node):
    x: Node
    op: Tok
    y: Node


@_node
class KeyValueExpr(Node):
    key: Node
    value: Node


# ── Types ─────────────────────────────────────────────────


@_node
class Field(Node):
    names: tuple[Ident, ...]  # empty for embedded fields / unnamed params
    type: Node


@_node
class ArrayType(Node):
    len: Node | None  # None for slices, Ellipsis for [...]T
    elt: Node


@_node
class StructType(Node):
    fields: tuple[Field, ...]


@_node
class FuncType(Node):
    params: tuple[Field, ...]
    results: tuple[Field, ...]


@_node
class InterfaceType(Node):
    pass


@_node
class MapType(Node):
    key: Node
    value: Node


@_node
class ChanType(Node):
    dir: str  # "both", "send" or "recv"
    value: Node


# ── Statements ────────────────────────────────────────────


@_node
class BadStmt(Node):
    pass


@_node
class DeclStmt(Node):
    decl: GenDecl


@_node
class EmptyStmt(Node):
    pass


@_node
class LabeledStmt(Node):
    label: Ident
    stmt: Node


@_node
class ExprStmt(Node):
    x: Node


@_node
class SendStmt(Node):
    chan: Node
    value: Node


@_node
class IncDecStmt(Node):
    x: Node
    tok: Tok


@_node
class AssignStmt(Node):
    lhs: tuple[Node, ...]
    tok: Tok
    rhs: tuple[Node, ...]


@_node
class GoStmt(Node):
    call: Node


@_node
class DeferStmt(Node):
    call: Node


@_node
class ReturnStmt(Node):
    results: tuple[Node, ...]


@_node
class BranchStmt(Node):
    tok: Tok
    label: Ident | None


@_node
class BlockStmt(Node):
    stmts: tuple[Node, ...]


@_node
class IfStmt(Node):
    init: Node | None
    cond: Node
    body: BlockStmt
    else_: Node | None


@_node
class CaseClause(Node):
    list: tuple[Node, ...] | None  # None for default
    body: tuple[Node, ...]


@_node
class SwitchStmt(Node):
    init: Node | None
    tag: Node | None
    body: tuple[CaseClause, ...]


@_node
class TypeSwitchStmt(Node):
    init: Node | None
    assign: Node  # x.(type) or v := x.(type)
    body: tuple[CaseClause, ...]


@_node
class CommClause(Node):
    comm: Node | None  # None for default
    body: tuple[Node, ...]


@_node
class SelectStmt(Node):
    body: tuple[CommClause, ...]


@_node
class ForStmt(Node):
    init: Node | None
    cond: Node | None
    post: Node | None
    body: BlockStmt


@_node
class RangeStmt(Node):
    key: Node | None
    value: Node | None
    tok: Tok | None  # DEFINE, ASSIGN or None for `for range x`
    x: Node
    body: BlockStmt


# ── Declarations ──────────────────────────────────────────


@_node
class ImportSpec(Node):
    name: Ident | None
    path: str


@_node
class ValueSpec(Node):
    names: tuple[Ident, ...]
    type: Node | None
    values: tuple[Node, ...]
    iota: int


@_node
class TypeSpec(Node):
    name: Ident
    is_alias: bool
    type: Node


@_node
class GenDecl(Node):
    tok: Tok  # IMPORT, CONST, TYPE or VAR
    specs: tuple[Node, ...]


@_node
class FuncDecl(Node):
    recv: Field | None
    name: Ident
    type: FuncType
    body: BlockStmt | None


@_node
class File(Node):
    filename: str
    package: Ident
    imports: tuple[ImportSpec, ...]
    decls: tuple[Node, ...]
    errors: tuple[GoSyntaxError, ...]


def iter_child_nodes(node: Node) -> Iterator[Node]:
    """Yield direct children of *node* in field (source) order."""
    for f in dataclasses.fields(node):
        value = getattr(node, f.name)
        if isinstance(value, Node):
            yield value
        elif isinstance(value, tuple):
            for item in value:
                if isinstance(item, Node):
                    yield item


def walk(node: Node) -> Iterator[Node]:
    """Depth-first pre-order traversal; calls come out in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_child_nodes(current))))


def expr_string(node: Node | None) -> str:
    """Render an expression the way gofmt would print it on one line."""
    if node is None:
        return ""
    if isinstance(node, Ident):
        return node.name
    if isinstance(node, BasicLit):
        return node.value
    if isinstance(node, SelectorExpr):
        return f"{expr_string(node.x)}.{node.sel.name}"
    if isinstance(node, CallExpr):
        args = ", ".join(expr_string(a) for a in node.args)
        dots = "..." if node.has_ellipsis else ""
        return f"{expr_string(node.fun)}({args}{dots})"
    if isinstance(node, StarExpr):
        return f"*{expr_string(node.x)}"
    if isinstance(node, UnaryExpr):
        return f"{node.op.value}{expr_string(node.x)}"
    if isinstance(node, BinaryExpr):
        return f"{expr_string(node.x)} {node.op.value} {expr_string(node.y)}"
    if isinstance(node, ParenExpr):
        return f"({expr_string(node.x)})"
    if isinstance(node, IndexExpr):
        return f"{expr_string(node.x)}[{', '.join(expr_string(i) for i in node.indices)}]"
    if isinstance(node, SliceExpr):
        parts = [expr_string(node.low), expr_string(node.high)]
        if node.max is not None:
            parts.append(expr_string(node.max))
        return f"{expr_string(node.x)}[{':'.join(parts)}]"
    if isinstance(node, TypeAssertExpr):
        inner = expr_string(node.type) if node.type is not None else "type"
        return f"{expr_string(node.x)}.({inner})"
    if isinstance(node, KeyValueExpr):
        return f"{expr_string(node.key)}: {expr_string(node.value)}"
    if isinstance(node, CompositeLit):
        return f"{expr_string(node.type)}{{…}}"
    if isinstance(node, FuncLit):
        return "func literal"
    if isinstance(node, ArrayType):
        if node.len is None:
            return f"[]{expr_string(node.elt)}"
        return f"[{expr_string(node.len)}]{expr_string(node.elt)}"
    if isinstance(node, Ellipsis):
        return f"...{expr_string(node.elt)}"
    if isinstance(node, MapType):
        return f"map[{expr_string(node.key)}]{expr_string(node.value)}"
    if isinstance(node, ChanType):
        prefix = {"send": "chan<- ", "recv": "<-chan "}.get(node.dir, "chan ")
        return f"{prefix}{expr_string(node.value)}"
    if isinstance(node, FuncType):
        return "func(…)"
    if isinstance(node, StructType):
        return "struct{…}"
    if isinstance(node, InterfaceType):
        return "interface{…}"
    return "BadExpr"
