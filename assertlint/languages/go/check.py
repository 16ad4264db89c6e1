"""Package-level type checker for Go.

Resolves identifiers against nested scopes and records the type of every
expression it can work out in a :class:`TypesInfo`. It is deliberately
forgiving: anything it cannot resolve (unknown imports, generics, cgo)
simply gets no type instead of raising, and checkers treat a missing type
as "not a float".
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field

from assertlint.languages.go import stdlib
from assertlint.languages.go.syntax import (
    COMPARISON_OPS,
    ArrayType,
    AssignStmt,
    BasicLit,
    BinaryExpr,
    BlockStmt,
    CallExpr,
    ChanType,
    CompositeLit,
    DeclStmt,
    Ellipsis,
    ExprStmt,
    Field,
    File,
    FuncDecl,
    FuncLit,
    FuncType,
    GenDecl,
    Ident,
    IndexExpr,
    InterfaceType,
    KeyValueExpr,
    MapType,
    Node,
    ParenExpr,
    SelectorExpr,
    StarExpr,
    StructType,
    Tok,
    TypeAssertExpr,
    TypeSpec,
    UnaryExpr,
    ValueSpec,
)
from assertlint.languages.go.types import (
    TYP,
    Array,
    Basic,
    BasicInfo,
    BasicKind,
    Chan,
    Interface,
    Map,
    Named,
    Pointer,
    Signature,
    Slice,
    Struct,
    Tuple,
    Type,
    Var,
    default_type,
    is_untyped,
    lookup_field_or_method,
)


class ObjKind(enum.StrEnum):
    PKG = "package"
    TYPE = "type"
    VAR = "var"
    CONST = "const"
    FUNC = "func"
    BUILTIN = "builtin"
    NIL = "nil"


@dataclass(eq=False)
class Object:
    name: str
    kind: ObjKind
    type: Type | None = None
    path: str = ""  # import path, for PKG objects


class Scope:
    def __init__(self, parent: Scope | None = None):
        self.parent = parent
        self.names: dict[str, Object] = {}

    def lookup(self, name: str) -> Object | None:
        scope: Scope | None = self
        while scope is not None:
            obj = scope.names.get(name)
            if obj is not None:
                return obj
            scope = scope.parent
        return None

    def insert(self, obj: Object) -> None:
        self.names[obj.name] = obj


_BUILTINS = (
    "append", "cap", "clear", "close", "complex", "copy", "delete", "imag",
    "len", "make", "max", "min", "new", "panic", "print", "println", "real",
    "recover",
)

_ERROR = Named("error", underlying_=Interface())


def _make_universe() -> Scope:
    scope = Scope()
    for kind, basic in TYP.items():
        if basic.info & BasicInfo.IS_UNTYPED or kind in (BasicKind.INVALID, BasicKind.UNSAFE_POINTER):
            continue
        scope.insert(Object(basic.name, ObjKind.TYPE, basic))
    scope.insert(Object("byte", ObjKind.TYPE, TYP[BasicKind.UINT8]))
    scope.insert(Object("rune", ObjKind.TYPE, TYP[BasicKind.INT32]))
    scope.insert(Object("error", ObjKind.TYPE, _ERROR))
    scope.insert(Object("any", ObjKind.TYPE, Interface()))
    scope.insert(Object("comparable", ObjKind.TYPE, Interface()))
    scope.insert(Object("true", ObjKind.CONST, TYP[BasicKind.UNTYPED_BOOL]))
    scope.insert(Object("false", ObjKind.CONST, TYP[BasicKind.UNTYPED_BOOL]))
    scope.insert(Object("iota", ObjKind.CONST, TYP[BasicKind.UNTYPED_INT]))
    scope.insert(Object("nil", ObjKind.NIL, TYP[BasicKind.UNTYPED_NIL]))
    for name in _BUILTINS:
        scope.insert(Object(name, ObjKind.BUILTIN))
    return scope


UNIVERSE = _make_universe()

_LITERAL_KINDS = {
    Tok.INT: BasicKind.UNTYPED_INT,
    Tok.FLOAT: BasicKind.UNTYPED_FLOAT,
    Tok.IMAG: BasicKind.UNTYPED_COMPLEX,
    Tok.CHAR: BasicKind.UNTYPED_RUNE,
    Tok.STRING: BasicKind.UNTYPED_STRING,
}

# Ordering for mixing untyped numeric constants: 1 + 2.0 is an untyped float.
_UNTYPED_RANK = {
    BasicKind.UNTYPED_INT: 1,
    BasicKind.UNTYPED_RUNE: 2,
    BasicKind.UNTYPED_FLOAT: 3,
    BasicKind.UNTYPED_COMPLEX: 4,
}

_COMPLEX_PARTS = {
    BasicKind.COMPLEX64: BasicKind.FLOAT32,
    BasicKind.COMPLEX128: BasicKind.FLOAT64,
}
_FLOAT_TO_COMPLEX = {v: k for k, v in _COMPLEX_PARTS.items()}

_VERSION_SUFFIX = re.compile(r"^v\d+$")
_GOPKG_SUFFIX = re.compile(r"\.v\d+$")


def default_package_name(path: str) -> str:
    """Guess the package name an import path binds when it has no alias."""
    parts = [p for p in path.split("/") if p]
    if not parts:
        return path
    name = parts[-1]
    if _VERSION_SUFFIX.match(name) and len(parts) > 1:
        name = parts[-2]
    name = _GOPKG_SUFFIX.sub("", name)
    if name.startswith("go-"):
        name = name[3:]
    return name.replace("-", "_").replace(".", "_")


@dataclass
class TypesInfo:
    """Type facts for one package, keyed by syntax node identity."""

    types: dict[Node, Type] = field(default_factory=dict)
    defs: dict[Ident, Object] = field(default_factory=dict)
    uses: dict[Ident, Object] = field(default_factory=dict)
    type_exprs: set[Node] = field(default_factory=set)

    def type_of(self, expr: Node) -> Type | None:
        """Return the type of *expr*, or None when it could not be determined."""
        t = self.types.get(expr)
        if t is not None:
            return t
        if isinstance(expr, Ident):
            obj = self.object_of(expr)
            if obj is not None and obj.kind in (ObjKind.VAR, ObjKind.CONST, ObjKind.FUNC):
                return obj.type
        return None

    def object_of(self, ident: Ident) -> Object | None:
        return self.defs.get(ident) or self.uses.get(ident)


def _results_type(sig: Signature) -> Type | None:
    results = sig.results.vars
    if not results:
        return None
    if len(results) == 1:
        return results[0]
    return sig.results


def _param_type(sig: Signature, index: int) -> Type | None:
    params = sig.params.vars
    if not params:
        return None
    if sig.variadic and index >= len(params) - 1:
        last = params[-1]
        return last.elem if isinstance(last, Slice) else last
    if index < len(params):
        return params[index]
    return None


def _underlying(t: Type | None) -> Type | None:
    return t.underlying() if t is not None else None


def _strip_parens(node: Node) -> Node:
    while isinstance(node, ParenExpr):
        node = node.x
    return node


class Checker:
    def __init__(self, files: list[File], info: TypesInfo | None = None):
        self.files = files
        self.info = info or TypesInfo()
        self.pkg_scope = Scope(UNIVERSE)
        self._results: list[Signature | None] = []

    # ── recording ─────────────────────────────────────────

    def _record(self, node: Node, t: Type | None) -> Type | None:
        if t is not None:
            self.info.types[node] = t
        return t

    def _declare(self, scope: Scope, ident: Ident, kind: ObjKind, t: Type | None) -> Object:
        obj = Object(ident.name, kind, t)
        if ident.name != "_":
            scope.insert(obj)
        self.info.defs[ident] = obj
        self._record(ident, t)
        return obj

    def _convert_untyped(self, node: Node, target: Type | None) -> None:
        """Give an untyped constant expression the type of its context."""
        current = self.info.types.get(node)
        if target is None or not is_untyped(current):
            return
        if current.kind is BasicKind.UNTYPED_NIL:
            return
        if isinstance(target.underlying(), Interface) or is_untyped(target):
            target = default_type(current)
        self.info.types[node] = target
        if isinstance(node, ParenExpr):
            self._convert_untyped(node.x, target)
        elif isinstance(node, UnaryExpr) and node.op in (Tok.ADD, Tok.SUB, Tok.XOR):
            self._convert_untyped(node.x, target)
        elif isinstance(node, BinaryExpr) and node.op not in COMPARISON_OPS and node.op not in (
            Tok.SHL,
            Tok.SHR,
            Tok.LAND,
            Tok.LOR,
        ):
            self._convert_untyped(node.x, target)
            self._convert_untyped(node.y, target)

    # ── entry point ───────────────────────────────────────

    def check(self) -> TypesInfo:
        file_scopes = [(file, self._file_scope(file)) for file in self.files]
        self._declare_types(
            [
                (spec, scope)
                for file, scope in file_scopes
                for decl in file.decls
                if isinstance(decl, GenDecl) and decl.tok is Tok.TYPE
                for spec in decl.specs
            ],
            self.pkg_scope,
        )
        funcs = [
            (decl, scope)
            for file, scope in file_scopes
            for decl in file.decls
            if isinstance(decl, FuncDecl)
        ]
        for fn, scope in funcs:
            self._declare_func(fn, scope)
        for file, scope in file_scopes:
            for decl in file.decls:
                if isinstance(decl, GenDecl) and decl.tok in (Tok.VAR, Tok.CONST):
                    self._gen_decl(decl, scope, self.pkg_scope)
        for fn, scope in funcs:
            self._func_body(fn, scope)
        return self.info

    def _file_scope(self, file: File) -> Scope:
        """A scope holding one file's imports, nested in the package scope."""
        scope = Scope(self.pkg_scope)
        for spec in file.imports:
            if spec.name is not None and spec.name.name in ("_", "."):
                continue
            name = spec.name.name if spec.name is not None else default_package_name(spec.path)
            obj = Object(name, ObjKind.PKG, None, spec.path)
            scope.insert(obj)
            if spec.name is not None:
                self.info.defs[spec.name] = obj
        return scope

    def _declare_types(self, specs: list[tuple[TypeSpec, Scope]], target: Scope) -> None:
        """Declare every spec into *target*, then resolve each in its own scope."""
        objs: list[tuple[TypeSpec, Scope, Object]] = []
        for spec, scope in specs:
            if spec.is_alias:
                obj = self._declare(target, spec.name, ObjKind.TYPE, None)
            else:
                obj = self._declare(target, spec.name, ObjKind.TYPE, Named(spec.name.name))
            objs.append((spec, scope, obj))
        for spec, scope, obj in objs:
            resolved = self.resolve_type(spec.type, scope)
            if spec.is_alias:
                obj.type = resolved
            elif isinstance(obj.type, Named):
                obj.type.underlying_ = resolved
            self._record(spec.name, obj.type)

    def _declare_func(self, fn: FuncDecl, scope: Scope) -> None:
        sig = self._signature(fn.type, scope)
        if fn.recv is None:
            if fn.name.name not in ("init", "_"):
                self._declare(self.pkg_scope, fn.name, ObjKind.FUNC, sig)
            return
        base = _strip_parens(fn.recv.type)
        if isinstance(base, StarExpr):
            base = base.x
        if isinstance(base, IndexExpr):
            base = base.x
        if not isinstance(base, Ident):
            return
        obj = self.pkg_scope.lookup(base.name)
        if obj is not None and isinstance(obj.type, Named):
            obj.type.methods[fn.name.name] = sig
            self.info.defs[fn.name] = Object(fn.name.name, ObjKind.FUNC, sig)
            self._record(fn.name, sig)

    def _func_body(self, fn: FuncDecl, file_scope: Scope) -> None:
        if fn.body is None:
            return
        scope = Scope(file_scope)
        if fn.recv is not None:
            recv_type = self.resolve_type(fn.recv.type, file_scope)
            for name in fn.recv.names:
                self._declare(scope, name, ObjKind.VAR, recv_type)
        sig = self._declare_params(fn.type, scope)
        self._body(fn.body, scope, sig)

    def _declare_params(self, ftype: FuncType, scope: Scope) -> Signature:
        sig = self._signature(ftype, scope)
        for fld in ftype.params + ftype.results:
            t = self.resolve_type(fld.type, scope)
            for name in fld.names:
                self._declare(scope, name, ObjKind.VAR, t)
        return sig

    def _body(self, body: BlockStmt, scope: Scope, sig: Signature) -> None:
        self._results.append(sig)
        try:
            for stmt in body.stmts:
                self.stmt(stmt, scope)
        finally:
            self._results.pop()

    # ── type expressions ──────────────────────────────────

    def _signature(self, ftype: FuncType, scope: Scope) -> Signature:
        params: list[Type | None] = []
        variadic = False
        for fld in ftype.params:
            t = self.resolve_type(fld.type, scope)
            if isinstance(fld.type, Ellipsis):
                variadic = True
            params.extend([t] * max(1, len(fld.names)))
        results: list[Type | None] = []
        for fld in ftype.results:
            t = self.resolve_type(fld.type, scope)
            results.extend([t] * max(1, len(fld.names)))
        sig = Signature(Tuple(tuple(params)), Tuple(tuple(results)), variadic)
        self.info.type_exprs.add(ftype)
        return self._record(ftype, sig)

    def resolve_type(self, node: Node | None, scope: Scope) -> Type | None:
        """Evaluate *node* as a type expression."""
        if node is None:
            return None
        t = self._resolve_type(node, scope)
        if t is not None:
            self.info.type_exprs.add(node)
            self._record(node, t)
        return t

    def _resolve_type(self, node: Node, scope: Scope) -> Type | None:
        if isinstance(node, Ident):
            obj = scope.lookup(node.name)
            if obj is None:
                return None
            self.info.uses[node] = obj
            return obj.type if obj.kind is ObjKind.TYPE else None
        if isinstance(node, SelectorExpr):
            return self._qualified_type(node, scope)
        if isinstance(node, ParenExpr):
            return self.resolve_type(node.x, scope)
        if isinstance(node, StarExpr):
            elem = self.resolve_type(node.x, scope)
            return Pointer(elem) if elem is not None else None
        if isinstance(node, Ellipsis):
            elem = self.resolve_type(node.elt, scope)
            return Slice(elem) if elem is not None else None
        if isinstance(node, ArrayType):
            elem = self.resolve_type(node.elt, scope)
            if elem is None:
                return None
            if node.len is None:
                return Slice(elem)
            length = None
            if isinstance(node.len, BasicLit) and node.len.kind is Tok.INT:
                length = int(node.len.value.replace("_", ""), 0)
            return Array(elem, length)
        if isinstance(node, MapType):
            key = self.resolve_type(node.key, scope)
            value = self.resolve_type(node.value, scope)
            if key is None or value is None:
                return None
            return Map(key, value)
        if isinstance(node, ChanType):
            elem = self.resolve_type(node.value, scope)
            return Chan(elem, node.dir) if elem is not None else None
        if isinstance(node, FuncType):
            return self._signature(node, scope)
        if isinstance(node, StructType):
            return self._struct(node, scope)
        if isinstance(node, InterfaceType):
            return Interface()
        return None

    def _qualified_type(self, node: SelectorExpr, scope: Scope) -> Type | None:
        member = self._package_member(node, scope)
        if member is None:
            return None
        kind, t = member
        return t if kind == "type" else None

    def _package_member(self, node: SelectorExpr, scope: Scope) -> stdlib.Member | None:
        if not isinstance(node.x, Ident):
            return None
        obj = scope.lookup(node.x.name)
        if obj is None or obj.kind is not ObjKind.PKG:
            return None
        self.info.uses[node.x] = obj
        return stdlib.lookup_member(obj.path, node.sel.name)

    def _struct(self, node: StructType, scope: Scope) -> Struct:
        fields: list[Var] = []
        for fld in node.fields:
            t = self.resolve_type(fld.type, scope)
            if fld.names:
                fields.extend(Var(name.name, t) for name in fld.names)
            else:
                fields.append(Var(_embedded_name(fld), t, embedded=True))
        return Struct(tuple(fields))

    # ── declarations ──────────────────────────────────────

    def _gen_decl(self, decl: GenDecl, scope: Scope, target: Scope | None = None) -> None:
        """Declare *decl* into *target* (default *scope*), resolving names in *scope*."""
        if target is None:
            target = scope
        if decl.tok is Tok.TYPE:
            self._declare_types([(spec, scope) for spec in decl.specs], target)
            return
        kind = ObjKind.CONST if decl.tok is Tok.CONST else ObjKind.VAR
        last_type: Node | None = None
        last_values: tuple[Node, ...] = ()
        for spec in decl.specs:
            if not isinstance(spec, ValueSpec):
                continue
            type_node, values = spec.type, spec.values
            if kind is ObjKind.CONST and not values:
                type_node, values = last_type, last_values
            else:
                last_type, last_values = type_node, values
            self._value_spec(spec, type_node, values, kind, scope, target)

    def _value_spec(
        self,
        spec: ValueSpec,
        type_node: Node | None,
        values: tuple[Node, ...],
        kind: ObjKind,
        scope: Scope,
        target: Scope,
    ) -> None:
        declared = self.resolve_type(type_node, scope)
        types: list[Type | None] = [declared] * len(spec.names)
        if len(values) == len(spec.names):
            for i, value in enumerate(values):
                vt = self.expr(value, scope, declared)
                if declared is not None:
                    self._convert_untyped(value, declared)
                elif kind is ObjKind.VAR:
                    self._convert_untyped(value, default_type(vt))
                    types[i] = default_type(vt)
                else:
                    types[i] = vt
        elif len(values) == 1:
            vt = self._multi_value(values[0], scope, len(spec.names))
            if declared is None:
                types = vt
        for name, t in zip(spec.names, types):
            self._declare(target, name, kind, t)

    def _multi_value(self, value: Node, scope: Scope, n: int) -> list[Type | None]:
        """Types for ``a, b := f()`` and the comma-ok forms."""
        t = self.expr(value, scope)
        inner = _strip_parens(value)
        if isinstance(t, Tuple):
            types = list(t.vars)
        elif n == 2 and isinstance(inner, (IndexExpr, TypeAssertExpr)) or (
            n == 2 and isinstance(inner, UnaryExpr) and inner.op is Tok.ARROW
        ):
            types = [t, TYP[BasicKind.BOOL]]
        else:
            types = []
        types = [default_type(x) for x in types]
        return (types + [None] * n)[:n]

    # ── statements ────────────────────────────────────────

    def stmt(self, node: Node, scope: Scope) -> None:
        handler = getattr(self, f"_stmt_{type(node).__name__}", None)
        if handler is not None:
            handler(node, scope)

    def _block(self, stmts, scope: Scope) -> None:
        inner = Scope(scope)
        for s in stmts:
            self.stmt(s, inner)

    def _stmt_BlockStmt(self, node, scope: Scope) -> None:
        self._block(node.stmts, scope)

    def _stmt_ExprStmt(self, node, scope: Scope) -> None:
        self.expr(node.x, scope)

    def _stmt_DeclStmt(self, node: DeclStmt, scope: Scope) -> None:
        self._gen_decl(node.decl, scope)

    def _stmt_LabeledStmt(self, node, scope: Scope) -> None:
        self.stmt(node.stmt, scope)

    def _stmt_SendStmt(self, node, scope: Scope) -> None:
        chan = self.expr(node.chan, scope)
        under = _underlying(chan)
        self.expr(node.value, scope)
        if isinstance(under, Chan):
            self._convert_untyped(node.value, under.elem)

    def _stmt_IncDecStmt(self, node, scope: Scope) -> None:
        self.expr(node.x, scope)

    def _stmt_GoStmt(self, node, scope: Scope) -> None:
        self.expr(node.call, scope)

    _stmt_DeferStmt = _stmt_GoStmt

    def _stmt_ReturnStmt(self, node, scope: Scope) -> None:
        sig = self._results[-1] if self._results else None
        results = sig.results.vars if sig is not None else ()
        for i, value in enumerate(node.results):
            hint = results[i] if i < len(results) else None
            self.expr(value, scope, hint)
            self._convert_untyped(value, hint)

    def _stmt_AssignStmt(self, node: AssignStmt, scope: Scope) -> None:
        if node.tok is Tok.DEFINE:
            self._define(node, scope)
            return
        lhs_types = [self.expr(x, scope) for x in node.lhs]
        if len(node.lhs) == len(node.rhs):
            for target, value in zip(lhs_types, node.rhs):
                self.expr(value, scope, target)
                if node.tok is Tok.ASSIGN:
                    self._convert_untyped(value, target)
        else:
            for value in node.rhs:
                self.expr(value, scope)

    def _define(self, node: AssignStmt, scope: Scope) -> None:
        if len(node.lhs) == len(node.rhs):
            types = []
            for value in node.rhs:
                vt = self.expr(value, scope)
                self._convert_untyped(value, default_type(vt))
                types.append(default_type(vt))
        elif len(node.rhs) == 1:
            types = self._multi_value(node.rhs[0], scope, len(node.lhs))
        else:
            types = [None] * len(node.lhs)
        for target, t in zip(node.lhs, types):
            if not isinstance(target, Ident):
                continue
            existing = scope.names.get(target.name)
            if existing is not None and existing.kind is ObjKind.VAR:
                self.info.uses[target] = existing
                self._record(target, existing.type)
            else:
                self._declare(scope, target, ObjKind.VAR, t)

    def _stmt_IfStmt(self, node, scope: Scope) -> None:
        inner = Scope(scope)
        if node.init is not None:
            self.stmt(node.init, inner)
        self.expr(node.cond, inner)
        self._block(node.body.stmts, inner)
        if node.else_ is not None:
            self.stmt(node.else_, inner)

    def _stmt_SwitchStmt(self, node, scope: Scope) -> None:
        inner = Scope(scope)
        if node.init is not None:
            self.stmt(node.init, inner)
        tag = self.expr(node.tag, inner) if node.tag is not None else None
        for clause in node.body:
            for value in clause.list or ():
                self.expr(value, inner, tag)
                if tag is not None:
                    self._convert_untyped(value, tag)
            self._block(clause.body, inner)

    def _stmt_TypeSwitchStmt(self, node, scope: Scope) -> None:
        inner = Scope(scope)
        if node.init is not None:
            self.stmt(node.init, inner)
        bound: Ident | None = None
        guard = node.assign
        if isinstance(guard, AssignStmt):
            if guard.lhs and isinstance(guard.lhs[0], Ident):
                bound = guard.lhs[0]
            guard = guard.rhs[0]
        elif isinstance(guard, ExprStmt):
            guard = guard.x
        subject = None
        if isinstance(guard, TypeAssertExpr):
            subject = self.expr(guard.x, inner)
        for clause in node.body:
            case_types = [self._case_type(value, inner) for value in clause.list or ()]
            clause_scope = Scope(inner)
            if bound is not None and bound.name != "_":
                t = case_types[0] if len(case_types) == 1 and case_types[0] is not None else subject
                clause_scope.insert(Object(bound.name, ObjKind.VAR, t))
            for s in clause.body:
                self.stmt(s, clause_scope)

    def _case_type(self, node: Node, scope: Scope) -> Type | None:
        if isinstance(node, Ident) and node.name == "nil":
            return None
        return self.resolve_type(node, scope)

    def _stmt_SelectStmt(self, node, scope: Scope) -> None:
        for clause in node.body:
            inner = Scope(scope)
            if clause.comm is not None:
                self.stmt(clause.comm, inner)
            for s in clause.body:
                self.stmt(s, inner)

    def _stmt_ForStmt(self, node, scope: Scope) -> None:
        inner = Scope(scope)
        if node.init is not None:
            self.stmt(node.init, inner)
        if node.cond is not None:
            self.expr(node.cond, inner)
        if node.post is not None:
            self.stmt(node.post, inner)
        self._block(node.body.stmts, inner)

    def _stmt_RangeStmt(self, node, scope: Scope) -> None:
        inner = Scope(scope)
        xt = self.expr(node.x, inner)
        key_t, value_t = _range_types(xt)
        for target, t in ((node.key, key_t), (node.value, value_t)):
            if target is None:
                continue
            if node.tok is Tok.DEFINE and isinstance(target, Ident):
                self._declare(inner, target, ObjKind.VAR, t)
            else:
                self.expr(target, inner)
        self._block(node.body.stmts, inner)

    # ── expressions ───────────────────────────────────────

    def expr(self, node: Node | None, scope: Scope, hint: Type | None = None) -> Type | None:
        """Type-check *node* and return its type (None when unknown)."""
        if node is None:
            return None
        handler = getattr(self, f"_expr_{type(node).__name__}", None)
        if handler is None:
            return self.resolve_type(node, scope)
        return self._record(node, handler(node, scope, hint))

    def _expr_Ident(self, node: Ident, scope: Scope, hint):
        if node.name == "_":
            return None
        obj = scope.lookup(node.name)
        if obj is None:
            return None
        self.info.uses[node] = obj
        if obj.kind is ObjKind.TYPE:
            if obj.type is not None:
                self.info.type_exprs.add(node)
            return obj.type
        if obj.kind in (ObjKind.PKG, ObjKind.BUILTIN):
            return None
        return obj.type

    def _expr_BasicLit(self, node: BasicLit, scope: Scope, hint):
        return TYP[_LITERAL_KINDS[node.kind]]

    def _expr_ParenExpr(self, node: ParenExpr, scope: Scope, hint):
        t = self.expr(node.x, scope, hint)
        if node.x in self.info.type_exprs:
            self.info.type_exprs.add(node)
        return t

    def _expr_SelectorExpr(self, node: SelectorExpr, scope: Scope, hint):
        if isinstance(node.x, Ident):
            obj = scope.lookup(node.x.name)
            if obj is not None and obj.kind is ObjKind.PKG:
                member = self._package_member(node, scope)
                if member is None:
                    return None
                kind, t = member
                if kind == "type":
                    self.info.type_exprs.add(node)
                return t
        xt = self.expr(node.x, scope)
        if node.x in self.info.type_exprs:
            # Method expression T.M; its signature has an extra receiver.
            return None
        return lookup_field_or_method(xt, node.sel.name)

    def _expr_CallExpr(self, node: CallExpr, scope: Scope, hint):
        fun = _strip_parens(node.fun)
        if isinstance(fun, Ident):
            obj = scope.lookup(fun.name)
            if obj is not None and obj.kind is ObjKind.BUILTIN:
                self.info.uses[fun] = obj
                return self._builtin(fun.name, node, scope)

        ft = self.expr(node.fun, scope)
        if node.fun in self.info.type_exprs:
            for arg in node.args:
                self.expr(arg, scope, ft)
                self._convert_untyped(arg, ft)
            return ft

        sig = ft if isinstance(ft, Signature) else _underlying(ft)
        if not isinstance(sig, Signature):
            for arg in node.args:
                self.expr(arg, scope)
            return None
        for i, arg in enumerate(node.args):
            param = _param_type(sig, i)
            if node.has_ellipsis and i == len(node.args) - 1:
                param = sig.params.vars[-1] if sig.params.vars else None
            self.expr(arg, scope, param)
            self._convert_untyped(arg, param)
        return _results_type(sig)

    def _builtin(self, name: str, node: CallExpr, scope: Scope) -> Type | None:
        args = node.args
        if name in ("new", "make"):
            t = self.resolve_type(args[0], scope) if args else None
            for arg in args[1:]:
                self.expr(arg, scope)
            if name == "new":
                return Pointer(t) if t is not None else None
            return t
        arg_types = [self.expr(arg, scope) for arg in args]
        if name in ("len", "cap", "copy"):
            return TYP[BasicKind.INT]
        if name == "append":
            target = arg_types[0] if arg_types else None
            under = _underlying(target)
            if isinstance(under, Slice):
                for arg in args[1:]:
                    if not node.has_ellipsis:
                        self._convert_untyped(arg, under.elem)
            return target
        if name in ("real", "imag"):
            return _complex_part(arg_types[0] if arg_types else None)
        if name == "complex":
            return _complex_of(arg_types)
        if name in ("min", "max"):
            result = arg_types[0] if arg_types else None
            for t in arg_types[1:]:
                result = _binary_result(result, t)
            if result is not None and not is_untyped(result):
                for arg in args:
                    self._convert_untyped(arg, result)
            return result
        if name == "recover":
            return Interface()
        return None

    def _expr_IndexExpr(self, node: IndexExpr, scope: Scope, hint):
        xt = self.expr(node.x, scope)
        under = _underlying(xt)
        if isinstance(under, Map):
            for index in node.indices:
                self.expr(index, scope, under.key)
                self._convert_untyped(index, under.key)
            return under.elem
        for index in node.indices:
            self.expr(index, scope)
        if isinstance(under, Pointer):
            under = _underlying(under.elem)
        if isinstance(under, (Slice, Array)):
            return under.elem
        if isinstance(under, Basic) and under.info & BasicInfo.IS_STRING:
            return TYP[BasicKind.UINT8]
        return None

    def _expr_SliceExpr(self, node, scope: Scope, hint):
        xt = self.expr(node.x, scope)
        for part in (node.low, node.high, node.max):
            if part is not None:
                self.expr(part, scope)
        under = _underlying(xt)
        if isinstance(under, Pointer):
            under = _underlying(under.elem)
        if isinstance(under, Array):
            return Slice(under.elem)
        if isinstance(under, Basic) and under.info & BasicInfo.IS_STRING:
            return default_type(xt)
        if isinstance(under, Slice):
            return xt
        return None

    def _expr_TypeAssertExpr(self, node: TypeAssertExpr, scope: Scope, hint):
        self.expr(node.x, scope)
        if node.type is None:
            return None
        return self.resolve_type(node.type, scope)

    def _expr_StarExpr(self, node: StarExpr, scope: Scope, hint):
        t = self.expr(node.x, scope)
        if node.x in self.info.type_exprs:
            self.info.type_exprs.add(node)
            return Pointer(t) if t is not None else None
        under = _underlying(t)
        return under.elem if isinstance(under, Pointer) else None

    def _expr_UnaryExpr(self, node: UnaryExpr, scope: Scope, hint):
        if node.op is Tok.AND:
            inner_hint = hint.elem if isinstance(hint, Pointer) else None
            t = self.expr(node.x, scope, inner_hint)
            return Pointer(t) if t is not None else None
        t = self.expr(node.x, scope, hint)
        if node.op is Tok.ARROW:
            under = _underlying(t)
            return under.elem if isinstance(under, Chan) else None
        if node.op is Tok.NOT:
            return t if t is not None else TYP[BasicKind.UNTYPED_BOOL]
        return t

    def _expr_BinaryExpr(self, node: BinaryExpr, scope: Scope, hint):
        xt = self.expr(node.x, scope)
        yt = self.expr(node.y, scope)
        op = node.op
        if op in (Tok.SHL, Tok.SHR):
            return xt
        if xt is not None and yt is not None:
            if is_untyped(xt) and not is_untyped(yt):
                self._convert_untyped(node.x, yt)
            elif is_untyped(yt) and not is_untyped(xt):
                self._convert_untyped(node.y, xt)
        if op in COMPARISON_OPS:
            return TYP[BasicKind.UNTYPED_BOOL]
        if op in (Tok.LAND, Tok.LOR):
            if xt is not None and not is_untyped(xt):
                return xt
            if yt is not None and not is_untyped(yt):
                return yt
            return TYP[BasicKind.UNTYPED_BOOL]
        return _binary_result(xt, yt)

    def _expr_KeyValueExpr(self, node: KeyValueExpr, scope: Scope, hint):
        self.expr(node.key, scope)
        self.expr(node.value, scope)
        return None

    def _expr_CompositeLit(self, node: CompositeLit, scope: Scope, hint):
        t = self.resolve_type(node.type, scope) if node.type is not None else hint
        if node.type is None and isinstance(t, Pointer):
            t = t.elem
        under = _underlying(t)
        for index, elt in enumerate(node.elts):
            self._element(elt, index, under, scope)
        return t

    def _element(self, elt: Node, index: int, under: Type | None, scope: Scope) -> None:
        key, value = (elt.key, elt.value) if isinstance(elt, KeyValueExpr) else (None, elt)
        value_hint: Type | None = None
        if isinstance(under, Struct):
            if isinstance(key, Ident):
                value_hint = next((f.type for f in under.fields if f.name == key.name), None)
                key = None
            elif key is None and index < len(under.fields):
                value_hint = under.fields[index].type
        elif isinstance(under, (Slice, Array)):
            value_hint = under.elem
        elif isinstance(under, Map):
            value_hint = under.elem
            if key is not None:
                self.expr(key, scope, under.key)
                self._convert_untyped(key, under.key)
                key = None
        if key is not None and not isinstance(under, Struct):
            self.expr(key, scope)
        self.expr(value, scope, value_hint)
        self._convert_untyped(value, value_hint)

    def _expr_FuncLit(self, node: FuncLit, scope: Scope, hint):
        inner = Scope(scope)
        sig = self._declare_params(node.type, inner)
        self._body(node.body, inner, sig)
        return sig


def _embedded_name(fld: Field) -> str:
    t = fld.type
    if isinstance(t, StarExpr):
        t = t.x
    if isinstance(t, IndexExpr):
        t = t.x
    if isinstance(t, SelectorExpr):
        return t.sel.name
    if isinstance(t, Ident):
        return t.name
    return "_"


def _binary_result(xt: Type | None, yt: Type | None) -> Type | None:
    if xt is None or yt is None:
        return None
    x_untyped, y_untyped = is_untyped(xt), is_untyped(yt)
    if not x_untyped:
        return xt
    if not y_untyped:
        return yt
    if _UNTYPED_RANK.get(yt.kind, 0) > _UNTYPED_RANK.get(xt.kind, 0):
        return yt
    return xt


def _range_types(xt: Type | None) -> tuple[Type | None, Type | None]:
    under = _underlying(xt)
    if isinstance(under, Pointer):
        under = _underlying(under.elem)
    if isinstance(under, (Slice, Array)):
        return TYP[BasicKind.INT], under.elem
    if isinstance(under, Map):
        return under.key, under.elem
    if isinstance(under, Chan):
        return under.elem, None
    if isinstance(under, Basic):
        if under.info & BasicInfo.IS_STRING:
            return TYP[BasicKind.INT], TYP[BasicKind.INT32]
        if under.info & BasicInfo.IS_INTEGER:
            return default_type(xt), None
    return None, None


def _complex_part(t: Type | None) -> Type | None:
    under = _underlying(t)
    if not isinstance(under, Basic):
        return None
    if under.kind in _COMPLEX_PARTS:
        return TYP[_COMPLEX_PARTS[under.kind]]
    if is_untyped(under) and under.info & BasicInfo.IS_NUMERIC:
        return TYP[BasicKind.UNTYPED_FLOAT]
    return None


def _complex_of(arg_types: list[Type | None]) -> Type | None:
    for t in arg_types:
        under = _underlying(t)
        if isinstance(under, Basic) and under.kind in _FLOAT_TO_COMPLEX:
            return TYP[_FLOAT_TO_COMPLEX[under.kind]]
    if arg_types and all(is_untyped(t) for t in arg_types):
        return TYP[BasicKind.UNTYPED_COMPLEX]
    return None


def check_package(files: list[File]) -> TypesInfo:
    """Type-check the files of one Go package together.

    Package-level declarations from every file share one scope; imports stay
    visible only inside the file that declares them.
    """
    return Checker(files).check()


def check_file(file: File) -> TypesInfo:
    """Type-check a single parsed file as a package of its own."""
    return check_package([file])
