"""Go syntax trees from tree-sitter parses.

tree-sitter does the parsing and error recovery. This module maps its
concrete syntax tree onto the node classes in :mod:`syntax`, which the type
checker and the call checkers work with. Regions tree-sitter could not parse
are recorded as :class:`GoSyntaxError` entries on ``File.errors`` and left
out of the tree; everything around them is still built.
"""

from __future__ import annotations

from assertlint.languages.go.syntax import (
    ArrayType,
    AssignStmt,
    BadExpr,
    BadStmt,
    BasicLit,
    BinaryExpr,
    BlockStmt,
    BranchStmt,
    CallExpr,
    CaseClause,
    ChanType,
    CommClause,
    CompositeLit,
    DeclStmt,
    DeferStmt,
    Ellipsis,
    EmptyStmt,
    ExprStmt,
    Field,
    File,
    ForStmt,
    FuncDecl,
    FuncLit,
    FuncType,
    GenDecl,
    GoStmt,
    GoSyntaxError,
    Ident,
    IfStmt,
    ImportSpec,
    IncDecStmt,
    IndexExpr,
    InterfaceType,
    KeyValueExpr,
    LabeledStmt,
    MapType,
    Node,
    ParenExpr,
    Pos,
    RangeStmt,
    ReturnStmt,
    SelectorExpr,
    SelectStmt,
    SendStmt,
    SliceExpr,
    StarExpr,
    StructType,
    SwitchStmt,
    Tok,
    TypeAssertExpr,
    TypeSpec,
    TypeSwitchStmt,
    UnaryExpr,
    ValueSpec,
)
from assertlint.languages.go.treesitter import get_go_parser


_LITERALS = {
    "int_literal": Tok.INT,
    "float_literal": Tok.FLOAT,
    "imaginary_literal": Tok.IMAG,
    "rune_literal": Tok.CHAR,
    "interpreted_string_literal": Tok.STRING,
    "raw_string_literal": Tok.STRING,
}

_DECL_TOKS = {
    "import_declaration": Tok.IMPORT,
    "const_declaration": Tok.CONST,
    "type_declaration": Tok.TYPE,
    "var_declaration": Tok.VAR,
}

_SPEC_LISTS = frozenset({"import_spec_list", "var_spec_list"})

_SKIPPED = frozenset({"comment", "ERROR"})


# ── tree-sitter node helpers ──────────────────────────────


def _pos(node) -> Pos:
    row, col = node.start_point
    return Pos(row + 1, col + 1)


def _end(node) -> Pos:
    row, col = node.end_point
    return Pos(row + 1, col + 1)


def _text(node) -> str:
    return node.text.decode("utf-8", errors="replace")


def _named(node) -> list:
    return [c for c in node.named_children if c.type not in _SKIPPED]


def _has_token(node, token: str) -> bool:
    return any(not c.is_named and c.type == token for c in node.children)


def _op(node) -> Tok | None:
    op = node.child_by_field_name("operator")
    if op is None:
        return None
    try:
        return Tok(op.type)
    except ValueError:
        return None


def _collect_errors(root, filename: str) -> list[GoSyntaxError]:
    """Every ERROR region and missing token tree-sitter reported."""
    errors: list[GoSyntaxError] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_missing:
            errors.append(GoSyntaxError(f"missing {node.type!r}", filename, *_pos(node)))
        elif node.type == "ERROR":
            snippet = _text(node).split("\n", 1)[0][:20]
            errors.append(GoSyntaxError(f"unexpected {snippet!r}", filename, *_pos(node)))
        elif node.has_error:
            stack.extend(reversed(node.children))
    return errors


# ── tree building ─────────────────────────────────────────


class _Builder:
    def __init__(self, filename: str):
        self.filename = filename
        self.errors: list[GoSyntaxError] = []

    # ── file level ────────────────────────────────────────

    def file(self, root) -> File:
        package: Ident | None = None
        imports: list[ImportSpec] = []
        decls: list[Node] = []
        for child in _named(root):
            kind = child.type
            if kind == "package_clause":
                names = _named(child)
                if names:
                    package = self._x_identifier(names[0])
            elif kind in _DECL_TOKS:
                decl = self.gen_decl(child)
                if decl.tok is Tok.IMPORT:
                    imports.extend(decl.specs)
                decls.append(decl)
            elif kind in ("function_declaration", "method_declaration"):
                decls.append(self.func_decl(child))
            else:
                self.errors.append(
                    GoSyntaxError(
                        "non-declaration statement outside function body",
                        self.filename,
                        *_pos(child),
                    )
                )
        if package is None:
            raise GoSyntaxError("expected 'package' clause", self.filename, *_pos(root))
        errors = _collect_errors(root, self.filename) + self.errors
        errors.sort(key=lambda e: (e.line, e.col))
        return File(
            package.pos,
            filename=self.filename,
            package=package,
            imports=tuple(imports),
            decls=tuple(decls),
            errors=tuple(errors),
        )

    def func_decl(self, node) -> FuncDecl:
        recv = None
        receiver = node.child_by_field_name("receiver")
        if receiver is not None:
            fields = self.params(receiver)
            recv = fields[0] if fields else None
        name = node.child_by_field_name("name")
        body = node.child_by_field_name("body")
        return FuncDecl(
            _pos(node),
            recv=recv,
            name=self._ident_or_blank(name, node),
            type=self.func_type(node),
            body=self.block(body) if body is not None else None,
        )

    def gen_decl(self, node) -> GenDecl:
        tok = _DECL_TOKS[node.type]
        specs: list[Node] = []
        for spec in self._specs(node):
            if spec.type == "import_spec":
                specs.append(self.import_spec(spec))
            elif spec.type in ("type_spec", "type_alias"):
                specs.append(
                    TypeSpec(
                        _pos(spec),
                        name=self._ident_or_blank(spec.child_by_field_name("name"), spec),
                        is_alias=spec.type == "type_alias",
                        type=self.need(spec, "type"),
                    )
                )
            elif spec.type in ("var_spec", "const_spec"):
                specs.append(self.value_spec(spec, iota=len(specs)))
        return GenDecl(_pos(node), tok=tok, specs=tuple(specs))

    def _specs(self, node) -> list:
        out = []
        for child in _named(node):
            if child.type in _SPEC_LISTS:
                out.extend(self._specs(child))
            else:
                out.append(child)
        return out

    def import_spec(self, node) -> ImportSpec:
        name_node = node.child_by_field_name("name")
        name = None
        if name_node is not None:
            text = {"dot": ".", "blank_identifier": "_"}.get(name_node.type, _text(name_node))
            name = Ident(_pos(name_node), text)
        path = node.child_by_field_name("path")
        return ImportSpec(
            _pos(node),
            name=name,
            path=_text(path)[1:-1] if path is not None else "",
        )

    def value_spec(self, node, iota: int) -> ValueSpec:
        return ValueSpec(
            _pos(node),
            names=tuple(self._x_identifier(n) for n in node.children_by_field_name("name")),
            type=self.field(node, "type"),
            values=self.exprs(node.child_by_field_name("value")),
            iota=iota,
        )

    # ── functions and types ───────────────────────────────

    def func_type(self, node) -> FuncType:
        params = node.child_by_field_name("parameters")
        result = node.child_by_field_name("result")
        if result is None:
            results: tuple[Field, ...] = ()
        elif result.type == "parameter_list":
            results = self.params(result)
        else:
            results = (Field(_pos(result), names=(), type=self.x(result)),)
        return FuncType(
            _pos(node),
            params=self.params(params) if params is not None else (),
            results=results,
        )

    def params(self, node) -> tuple[Field, ...]:
        fields = []
        for param in _named(node):
            names = tuple(self._x_identifier(n) for n in param.children_by_field_name("name"))
            typ = self.need(param, "type")
            if param.type == "variadic_parameter_declaration":
                typ = Ellipsis(_pos(param), elt=typ)
            fields.append(Field(_pos(param), names=names, type=typ))
        return tuple(fields)

    def _struct_fields(self, node) -> tuple[Field, ...]:
        fields = []
        for lst in _named(node):
            for decl in _named(lst):
                if decl.type != "field_declaration":
                    continue
                names = tuple(
                    self._x_identifier(n) for n in decl.children_by_field_name("name")
                )
                typ = self.need(decl, "type")
                if not names and _has_token(decl, "*"):
                    typ = StarExpr(_pos(decl), typ)
                fields.append(Field(_pos(decl), names=names, type=typ))
        return tuple(fields)

    # ── statements ────────────────────────────────────────

    def block(self, node) -> BlockStmt:
        return BlockStmt(_pos(node), stmts=self.stmts(node))

    def stmts(self, node, skip=None) -> tuple[Node, ...]:
        out: list[Node] = []
        for child in _named(node):
            if skip is not None and child.start_byte == skip.start_byte:
                continue
            if child.type == "statement_list":
                out.extend(self.stmts(child))
            elif hasattr(self, f"_s_{child.type}"):
                out.append(self.stmt(child))
        return tuple(out)

    def stmt(self, node) -> Node:
        handler = getattr(self, f"_s_{node.type}", None)
        if handler is None:
            return BadStmt(_pos(node))
        return handler(node)

    def opt_stmt(self, node, name: str) -> Node | None:
        child = node.child_by_field_name(name)
        return self.stmt(child) if child is not None else None

    def _s_expression_statement(self, node):
        inner = _named(node)
        return ExprStmt(_pos(node), self.x(inner[0]) if inner else BadExpr(_pos(node)))

    def _s_send_statement(self, node):
        return SendStmt(_pos(node), chan=self.need(node, "channel"), value=self.need(node, "value"))

    def _s_inc_statement(self, node):
        return IncDecStmt(_pos(node), x=self._first(node), tok=Tok.INC)

    def _s_dec_statement(self, node):
        return IncDecStmt(_pos(node), x=self._first(node), tok=Tok.DEC)

    def _s_assignment_statement(self, node):
        return AssignStmt(
            _pos(node),
            lhs=self.exprs(node.child_by_field_name("left")),
            tok=_op(node) or Tok.ASSIGN,
            rhs=self.exprs(node.child_by_field_name("right")),
        )

    def _s_short_var_declaration(self, node):
        return AssignStmt(
            _pos(node),
            lhs=self.exprs(node.child_by_field_name("left")),
            tok=Tok.DEFINE,
            rhs=self.exprs(node.child_by_field_name("right")),
        )

    def _s_receive_statement(self, node):
        right = self.need(node, "right")
        left = node.child_by_field_name("left")
        if left is None:
            return ExprStmt(_pos(node), right)
        tok = Tok.DEFINE if _has_token(node, ":=") else Tok.ASSIGN
        return AssignStmt(_pos(node), lhs=self.exprs(left), tok=tok, rhs=(right,))

    def _decl_stmt(self, node):
        return DeclStmt(_pos(node), self.gen_decl(node))

    _s_var_declaration = _s_const_declaration = _s_type_declaration = _decl_stmt

    def _s_return_statement(self, node):
        values = _named(node)
        return ReturnStmt(_pos(node), results=self.exprs(values[0]) if values else ())

    def _s_go_statement(self, node):
        return GoStmt(_pos(node), self._first(node))

    def _s_defer_statement(self, node):
        return DeferStmt(_pos(node), self._first(node))

    def _s_block(self, node):
        return self.block(node)

    def _s_empty_statement(self, node):
        return EmptyStmt(_pos(node))

    def _s_labeled_statement(self, node):
        label = node.child_by_field_name("label")
        rest = [c for c in _named(node) if c.type != "label_name"]
        return LabeledStmt(
            _pos(node),
            label=self._ident_or_blank(label, node),
            stmt=self.stmt(rest[0]) if rest else EmptyStmt(_pos(node)),
        )

    def _branch(self, node):
        labels = _named(node)
        return BranchStmt(
            _pos(node),
            tok=Tok(node.type.removesuffix("_statement")),
            label=self._x_identifier(labels[0]) if labels else None,
        )

    _s_break_statement = _s_continue_statement = _branch
    _s_goto_statement = _s_fallthrough_statement = _branch

    def _s_if_statement(self, node):
        consequence = node.child_by_field_name("consequence")
        alternative = node.child_by_field_name("alternative")
        return IfStmt(
            _pos(node),
            init=self.opt_stmt(node, "initializer"),
            cond=self.need(node, "condition"),
            body=self.block(consequence) if consequence is not None else BlockStmt(_pos(node), ()),
            else_=self.stmt(alternative) if alternative is not None else None,
        )

    def _s_for_statement(self, node):
        body_node = node.child_by_field_name("body")
        body = self.block(body_node) if body_node is not None else BlockStmt(_pos(node), ())
        header = next((c for c in _named(node) if c.type != "block"), None)
        if header is None:
            return ForStmt(_pos(node), init=None, cond=None, post=None, body=body)
        if header.type == "range_clause":
            left = self.exprs(header.child_by_field_name("left"))
            tok = None
            if left:
                tok = Tok.DEFINE if _has_token(header, ":=") else Tok.ASSIGN
            return RangeStmt(
                _pos(node),
                key=left[0] if left else None,
                value=left[1] if len(left) > 1 else None,
                tok=tok,
                x=self.need(header, "right"),
                body=body,
            )
        if header.type == "for_clause":
            return ForStmt(
                _pos(node),
                init=self.opt_stmt(header, "initializer"),
                cond=self.field(header, "condition"),
                post=self.opt_stmt(header, "update"),
                body=body,
            )
        return ForStmt(_pos(node), init=None, cond=self.x(header), post=None, body=body)

    def _s_expression_switch_statement(self, node):
        clauses = []
        for case in _named(node):
            if case.type == "expression_case":
                values = self.exprs(case.child_by_field_name("value"))
                clauses.append(CaseClause(_pos(case), list=values, body=self.stmts(case)))
            elif case.type == "default_case":
                clauses.append(CaseClause(_pos(case), list=None, body=self.stmts(case)))
        return SwitchStmt(
            _pos(node),
            init=self.opt_stmt(node, "initializer"),
            tag=self.field(node, "value"),
            body=tuple(clauses),
        )

    def _s_type_switch_statement(self, node):
        value = node.child_by_field_name("value")
        subject = self.x(value) if value is not None else BadExpr(_pos(node))
        guard = TypeAssertExpr(subject.pos, x=subject, type=None)
        alias = node.child_by_field_name("alias")
        if alias is not None:
            assign: Node = AssignStmt(
                _pos(alias), lhs=self.exprs(alias), tok=Tok.DEFINE, rhs=(guard,)
            )
        else:
            assign = ExprStmt(guard.pos, guard)
        clauses = []
        for case in _named(node):
            if case.type == "type_case":
                types = tuple(self.x(t) for t in case.children_by_field_name("type"))
                clauses.append(CaseClause(_pos(case), list=types, body=self.stmts(case)))
            elif case.type == "default_case":
                clauses.append(CaseClause(_pos(case), list=None, body=self.stmts(case)))
        return TypeSwitchStmt(
            _pos(node),
            init=self.opt_stmt(node, "initializer"),
            assign=assign,
            body=tuple(clauses),
        )

    def _s_select_statement(self, node):
        clauses = []
        for case in _named(node):
            if case.type == "communication_case":
                comm = case.child_by_field_name("communication")
                clauses.append(
                    CommClause(
                        _pos(case),
                        comm=self.stmt(comm) if comm is not None else None,
                        body=self.stmts(case, skip=comm),
                    )
                )
            elif case.type == "default_case":
                clauses.append(CommClause(_pos(case), comm=None, body=self.stmts(case)))
        return SelectStmt(_pos(node), body=tuple(clauses))

    # ── expressions and type expressions ──────────────────

    def x(self, node) -> Node:
        kind = _LITERALS.get(node.type)
        if kind is not None:
            return BasicLit(_pos(node), kind=kind, value=_text(node))
        handler = getattr(self, f"_x_{node.type}", None)
        if handler is None:
            return BadExpr(_pos(node))
        return handler(node)

    def field(self, node, name: str) -> Node | None:
        child = node.child_by_field_name(name)
        return self.x(child) if child is not None else None

    def need(self, node, name: str) -> Node:
        child = node.child_by_field_name(name)
        return self.x(child) if child is not None else BadExpr(_pos(node))

    def exprs(self, node) -> tuple[Node, ...]:
        if node is None:
            return ()
        if node.type != "expression_list":
            return (self.x(node),)
        return tuple(self.x(c) for c in _named(node))

    def _first(self, node) -> Node:
        inner = _named(node)
        return self.x(inner[0]) if inner else BadExpr(_pos(node))

    def _ident_or_blank(self, node, parent) -> Ident:
        if node is None:
            return Ident(_pos(parent), "_")
        return self._x_identifier(node)

    def _x_identifier(self, node):
        return Ident(_pos(node), _text(node))

    _x_field_identifier = _x_package_identifier = _x_type_identifier = _x_identifier
    _x_label_name = _x_nil = _x_true = _x_false = _x_iota = _x_identifier

    def _x_blank_identifier(self, node):
        return Ident(_pos(node), "_")

    def _x_parenthesized_expression(self, node):
        return ParenExpr(_pos(node), self._first(node))

    _x_parenthesized_type = _x_parenthesized_expression

    def _x_selector_expression(self, node):
        sel = node.child_by_field_name("field")
        return SelectorExpr(
            _pos(node),
            x=self.need(node, "operand"),
            sel=self._ident_or_blank(sel, node),
        )

    def _x_qualified_type(self, node):
        pkg = node.child_by_field_name("package")
        name = node.child_by_field_name("name")
        return SelectorExpr(
            _pos(node),
            x=self._ident_or_blank(pkg, node),
            sel=self._ident_or_blank(name, node),
        )

    def _x_call_expression(self, node):
        args_node = node.child_by_field_name("arguments")
        args: tuple[Node, ...] = ()
        has_ellipsis = False
        if args_node is not None:
            args = tuple(self.x(a) for a in _named(args_node))
            has_ellipsis = _has_token(args_node, "...")
        return CallExpr(
            _pos(node),
            fun=self.need(node, "function"),
            args=args,
            has_ellipsis=has_ellipsis,
            end=_end(node),
        )

    def _x_type_conversion_expression(self, node):
        return CallExpr(
            _pos(node),
            fun=self.need(node, "type"),
            args=(self.need(node, "operand"),),
            has_ellipsis=False,
            end=_end(node),
        )

    def _x_index_expression(self, node):
        indices = tuple(self.x(i) for i in node.children_by_field_name("index"))
        return IndexExpr(_pos(node), x=self.need(node, "operand"), indices=indices)

    def _x_generic_type(self, node):
        args = node.child_by_field_name("type_arguments")
        indices = tuple(self.x(a) for a in _named(args)) if args is not None else ()
        return IndexExpr(_pos(node), x=self.need(node, "type"), indices=indices)

    def _x_type_instantiation_expression(self, node):
        base = node.child_by_field_name("type")
        indices = tuple(
            self.x(c) for c in _named(node) if base is None or c.start_byte != base.start_byte
        )
        return IndexExpr(_pos(node), x=self.need(node, "type"), indices=indices)

    def _x_type_elem(self, node):
        terms = _named(node)
        return self.x(terms[0]) if len(terms) == 1 else BadExpr(_pos(node))

    def _x_slice_expression(self, node):
        return SliceExpr(
            _pos(node),
            x=self.need(node, "operand"),
            low=self.field(node, "start"),
            high=self.field(node, "end"),
            max=self.field(node, "capacity"),
        )

    def _x_type_assertion_expression(self, node):
        return TypeAssertExpr(_pos(node), x=self.need(node, "operand"), type=self.need(node, "type"))

    def _x_unary_expression(self, node):
        op = _op(node)
        operand = self.need(node, "operand")
        if op is Tok.MUL:
            return StarExpr(_pos(node), operand)
        if op is None:
            return BadExpr(_pos(node))
        return UnaryExpr(_pos(node), op=op, x=operand)

    def _x_binary_expression(self, node):
        op = _op(node)
        if op is None:
            return BadExpr(_pos(node))
        return BinaryExpr(_pos(node), x=self.need(node, "left"), op=op, y=self.need(node, "right"))

    def _x_composite_literal(self, node):
        body = node.child_by_field_name("body")
        return CompositeLit(
            _pos(node),
            type=self.field(node, "type"),
            elts=self._elements(body) if body is not None else (),
        )

    def _x_literal_value(self, node):
        return CompositeLit(_pos(node), type=None, elts=self._elements(node))

    def _elements(self, node) -> tuple[Node, ...]:
        return tuple(self.x(e) for e in _named(node))

    def _x_literal_element(self, node):
        return self._first(node)

    def _x_keyed_element(self, node):
        key = node.child_by_field_name("key")
        value = node.child_by_field_name("value")
        if key is None or value is None:
            parts = _named(node)
            if len(parts) != 2:
                return BadExpr(_pos(node))
            key, value = parts
        return KeyValueExpr(_pos(node), key=self.x(key), value=self.x(value))

    def _x_func_literal(self, node):
        body = node.child_by_field_name("body")
        return FuncLit(
            _pos(node),
            type=self.func_type(node),
            body=self.block(body) if body is not None else BlockStmt(_pos(node), ()),
        )

    def _x_pointer_type(self, node):
        return StarExpr(_pos(node), self._first(node))

    def _x_slice_type(self, node):
        return ArrayType(_pos(node), len=None, elt=self.need(node, "element"))

    def _x_array_type(self, node):
        return ArrayType(_pos(node), len=self.need(node, "length"), elt=self.need(node, "element"))

    def _x_implicit_length_array_type(self, node):
        return ArrayType(
            _pos(node), len=Ellipsis(_pos(node), elt=None), elt=self.need(node, "element")
        )

    def _x_map_type(self, node):
        return MapType(_pos(node), key=self.need(node, "key"), value=self.need(node, "value"))

    def _x_channel_type(self, node):
        tokens = [c.type for c in node.children if not c.is_named]
        if tokens[:2] == ["<-", "chan"]:
            direction = "recv"
        elif tokens[:2] == ["chan", "<-"]:
            direction = "send"
        else:
            direction = "both"
        return ChanType(_pos(node), dir=direction, value=self.need(node, "value"))

    def _x_function_type(self, node):
        return self.func_type(node)

    def _x_struct_type(self, node):
        return StructType(_pos(node), fields=self._struct_fields(node))

    def _x_interface_type(self, node):
        return InterfaceType(_pos(node))


def parse_file(src: str, filename: str = "<input>") -> File:
    """Parse one Go source file.

    Raises GoSyntaxError when the package clause is missing; every other
    syntax error is recovered from and collected on ``File.errors``.
    """
    if src.startswith("\ufeff"):
        src = src[1:]
    tree = get_go_parser().parse(src.encode("utf-8", errors="surrogatepass"))
    return _Builder(filename).file(tree.root_node)


_EXPR_PREFIX = "package p\n\nvar _ = "


def parse_expr(src: str) -> Node:
    """Parse a single Go expression (test and tooling helper)."""
    file = parse_file(_EXPR_PREFIX + src + "\n", "<expr>")
    if file.errors:
        raise file.errors[0]
    decl = file.decls[-1] if file.decls else None
    values = decl.specs[0].values if isinstance(decl, GenDecl) and decl.specs else ()
    if len(file.decls) != 1 or len(values) != 1:
        raise GoSyntaxError(f"not a single expression: {src!r}", "<expr>", 1, 1)
    return values[0]


__all__ = ["parse_expr", "parse_file"]
