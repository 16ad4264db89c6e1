"""Tests for the Go parser."""

from __future__ import annotations

import textwrap

import pytest

from assertlint.languages.go.parser import parse_expr, parse_file
from assertlint.languages.go.syntax import (
    AssignStmt,
    BasicLit,
    BinaryExpr,
    CallExpr,
    CompositeLit,
    FuncDecl,
    FuncLit,
    GenDecl,
    GoSyntaxError,
    IfStmt,
    RangeStmt,
    SelectorExpr,
    StructType,
    SwitchStmt,
    Tok,
    TypeSpec,
    TypeSwitchStmt,
    UnaryExpr,
    expr_string,
    walk,
)


def _parse(src: str):
    return parse_file(textwrap.dedent(src), "x_test.go")


def _body(src: str):
    """Parse statements wrapped in a function and return them."""
    file = _parse("package p\n\nfunc f() {\n" + textwrap.dedent(src) + "}\n")
    fn = next(d for d in file.decls if isinstance(d, FuncDecl))
    return fn.body.stmts


class TestExpressions:
    def test_precedence(self):
        expr = parse_expr("a + b*c == d")
        assert isinstance(expr, BinaryExpr) and expr.op is Tok.EQL
        assert expr_string(expr.x) == "a + b * c"
        assert expr.x.y.op is Tok.MUL

    def test_logical_operators_bind_loosest(self):
        expr = parse_expr("x == 1.5 && y != 2")
        assert expr.op is Tok.LAND
        assert expr.x.op is Tok.EQL and expr.y.op is Tok.NEQ

    def test_unary_and_call_chain(self):
        expr = parse_expr("-s.Require().Len(xs)")
        assert isinstance(expr, UnaryExpr) and expr.op is Tok.SUB
        call = expr.x
        assert isinstance(call, CallExpr)
        assert isinstance(call.fun, SelectorExpr) and call.fun.sel.name == "Len"
        assert expr_string(call.fun.x) == "s.Require()"

    def test_variadic_call(self):
        call = parse_expr("f(a, b...)")
        assert call.has_ellipsis
        assert len(call.args) == 2

    def test_composite_and_func_literals(self):
        expr = parse_expr("[]float64{1, 2.5}")
        assert isinstance(expr, CompositeLit) and len(expr.elts) == 2
        lit = parse_expr("func(x int) bool { return x > 0 }")
        assert isinstance(lit, FuncLit)

    def test_index_slice_and_type_assertion(self):
        assert expr_string(parse_expr("m[k]")) == "m[k]"
        assert expr_string(parse_expr("s[1:n]")) == "s[1:n]"
        assert expr_string(parse_expr("v.(float64)")) == "v.(float64)"

    @pytest.mark.parametrize(
        ("src", "kind"),
        [
            ("42", Tok.INT),
            ("0x1F", Tok.INT),
            ("1.5", Tok.FLOAT),
            ("1e-9", Tok.FLOAT),
            ("0x1p-2", Tok.FLOAT),
            ("2i", Tok.IMAG),
            ("'x'", Tok.CHAR),
            ('"s"', Tok.STRING),
            ("`raw`", Tok.STRING),
        ],
    )
    def test_literal_kinds(self, src, kind):
        lit = parse_expr(src)
        assert isinstance(lit, BasicLit)
        assert lit.kind is kind
        assert lit.value == src

    def test_call_end_position(self):
        file = _parse(
            """\
            package p

            func f() {
            	assert.Equal(t, 1.5, 2.5)
            }
            """
        )
        call = next(n for n in walk(file) if isinstance(n, CallExpr))
        assert (call.pos.line, call.pos.col) == (4, 2)
        assert (call.end.line, call.end.col) == (4, 27)

    def test_trailing_tokens_rejected(self):
        with pytest.raises(GoSyntaxError):
            parse_expr("a b")


class TestDeclarations:
    def test_package_and_imports(self):
        file = _parse(
            """\
            package calc_test

            import (
            	"testing"
            	tassert "github.com/stretchr/testify/assert"
            	_ "embed"
            )
            """
        )
        assert file.package.name == "calc_test"
        assert [i.path for i in file.imports] == [
            "testing",
            "github.com/stretchr/testify/assert",
            "embed",
        ]
        assert file.imports[1].name.name == "tassert"
        assert file.errors == ()

    def test_types_vars_and_methods(self):
        file = _parse(
            """\
            package p

            type (
            	Celsius float64
            	Alias = int
            	Point struct {
            		X, Y float64
            		*Base
            	}
            )

            var a, b = 1, 2.5

            const (
            	A = iota
            	B
            )

            func (p *Point) Norm() float64 { return p.X }

            func Map[T any](xs []T) []T { return xs }
            """
        )
        assert file.errors == ()
        specs = file.decls[0].specs
        assert all(isinstance(s, TypeSpec) for s in specs)
        assert specs[1].is_alias
        point = specs[2].type
        assert isinstance(point, StructType)
        assert [len(f.names) for f in point.fields] == [2, 0]
        consts = next(d for d in file.decls if isinstance(d, GenDecl) and d.tok is Tok.CONST)
        assert [s.iota for s in consts.specs] == [0, 1]
        norm = next(d for d in file.decls if isinstance(d, FuncDecl) and d.name.name == "Norm")
        assert norm.recv is not None

    def test_missing_package_clause_raises(self):
        with pytest.raises(GoSyntaxError):
            parse_file("func f() {}\n")

    def test_byte_order_mark_ignored(self):
        file = parse_file("\ufeffpackage p\n\nvar x = 1\n")
        assert file.package.name == "p"
        assert file.package.pos == (1, 1)
        assert file.errors == ()


class TestStatements:
    def test_if_with_init_and_else(self):
        (stmt,) = _body(
            """\
            if v, err := f(); err != nil {
            } else if v > 1 {
            } else {
            }
            """
        )
        assert isinstance(stmt, IfStmt)
        assert isinstance(stmt.init, AssignStmt)
        assert isinstance(stmt.else_, IfStmt)
        assert stmt.else_.else_ is not None

    def test_composite_literal_in_condition_needs_parens(self):
        (stmt,) = _body(
            """\
            if p == (Point{1, 2}) {
            }
            """
        )
        assert isinstance(stmt.cond, BinaryExpr)

    def test_range_and_for(self):
        stmts = _body(
            """\
            for i, v := range xs {
            }
            for i := 0; i < 3; i++ {
            }
            for range ch {
            }
            """
        )
        assert isinstance(stmts[0], RangeStmt)
        assert stmts[0].tok is Tok.DEFINE
        assert expr_string(stmts[0].value) == "v"
        assert stmts[1].cond is not None and stmts[1].post is not None
        assert isinstance(stmts[2], RangeStmt) and stmts[2].key is None

    def test_switch_and_type_switch(self):
        stmts = _body(
            """\
            switch x := f(); x {
            case 1, 2:
            default:
            }
            switch v := i.(type) {
            case float64:
            	_ = v
            }
            """
        )
        assert isinstance(stmts[0], SwitchStmt)
        assert len(stmts[0].body[0].list) == 2
        assert stmts[0].body[1].list is None
        assert isinstance(stmts[1], TypeSwitchStmt)

    def test_select_clauses(self):
        (stmt,) = _body(
            """\
            select {
            case v := <-ch:
            	_ = v
            case out <- 1.5:
            default:
            }
            """
        )
        assert [c.comm is None for c in stmt.body] == [False, False, True]
        assert isinstance(stmt.body[0].comm, AssignStmt)
        assert len(stmt.body[0].body) == 1

    def test_calls_found_in_closures(self):
        stmts = _body(
            """\
            t.Run("x", func(t *testing.T) {
            	assert.Equal(t, 1.5, got)
            })
            """
        )
        calls = [expr_string(n.fun) for n in walk(stmts[0]) if isinstance(n, CallExpr)]
        assert calls == ["t.Run", "assert.Equal"]


class TestRecovery:
    def test_bad_statement_does_not_hide_the_rest(self):
        file = _parse(
            """\
            package p

            func f() {
            	x := )
            	assert.Equal(t, 1.5, y)
            }

            func g() {
            	assert.True(t, a == 1.5)
            }
            """
        )
        assert file.errors
        assert file.errors[0].line == 4
        assert file.errors[0].filename == "x_test.go"
        calls = [expr_string(n.fun) for n in walk(file) if isinstance(n, CallExpr)]
        assert "assert.True" in calls

    def test_bad_declaration_skips_to_next_one(self):
        file = _parse(
            """\
            package p

            func (
            	broken

            func ok() {
            	assert.Equal(t, 1.5, y)
            }
            """
        )
        assert file.errors
        assert all(e.line >= 3 for e in file.errors)
