"""Tests for the Go grammar, the AST builder and parse error reporting."""

import re

import pytest
from lark import UnexpectedInput

from gostub.internals.parser import improve_parse_error, parse_to_ast
from gostub.semantics import ast as A
from gostub.semantics.ast_builder import GoSyntaxError
from gostub.semantics.ast_printer import dump_ast, expr_string

from conftest import go


def _body(program: A.Program, fn: str = "main"):
    for f in program.funcs:
        if f.name == fn:
            return f.body.statements
    raise AssertionError(f"no func {fn}")


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

class TestDeclarations:
    def test_package_and_imports(self, parse):
        program = parse("""
            package main

            import "fmt"
            import (
                "net/http"
                str "strings"
                _ "os"
            )
        """)
        assert program.package == "main"
        assert [(i.path, i.alias) for i in program.imports] == [
            ("fmt", None), ("net/http", None), ("strings", "str"), ("os", "_"),
        ]
        assert [i.local_name for i in program.imports] == ["fmt", "http", "str", "_"]

    def test_func_signature_grouping(self, parse):
        program = parse("""
            package main

            func f(a, b int, s ...string) (n int, err error) {
                return
            }
        """)
        fn = program.funcs[0]
        assert [(p.name, expr_string(p.ty), p.variadic) for p in fn.params] == [
            ("a", "int", False), ("b", "int", False), ("s", "string", True),
        ]
        assert [p.name for p in fn.results] == ["n", "err"]
        assert fn.variadic

    def test_unnamed_results(self, parse):
        program = parse("""
            package main

            func b() (string, error) {
                return "", nil
            }
        """)
        fn = program.funcs[0]
        assert [p.name for p in fn.results] == [None, None]
        assert [expr_string(p.ty) for p in fn.results] == ["string", "error"]

    def test_method_receiver(self, parse):
        program = parse("""
            package main

            type T struct{ n int }

            func (t *T) Get() int { return t.n }
        """)
        fn = program.funcs[0]
        assert fn.recv.name == "t"
        assert isinstance(fn.recv.ty, A.PointerTypeExpr)

    def test_bodyless_func(self, parse):
        program = parse("""
            package strings

            func ToUpper(s string) string
        """)
        assert program.funcs[0].body is None

    def test_const_group_repeats_expression(self, parse):
        program = parse("""
            package main

            const (
                A = iota
                B
                C
            )
        """)
        specs = program.decls[0].specs
        assert [s.iota for s in specs] == [0, 1, 2]
        assert [s.implicit for s in specs] == [False, True, True]
        assert all(expr_string(s.values[0]) == "iota" for s in specs)

    def test_type_declarations(self, parse):
        program = parse("""
            package main

            type (
                ID int
                Alias = string
                Point struct {
                    X, Y float64
                    Label string `json:"label"`
                }
                Shape interface {
                    Area() float64
                    fmt.Stringer
                }
            )
        """)
        specs = program.decls[0].specs
        assert [(s.name, s.is_alias) for s in specs] == [
            ("ID", False), ("Alias", True), ("Point", False), ("Shape", False),
        ]
        point = specs[2].ty
        assert [f.name for f in point.fields] == ["X", "Y", "Label"]
        assert point.fields[2].tag == 'json:"label"'
        shape = specs[3].ty
        assert [m.name for m in shape.methods] == ["Area", None]

    def test_mixed_named_and_unnamed_params(self):
        with pytest.raises(GoSyntaxError, match="mixed named and unnamed parameters"):
            parse_to_ast(go("""
                package main

                func f(a int, string) {}
            """))


# ---------------------------------------------------------------------------
# Statements and expressions
# ---------------------------------------------------------------------------

class TestStatements:
    def test_simple_statements(self, parse):
        stmts = _body(parse("""
            package main

            func main() {
                x := 1
                x = 2
                x += 3
                x++
                ch <- x
                go run()
                defer close(ch)
            }
        """))
        assert [type(s).__name__ for s in stmts] == [
            "ShortVarDecl", "Assign", "Assign", "IncDec", "SendStmt", "Go", "Defer",
        ]
        assert stmts[2].op == "+="

    def test_control_flow(self, parse):
        stmts = _body(parse("""
            package main

            func main() {
                if v, ok := m[k]; ok {
                    use(v)
                } else if k == "" {
                    return
                } else {
                    panic(k)
                }
                for i := 0; i < 10; i++ {
                    continue
                }
                for k, v := range m {
                    _ = k + v
                }
                for {
                    break
                }
                switch x := f(); x {
                case 1, 2:
                    fallthrough
                default:
                }
            }
        """))
        if_stmt, three, rng, forever, switch = stmts
        assert isinstance(if_stmt.init, A.ShortVarDecl)
        assert isinstance(if_stmt.orelse, A.If)
        assert isinstance(if_stmt.orelse.orelse, A.Block)
        assert isinstance(three.init, A.ShortVarDecl) and isinstance(three.post, A.IncDec)
        assert rng.define and rng.key.id == "k" and rng.value.id == "v"
        assert forever.cond is None
        assert [c.exprs is None for c in switch.clauses] == [False, True]

    def test_type_switch(self, parse):
        first, second = _body(parse("""
            package main

            func main() {
                switch v := x.(type) {
                case int, string:
                case *T, []byte:
                    use(v)
                case nil:
                default:
                }
                switch y := f(); y.(type) {
                }
            }
        """))
        assert isinstance(first, A.TypeSwitch)
        assert first.bind.id == "v" and expr_string(first.value) == "x"
        assert [
            [expr_string(e) for e in c.exprs] if c.exprs is not None else None
            for c in first.clauses
        ] == [["int", "string"], ["*T", "[]byte"], ["nil"], None]
        assert len(first.clauses[1].body) == 1
        assert isinstance(second, A.TypeSwitch)
        assert second.bind is None and isinstance(second.init, A.ShortVarDecl)
        assert second.clauses == []

    def test_select(self, parse):
        (stmt,) = _body(parse("""
            package main

            func main() {
                select {
                case v := <-in:
                    use(v)
                case v, ok := <-in:
                case out <- 1:
                case <-done:
                case x = <-in:
                default:
                }
            }
        """))
        assert isinstance(stmt, A.Select)
        assert [type(c.comm).__name__ if c.comm else None for c in stmt.clauses] == [
            "ShortVarDecl", "ShortVarDecl", "SendStmt", "ExprStmt", "Assign", None,
        ]
        assert len(stmt.clauses[0].body) == 1

    def test_labels_and_branches(self, parse):
        loop, jump, end = _body(parse("""
            package main

            func main() {
            outer:
                for i := 0; i < 3; i++ {
                    for {
                        continue outer
                    }
                    break
                }
                goto end
            end:
            }
        """))
        assert isinstance(loop, A.Labeled) and loop.label == "outer"
        inner, plain = loop.stmt.body.statements
        cont = inner.body.statements[0]
        assert (cont.keyword, cont.label) == ("continue", "outer")
        assert plain.keyword == "break" and plain.label is None
        assert (jump.keyword, jump.label) == ("goto", "end")
        assert end.label == "end" and end.stmt is None

    def test_composite_literals(self, parse):
        stmts = _body(parse("""
            package main

            func main() {
                a := []int{1, 2, 3}
                b := map[string][]int{"x": {1}}
                c := Point{X: 1, Y: 2}
                d := [...]string{"a", "b"}
                e := &Point{}
            }
        """))
        exprs = [s.values[0] for s in stmts]
        assert [expr_string(e) for e in exprs] == [
            "[]int{1, 2, 3}",
            'map[string][]int{"x": {1}}',
            "Point{X: 1, Y: 2}",
            '[...]string{"a", "b"}',
            "&Point{}",
        ]
        elided = exprs[1].elements[0].value
        assert isinstance(elided, A.CompositeLit) and elided.ty is None

    def test_postfix_expressions(self, parse):
        stmts = _body(parse("""
            package main

            func main() {
                use(a.b.c, xs[1:], xs[:n], v.(io.Reader), f(args...), []byte(s), (*T)(p))
            }
        """))
        call = stmts[0].expr
        assert [type(a).__name__ for a in call.args] == [
            "Selector", "SliceExpr", "SliceExpr", "TypeAssert", "Call", "Call", "Call",
        ]
        assert call.args[4].ellipsis

    def test_binary_precedence(self, parse):
        stmts = _body(parse("""
            package main

            func main() {
                x := a + b*c == d || !e
            }
        """))
        e = stmts[0].values[0]
        assert e.op == "||"
        assert e.left.op == "=="
        assert e.left.left.op == "+"
        assert e.left.left.right.op == "*"
        assert isinstance(e.right, A.UnaryOp) and e.right.op == "!"

    def test_func_literal(self, parse):
        stmts = _body(parse("""
            package main

            func main() {
                f := func(x int) int {
                    return x * 2
                }
                f(1)
            }
        """))
        lit = stmts[0].values[0]
        assert isinstance(lit, A.FuncLit)
        assert expr_string(lit) == "func(x int) int {…}"

    def test_literal_values(self, parse):
        stmts = _body(parse("""
            package main

            func main() {
                use(0x1F, 0o17, 1_000, 1.5e3, 2i, 'a', '\\n', "a\\tb", `raw\\n`)
            }
        """))
        args = stmts[0].expr.args
        assert [a.value for a in args] == [31, 15, 1000, 1500.0, 2j, 97, 10, "a\tb", "raw\\n"]

    def test_dump_ast_skips_locations(self, parse):
        text = dump_ast(parse("""
            package main

            func main() {}
        """))
        assert "FuncDecl" in text
        assert "Span(" not in text


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class TestParseErrors:
    def test_unexpected_token_message(self):
        src = "package main\n\nfunc main() {\n\tx := \n}\n"
        with pytest.raises(UnexpectedInput) as info:
            parse_to_ast(src)
        message = improve_parse_error(info.value, src)
        assert message == "5:1: syntax error: unexpected '}'"

    def test_invalid_character(self):
        src = "package main\n\nfunc main() {\n\tx := 1 @ 2\n}\n"
        with pytest.raises(UnexpectedInput) as info:
            parse_to_ast(src)
        assert "invalid character '@'" in improve_parse_error(info.value, src)

    def test_missing_package_clause(self):
        with pytest.raises(UnexpectedInput):
            parse_to_ast("func main() {}\n")

    @pytest.mark.parametrize("body, message", [
        ("x := v.(type)", "use of .(type) outside type switch"),
        ("switch x := 1 {\n}", "switch expression must be an expression"),
        ("select {\ncase x + 1:\n}", "select case must be receive, send or assign recv"),
    ])
    def test_statements_go_rejects(self, body, message):
        src = "package main\n\nfunc main() {\n" + body + "\n}\n"
        with pytest.raises(GoSyntaxError, match=re.escape(message)):
            parse_to_ast(src)
