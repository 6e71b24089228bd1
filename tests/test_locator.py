"""Tests for finding the call to the undeclared name."""

import pytest

from gostub.quickfix import CallSiteNotFound, locate_call_site
from gostub.semantics.ast_printer import expr_string


def located(parse, src, name):
    site = locate_call_site(parse(src), name)
    return [expr_string(a) for a in site.arguments]


class TestLocateCallSite:
    def test_statement_call(self, parse):
        site = locate_call_site(parse("""
            package main

            func main() {
                b(1, "x")
            }
        """), "b")
        assert site.callee_name == "b"
        assert site.call.fun.id == "b"
        assert [expr_string(a) for a in site.arguments] == ["1", '"x"']

    def test_first_in_source_order(self, parse):
        assert located(parse, """
            package main

            func one() { x(1) }
            func two() { x(2) }
        """, "x") == ["1"]

    def test_outer_call_before_nested(self, parse):
        assert located(parse, """
            package main

            func main() {
                x(x(1))
            }
        """, "x") == ["x(1)"]

    def test_nested_in_other_call(self, parse):
        assert located(parse, """
            package main

            import "fmt"

            func main() {
                fmt.Println(x(a, b))
            }
        """, "x") == ["a", "b"]

    def test_call_in_package_initializer(self, parse):
        assert located(parse, """
            package main

            var v = x(1.5)
        """, "x") == ["1.5"]

    @pytest.mark.parametrize("body", [
        "go x(1)",
        "defer x(1)",
        "if ok := x(1); ok {\n}",
        "for i := x(1); i < 3; i++ {\n}",
        "switch x(1) {\n}",
        "return x(1)",
        "v := []int{x(1)}",
        "f := func() { x(1) }",
        "ch <- x(1)",
        "switch v := x(1).(type) {\n}",
        "select {\ncase v := <-x(1):\n}",
        "select {\ndefault:\n    x(1)\n}",
        "done:\n    x(1)",
    ])
    def test_found_in_statement_forms(self, parse, body):
        indented = "\n".join("    " + line for line in body.splitlines())
        src = f"package main\n\nfunc main() {{\n{indented}\n}}\n"
        assert located(parse, src, "x") == ["1"]

    def test_selector_calls_do_not_match(self, parse):
        with pytest.raises(CallSiteNotFound):
            located(parse, """
                package main

                func main() {
                    pkg.x(1)
                    obj.x(2)
                }
            """, "x")

    def test_parenthesised_callee_does_not_match(self, parse):
        with pytest.raises(CallSiteNotFound):
            located(parse, """
                package main

                func main() {
                    (x)(1)
                }
            """, "x")

    def test_reference_without_call_does_not_match(self, parse):
        with pytest.raises(CallSiteNotFound) as info:
            located(parse, """
                package main

                func main() {
                    f := x
                    f(1)
                }
            """, "x")
        assert info.value.name == "x"

    def test_method_body_is_searched(self, parse):
        assert located(parse, """
            package main

            type T struct{}

            func (t T) Run() {
                x(t)
            }
        """, "x") == ["t"]
