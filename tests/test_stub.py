"""End-to-end tests for stub generation."""

import pytest

from gostub.quickfix import (
    CallSiteNotFound, NamingPolicy, ParseFailure, StubError, StubGenerator,
    UnresolvableArgumentType, generate_function_stub,
)

from conftest import go


@pytest.fixture
def stub(importer):
    def _stub(name: str, src: str, policy: NamingPolicy = NamingPolicy.IDENTIFIER) -> str:
        return generate_function_stub(name, go(src), policy=policy, importer=importer)
    return _stub


POINTER_VALUE = """
    package main

    type T struct{}

    func a() {
        var value T
        pointer := &value
        f(pointer, value)
    }
"""


# ---------------------------------------------------------------------------
# Reference scenarios
# ---------------------------------------------------------------------------

class TestScenarios:
    def test_single_identifier_argument(self, stub):
        assert stub("b", """
            package main

            func a(s string) { b(s) }
        """) == "func b(s string) {}"

    def test_repeated_names_are_numbered(self, stub):
        assert stub("d", """
            package main

            func a(s string, i int) { d(s, i, s) }
        """) == "func d(s1 string, i int, s2 string) {}"

    def test_pointer_and_value_reuse_identifiers(self, stub):
        assert stub("f", POINTER_VALUE) == "func f(pointer *T, value T) {}"

    def test_pointer_and_value_named_from_type(self, stub):
        assert stub("f", POINTER_VALUE, NamingPolicy.TYPE) == "func f(t1 *T, t2 T) {}"

    def test_multi_value_argument_expands_in_place(self, stub):
        assert stub("u", """
            package main

            func b() (string, error) {
                return "", nil
            }

            func a() {
                u(b())
            }
        """) == "func u(s string, err error) {}"

    def test_missing_call_site(self, stub):
        with pytest.raises(CallSiteNotFound) as info:
            stub("zzz", """
                package main

                func a(s string) { b(s) }
            """)
        assert info.value.code == "GS3001"
        assert info.value.stage == "locate"
        assert str(info.value) == "no call to 'zzz' found"


# ---------------------------------------------------------------------------
# Argument typing
# ---------------------------------------------------------------------------

class TestArgumentTypes:
    def test_no_arguments(self, stub):
        assert stub("run", """
            package main

            func main() {
                run()
            }
        """) == "func run() {}"

    def test_untyped_constants_take_default_types(self, stub):
        assert stub("lit", """
            package main

            func main() {
                lit(1, 2.5, "x", 'a', true, nil, 3i)
            }
        """) == "func lit(i int, f float64, s string, r rune, b bool, v interface{}, c complex128) {}"

    def test_constant_expressions(self, stub):
        assert stub("calc", """
            package main

            const Size = 4

            func main() {
                calc(1<<3, 2.0*3, Size*2, "a"+"b", 1 < 2)
            }
        """) == "func calc(i1 int, f float64, i2 int, s string, b bool) {}"

    def test_constants_at_the_limits_of_their_default_type(self, stub):
        assert stub("edge", """
            package main

            func main() {
                edge(1<<63 - 1, -1 << 63, 1e308, '\U0010FFFF')
            }
        """) == "func edge(i1 int, i2 int, f float64, r rune) {}"

    def test_typed_constant_keeps_its_type(self, stub):
        src = """
            package main

            type Color int

            const (
                Red Color = iota
                Green
            )

            func main() {
                paint(Green)
            }
        """
        assert stub("paint", src) == "func paint(Green Color) {}"
        assert stub("paint", src, NamingPolicy.TYPE) == "func paint(color Color) {}"

    def test_composite_literals(self, stub):
        assert stub("store", """
            package main

            type Point struct{ X, Y int }

            func main() {
                store([]int{1}, map[string]int{}, Point{X: 1}, &Point{}, []Point{{1, 2}})
            }
        """) == (
            "func store(i []int, m map[string]int, point1 Point, point2 *Point, point3 []Point) {}"
        )

    def test_derived_expressions(self, stub):
        assert stub("b", """
            package main

            func a(s string, x int) {
                b(len(s), s[0], s[1:], x > 0, -x, float64(x))
            }
        """) == "func b(i1 int, b1 byte, s string, b2 bool, i2 int, f float64) {}"

    def test_fields_methods_and_maps(self, stub):
        assert stub("show", """
            package main

            type User struct {
                Name  string
                Admin bool
            }

            func (u *User) Tags() []string { return nil }

            func main() {
                u := &User{Name: "x"}
                ages := map[string]int{}
                show(u.Name, u.Tags(), ages["x"], u)
            }
        """) == "func show(s1 string, s2 []string, i int, u *User) {}"

    def test_channels_and_functions(self, stub):
        assert stub("wire", """
            package main

            func main() {
                done := make(chan struct{})
                wire(make(chan int), done, func(x int) bool { return x > 0 }, <-done)
            }
        """) == (
            "func wire(ch chan int, done chan struct{}, fn func(int) bool, v struct{}) {}"
        )

    def test_comma_ok_assignment(self, stub):
        assert stub("check", """
            package main

            func main() {
                m := map[string]float64{}
                v, ok := m["k"]
                check(v, ok)
            }
        """) == "func check(v float64, ok bool) {}"

    def test_range_variables(self, stub):
        assert stub("visit", """
            package main

            func main() {
                for i, r := range "héllo" {
                    visit(i, r)
                }
            }
        """) == "func visit(i int, r rune) {}"

    def test_package_level_initializer(self, stub):
        assert stub("compute", """
            package main

            var total = compute(1, "x")
        """) == "func compute(i int, s string) {}"

    def test_call_inside_function_literal(self, stub):
        assert stub("handle", """
            package main

            func main() {
                go func(n int) {
                    handle(n)
                }(1)
            }
        """) == "func handle(n int) {}"

    def test_multi_value_method_call(self, stub):
        assert stub("use", """
            package main

            type Store struct{}

            func (s Store) Get(key string) ([]byte, bool, error) { return nil, false, nil }

            func main() {
                var st Store
                use(st.Get("k"))
            }
        """) == "func use(b1 []byte, b2 bool, err error) {}"

    def test_type_switch_variable(self, stub):
        assert stub("show", """
            package main

            func describe(x interface{}) {
                switch v := x.(type) {
                case int, string:
                case []string:
                    show(v, len(v))
                }
            }
        """) == "func show(v []string, i int) {}"

    def test_select_receive(self, stub):
        assert stub("collect", """
            package main

            func main() {
                results := make(chan []int)
                errs := make(chan error)
                select {
                case err := <-errs:
                    panic(err)
                case r, ok := <-results:
                    collect(r, ok)
                }
            }
        """) == "func collect(r []int, ok bool) {}"

    def test_labeled_loop(self, stub):
        assert stub("failed", """
            package main

            func main() {
            retry:
                for attempt := 0; attempt < 3; attempt++ {
                    if failed(attempt) {
                        continue retry
                    }
                }
            }
        """) == "func failed(attempt int) {}"


# ---------------------------------------------------------------------------
# Imported packages
# ---------------------------------------------------------------------------

class TestImportedTypes:
    def test_qualified_types(self, stub):
        assert stub("serve", """
            package main

            import "net/http"

            func handler(w http.ResponseWriter, r *http.Request) {
                serve(w, r)
            }
        """) == "func serve(w http.ResponseWriter, r *http.Request) {}"

    def test_type_policy_strips_qualifier(self, stub):
        assert stub("serve", """
            package main

            import "net/http"

            func handler(w http.ResponseWriter, r *http.Request) {
                serve(w, r)
            }
        """, NamingPolicy.TYPE) == "func serve(responseWriter http.ResponseWriter, request *http.Request) {}"

    def test_renamed_import(self, stub):
        assert stub("serve", """
            package main

            import h "net/http"

            func handler(r *h.Request) {
                serve(r, r.URL)
            }
        """) == "func serve(r *h.Request, uRL *url.URL) {}"

    def test_stdlib_multi_value(self, stub):
        assert stub("parse", """
            package main

            import "strconv"

            func main() {
                parse(strconv.Atoi("42"))
            }
        """) == "func parse(i int, err error) {}"

    def test_pointer_result_from_package(self, stub):
        assert stub("process", """
            package main

            import "os"

            func main() {
                process(os.Open("x"))
            }
        """) == "func process(file *os.File, err error) {}"

    def test_package_function_value(self, stub):
        assert stub("apply", """
            package main

            import "strings"

            func main() {
                apply(strings.ToUpper, "x")
            }
        """) == "func apply(fn func(string) string, s string) {}"

    def test_method_on_imported_value(self, stub):
        assert stub("report", """
            package main

            import "bytes"

            func main() {
                var buf bytes.Buffer
                report(buf.Len(), buf.String())
            }
        """) == "func report(i int, s string) {}"


# ---------------------------------------------------------------------------
# Naming policies
# ---------------------------------------------------------------------------

class TestNamingPolicy:
    SRC = """
        package main

        type T struct{}

        func a(s string, p *T) {
            var v T
            b(&v, (s), *p, s)
        }
    """

    def test_identifier_policy(self, stub):
        assert stub("b", self.SRC) == "func b(t1 *T, s1 string, t2 T, s2 string) {}"

    def test_unwrap_policy(self, stub):
        assert stub("b", self.SRC, NamingPolicy.UNWRAP) == "func b(v *T, s1 string, p T, s2 string) {}"

    def test_type_policy(self, stub):
        assert stub("b", self.SRC, NamingPolicy.TYPE) == "func b(t1 *T, s1 string, t2 T, s2 string) {}"

    def test_policy_accepts_plain_strings(self, importer):
        generator = StubGenerator("unwrap", importer)
        assert generator.policy is NamingPolicy.UNWRAP

    def test_predeclared_values_are_not_reused(self, stub):
        assert stub("b", """
            package main

            func main() {
                b(true, nil)
            }
        """) == "func b(b bool, v interface{}) {}"


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestFailures:
    def test_parse_failure(self, stub):
        with pytest.raises(ParseFailure) as info:
            stub("b", """
                package main

                func a( {
            """)
        assert info.value.code == "GS1001"
        assert info.value.stage == "parse"
        assert "syntax error" in str(info.value)
        assert info.value.span is not None

    def test_parse_failure_is_reported(self, importer):
        generator = StubGenerator(importer=importer)
        with pytest.raises(StubError):
            generator.generate("b", "package main\n\nfunc a( {\n")
        assert generator.reporter.codes() == ["GS1001"]

    def test_undeclared_argument(self, stub):
        with pytest.raises(UnresolvableArgumentType) as info:
            stub("b", """
                package main

                func main() {
                    b(missing)
                }
            """)
        assert info.value.code == "GS3002"
        assert info.value.expression == "missing"
        assert info.value.span.line == 4

    def test_argument_without_value(self, stub):
        with pytest.raises(UnresolvableArgumentType, match="has no value"):
            stub("b", """
                package main

                func nothing() {}

                func main() {
                    b(nothing())
                }
            """)

    def test_spread_argument_needs_variadic_parameter(self, stub):
        with pytest.raises(UnresolvableArgumentType) as info:
            stub("z", """
                package main

                func main() {
                    xs := []int{1, 2}
                    z(xs...)
                }
            """)
        assert info.value.expression == "xs..."
        assert str(info.value) == "cannot determine the type of argument 'xs...' (variadic call)"

    @pytest.mark.parametrize("arg, ty", [
        ("1 << 70", "int"),
        ("-1 << 64", "int"),
        ("1e400", "float64"),
        ("2e308i", "complex128"),
    ])
    def test_overflowing_constant(self, stub, arg, ty):
        with pytest.raises(UnresolvableArgumentType) as info:
            stub("z", f"""
                package main

                func main() {{
                    z({arg})
                }}
            """)
        assert info.value.expression == arg
        assert str(info.value).endswith(f"(constant overflows {ty})")

    def test_outer_call_wins_over_nested(self, stub):
        with pytest.raises(UnresolvableArgumentType) as info:
            stub("b", """
                package main

                func main() {
                    b(b(1))
                }
            """)
        assert info.value.expression == "b(1)"


# ---------------------------------------------------------------------------
# Pipeline properties
# ---------------------------------------------------------------------------

class TestProperties:
    def test_first_call_in_source_order_wins(self, stub):
        assert stub("b", """
            package main

            func one(s string) { b(s) }

            func two(i int) { b(i, i) }
        """) == "func b(s string) {}"

    def test_unrelated_errors_are_tolerated(self, importer):
        generator = StubGenerator(importer=importer)
        out = generator.generate("b", go("""
            package main

            func main() {
                x := 1
                other(x)
                b(x)
            }
        """))
        assert out == "func b(x int) {}"
        assert "GE1001" in generator.reporter.codes()

    def test_deterministic(self, importer):
        src = go(POINTER_VALUE)
        outputs = {generate_function_stub("f", src, importer=importer) for _ in range(3)}
        assert len(outputs) == 1

    @pytest.mark.parametrize("name, src", [
        ("b", """
            package main

            func a(s string, i int) { b(s, i, s, i) }
        """),
        ("u", """
            package main

            import "os"

            func main() {
                u(os.Open("f"))
            }
        """),
        ("f", POINTER_VALUE),
        ("lit", """
            package main

            func main() {
                lit(1, 2.5, "x", 'a', true, nil, []int{1})
            }
        """),
        ("show", """
            package main

            func describe(x interface{}) {
                switch v := x.(type) {
                case error:
                    show(v)
                }
            }
        """),
    ])
    def test_appended_stub_declares_the_name(self, importer, check, name, src):
        stub = generate_function_stub(name, go(src), importer=importer)
        checked = check(go(src) + "\n" + stub + "\n")
        assert f"undefined: {name}" not in checked.messages()
