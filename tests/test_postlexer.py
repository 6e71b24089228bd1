"""Tests for automatic semicolon insertion and body-brace marking."""

from gostub.internals.parser import get_parser

from conftest import go


def kinds(src: str):
    return [t.type for t in get_parser().lex(go(src))]


def test_newline_after_identifier_inserts_semicolon():
    assert kinds("""
        x
        y
    """) == ["IDENT", "_SEMI", "IDENT", "_SEMI"]


def test_newline_after_operator_is_dropped():
    assert kinds("""
        a +
        b
    """) == ["IDENT", "PLUS", "IDENT", "_SEMI"]


def test_semicolon_at_end_of_input_without_newline():
    toks = list(get_parser().lex("return"))
    assert [t.type for t in toks] == ["_RETURN", "_SEMI"]
    assert toks[-1].value == ""


def test_blank_lines_and_comments_do_not_insert():
    assert kinds("""
        x // trailing comment

        /* block */
        y
    """) == ["IDENT", "_SEMI", "IDENT", "_SEMI"]


def test_if_body_brace_is_marked():
    assert kinds("if x { y }") == ["_IF", "IDENT", "_BODY_LBRACE", "IDENT", "_RBRACE", "_SEMI"]


def test_composite_literal_brace_is_not_marked():
    assert "_BODY_LBRACE" not in kinds("x := []int{1, 2}")


def test_parenthesised_literal_in_header():
    toks = kinds("for _, p := range ([]int{1}) { }")
    assert toks.count("_BODY_LBRACE") == 1
    assert toks.count("_LBRACE") == 1
    assert toks.index("_LBRACE") < toks.index("_BODY_LBRACE")


def test_struct_brace_after_func_keyword():
    toks = kinds("func f(p struct{ x int }) { }")
    assert toks.count("_BODY_LBRACE") == 1
    assert toks[-3:] == ["_BODY_LBRACE", "_RBRACE", "_SEMI"]


def test_func_type_frame_closed_by_semicolon():
    toks = kinds("""
        var f func()
        x := T{}
    """)
    assert "_BODY_LBRACE" not in toks


def test_func_literal_body_inside_call():
    toks = kinds("run(func() { x })")
    assert toks.count("_BODY_LBRACE") == 1


def test_select_body_brace_is_marked():
    assert kinds("select { }") == ["_SELECT", "_BODY_LBRACE", "_RBRACE", "_SEMI"]


def test_type_switch_guard_header():
    assert kinds("switch v := x.(type) { }") == [
        "_SWITCH", "IDENT", "DEFINE", "IDENT", "_DOT", "_LPAR", "_TYPE", "_RPAR",
        "_BODY_LBRACE", "_RBRACE", "_SEMI",
    ]


def test_newline_after_label_colon_is_dropped():
    assert kinds("""
        outer:
        for {
        }
    """) == ["IDENT", "COLON", "_FOR", "_BODY_LBRACE", "_RBRACE", "_SEMI"]
