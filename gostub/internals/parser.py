"""Lark parser setup and AST construction."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from lark import Lark, UnexpectedInput, UnexpectedToken, UnexpectedCharacters, UnexpectedEOF

from gostub.internals.semicolons import GoSemicolonPostlexer
from gostub.semantics.ast_builder import ASTBuilder

GRAMMAR_PATH = Path(__file__).parent.parent / "grammar.lark"


@lru_cache(maxsize=1)
def get_parser() -> Lark:
    """Build the LALR parser once; lark parsers are reusable across threads."""
    return Lark.open(
        str(GRAMMAR_PATH),
        start="source_file",
        parser="lalr",
        lexer="basic",
        propagate_positions=True,
        maybe_placeholders=False,
        postlex=GoSemicolonPostlexer(),
    )


def _describe_token(tok) -> str:
    if tok is None or tok.type == "$END":
        return "end of file"
    if tok.type == "_SEMI" and tok.value in ("\n", ""):
        return "newline" if tok.value else "end of file"
    if tok.type == "_BODY_LBRACE":
        return "{"
    return repr(str(tok.value))


def improve_parse_error(e: UnexpectedInput, src: Optional[str] = None) -> str:
    """Turn a lark exception into a one-line, Go-flavoured syntax error."""
    if isinstance(e, UnexpectedToken):
        where = f"{e.line}:{e.column}" if e.line and e.line > 0 else "end of file"
        return f"{where}: syntax error: unexpected {_describe_token(e.token)}"

    if isinstance(e, UnexpectedEOF):
        return "syntax error: unexpected end of file"

    if isinstance(e, UnexpectedCharacters):
        ch = e.char
        if src is not None and 0 <= e.pos_in_stream < len(src):
            ch = src[e.pos_in_stream]
        return f"{e.line}:{e.column}: syntax error: invalid character {ch!r}"

    return str(e)


def parse_to_ast(src: str, dump_parse: bool = False):
    """Parse Go source into an AST.

    Returns:
        Tuple of (ast, parse_tree).
    """
    parser = get_parser()
    tree = parser.parse(src)
    if dump_parse:
        print(tree.pretty())

    ast_builder = ASTBuilder()
    return ast_builder.build(tree), tree
