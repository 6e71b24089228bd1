# internals/semicolons.py
"""
Postlexer implementing Go's automatic semicolon insertion.

Problem:
--------
Go terminates statements with semicolons that programmers almost never write.
The lexer inserts one at a newline (or at end of input) when the line's final
token is an identifier, a basic literal, one of the keywords break, continue,
fallthrough or return, one of ++ and --, or a closing ), ] or }.

A second ambiguity lives in the braces: `if x {` opens a body while `T{1, 2}`
opens a composite literal. An LALR(1) grammar cannot tell them apart at the
`{`, so this postlexer retypes the brace that opens an if/for/switch/select/func
body to _BODY_LBRACE.

Solution:
---------
- _NL tokens are dropped, or turned into _SEMI when the previous token is a
  terminator trigger.
- Each if/for/switch/select/func keyword pushes a frame recording the bracket depth
  it appeared at. The first `{` seen back at that depth (and not following
  `struct` or `interface`) is the body brace and pops the frame.
- A `;` at the frame's depth ends a func type (as in `var f func()`), so
  pending func frames at that depth are discarded.

Examples:
---------
- if v := f(); v > 0 {   → _IF ... _SEMI ... _BODY_LBRACE
- x := []int{1, 2}       → _LBRACE (no keyword frame pending)
- for _, p := range ([]P{{1}}) {  → the literal braces sit deeper than the frame

All state is local to a single process() call, so one postlexer instance can
serve concurrent parses.
"""

from lark import Token


SEMICOLON_TRIGGERS = frozenset({
    "IDENT", "INT_LIT", "FLOAT_LIT", "IMAG_LIT", "RUNE_LIT", "STRING", "RAW_STRING",
    "_BREAK", "_CONTINUE", "_FALLTHROUGH", "_RETURN",
    "_INC", "_DEC", "_RPAR", "_RSQB", "_RBRACE",
})

BODY_KEYWORDS = frozenset({"_IF", "_FOR", "_SWITCH", "_SELECT", "_FUNC"})
OPENERS = frozenset({"_LPAR", "_LSQB", "_LBRACE"})
CLOSERS = frozenset({"_RPAR", "_RSQB", "_RBRACE"})


class GoSemicolonPostlexer:
    """Postlexer inserting statement terminators and marking body braces."""

    NL_type = "_NL"
    SEMI_type = "_SEMI"
    BODY_LBRACE_type = "_BODY_LBRACE"

    always_accept = (NL_type,)

    def process(self, stream):
        """
        Process the token stream.

        Strategy:
        - Track bracket depth and a stack of (keyword, depth) frames
        - Newline after a trigger token becomes _SEMI, other newlines vanish
        - The first `{` at a pending frame's depth becomes _BODY_LBRACE
        """
        frames: list[tuple[str, int]] = []
        depth = 0
        last = None

        for token in stream:
            kind = token.type

            if kind == self.NL_type:
                if last is not None and last.type in SEMICOLON_TRIGGERS:
                    self._end_func_types(frames, depth)
                    semi = Token.new_borrow_pos(self.SEMI_type, "\n", token)
                    last = semi
                    yield semi
                continue

            if kind == self.SEMI_type:
                self._end_func_types(frames, depth)

            elif kind in BODY_KEYWORDS:
                frames.append((kind, depth))

            elif kind in OPENERS:
                if (
                    kind == "_LBRACE"
                    and frames
                    and frames[-1][1] == depth
                    and (last is None or last.type not in ("_STRUCT", "_INTERFACE"))
                ):
                    frames.pop()
                    token = Token.new_borrow_pos(self.BODY_LBRACE_type, token.value, token)
                depth += 1

            elif kind in CLOSERS:
                depth = max(0, depth - 1)
                while frames and frames[-1][1] > depth:
                    frames.pop()

            last = token
            yield token

        if last is not None and last.type in SEMICOLON_TRIGGERS:
            yield Token(self.SEMI_type, "", end_line=last.end_line, end_column=last.end_column,
                        line=last.end_line, column=last.end_column,
                        start_pos=last.end_pos, end_pos=last.end_pos)

    @staticmethod
    def _end_func_types(frames, depth: int) -> None:
        # `var f func()` has no body; its frame must not claim the next `{`.
        while frames and frames[-1][0] == "_FUNC" and frames[-1][1] == depth:
            frames.pop()
