"""Expression parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING, List

from lark import Tree, Token

from gostub.semantics.ast import (
    Expr, Name, IntLit, FloatLit, ImagLit, RuneLit, StringLit, CompositeLit, KeyValue,
    FuncLit, Paren, Selector, Index, SliceExpr, TypeAssert, Call, UnaryOp, BinaryOp,
    normalize_op,
)
from gostub.semantics.ast_builder import literals
from gostub.semantics.ast_builder.exceptions import GoSyntaxError
from gostub.semantics.ast_builder.tree_navigation import first_tree, trees, has_token
from gostub.internals.report import span_of

if TYPE_CHECKING:
    from gostub.semantics.ast_builder.builder import ASTBuilder

_TYPE_TAGS = {
    "slice_type", "array_type", "ellipsis_array_type", "map_type", "chan_type",
    "recv_chan_type", "func_type", "struct_type", "interface_type", "pointer_type",
    "type_name",
}


class ExpressionParser:
    """Coordinates expression parsing."""

    def __init__(self, ast_builder: 'ASTBuilder'):
        self.ast_builder = ast_builder

    def parse_expr(self, t: Tree | Token) -> Expr:
        """Parse an expression node into an Expr object."""
        if isinstance(t, Token):
            raise GoSyntaxError(f"unexpected {t.value!r} in expression", span_of(t))

        tag = t.data
        loc = span_of(t)

        if tag in _TYPE_TAGS:
            return self.ast_builder._type(t)

        handler = getattr(self, f"_expr_{tag}", None)
        if handler is None:
            raise NotImplementedError(f"unhandled expr node: {tag}")
        return handler(t, loc)

    # --- literals ---

    def _literal(self, t: Tree, loc, ctor, decode):
        tok = t.children[0]
        try:
            value = decode(tok.value)
        except ValueError as e:
            raise GoSyntaxError(str(e), loc) from None
        return ctor(value=value, text=tok.value, loc=loc)

    def _expr_name(self, t: Tree, loc) -> Expr:
        return Name(id=t.children[0].value, loc=loc)

    def _expr_int_lit(self, t: Tree, loc) -> Expr:
        return self._literal(t, loc, IntLit, literals.parse_int)

    def _expr_float_lit(self, t: Tree, loc) -> Expr:
        return self._literal(t, loc, FloatLit, literals.parse_float)

    def _expr_imag_lit(self, t: Tree, loc) -> Expr:
        return self._literal(t, loc, ImagLit, literals.parse_imag)

    def _expr_rune_lit(self, t: Tree, loc) -> Expr:
        return self._literal(t, loc, RuneLit, literals.parse_rune)

    def _expr_string_lit(self, t: Tree, loc) -> Expr:
        return self._literal(t, loc, StringLit, literals.parse_string)

    def _expr_func_lit(self, t: Tree, loc) -> Expr:
        params, results = self.ast_builder.type_parser.parse_signature(first_tree(t.children, "signature"))
        body = self.ast_builder._block(first_tree(t.children, "body"))
        return FuncLit(params=params, results=results, body=body, loc=loc)

    def _expr_composite_lit(self, t: Tree, loc) -> Expr:
        ty_tree, value = t.children
        return CompositeLit(ty=self.parse_expr(ty_tree), elements=self._elements(value), loc=loc)

    def _elements(self, lit_value: Tree) -> List[Expr]:
        return [self._element(c) for c in lit_value.children if isinstance(c, Tree)]

    def _element(self, t: Tree) -> Expr:
        if t.data == "lit_value":
            # Elided type: {1, 2} inside [][]int{...}
            return CompositeLit(ty=None, elements=self._elements(t), loc=span_of(t))
        if t.data == "key_value":
            key, value = trees(t)
            return KeyValue(key=self._element(key), value=self._element(value), loc=span_of(t))
        return self.parse_expr(t)

    # --- postfix forms ---

    def _expr_paren(self, t: Tree, loc) -> Expr:
        return Paren(expr=self.parse_expr(t.children[0]), loc=loc)

    def _expr_selector(self, t: Tree, loc) -> Expr:
        value, attr = t.children
        return Selector(value=self.parse_expr(value), attr=attr.value, loc=loc)

    def _expr_type_assert(self, t: Tree, loc) -> Expr:
        value, ty = t.children
        return TypeAssert(value=self.parse_expr(value), ty=self.ast_builder._type(ty), loc=loc)

    def _expr_type_switch_guard(self, t: Tree, loc) -> Expr:
        raise GoSyntaxError("use of .(type) outside type switch", loc)

    def _expr_index(self, t: Tree, loc) -> Expr:
        value, index = t.children
        return Index(value=self.parse_expr(value), index=self.parse_expr(index), loc=loc)

    def _expr_slice_expr(self, t: Tree, loc) -> Expr:
        value = self.parse_expr(t.children[0])
        low = first_tree(t.children, "slice_low")
        high = first_tree(t.children, "slice_high")
        return SliceExpr(
            value=value,
            low=self.parse_expr(low.children[0]) if low is not None else None,
            high=self.parse_expr(high.children[0]) if high is not None else None,
            loc=loc,
        )

    def _expr_call(self, t: Tree, loc) -> Expr:
        fun, *rest = t.children
        args = [self.parse_expr(c) for c in rest if isinstance(c, Tree)]
        return Call(fun=self.parse_expr(fun), args=args, ellipsis=has_token(t, "ELLIPSIS"), loc=loc)

    # --- operators ---

    def _expr_unary(self, t: Tree, loc) -> Expr:
        op_tok, operand = t.children
        return UnaryOp(op=normalize_op(op_tok), expr=self.parse_expr(operand), loc=loc)

    def _expr_binary(self, t: Tree, loc) -> Expr:
        left, op_tok, right = t.children
        return BinaryOp(op=normalize_op(op_tok), left=self.parse_expr(left),
                        right=self.parse_expr(right), loc=loc)
