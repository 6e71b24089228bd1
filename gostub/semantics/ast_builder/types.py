"""Type expression parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING, List, Tuple

from lark import Tree, Token

from gostub.semantics.ast import (
    Expr, Name, Selector, Param, PointerTypeExpr, SliceTypeExpr, ArrayTypeExpr,
    MapTypeExpr, ChanTypeExpr, FuncTypeExpr, Field, StructTypeExpr, MethodSpec,
    InterfaceTypeExpr,
)
from gostub.semantics.ast_builder.exceptions import GoSyntaxError
from gostub.semantics.ast_builder.tree_navigation import first_tree, first_token, trees, has_token
from gostub.semantics.ast_builder.literals import parse_string
from gostub.internals.report import span_of

if TYPE_CHECKING:
    from gostub.semantics.ast_builder.builder import ASTBuilder


class TypeParser:
    """Builds type expressions and parameter lists."""

    def __init__(self, ast_builder: 'ASTBuilder'):
        self.ast_builder = ast_builder

    def parse_type(self, t: Tree | Token) -> Expr:
        if isinstance(t, Token):
            raise GoSyntaxError(f"unexpected {t.value!r} in type", span_of(t))

        tag = t.data
        loc = span_of(t)
        kids = trees(t)

        if tag == "type_name":
            idents = [c for c in t.children if isinstance(c, Token)]
            if len(idents) == 2:
                return Selector(value=Name(id=idents[0].value, loc=span_of(idents[0])),
                                attr=idents[1].value, loc=loc)
            return Name(id=idents[0].value, loc=loc)

        if tag == "pointer_type":
            return PointerTypeExpr(elem=self.parse_type(kids[0]), loc=loc)

        if tag == "slice_type":
            return SliceTypeExpr(elem=self.parse_type(kids[0]), loc=loc)

        if tag == "array_type":
            length = self.ast_builder._expr(kids[0])
            return ArrayTypeExpr(length=length, elem=self.parse_type(kids[1]), loc=loc)

        if tag == "ellipsis_array_type":
            return ArrayTypeExpr(length=None, elem=self.parse_type(kids[0]), loc=loc)

        if tag == "map_type":
            return MapTypeExpr(key=self.parse_type(kids[0]), value=self.parse_type(kids[1]), loc=loc)

        if tag == "chan_type":
            return ChanTypeExpr(elem=self.parse_type(kids[0]), loc=loc)

        if tag == "recv_chan_type":
            return ChanTypeExpr(elem=self.parse_type(kids[0]), recv_only=True, loc=loc)

        if tag == "func_type":
            params, results = self.parse_signature(kids[0])
            return FuncTypeExpr(params=params, results=results, loc=loc)

        if tag == "struct_type":
            fields: List[Field] = []
            for c in kids:
                fields.extend(self._fields(c))
            return StructTypeExpr(fields=fields, loc=loc)

        if tag == "interface_type":
            return InterfaceTypeExpr(methods=[self._method(c) for c in kids], loc=loc)

        # Parenthesised types and names used in expression position
        return self.ast_builder._expr(t)

    # --- signatures ---

    def parse_signature(self, t: Tree) -> Tuple[List[Param], List[Param]]:
        """Return (params, results) for a `signature` tree."""
        params = self.parse_parameters(first_tree(t.children, "parameters"))
        results: List[Param] = []
        result = first_tree(t.children, "result")
        if result is not None:
            inner = result.children[0]
            if isinstance(inner, Tree) and inner.data == "parameters":
                results = self.parse_parameters(inner)
            else:
                results = [Param(name=None, ty=self.parse_type(inner), loc=span_of(inner))]
        return params, results

    def parse_parameters(self, t: Tree) -> List[Param]:
        """Build parameters, regrouping `a, b int` the way Go reads it.

        The grammar sees `a, b int` as an unnamed param `a` followed by a
        named param `b int`. When any param in the list is named, every bare
        identifier before a named param is another name for its type.
        """
        raw = trees(t)
        named = any(p.data.startswith("named_") for p in raw)
        if not named:
            return [self._anon_param(p) for p in raw]

        out: List[Param] = []
        pending: List[Tuple[str, Tree]] = []
        for p in raw:
            if p.data.startswith("anon_"):
                ident = self._bare_ident(p)
                if ident is None:
                    raise GoSyntaxError("mixed named and unnamed parameters", span_of(p))
                pending.append((ident, p))
                continue
            name_tok = first_token(p.children, "IDENT")
            variadic = has_token(p, "ELLIPSIS")
            ty_tree = trees(p)[-1]
            for ident, node in pending:
                out.append(Param(name=ident, ty=self.parse_type(ty_tree), loc=span_of(node)))
            pending.clear()
            out.append(Param(name=name_tok.value, ty=self.parse_type(ty_tree),
                             variadic=variadic, loc=span_of(p)))
        if pending:
            raise GoSyntaxError("mixed named and unnamed parameters", span_of(pending[-1][1]))
        return out

    def _anon_param(self, p: Tree) -> Param:
        ty_tree = trees(p)[-1]
        return Param(name=None, ty=self.parse_type(ty_tree),
                     variadic=has_token(p, "ELLIPSIS"), loc=span_of(p))

    @staticmethod
    def _bare_ident(p: Tree):
        if p.data != "anon_param":
            return None
        ty = trees(p)[0]
        if ty.data == "type_name" and len(ty.children) == 1:
            return ty.children[0].value
        return None

    # --- struct and interface members ---

    def _fields(self, t: Tree) -> List[Field]:
        tag_tree = first_tree(t.children, "tag")
        tag = None
        if tag_tree is not None:
            lit = tag_tree.children[0]
            tag = parse_string(lit.children[0].value)

        if t.data == "field":
            idents = first_tree(t.children, "ident_list")
            ty_tree = [c for c in trees(t) if c.data not in ("ident_list", "tag")][0]
            return [
                Field(name=tok.value, ty=self.parse_type(ty_tree), tag=tag, loc=span_of(tok))
                for tok in idents.children
            ]

        # embedded_field: STAR? type_name tag?
        ty = self.parse_type(first_tree(t.children, "type_name"))
        if has_token(t, "STAR"):
            ty = PointerTypeExpr(elem=ty, loc=span_of(t))
        return [Field(name=None, ty=ty, tag=tag, loc=span_of(t))]

    def _method(self, t: Tree) -> MethodSpec:
        if t.data == "method_elem":
            name = first_token(t.children, "IDENT")
            params, results = self.parse_signature(first_tree(t.children, "signature"))
            return MethodSpec(name=name.value, ty=FuncTypeExpr(params=params, results=results, loc=span_of(t)),
                              loc=span_of(t))
        return MethodSpec(name=None, ty=self.parse_type(first_tree(t.children, "type_name")), loc=span_of(t))
