"""Top-level and local declaration parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional

from lark import Tree, Token

from gostub.semantics.ast import (
    ImportSpec, FuncDecl, Param, TypeSpec, ValueSpec, VarDecl, ConstDecl, TypeDecl, Decl, Expr,
)
from gostub.semantics.ast_builder.exceptions import GoSyntaxError
from gostub.semantics.ast_builder.literals import parse_string
from gostub.semantics.ast_builder.tree_navigation import first_tree, first_token, trees, has_token
from gostub.internals.report import span_of

if TYPE_CHECKING:
    from gostub.semantics.ast_builder.builder import ASTBuilder


def parse_import_decl(t: Tree, ast_builder: 'ASTBuilder') -> List[ImportSpec]:
    out: List[ImportSpec] = []
    for spec in trees(t):
        alias_tree = first_tree(spec.children, "import_alias")
        alias: Optional[str] = None
        if alias_tree is not None:
            tok = first_token(alias_tree.children, "IDENT")
            alias = tok.value if tok is not None else "."
        lit = first_tree(spec.children, "string_lit")
        path = parse_string(lit.children[0].value)
        if not path:
            raise GoSyntaxError("invalid import path (empty string)", span_of(lit))
        out.append(ImportSpec(path=path, alias=alias, loc=span_of(spec)))
    return out


def parse_decl(t: Tree, ast_builder: 'ASTBuilder') -> Decl:
    if t.data == "func_decl":
        return parse_funcdecl(t, ast_builder)
    if t.data == "var_decl":
        return VarDecl(specs=[_value_spec(s, ast_builder) for s in trees(t)], loc=span_of(t))
    if t.data == "const_decl":
        return ConstDecl(specs=_const_specs(trees(t), ast_builder), loc=span_of(t))
    if t.data == "type_decl":
        return TypeDecl(specs=[_type_spec(s, ast_builder) for s in trees(t)], loc=span_of(t))
    raise NotImplementedError(f"unhandled declaration node: {t.data}")


def parse_funcdecl(t: Tree, ast_builder: 'ASTBuilder') -> FuncDecl:
    name = first_token(t.children, "IDENT")
    recv: Optional[Param] = None
    receiver = first_tree(t.children, "receiver")
    if receiver is not None:
        recv_params = ast_builder.type_parser.parse_parameters(receiver.children[0])
        if len(recv_params) != 1:
            raise GoSyntaxError("method has multiple receivers" if recv_params else "method has no receiver",
                                span_of(receiver))
        recv = recv_params[0]

    params, results = ast_builder.type_parser.parse_signature(first_tree(t.children, "signature"))
    body_tree = first_tree(t.children, "body")
    body = ast_builder._block(body_tree) if body_tree is not None else None
    return FuncDecl(name=name.value, recv=recv, params=params, results=results, body=body,
                    loc=span_of(t), name_span=span_of(name))


def _idents(t: Tree) -> List[Token]:
    return [c for c in first_tree(t.children, "ident_list").children if isinstance(c, Token)]


def _spec_parts(t: Tree, ast_builder: 'ASTBuilder'):
    """Split a var/const spec into (type expr, value exprs)."""
    ty: Optional[Expr] = None
    values: List[Expr] = []
    for c in trees(t):
        if c.data == "ident_list":
            continue
        if c.data == "expr_list":
            values = ast_builder._expr_list(c)
        else:
            ty = ast_builder._type(c)
    return ty, values


def _value_spec(t: Tree, ast_builder: 'ASTBuilder') -> ValueSpec:
    names = _idents(t)
    ty, values = _spec_parts(t, ast_builder)
    if values and len(values) != len(names) and len(values) != 1:
        raise GoSyntaxError(f"assignment mismatch: {len(names)} variables but {len(values)} values",
                            span_of(t))
    return ValueSpec(names=[n.value for n in names], ty=ty, values=values,
                     name_spans=[span_of(n) for n in names], loc=span_of(t))


def _const_specs(specs: List[Tree], ast_builder: 'ASTBuilder') -> List[ValueSpec]:
    """Build const specs, repeating the previous type and values where omitted."""
    out: List[ValueSpec] = []
    prev: Optional[ValueSpec] = None
    for iota, t in enumerate(specs):
        names = _idents(t)
        if has_token(t, "ASSIGN"):
            ty, values = _spec_parts(t, ast_builder)
            implicit = False
        elif prev is not None:
            ty, values, implicit = prev.ty, prev.values, True
        else:
            raise GoSyntaxError("missing init expr for const declaration", span_of(t))
        if len(values) != len(names):
            problem = "missing init expr" if len(values) < len(names) else "extra init expr"
            raise GoSyntaxError(f"{problem} for const declaration", span_of(t))
        spec = ValueSpec(names=[n.value for n in names], ty=ty, values=values, iota=iota,
                         implicit=implicit, name_spans=[span_of(n) for n in names], loc=span_of(t))
        if not implicit:
            prev = spec
        out.append(spec)
    return out


def _type_spec(t: Tree, ast_builder: 'ASTBuilder') -> TypeSpec:
    name = first_token(t.children, "IDENT")
    ty_tree = trees(t)[0]
    return TypeSpec(name=name.value, ty=ast_builder._type(ty_tree), is_alias=t.data == "type_alias",
                    loc=span_of(t))
