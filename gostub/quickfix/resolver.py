"""Argument types and parameter name candidates for the stub."""
from __future__ import annotations
from enum import Enum
from typing import List, Optional, Sequence

from gostub.semantics import ast as A
from gostub.semantics.ast_printer import expr_string
from gostub.semantics.info import TypeInfo
from gostub.semantics.passes.types.constants import representable
from gostub.semantics.typesys import TupleType, default, is_untyped
from gostub.semantics.universe import PREDECLARED_VALUES
from .exceptions import UnresolvableArgumentType
from .model import MultiType, ParamCandidate, ResolvedType, SingleType
from .naming import type_to_arg_name


class NamingPolicy(str, Enum):
    """When an argument's own spelling is reused as the parameter name."""
    IDENTIFIER = "identifier"       # bare identifiers only
    UNWRAP = "unwrap"               # also through (x), &x and *x
    TYPE = "type"                   # never; always derive from the type


class ArgumentResolver:
    """Turn call arguments into typed, named parameter candidates."""

    def __init__(self, info: TypeInfo, policy: NamingPolicy = NamingPolicy.IDENTIFIER) -> None:
        self.info = info
        self.policy = NamingPolicy(policy)

    def resolve(self, arguments: Sequence[A.Expr], spread: bool = False) -> List[ParamCandidate]:
        if spread and arguments:
            # f(xs...) only type-checks against a variadic parameter.
            last = arguments[-1]
            raise UnresolvableArgumentType(expr_string(last) + "...", last.loc, reason=" (variadic call)")
        out: List[ParamCandidate] = []
        for arg in arguments:
            resolved = self.resolve_type(arg)
            if isinstance(resolved, MultiType):
                # f(g()) where g returns several values: one parameter per result.
                out.extend(ParamCandidate(type_to_arg_name(t), default(t)) for t in resolved.types)
            else:
                ty = default(resolved.ty)
                out.append(ParamCandidate(self.reused_name(arg) or type_to_arg_name(ty), ty))
        return out

    def resolve_type(self, arg: A.Expr) -> ResolvedType:
        ty = self.info.type_of(arg)
        if ty is None:
            raise UnresolvableArgumentType(expr_string(arg), arg.loc)
        if isinstance(ty, TupleType):
            if len(ty) == 0:
                raise UnresolvableArgumentType(expr_string(arg), arg.loc, reason=" (expression has no value)")
            if len(ty) == 1:
                return SingleType(ty.types[0])
            return MultiType(ty.types)
        if is_untyped(ty):
            value = self.info.value_of(arg)
            if value is not None and not representable(value, default(ty)):
                raise UnresolvableArgumentType(expr_string(arg), arg.loc,
                                               reason=f" (constant overflows {default(ty)})")
        return SingleType(ty)

    def reused_name(self, arg: A.Expr) -> Optional[str]:
        if self.policy is NamingPolicy.TYPE:
            return None
        if self.policy is NamingPolicy.UNWRAP:
            while True:
                if isinstance(arg, A.Paren):
                    arg = arg.expr
                elif isinstance(arg, A.UnaryOp) and arg.op in ("&", "*"):
                    arg = arg.expr
                else:
                    break
        if isinstance(arg, A.Name) and arg.id not in PREDECLARED_VALUES and arg.id != "_":
            return arg.id
        return None
