# semantics/passes/types/calls.py
"""
Call checking: ordinary calls, conversions and builtins.

A call with exactly one result has that result's type; any other result
count gives a TupleType so callers can tell single-value contexts apart
and argument lists can expand `f(g())`.
"""
from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional

from gostub.internals import errors as er
from gostub.semantics import ast as A
from gostub.semantics.ast_printer import expr_string
from gostub.semantics.symbols import ObjKind
from gostub.semantics.typesys import (
    Type, BasicType, PointerType, SliceType, ArrayType, MapType, ChanType, Signature, TupleType,
    COMPLEX_TYPES, STRING_TYPES, UNTYPED_RANK,
    underlying, is_untyped, basic_kind,
)
from gostub.semantics.universe import ANY_TYPE

if TYPE_CHECKING:
    from . import TypeChecker


NO_VALUE = TupleType(())


def check_call(checker: 'TypeChecker', call: A.Call) -> Optional[Type]:
    fun = A.unparen(call.fun)

    if isinstance(fun, A.Name):
        obj = checker.lookup(fun.id)
        if obj is not None and obj.kind is ObjKind.BUILTIN:
            checker.info.record_use(fun, obj)
            return builtin_call(checker, fun.id, call)

    target = checker.type_operand(fun)
    if target is not None:
        for arg in call.args:
            checker.value(arg, target)
        return target

    ft = checker.expr(call.fun)
    arg_types = [checker.expr(a) for a in call.args]
    if ft is None:
        return None

    sig = underlying(ft)
    if not isinstance(sig, Signature):
        er.emit(checker.reporter, er.ERR.GE2002, call.loc, expr=expr_string(call.fun), ty=str(ft))
        return None

    _check_arity(checker, call, sig, arg_types)
    return result_type(sig)


def result_type(sig: Signature) -> Type:
    if len(sig.results) == 1:
        return sig.results[0]
    return TupleType(sig.results)


def _check_arity(checker: 'TypeChecker', call: A.Call, sig: Signature, arg_types: List[Optional[Type]]) -> None:
    have = list(arg_types)
    if len(have) == 1 and isinstance(have[0], TupleType):
        have = list(have[0].types)
    else:
        for arg, ty in zip(call.args, arg_types):
            if isinstance(ty, TupleType) and len(ty):
                er.emit(checker.reporter, er.ERR.GE2010, arg.loc, expr=expr_string(arg), ty=str(ty))
            elif isinstance(ty, TupleType):
                er.emit(checker.reporter, er.ERR.GE2011, arg.loc, expr=expr_string(arg))

    want = len(sig.params)
    if call.ellipsis:
        ok = sig.variadic and len(have) == want
    elif sig.variadic:
        ok = len(have) >= want - 1
    else:
        ok = len(have) == want
    if ok:
        return

    problem = "not enough" if len(have) < want else "too many"
    er.emit(checker.reporter, er.ERR.GE2012, call.loc,
            problem=problem, expr=expr_string(call.fun),
            have=_type_list(have), want=_type_list(sig.params, sig.variadic))


def _type_list(types, variadic: bool = False) -> str:
    parts = [str(t) if t is not None else "?" for t in types]
    if variadic and parts:
        last = types[-1]
        parts[-1] = "..." + str(last.elem if isinstance(last, SliceType) else last)
    return "(" + ", ".join(parts) + ")"


# === Builtins ===

def builtin_call(checker: 'TypeChecker', name: str, call: A.Call) -> Optional[Type]:
    args = call.args

    if name in ("make", "new"):
        ty = checker.resolve_type(args[0]) if args else None
        for a in args[1:]:
            checker.value(a)
        if ty is None:
            return None
        return PointerType(ty) if name == "new" else ty

    if name == "append":
        types = [checker.value(a) for a in args]
        if not types or types[0] is None:
            return None
        if not isinstance(underlying(types[0]), SliceType):
            er.emit(checker.reporter, er.ERR.GE2017, args[0].loc, expr=expr_string(args[0]), name=name)
            return None
        return types[0]

    types = [checker.value(a) for a in args]

    if name in ("len", "cap"):
        if types and types[0] is not None and not _has_length(types[0], name):
            er.emit(checker.reporter, er.ERR.GE2017, args[0].loc, expr=expr_string(args[0]), name=name)
        return BasicType.INT

    if name == "copy":
        return BasicType.INT

    if name in ("delete", "close", "clear", "panic", "print", "println"):
        return NO_VALUE

    if name == "recover":
        return ANY_TYPE

    if name == "complex":
        if all(t is not None and is_untyped(t) for t in types):
            return BasicType.UNTYPED_COMPLEX
        kinds = {basic_kind(t) for t in types}
        return BasicType.COMPLEX64 if BasicType.FLOAT32 in kinds else BasicType.COMPLEX128

    if name in ("real", "imag"):
        if types and types[0] is not None and is_untyped(types[0]):
            return BasicType.UNTYPED_FLOAT
        kind = basic_kind(types[0]) if types and types[0] is not None else None
        if kind is not None and kind not in COMPLEX_TYPES:
            er.emit(checker.reporter, er.ERR.GE2017, args[0].loc, expr=expr_string(args[0]), name=name)
            return None
        return BasicType.FLOAT32 if kind is BasicType.COMPLEX64 else BasicType.FLOAT64

    if name in ("min", "max"):
        if not types or any(t is None for t in types):
            return None
        typed = [t for t in types if not is_untyped(t)]
        if typed:
            return typed[0]
        ranked = [t for t in types if t in UNTYPED_RANK]
        if ranked:
            return max(ranked, key=UNTYPED_RANK.__getitem__)
        return types[0]

    return None


def _has_length(ty: Type, name: str) -> bool:
    under = underlying(ty)
    if isinstance(under, PointerType):
        under = underlying(under.elem)
        return isinstance(under, ArrayType)
    if isinstance(under, (ArrayType, SliceType, ChanType)):
        return True
    if name == "len":
        return isinstance(under, MapType) or (isinstance(under, BasicType) and under in STRING_TYPES)
    return False

