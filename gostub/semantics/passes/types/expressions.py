# semantics/passes/types/expressions.py
"""
Expression inference.

Every function returns the expression's type, or None when it cannot be
determined (after reporting why, where there is something to report).
Untyped constants keep their untyped kind here; callers default them.
"""
from __future__ import annotations
from typing import TYPE_CHECKING, Optional

from gostub.internals import errors as er
from gostub.semantics import ast as A
from gostub.semantics.ast_printer import expr_string
from gostub.semantics.symbols import ObjKind, Object, ScopeKind
from gostub.semantics.typesys import (
    Type, BasicType, PointerType, SliceType, ArrayType, MapType, ChanType, ChanDir,
    Signature, StructType, InterfaceType,
    INTEGER_TYPES, NUMERIC_TYPES, STRING_TYPES, UNTYPED_RANK,
    underlying, is_untyped, basic_kind, is_interface, identical, lookup_field_or_method,
)
from .calls import check_call

if TYPE_CHECKING:
    from . import TypeChecker


def infer_expression(checker: 'TypeChecker', e, expected: Optional[Type] = None) -> Optional[Type]:
    if isinstance(e, A.Name):
        return infer_name(checker, e)
    if isinstance(e, (A.IntLit, A.FloatLit, A.ImagLit, A.RuneLit, A.StringLit)):
        return _LITERAL_KINDS[type(e)]
    if isinstance(e, A.Paren):
        return checker.expr(e.expr, expected)
    if isinstance(e, A.CompositeLit):
        return infer_composite(checker, e, expected)
    if isinstance(e, A.FuncLit):
        return infer_func_lit(checker, e)
    if isinstance(e, A.Selector):
        return infer_selector(checker, e)
    if isinstance(e, A.Index):
        return infer_index(checker, e)
    if isinstance(e, A.SliceExpr):
        return infer_slice(checker, e)
    if isinstance(e, A.TypeAssert):
        return infer_type_assert(checker, e)
    if isinstance(e, A.Call):
        return check_call(checker, e)
    if isinstance(e, A.UnaryOp):
        return infer_unary(checker, e, expected)
    if isinstance(e, A.BinaryOp):
        return infer_binary(checker, e, expected)
    if isinstance(e, A.KeyValue):
        checker.expr(e.value)
        return None
    # Type expressions have no value type.
    return None


_LITERAL_KINDS = {
    A.IntLit: BasicType.UNTYPED_INT,
    A.FloatLit: BasicType.UNTYPED_FLOAT,
    A.ImagLit: BasicType.UNTYPED_COMPLEX,
    A.RuneLit: BasicType.UNTYPED_RUNE,
    A.StringLit: BasicType.UNTYPED_STRING,
}


def infer_name(checker: 'TypeChecker', e: A.Name) -> Optional[Type]:
    if e.id == "_":
        er.emit(checker.reporter, er.ERR.GE1005, e.loc)
        return None
    obj = checker.lookup(e.id)
    if obj is None:
        er.emit(checker.reporter, er.ERR.GE1001, e.loc, name=e.id)
        return None
    checker.info.record_use(e, obj)
    return object_type(checker, obj, e)


def object_type(checker: 'TypeChecker', obj: Object, at: A.Node) -> Optional[Type]:
    """Value type of a named object, or None for types and builtins."""
    if obj.kind in (ObjKind.VAR, ObjKind.CONST):
        return checker.resolve_object(obj)
    if obj.kind in (ObjKind.FUNC, ObjKind.NIL):
        return obj.ty
    if obj.kind is ObjKind.PKG:
        er.emit(checker.reporter, er.ERR.GE1006, at.loc, name=obj.name)
    return None


# === Composite and function literals ===

def infer_composite(checker: 'TypeChecker', e: A.CompositeLit, expected: Optional[Type]) -> Optional[Type]:
    if e.ty is None:
        ty = expected
    elif isinstance(e.ty, A.ArrayTypeExpr) and e.ty.length is None:
        elem = checker.resolve_type(e.ty.elem)
        ty = ArrayType(elem, _array_literal_length(checker, e)) if elem is not None else None
    else:
        ty = checker.resolve_type(e.ty)

    if ty is None:
        for el in e.elements:
            checker.expr(el.value if isinstance(el, A.KeyValue) else el)
        return None

    # &T{...} elided inside an outer literal of []*T
    base = ty.elem if e.ty is None and isinstance(ty, PointerType) else ty
    under = underlying(base)

    if isinstance(under, StructType):
        _struct_elements(checker, e, under, base)
    elif isinstance(under, (ArrayType, SliceType)):
        for el in e.elements:
            if isinstance(el, A.KeyValue):
                checker.value(el.key)
                el = el.value
            checker.value(el, under.elem)
    elif isinstance(under, MapType):
        for el in e.elements:
            if isinstance(el, A.KeyValue):
                checker.value(el.key, under.key)
                checker.value(el.value, under.value)
            else:
                checker.value(el, under.value)
    else:
        er.emit(checker.reporter, er.ERR.GE2014, e.loc, ty=str(base))
        return None
    return ty


def _struct_elements(checker: 'TypeChecker', e: A.CompositeLit, under: StructType, ty: Type) -> None:
    for i, el in enumerate(e.elements):
        if isinstance(el, A.KeyValue) and isinstance(el.key, A.Name):
            field = under.field(el.key.id)
            if field is None:
                er.emit(checker.reporter, er.ERR.GE2015, el.key.loc, name=el.key.id, ty=str(ty))
            checker.value(el.value, field.ty if field is not None else None)
        elif isinstance(el, A.KeyValue):
            checker.value(el.value)
        else:
            checker.value(el, under.fields[i].ty if i < len(under.fields) else None)


def _array_literal_length(checker: 'TypeChecker', e: A.CompositeLit) -> int:
    """Length of a [...]T literal: one past the highest index used."""
    index = 0
    length = 0
    for el in e.elements:
        if isinstance(el, A.KeyValue):
            key = checker.constant(el.key)
            if isinstance(key, int) and not isinstance(key, bool):
                index = key
        index += 1
        length = max(length, index)
    return length


def infer_func_lit(checker: 'TypeChecker', e: A.FuncLit) -> Optional[Type]:
    from .statements import declare_params, check_block

    sig = checker.signature(e.params, e.results)
    with checker.scoped(ScopeKind.FUNCTION):
        declare_params(checker, e.params, e.results)
        saved, checker.func_results = checker.func_results, sig.results if sig else None
        try:
            check_block(checker, e.body, new_scope=False)
        finally:
            checker.func_results = saved
    return sig


# === Selectors, indexing and assertions ===

def infer_selector(checker: 'TypeChecker', e: A.Selector) -> Optional[Type]:
    if isinstance(e.value, A.Name):
        obj = checker.lookup(e.value.id)
        if obj is not None and obj.kind is ObjKind.PKG:
            checker.info.record_use(e.value, obj)
            if obj.package is None:
                return None
            member = obj.package.exported(e.attr)
            if member is None:
                er.emit(checker.reporter, er.ERR.GE1004, e.loc, pkg=e.value.id, name=e.attr)
                return None
            checker.info.record_use(e, member)
            return object_type(checker, member, e)

    # Method expression T.Method
    recv = checker.type_operand(e.value)
    if recv is not None:
        method = lookup_field_or_method(recv, e.attr)
        if isinstance(method, Signature):
            return Signature((recv,) + method.params, method.results, method.variadic)
        er.emit(checker.reporter, er.ERR.GE2001, e.loc,
                expr=expr_string(e.value), name=e.attr, ty=str(recv))
        return None

    base = checker.value(e.value)
    if base is None:
        return None
    found = lookup_field_or_method(base, e.attr)
    if found is None:
        er.emit(checker.reporter, er.ERR.GE2001, e.loc,
                expr=expr_string(e.value), name=e.attr, ty=str(base))
    return found


def infer_index(checker: 'TypeChecker', e: A.Index) -> Optional[Type]:
    base = checker.value(e.value)
    under = underlying(base) if base is not None else None
    if isinstance(under, PointerType) and isinstance(underlying(under.elem), ArrayType):
        under = underlying(under.elem)

    if isinstance(under, MapType):
        checker.value(e.index, under.key)
        return under.value
    checker.value(e.index)
    if base is None:
        return None
    if isinstance(under, (ArrayType, SliceType)):
        return under.elem
    if isinstance(under, BasicType) and under in STRING_TYPES:
        return BasicType.BYTE
    er.emit(checker.reporter, er.ERR.GE2005, e.loc, expr=expr_string(e), ty=str(base))
    return None


def infer_slice(checker: 'TypeChecker', e: A.SliceExpr) -> Optional[Type]:
    base = checker.value(e.value)
    for bound in (e.low, e.high):
        if bound is not None:
            checker.value(bound)
    if base is None:
        return None
    under = underlying(base)
    if isinstance(under, PointerType):
        under = underlying(under.elem)
    if isinstance(under, BasicType) and under in STRING_TYPES:
        return BasicType.STRING if under is BasicType.UNTYPED_STRING else base
    if isinstance(under, SliceType):
        return base
    if isinstance(under, ArrayType):
        return SliceType(under.elem)
    er.emit(checker.reporter, er.ERR.GE2005, e.loc, expr=expr_string(e.value), ty=str(base))
    return None


def infer_type_assert(checker: 'TypeChecker', e: A.TypeAssert) -> Optional[Type]:
    base = checker.value(e.value)
    target = checker.resolve_type(e.ty)
    if base is not None and not is_interface(base):
        er.emit(checker.reporter, er.ERR.GE2009, e.value.loc, expr=expr_string(e.value), ty=str(base))
    return target


# === Operators ===

def infer_unary(checker: 'TypeChecker', e: A.UnaryOp, expected: Optional[Type]) -> Optional[Type]:
    if e.op == "&":
        inner = A.unparen(e.expr)
        hint = expected.elem if isinstance(expected, PointerType) else None
        ty = checker.value(inner, hint) if isinstance(inner, A.CompositeLit) else checker.value(e.expr)
        return PointerType(ty) if ty is not None else None

    if e.op == "*":
        # *T in value position is only valid as a type; callers use type_operand.
        ty = checker.value(e.expr)
        if ty is None:
            return None
        under = underlying(ty)
        if not isinstance(under, PointerType):
            er.emit(checker.reporter, er.ERR.GE2006, e.loc, expr=expr_string(e.expr), ty=str(ty))
            return None
        return under.elem

    if e.op == "<-":
        ty = checker.value(e.expr)
        if ty is None:
            return None
        under = underlying(ty)
        if not isinstance(under, ChanType) or under.direction is ChanDir.SEND:
            er.emit(checker.reporter, er.ERR.GE2016, e.loc, op=e.op, expr=expr_string(e.expr), ty=str(ty))
            return None
        return under.elem

    ty = checker.value(e.expr, expected)
    if ty is None:
        return None
    kind = basic_kind(ty)
    if e.op == "!":
        ok = kind in (BasicType.BOOL, BasicType.UNTYPED_BOOL)
    elif e.op == "^":
        ok = kind in INTEGER_TYPES
    else:
        ok = kind in NUMERIC_TYPES
    if not ok:
        er.emit(checker.reporter, er.ERR.GE2016, e.loc, op=e.op, expr=expr_string(e.expr), ty=str(ty))
        return None
    return ty


_COMPARISONS = frozenset({"==", "!=", "<", "<=", ">", ">="})
_SHIFTS = frozenset({"<<", ">>"})


def infer_binary(checker: 'TypeChecker', e: A.BinaryOp, expected: Optional[Type]) -> Optional[Type]:
    if e.op in _SHIFTS:
        left = checker.value(e.left, expected)
        checker.value(e.right)
        return left

    left = checker.value(e.left)
    right = checker.value(e.right, left if not is_untyped(left) else None)
    if left is None or right is None:
        return None

    if e.op in ("&&", "||"):
        if is_untyped(left) and is_untyped(right):
            return BasicType.UNTYPED_BOOL
        return right if is_untyped(left) else left

    operand = _common_type(left, right)
    if operand is None:
        er.emit(checker.reporter, er.ERR.GE2004, e.loc,
                expr=expr_string(e), left=str(left), right=str(right))
        return None

    if e.op in _COMPARISONS:
        return BasicType.UNTYPED_BOOL

    kind = basic_kind(operand)
    if e.op == "+":
        ok = kind in NUMERIC_TYPES or kind in STRING_TYPES
    elif e.op in ("%", "&", "|", "^", "&^"):
        ok = kind in INTEGER_TYPES
    else:
        ok = kind in NUMERIC_TYPES
    if not ok:
        er.emit(checker.reporter, er.ERR.GE2016, e.loc, op=e.op, expr=expr_string(e.left), ty=str(operand))
        return None
    return operand


def _common_type(left: Type, right: Type) -> Optional[Type]:
    """Operand type of a binary expression after untyped conversion."""
    lu, ru = is_untyped(left), is_untyped(right)
    if lu and ru:
        if left in UNTYPED_RANK and right in UNTYPED_RANK:
            return max(left, right, key=UNTYPED_RANK.__getitem__)
        if left is right:
            return left
        if left is BasicType.UNTYPED_NIL or right is BasicType.UNTYPED_NIL:
            return left if right is BasicType.UNTYPED_NIL else right
        return None
    if lu:
        return right if _assignable_untyped(left, right) else None
    if ru:
        return left if _assignable_untyped(right, left) else None
    if identical(left, right):
        return left
    # Interface and concrete operands compare when one implements the other.
    if is_interface(left) or is_interface(right):
        return left
    return None


def _assignable_untyped(untyped: BasicType, target: Type) -> bool:
    if untyped is BasicType.UNTYPED_NIL:
        return isinstance(underlying(target), (PointerType, SliceType, MapType, ChanType,
                                               Signature, InterfaceType))
    if is_interface(target):
        return True
    kind = basic_kind(target)
    if kind is None:
        return False
    if untyped is BasicType.UNTYPED_BOOL:
        return kind is BasicType.BOOL
    if untyped is BasicType.UNTYPED_STRING:
        return kind is BasicType.STRING
    return kind in NUMERIC_TYPES
