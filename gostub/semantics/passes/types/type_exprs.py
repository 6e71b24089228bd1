# semantics/passes/types/type_exprs.py
"""
Type expression resolution.

- resolve_type: a type expression to a Type, reporting what is wrong with it
- type_operand: the Type an expression denotes, silently None for values
- signature_of: parameter and result lists to a Signature
- declare_type_specs: named types and aliases, including recursive ones
"""
from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional

from gostub.internals import errors as er
from gostub.semantics import ast as A
from gostub.semantics.ast_printer import expr_string
from gostub.semantics.symbols import Object, ObjKind
from gostub.semantics.typesys import (
    Type, NamedType, PointerType, SliceType, ArrayType, MapType, ChanType, ChanDir,
    Signature, StructType, StructField, InterfaceType, underlying,
)

if TYPE_CHECKING:
    from . import TypeChecker


def _lookup_type_object(checker: 'TypeChecker', e, report: bool) -> Optional[Object]:
    """Object named by a Name or pkg.Name selector, or None."""
    if isinstance(e, A.Name):
        obj = checker.lookup(e.id)
        if obj is None and report:
            checker.err.emit(er.ERR.GE1001, e.loc, name=e.id)
        if obj is not None:
            checker.info.record_use(e, obj)
        return obj
    if isinstance(e, A.Selector) and isinstance(e.value, A.Name):
        pkg_obj = checker.lookup(e.value.id)
        if pkg_obj is None or pkg_obj.kind is not ObjKind.PKG:
            return None
        member = pkg_obj.package.exported(e.attr) if pkg_obj.package else None
        if member is None and report and pkg_obj.package is not None:
            checker.err.emit(er.ERR.GE1004, e.loc, pkg=e.value.id, name=e.attr)
        return member
    return None


def _object_type(checker: 'TypeChecker', obj: Object) -> Optional[Type]:
    if obj.ty is None and isinstance(obj.decl, A.TypeSpec):
        # Alias used before its declaration was resolved.
        resolve_alias(checker, obj)
    return obj.ty


def type_operand(checker: 'TypeChecker', e) -> Optional[Type]:
    """Return the Type `e` denotes if it is a type expression, else None.

    Never reports; used to tell conversions and composite literal types
    apart from ordinary calls and values.
    """
    e = A.unparen(e)
    if isinstance(e, (A.Name, A.Selector)):
        if isinstance(e, A.Selector) and not isinstance(e.value, A.Name):
            return None
        obj = _lookup_type_object(checker, e, report=False)
        if obj is not None and obj.kind is ObjKind.TYPE:
            return _object_type(checker, obj)
        return None
    if isinstance(e, A.UnaryOp) and e.op == "*":
        inner = type_operand(checker, e.expr)
        return PointerType(inner) if inner is not None else None
    if isinstance(e, A.TYPE_EXPR_NODES):
        return resolve_type(checker, e)
    return None


def resolve_type(checker: 'TypeChecker', e) -> Optional[Type]:
    """Resolve a type expression; report and return None when it is not one."""
    if isinstance(e, A.Paren):
        return resolve_type(checker, e.expr)

    if isinstance(e, (A.Name, A.Selector)):
        obj = _lookup_type_object(checker, e, report=True)
        if obj is None:
            return None
        if obj.kind is not ObjKind.TYPE:
            checker.err.emit(er.ERR.GE2008, e.loc, name=expr_string(e))
            return None
        return _object_type(checker, obj)

    if isinstance(e, (A.PointerTypeExpr, A.UnaryOp)) and getattr(e, "op", "*") == "*":
        elem = resolve_type(checker, e.elem if isinstance(e, A.PointerTypeExpr) else e.expr)
        return PointerType(elem) if elem is not None else None

    if isinstance(e, A.SliceTypeExpr):
        elem = resolve_type(checker, e.elem)
        return SliceType(elem) if elem is not None else None

    if isinstance(e, A.ArrayTypeExpr):
        elem = resolve_type(checker, e.elem)
        if e.length is None:
            # [...]T outside a composite literal
            checker.err.emit(er.ERR.GE2018, e.loc, expr="...")
            return None
        checker.expr(e.length)
        length = checker.constant(e.length)
        if not isinstance(length, int) or isinstance(length, bool) or length < 0:
            checker.err.emit(er.ERR.GE2018, e.length.loc, expr=expr_string(e.length))
            return None
        return ArrayType(elem, length) if elem is not None else None

    if isinstance(e, A.MapTypeExpr):
        key = resolve_type(checker, e.key)
        value = resolve_type(checker, e.value)
        return MapType(key, value) if key is not None and value is not None else None

    if isinstance(e, A.ChanTypeExpr):
        elem = resolve_type(checker, e.elem)
        direction = ChanDir.RECV if e.recv_only else ChanDir.BOTH
        return ChanType(elem, direction) if elem is not None else None

    if isinstance(e, A.FuncTypeExpr):
        return signature_of(checker, e.params, e.results)

    if isinstance(e, A.StructTypeExpr):
        fields = []
        for f in e.fields:
            ty = resolve_type(checker, f.ty)
            if ty is None:
                return None
            name = f.name if f.name is not None else _embedded_name(f.ty)
            fields.append(StructField(name, ty, embedded=f.name is None))
        return StructType(tuple(fields))

    if isinstance(e, A.InterfaceTypeExpr):
        methods = []
        embeddeds = []
        for m in e.methods:
            ty = resolve_type(checker, m.ty)
            if ty is None:
                continue
            if m.name is None:
                embeddeds.append(ty)
            else:
                methods.append((m.name, ty))
        return InterfaceType(tuple(methods), tuple(embeddeds))

    checker.err.emit(er.ERR.GE2008, e.loc, name=expr_string(e))
    return None


def _embedded_name(e) -> str:
    if isinstance(e, A.PointerTypeExpr):
        e = e.elem
    if isinstance(e, A.Selector):
        return e.attr
    return e.id


def param_type(checker: 'TypeChecker', p: A.Param) -> Optional[Type]:
    """Resolved type of a parameter as seen inside the function (`...T` is []T)."""
    key = id(p)
    if key not in checker.param_types:
        ty = resolve_type(checker, p.ty)
        if ty is not None and p.variadic:
            ty = SliceType(ty)
        checker.param_types[key] = ty
    return checker.param_types[key]


def signature_of(checker: 'TypeChecker', params: List[A.Param], results: List[A.Param]) -> Optional[Signature]:
    param_types = [param_type(checker, p) for p in params]
    result_types = [param_type(checker, p) for p in results]
    if any(t is None for t in param_types) or any(t is None for t in result_types):
        return None
    variadic = bool(params) and params[-1].variadic
    return Signature(tuple(param_types), tuple(result_types), variadic)


# === Type declarations ===

def declare_type_specs(checker: 'TypeChecker', specs: List[A.TypeSpec], scope=None) -> List[Object]:
    """Declare named types and aliases, then resolve them.

    All names are declared first so specs may refer to each other in any
    order, as package-level declarations do.
    """
    target = scope or checker.scope
    objects = []
    for spec in specs:
        if spec.is_alias:
            obj = Object(ObjKind.TYPE, spec.name, None, loc=spec.loc, decl=spec)
        else:
            named = NamedType(spec.name, pkg=checker.qualifier_name)
            obj = Object(ObjKind.TYPE, spec.name, named, loc=spec.loc, decl=spec)
        checker.declare(obj, target)
        objects.append(obj)

    for obj in objects:
        if obj.decl is None:
            continue
        if isinstance(obj.ty, NamedType):
            resolve_named(checker, obj)
        else:
            resolve_alias(checker, obj)
    return objects


def resolve_alias(checker: 'TypeChecker', obj: Object) -> None:
    spec: A.TypeSpec = obj.decl
    if obj.resolving:
        checker.err.emit(er.ERR.GE2013, spec.loc, name=spec.name)
        return
    obj.resolving = True
    try:
        obj.ty = resolve_type(checker, spec.ty)
    finally:
        obj.resolving = False
        obj.decl = None


def resolve_named(checker: 'TypeChecker', obj: Object) -> None:
    """Set the underlying type of a defined type, resolving `type A B` chains."""
    named: NamedType = obj.ty
    spec: A.TypeSpec = obj.decl
    if named.underlying_type is not None or obj.decl is None:
        return
    if obj.resolving:
        checker.err.emit(er.ERR.GE2013, spec.loc, name=spec.name)
        named.underlying_type = InterfaceType()
        return
    obj.resolving = True
    try:
        ty = resolve_type(checker, spec.ty)
        if isinstance(ty, NamedType) and ty.underlying_type is None:
            base = _named_object(checker, spec.ty)
            if base is not None and base.decl is not None:
                resolve_named(checker, base)
        named.underlying_type = underlying(ty) if ty is not None else InterfaceType()
    finally:
        obj.resolving = False
        obj.decl = None


def _named_object(checker: 'TypeChecker', e) -> Optional[Object]:
    e = A.unparen(e)
    if isinstance(e, A.Name):
        obj = checker.lookup(e.id)
        if obj is not None and obj.kind is ObjKind.TYPE and isinstance(obj.ty, NamedType):
            return obj
    return None
