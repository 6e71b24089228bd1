# semantics/passes/types/statements.py
"""
Statement checking and local declarations.

Declares locals as they appear so later statements (and the quick-fix
resolver) see the right types: `s := "x"` declares s as string, not
untyped string.
"""
from __future__ import annotations
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from gostub.internals import errors as er
from gostub.semantics import ast as A
from gostub.semantics.ast_printer import expr_string
from gostub.semantics.symbols import Object, ObjKind, ScopeKind
from gostub.semantics.typesys import (
    Type, BasicType, PointerType, SliceType, ArrayType, MapType, ChanType, TupleType,
    INTEGER_TYPES, STRING_TYPES,
    underlying, default, is_untyped, basic_kind, is_interface,
)
from .constants import representable
from .type_exprs import declare_type_specs, param_type

if TYPE_CHECKING:
    from . import TypeChecker


def check_block(checker: 'TypeChecker', block: A.Block, new_scope: bool = True) -> None:
    if not new_scope:
        for stmt in block.statements:
            check_statement(checker, stmt)
        return
    with checker.scoped(ScopeKind.BLOCK):
        for stmt in block.statements:
            check_statement(checker, stmt)


def check_statement(checker: 'TypeChecker', s) -> None:
    if s is None:
        return
    if isinstance(s, A.ExprStmt):
        checker.expr(s.expr)
    elif isinstance(s, A.SendStmt):
        ch = checker.value(s.chan)
        elem = underlying(ch).elem if ch is not None and isinstance(underlying(ch), ChanType) else None
        checker.value(s.value, elem)
    elif isinstance(s, A.IncDec):
        checker.value(s.target)
    elif isinstance(s, A.Assign):
        check_assign(checker, s)
    elif isinstance(s, A.ShortVarDecl):
        check_short_var_decl(checker, s)
    elif isinstance(s, A.DeclStmt):
        check_local_decl(checker, s.decl)
    elif isinstance(s, A.Return):
        check_return(checker, s)
    elif isinstance(s, A.If):
        check_if(checker, s)
    elif isinstance(s, A.For):
        with checker.scoped():
            check_statement(checker, s.init)
            if s.cond is not None:
                checker.value(s.cond)
            check_statement(checker, s.post)
            check_block(checker, s.body)
    elif isinstance(s, A.ForRange):
        check_range(checker, s)
    elif isinstance(s, A.Switch):
        check_switch(checker, s)
    elif isinstance(s, A.TypeSwitch):
        check_type_switch(checker, s)
    elif isinstance(s, A.Select):
        check_select(checker, s)
    elif isinstance(s, A.Labeled):
        check_statement(checker, s.stmt)
    elif isinstance(s, (A.Go, A.Defer)):
        checker.expr(s.call)
    elif isinstance(s, A.Block):
        check_block(checker, s)
    # Branch statements carry nothing to check.


# === Assignments and declarations ===

def _rhs_types(checker: 'TypeChecker', lhs_count: int, values: List[A.Expr],
               hints: Optional[List[Optional[Type]]] = None) -> Optional[List[Optional[Type]]]:
    """Types produced by a right-hand side for `lhs_count` targets.

    Handles `a, b := f()` and the comma-ok forms. Returns None after
    reporting a count mismatch.
    """
    if len(values) == 1 and lhs_count > 1:
        v = values[0]
        ty = checker.expr(v)
        if isinstance(ty, TupleType):
            if len(ty) != lhs_count:
                er.emit(checker.reporter, er.ERR.GE2003, v.loc, lhs=lhs_count, rhs=len(ty))
                return None
            return list(ty.types)
        if lhs_count == 2 and _comma_ok(v):
            return [ty, BasicType.UNTYPED_BOOL]
        er.emit(checker.reporter, er.ERR.GE2003, v.loc, lhs=lhs_count, rhs=1)
        return None

    hints = hints or [None] * len(values)
    types = [checker.value(v, h) for v, h in zip(values, hints + [None] * len(values))]
    if len(values) != lhs_count:
        loc = values[0].loc if values else None
        er.emit(checker.reporter, er.ERR.GE2003, loc, lhs=lhs_count, rhs=len(values))
        return None
    return types


def _comma_ok(e: A.Expr) -> bool:
    e = A.unparen(e)
    if isinstance(e, A.TypeAssert):
        return True
    if isinstance(e, A.UnaryOp) and e.op == "<-":
        return True
    # Map indexing: the checker has already typed it, so only the shape is checked.
    return isinstance(e, A.Index)


def check_assign(checker: 'TypeChecker', s: A.Assign) -> None:
    target_types = []
    for t in s.targets:
        if isinstance(t, A.Name) and t.id == "_":
            target_types.append(None)
        else:
            target_types.append(checker.value(t))
    if s.op != "=":
        for v in s.values:
            checker.value(v, target_types[0] if target_types else None)
        return
    _rhs_types(checker, len(s.targets), s.values, target_types)


def check_short_var_decl(checker: 'TypeChecker', s: A.ShortVarDecl) -> None:
    types = _rhs_types(checker, len(s.names), s.values)
    if types is None:
        types = [None] * len(s.names)

    values = s.values if len(s.values) == len(s.names) else [None] * len(s.names)
    new = 0
    for name, ty, e in zip(s.names, types, values):
        if name.id == "_":
            continue
        existing = checker.scope.lookup_local(name.id)
        if existing is not None and existing.kind is ObjKind.VAR:
            checker.info.record_use(name, existing)
            if existing.ty is not None:
                checker.info.record_type(name, existing.ty)
            continue
        new += 1
        var_ty = default_value(checker, e, ty) if ty is not None else None
        obj = Object(ObjKind.VAR, name.id, var_ty, loc=name.loc)
        checker.declare(obj)
        checker.info.record_use(name, obj)
        if var_ty is not None:
            checker.info.record_type(name, var_ty)
    if new == 0:
        er.emit(checker.reporter, er.ERR.GE1007, s.loc)


def check_local_decl(checker: 'TypeChecker', decl) -> None:
    if isinstance(decl, A.TypeDecl):
        declare_type_specs(checker, decl.specs)
        return
    const = isinstance(decl, A.ConstDecl)
    kind = ObjKind.CONST if const else ObjKind.VAR
    for spec in decl.specs:
        results = type_value_spec(checker, spec, const)
        # Locals come into scope after their initializers are checked.
        for name, span, (ty, value) in zip(spec.names, _spans(spec), results):
            checker.declare(Object(kind, name, ty, loc=span or spec.loc, value=value))


def default_value(checker: 'TypeChecker', e: Optional[A.Expr], ty: Type) -> Type:
    """Type a variable initialized from `e` takes, reporting constants that overflow it."""
    target = default(ty)
    check_representable(checker, e, ty, target)
    return target


def check_representable(checker: 'TypeChecker', e: Optional[A.Expr], ty: Optional[Type], target: Type) -> None:
    if e is None or not is_untyped(ty):
        return
    value = checker.info.value_of(e)
    kind = basic_kind(target)
    if value is not None and kind is not None and not representable(value, kind):
        er.emit(checker.reporter, er.ERR.GE2019, e.loc, expr=expr_string(e), kind=str(ty),
                ty=str(target), context="variable declaration")


def _spans(spec: A.ValueSpec):
    return spec.name_spans or [None] * len(spec.names)


def type_value_spec(checker: 'TypeChecker', spec: A.ValueSpec, const: bool) -> List[Tuple[Optional[Type], Any]]:
    """Type each name of a var or const spec.

    Vars take the declared type or their initializer's default type.
    Consts keep untyped kinds unless a type is declared.
    """
    n = len(spec.names)
    saved_iota = checker.iota
    if const:
        checker.iota = spec.iota
    try:
        declared = checker.resolve_type(spec.ty) if spec.ty is not None else None
        if not spec.values:
            return [(declared, None)] * n

        types = _rhs_types(checker, n, spec.values, [declared] * len(spec.values))
        if types is None:
            return [(declared, None)] * n

        out = []
        for i, ty in enumerate(types[:n]):
            value = checker.constant(spec.values[i]) if const and i < len(spec.values) else None
            e = spec.values[i] if len(spec.values) == n else None
            if declared is not None:
                if not const:
                    check_representable(checker, e, ty, declared)
                ty = declared
            elif ty is not None and not const:
                ty = default_value(checker, e, ty)
            out.append((ty, value))
        out.extend([(declared, None)] * (n - len(out)))
        return out
    finally:
        checker.iota = saved_iota


def declare_params(checker: 'TypeChecker', params: List[A.Param], results: List[A.Param]) -> None:
    for p in list(params) + list(results):
        if p is None or p.name is None:
            continue
        checker.declare(Object(ObjKind.VAR, p.name, param_type(checker, p), loc=p.loc))


# === Control flow ===

def check_return(checker: 'TypeChecker', s: A.Return) -> None:
    results = checker.func_results
    if results is not None and len(results) > 1 and len(s.values) == 1:
        checker.expr(s.values[0])
        return
    hints = list(results) if results is not None and len(results) == len(s.values) else None
    for i, v in enumerate(s.values):
        checker.value(v, hints[i] if hints else None)


def check_if(checker: 'TypeChecker', s: A.If) -> None:
    with checker.scoped():
        check_statement(checker, s.init)
        checker.value(s.cond)
        check_block(checker, s.then)
        if isinstance(s.orelse, A.If):
            check_if(checker, s.orelse)
        elif s.orelse is not None:
            check_block(checker, s.orelse)


def check_switch(checker: 'TypeChecker', s: A.Switch) -> None:
    with checker.scoped():
        check_statement(checker, s.init)
        tag = checker.value(s.tag) if s.tag is not None else None
        for clause in s.clauses:
            for e in clause.exprs or []:
                checker.value(e, tag)
            with checker.scoped():
                for stmt in clause.body:
                    check_statement(checker, stmt)


def check_type_switch(checker: 'TypeChecker', s: A.TypeSwitch) -> None:
    with checker.scoped():
        check_statement(checker, s.init)
        operand = checker.value(s.value)
        if operand is not None and not is_interface(operand):
            er.emit(checker.reporter, er.ERR.GE2009, s.value.loc, expr=expr_string(s.value), ty=str(operand))
        for clause in s.clauses:
            types = [_case_type(checker, e) for e in clause.exprs or []]
            with checker.scoped():
                if s.bind is not None and s.bind.id != "_":
                    # Only a single-type case narrows; default, nil and lists keep the operand type.
                    ty = types[0] if len(types) == 1 and types[0] is not None else operand
                    checker.declare(Object(ObjKind.VAR, s.bind.id, ty, loc=s.bind.loc))
                for stmt in clause.body:
                    check_statement(checker, stmt)


def _case_type(checker: 'TypeChecker', e: A.Expr) -> Optional[Type]:
    """Type named by a type switch case; None for `nil`."""
    if isinstance(e, A.Name):
        obj = checker.lookup(e.id)
        if obj is not None and obj.kind is ObjKind.NIL:
            checker.info.record_use(e, obj)
            return None
    return checker.resolve_type(e)


def check_select(checker: 'TypeChecker', s: A.Select) -> None:
    for clause in s.clauses:
        with checker.scoped():
            check_statement(checker, clause.comm)
            for stmt in clause.body:
                check_statement(checker, stmt)


def range_types(ty: Type) -> Optional[Tuple[Optional[Type], Optional[Type]]]:
    """Key and value types produced by ranging over `ty`, or None."""
    under = underlying(ty)
    if isinstance(under, PointerType) and isinstance(underlying(under.elem), ArrayType):
        under = underlying(under.elem)
    if isinstance(under, (SliceType, ArrayType)):
        return BasicType.INT, under.elem
    if isinstance(under, BasicType) and under in STRING_TYPES:
        return BasicType.INT, BasicType.RUNE
    if isinstance(under, MapType):
        return under.key, under.value
    if isinstance(under, ChanType):
        return under.elem, None
    if isinstance(under, BasicType) and under in INTEGER_TYPES:
        return default(ty) if is_untyped(ty) else ty, None
    return None


def check_range(checker: 'TypeChecker', s: A.ForRange) -> None:
    with checker.scoped():
        ty = checker.value(s.iterable)
        kv = range_types(ty) if ty is not None else None
        if ty is not None and kv is None:
            er.emit(checker.reporter, er.ERR.GE2007, s.iterable.loc,
                    expr=expr_string(s.iterable), ty=str(ty))
        key_ty, value_ty = kv or (None, None)

        targets = [(s.key, key_ty), (s.value, value_ty)]
        for target, target_ty in targets:
            if target is None:
                continue
            if not s.define:
                if not (isinstance(target, A.Name) and target.id == "_"):
                    checker.value(target)
                continue
            if isinstance(target, A.Name) and target.id != "_":
                obj = Object(ObjKind.VAR, target.id, target_ty, loc=target.loc)
                checker.declare(obj)
                checker.info.record_use(target, obj)
                if target_ty is not None:
                    checker.info.record_type(target, target_ty)
        check_block(checker, s.body)
