# semantics/passes/types/__init__.py
"""
Pass 1: Type checking and inference.

Records a type in TypeInfo for every expression it can type, and reports:
- Undeclared names and unknown package members (GE1001, GE1004)
- Missing fields and methods (GE2001)
- Calls of non-functions and argument count mismatches (GE2002, GE2012)
- Assignment count mismatches (GE2003)
- Operand type mismatches (GE2004, GE2016)

Problems are reported and checking continues; nothing is raised.

Depends on:
- Pass 0: package-level objects declared by CollectorPass

Architecture:
The TypeChecker class holds the scope chain and delegates to specialized modules:
- type_exprs: type expressions to Types, named type declarations
- constants: constant folding for array lengths and const declarations
- expressions: expression inference
- calls: function calls, conversions and builtins
- statements: statements, value specs and local declarations
"""
from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from gostub.internals.report import Reporter
from gostub.internals import errors as er
from gostub.semantics.error_reporter import PassErrorReporter
from gostub.semantics.info import TypeInfo
from gostub.semantics.symbols import Object, ObjKind, Package, Scope, ScopeKind
from gostub.semantics.typesys import Type, TupleType, BasicType, is_untyped
from gostub.semantics.ast import (
    Program, FuncDecl, VarDecl, ConstDecl, ValueSpec, Block, Expr, Param,
)

from .type_exprs import resolve_type, type_operand, signature_of
from .constants import evaluate
from .expressions import infer_expression
from .statements import check_statement, check_block, type_value_spec, declare_params


@dataclass(eq=False)
class PendingValue:
    """Deferred typing of a package-level var or const spec."""
    spec: ValueSpec
    objects: List[Object]
    scope: Scope
    const: bool


class TypeChecker:
    """
    Pass 1: Type checking.

    The coordinator keeps the current scope and the TypeInfo being filled;
    the per-construct logic lives in the sibling modules.
    """

    def __init__(self, reporter: Reporter, info: TypeInfo, pkg: Package, file_scope: Scope,
                 qualifier_name: Optional[str] = None) -> None:
        self.reporter = reporter
        self.err = PassErrorReporter(reporter)
        self.info = info
        self.pkg = pkg
        self.file_scope = file_scope
        self.scope = file_scope
        # Package name stamped on named types declared here; None for the
        # package being checked so its types print unqualified.
        self.qualifier_name = qualifier_name
        self.iota: Optional[int] = None
        self.func_results: Optional[tuple] = None
        # Resolved parameter types by id(Param), shared by Pass 0 and Pass 1.
        self.param_types: Dict[int, Optional[Type]] = {}

    # === Entry point ===

    def check(self, program: Program) -> TypeInfo:
        for decl in program.decls:
            if isinstance(decl, FuncDecl):
                self.check_func(decl)
            elif isinstance(decl, (VarDecl, ConstDecl)):
                for spec in decl.specs:
                    for name in spec.names:
                        obj = self.pkg.scope.lookup_local(name)
                        if obj is not None and obj.pending:
                            self.resolve_object(obj)
        return self.info

    def check_func(self, fn: FuncDecl) -> None:
        if fn.body is None:
            return
        params = ([fn.recv] if fn.recv is not None else []) + fn.params
        with self.scoped(ScopeKind.FUNCTION):
            sig = signature_of(self, fn.params, fn.results)
            declare_params(self, params, fn.results)
            saved, self.func_results = self.func_results, sig.results if sig else None
            try:
                check_block(self, fn.body, new_scope=False)
            finally:
                self.func_results = saved

    # === Scopes and objects ===

    @contextmanager
    def scoped(self, kind: ScopeKind = ScopeKind.BLOCK) -> Iterator[Scope]:
        saved = self.scope
        self.scope = saved.child(kind)
        try:
            yield self.scope
        finally:
            self.scope = saved

    @contextmanager
    def in_scope(self, scope: Scope) -> Iterator[Scope]:
        saved = self.scope
        self.scope = scope
        try:
            yield scope
        finally:
            self.scope = saved

    def lookup(self, name: str) -> Optional[Object]:
        return self.scope.lookup(name)

    def declare(self, obj: Object, scope: Optional[Scope] = None) -> None:
        target = scope or self.scope
        prev = target.declare(obj)
        if prev is not None:
            self.err.emit(er.ERR.GE1003, obj.loc, name=obj.name)

    def resolve_object(self, obj: Object) -> Optional[Type]:
        """Type of `obj`, typing its package-level declaration on first use."""
        if not obj.pending:
            return obj.ty
        if obj.resolving:
            return None
        pending: PendingValue = obj.decl
        for o in pending.objects:
            o.resolving = True
        saved_iota = self.iota
        try:
            with self.in_scope(pending.scope):
                results = type_value_spec(self, pending.spec, pending.const)
            for o, (ty, value) in zip(pending.objects, results):
                o.ty, o.value, o.decl = ty, value, None
        finally:
            self.iota = saved_iota
            for o in pending.objects:
                o.resolving = False
        return obj.ty

    # === Delegation ===

    def expr(self, e: Expr, expected: Optional[Type] = None) -> Optional[Type]:
        """Infer and record the type of `e`; multi-value calls give a TupleType."""
        ty = infer_expression(self, e, expected)
        if ty is not None:
            self.info.record_type(e, ty)
            if is_untyped(ty) and ty is not BasicType.UNTYPED_NIL:
                value = evaluate(self, e)
                if value is not None:
                    self.info.record_value(e, value)
        return ty

    def value(self, e: Expr, expected: Optional[Type] = None) -> Optional[Type]:
        """Like expr(), for single-value contexts."""
        from gostub.semantics.ast_printer import expr_string
        ty = self.expr(e, expected)
        if isinstance(ty, TupleType):
            if len(ty) == 0:
                self.err.emit(er.ERR.GE2011, e.loc, expr=expr_string(e))
            else:
                self.err.emit(er.ERR.GE2010, e.loc, expr=expr_string(e), ty=str(ty))
            return None
        return ty

    def resolve_type(self, e: Expr) -> Optional[Type]:
        return resolve_type(self, e)

    def type_operand(self, e: Expr) -> Optional[Type]:
        return type_operand(self, e)

    def constant(self, e: Expr) -> Any:
        return evaluate(self, e)

    def stmt(self, s) -> None:
        check_statement(self, s)

    def block(self, b: Block) -> None:
        check_block(self, b)

    def signature(self, params: List[Param], results: List[Param]):
        return signature_of(self, params, results)
