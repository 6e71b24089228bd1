# semantics/passes/collect.py
"""
Pass 0: package-level declarations.

Declares every package-level name before any body is checked, so uses may
precede declarations as Go allows:
- Imports, bound in the file scope (dot imports copy exported names)
- Types, named and aliased, resolved together
- Functions, with signatures resolved once all types exist
- Methods, attached to their receiver's named type
- Vars and consts, typed lazily on first use
"""
from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional, Protocol

from gostub.internals.report import Reporter
from gostub.internals import errors as er
from gostub.semantics import ast as A
from gostub.semantics.symbols import Object, ObjKind, Package
from gostub.semantics.typesys import NamedType
from .types import PendingValue
from .types.type_exprs import declare_type_specs, signature_of

if TYPE_CHECKING:
    from .types import TypeChecker


class Importer(Protocol):
    def import_package(self, path: str) -> Optional[Package]: ...


class CollectorPass:
    """Phase 0: bind package-level names in the checker's package and file scopes."""

    def __init__(self, reporter: Reporter, checker: 'TypeChecker', importer: Optional[Importer] = None) -> None:
        self.r = reporter
        self.checker = checker
        self.importer = importer

    def run(self, program: A.Program) -> None:
        for spec in program.imports:
            self._import(spec)

        pkg_scope = self.checker.pkg.scope
        type_specs: List[A.TypeSpec] = []
        funcs: List[A.FuncDecl] = []
        for decl in program.decls:
            if isinstance(decl, A.TypeDecl):
                type_specs.extend(decl.specs)
            elif isinstance(decl, A.FuncDecl):
                funcs.append(decl)
                if decl.recv is None and decl.name != "init":
                    self.checker.declare(Object(ObjKind.FUNC, decl.name, loc=decl.name_span or decl.loc),
                                         pkg_scope)
            elif isinstance(decl, (A.VarDecl, A.ConstDecl)):
                self._declare_values(decl)

        declare_type_specs(self.checker, type_specs, pkg_scope)

        for fn in funcs:
            sig = signature_of(self.checker, fn.params, fn.results)
            if fn.recv is None:
                obj = pkg_scope.lookup_local(fn.name)
                if obj is not None and obj.kind is ObjKind.FUNC and obj.ty is None:
                    obj.ty = sig
            elif sig is not None:
                self._attach_method(fn, sig)

    # === Imports ===

    def _import(self, spec: A.ImportSpec) -> None:
        pkg = self.importer.import_package(spec.path) if self.importer is not None else None
        if pkg is None:
            er.emit(self.r, er.ERR.GE1002, spec.loc, path=spec.path)
            return
        self.checker.pkg.imports[spec.path] = pkg
        name = spec.local_name
        if name == "_":
            return
        if name == ".":
            for obj in pkg.scope:
                if obj.name[:1].isupper():
                    self.checker.declare(obj, self.checker.file_scope)
            return
        self.checker.declare(Object(ObjKind.PKG, name, loc=spec.loc, package=pkg), self.checker.file_scope)

    # === Values ===

    def _declare_values(self, decl) -> None:
        const = isinstance(decl, A.ConstDecl)
        kind = ObjKind.CONST if const else ObjKind.VAR
        for spec in decl.specs:
            spans = spec.name_spans or [None] * len(spec.names)
            objects = [Object(kind, name, loc=span or spec.loc) for name, span in zip(spec.names, spans)]
            pending = PendingValue(spec, objects, self.checker.file_scope, const)
            for obj in objects:
                obj.decl = pending
                self.checker.declare(obj, self.checker.pkg.scope)

    # === Methods ===

    def _attach_method(self, fn: A.FuncDecl, sig) -> None:
        base = _receiver_base(fn.recv.ty)
        if base is None:
            return
        obj = self.checker.pkg.scope.lookup_local(base)
        if obj is None or not isinstance(obj.ty, NamedType):
            return
        if fn.name in obj.ty.methods:
            er.emit(self.r, er.ERR.GE1003, fn.name_span or fn.loc, name=f"{base}.{fn.name}")
            return
        obj.ty.methods[fn.name] = sig


def _receiver_base(e) -> Optional[str]:
    e = A.unparen(e)
    if isinstance(e, A.PointerTypeExpr):
        e = A.unparen(e.elem)
    elif isinstance(e, A.UnaryOp) and e.op == "*":
        e = A.unparen(e.expr)
    return e.id if isinstance(e, A.Name) else None
