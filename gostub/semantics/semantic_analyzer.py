# semantics/semantic_analyzer.py
from __future__ import annotations
from typing import Optional

from gostub.internals.report import Reporter
from gostub.semantics.ast import Program
from gostub.semantics.info import TypeInfo
from gostub.semantics.passes.collect import CollectorPass, Importer
from gostub.semantics.passes.types import TypeChecker
from gostub.semantics.symbols import ObjKind, Package, Scope, ScopeKind
from gostub.semantics.universe import universe


class SemanticAnalyzer:
    """
    Semantic analysis coordinator that runs the checking passes over one file.

    Pass execution order:
      - Pass 0: Package-level declarations (imports, types, functions, methods, values)
      - Pass 1: Type checking and inference (fills TypeInfo)

    Problems are reported to the Reporter; analysis always runs to the end so
    partially broken files still yield types for everything that can be typed.
    """

    def __init__(self, reporter: Reporter, importer: Optional[Importer] = None) -> None:
        self.reporter = reporter
        self.importer = importer
        self.package: Optional[Package] = None

    def check(self, program: Program, path: str = "main") -> TypeInfo:
        info = TypeInfo()
        checker = self._checker(program, path, info, qualifier_name=None)

        # Pass 0: collect package-level declarations
        CollectorPass(self.reporter, checker, self.importer).run(program)

        # Pass 1: type check bodies and package-level initializers
        checker.check(program)
        return info

    def declare(self, program: Program, path: str) -> Package:
        """Collect and type a dependency's declarations without checking bodies.

        Named types declared here carry the package name, so they print
        qualified (`http.Request`) in the importing file.
        """
        checker = self._checker(program, path, TypeInfo(), qualifier_name=program.package)
        CollectorPass(self.reporter, checker, self.importer).run(program)
        for obj in list(checker.pkg.scope):
            if obj.pending and obj.kind in (ObjKind.VAR, ObjKind.CONST):
                checker.resolve_object(obj)
        return checker.pkg

    def _checker(self, program: Program, path: str, info: TypeInfo, qualifier_name: Optional[str]) -> TypeChecker:
        pkg = Package(path, program.package, Scope(universe(), ScopeKind.PACKAGE))
        file_scope = Scope(pkg.scope, ScopeKind.FILE)
        self.package = pkg
        return TypeChecker(self.reporter, info, pkg, file_scope, qualifier_name=qualifier_name)
