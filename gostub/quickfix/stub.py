"""
Stub generation pipeline.

parse -> type check -> locate call -> resolve arguments -> dedupe names -> render

Type-checking problems (the undeclared callee itself, unrelated mistakes
elsewhere in the file) are collected as diagnostics and never stop the
pipeline; only a missing call site or an argument whose type cannot be
determined does.
"""
from __future__ import annotations
from typing import Optional

from lark import UnexpectedInput

from gostub.internals.parser import improve_parse_error, parse_to_ast
from gostub.internals.parse_errors import handle_parse_exception, parse_error_span
from gostub.internals.report import Reporter
from gostub.semantics.ast import Program
from gostub.semantics.ast_builder import GoSyntaxError
from gostub.semantics.importer import StdlibImporter
from gostub.semantics.info import TypeInfo
from gostub.semantics.passes.collect import Importer
from gostub.semantics.semantic_analyzer import SemanticAnalyzer
from gostub.semantics.typesys import NamedType
from .dedupe import ensure_unique_names
from .exceptions import ParseFailure
from .locator import locate_call_site
from .render import render_stub
from .resolver import ArgumentResolver, NamingPolicy


class StubGenerator:
    """Generate stubs for one configuration; reusable across sources.

    `reporter` holds the checker diagnostics of the last run.
    """

    def __init__(self, policy: NamingPolicy = NamingPolicy.IDENTIFIER,
                 importer: Optional[Importer] = None) -> None:
        self.policy = NamingPolicy(policy)
        self.importer = importer if importer is not None else StdlibImporter()
        self.reporter: Optional[Reporter] = None

    def parse(self, source: str) -> Program:
        if self.reporter is None:
            self.reporter = Reporter(source)
        try:
            program, _ = parse_to_ast(source)
        except (UnexpectedInput, GoSyntaxError) as e:
            handle_parse_exception(e, self.reporter, source)
            message = improve_parse_error(e, source) if isinstance(e, UnexpectedInput) else str(e)
            raise ParseFailure(message, parse_error_span(e)) from e
        return program

    def check(self, program: Program) -> TypeInfo:
        return SemanticAnalyzer(self.reporter, importer=self.importer).check(program)

    def generate(self, undeclared_name: str, source: str, filename: str = "src.go") -> str:
        self.reporter = Reporter(source, filename)
        program = self.parse(source)
        info = self.check(program)
        site = locate_call_site(program, undeclared_name)
        candidates = ArgumentResolver(info, self.policy).resolve(site.arguments, spread=site.call.ellipsis)
        params = ensure_unique_names(candidates)
        return render_stub(undeclared_name, params, import_qualifier(program))


def import_qualifier(program: Program):
    """Prefix imported named types with the name their import binds in `program`."""
    local_names = {}
    for spec in program.imports:
        default_name = spec.path.rsplit("/", 1)[-1]
        local_names.setdefault(default_name, spec.local_name)

    def qualify(named: NamedType) -> Optional[str]:
        if named.pkg is None:
            return None
        name = local_names.get(named.pkg, named.pkg)
        if name == "_":
            return named.pkg
        return None if name == "." else name

    return qualify


def generate_function_stub(undeclared_name: str, source: str, *,
                           policy: NamingPolicy = NamingPolicy.IDENTIFIER,
                           importer: Optional[Importer] = None,
                           filename: str = "src.go") -> str:
    """Return `func <undeclared_name>(...) {}` for the first call to it in `source`.

    Raises ParseFailure, CallSiteNotFound or UnresolvableArgumentType.
    """
    return StubGenerator(policy, importer).generate(undeclared_name, source, filename)
