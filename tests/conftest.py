"""Shared fixtures for the gostub test suite."""
from __future__ import annotations

import textwrap
from dataclasses import dataclass

import pytest

from gostub.internals.parser import parse_to_ast
from gostub.internals.report import Reporter
from gostub.semantics.ast import Call, Name, Program
from gostub.semantics.importer import StdlibImporter
from gostub.semantics.info import TypeInfo
from gostub.semantics.semantic_analyzer import SemanticAnalyzer
from gostub.semantics.visitors import walk


def go(src: str) -> str:
    """Dedent an indented Go snippet so tests can inline it."""
    return textwrap.dedent(src).lstrip("\n")


@dataclass
class Checked:
    program: Program
    info: TypeInfo
    reporter: Reporter

    def calls(self, name: str):
        return [n for n in walk(self.program)
                if isinstance(n, Call) and isinstance(n.fun, Name) and n.fun.id == name]

    def call(self, name: str) -> Call:
        return self.calls(name)[0]

    def names(self, ident: str):
        return [n for n in walk(self.program) if isinstance(n, Name) and n.id == ident]

    def messages(self):
        return [d.message for d in self.reporter.items]


@pytest.fixture(scope="session")
def importer() -> StdlibImporter:
    """One importer for the whole session; loaded packages are cached."""
    return StdlibImporter()


@pytest.fixture
def check(importer):
    """Parse and type-check a Go snippet."""
    def _check(src: str) -> Checked:
        text = go(src)
        program, _ = parse_to_ast(text)
        reporter = Reporter(text, "test.go")
        info = SemanticAnalyzer(reporter, importer=importer).check(program)
        return Checked(program, info, reporter)
    return _check


@pytest.fixture
def parse():
    def _parse(src: str) -> Program:
        program, _ = parse_to_ast(go(src))
        return program
    return _parse
