"""Find the call to an undeclared function."""
from __future__ import annotations
from typing import Optional

from gostub.semantics.ast import Call, Name, Program
from gostub.semantics.visitors import RecursiveVisitor
from .exceptions import CallSiteNotFound
from .model import CallSite


class _CallFinder(RecursiveVisitor):
    """Pre-order search for the first `name(...)` call.

    The search stops at the first match; calls through selectors,
    parenthesised callees or call results never match.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.found: Optional[Call] = None

    def visit(self, node) -> None:
        if self.found is None:
            super().visit(node)

    def visit_call(self, node: Call) -> None:
        if isinstance(node.fun, Name) and node.fun.id == self.name:
            self.found = node
            return
        self.generic_visit(node)


def locate_call_site(program: Program, name: str) -> CallSite:
    finder = _CallFinder(name)
    finder.visit(program)
    if finder.found is None:
        raise CallSiteNotFound(name)
    return CallSite(name, finder.found, list(finder.found.args))
