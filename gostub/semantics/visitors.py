"""
AST Visitor Pattern implementation for gostub.

This module provides base visitor classes for traversing and processing AST nodes
using the Visitor Pattern, eliminating the need for large match/isinstance chains.

Usage:
    1. Subclass NodeVisitor[T] for visitors that return values
    2. Subclass RecursiveVisitor for analysis passes (void return)

Example:
    class CallCounter(RecursiveVisitor):
        def __init__(self):
            self.count = 0

        def visit_call(self, node: Call) -> None:
            self.count += 1
            self.generic_visit(node)  # Continue into callee and arguments

    counter = CallCounter()
    counter.visit(program)
"""
from __future__ import annotations
from abc import ABC
from dataclasses import fields, is_dataclass
from typing import Any, Iterator, TypeVar, Generic

from gostub.internals.report import Span
from gostub.semantics.ast import Node, ValueSpec

T = TypeVar('T')


class NodeVisitor(ABC, Generic[T]):
    """
    Abstract base class for AST node visitors.

    Uses dynamic method dispatch on the lower-cased class name: a `Call`
    node is routed to `visit_call`, a `ForRange` to `visit_forrange`.
    """

    def visit(self, node: Any) -> T:
        method_name = f'visit_{type(node).__name__.lower()}'
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: Any) -> T:
        """
        Default visitor that raises an error.
        Subclasses should either implement specific visit_* methods
        or override this to provide default behavior.
        """
        raise NotImplementedError(
            f"Visitor {self.__class__.__name__} doesn't handle {type(node).__name__}"
        )


def iter_child_nodes(node: Any) -> Iterator[Any]:
    """Yield the AST children of `node` in source order.

    Children are dataclass-valued fields (nodes, params) and lists of them;
    spans and plain values are skipped.
    """
    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, list):
            for item in value:
                if is_dataclass(item) and not isinstance(item, Span):
                    yield item
        elif is_dataclass(value) and not isinstance(value, Span):
            yield value


class RecursiveVisitor(NodeVisitor[None]):
    """
    Base class for visitors that recursively traverse the entire AST.

    Every node without a specific visit_* method has its children visited
    in source order. Subclasses override the visit_* methods they care
    about and call generic_visit() to keep descending.
    """

    def generic_visit(self, node: Any) -> None:
        for child in iter_child_nodes(node):
            self.visit(child)

    def visit_valuespec(self, node: ValueSpec) -> None:
        # Implicitly repeated const lines share their type and value nodes
        # with the line they repeat.
        if not node.implicit:
            self.generic_visit(node)


def walk(node: Node) -> Iterator[Any]:
    """Pre-order iterator over `node` and all of its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        children = list(iter_child_nodes(current))
        if isinstance(current, ValueSpec) and current.implicit:
            children = []
        stack.extend(reversed(children))
