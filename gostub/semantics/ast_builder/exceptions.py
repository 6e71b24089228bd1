"""Custom exceptions for AST building errors."""
from __future__ import annotations
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from gostub.internals.report import Span


class GoSyntaxError(Exception):
    """Raised when the grammar accepts a construct Go itself rejects
    (mixed named and unnamed parameters, malformed literals)."""
    def __init__(self, message: str, span: Optional['Span'] = None):
        super().__init__(message)
        self.span = span
