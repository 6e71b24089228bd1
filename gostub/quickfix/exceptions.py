"""Exceptions raised by the stub pipeline."""
from __future__ import annotations
from typing import Optional, TYPE_CHECKING

from gostub.internals.errors import ERR, ErrorMessage

if TYPE_CHECKING:
    from gostub.internals.report import Span


class StubError(Exception):
    """Base class for stub generation failures.

    `code` is the catalog code of the message, `stage` the pipeline stage
    that failed (parse, locate, resolve).
    """
    stage = "stub"

    def __init__(self, error: ErrorMessage, span: Optional['Span'] = None, **kwargs):
        super().__init__(error.format(**kwargs))
        self.code = error.code
        self.span = span

    @property
    def message(self) -> str:
        return str(self)


class ParseFailure(StubError):
    """The source could not be parsed; the parser's message is kept verbatim."""
    stage = "parse"

    def __init__(self, message: str, span: Optional['Span'] = None):
        super().__init__(ERR.GS1001, span, message=message)


class CallSiteNotFound(StubError):
    stage = "locate"

    def __init__(self, name: str):
        super().__init__(ERR.GS3001, None, name=name)
        self.name = name


class UnresolvableArgumentType(StubError):
    stage = "resolve"

    def __init__(self, expression: str, span: Optional['Span'] = None, reason: str = ""):
        super().__init__(ERR.GS3002, span, expr=expression, reason=reason)
        self.expression = expression
