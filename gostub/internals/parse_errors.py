"""Shared parse exception handling for the stub pipeline and CLI."""
from __future__ import annotations

from typing import Optional

from lark import UnexpectedInput

from gostub.internals.report import Span
from gostub.semantics.ast_builder import GoSyntaxError


def parse_error_span(exc: Exception) -> Optional[Span]:
    if isinstance(exc, GoSyntaxError):
        return exc.span
    if isinstance(exc, UnexpectedInput):
        line = getattr(exc, "line", None)
        col = getattr(exc, "column", None)
        if isinstance(line, int) and line > 0 and isinstance(col, int) and col > 0:
            return Span(line, col, line, col + 1)
    return None


def handle_parse_exception(exc: Exception, reporter, src: Optional[str] = None) -> bool:
    """Handle a parse exception by emitting diagnostics through the reporter.

    Args:
        exc: The exception to handle.
        reporter: Reporter for error/warning collection.
        src: Source text, used to quote the offending character.

    Returns:
        True if the exception was handled, False otherwise.
    """
    from gostub.internals import errors as er
    from gostub.internals.parser import improve_parse_error

    if isinstance(exc, GoSyntaxError):
        er.emit(reporter, er.ERR.GS1002, exc.span, message=str(exc))
        return True

    if isinstance(exc, UnexpectedInput):
        er.emit(reporter, er.ERR.GS1001, parse_error_span(exc), message=improve_parse_error(exc, src))
        return True

    return False
