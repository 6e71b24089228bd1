"""
Error emission helper for semantic passes.

Provides a thin wrapper around internals.errors.emit() to reduce boilerplate
in semantic analysis passes. Instead of repeatedly importing and calling:

    from gostub.internals import errors as er
    er.emit(self.reporter, er.ERR.GE1001, span, name="foo")

Passes can use:

    from gostub.semantics.error_reporter import PassErrorReporter
    self.err = PassErrorReporter(self.reporter)
    self.err.emit(er.ERR.GE1001, span, name="foo")
"""

from typing import Optional
from gostub.internals.report import Span, Reporter
from gostub.internals import errors as er


class PassErrorReporter:
    """Thin wrapper for error emission in semantic passes."""

    def __init__(self, reporter: Reporter):
        self.reporter = reporter

    def emit(self, error_msg: er.ErrorMessage, span: Optional[Span], **kwargs) -> None:
        """Emit an error or warning.

        Example:
            >>> self.err.emit(er.ERR.GE1001, span, name="undefined_var")
        """
        er.emit(self.reporter, error_msg, span, **kwargs)
