# internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from gostub.internals.report import Span, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    GENERAL   = "general"
    SYNTAX    = "syntax"
    NAME      = "name"
    IMPORT    = "import"
    TYPE      = "type"
    QUICKFIX  = "quickfix"
    CONFIG    = "config"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    severity: Severity
    text: str
    category: Category = Category.GENERAL
    doc: str = ""

    def format(self, **kwargs) -> str:
        return _fmt(self.code, **kwargs)


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)

def emit(r: Reporter, em: ErrorMessage, span: Optional[Span], **kwargs) -> None:
    text = _fmt(em.code, **kwargs)
    if em.severity == Severity.ERROR:
        r.error(em.code, text, span)
    else:
        r.warn(em.code, text, span)


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

def _fmt(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Registry population
#

# Stub generation failures (GSxxxx). These are raised as StubError subclasses,
# never emitted through a Reporter.
_add(ErrorMessage("GS1001", Severity.ERROR,
    "{message}",
    Category.SYNTAX, "The source could not be parsed. The parser's message is passed through verbatim."))

_add(ErrorMessage("GS1002", Severity.ERROR,
    "syntax error: {message}",
    Category.SYNTAX, "The source parsed but an AST node could not be built from it."))

_add(ErrorMessage("GS3001", Severity.ERROR,
    "no call to '{name}' found",
    Category.QUICKFIX, "The source has no call expression whose callee is the bare identifier."))

_add(ErrorMessage("GS3002", Severity.ERROR,
    "cannot determine the type of argument '{expr}'{reason}",
    Category.QUICKFIX, "The type checker recorded no usable type for one of the call's arguments."))

_add(ErrorMessage("GS4001", Severity.ERROR,
    "invalid configuration in '{path}': {reason}",
    Category.CONFIG, "The [tool.gostub] table or gostub.toml holds an unknown key or value."))

# Name and import resolution (GE1xxx)
_add(ErrorMessage("GE1001", Severity.ERROR,
    "undefined: {name}",
    Category.NAME, "The identifier is not declared in any enclosing scope."))

_add(ErrorMessage("GE1002", Severity.ERROR,
    "could not import {path} (unknown package)",
    Category.IMPORT, "The importer has no declarations for this import path."))

_add(ErrorMessage("GE1003", Severity.ERROR,
    "{name} redeclared in this block",
    Category.NAME, "Two declarations in the same scope use the same name."))

_add(ErrorMessage("GE1004", Severity.ERROR,
    "undefined: {pkg}.{name}",
    Category.IMPORT, "The imported package does not export this name."))

_add(ErrorMessage("GE1005", Severity.ERROR,
    "cannot use _ as value",
    Category.NAME, "The blank identifier may only appear on the left of an assignment."))

_add(ErrorMessage("GE1006", Severity.ERROR,
    "use of package {name} without selector",
    Category.NAME, "A package name was used as a value."))

_add(ErrorMessage("GE1007", Severity.ERROR,
    "no new variables on left side of :=",
    Category.NAME, "A short variable declaration must declare at least one new name."))

# Types (GE2xxx)
_add(ErrorMessage("GE2001", Severity.ERROR,
    "{expr}.{name} undefined (type {ty} has no field or method {name})",
    Category.TYPE, "Selector on a value whose type has no such field or method."))

_add(ErrorMessage("GE2002", Severity.ERROR,
    "invalid operation: cannot call non-function {expr} (type {ty})",
    Category.TYPE, "Only function values and conversions can be called."))

_add(ErrorMessage("GE2003", Severity.ERROR,
    "assignment mismatch: {lhs} variable(s) but {rhs} value(s)",
    Category.TYPE, "The number of values does not match the number of targets."))

_add(ErrorMessage("GE2004", Severity.ERROR,
    "invalid operation: {expr} (mismatched types {left} and {right})",
    Category.TYPE, "Binary operands must have identical types after untyped-constant conversion."))

_add(ErrorMessage("GE2005", Severity.ERROR,
    "invalid operation: cannot index {expr} (variable of type {ty})",
    Category.TYPE, "Only arrays, slices, strings, maps and pointers to arrays can be indexed."))

_add(ErrorMessage("GE2006", Severity.ERROR,
    "invalid operation: cannot indirect {expr} (variable of type {ty})",
    Category.TYPE, "Only pointers can be dereferenced."))

_add(ErrorMessage("GE2007", Severity.ERROR,
    "cannot range over {expr} (variable of type {ty})",
    Category.TYPE, "Range requires an array, slice, string, map, channel, integer or pointer to array."))

_add(ErrorMessage("GE2008", Severity.ERROR,
    "{name} is not a type",
    Category.TYPE, "A value was used where a type is required."))

_add(ErrorMessage("GE2009", Severity.ERROR,
    "invalid operation: {expr} (variable of type {ty}) is not an interface",
    Category.TYPE, "Type assertions require an interface operand."))

_add(ErrorMessage("GE2010", Severity.ERROR,
    "multiple-value {expr} (value of type {ty}) in single-value context",
    Category.TYPE, "A call returning several values was used where one value is expected."))

_add(ErrorMessage("GE2011", Severity.ERROR,
    "{expr} (no value) used as value",
    Category.TYPE, "A call to a function without results was used as a value."))

_add(ErrorMessage("GE2012", Severity.ERROR,
    "{problem} arguments in call to {expr}: have {have}, want {want}",
    Category.TYPE, "The argument count does not match the callee's parameters."))

_add(ErrorMessage("GE2013", Severity.ERROR,
    "invalid recursive type {name}",
    Category.TYPE, "A named type refers to itself without indirection."))

_add(ErrorMessage("GE2014", Severity.ERROR,
    "invalid composite literal type {ty}",
    Category.TYPE, "Composite literals need a struct, array, slice or map type."))

_add(ErrorMessage("GE2015", Severity.ERROR,
    "unknown field {name} in struct literal of type {ty}",
    Category.TYPE, "A keyed struct literal names a field the struct does not have."))

_add(ErrorMessage("GE2016", Severity.ERROR,
    "invalid operation: operator {op} not defined on {expr} (value of type {ty})",
    Category.TYPE, "The operator does not apply to operands of this type."))

_add(ErrorMessage("GE2017", Severity.ERROR,
    "invalid argument: {expr} for built-in {name}",
    Category.TYPE, "A builtin was called with an argument of the wrong kind."))

_add(ErrorMessage("GE2018", Severity.ERROR,
    "invalid array length {expr}",
    Category.TYPE, "Array lengths must be non-negative integer constants."))

_add(ErrorMessage("GE2019", Severity.ERROR,
    "cannot use {expr} ({kind} constant) as {ty} value in {context} (overflows)",
    Category.TYPE, "An untyped constant does not fit in the type it is converted to."))
