"""Parameter names derived from types."""
from __future__ import annotations

from gostub.semantics.typesys import (
    Type, BasicType, NamedType, PointerType, SliceType, ArrayType, MapType, ChanType,
    Signature, StructType, InterfaceType, TupleType, default,
)
from gostub.semantics.universe import ERROR_TYPE

GO_KEYWORDS = frozenset({
    "break", "case", "chan", "const", "continue", "default", "defer", "else",
    "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
    "map", "package", "range", "return", "select", "struct", "switch", "type", "var",
})


def type_to_arg_name(ty: Type) -> str:
    """Short parameter name for a value of type `ty`.

    string -> s, []int -> i, error -> err, *bytes.Buffer -> buffer.
    """
    name = _name(ty)
    if name in GO_KEYWORDS:
        return name[0]
    return name


def _name(ty: Type) -> str:
    ty = default(ty)
    if ty is ERROR_TYPE:
        return "err"
    if isinstance(ty, BasicType):
        return ty.value[0]
    if isinstance(ty, (SliceType, ArrayType, PointerType)):
        return _name(ty.elem)
    if isinstance(ty, NamedType):
        return ty.name[:1].lower() + ty.name[1:]
    if isinstance(ty, MapType):
        return "m"
    if isinstance(ty, ChanType):
        return "ch"
    if isinstance(ty, Signature):
        return "fn"
    if isinstance(ty, (StructType, InterfaceType, TupleType)):
        return "v"
    raise TypeError(f"not a type: {ty!r}")
