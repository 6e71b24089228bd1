"""Predeclared identifiers of Go's universe block."""
from __future__ import annotations

from functools import lru_cache

from gostub.semantics.symbols import Object, ObjKind, Scope, ScopeKind
from gostub.semantics.typesys import BasicType, InterfaceType, NamedType, Signature

ERROR_TYPE = NamedType(
    "error",
    underlying_type=InterfaceType(methods=(("Error", Signature((), (BasicType.STRING,))),)),
)
ANY_TYPE = InterfaceType()

BASIC_TYPE_NAMES = {
    b.value: b for b in BasicType if not b.is_untyped
}

BUILTIN_FUNCS = (
    "append", "cap", "clear", "close", "complex", "copy", "delete", "imag", "len",
    "make", "max", "min", "new", "panic", "print", "println", "real", "recover",
)

PREDECLARED_VALUES = frozenset({"true", "false", "nil", "iota"})


@lru_cache(maxsize=1)
def universe() -> Scope:
    """Build the universe scope once. It is never mutated afterwards."""
    scope = Scope(None, ScopeKind.UNIVERSE)
    for name, basic in BASIC_TYPE_NAMES.items():
        scope.declare(Object(ObjKind.TYPE, name, basic))
    scope.declare(Object(ObjKind.TYPE, "error", ERROR_TYPE))
    scope.declare(Object(ObjKind.TYPE, "any", ANY_TYPE))

    scope.declare(Object(ObjKind.CONST, "true", BasicType.UNTYPED_BOOL, value=True))
    scope.declare(Object(ObjKind.CONST, "false", BasicType.UNTYPED_BOOL, value=False))
    scope.declare(Object(ObjKind.CONST, "iota", BasicType.UNTYPED_INT, value=0))
    scope.declare(Object(ObjKind.NIL, "nil", BasicType.UNTYPED_NIL))

    for name in BUILTIN_FUNCS:
        scope.declare(Object(ObjKind.BUILTIN, name))
    return scope
