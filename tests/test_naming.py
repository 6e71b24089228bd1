"""Tests for the type -> parameter name heuristic."""

import pytest

from gostub.quickfix import type_to_arg_name
from gostub.semantics.typesys import (
    ArrayType, BasicType, ChanType, InterfaceType, MapType, NamedType, PointerType,
    Signature, SliceType, StructType, TupleType,
)
from gostub.semantics.universe import ANY_TYPE, ERROR_TYPE

POINT = NamedType("Point", underlying_type=StructType())
REQUEST = NamedType("Request", pkg="http", underlying_type=StructType())


@pytest.mark.parametrize("ty, expected", [
    (BasicType.STRING, "s"),
    (BasicType.INT, "i"),
    (BasicType.FLOAT64, "f"),
    (BasicType.BOOL, "b"),
    (BasicType.BYTE, "b"),
    (BasicType.RUNE, "r"),
    (BasicType.UINT64, "u"),
    (BasicType.COMPLEX128, "c"),
    (ERROR_TYPE, "err"),
    (POINT, "point"),
    (REQUEST, "request"),
    (NamedType("URL", pkg="url"), "uRL"),
])
def test_basic_and_named(ty, expected):
    assert type_to_arg_name(ty) == expected


@pytest.mark.parametrize("ty, expected", [
    (SliceType(BasicType.INT), "i"),
    (ArrayType(BasicType.STRING, 4), "s"),
    (SliceType(SliceType(POINT)), "point"),
    (PointerType(POINT), "point"),
    (PointerType(PointerType(REQUEST)), "request"),
    (SliceType(ERROR_TYPE), "err"),
    (MapType(BasicType.STRING, BasicType.INT), "m"),
    (ChanType(BasicType.INT), "ch"),
    (Signature((BasicType.INT,), ()), "fn"),
    (StructType(), "v"),
    (ANY_TYPE, "v"),
    (TupleType((BasicType.INT, BasicType.INT)), "v"),
])
def test_composite_types(ty, expected):
    assert type_to_arg_name(ty) == expected


@pytest.mark.parametrize("ty, expected", [
    (BasicType.UNTYPED_INT, "i"),
    (BasicType.UNTYPED_FLOAT, "f"),
    (BasicType.UNTYPED_RUNE, "r"),
    (BasicType.UNTYPED_STRING, "s"),
    (BasicType.UNTYPED_BOOL, "b"),
    (BasicType.UNTYPED_COMPLEX, "c"),
    (BasicType.UNTYPED_NIL, "v"),
])
def test_untyped_constants_use_default_type(ty, expected):
    assert type_to_arg_name(ty) == expected


def test_keyword_names_are_shortened():
    assert type_to_arg_name(NamedType("Func")) == "f"
    assert type_to_arg_name(NamedType("Type", pkg="reflect")) == "t"
    assert type_to_arg_name(PointerType(NamedType("Range"))) == "r"


def test_error_lookalike_is_not_err():
    # Only the predeclared error type maps to err.
    assert type_to_arg_name(NamedType("error", pkg="mypkg")) == "error"


def test_not_a_type():
    with pytest.raises(TypeError):
        type_to_arg_name("string")
