from __future__ import annotations
from enum import Enum
from typing import Callable, Dict, Optional, Tuple, Union
from dataclasses import dataclass, field


class BasicType(Enum):
    BOOL = "bool"
    STRING = "string"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    UINTPTR = "uintptr"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    COMPLEX64 = "complex64"
    COMPLEX128 = "complex128"
    BYTE = "byte"                    # alias of uint8
    RUNE = "rune"                    # alias of int32

    UNTYPED_BOOL = "untyped bool"
    UNTYPED_INT = "untyped int"
    UNTYPED_RUNE = "untyped rune"
    UNTYPED_FLOAT = "untyped float"
    UNTYPED_COMPLEX = "untyped complex"
    UNTYPED_STRING = "untyped string"
    UNTYPED_NIL = "untyped nil"

    def __str__(self) -> str:
        return self.value

    @property
    def is_untyped(self) -> bool:
        return self.value.startswith("untyped ")


INTEGER_TYPES = frozenset({
    BasicType.INT, BasicType.INT8, BasicType.INT16, BasicType.INT32, BasicType.INT64,
    BasicType.UINT, BasicType.UINT8, BasicType.UINT16, BasicType.UINT32, BasicType.UINT64,
    BasicType.UINTPTR, BasicType.BYTE, BasicType.RUNE,
    BasicType.UNTYPED_INT, BasicType.UNTYPED_RUNE,
})
FLOAT_TYPES = frozenset({BasicType.FLOAT32, BasicType.FLOAT64, BasicType.UNTYPED_FLOAT})
COMPLEX_TYPES = frozenset({BasicType.COMPLEX64, BasicType.COMPLEX128, BasicType.UNTYPED_COMPLEX})
NUMERIC_TYPES = INTEGER_TYPES | FLOAT_TYPES | COMPLEX_TYPES
STRING_TYPES = frozenset({BasicType.STRING, BasicType.UNTYPED_STRING})
BOOLEAN_TYPES = frozenset({BasicType.BOOL, BasicType.UNTYPED_BOOL})

# Untyped numeric kinds ordered by Go's constant promotion rule.
UNTYPED_RANK = {
    BasicType.UNTYPED_INT: 0,
    BasicType.UNTYPED_RUNE: 1,
    BasicType.UNTYPED_FLOAT: 2,
    BasicType.UNTYPED_COMPLEX: 3,
}

_ALIASES = {BasicType.BYTE: BasicType.UINT8, BasicType.RUNE: BasicType.INT32}


class ChanDir(Enum):
    BOTH = "chan"
    RECV = "<-chan"
    SEND = "chan<-"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PointerType:
    elem: "Type"

    def __str__(self) -> str:
        return type_string(self)

@dataclass(frozen=True)
class SliceType:
    elem: "Type"

    def __str__(self) -> str:
        return type_string(self)

@dataclass(frozen=True)
class ArrayType:
    elem: "Type"
    length: int

    def __str__(self) -> str:
        return type_string(self)

@dataclass(frozen=True)
class MapType:
    key: "Type"
    value: "Type"

    def __str__(self) -> str:
        return type_string(self)

@dataclass(frozen=True)
class ChanType:
    elem: "Type"
    direction: ChanDir = ChanDir.BOTH

    def __str__(self) -> str:
        return type_string(self)

@dataclass(frozen=True)
class Signature:
    """Function type. `variadic` means the last param is `...T` (stored as []T)."""
    params: Tuple["Type", ...] = ()
    results: Tuple["Type", ...] = ()
    variadic: bool = False

    def __str__(self) -> str:
        return type_string(self)

@dataclass(frozen=True)
class StructField:
    name: str
    ty: "Type"
    embedded: bool = False

@dataclass(frozen=True)
class StructType:
    fields: Tuple[StructField, ...] = ()

    def __str__(self) -> str:
        return type_string(self)

    def field(self, name: str) -> Optional[StructField]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

@dataclass(frozen=True)
class InterfaceType:
    methods: Tuple[Tuple[str, Signature], ...] = ()
    embeddeds: Tuple["Type", ...] = ()

    def __str__(self) -> str:
        return type_string(self)

    def all_methods(self) -> Dict[str, Signature]:
        out: Dict[str, Signature] = {}
        for emb in self.embeddeds:
            under = underlying(emb)
            if isinstance(under, InterfaceType):
                out.update(under.all_methods())
        out.update(dict(self.methods))
        return out

@dataclass(frozen=True)
class TupleType:
    """Result list of a call. Only ever produced for calls with 0 or 2+ results."""
    types: Tuple["Type", ...] = ()

    def __len__(self) -> int:
        return len(self.types)

    def __str__(self) -> str:
        return type_string(self)


@dataclass(eq=False)
class NamedType:
    """A defined type. Identity is the declaration, so equality is `is`.

    `pkg` is the declaring package's name, or None for the package being
    checked and for predeclared types such as `error`.
    """
    name: str
    pkg: Optional[str] = None
    underlying_type: Optional["Type"] = None
    methods: Dict[str, Signature] = field(default_factory=dict)

    def __str__(self) -> str:
        return type_string(self)

    def __repr__(self) -> str:
        return f"NamedType({type_string(self)!r})"


Type = Union[
    BasicType, NamedType, PointerType, SliceType, ArrayType, MapType, ChanType,
    Signature, StructType, InterfaceType, TupleType,
]

Qualifier = Callable[[NamedType], Optional[str]]


def package_qualifier(named: NamedType) -> Optional[str]:
    return named.pkg


def type_string(ty: "Type", qualifier: Optional[Qualifier] = None) -> str:
    """Render a type the way Go source spells it.

    `qualifier` maps a named type to the prefix it needs in the target file
    (None for no prefix); by default imported types use their package name.
    """
    q = qualifier or package_qualifier

    def go(t: "Type") -> str:
        if isinstance(t, BasicType):
            return t.value
        if isinstance(t, NamedType):
            prefix = q(t)
            return f"{prefix}.{t.name}" if prefix else t.name
        if isinstance(t, PointerType):
            return f"*{go(t.elem)}"
        if isinstance(t, SliceType):
            return f"[]{go(t.elem)}"
        if isinstance(t, ArrayType):
            return f"[{t.length}]{go(t.elem)}"
        if isinstance(t, MapType):
            return f"map[{go(t.key)}]{go(t.value)}"
        if isinstance(t, ChanType):
            elem = go(t.elem)
            if t.direction is ChanDir.BOTH and isinstance(t.elem, ChanType) and t.elem.direction is ChanDir.RECV:
                elem = f"({elem})"
            return f"{t.direction} {elem}"
        if isinstance(t, Signature):
            return "func" + sig(t)
        if isinstance(t, StructType):
            fields = []
            for f in t.fields:
                fields.append(go(f.ty) if f.embedded else f"{f.name} {go(f.ty)}")
            return "struct{" + "; ".join(fields) + "}"
        if isinstance(t, InterfaceType):
            items = [go(e) for e in t.embeddeds]
            items += [name + sig(s) for name, s in t.methods]
            return "interface{" + "; ".join(items) + "}"
        if isinstance(t, TupleType):
            return "(" + ", ".join(go(x) for x in t.types) + ")"
        raise TypeError(f"not a type: {t!r}")

    def sig(s: Signature) -> str:
        params = [go(p) for p in s.params]
        if s.variadic and params:
            last = s.params[-1]
            elem = last.elem if isinstance(last, SliceType) else last
            params[-1] = "..." + go(elem)
        out = "(" + ", ".join(params) + ")"
        if len(s.results) == 1:
            out += " " + go(s.results[0])
        elif s.results:
            out += " (" + ", ".join(go(r) for r in s.results) + ")"
        return out

    return go(ty)


# === Queries ===

def underlying(ty: "Type") -> "Type":
    seen = 0
    while isinstance(ty, NamedType):
        if ty.underlying_type is None or seen > 64:
            return InterfaceType()
        ty = ty.underlying_type
        seen += 1
    return ty


def is_untyped(ty: Optional["Type"]) -> bool:
    return isinstance(ty, BasicType) and ty.is_untyped


def basic_kind(ty: Optional["Type"]) -> Optional[BasicType]:
    if ty is None:
        return None
    under = underlying(ty)
    return under if isinstance(under, BasicType) else None


def is_interface(ty: Optional["Type"]) -> bool:
    return ty is not None and isinstance(underlying(ty), InterfaceType)


def default(ty: "Type") -> "Type":
    """Type an untyped constant takes when nothing else constrains it."""
    if not isinstance(ty, BasicType):
        return ty
    return {
        BasicType.UNTYPED_BOOL: BasicType.BOOL,
        BasicType.UNTYPED_INT: BasicType.INT,
        BasicType.UNTYPED_RUNE: BasicType.RUNE,
        BasicType.UNTYPED_FLOAT: BasicType.FLOAT64,
        BasicType.UNTYPED_COMPLEX: BasicType.COMPLEX128,
        BasicType.UNTYPED_STRING: BasicType.STRING,
        BasicType.UNTYPED_NIL: InterfaceType(),
    }.get(ty, ty)


def identical(a: Optional["Type"], b: Optional["Type"]) -> bool:
    if a is None or b is None:
        return False
    if isinstance(a, BasicType) and isinstance(b, BasicType):
        return _ALIASES.get(a, a) is _ALIASES.get(b, b)
    if isinstance(a, NamedType) or isinstance(b, NamedType):
        return a is b
    if type(a) is not type(b):
        return False
    if isinstance(a, (PointerType, SliceType)):
        return identical(a.elem, b.elem)
    if isinstance(a, ArrayType):
        return a.length == b.length and identical(a.elem, b.elem)
    if isinstance(a, MapType):
        return identical(a.key, b.key) and identical(a.value, b.value)
    if isinstance(a, ChanType):
        return a.direction is b.direction and identical(a.elem, b.elem)
    if isinstance(a, Signature):
        return (
            a.variadic == b.variadic
            and len(a.params) == len(b.params)
            and len(a.results) == len(b.results)
            and all(identical(x, y) for x, y in zip(a.params, b.params))
            and all(identical(x, y) for x, y in zip(a.results, b.results))
        )
    if isinstance(a, StructType):
        return len(a.fields) == len(b.fields) and all(
            x.name == y.name and x.embedded == y.embedded and identical(x.ty, y.ty)
            for x, y in zip(a.fields, b.fields)
        )
    if isinstance(a, InterfaceType):
        ma, mb = a.all_methods(), b.all_methods()
        return ma.keys() == mb.keys() and all(identical(ma[k], mb[k]) for k in ma)
    if isinstance(a, TupleType):
        return len(a.types) == len(b.types) and all(identical(x, y) for x, y in zip(a.types, b.types))
    return a == b


def lookup_field_or_method(ty: "Type", name: str) -> Optional["Type"]:
    """Find field or method `name` on `ty`, looking through one pointer and
    embedded fields (breadth first, shallowest match wins)."""
    if isinstance(ty, PointerType):
        ty = ty.elem

    level = [ty]
    seen: set[int] = set()
    while level:
        found: Optional["Type"] = None
        next_level = []
        for t in level:
            if isinstance(t, PointerType):
                t = t.elem
            if isinstance(t, NamedType):
                if id(t) in seen:
                    continue
                seen.add(id(t))
                if name in t.methods:
                    found = found or t.methods[name]
                    continue
            under = underlying(t)
            if isinstance(under, StructType):
                for f in under.fields:
                    if f.name == name:
                        found = found or f.ty
                    elif f.embedded:
                        next_level.append(f.ty)
            elif isinstance(under, InterfaceType):
                methods = under.all_methods()
                if name in methods:
                    found = found or methods[name]
        if found is not None:
            return found
        level = next_level
    return None
