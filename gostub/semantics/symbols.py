"""Objects, scopes and packages used by the type checker."""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Optional

from gostub.internals.report import Span
from gostub.semantics.typesys import Type


class ObjKind(Enum):
    VAR = "var"
    CONST = "const"
    TYPE = "type"
    FUNC = "func"
    PKG = "package"
    BUILTIN = "builtin"
    NIL = "nil"


@dataclass(eq=False)
class Object:
    """A declared entity.

    Package-level vars and consts declared without an explicit type start
    with `ty=None` and a `decl` the checker resolves on first use.
    """
    kind: ObjKind
    name: str
    ty: Optional[Type] = None
    loc: Optional[Span] = None
    decl: Any = None                 # PendingValue or TypeSpec until resolved
    value: Any = None                # Constant value, when known
    package: Optional["Package"] = None  # Target of a PKG object
    resolving: bool = False

    @property
    def pending(self) -> bool:
        return self.ty is None and self.decl is not None


class ScopeKind(Enum):
    UNIVERSE = "universe"
    PACKAGE = "package"
    FILE = "file"
    FUNCTION = "function"
    BLOCK = "block"


class Scope:
    def __init__(self, parent: Optional["Scope"], kind: ScopeKind) -> None:
        self.parent = parent
        self.kind = kind
        self.objects: Dict[str, Object] = {}

    def declare(self, obj: Object) -> Optional[Object]:
        """Insert `obj`; return the previous object if the name is taken.

        The blank identifier is never inserted.
        """
        if obj.name == "_":
            return None
        prev = self.objects.get(obj.name)
        if prev is not None:
            return prev
        self.objects[obj.name] = obj
        return None

    def lookup_local(self, name: str) -> Optional[Object]:
        return self.objects.get(name)

    def lookup(self, name: str) -> Optional[Object]:
        s: Optional[Scope] = self
        while s is not None:
            obj = s.objects.get(name)
            if obj is not None:
                return obj
            s = s.parent
        return None

    def child(self, kind: ScopeKind = ScopeKind.BLOCK) -> "Scope":
        return Scope(self, kind)

    def __iter__(self) -> Iterator[Object]:
        return iter(self.objects.values())

    def __contains__(self, name: str) -> bool:
        return name in self.objects


@dataclass(eq=False)
class Package:
    path: str
    name: str
    scope: Scope
    imports: Dict[str, "Package"] = field(default_factory=dict)

    def lookup(self, name: str) -> Optional[Object]:
        return self.scope.lookup_local(name)

    def exported(self, name: str) -> Optional[Object]:
        if not name[:1].isupper():
            return None
        return self.lookup(name)
