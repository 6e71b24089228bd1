"""Results recorded by the type checker."""
from __future__ import annotations
from typing import Any, Dict, Optional, Tuple

from gostub.semantics.symbols import Object
from gostub.semantics.typesys import Type


class TypeInfo:
    """Expression types and identifier uses, keyed by node identity.

    Nodes are held alongside their entries so an id() is never reused while
    the TypeInfo is alive.
    """

    def __init__(self) -> None:
        self._types: Dict[int, Tuple[Any, Type]] = {}
        self._uses: Dict[int, Tuple[Any, Object]] = {}
        self._values: Dict[int, Tuple[Any, Any]] = {}

    def record_type(self, node: Any, ty: Type) -> None:
        self._types[id(node)] = (node, ty)

    def record_use(self, node: Any, obj: Object) -> None:
        self._uses[id(node)] = (node, obj)

    def record_value(self, node: Any, value: Any) -> None:
        """Constant value of an untyped constant expression."""
        self._values[id(node)] = (node, value)

    def type_of(self, node: Any) -> Optional[Type]:
        entry = self._types.get(id(node))
        return entry[1] if entry is not None else None

    def object_of(self, node: Any) -> Optional[Object]:
        entry = self._uses.get(id(node))
        return entry[1] if entry is not None else None

    def value_of(self, node: Any) -> Any:
        entry = self._values.get(id(node))
        return entry[1] if entry is not None else None

    def __len__(self) -> int:
        return len(self._types)
