"""Values passed between the stub pipeline stages."""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple, Union

from gostub.semantics.ast import Call, Expr
from gostub.semantics.typesys import Type


@dataclass
class CallSite:
    """The call to the undeclared function, with its arguments in source order."""
    callee_name: str
    call: Call
    arguments: List[Expr]


@dataclass(frozen=True)
class SingleType:
    ty: Type


@dataclass(frozen=True)
class MultiType:
    """Results of a multi-value call used as the only argument."""
    types: Tuple[Type, ...]


ResolvedType = Union[SingleType, MultiType]


@dataclass(frozen=True)
class ParamCandidate:
    name: str
    ty: Type


@dataclass(frozen=True)
class StubParam:
    name: str
    ty: Type
