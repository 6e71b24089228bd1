"""Go source rendering of a stub declaration."""
from __future__ import annotations
from typing import Optional, Sequence

from gostub.semantics.typesys import Qualifier, type_string
from .model import StubParam


def render_stub(name: str, params: Sequence[StubParam], qualifier: Optional[Qualifier] = None) -> str:
    """Render `func name(p1 T1, p2 T2) {}`.

    `qualifier` decides the package prefix of named types; by default
    imported types are prefixed with their package name.
    """
    rendered = ", ".join(f"{p.name} {type_string(p.ty, qualifier)}" for p in params)
    return f"func {name}({rendered}) {{}}"
