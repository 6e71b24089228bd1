"""Make parameter names pairwise distinct."""
from __future__ import annotations
from collections import Counter
from typing import Dict, List, Sequence, Set

from .model import ParamCandidate, StubParam


def ensure_unique_names(candidates: Sequence[ParamCandidate]) -> List[StubParam]:
    """Number repeated names in order of appearance: (s, i, s) -> (s1, i, s2).

    Names that occur once are kept. A numbered name that another parameter
    already uses is skipped, so (s, s, s1) -> (s2, s3, s1).
    """
    counts = Counter(c.name for c in candidates)
    taken: Set[str] = {c.name for c in candidates if counts[c.name] == 1}
    next_index: Dict[str, int] = {}

    out: List[StubParam] = []
    for c in candidates:
        if counts[c.name] == 1:
            out.append(StubParam(c.name, c.ty))
            continue
        i = next_index.get(c.name, 1)
        while f"{c.name}{i}" in taken:
            i += 1
        name = f"{c.name}{i}"
        next_index[c.name] = i + 1
        taken.add(name)
        out.append(StubParam(name, c.ty))
    return out
