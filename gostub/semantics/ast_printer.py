from __future__ import annotations
from dataclasses import is_dataclass, fields
from typing import Any, List

from gostub.internals.report import Span
from gostub.semantics import ast as A

def _pp(node: Any, indent: int) -> str:
    ind = "  " * indent
    if isinstance(node, list):
        return "\n".join(_pp(n, indent) for n in node)
    if not is_dataclass(node) or isinstance(node, Span):
        return ind + repr(node)
    name = node.__class__.__name__
    lines = [f"{ind}{name}"]
    for f in fields(node):
        if f.name in ("loc", "name_span", "name_spans"):
            continue
        val = getattr(node, f.name)
        if (is_dataclass(val) and not isinstance(val, Span)) or (isinstance(val, list) and val):
            lines.append(f"{ind}  {f.name}:")
            lines.append(_pp(val, indent + 2))
        else:
            lines.append(f"{ind}  {f.name}: {val!r}")
    return "\n".join(lines)

def dump_ast(node: Any) -> str:
    return _pp(node, 0)


# --- Go source rendering of expressions ---

def expr_string(e: Any) -> str:
    """Render an expression in Go syntax, abbreviating literal bodies.

    Function literal bodies print as `{…}` and composite literal elements
    are kept, so messages stay one line long.
    """
    if isinstance(e, A.Name):
        return e.id
    if isinstance(e, (A.IntLit, A.FloatLit, A.ImagLit, A.RuneLit, A.StringLit)):
        return e.text or repr(e.value)
    if isinstance(e, A.Paren):
        return f"({expr_string(e.expr)})"
    if isinstance(e, A.Selector):
        return f"{expr_string(e.value)}.{e.attr}"
    if isinstance(e, A.Index):
        return f"{expr_string(e.value)}[{expr_string(e.index)}]"
    if isinstance(e, A.SliceExpr):
        low = expr_string(e.low) if e.low is not None else ""
        high = expr_string(e.high) if e.high is not None else ""
        return f"{expr_string(e.value)}[{low}:{high}]"
    if isinstance(e, A.TypeAssert):
        return f"{expr_string(e.value)}.({expr_string(e.ty)})"
    if isinstance(e, A.Call):
        args = ", ".join(expr_string(a) for a in e.args)
        return f"{expr_string(e.fun)}({args}{'...' if e.ellipsis else ''})"
    if isinstance(e, A.UnaryOp):
        return f"{e.op}{expr_string(e.expr)}"
    if isinstance(e, A.BinaryOp):
        return f"{expr_string(e.left)} {e.op} {expr_string(e.right)}"
    if isinstance(e, A.KeyValue):
        return f"{expr_string(e.key)}: {expr_string(e.value)}"
    if isinstance(e, A.CompositeLit):
        ty = expr_string(e.ty) if e.ty is not None else ""
        return ty + "{" + ", ".join(expr_string(x) for x in e.elements) + "}"
    if isinstance(e, A.FuncLit):
        return "func" + _signature(e.params, e.results) + " {…}"
    if isinstance(e, A.PointerTypeExpr):
        return f"*{expr_string(e.elem)}"
    if isinstance(e, A.SliceTypeExpr):
        return f"[]{expr_string(e.elem)}"
    if isinstance(e, A.ArrayTypeExpr):
        length = expr_string(e.length) if e.length is not None else "..."
        return f"[{length}]{expr_string(e.elem)}"
    if isinstance(e, A.MapTypeExpr):
        return f"map[{expr_string(e.key)}]{expr_string(e.value)}"
    if isinstance(e, A.ChanTypeExpr):
        return f"{'<-chan' if e.recv_only else 'chan'} {expr_string(e.elem)}"
    if isinstance(e, A.FuncTypeExpr):
        return "func" + _signature(e.params, e.results)
    if isinstance(e, A.StructTypeExpr):
        parts = [
            expr_string(f.ty) if f.name is None else f"{f.name} {expr_string(f.ty)}"
            for f in e.fields
        ]
        return "struct{" + "; ".join(parts) + "}"
    if isinstance(e, A.InterfaceTypeExpr):
        parts = []
        for m in e.methods:
            if m.name is None:
                parts.append(expr_string(m.ty))
            else:
                parts.append(m.name + _signature(m.ty.params, m.ty.results))
        return "interface{" + "; ".join(parts) + "}"
    raise TypeError(f"not an expression: {type(e).__name__}")


def _params(params: List[A.Param]) -> str:
    out = []
    for p in params:
        ty = ("..." if p.variadic else "") + expr_string(p.ty)
        out.append(f"{p.name} {ty}" if p.name else ty)
    return ", ".join(out)


def _signature(params: List[A.Param], results: List[A.Param]) -> str:
    out = f"({_params(params)})"
    if len(results) == 1 and results[0].name is None:
        out += " " + expr_string(results[0].ty)
    elif results:
        out += f" ({_params(results)})"
    return out
