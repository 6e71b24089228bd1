# semantics/passes/types/constants.py
"""Constant folding for array lengths, const declarations and iota."""
from __future__ import annotations
import math
import operator
from typing import TYPE_CHECKING, Any, Optional

from gostub.semantics import ast as A
from gostub.semantics.symbols import ObjKind
from gostub.semantics.typesys import BasicType, Type
from gostub.semantics.universe import universe

if TYPE_CHECKING:
    from . import TypeChecker


_ARITH = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "%": operator.mod,
    "&": operator.and_,
    "|": operator.or_,
    "^": operator.xor,
    "<<": operator.lshift,
    ">>": operator.rshift,
}

_COMPARE = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

# Shift counts past this are not folded; Go rejects them as constant overflow.
MAX_SHIFT = 1 << 16

_INT_BITS = {
    BasicType.INT: (64, True), BasicType.INT8: (8, True), BasicType.INT16: (16, True),
    BasicType.INT32: (32, True), BasicType.INT64: (64, True), BasicType.RUNE: (32, True),
    BasicType.UINT: (64, False), BasicType.UINT8: (8, False), BasicType.UINT16: (16, False),
    BasicType.UINT32: (32, False), BasicType.UINT64: (64, False), BasicType.UINTPTR: (64, False),
    BasicType.BYTE: (8, False),
}

_FLOAT_MAX = {
    BasicType.FLOAT32: 3.4028234663852886e38,
    BasicType.FLOAT64: 1.7976931348623157e308,
    BasicType.COMPLEX64: 3.4028234663852886e38,
    BasicType.COMPLEX128: 1.7976931348623157e308,
}


def evaluate(checker: 'TypeChecker', e) -> Optional[Any]:
    """Value of a constant expression, or None when it is not constant.

    Values are plain Python ints, floats, complexes, strings and bools.
    """
    if isinstance(e, (A.IntLit, A.RuneLit, A.FloatLit, A.ImagLit, A.StringLit)):
        return e.value

    if isinstance(e, A.Paren):
        return evaluate(checker, e.expr)

    if isinstance(e, A.Name):
        obj = checker.lookup(e.id)
        if obj is None or obj.kind is not ObjKind.CONST:
            return None
        if obj is universe().lookup_local("iota"):
            return checker.iota
        if obj.pending:
            checker.resolve_object(obj)
        return obj.value

    if isinstance(e, A.UnaryOp):
        x = evaluate(checker, e.expr)
        if x is None:
            return None
        if e.op == "-" and not isinstance(x, (str, bool)):
            return -x
        if e.op == "+" and not isinstance(x, (str, bool)):
            return x
        if e.op == "!" and isinstance(x, bool):
            return not x
        if e.op == "^" and isinstance(x, int) and not isinstance(x, bool):
            return ~x
        return None

    if isinstance(e, A.BinaryOp):
        try:
            return _binary(checker, e)
        except OverflowError:
            # int operands too large to mix with floats
            return None

    if isinstance(e, A.Call) and isinstance(e.fun, A.Name) and e.fun.id == "len" and len(e.args) == 1:
        x = evaluate(checker, e.args[0])
        return len(x.encode("utf-8")) if isinstance(x, str) else None

    if isinstance(e, A.Call) and len(e.args) == 1 and checker.type_operand(e.fun) is not None:
        # Conversion of a constant keeps its value.
        return evaluate(checker, e.args[0])

    return None


def _binary(checker: 'TypeChecker', e: A.BinaryOp) -> Optional[Any]:
    x = evaluate(checker, e.left)
    y = evaluate(checker, e.right)
    if x is None or y is None:
        return None

    if e.op in ("&&", "||"):
        if not (isinstance(x, bool) and isinstance(y, bool)):
            return None
        return (x and y) if e.op == "&&" else (x or y)

    if e.op in _COMPARE:
        try:
            return _COMPARE[e.op](x, y)
        except TypeError:
            return None

    if isinstance(x, bool) or isinstance(y, bool):
        return None

    if isinstance(x, str) or isinstance(y, str):
        return x + y if e.op == "+" and isinstance(x, str) and isinstance(y, str) else None

    if e.op == "/":
        if y == 0:
            return None
        if isinstance(x, int) and isinstance(y, int):
            # Go truncates toward zero.
            q = abs(x) // abs(y)
            return q if (x >= 0) == (y >= 0) else -q
        return x / y

    if e.op == "&^":
        if isinstance(x, int) and isinstance(y, int):
            return x & ~y
        return None

    fn = _ARITH.get(e.op)
    if fn is None:
        return None
    if e.op in ("%", "&", "|", "^", "<<", ">>") and not (isinstance(x, int) and isinstance(y, int)):
        return None
    if e.op in ("<<", ">>") and y < 0:
        return None
    if e.op == "<<" and y > MAX_SHIFT:
        return None
    if e.op == "%":
        if y == 0:
            return None
        r = abs(x) % abs(y)
        return r if x >= 0 else -r
    return fn(x, y)


def representable(value: Any, ty: Type) -> bool:
    """Whether constant `value` fits in basic type `ty` without overflow.

    Only magnitude is checked; the constant's kind is assumed to match.
    Non-basic and non-numeric types accept every value.
    """
    if isinstance(value, (bool, str)) or not isinstance(ty, BasicType):
        return True
    if ty in _INT_BITS:
        bits, signed = _INT_BITS[ty]
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if not isinstance(value, int):
            return True
        if signed:
            return -(1 << (bits - 1)) <= value < (1 << (bits - 1))
        return 0 <= value < (1 << bits)
    limit = _FLOAT_MAX.get(ty)
    if limit is None:
        return True
    parts = (value.real, value.imag) if isinstance(value, complex) else (value,)
    for part in parts:
        try:
            magnitude = abs(float(part))
        except OverflowError:
            return False
        if math.isnan(magnitude) or magnitude > limit:
            return False
    return True
