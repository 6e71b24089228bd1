# semantics/ast.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Union, Literal

from lark import Token

from gostub.internals.report import Span

# === Core node base ===

@dataclass
class Node:
    loc: Optional[Span]

@dataclass
class Stmt(Node):
    pass

# === Program structure ===

@dataclass
class ImportSpec(Node):
    path: str                        # Unquoted import path, e.g. "net/http"
    alias: Optional[str] = None      # Explicit local name, "." or "_"

    @property
    def local_name(self) -> str:
        """Name the package is bound to in the importing file."""
        if self.alias is not None:
            return self.alias
        return self.path.rsplit("/", 1)[-1]

@dataclass
class Program(Node):
    package: str
    imports: List[ImportSpec]
    decls: List["Decl"]

    @property
    def funcs(self) -> List["FuncDecl"]:
        return [d for d in self.decls if isinstance(d, FuncDecl)]

@dataclass
class Param:
    name: Optional[str]              # None for unnamed parameters
    ty: "Expr"                       # Type expression
    variadic: bool = False
    loc: Optional[Span] = None

@dataclass
class FuncDecl(Node):
    name: str
    recv: Optional[Param]
    params: List[Param]
    results: List[Param]
    body: Optional["Block"]          # None for declarations without a body
    name_span: Optional[Span] = None

    @property
    def variadic(self) -> bool:
        return bool(self.params) and self.params[-1].variadic

@dataclass
class TypeSpec(Node):
    name: str
    ty: "Expr"
    is_alias: bool = False           # type A = B

@dataclass
class ValueSpec(Node):
    """One line of a var or const declaration.

    For const lines without values (implicit repetition inside a group), the
    builder copies the previous line's type and values and sets `implicit`.
    `iota` is the line's index within its const group.
    """
    names: List[str]
    ty: Optional["Expr"]
    values: List["Expr"]
    iota: int = 0
    implicit: bool = False
    name_spans: List[Optional[Span]] = field(default_factory=list)

@dataclass
class VarDecl(Node):
    specs: List[ValueSpec]

@dataclass
class ConstDecl(Node):
    specs: List[ValueSpec]

@dataclass
class TypeDecl(Node):
    specs: List[TypeSpec]

@dataclass
class Block(Node):
    statements: List[Stmt]

# === Statements ===

@dataclass
class ExprStmt(Stmt):
    expr: "Expr"

@dataclass
class SendStmt(Stmt):
    chan: "Expr"
    value: "Expr"

@dataclass
class IncDec(Stmt):
    target: "Expr"
    op: Literal["++", "--"]

@dataclass
class Assign(Stmt):
    targets: List["Expr"]
    op: str                          # "=" or an op-assignment like "+="
    values: List["Expr"]

@dataclass
class ShortVarDecl(Stmt):
    names: List["Name"]
    values: List["Expr"]

@dataclass
class DeclStmt(Stmt):
    decl: Union[VarDecl, ConstDecl, TypeDecl]

@dataclass
class Return(Stmt):
    values: List["Expr"]

@dataclass
class If(Stmt):
    init: Optional[Stmt]
    cond: "Expr"
    then: Block
    orelse: Optional[Union["If", Block]] = None

@dataclass
class For(Stmt):
    """for {}, for cond {} and for init; cond; post {}."""
    init: Optional[Stmt]
    cond: Optional["Expr"]
    post: Optional[Stmt]
    body: Block

@dataclass
class ForRange(Stmt):
    key: Optional["Expr"]
    value: Optional["Expr"]
    define: bool                     # True for :=, False for =
    iterable: "Expr"
    body: Block

@dataclass
class CaseClause(Node):
    exprs: Optional[List["Expr"]]    # None for default
    body: List[Stmt]

@dataclass
class Switch(Stmt):
    init: Optional[Stmt]
    tag: Optional["Expr"]
    clauses: List[CaseClause]

@dataclass
class TypeSwitch(Stmt):
    """switch [init;] [bind :=] value.(type) { case T1, T2: ... }

    Clause expressions are types, or `nil`.
    """
    init: Optional[Stmt]
    bind: Optional["Name"]
    value: "Expr"
    clauses: List[CaseClause]

@dataclass
class CommClause(Node):
    comm: Optional[Stmt]             # Send or receive; None for default
    body: List[Stmt]

@dataclass
class Select(Stmt):
    clauses: List[CommClause]

@dataclass
class Labeled(Stmt):
    label: str
    stmt: Optional[Stmt]             # None for a label before a closing brace

@dataclass
class Go(Stmt):
    call: "Expr"

@dataclass
class Defer(Stmt):
    call: "Expr"

@dataclass
class Branch(Stmt):
    keyword: Literal["break", "continue", "goto", "fallthrough"]
    label: Optional[str] = None

# === Expressions ===

@dataclass
class Name(Node):
    id: str

@dataclass
class IntLit(Node):
    value: int
    text: str = ""

@dataclass
class FloatLit(Node):
    value: float
    text: str = ""

@dataclass
class ImagLit(Node):
    value: complex
    text: str = ""

@dataclass
class RuneLit(Node):
    value: int
    text: str = ""

@dataclass
class StringLit(Node):
    value: str
    text: str = ""                   # Source spelling including quotes

@dataclass
class KeyValue(Node):
    key: "Expr"
    value: "Expr"

@dataclass
class CompositeLit(Node):
    ty: Optional["Expr"]             # None for elided types inside an outer literal
    elements: List["Expr"]

@dataclass
class FuncLit(Node):
    params: List[Param]
    results: List[Param]
    body: Block

@dataclass
class Paren(Node):
    expr: "Expr"

@dataclass
class Selector(Node):
    value: "Expr"
    attr: str

@dataclass
class Index(Node):
    value: "Expr"
    index: "Expr"

@dataclass
class SliceExpr(Node):
    value: "Expr"
    low: Optional["Expr"]
    high: Optional["Expr"]

@dataclass
class TypeAssert(Node):
    value: "Expr"
    ty: "Expr"

@dataclass
class Call(Node):
    fun: "Expr"
    args: List["Expr"]
    ellipsis: bool = False           # f(xs...)

UnOp = Literal["+", "-", "!", "^", "*", "&", "<-"]

@dataclass
class UnaryOp(Node):
    op: UnOp
    expr: "Expr"

BinOp = Literal["+", "-", "*", "/", "%", "&", "|", "^", "<<", ">>", "&^",
                "==", "!=", "<", "<=", ">", ">=", "&&", "||"]

@dataclass
class BinaryOp(Node):
    op: BinOp
    left: "Expr"
    right: "Expr"

# === Type expressions ===

@dataclass
class PointerTypeExpr(Node):
    elem: "Expr"

@dataclass
class SliceTypeExpr(Node):
    elem: "Expr"

@dataclass
class ArrayTypeExpr(Node):
    length: Optional["Expr"]         # None for [...]T
    elem: "Expr"

@dataclass
class MapTypeExpr(Node):
    key: "Expr"
    value: "Expr"

@dataclass
class ChanTypeExpr(Node):
    elem: "Expr"
    recv_only: bool = False

@dataclass
class FuncTypeExpr(Node):
    params: List[Param]
    results: List[Param]

    @property
    def variadic(self) -> bool:
        return bool(self.params) and self.params[-1].variadic

@dataclass
class Field(Node):
    name: Optional[str]              # None for embedded fields
    ty: "Expr"
    tag: Optional[str] = None

@dataclass
class StructTypeExpr(Node):
    fields: List[Field]

@dataclass
class MethodSpec(Node):
    name: Optional[str]              # None for embedded interfaces
    ty: "Expr"                       # FuncTypeExpr for methods, a type name otherwise

@dataclass
class InterfaceTypeExpr(Node):
    methods: List[MethodSpec]


Decl = Union[FuncDecl, VarDecl, ConstDecl, TypeDecl]
Expr = Union[
    Name, IntLit, FloatLit, ImagLit, RuneLit, StringLit, CompositeLit, KeyValue, FuncLit,
    Paren, Selector, Index, SliceExpr, TypeAssert, Call, UnaryOp, BinaryOp,
    PointerTypeExpr, SliceTypeExpr, ArrayTypeExpr, MapTypeExpr, ChanTypeExpr,
    FuncTypeExpr, StructTypeExpr, InterfaceTypeExpr,
]

TYPE_EXPR_NODES = (
    PointerTypeExpr, SliceTypeExpr, ArrayTypeExpr, MapTypeExpr, ChanTypeExpr,
    FuncTypeExpr, StructTypeExpr, InterfaceTypeExpr,
)


def normalize_op(op_tok_or_str: Token | str) -> str:
    """
    Accepts either a Token (from the parser) or a str (already a lexeme).
    Returns the Go operator spelling. Raises if unknown.
    """
    op_map = {
        "OROR": "||", "ANDAND": "&&",
        "EQ": "==", "NEQ": "!=", "LT": "<", "LE": "<=", "GT": ">", "GE": ">=",
        "PLUS": "+", "MINUS": "-", "PIPE": "|", "CARET": "^",
        "STAR": "*", "SLASH": "/", "PERCENT": "%", "SHL": "<<", "SHR": ">>",
        "AMP": "&", "ANDNOT": "&^", "BANG": "!", "ARROW": "<-",
    }
    if isinstance(op_tok_or_str, Token):
        mapped = op_map.get(op_tok_or_str.type)
        if mapped is not None:
            return mapped
        op_tok_or_str = op_tok_or_str.value
    if op_tok_or_str in op_map.values():
        return op_tok_or_str
    raise ValueError(f"unknown operator: {op_tok_or_str!r}")


def unparen(e: Optional[Expr]) -> Optional[Expr]:
    while isinstance(e, Paren):
        e = e.expr
    return e
