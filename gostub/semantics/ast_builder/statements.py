"""Statement parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING, Optional

from lark import Tree

from gostub.semantics.ast import (
    Stmt, Name, ExprStmt, SendStmt, IncDec, Assign, ShortVarDecl, DeclStmt, Return, If,
    For, ForRange, Switch, TypeSwitch, CaseClause, Select, CommClause, Labeled, Go, Defer, Branch,
    UnaryOp, unparen,
)
from gostub.semantics.ast_builder.exceptions import GoSyntaxError
from gostub.semantics.ast_builder.tree_navigation import first_token, first_tree, trees
from gostub.internals.report import span_of

if TYPE_CHECKING:
    from gostub.semantics.ast_builder.builder import ASTBuilder


class StatementParser:
    """Dispatches statement trees to `_stmt_<rule>` handlers."""

    def __init__(self, ast_builder: 'ASTBuilder'):
        self.ast_builder = ast_builder

    def parse_stmt(self, t: Tree) -> Stmt:
        handler = getattr(self, f"_stmt_{t.data}", None)
        if handler is None:
            raise NotImplementedError(f"unhandled statement node: {t.data}")
        return handler(t, span_of(t))

    def _optional(self, t: Optional[Tree]) -> Optional[Stmt]:
        """Unwrap if_init/for_init/for_post/switch_init wrappers."""
        if t is None:
            return None
        return self.parse_stmt(t.children[0])

    # --- simple statements ---

    def _stmt_expr_stmt(self, t: Tree, loc) -> Stmt:
        return ExprStmt(expr=self.ast_builder._expr(t.children[0]), loc=loc)

    def _stmt_send_stmt(self, t: Tree, loc) -> Stmt:
        chan, value = trees(t)
        return SendStmt(chan=self.ast_builder._expr(chan), value=self.ast_builder._expr(value), loc=loc)

    def _stmt_inc_stmt(self, t: Tree, loc) -> Stmt:
        return IncDec(target=self.ast_builder._expr(t.children[0]), op="++", loc=loc)

    def _stmt_dec_stmt(self, t: Tree, loc) -> Stmt:
        return IncDec(target=self.ast_builder._expr(t.children[0]), op="--", loc=loc)

    def _stmt_assign_stmt(self, t: Tree, loc) -> Stmt:
        lhs, op, rhs = t.children
        return Assign(
            targets=self.ast_builder._expr_list(lhs),
            op=op.children[0].value,
            values=self.ast_builder._expr_list(rhs),
            loc=loc,
        )

    def _stmt_short_var_decl(self, t: Tree, loc) -> Stmt:
        lhs, rhs = trees(t)
        names = []
        for e in self.ast_builder._expr_list(lhs):
            if not isinstance(e, Name):
                raise GoSyntaxError("non-name on left side of :=", e.loc)
            names.append(e)
        return ShortVarDecl(names=names, values=self.ast_builder._expr_list(rhs), loc=loc)

    # --- declarations inside function bodies ---

    def _stmt_var_decl(self, t: Tree, loc) -> Stmt:
        from gostub.semantics.ast_builder import declarations
        return DeclStmt(decl=declarations.parse_decl(t, self.ast_builder), loc=loc)

    _stmt_const_decl = _stmt_var_decl
    _stmt_type_decl = _stmt_var_decl

    # --- control flow ---

    def _stmt_return_stmt(self, t: Tree, loc) -> Stmt:
        values = first_tree(t.children, "expr_list")
        return Return(values=self.ast_builder._expr_list(values) if values is not None else [], loc=loc)

    @staticmethod
    def _label(t: Tree) -> Optional[str]:
        tok = first_token(t.children, "IDENT")
        return tok.value if tok is not None else None

    def _stmt_break_stmt(self, t: Tree, loc) -> Stmt:
        return Branch(keyword="break", label=self._label(t), loc=loc)

    def _stmt_continue_stmt(self, t: Tree, loc) -> Stmt:
        return Branch(keyword="continue", label=self._label(t), loc=loc)

    def _stmt_goto_stmt(self, t: Tree, loc) -> Stmt:
        return Branch(keyword="goto", label=self._label(t), loc=loc)

    def _stmt_labeled_stmt(self, t: Tree, loc) -> Stmt:
        inner = trees(t)
        return Labeled(label=self._label(t), stmt=self.parse_stmt(inner[0]) if inner else None, loc=loc)

    def _stmt_fallthrough_stmt(self, t: Tree, loc) -> Stmt:
        return Branch(keyword="fallthrough", loc=loc)

    def _stmt_go_stmt(self, t: Tree, loc) -> Stmt:
        return Go(call=self.ast_builder._expr(t.children[0]), loc=loc)

    def _stmt_defer_stmt(self, t: Tree, loc) -> Stmt:
        return Defer(call=self.ast_builder._expr(t.children[0]), loc=loc)

    def _stmt_block(self, t: Tree, loc) -> Stmt:
        return self.ast_builder._block(t)

    def _stmt_if_stmt(self, t: Tree, loc) -> Stmt:
        kids = trees(t)
        init = None
        if kids[0].data == "if_init":
            init = self._optional(kids.pop(0))
        cond, body, *rest = kids
        orelse = None
        if rest:
            tail = rest[0]
            orelse = self._stmt_if_stmt(tail, span_of(tail)) if tail.data == "if_stmt" else self.ast_builder._block(tail)
        return If(init=init, cond=self.ast_builder._expr(cond), then=self.ast_builder._block(body),
                  orelse=orelse, loc=loc)

    def _stmt_for_forever(self, t: Tree, loc) -> Stmt:
        body = self.ast_builder._block(first_tree(t.children, "body"))
        return For(init=None, cond=None, post=None, body=body, loc=loc)

    def _stmt_for_cond(self, t: Tree, loc) -> Stmt:
        cond, body = trees(t)
        return For(init=None, cond=self.ast_builder._expr(cond), post=None,
                   body=self.ast_builder._block(body), loc=loc)

    def _stmt_for_three(self, t: Tree, loc) -> Stmt:
        clause, body = trees(t)
        cond = first_tree(clause.children, "for_cond_expr")
        return For(
            init=self._optional(first_tree(clause.children, "for_init")),
            cond=self.ast_builder._expr(cond.children[0]) if cond is not None else None,
            post=self._optional(first_tree(clause.children, "for_post")),
            body=self.ast_builder._block(body),
            loc=loc,
        )

    def _stmt_for_range(self, t: Tree, loc) -> Stmt:
        clause, body = trees(t)
        targets = first_tree(clause.children, "expr_list")
        range_op = first_tree(clause.children, "range_op")
        iterable = trees(clause)[-1]
        key = value = None
        if targets is not None:
            exprs = self.ast_builder._expr_list(targets)
            if len(exprs) > 2:
                raise GoSyntaxError("range clause permits at most two iteration variables", span_of(targets))
            key = exprs[0]
            value = exprs[1] if len(exprs) == 2 else None
        define = range_op is not None and range_op.children[0].type == "DEFINE"
        return ForRange(key=key, value=value, define=define, iterable=self.ast_builder._expr(iterable),
                        body=self.ast_builder._block(body), loc=loc)

    def _stmt_switch_stmt(self, t: Tree, loc) -> Stmt:
        init = self._optional(first_tree(t.children, "switch_init"))
        tag = first_tree(t.children, "switch_tag")
        header = tag.children[0] if tag is not None else None
        guard = self._type_switch_guard(header) if header is not None else None
        if guard is not None:
            bind, value = guard
            return TypeSwitch(init=init, bind=bind, value=value, clauses=self._case_clauses(t), loc=loc)
        if header is not None and header.data != "expr_stmt":
            raise GoSyntaxError("switch expression must be an expression, not a statement", span_of(header))
        return Switch(
            init=init,
            tag=self.ast_builder._expr(header.children[0]) if header is not None else None,
            clauses=self._case_clauses(t),
            loc=loc,
        )

    def _type_switch_guard(self, header: Tree):
        """(bind, value) of a `x.(type)` or `v := x.(type)` header, None for other headers."""
        bind = None
        if header.data == "expr_stmt":
            guard = header.children[0]
        elif header.data == "short_var_decl":
            lhs, rhs = trees(header)
            guard = rhs.children[0] if len(rhs.children) == 1 else None
            if not _is_guard(guard):
                return None
            target = lhs.children[0]
            if len(lhs.children) != 1 or not isinstance(target, Tree) or target.data != "name":
                raise GoSyntaxError("type switch declares exactly one variable", span_of(lhs))
            bind = Name(id=target.children[0].value, loc=span_of(target))
        else:
            return None
        if not _is_guard(guard):
            return None
        return bind, self.ast_builder._expr(guard.children[0])

    def _case_clauses(self, t: Tree):
        clauses = []
        for c in trees(t):
            if c.data == "case_clause":
                exprs = self.ast_builder._expr_list(first_tree(c.children, "expr_list"))
            elif c.data == "default_clause":
                exprs = None
            else:
                continue
            body = self.ast_builder._stmt_list(first_tree(c.children, "stmt_list"))
            clauses.append(CaseClause(exprs=exprs, body=body, loc=span_of(c)))
        return clauses

    def _stmt_select_stmt(self, t: Tree, loc) -> Stmt:
        clauses = []
        for c in trees(t):
            comm = None
            if c.data == "comm_clause":
                comm = self.parse_stmt(c.children[0])
                if not _is_comm(comm):
                    raise GoSyntaxError("select case must be receive, send or assign recv", comm.loc)
            body = self.ast_builder._stmt_list(first_tree(c.children, "stmt_list"))
            clauses.append(CommClause(comm=comm, body=body, loc=span_of(c)))
        return Select(clauses=clauses, loc=loc)


def _is_guard(t) -> bool:
    return isinstance(t, Tree) and t.data == "type_switch_guard"


def _is_comm(stmt: Stmt) -> bool:
    if isinstance(stmt, SendStmt):
        return True
    if isinstance(stmt, ExprStmt):
        value = stmt.expr
    elif isinstance(stmt, ShortVarDecl) or (isinstance(stmt, Assign) and stmt.op == "="):
        if len(stmt.values) != 1:
            return False
        value = stmt.values[0]
    else:
        return False
    value = unparen(value)
    return isinstance(value, UnaryOp) and value.op == "<-"
