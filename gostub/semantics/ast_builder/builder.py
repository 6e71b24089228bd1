"""Main ASTBuilder orchestrator for gostub.

This module contains the core ASTBuilder class that coordinates parsing of Lark
parse trees into typed AST nodes. The builder delegates to specialized parsers:

- Type parsing: semantics.ast_builder.types
- Expression parsing: semantics.ast_builder.expressions
- Statement parsing: semantics.ast_builder.statements
- Declaration parsing: semantics.ast_builder.declarations
"""
from __future__ import annotations
from typing import List

from lark import Tree, Token

from gostub.semantics.ast import Program, ImportSpec, Block, Expr, Stmt, Decl
from gostub.semantics.ast_builder.tree_navigation import first_tree, first_token
from gostub.internals.report import span_of


class ASTBuilder:
    def __init__(self):
        """Initialize ASTBuilder with lazy-loaded parsers."""
        self._type_parser = None
        self._expr_parser = None
        self._stmt_parser = None

    @property
    def type_parser(self):
        """Lazy-load TypeParser on first use."""
        if self._type_parser is None:
            from gostub.semantics.ast_builder.types import TypeParser
            self._type_parser = TypeParser(self)
        return self._type_parser

    @property
    def expr_parser(self):
        """Lazy-load ExpressionParser on first use."""
        if self._expr_parser is None:
            from gostub.semantics.ast_builder.expressions import ExpressionParser
            self._expr_parser = ExpressionParser(self)
        return self._expr_parser

    @property
    def stmt_parser(self):
        """Lazy-load StatementParser on first use."""
        if self._stmt_parser is None:
            from gostub.semantics.ast_builder.statements import StatementParser
            self._stmt_parser = StatementParser(self)
        return self._stmt_parser

    def build(self, tree: Tree) -> Program:
        """Build Program AST from parse tree."""
        from gostub.semantics.ast_builder import declarations

        assert isinstance(tree, Tree) and tree.data == "source_file"
        package = ""
        imports: List[ImportSpec] = []
        decls: List[Decl] = []

        for node in tree.children:
            if not isinstance(node, Tree):
                continue
            if node.data == "package_clause":
                package = first_token(node.children, "IDENT").value
            elif node.data == "import_decl":
                imports.extend(declarations.parse_import_decl(node, self))
            else:
                decls.append(declarations.parse_decl(node, self))

        return Program(package=package, imports=imports, decls=decls, loc=span_of(tree))

    # --- delegation helpers used by the sub-parsers ---

    def _expr(self, t: Tree | Token) -> Expr:
        return self.expr_parser.parse_expr(t)

    def _type(self, t: Tree | Token) -> Expr:
        return self.type_parser.parse_type(t)

    def _stmt(self, t: Tree) -> Stmt:
        return self.stmt_parser.parse_stmt(t)

    def _block(self, t: Tree) -> Block:
        """Build a Block from a `body` or `block` tree."""
        stmt_list = first_tree(t.children, "stmt_list")
        stmts = self._stmt_list(stmt_list) if stmt_list is not None else []
        return Block(statements=stmts, loc=span_of(t))

    def _stmt_list(self, t: Tree) -> List[Stmt]:
        return [self._stmt(c) for c in t.children if isinstance(c, Tree)]

    def _expr_list(self, t: Tree) -> List[Expr]:
        return [self._expr(c) for c in t.children]
