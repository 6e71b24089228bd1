"""
AST Builder module for gostub.

Exports:
    ASTBuilder: Main class for building typed AST from Lark parse trees
    GoSyntaxError: Raised for well-formed parse trees that are not valid Go
"""
from gostub.semantics.ast_builder.builder import ASTBuilder
from gostub.semantics.ast_builder.exceptions import GoSyntaxError

__all__ = [
    'ASTBuilder',
    'GoSyntaxError',
]
