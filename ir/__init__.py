"""IR package: dataclass AST for definite-assignment programs."""

from ir.ir import (
    Stmt,
    VariableDeclaration,
    AssignVariable,
    PrintVariable,
    FunctionDeclaration,
    Invocation,
    Program,
)

__all__ = [
    "Stmt",
    "VariableDeclaration",
    "AssignVariable",
    "PrintVariable",
    "FunctionDeclaration",
    "Invocation",
    "Program",
]
