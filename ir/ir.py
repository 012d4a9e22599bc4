# Ethan Doughty
# ir.py
"""Intermediate Representation (IR) for definite-assignment programs.

This module defines a typed, dataclass-based AST for the toy imperative
language checked by the analyzer. Nodes are plain data carriers and are
never mutated by the analysis.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List

# ----- Statements -----

@dataclass(frozen=True)
class Stmt:
    """Base class for all statements."""
    pass

@dataclass(frozen=True)
class VariableDeclaration(Stmt):
    """Variable declaration (var foo;)."""
    name: str

@dataclass(frozen=True)
class AssignVariable(Stmt):
    """Assignment of some value to a variable (foo = smth;)."""
    name: str

@dataclass(frozen=True)
class PrintVariable(Stmt):
    """Read of a variable (print(foo);)."""
    name: str

@dataclass(frozen=True)
class FunctionDeclaration(Stmt):
    """Function declaration with its own ordered body.

    Represents: func name { body }
    Nested declarations inside the body are allowed.
    """
    name: str
    body: List[Stmt] = field(default_factory=list)

@dataclass(frozen=True)
class Invocation(Stmt):
    """Call of a declared function.

    is_conditional marks calls guarded by a branch (if (smth) name();),
    which are not guaranteed to execute.
    """
    name: str
    is_conditional: bool = False

# ----- Program -----

@dataclass(frozen=True)
class Program:
    """Top-level program consisting of statements."""
    body: List[Stmt] = field(default_factory=list)

    def __iter__(self):
        return iter(self.body)

    def __len__(self) -> int:
        return len(self.body)
