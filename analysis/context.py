# Ethan Doughty
# context.py
"""Analysis context, function contexts, and the engine's invariant error."""

from __future__ import annotations
from collections import ChainMap
from dataclasses import dataclass, field
from typing import List, Optional, Set

from ir import Stmt
from analysis.diagnostics import Problem, ProblemSink
from runtime.contracts import ContractMap

ROOT_SCOPE_NAME = "<program>"


class AnalysisInvariantError(RuntimeError):
    """Raised when a statement kind or contract state outside the closed sets reaches a dispatch point."""
    pass

class UnreachableCode(Exception):
    """Raised once a scope is proven infinitely recursive; the rest of its body never executes."""
    pass


@dataclass(eq=False)
class FunctionContext:
    """Analysis scope for one function body or for the top-level program.

    contracts holds this scope's own contract map, chained (read-only) onto the
    enclosing scope's map. functions is a ChainMap whose first map holds this
    scope's own declarations and whose parents are the enclosing scopes' tables,
    so sibling functions see each other regardless of declaration order.
    """
    index: int
    name: str
    statements: List[Stmt]
    contracts: ContractMap
    functions: ChainMap
    parent: Optional[FunctionContext] = None
    is_analyzed: bool = False
    is_infinitely_recursive: bool = False
    always_invokes: Set[int] = field(default_factory=set)  # arena indices of unconditionally reached scopes

    def lookup_function(self, name: str) -> Optional[FunctionContext]:
        """Resolve a function name in the visible-function table."""
        return self.functions.get(name)

    def is_function(self, name: str) -> bool:
        return name in self.functions

    def declare_function(self, name: str, func_ctx: FunctionContext) -> None:
        """Register a function declared directly in this scope."""
        self.functions.maps[0][name] = func_ctx

    def is_symbol_declared(self, name: str) -> bool:
        """Check if a function named name would collide with a visible function or an enclosing variable.

        Registration runs before any statement of this scope, so no local contract exists yet.
        """
        return self.is_function(name) or self.contracts.declared_in_enclosing(name)

    def __repr__(self) -> str:
        return (
            f"FunctionContext(#{self.index} {self.name!r}, analyzed={self.is_analyzed}, "
            f"recursive={self.is_infinitely_recursive}, {self.contracts!r})"
        )


@dataclass
class AnalysisContext:
    """Threaded analysis state for a single analyze_program call.

    scopes is the arena of every FunctionContext created during the run;
    a context's index is its position here.
    """
    problems: ProblemSink = field(default_factory=ProblemSink)
    scopes: List[FunctionContext] = field(default_factory=list)
    analysis_count: int = 0

    def new_root(self, statements: List[Stmt]) -> FunctionContext:
        """Create the top-level scope (no enclosing scope, empty contract chain)."""
        return self._add_scope(ROOT_SCOPE_NAME, statements, ContractMap(), ChainMap(), None)

    def new_function(self, name: str, body: List[Stmt], enclosing: FunctionContext) -> FunctionContext:
        """Create the scope of a function declared directly inside enclosing."""
        return self._add_scope(
            name,
            body,
            enclosing.contracts.push_scope(),
            enclosing.functions.new_child(),
            enclosing,
        )

    def _add_scope(self, name, statements, contracts, functions, parent) -> FunctionContext:
        scope = FunctionContext(
            index=len(self.scopes),
            name=name,
            statements=statements,
            contracts=contracts,
            functions=functions,
            parent=parent,
        )
        self.scopes.append(scope)
        return scope

    def scope(self, index: int) -> FunctionContext:
        return self.scopes[index]

    def report(self, problem: Problem) -> None:
        self.problems.add(problem)
