# Ethan Doughty
# stmt_analysis.py
"""Statement analysis: lazy scope analysis and dispatch for IR statements."""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from analysis.context import AnalysisContext, AnalysisInvariantError, FunctionContext, UnreachableCode
from analysis.func_analysis import apply_invocation, resolve_callee
from analysis.transitions import assign_transition, read_transition

from ir import (
    Stmt,
    VariableDeclaration, AssignVariable, PrintVariable, FunctionDeclaration, Invocation,
)

import analysis.diagnostics as diag
from runtime.contracts import VariableContract, EXTERNAL_OBLIGATIONS

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class _Frame:
    """A scope whose body is being walked; pending holds a call waiting on its callee."""
    scope: FunctionContext
    position: int = 0
    pending: Optional[Tuple[Invocation, FunctionContext]] = None

    def exhausted(self) -> bool:
        return self.pending is None and self.position >= len(self.scope.statements)


def analyze_scope(scope: FunctionContext, ctx: AnalysisContext) -> None:
    """Analyze a function body (or the top-level program) at most once.

    Two-pass analysis:
    1. Register all direct function declarations (enables forward references)
    2. Dispatch statements in order, stopping at unreachable code

    A call to a function not analyzed yet suspends the caller on an explicit
    stack until the callee's body is done, so call chain depth is bounded by
    memory rather than by the interpreter's recursion limit.

    Args:
        scope: Function context to analyze
        ctx: Analysis context
    """
    if scope.is_analyzed:
        return

    stack: List[_Frame] = [_enter_scope(scope, ctx)]
    while stack:
        frame = stack[-1]
        if frame.exhausted():
            stack.pop()
            continue

        try:
            callee = _step(frame, ctx)
        except UnreachableCode:
            logger.debug("Scope #%d %s never returns; skipping the rest of its body",
                         frame.scope.index, frame.scope.name)
            stack.pop()
            continue

        if callee is not None:
            stack.append(_enter_scope(callee, ctx))


def _enter_scope(scope: FunctionContext, ctx: AnalysisContext) -> _Frame:
    # Set before the body is walked so recursive calls see the scope as analyzed
    scope.is_analyzed = True
    ctx.analysis_count += 1
    logger.debug("Analyzing scope #%d %s", scope.index, scope.name)

    # Pass 1: Register function declarations
    for stmt in scope.statements:
        if isinstance(stmt, FunctionDeclaration):
            _register_function(scope, stmt, ctx)

    return _Frame(scope)


def _step(frame: _Frame, ctx: AnalysisContext) -> Optional[FunctionContext]:
    """Advance frame by one statement; return a callee to analyze before resuming."""
    if frame.pending is not None:
        call, callee = frame.pending
        frame.pending = None
        complete_invocation(call, frame.scope, callee, ctx)
        return None

    stmt = frame.scope.statements[frame.position]
    frame.position += 1
    callee = analyze_stmt(stmt, frame.scope, ctx)
    if callee is not None:
        frame.pending = (stmt, callee)
    return callee


def _register_function(scope: FunctionContext, decl: FunctionDeclaration, ctx: AnalysisContext) -> None:
    """Create the nested context for decl; the earlier declaration wins on collision."""
    if scope.is_symbol_declared(decl.name):
        ctx.report(diag.err_already_declared(decl.name))
        return
    scope.declare_function(decl.name, ctx.new_function(decl.name, decl.body, scope))


def complete_invocation(call: Invocation, scope: FunctionContext, callee: FunctionContext,
                        ctx: AnalysisContext) -> None:
    """Apply an analyzed callee to scope.

    Raises:
        UnreachableCode: if the call proves the scope never returns
    """
    apply_invocation(call, scope, callee, ctx)
    if scope.is_infinitely_recursive:
        raise UnreachableCode()


def analyze_stmt(stmt: Stmt, scope: FunctionContext, ctx: AnalysisContext) -> Optional[FunctionContext]:
    """Analyze a single statement in scope.

    Args:
        stmt: Statement to analyze
        scope: Scope the statement belongs to
        ctx: Analysis context

    Returns:
        For a call to a function not analyzed yet, that function's context;
        the call completes once it has been analyzed. None otherwise.

    Raises:
        UnreachableCode: if the statement proves the scope never returns
        AnalysisInvariantError: on a statement kind outside the IR
    """
    if isinstance(stmt, VariableDeclaration):
        _declare_variable(scope, stmt.name, ctx)
        return None

    if isinstance(stmt, AssignVariable):
        if scope.is_function(stmt.name):
            ctx.report(diag.err_assign_to_function(stmt.name))
            return None
        assign_transition(scope, stmt.name)
        return None

    if isinstance(stmt, PrintVariable):
        read_transition(scope, stmt.name, ctx)
        return None

    if isinstance(stmt, FunctionDeclaration):
        # Registered in pass 1
        return None

    if isinstance(stmt, Invocation):
        callee = resolve_callee(stmt, scope, ctx)
        if callee is None:
            return None
        if not callee.is_analyzed:
            return callee
        complete_invocation(stmt, scope, callee, ctx)
        return None

    raise AnalysisInvariantError(
        f"Unknown statement of type '{type(stmt).__name__}' in {scope.name}: {stmt!r}"
    )


def _declare_variable(scope: FunctionContext, name: str, ctx: AnalysisContext) -> None:
    current = scope.contracts.get(name)

    if scope.is_function(name):
        # Keeps the contract map and function table disjoint
        ctx.report(diag.err_already_declared(name))
        return

    if current in EXTERNAL_OBLIGATIONS:
        # Assumed captured from outside, turns out to be a new local
        ctx.report(diag.err_used_before_declared(name))
    elif current is not None or scope.contracts.declared_in_enclosing(name):
        ctx.report(diag.err_already_declared(name))

    scope.contracts.set(name, VariableContract.LOCALLY_DECLARED)
