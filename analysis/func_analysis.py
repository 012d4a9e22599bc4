# Ethan Doughty
# func_analysis.py
"""Function call analysis: contract propagation and recursion detection."""

from __future__ import annotations
import logging
from typing import Optional

from ir import Invocation

import analysis.diagnostics as diag
from analysis.context import AnalysisContext, AnalysisInvariantError, FunctionContext
from analysis.transitions import assign_transition, declare_transition, read_transition
from runtime.contracts import VariableContract

logger = logging.getLogger(__name__)


def resolve_callee(call: Invocation, caller: FunctionContext, ctx: AnalysisContext) -> Optional[FunctionContext]:
    """Look up the called function, reporting it when no visible function has that name."""
    callee = caller.lookup_function(call.name)
    if callee is None:
        ctx.report(diag.err_unknown_function(call.name))
    return callee


def apply_invocation(call: Invocation, caller: FunctionContext, callee: FunctionContext,
                     ctx: AnalysisContext) -> None:
    """Apply an analyzed callee's contracts to the caller.

    The callee is analyzed lazily by analyze_scope, at most once no matter
    how many call sites reach it; a callee still being analyzed (a recursive
    call) contributes the contracts gathered so far. Contracts are propagated
    by name:

        EXTERNAL                               -> read in caller
        EXTERNALLY_DECLARED (conditional)      -> declare in caller
        EXTERNALLY_DECLARED (unconditional)    -> assign in caller
        EXTERNALLY_DECLARED_LOCALLY_ASSIGNED   -> declare in caller
        LOCALLY_DECLARED, LOCAL                -> nothing

    Args:
        call: Invocation statement
        caller: Scope containing the call
        callee: Resolved function context of the call
        ctx: Analysis context
    """
    # items() snapshots, the callee may be the caller itself
    for var_name, contract in callee.contracts.items():
        if contract is VariableContract.EXTERNAL:
            read_transition(caller, var_name, ctx)
        elif contract is VariableContract.EXTERNALLY_DECLARED:
            if call.is_conditional:
                declare_transition(caller, var_name)
            else:
                assign_transition(caller, var_name)
        elif contract is VariableContract.EXTERNALLY_DECLARED_LOCALLY_ASSIGNED:
            declare_transition(caller, var_name)
        elif contract in (VariableContract.LOCALLY_DECLARED, VariableContract.LOCAL):
            pass  # internal to the callee
        else:
            raise AnalysisInvariantError(
                f"Unknown contract {contract!r} for '{var_name}' inside '{callee.name}'"
            )

    if not call.is_conditional:
        _record_unconditional_call(caller, callee, ctx)


def _record_unconditional_call(caller: FunctionContext, callee: FunctionContext, ctx: AnalysisContext) -> None:
    """Extend caller's always-invokes closure and flag unconditional infinite recursion.

    Only cycles in which every hop is unconditional are recognized; a cycle
    closed through a conditional call is not guaranteed to recur. Reaching any
    scope already known to never return also means the caller never returns.
    """
    caller.always_invokes.add(callee.index)
    caller.always_invokes |= callee.always_invokes

    if (
        callee is caller
        or caller.index in caller.always_invokes
        or any(ctx.scope(i).is_infinitely_recursive for i in callee.always_invokes | {callee.index})
    ):
        if not caller.is_infinitely_recursive:
            logger.debug("Scope #%d %s recurses unconditionally via %s",
                         caller.index, caller.name, callee.name)
        caller.is_infinitely_recursive = True
