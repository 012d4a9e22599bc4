# Ethan Doughty
# transitions.py
"""Lattice transitions shared by statement dispatch and invocation propagation.

A name resolving to a visible function is always declared and assigned, so
every transition leaves it alone and no contract is ever recorded for it.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

import analysis.diagnostics as diag
from runtime.contracts import VariableContract

if TYPE_CHECKING:
    from analysis.context import AnalysisContext, FunctionContext


def declare_transition(scope: 'FunctionContext', name: str) -> None:
    """Require name to be declared; assignment is not constrained.

    A name already resolved locally or through an enclosing scope keeps its
    contract, the weaker requirement being satisfied.
    """
    if scope.is_function(name):
        return
    if scope.contracts.resolve(name) is None:
        scope.contracts.set(name, VariableContract.EXTERNALLY_DECLARED)


def assign_transition(scope: 'FunctionContext', name: str) -> None:
    """Record that name is declared and assigned from this point on."""
    if scope.is_function(name):
        return
    current = scope.contracts.get(name)
    if current is None or current in (
        VariableContract.EXTERNAL,
        VariableContract.EXTERNALLY_DECLARED,
    ):
        scope.contracts.set(name, VariableContract.EXTERNALLY_DECLARED_LOCALLY_ASSIGNED)
    elif current is VariableContract.LOCALLY_DECLARED:
        # This scope discharged its own declaration's assignment obligation
        scope.contracts.set(name, VariableContract.LOCAL)


def read_transition(scope: 'FunctionContext', name: str, ctx: 'AnalysisContext') -> None:
    """Require name to hold a value at this point."""
    if scope.is_function(name):
        return
    current = scope.contracts.resolve(name)
    if current is None or current is VariableContract.EXTERNALLY_DECLARED:
        scope.contracts.set(name, VariableContract.EXTERNAL)
    elif current is VariableContract.LOCALLY_DECLARED:
        ctx.report(diag.err_variable_not_assigned(name))
