# Ethan Doughty
# analysis/__init__.py
"""Analysis package: definite declaration/assignment checking."""

from __future__ import annotations
from typing import List, Optional, Union

from analysis.context import AnalysisContext, AnalysisInvariantError
from analysis.diagnostics import Problem
from analysis.stmt_analysis import analyze_scope
from ir import Program, Stmt
from runtime.contracts import VariableContract, EXTERNAL_OBLIGATIONS

import analysis.diagnostics as diag


def analyze_program(program: Union[Program, List[Stmt]], ctx: Optional[AnalysisContext] = None) -> List[Problem]:
    """Check that every variable is declared before use and assigned before being read.

    The top-level scope is analyzed eagerly; function bodies are analyzed the
    first time they are invoked. Names still carrying an external obligation
    at the top level have no outer scope left to satisfy them and are reported
    as not declared.

    Args:
        program: IR program (or bare list of statements) to analyze
        ctx: Analysis context (created if not provided)

    Returns:
        Problems in the order they were found, without duplicates
    """
    if ctx is None:
        ctx = AnalysisContext()

    statements = program.body if isinstance(program, Program) else list(program)
    root = ctx.new_root(statements)
    analyze_scope(root, ctx)

    for var_name, contract in root.contracts.items():
        if contract in EXTERNAL_OBLIGATIONS:
            ctx.report(diag.err_variable_not_declared(var_name))
        elif contract in (VariableContract.LOCALLY_DECLARED, VariableContract.LOCAL):
            pass  # unused declaration or plain local variable
        else:
            raise AnalysisInvariantError(f"Unknown contract {contract!r} for '{var_name}'")

    return ctx.problems.to_list()


analyze = analyze_program

__all__ = ["analyze", "analyze_program", "AnalysisContext", "AnalysisInvariantError", "Problem"]
