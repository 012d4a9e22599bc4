"""Convert defassign Problem objects to LSP Diagnostic objects."""
from __future__ import annotations

import json
import re

from lsprotocol import types
from analysis.diagnostics import Problem, UNKNOWN_FUNCTION, ASSIGN_TO_FUNCTION

# Problems that point at a function name rather than a variable
FUNCTION_CODES = {UNKNOWN_FUNCTION, ASSIGN_TO_FUNCTION}


def find_symbol_range(symbol: str, source_lines: list[str]) -> types.Range:
    """Locate the first `"name": "<symbol>"` entry of a JSON program document.

    Args:
        symbol: Variable or function name
        source_lines: Document source split into lines

    Returns:
        Range covering the quoted symbol, or an empty range at the document start
    """
    quoted = re.escape(json.dumps(symbol))
    pattern = re.compile(r'"name"\s*:\s*(' + quoted + r')')
    for line_num, line_text in enumerate(source_lines):
        m = pattern.search(line_text)
        if m:
            return types.Range(
                start=types.Position(line=line_num, character=m.start(1)),
                end=types.Position(line=line_num, character=m.end(1)),
            )
    return types.Range(
        start=types.Position(line=0, character=0),
        end=types.Position(line=0, character=0),
    )


def to_lsp_diagnostic(p: Problem, source_lines: list[str]) -> types.Diagnostic:
    """Convert a defassign Problem to an LSP Diagnostic.

    Args:
        p: Problem reported by the analyzer
        source_lines: Document source split into lines (for range calculation)

    Returns:
        LSP Diagnostic positioned on the first occurrence of the symbol
    """
    kind = "function" if p.code in FUNCTION_CODES else "variable"
    return types.Diagnostic(
        range=find_symbol_range(p.symbol, source_lines),
        severity=types.DiagnosticSeverity.Error,
        code=p.code,
        source="defassign",
        message=f"{p.message}: {kind} '{p.symbol}'",
    )


def error_diagnostic(message: str) -> types.Diagnostic:
    """Diagnostic at the document start for load or internal errors."""
    return types.Diagnostic(
        range=types.Range(
            start=types.Position(line=0, character=0),
            end=types.Position(line=0, character=0),
        ),
        severity=types.DiagnosticSeverity.Error,
        source="defassign",
        message=message,
    )
