# Ethan Doughty
# ir_json.py
"""JSON serializer and deserializer for the ir.ir dataclass tree.

Usage:
    from frontend.ir_json import ir_to_json, ir_from_json
    json_str = ir_to_json(program)          # Program -> JSON string
    program   = ir_from_json(json_str)      # JSON string -> Program

Format:
    {"type": "Program", "body": [
        {"type": "VariableDeclaration", "name": "foo"},
        {"type": "FunctionDeclaration", "name": "Bar", "body": [...]},
        {"type": "Invocation", "name": "Bar", "conditional": true}
    ]}

CLI:
    python3 -m frontend.ir_json tests/programs/basics/simple_usage.json
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from ir.ir import (
    Program,
    Stmt,
    VariableDeclaration,
    AssignVariable,
    PrintVariable,
    FunctionDeclaration,
    Invocation,
)


# ---------------------------------------------------------------------------
# Serializer
# ---------------------------------------------------------------------------

def _ser_stmt(node) -> Dict:
    """Dispatch to the correct statement serializer by class name."""
    return _STMT_SERIALIZERS[type(node).__name__](node)


def _ser_body(stmts):
    """Serialize a list of statements."""
    return [_ser_stmt(s) for s in stmts]


_STMT_SERIALIZERS = {
    "VariableDeclaration": lambda n: {
        "type": "VariableDeclaration", "name": n.name
    },
    "AssignVariable": lambda n: {
        "type": "AssignVariable", "name": n.name
    },
    "PrintVariable": lambda n: {
        "type": "PrintVariable", "name": n.name
    },
    "FunctionDeclaration": lambda n: {
        "type": "FunctionDeclaration", "name": n.name,
        "body": _ser_body(n.body),
    },
    "Invocation": lambda n: {
        "type": "Invocation", "name": n.name,
        "conditional": n.is_conditional,
    },
}


def _ser_program(program: Program) -> Dict:
    return {"type": "Program", "body": _ser_body(program.body)}


def ir_to_json(program: Program, indent: int = 2) -> str:
    """Serialize a Program to a JSON string.

    Args:
        program: Program dataclass instance
        indent: JSON indentation (None for compact output)

    Returns:
        JSON string
    """
    return json.dumps(_ser_program(program), indent=indent)


# ---------------------------------------------------------------------------
# Deserializer
# ---------------------------------------------------------------------------

def _name(d: Dict) -> str:
    name = d.get("name")
    if not isinstance(name, str) or not name:
        raise ValueError(f"{d.get('type')} node needs a non-empty string 'name', got {name!r}")
    return name


def _build_stmt(d: Any) -> Stmt:
    """Dispatch to the correct statement builder by the 'type' key."""
    if not isinstance(d, dict):
        raise ValueError(f"Expected a statement object, got {type(d).__name__}")
    kind = d.get("type")
    builder = _STMT_BUILDERS.get(kind)
    if builder is None:
        raise ValueError(f"Unknown statement type {kind!r}")
    return builder(d)


def _build_body(lst: Any) -> List[Stmt]:
    if not isinstance(lst, list):
        raise ValueError(f"Expected a list of statements, got {type(lst).__name__}")
    return [_build_stmt(d) for d in lst]


def _build_conditional(d: Dict) -> bool:
    value = d.get("conditional", False)
    if not isinstance(value, bool):
        raise ValueError(f"'conditional' must be a boolean, got {value!r}")
    return value


_STMT_BUILDERS = {
    "VariableDeclaration": lambda d: VariableDeclaration(name=_name(d)),
    "AssignVariable": lambda d: AssignVariable(name=_name(d)),
    "PrintVariable": lambda d: PrintVariable(name=_name(d)),
    "FunctionDeclaration": lambda d: FunctionDeclaration(
        name=_name(d),
        body=_build_body(d.get("body", [])),
    ),
    "Invocation": lambda d: Invocation(
        name=_name(d),
        is_conditional=_build_conditional(d),
    ),
}


def program_from_data(data: Any) -> Program:
    """Build a Program from already-decoded JSON data.

    Accepts either a {"type": "Program", "body": [...]} object or a bare
    list of statements.

    Raises:
        ValueError: if the data does not describe a program
    """
    if isinstance(data, list):
        return Program(body=_build_body(data))
    if not isinstance(data, dict) or data.get("type") != "Program":
        found = data.get("type") if isinstance(data, dict) else type(data).__name__
        raise ValueError(f"Expected 'Program', got {found!r}")
    return Program(body=_build_body(data.get("body", [])))


def ir_from_json(json_str: str) -> Program:
    """Deserialize a JSON string to an ir.ir.Program.

    Args:
        json_str: JSON string produced by ir_to_json or written by hand.

    Returns:
        Program dataclass instance reconstructed from the JSON.

    Raises:
        ValueError: on invalid JSON or an unknown node shape
    """
    return program_from_data(json.loads(json_str))


def load_program(path) -> Program:
    """Read and deserialize a program file."""
    return ir_from_json(Path(path).read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python3 -m frontend.ir_json <program.json>", file=sys.stderr)
        sys.exit(1)

    # Normalize: load and re-emit with canonical keys and indentation
    print(ir_to_json(load_program(sys.argv[1])))
