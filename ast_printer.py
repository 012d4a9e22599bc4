# Ethan Doughty
# ast_printer.py
import sys
from typing import List

from frontend.ir_json import load_program
from ir import (
    Program, Stmt,
    VariableDeclaration, AssignVariable, PrintVariable, FunctionDeclaration, Invocation,
)


def fmt_stmt(stmt: Stmt, indent: int = 0) -> str:
    """Pretty-format one statement as pseudo-source."""
    pad = "  " * indent

    if isinstance(stmt, VariableDeclaration):
        return pad + f"var {stmt.name};"
    if isinstance(stmt, AssignVariable):
        return pad + f"{stmt.name} = smth;"
    if isinstance(stmt, PrintVariable):
        return pad + f"print({stmt.name});"
    if isinstance(stmt, Invocation):
        if stmt.is_conditional:
            return pad + f"if (smth) {stmt.name}();"
        return pad + f"{stmt.name}();"
    if isinstance(stmt, FunctionDeclaration):
        out = [pad + f"func {stmt.name} {{"]
        out.extend(fmt_stmt(s, indent + 1) for s in stmt.body)
        out.append(pad + "}")
        return "\n".join(out)

    return pad + repr(stmt)


def fmt_program(program: Program) -> str:
    """Pretty-format a whole program, one statement per line."""
    lines: List[str] = [fmt_stmt(s) for s in program.body]
    return "\n".join(lines)


def main():
    if len(sys.argv) != 2:
        print("Usage: python ast_printer.py <program.json>")
        sys.exit(1)

    path = sys.argv[1]
    try:
        program = load_program(path)
    except (OSError, ValueError) as e:
        print(f"Error while loading {path}: {e}")
        sys.exit(1)

    print(f"==== Program {path}")
    print(fmt_program(program))


if __name__ == "__main__":
    main()
