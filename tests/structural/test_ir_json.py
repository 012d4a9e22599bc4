"""Structural tests for frontend/ir_json.py.

Validates that ir_to_json -> ir_from_json is a lossless round-trip for every
fixture program, and that malformed documents are rejected with ValueError.

Run directly:   python3 tests/structural/test_ir_json.py
Run via runner: python3 defassign.py --tests
"""

import sys
import os

# Allow running from any working directory
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import json
from pathlib import Path
from frontend.ir_json import ir_to_json, ir_from_json, program_from_data, _STMT_SERIALIZERS, _STMT_BUILDERS
from ir import Program, VariableDeclaration, FunctionDeclaration, Invocation


_REPO_ROOT = Path(__file__).parent.parent.parent


def _expect_value_error(doc) -> str:
    """Deserialize doc (a str or decoded data) and return the ValueError message."""
    try:
        if isinstance(doc, str):
            ir_from_json(doc)
        else:
            program_from_data(doc)
    except ValueError as e:
        return str(e)
    raise AssertionError(f"Expected ValueError for {doc!r}")


# ---------------------------------------------------------------------------
# Round trips
# ---------------------------------------------------------------------------

def test_round_trip_all_fixtures():
    """Every fixture program survives serialize -> deserialize unchanged."""
    fixtures = sorted((_REPO_ROOT / "tests" / "programs").glob("**/*.json"))
    assert fixtures, "No fixture programs found"
    for path in fixtures:
        prog = program_from_data(json.loads(path.read_text(encoding="utf-8")))
        restored = ir_from_json(ir_to_json(prog))
        assert prog == restored, (
            f"Round-trip mismatch for {path.name}.\n"
            f"Original: {prog}\n"
            f"Restored: {restored}"
        )


def test_nested_functions_round_trip():
    prog = Program([
        FunctionDeclaration("Outer", [
            VariableDeclaration("x"),
            FunctionDeclaration("Inner", [Invocation("Outer", is_conditional=True)]),
        ]),
        Invocation("Outer"),
    ])
    assert ir_from_json(ir_to_json(prog, indent=None)) == prog


# ---------------------------------------------------------------------------
# Completeness: every Stmt subclass has a serializer and a builder
# ---------------------------------------------------------------------------

def test_stmt_serializer_completeness():
    """Every Stmt subclass in ir.ir has an entry in _STMT_SERIALIZERS and _STMT_BUILDERS."""
    import ir.ir as ir_module
    import inspect

    stmt_subclasses = set()
    for name, obj in vars(ir_module).items():
        if (inspect.isclass(obj)
                and issubclass(obj, ir_module.Stmt)
                and obj is not ir_module.Stmt):
            stmt_subclasses.add(name)

    missing = stmt_subclasses - set(_STMT_SERIALIZERS.keys())
    assert not missing, (
        f"Stmt subclasses missing from _STMT_SERIALIZERS: {sorted(missing)}"
    )
    missing = stmt_subclasses - set(_STMT_BUILDERS.keys())
    assert not missing, (
        f"Stmt subclasses missing from _STMT_BUILDERS: {sorted(missing)}"
    )


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------

def test_empty_program():
    prog = Program()
    assert ir_from_json(ir_to_json(prog)) == prog


def test_json_has_type_field():
    """Every serialized node has a 'type' discriminator field."""
    prog = Program([FunctionDeclaration("Bar", [Invocation("Bar")])])
    data = json.loads(ir_to_json(prog))
    assert data["type"] == "Program"
    assert data["body"][0]["type"] == "FunctionDeclaration"
    assert data["body"][0]["body"][0] == {"type": "Invocation", "name": "Bar", "conditional": False}


def test_bare_statement_list_accepted():
    prog = program_from_data([{"type": "PrintVariable", "name": "foo"}])
    assert len(prog) == 1


def test_conditional_defaults_to_false():
    prog = ir_from_json('[{"type": "Invocation", "name": "Bar"}]')
    assert prog.body[0] == Invocation("Bar", is_conditional=False)


def test_unknown_statement_type_rejected():
    msg = _expect_value_error([{"type": "Loop", "name": "x"}])
    assert "Loop" in msg


def test_missing_name_rejected():
    _expect_value_error([{"type": "VariableDeclaration"}])
    _expect_value_error([{"type": "AssignVariable", "name": ""}])
    _expect_value_error([{"type": "PrintVariable", "name": 3}])


def test_non_bool_conditional_rejected():
    _expect_value_error([{"type": "Invocation", "name": "Bar", "conditional": "yes"}])


def test_non_program_rejected():
    _expect_value_error({"type": "Module", "body": []})
    _expect_value_error("42")
    _expect_value_error([42])
    _expect_value_error({"type": "Program", "body": {}})


def test_invalid_json_rejected():
    _expect_value_error("{not json")


if __name__ == "__main__":
    failures = 0
    for name, func in sorted(globals().items()):
        if name.startswith("test_") and callable(func):
            try:
                func()
                print(f"PASS {name}")
            except AssertionError as e:
                failures += 1
                print(f"FAIL {name}: {e}")
    sys.exit(1 if failures else 0)
