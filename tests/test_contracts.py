"""Unit tests for the contract lattice, contract maps, and transitions."""
import sys
import os
# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import unittest
from runtime.contracts import ContractMap, VariableContract, EXTERNAL_OBLIGATIONS, DECLARED_HERE
from analysis.context import AnalysisContext
from analysis.transitions import declare_transition, assign_transition, read_transition
import analysis.diagnostics as diag

C = VariableContract


class TestContractMap(unittest.TestCase):
    def test_get_and_set_are_local(self):
        outer = ContractMap()
        outer.set("x", C.LOCAL)
        inner = outer.push_scope()
        self.assertIsNone(inner.get("x"))
        inner.set("y", C.EXTERNAL)
        self.assertIsNone(outer.get("y"))

    def test_resolve_through_chain_is_externally_declared(self):
        """An enclosing binding is seen as EXTERNALLY_DECLARED, whatever its own state."""
        root = ContractMap()
        root.set("x", C.LOCALLY_DECLARED)
        middle = root.push_scope()
        inner = middle.push_scope()
        self.assertIs(inner.resolve("x"), C.EXTERNALLY_DECLARED)
        self.assertIs(root.resolve("x"), C.LOCALLY_DECLARED)
        self.assertIsNone(inner.resolve("nope"))

    def test_local_binding_wins_over_enclosing(self):
        root = ContractMap()
        root.set("x", C.LOCAL)
        inner = root.push_scope()
        inner.set("x", C.EXTERNAL)
        self.assertIs(inner.resolve("x"), C.EXTERNAL)

    def test_declared_in_enclosing(self):
        root = ContractMap()
        root.set("a", C.LOCAL)
        root.set("b", C.EXTERNAL)
        inner = root.push_scope().push_scope()
        self.assertTrue(inner.declared_in_enclosing("a"))
        self.assertFalse(inner.declared_in_enclosing("b"))
        self.assertFalse(root.declared_in_enclosing("a"))

    def test_contains_and_len(self):
        root = ContractMap()
        root.set("x", C.LOCAL)
        inner = root.push_scope()
        self.assertIn("x", inner)
        self.assertNotIn("x", inner.bindings)
        self.assertEqual(len(inner), 0)
        self.assertEqual(len(root), 1)

    def test_items_in_insertion_order(self):
        m = ContractMap()
        m.set("b", C.EXTERNAL)
        m.set("a", C.LOCAL)
        m.set("b", C.EXTERNALLY_DECLARED)
        self.assertEqual(list(m.items()), [("b", C.EXTERNALLY_DECLARED), ("a", C.LOCAL)])

    def test_items_snapshot_allows_mutation(self):
        m = ContractMap()
        m.set("a", C.EXTERNAL)
        for name, _ in m.items():
            m.set(name + "2", C.LOCAL)
        self.assertEqual(len(m), 2)

    def test_partition(self):
        self.assertEqual(EXTERNAL_OBLIGATIONS | DECLARED_HERE, set(C))
        self.assertFalse(EXTERNAL_OBLIGATIONS & DECLARED_HERE)


class TestTransitions(unittest.TestCase):
    def setUp(self):
        self.ctx = AnalysisContext()
        self.root = self.ctx.new_root([])
        self.func = self.ctx.new_function("F", [], self.root)

    def test_read_unknown_requires_external(self):
        read_transition(self.func, "x", self.ctx)
        self.assertIs(self.func.contracts.get("x"), C.EXTERNAL)

    def test_read_locally_declared_reports(self):
        self.func.contracts.set("x", C.LOCALLY_DECLARED)
        read_transition(self.func, "x", self.ctx)
        self.assertEqual(self.ctx.problems.to_list(), [diag.err_variable_not_assigned("x")])
        self.assertIs(self.func.contracts.get("x"), C.LOCALLY_DECLARED)

    def test_read_enclosing_variable_becomes_external(self):
        self.root.contracts.set("x", C.LOCAL)
        read_transition(self.func, "x", self.ctx)
        self.assertIs(self.func.contracts.get("x"), C.EXTERNAL)
        self.assertEqual(len(self.ctx.problems), 0)

    def test_read_after_assignment_is_silent(self):
        for state in (C.LOCAL, C.EXTERNALLY_DECLARED_LOCALLY_ASSIGNED, C.EXTERNAL):
            self.func.contracts.set("x", state)
            read_transition(self.func, "x", self.ctx)
            self.assertIs(self.func.contracts.get("x"), state)
        self.assertEqual(len(self.ctx.problems), 0)

    def test_assign_transitions(self):
        cases = [
            (None, C.EXTERNALLY_DECLARED_LOCALLY_ASSIGNED),
            (C.EXTERNAL, C.EXTERNALLY_DECLARED_LOCALLY_ASSIGNED),
            (C.EXTERNALLY_DECLARED, C.EXTERNALLY_DECLARED_LOCALLY_ASSIGNED),
            (C.EXTERNALLY_DECLARED_LOCALLY_ASSIGNED, C.EXTERNALLY_DECLARED_LOCALLY_ASSIGNED),
            (C.LOCALLY_DECLARED, C.LOCAL),
            (C.LOCAL, C.LOCAL),
        ]
        for before, after in cases:
            scope = self.ctx.new_function("G", [], self.root)
            if before is not None:
                scope.contracts.set("x", before)
            assign_transition(scope, "x")
            self.assertIs(scope.contracts.get("x"), after, f"from {before}")

    def test_declare_only_fills_unknown_names(self):
        declare_transition(self.func, "x")
        self.assertIs(self.func.contracts.get("x"), C.EXTERNALLY_DECLARED)

        self.func.contracts.set("y", C.EXTERNAL)
        declare_transition(self.func, "y")
        self.assertIs(self.func.contracts.get("y"), C.EXTERNAL)

        self.root.contracts.set("z", C.LOCALLY_DECLARED)
        declare_transition(self.func, "z")
        self.assertIsNone(self.func.contracts.get("z"))

    def test_function_names_are_never_given_contracts(self):
        """A visible function is always declared and assigned."""
        self.root.declare_function("Bar", self.ctx.new_function("Bar", [], self.root))
        for scope in (self.root, self.func):
            read_transition(scope, "Bar", self.ctx)
            declare_transition(scope, "Bar")
            assign_transition(scope, "Bar")
            self.assertIsNone(scope.contracts.get("Bar"))
        self.assertEqual(len(self.ctx.problems), 0)


class TestProblemSink(unittest.TestCase):
    def test_deduplicates_in_order(self):
        sink = diag.ProblemSink()
        sink.add(diag.err_unknown_function("F"))
        sink.add(diag.err_variable_not_assigned("x"))
        sink.add(diag.err_unknown_function("F"))
        self.assertEqual(sink.to_list(), [
            diag.Problem(diag.UNKNOWN_FUNCTION, "F"),
            diag.Problem(diag.VARIABLE_NOT_ASSIGNED, "x"),
        ])

    def test_message_and_str(self):
        p = diag.err_assign_to_function("Bar")
        self.assertEqual(p.message, "Can not assign value to function")
        self.assertIn("E_ASSIGN_TO_FUNCTION", str(p))
        self.assertIn("Bar", str(p))

    def test_problems_to_dicts(self):
        out = diag.problems_to_dicts([diag.err_variable_not_declared("y")])
        self.assertEqual(out, [{
            "code": "E_VARIABLE_NOT_DECLARED",
            "symbol": "y",
            "message": "No such variable declared",
        }])


if __name__ == '__main__':
    unittest.main()
