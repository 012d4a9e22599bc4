# Ethan Doughty
# contracts.py
"""Variable contract lattice and per-scope contract maps."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple


class VariableContract(Enum):
    """Obligation a scope places on a name relative to its enclosing/caller context."""

    # Must be declared and assigned externally.
    EXTERNAL = "external"
    # Must be declared externally; no assignment constraint.
    EXTERNALLY_DECLARED = "externally_declared"
    # Must be declared externally; guaranteed to be assigned locally.
    EXTERNALLY_DECLARED_LOCALLY_ASSIGNED = "externally_declared_locally_assigned"
    # Declared locally, not proven assigned yet.
    LOCALLY_DECLARED = "locally_declared"
    # Declared and assigned locally.
    LOCAL = "local"

    def __str__(self) -> str:
        return self.value


EXTERNAL_OBLIGATIONS = frozenset({
    VariableContract.EXTERNAL,
    VariableContract.EXTERNALLY_DECLARED,
    VariableContract.EXTERNALLY_DECLARED_LOCALLY_ASSIGNED,
})

DECLARED_HERE = frozenset({
    VariableContract.LOCALLY_DECLARED,
    VariableContract.LOCAL,
})


@dataclass
class ContractMap:
    """Mapping from variable names to their contracts within one scope.

    Supports a parent-pointer chain to the enclosing scopes' maps.
    get() and set() only touch the local scope; resolve() reads through
    the chain, where any hit in an enclosing scope is seen from here as
    EXTERNALLY_DECLARED rather than the enclosing scope's own state.
    """
    bindings: Dict[str, VariableContract] = field(default_factory=dict)
    parent: Optional[ContractMap] = None

    def get(self, name: str) -> Optional[VariableContract]:
        """Get the local contract for name, or None."""
        return self.bindings.get(name)

    def set(self, name: str, contract: VariableContract) -> None:
        """Set contract in local scope."""
        self.bindings[name] = contract

    def resolve(self, name: str) -> Optional[VariableContract]:
        """Resolve name locally, then through the enclosing chain."""
        if name in self.bindings:
            return self.bindings[name]
        if self.parent is not None and name in self.parent:
            return VariableContract.EXTERNALLY_DECLARED
        return None

    def declared_in_enclosing(self, name: str) -> bool:
        """Check if an enclosing scope declared name itself (LOCALLY_DECLARED or LOCAL)."""
        scope = self.parent
        while scope is not None:
            if scope.bindings.get(name) in DECLARED_HERE:
                return True
            scope = scope.parent
        return False

    def __contains__(self, name: str) -> bool:
        """Check if name is bound anywhere in the scope chain."""
        scope = self
        while scope is not None:
            if name in scope.bindings:
                return True
            scope = scope.parent
        return False

    def push_scope(self) -> ContractMap:
        """Create a child scope with this map as parent."""
        return ContractMap(parent=self)

    def items(self) -> Iterator[Tuple[str, VariableContract]]:
        """Iterate local bindings in insertion order."""
        return iter(list(self.bindings.items()))

    def __len__(self) -> int:
        return len(self.bindings)

    def __repr__(self) -> str:
        items = ", ".join(f"{k}: {v}" for k, v in self.bindings.items())
        return f"ContractMap({{{items}}})"
