# Ethan Doughty
# diagnostics.py

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List

# ---------------
# Problem codes
# ---------------

ALREADY_DECLARED = "E_ALREADY_DECLARED"
USED_BEFORE_DECLARED = "E_USED_BEFORE_DECLARED"
ASSIGN_TO_FUNCTION = "E_ASSIGN_TO_FUNCTION"
UNKNOWN_FUNCTION = "E_UNKNOWN_FUNCTION"
VARIABLE_NOT_DECLARED = "E_VARIABLE_NOT_DECLARED"
VARIABLE_NOT_ASSIGNED = "E_VARIABLE_NOT_ASSIGNED"

MESSAGES: Dict[str, str] = {
    ALREADY_DECLARED: "Symbol name already exists",
    USED_BEFORE_DECLARED: (
        "Variable can not be declared since it was used earlier "
        "and expected to be captured from external context"
    ),
    ASSIGN_TO_FUNCTION: "Can not assign value to function",
    UNKNOWN_FUNCTION: "Unknown function called",
    VARIABLE_NOT_DECLARED: "No such variable declared",
    VARIABLE_NOT_ASSIGNED: "Variable is not assigned",
}

ALL_CODES = tuple(MESSAGES)

# ---------------
# Problem dataclass
# ---------------

@dataclass(frozen=True)
class Problem:
    """Structured analysis problem.

    Fields:
        code: Problem code (e.g. "E_VARIABLE_NOT_ASSIGNED")
        symbol: Name of the variable or function at fault

    Two problems with the same code and symbol are the same fault, no matter
    how many call paths lead to it.
    """
    code: str
    symbol: str

    @property
    def message(self) -> str:
        return MESSAGES.get(self.code, self.code)

    def __str__(self) -> str:
        return f"{self.code} '{self.symbol}': {self.message}"


class ProblemSink:
    """Insertion-ordered, de-duplicating collection of problems."""

    def __init__(self, problems: Iterable[Problem] = ()) -> None:
        self._problems: Dict[Problem, None] = dict.fromkeys(problems)

    def add(self, problem: Problem) -> None:
        self._problems.setdefault(problem, None)

    def __contains__(self, problem: object) -> bool:
        return problem in self._problems

    def __iter__(self) -> Iterator[Problem]:
        return iter(self._problems)

    def __len__(self) -> int:
        return len(self._problems)

    def to_list(self) -> List[Problem]:
        return list(self._problems)

    def __repr__(self) -> str:
        return f"ProblemSink({self.to_list()!r})"

# ------------------------
# Problem builders
# ------------------------

def err_already_declared(name: str) -> Problem:
    return Problem(ALREADY_DECLARED, name)

def err_used_before_declared(name: str) -> Problem:
    return Problem(USED_BEFORE_DECLARED, name)

def err_assign_to_function(name: str) -> Problem:
    return Problem(ASSIGN_TO_FUNCTION, name)

def err_unknown_function(name: str) -> Problem:
    return Problem(UNKNOWN_FUNCTION, name)

def err_variable_not_declared(name: str) -> Problem:
    return Problem(VARIABLE_NOT_DECLARED, name)

def err_variable_not_assigned(name: str) -> Problem:
    return Problem(VARIABLE_NOT_ASSIGNED, name)


def problems_to_dicts(problems: Iterable[Problem]) -> List[Dict[str, str]]:
    """Render problems as JSON-friendly dicts (code, symbol, message)."""
    return [
        {"code": p.code, "symbol": p.symbol, "message": p.message}
        for p in problems
    ]
