"""Hierarchy: declare classes, linearize them, query the result.

    h = Hierarchy()
    h.declare("A", [])
    h.declare("B", ["A"])
    h.declare("C", ["A"])
    h.declare("D", ["B", "C"])
    h.contribute_function("A", "f", a_f)
    h.contribute_function("B", "f", b_f)
    h.linearize_all()

    h.path("D")                 # ["D", "B", "C", "A"]
    h.dispatch_chain("D", "f")  # (("B", b_f), ("A", a_f))

Declarations may arrive in any order. Any declaration made after
linearize_all() discards the computed result; queries then fail with
NotLinearized until the hierarchy is linearized again.
"""

from typing import Any

from c3lang import dispatch
from c3lang.errors import NotLinearized
from c3lang.linearization import linearize
from c3lang.registry import ClassRegistry, split_comma


class Hierarchy:
    def __init__(self):
        self.graph = ClassRegistry()
        self.impls = dispatch.Implementations()
        self._linearized: ClassRegistry | None = None

    # --- Declarations ---

    def declare(self, cls: str, parents: list[str]) -> None:
        self.graph.declare(cls, parents)
        self._linearized = None

    def declare_str(self, cls: str, parents: str) -> None:
        self.declare(cls, split_comma(parents))

    def contribute_function(self, cls: str, name: str, implementation: Any = None) -> None:
        self.graph.contribute_function(cls, name)
        self.impls.add(cls, name, implementation)
        self._linearized = None

    def contribute_variable(self, cls: str, name: str, default: Any = None) -> None:
        self.graph.contribute_variable(cls, name)
        self.impls.add_var(cls, name, default)
        self._linearized = None

    # --- Linearization ---

    def linearize_all(self) -> None:
        self._linearized = linearize(self.graph)

    @property
    def linearized(self) -> ClassRegistry:
        if self._linearized is None:
            raise NotLinearized()
        return self._linearized

    # --- Queries ---

    def classes(self) -> list[str]:
        return self.linearized.all_classes()

    def parents(self, cls: str) -> list[str]:
        return self.graph.path(cls)

    def direct_functions(self, cls: str) -> list[str]:
        """Functions cls declares itself, in declaration order."""
        return self.graph.direct_functions(cls)

    def direct_variables(self, cls: str) -> list[str]:
        return self.graph.direct_variables(cls)

    def path(self, cls: str) -> list[str]:
        return self.linearized.path(cls)

    def resolved_functions(self, cls: str) -> list[str]:
        return self.linearized.resolved_functions(cls)

    def resolved_variables(self, cls: str) -> list[str]:
        return self.linearized.resolved_variables(cls)

    def dispatch_chain(self, cls: str, function: str) -> tuple[dispatch.Entry, ...]:
        return dispatch.dispatch_chain(self.linearized, self.impls, cls, function)

    def dispatch_table(self, cls: str) -> dict[str, tuple[dispatch.Entry, ...]]:
        return dispatch.dispatch_table(self.linearized, self.impls, cls)

    def variable_layout(self, cls: str) -> list[dispatch.VariableSlot]:
        return dispatch.variable_layout(self.linearized, self.impls, cls)
