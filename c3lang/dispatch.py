"""Dispatch tables: which implementation runs, in which order.

For a class and a function name, the dispatch chain lists every class on
the class's path that implements the function, most-derived first:

    path(D) = [D, B, C, A]     B.f and A.f implemented
    dispatch_chain(D, "f")  = [(B, B.f), (A, A.f)]

C contributes nothing to f, so it does not appear. Index 0 is what a
fresh call runs; each call-next-method moves one entry down the chain.

Implementation handles are opaque. A name contributed without a handle
is an abstract declaration: visible to the class, absent from chains.
"""

from dataclasses import dataclass
from typing import Any

from c3lang.registry import ClassRegistry

Entry = tuple[str, Any]


@dataclass(frozen=True)
class VariableSlot:
    name: str
    owner: str  # first class on the path that declares the variable
    default: Any = None


class Implementations:
    """Implementation handles per (class, function) and defaults per (class, variable).

    When a class supplies several implementations for one name, the first
    one is its implementation.
    """

    def __init__(self):
        self.functions: dict[tuple[str, str], Any] = {}
        self.variables: dict[tuple[str, str], Any] = {}

    def add(self, cls: str, fun: str, implementation: Any) -> None:
        if implementation is None:
            return
        self.functions.setdefault((cls, fun), implementation)

    def get(self, cls: str, fun: str) -> Any:
        return self.functions.get((cls, fun))

    def add_var(self, cls: str, var: str, default: Any = None) -> None:
        self.variables.setdefault((cls, var), default)

    def get_var(self, cls: str, var: str) -> Any:
        return self.variables.get((cls, var))


def dispatch_chain(registry: ClassRegistry, impls: Implementations, cls: str, fun: str) -> tuple[Entry, ...]:
    chain = []
    for ancestor in registry.path(cls):
        implementation = impls.get(ancestor, fun)
        if implementation is not None:
            chain.append((ancestor, implementation))
    return tuple(chain)


def dispatch_table(registry: ClassRegistry, impls: Implementations, cls: str) -> dict[str, tuple[Entry, ...]]:
    """Chains for every function visible to cls, keyed by name in sorted order."""
    return {
        fun: dispatch_chain(registry, impls, cls, fun)
        for fun in registry.resolved_functions(cls)
    }


def variable_layout(registry: ClassRegistry, impls: Implementations, cls: str) -> list[VariableSlot]:
    path = registry.path(cls)
    slots = []
    for var in registry.resolved_variables(cls):
        owner = next(a for a in path if var in registry.variables.get(a, []))
        slots.append(VariableSlot(var, owner, impls.get_var(owner, var)))
    return slots
