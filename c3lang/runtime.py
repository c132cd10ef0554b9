"""Receivers for a linearized hierarchy, built from plain Python callables.

An Instance plays the part of generated code for one class. Attribute
lookup goes through __getattr__ and resolves, in this order:

    variables      slot values, initialized from the variable layout
    <name>         entry: start a fresh traversal at the most-derived one
    super_<name>   continuation: run the next implementation in the chain

Implementations receive the receiver first, so open recursion works the
way it does on ordinary Python classes:

    def b_bar(self, n):
        return f"B::bar({n}) " + self.super_bar(n)

    h.contribute_function("B", "bar", b_bar)
    obj = Instance(h, "B")
    obj.bar(1)

Member names live in the same namespace as the receiver's own attributes,
so a class whose visible members shadow one of them (`_enter`, `__class__`,
...) cannot be instantiated. class_of() and path_of() report what a
receiver is without taking names away from it.

A function with a single implementation is called directly and never
touches the dispatch path stack; its continuation is the no-op fallback.
"""

import functools
import logging
from typing import Any


from c3lang.hierarchy import Hierarchy
from c3lang.stack import DispatchPathStack

logger = logging.getLogger(__name__)

SUPER_PREFIX = "super_"

# Per-receiver state kept in the instance __dict__
_STATE = ('_cls', '_path', '_table', '_stack', '_values')


class Instance:
    def __init__(
        self,
        hierarchy: Hierarchy,
        cls: str,
        values: dict[str, Any] | None = None,
        max_depth: int | None = None,
    ):
        table = hierarchy.dispatch_table(cls)
        slots = {slot.name: slot.default for slot in hierarchy.variable_layout(cls)}
        clashes = sorted(name for name in [*table, *slots] if name in _reserved())
        if clashes:
            raise AttributeError(f"{cls} members shadow receiver attributes: {', '.join(clashes)}")
        values = values or {}
        for name in values:
            if name not in slots:
                raise AttributeError(f"{cls} has no variable {name!r}")
        # Store in object's __dict__ directly to avoid __setattr__ interception
        object.__setattr__(self, '_cls', cls)
        object.__setattr__(self, '_path', hierarchy.path(cls))
        object.__setattr__(self, '_table', table)
        object.__setattr__(self, '_stack', DispatchPathStack(max_depth))
        object.__setattr__(self, '_values', {**slots, **values})

    def __repr__(self) -> str:
        return f"<{self._cls} instance>"

    def __getattr__(self, name):
        try:
            values = object.__getattribute__(self, '_values')
            table = object.__getattribute__(self, '_table')
        except AttributeError:
            # Not initialized yet (copy, pickle)
            raise AttributeError(name) from None
        if name in values:
            return values[name]
        if name in table:
            return functools.partial(self._enter, name)
        if name.startswith(SUPER_PREFIX) and name[len(SUPER_PREFIX):] in table:
            return functools.partial(self._continue, name[len(SUPER_PREFIX):])
        raise AttributeError(f"{self._cls} has no member {name!r}")

    def __setattr__(self, name, value):
        values = object.__getattribute__(self, '_values')
        if name not in values:
            raise AttributeError(f"{self._cls} has no variable {name!r}")
        values[name] = value

    def _enter(self, name: str, *args, **kwargs) -> Any:
        chain = self._table[name]
        if not chain:
            raise NotImplementedError(f"{self._cls}.{name} has no implementation")
        if len(chain) == 1:
            _, implementation = chain[0]
            return implementation(self, *args, **kwargs)
        return self._stack.call(chain, self, *args, function=name, **kwargs)

    def _continue(self, name: str, *args, **kwargs) -> Any:
        if len(self._table[name]) <= 1:
            logger.warning("%s.super_%s has no next implementation", self._cls, name)
            return None
        top = self._stack.active
        assert top is not None and top.function == name, (
            f"super_{name} called outside of a {name} traversal"
        )
        return self._stack.advance(self, *args, **kwargs)


@functools.cache
def _reserved() -> frozenset[str]:
    return frozenset(dir(Instance)) | frozenset(_STATE)


def class_of(obj: Instance) -> str:
    return object.__getattribute__(obj, '_cls')


def path_of(obj: Instance) -> list[str]:
    return list(object.__getattribute__(obj, '_path'))


def stack_of(obj: Instance) -> DispatchPathStack:
    return object.__getattribute__(obj, '_stack')


def bind(hierarchy: Hierarchy, cls: str, /, **values) -> Instance:
    """Instance(hierarchy, cls) with variable values as keyword arguments."""
    return Instance(hierarchy, cls, values)
