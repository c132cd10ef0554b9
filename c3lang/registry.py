"""Class registry: parent lists or paths, plus direct contributions.

The same structure serves both sides of linearization. As engine input it
maps each class to its declared parents; as engine output it maps each
class to its linearized path:

    input                     output
    A  -> []                  A  -> [A]
    B  -> [A]                 B  -> [B, A]
    D  -> [B, C]              D  -> [D, B, C, A]

Functions and variables contributed directly by a class are kept beside
the paths. The resolved views walk a class's path and collect what every
ancestor contributed, sorted and deduplicated. They answer "is this
visible", never "which implementation wins".
"""

import copy

from c3lang.errors import UnknownClass
from c3lang.sets import Sets


def split_comma(s: str) -> list[str]:
    """Parse a comma separated class list: "B, C" -> ["B", "C"]."""
    return [part.strip() for part in s.split(",") if part.strip()]


class ClassRegistry:
    def __init__(self):
        self.classes: dict[str, list[str]] = {}
        self.functions: dict[str, list[str]] = {}
        self.variables: dict[str, list[str]] = {}

    def __eq__(self, other) -> bool:
        if not isinstance(other, ClassRegistry):
            return NotImplemented
        return (
            self.classes == other.classes
            and self.functions == other.functions
            and self.variables == other.variables
        )

    def __repr__(self) -> str:
        return f"ClassRegistry({self.classes!r})"

    def copy(self) -> "ClassRegistry":
        return copy.deepcopy(self)

    # --- Classes ---

    def declare(self, cls: str, parents: list[str]) -> None:
        """Register cls with its parents (or path). Overwrites silently."""
        self.classes[cls] = list(parents)

    def declare_str(self, cls: str, parents: str) -> None:
        self.declare(cls, split_comma(parents))

    def remove(self, cls: str) -> None:
        if cls not in self.classes:
            raise UnknownClass(cls)
        del self.classes[cls]

    def __contains__(self, cls: str) -> bool:
        return cls in self.classes

    def all_classes(self) -> list[str]:
        return sorted(self.classes)

    def is_empty(self) -> bool:
        return not self.classes

    def path(self, cls: str) -> list[str]:
        try:
            return list(self.classes[cls])
        except KeyError:
            raise UnknownClass(cls) from None

    def sets_for(self, parents: list[str], cls: str | None = None) -> Sets:
        """Merge input for a class with these parents.

        Each parent's path, then the parent list itself so that the local
        precedence order survives the merge.
        """
        sets = Sets()
        for parent in parents:
            if parent not in self.classes:
                raise UnknownClass(parent, referenced_by=cls)
            path = self.classes[parent]
            if path:
                sets.push(path)
        if parents:
            sets.push(parents)
        return sets

    # --- Contributions ---

    def contribute_function(self, cls: str, name: str) -> None:
        self.functions.setdefault(cls, []).append(name)

    def contribute_variable(self, cls: str, name: str) -> None:
        self.variables.setdefault(cls, []).append(name)

    def direct_functions(self, cls: str) -> list[str]:
        return list(self.functions.get(cls, []))

    def direct_variables(self, cls: str) -> list[str]:
        return list(self.variables.get(cls, []))

    def resolved_functions(self, cls: str) -> list[str]:
        return self._resolve(self.functions, cls)

    def resolved_variables(self, cls: str) -> list[str]:
        return self._resolve(self.variables, cls)

    def _resolve(self, table: dict[str, list[str]], cls: str) -> list[str]:
        names: list[str] = []
        for ancestor in self.path(cls):
            names.extend(table.get(ancestor, []))
        return sorted(set(names))
