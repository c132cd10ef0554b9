"""Ordered-set merge primitive for C3 linearization.

A Sets holds several competing orders. Each step picks one winner:

    candidates   the head of every order, in the order the orders were pushed
    solution     the first candidate that appears in no order's tail
    removal      the winner is dropped from every order; emptied orders go away

For K(B, A, C) with B, A and C all deriving from O:

    [B, O] [A, O] [C, O] [B, A, C]   ->  B
    [O] [A, O] [C, O] [A, C]         ->  A   (O is in the tail of [A, O])
    [O] [C, O] [C]                   ->  C
    [O]                              ->  O

Only heads are ever candidates, and they are tried in push order. This is
what makes the result reproducible for a given input.
"""

from collections.abc import Iterable, Sequence

from c3lang.errors import EmptySet


def in_tail(element: str, seq: Sequence[str]) -> bool:
    """True if element occurs anywhere after the head of seq."""
    if not seq:
        raise EmptySet()
    return element in seq[1:]


def is_subset(larger: Iterable[str], smaller: Iterable[str]) -> bool:
    """True if every item of smaller is in larger."""
    larger = set(larger)
    return all(item in larger for item in smaller)


class Sets:
    def __init__(self, sets: Iterable[Sequence[str]] = ()):
        self.sets: list[list[str]] = []
        for s in sets:
            self.push(s)

    def push(self, seq: Sequence[str]) -> None:
        if not seq:
            raise EmptySet()
        self.sets.append(list(seq))

    def is_empty(self) -> bool:
        return not self.sets

    def __len__(self) -> int:
        return len(self.sets)

    def __repr__(self) -> str:
        return f"Sets({self.sets!r})"

    def candidates(self) -> list[str]:
        return [s[0] for s in self.sets]

    def is_solution(self, candidate: str) -> bool:
        return not any(in_tail(candidate, s) for s in self.sets)

    def find_solution(self) -> str | None:
        """Take the next winner, or return None when every head is blocked."""
        for candidate in self.candidates():
            if self.is_solution(candidate):
                self.remove_solution(candidate)
                return candidate
        return None

    def remove_solution(self, solution: str) -> None:
        for s in self.sets:
            s[:] = [x for x in s if x != solution]
        self.sets = [s for s in self.sets if s]
