"""Errors raised by the linearization engine and the dispatch runtime.

Every failure derives from C3Error so callers can catch the whole family
at the library boundary:

    UnknownClass          a class was referenced but never declared
    Inconsistency         C3 merge found no acceptable candidate
    NoProgress            the whole-graph fixed point stalled (cycle)
    NotLinearized         a query ran before linearize_all()
    EmptySet              an empty sequence was pushed into a merge
    DispatchDepthExceeded a dispatch path stack hit its configured bound
"""


class C3Error(Exception):
    pass


class UnknownClass(C3Error):
    def __init__(self, cls: str, referenced_by: str | None = None):
        self.cls = cls
        self.referenced_by = referenced_by
        if referenced_by is None:
            msg = f"unknown class: {cls}"
        else:
            msg = f"unknown class: {cls} (parent of {referenced_by})"
        super().__init__(msg)


class Inconsistency(C3Error):
    """The declared hierarchy makes contradictory precedence demands.

    `sets` is what was left of the merge input when no head could be
    taken; `candidates` are the heads that were rejected.
    """

    def __init__(self, cls: str, sets: list[list[str]], candidates: list[str]):
        self.cls = cls
        self.sets = sets
        self.candidates = candidates
        remaining = " ".join("[" + ", ".join(s) + "]" for s in sets)
        super().__init__(
            f"cannot linearize {cls}: no candidate among "
            f"{', '.join(candidates)} is free of every tail in {remaining}"
        )


class NoProgress(C3Error):
    def __init__(self, pending: list[str], cycle: list[str] | None = None):
        self.pending = pending
        self.cycle = cycle or []
        msg = f"linearization stalled on: {', '.join(pending)}"
        if self.cycle:
            msg += f" (cycle among base classes: {' < '.join(self.cycle)})"
        super().__init__(msg)


class NotLinearized(C3Error):
    def __init__(self):
        super().__init__("hierarchy has not been linearized; call linearize_all() first")


class EmptySet(C3Error, ValueError):
    def __init__(self):
        super().__init__("cannot push an empty sequence into a merge")


class DispatchDepthExceeded(C3Error):
    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"dispatch path stack exceeded its bound of {max_depth} traversals")
