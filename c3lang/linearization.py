"""C3 linearization over a whole class graph.

A class can only be linearized once every one of its parents has been,
so the engine works in rounds rather than recursing per class:

    round 1:  A            (no parents)
    round 2:  B, C         (parents: A)
    round 3:  D            (parents: B, C)

Each round resolves every pending class whose parents are all solved.
A round that resolves nothing while classes are still pending is a hard
failure, never a partial result:

  - a parent that was never declared  -> UnknownClass
  - parents that wait on each other   -> NoProgress (with the cycle)

and a merge that cannot pick a head raises Inconsistency on the spot.

See: https://www.python.org/download/releases/2.3/mro/
"""

import logging
from collections.abc import Iterable, Sequence

from c3lang.errors import Inconsistency, NoProgress, UnknownClass
from c3lang.registry import ClassRegistry
from c3lang.sets import Sets, is_subset

logger = logging.getLogger(__name__)


def merge(cls: str, sets: Sets | Iterable[Sequence[str]]) -> list[str]:
    """Merge parent paths and the local precedence order into cls's path.

    `sets` is [path(parent1), ..., path(parentN), [parent1, ..., parentN]].
    The input is consumed.
    """
    if not isinstance(sets, Sets):
        sets = Sets(sets)
    solutions = [cls]
    while not sets.is_empty():
        candidates = sets.candidates()
        solution = sets.find_solution()
        if solution is None:
            raise Inconsistency(cls, [list(s) for s in sets.sets], candidates)
        solutions.append(solution)
    return solutions


def _parents(cls: str, declared: list[str]) -> list[str]:
    # [cls] alone is how roots are sometimes seeded; it merges as no parents.
    if declared == [cls]:
        return []
    return declared


def linearize(graph: ClassRegistry) -> ClassRegistry:
    """Linearize every class of graph. Returns a new registry of paths.

    `graph` maps classes to declared parents and is left untouched; the
    engine consumes a copy of it. Contributions are carried over to the
    result unchanged.
    """
    pending = graph.copy()
    solved = ClassRegistry()
    solved.functions = {k: list(v) for k, v in graph.functions.items()}
    solved.variables = {k: list(v) for k, v in graph.variables.items()}

    rounds = 0
    while not pending.is_empty():
        rounds += 1
        found = []
        for cls in pending.all_classes():
            parents = _parents(cls, pending.path(cls))
            if not is_subset(solved.classes, parents):
                continue
            path = merge(cls, solved.sets_for(parents, cls))
            pending.remove(cls)
            solved.declare(cls, path)
            found.append(cls)
        if not found:
            _stalled(pending, solved)
        logger.debug("round %d resolved %s", rounds, ", ".join(found))

    logger.info("linearized %d classes in %d rounds", len(solved.classes), rounds)
    return solved


def _stalled(pending: ClassRegistry, solved: ClassRegistry) -> None:
    """Explain why no pending class could be resolved, by raising."""
    remaining = pending.all_classes()
    for cls in remaining:
        for parent in pending.path(cls):
            if parent not in solved and parent not in pending:
                raise UnknownClass(parent, referenced_by=cls)
    raise NoProgress(remaining, _find_cycle(pending, solved))


def _find_cycle(pending: ClassRegistry, solved: ClassRegistry) -> list[str]:
    """Follow unsolved parents from the first stalled class until one repeats.

    Every stalled class without dangling parents waits on at least one
    other pending class, so the walk must come back on itself.
    """
    walk: list[str] = []
    cls = pending.all_classes()[0]
    while cls not in walk:
        walk.append(cls)
        cls = next(p for p in pending.path(cls) if p not in solved)
    cycle = walk[walk.index(cls):]
    cycle.append(cls)
    return cycle
