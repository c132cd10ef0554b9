"""Dispatch path stack: cooperative call-next-method on one receiver.

An entry call pushes a fresh traversal of the function's dispatch chain,
runs the first implementation and pops the traversal again. Inside an
implementation, "call the next one" advances the traversal that is
already on top instead of starting over:

    chain(D, f) = [(B, B.f), (A, A.f)]

    d.f()          enter  -> [pos 0]
      B.f          advance   [pos 1]
        d.super_f()
          A.f      advance   [pos 2]
                   exit   -> idle

A call of d.f() from inside A.f pushes a second traversal on top of the
first; when it exits, the outer traversal is exactly where it was. This
is what keeps recursive and re-entrant calls correct.

Traversals are stored per thread, so two threads calling into the same
receiver never see each other's positions.
"""

import logging
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from c3lang.errors import DispatchDepthExceeded

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Traversal:
    chain: Sequence[tuple[str, Any]]
    function: str | None = None
    position: int = 0

    @property
    def exhausted(self) -> bool:
        return self.position >= len(self.chain)


class DispatchPathStack:
    """Per-receiver stack of traversals.

    max_depth bounds the number of simultaneously active traversals on one
    thread; None means unbounded. Exceeding it raises rather than dropping
    a traversal.
    """

    def __init__(self, max_depth: int | None = None):
        self.max_depth = max_depth
        self._local = threading.local()

    @property
    def _stack(self) -> list[Traversal]:
        try:
            return self._local.stack
        except AttributeError:
            self._local.stack = []
            return self._local.stack

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def active(self) -> Traversal | None:
        stack = self._stack
        return stack[-1] if stack else None

    @property
    def position(self) -> int | None:
        top = self.active
        return None if top is None else top.position

    def enter(self, chain: Sequence[tuple[str, Any]], function: str | None = None) -> Traversal:
        stack = self._stack
        if self.max_depth is not None and len(stack) >= self.max_depth:
            raise DispatchDepthExceeded(self.max_depth)
        traversal = Traversal(chain, function)
        stack.append(traversal)
        return traversal

    def advance(self, *args, **kwargs) -> Any:
        """Run the next implementation of the active traversal.

        Running past the end of the chain is the terminal fallback: it does
        nothing and returns None.
        """
        top = self.active
        assert top is not None, "advance() outside of any traversal"
        if top.exhausted:
            logger.warning(
                "call-next-method past the end of %s (%d implementations)",
                top.function or "chain", len(top.chain),
            )
            return None
        cls, implementation = top.chain[top.position]
        top.position += 1
        logger.debug("dispatch %s -> %s", top.function or "chain", cls)
        return implementation(*args, **kwargs)

    def exit(self, traversal: Traversal) -> None:
        stack = self._stack
        assert stack, "exit() without a matching enter()"
        assert stack[-1] is traversal, "exit() out of order"
        stack.pop()

    @contextmanager
    def frame(self, chain: Sequence[tuple[str, Any]], function: str | None = None) -> Iterator[Traversal]:
        traversal = self.enter(chain, function)
        try:
            yield traversal
        finally:
            self.exit(traversal)

    def call(self, chain: Sequence[tuple[str, Any]], *args, function: str | None = None, **kwargs) -> Any:
        """Entry point: a fresh traversal that runs the most-derived implementation."""
        with self.frame(chain, function):
            return self.advance(*args, **kwargs)
