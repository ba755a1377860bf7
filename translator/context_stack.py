"""Stack of visitor-defined state, scoped to nested conversions."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Generic, Iterator, TypeVar

from .errors import ContextStackError

logger = logging.getLogger(__name__)

C = TypeVar("C")


class ContextStack(Generic[C]):
    """LIFO chain of context values.

    Every value pushed is the visitor's merge of the current top with an
    update. The returned pop function must be called exactly once, and only
    while the pushed value is still on top.
    """

    def __init__(self, initial: C, merge: Callable[[C, C], C]):
        self._stack: list[C] = [initial]
        self._merge = merge
        self.push_count = 0
        self.pop_count = 0

    @property
    def top(self) -> C:
        return self._stack[-1]

    @property
    def depth(self) -> int:
        return len(self._stack) - 1

    def push(self, update: C | None) -> Callable[[], None]:
        if update is None:
            return _noop

        updated = self._merge(self.top, update)
        self._stack.append(updated)
        self.push_count += 1
        level = len(self._stack)
        popped = False
        logger.debug("Pushed context at depth %d", level - 1)

        def pop() -> None:
            nonlocal popped
            if popped:
                raise ContextStackError("Context popped twice")
            if len(self._stack) != level or self._stack[-1] is not updated:
                raise ContextStackError(
                    f"Context push/pop ordering mistake: expected depth {level - 1}, "
                    f"found {len(self._stack) - 1}"
                )
            self._stack.pop()
            self.pop_count += 1
            popped = True

        return pop

    @contextmanager
    def scoped(self, update: C | None) -> Iterator[C]:
        """Push *update* for the duration of the ``with`` block.

        If the block raises, that exception propagates even when the pop
        fails too; the ordering mistake is logged instead.
        """
        pop = self.push(update)
        try:
            yield self.top
        except BaseException:
            try:
                pop()
            except ContextStackError as stack_error:
                logger.error("%s (while unwinding an earlier error)", stack_error)
            raise
        pop()


def _noop() -> None:
    return None
