from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any


@dataclass
class ConstructionFrame:
    """One in-progress step of auto-construction.

    The outermost frame names the class under construction and has no
    ``index``. Every nested frame is pushed while resolving argument
    ``index`` of the enclosing class; ``target`` is filled in once that
    argument turns out to need auto-construction itself.
    """

    target: type[Any] | None = None
    index: int | None = None


# Stack of the outermost ``get`` call in the current thread or task.
# Nested ``get`` calls issued by producers reuse it.
_construction_stack: ContextVar[list[ConstructionFrame] | None] = ContextVar(
    "construction_stack",
    default=None,
)


@contextmanager
def construction_stack() -> Iterator[list[ConstructionFrame]]:
    """Yield the current stack, creating a fresh one for an outermost call."""
    stack = _construction_stack.get()
    if stack is not None:
        yield stack
        return

    stack = []
    token = _construction_stack.set(stack)
    try:
        yield stack
    finally:
        _construction_stack.reset(token)


def snapshot_chain(stack: list[ConstructionFrame], target: type[Any]) -> tuple[ConstructionFrame, ...]:
    """Copy ``stack`` for error reporting, naming ``target`` on the pending frame."""
    return tuple(
        ConstructionFrame(
            target=frame.target if frame.target is not None else target,
            index=frame.index,
        )
        for frame in stack
    )
