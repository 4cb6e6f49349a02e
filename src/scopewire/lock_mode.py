from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select locking behavior for container resolution.

    The mode is chosen on the root container; every container of the tree
    shares the root's lock and cannot pick another mode.
    """

    THREAD = "thread"
    """Guard every top-level ``get`` and ``register`` with a ``threading.RLock``.

    Resolvers and auto-constructed classes then run at most once per
    (container, key) pair even under concurrent first access.
    """

    NONE = "none"
    """Disable locking; callers must serialize access to the tree themselves."""
