from __future__ import annotations

from typing import Any, Generic, TypeVar

from typing_extensions import Self

from scopewire.exceptions import ScopewireTokenInstantiationError

T = TypeVar("T")


class Token(Generic[T]):
    """Inert marker used as a typed key when no natural class exists.

    Usage:
        class DatabaseUrl(Token[str]): ...

        container.register(DatabaseUrl, ValueProvider("sqlite://"))
        url = container.get(DatabaseUrl)

    Neither ``Token`` nor its subclasses can be instantiated.
    """

    def __new__(cls, *_args: Any, **_kwargs: Any) -> Self:
        """Prevent instantiation; use the class itself as a key."""
        raise ScopewireTokenInstantiationError
