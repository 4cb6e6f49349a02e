"""Quickstart: the three provider kinds and parent delegation.

This module covers:

1. ``ValueProvider`` returning the same object on every ``get``.
2. ``ResolverProvider`` running once and caching its result.
3. ``GeneratorProvider`` running on every ``get``.
4. ``Token`` subclasses as typed keys.
5. A child container falling back to its parent.
"""

from __future__ import annotations

import itertools

from scopewire import Container, GeneratorProvider, ResolverProvider, Token, ValueProvider


class Settings:
    def __init__(self, dsn: str) -> None:
        self.dsn = dsn


class Database:
    pass


class RequestId(Token[int]):
    pass


def main() -> None:
    counter = itertools.count(1)
    settings = Settings(dsn="sqlite://")

    root = (
        Container()
        .register(Settings, ValueProvider(settings))
        .register(Database, ResolverProvider(Database))
        .register(RequestId, GeneratorProvider(lambda: next(counter)))
    )

    print(f"same_settings={root.get(Settings) is settings}")  # => same_settings=True
    print(f"database_cached={root.get(Database) is root.get(Database)}")  # => database_cached=True
    print(f"request_ids={[root.get(RequestId) for _ in range(3)]}")  # => request_ids=[1, 2, 3]

    child = Container(root)
    print(f"child_sees_parent={child.get(Settings).dsn}")  # => child_sees_parent=sqlite://


if __name__ == "__main__":
    main()
