"""Disposal runs hooks in order and propagates to child containers.

This module covers:

1. ``on_destroy`` hooks on values and resolvers.
2. Hooks attached through ``ProviderContext.on_destroy``.
3. Produced ``Disposable`` values disposed automatically.
4. Parent disposal cascading to children; repeated disposal is a no-op.
"""

from __future__ import annotations

from scopewire import Container, ProviderContext, ResolverProvider, ValueProvider

events: list[str] = []


class Connection:
    def dispose(self) -> None:
        events.append("connection.dispose")


class Cache:
    pass


def open_connection(context: ProviderContext[Connection]) -> Connection:
    context.on_destroy(lambda _: events.append("context hook"))
    return Connection()


def main() -> None:
    root = Container().register(
        str,
        ValueProvider("app", on_destroy=lambda value: events.append(f"value hook ({value})")),
    )
    child = Container(root)
    child.register(Connection, ResolverProvider(open_connection))
    child.register(
        Cache,
        ResolverProvider(Cache, on_destroy=lambda _: events.append("cache hook")),
    )
    child.get(Connection)
    child.get(Cache)

    with root:
        pass

    print(f"child_disposed={child.disposed}")  # => child_disposed=True
    print(f"events={events}")  # => events=['value hook (app)', 'context hook', 'connection.dispose', 'cache hook']

    root.dispose()
    print(f"events_after_second_dispose={len(events)}")  # => events_after_second_dispose=4


if __name__ == "__main__":
    main()
