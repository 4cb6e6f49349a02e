"""Auto-construction of ``@inject``-declared classes.

This module covers:

1. Building a class from its declared dependencies.
2. Forward references with ``deferred``.
3. ``@scoped`` redirecting the cache to the scope container.
4. ``ScopewireCircularDependencyError`` and its frame chain.
"""

from __future__ import annotations

from scopewire import (
    Container,
    InjectionRegistry,
    Scope,
    ValueProvider,
    deferred,
    inject,
    scoped,
)
from scopewire.exceptions import ScopewireCircularDependencyError

SESSION = Scope("SESSION")
registry = InjectionRegistry()


class Config:
    def __init__(self, name: str) -> None:
        self.name = name


@inject(Config, deferred(lambda: Repository), registry=registry)
class Service:
    def __init__(self, config: Config, repository: Repository) -> None:
        self.config = config
        self.repository = repository


@scoped(SESSION, registry=registry)
@inject(Config, registry=registry)
class Repository:
    def __init__(self, config: Config) -> None:
        self.config = config


@inject(lambda: Egg, registry=registry)
class Chicken:
    def __init__(self, egg: Egg) -> None:
        self.egg = egg


@inject(Chicken, registry=registry)
class Egg:
    def __init__(self, chicken: Chicken) -> None:
        self.chicken = chicken


def main() -> None:
    root = Container(registry=registry).register(Config, ValueProvider(Config("app")))
    session = Container(root, scope=SESSION)

    service = session.get(Service)
    print(f"config={service.config.name}")  # => config=app
    print(f"repository_on_session={session.get(Repository) is service.repository}")  # => repository_on_session=True

    try:
        root.get(Chicken)
    except ScopewireCircularDependencyError as error:
        chain = " -> ".join(frame.target.__name__ for frame in error.chain)
    print(f"cycle={chain}")  # => cycle=Chicken -> Egg -> Chicken


if __name__ == "__main__":
    main()
