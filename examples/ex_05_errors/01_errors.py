"""Error payloads for registration and resolution failures."""

from __future__ import annotations

from scopewire import Container, InjectionRegistry, ResolverProvider, ValueProvider, inject
from scopewire.exceptions import (
    ScopewireDuplicateKeyError,
    ScopewireError,
    ScopewireMissingDependencyError,
    ScopewireUndefinedKeyError,
)

registry = InjectionRegistry()


class Clock:
    pass


class Mailer:
    pass


@inject(Clock, Mailer, registry=registry)
class Notifier:
    def __init__(self, clock: Clock, mailer: Mailer) -> None:
        self.clock = clock
        self.mailer = mailer


def main() -> None:
    container = Container(registry=registry).register(Clock, ValueProvider(Clock()))

    try:
        container.register(Clock, ResolverProvider(Clock))
    except ScopewireDuplicateKeyError as error:
        print(f"duplicate_key={error.key.__name__}")  # => duplicate_key=Clock

    try:
        container.get(Notifier)
    except ScopewireMissingDependencyError as error:
        print(
            f"missing={error.dependency.__name__} target={error.target.__name__} index={error.index}",
        )  # => missing=Mailer target=Notifier index=1
        print(f"cause={type(error.__cause__).__name__}")  # => cause=ScopewireUndefinedKeyError

    try:
        container.get(Mailer)
    except ScopewireUndefinedKeyError as error:
        print(f"is_scopewire_error={isinstance(error, ScopewireError)}")  # => is_scopewire_error=True


if __name__ == "__main__":
    main()
