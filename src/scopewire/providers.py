from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeAlias, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from scopewire.container import Container
    from scopewire.scope import Scope

T = TypeVar("T")

DestroyHook: TypeAlias = Callable[[Any], None]
"""Callback receiving the produced value when its container is disposed."""

_UNSET: Any = object()


@runtime_checkable
class Disposable(Protocol):
    """Anything exposing a ``dispose()`` method.

    Produced values implementing it are disposed together with the container
    that caches (or executed) them.
    """

    def dispose(self) -> None: ...


class ProviderContext(Generic[T]):
    """Execution context handed to resolver and generator callables.

    Attributes:
        invocation_container: Container on which ``get`` was originally called.
        scope_container: Container whose scope tag matches the provider scope,
            or ``None`` for unscoped providers.
        scope: Scope tag declared by the provider, if any.

    """

    __slots__ = ("_hooks", "_target", "_value", "invocation_container", "scope", "scope_container")

    def __init__(
        self,
        *,
        invocation_container: Container,
        scope_container: Container | None,
        scope: Scope | None,
        target: Container,
    ) -> None:
        self.invocation_container = invocation_container
        self.scope_container = scope_container
        self.scope = scope
        self._target = target
        self._value: Any = _UNSET
        self._hooks: list[DestroyHook] = []

    def on_destroy(self, hook: Callable[[T], None]) -> None:
        """Run ``hook(value)`` when the target container is disposed.

        The target is the scope container for scoped providers, else the
        container that defines the provider.
        """
        if self._value is _UNSET:
            self._hooks.append(hook)
        else:
            self._target.add_dispose_callback(bind_hook(hook, self._value))

    def _settle(self, value: T) -> None:
        self._value = value
        hooks, self._hooks = self._hooks, []
        for hook in hooks:
            self._target.add_dispose_callback(bind_hook(hook, value))


def bind_hook(hook: DestroyHook, value: Any) -> Callable[[], None]:
    def callback() -> None:
        hook(value)

    return callback


def _accepts_context(producer: Callable[..., Any]) -> bool:
    try:
        parameters = inspect.signature(producer).parameters.values()
    except (TypeError, ValueError):
        return False
    for parameter in parameters:
        if parameter.kind is inspect.Parameter.KEYWORD_ONLY and parameter.default is inspect.Parameter.empty:
            msg = (
                f"Producer {producer!r} has a required keyword-only parameter "
                f"{parameter.name!r}; the context is passed positionally"
            )
            raise TypeError(msg)
    for parameter in parameters:
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if (
            parameter.kind
            in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
            and parameter.default is inspect.Parameter.empty
        ):
            return True
    return False


@dataclass(frozen=True)
class ValueProvider(Generic[T]):
    """Bind a key to a precomputed value."""

    value: T
    on_destroy: Callable[[T], None] | None = None


@dataclass(frozen=True)
class _ProducerProvider(Generic[T]):
    scope: Scope | None = field(default=None, kw_only=True)
    on_destroy: Callable[[T], None] | None = field(default=None, kw_only=True)
    takes_context: bool = field(init=False, repr=False, compare=False)

    def _producer(self) -> Callable[..., T]:
        raise NotImplementedError

    def __post_init__(self) -> None:
        object.__setattr__(self, "takes_context", _accepts_context(self._producer()))

    def produce(self, context: ProviderContext[T]) -> T:
        """Invoke the producer, passing ``context`` when it accepts an argument."""
        producer = self._producer()
        if self.takes_context:
            return producer(context)
        return producer()


@dataclass(frozen=True)
class ResolverProvider(_ProducerProvider[T]):
    """Bind a key to a factory invoked at most once per owning container.

    The result is cached on the defining container, or on the container whose
    scope tag matches ``scope`` when it is set.
    """

    resolver: Callable[..., T]

    def _producer(self) -> Callable[..., T]:
        return self.resolver


@dataclass(frozen=True)
class GeneratorProvider(_ProducerProvider[T]):
    """Bind a key to a factory invoked on every resolution; never cached."""

    generator: Callable[..., T]

    def _producer(self) -> Callable[..., T]:
        return self.generator


Provider: TypeAlias = ValueProvider[Any] | ResolverProvider[Any] | GeneratorProvider[Any]
