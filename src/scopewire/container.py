from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, nullcontext
from types import TracebackType
from typing import TYPE_CHECKING, Any, TypeVar, overload

from scopewire._internal.construction_stack import (
    ConstructionFrame,
    construction_stack,
    snapshot_chain,
)
from scopewire.exceptions import (
    ScopewireCircularDependencyError,
    ScopewireDuplicateKeyError,
    ScopewireDuplicateScopeError,
    ScopewireMissingDependencyError,
    ScopewireUndefinedKeyError,
    ScopewireUndefinedScopeError,
)
from scopewire.injection import DependencyRef, InjectionRegistry, default_registry
from scopewire.lock_mode import LockMode
from scopewire.providers import (
    Disposable,
    GeneratorProvider,
    Provider,
    ProviderContext,
    ResolverProvider,
    ValueProvider,
    bind_hook,
)
from scopewire.token import Token

if TYPE_CHECKING:
    from typing_extensions import Self

    from scopewire.scope import Scope

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Container:
    """Registry of providers organized as a tree of scopes.

    ``get`` searches the container it is called on, then its ancestors. When
    nothing is registered anywhere in the chain, classes declared with
    ``@inject(...)`` are auto-constructed from their dependencies.

    The container ``get`` is called on is the *invocation container*. Scoped
    providers are executed against (and resolvers cached on) the container in
    the invocation container's ancestry whose scope tag matches, no matter
    which container defines the provider.

    Disposing a container runs its disposal callbacks in registration order
    and disposes every container created with it as parent.
    """

    __slots__ = (
        "_disposed",
        "_dispose_callbacks",
        "_generators",
        "_lock",
        "_lock_mode",
        "_parent",
        "_registry",
        "_resolvers",
        "_scope",
        "_values",
    )

    def __init__(
        self,
        parent: Container | None = None,
        *,
        scope: Scope | None = None,
        registry: InjectionRegistry | None = None,
        lock_mode: LockMode | None = None,
    ) -> None:
        """Create a container, optionally nested under ``parent``.

        Args:
            parent: Container to delegate to on lookup misses. The parent is
                only referenced, never owned; it disposes this container when
                it is disposed itself.
            scope: Scope tag identifying this container. Must not be used by
                any ancestor.
            registry: Injection declarations used for auto-construction.
                Defaults to the parent's registry, else ``default_registry``.
            lock_mode: Locking strategy of the tree, chosen on the root
                (default ``LockMode.THREAD``). Children share the root's lock
                and may only repeat its mode.

        Raises:
            ScopewireDuplicateScopeError: If ``scope`` is already the tag of
                ``parent`` or one of its ancestors.
            ValueError: If ``lock_mode`` differs from the mode of ``parent``.

        """
        if parent is not None:
            if lock_mode is not None and lock_mode is not parent._lock_mode:
                msg = f"Lock mode {lock_mode!r} differs from the parent tree's {parent._lock_mode!r}"
                raise ValueError(msg)
            lock_mode = parent._lock_mode
        elif lock_mode is None:
            lock_mode = LockMode.THREAD
        if registry is None:
            registry = parent._registry if parent is not None else default_registry

        self._parent = parent
        self._scope = scope
        self._registry = registry
        self._lock_mode = lock_mode
        self._lock = parent._lock if parent is not None else _make_lock(lock_mode)

        self._values: dict[Any, Any] = {}
        self._resolvers: dict[Any, ResolverProvider[Any]] = {}
        self._generators: dict[Any, GeneratorProvider[Any]] = {}
        self._dispose_callbacks: list[Callable[[], None]] = []
        self._disposed = False

        if parent is not None:
            with parent._lock:
                if scope is not None:
                    for ancestor in parent._ancestry():
                        if ancestor._scope is scope:
                            raise ScopewireDuplicateScopeError(scope)
                parent._dispose_callbacks.append(self.dispose)
        logger.debug("Created %r", self)

    def __repr__(self) -> str:
        if self._scope is None:
            return "Container()"
        return f"Container(scope={self._scope!r})"

    @property
    def parent(self) -> Container | None:
        return self._parent

    @property
    def scope(self) -> Scope | None:
        return self._scope

    @property
    def disposed(self) -> bool:
        """Whether ``dispose`` has been called on this container (or its parent)."""
        return self._disposed

    def register(self, key: Any, provider: Provider) -> Self:
        """Attach ``provider`` to ``key`` on this container.

        Registering the same key on another container of the tree is always
        allowed; the nearest registration from the invocation container wins.

        Args:
            key: Class or ``Token`` subclass identifying the dependency.
            provider: ``ValueProvider``, ``ResolverProvider`` or
                ``GeneratorProvider``.

        Returns:
            This container, for chaining.

        Raises:
            ScopewireDuplicateKeyError: If ``key`` already has a provider (or a
                cached value) on this container.

        Examples:
            .. code-block:: python

                container = (
                    Container()
                    .register(Settings, ValueProvider(Settings()))
                    .register(Clock, GeneratorProvider(Clock))
                )

        """
        with self._lock:
            if key in self._values or key in self._resolvers or key in self._generators:
                raise ScopewireDuplicateKeyError(key)

            if isinstance(provider, ValueProvider):
                self._values[key] = provider.value
                if provider.on_destroy is not None:
                    self._dispose_callbacks.append(bind_hook(provider.on_destroy, provider.value))
            elif isinstance(provider, ResolverProvider):
                self._resolvers[key] = provider
            elif isinstance(provider, GeneratorProvider):
                self._generators[key] = provider
            else:
                msg = f"Unsupported provider for {_name(key)}: {provider!r}"
                raise TypeError(msg)

        logger.debug("Registered %s on %r as %s", _name(key), self, type(provider).__name__)
        return self

    @overload
    def get(self, key: type[Token[T]]) -> T: ...

    @overload
    def get(self, key: type[T]) -> T: ...

    @overload
    def get(self, key: Any) -> Any: ...

    def get(self, key: Any) -> Any:
        """Resolve ``key`` with this container as the invocation container.

        Each container from this one up to the root is searched for a value,
        then a generator, then a resolver. When none is found, a class
        declared with ``@inject(...)`` is auto-constructed and cached.

        Raises:
            ScopewireUndefinedKeyError: If no provider and no injection
                declaration exist for ``key``.
            ScopewireUndefinedScopeError: If a scoped provider's tag matches
                no container in this container's ancestry.
            ScopewireMissingDependencyError: If a declared dependency of an
                auto-constructed class is undefined.
            ScopewireCircularDependencyError: If auto-construction runs into
                a class already under construction.

        """
        with self._lock, construction_stack() as stack:
            return self._search(key, self, stack)

    def dispose(self) -> None:
        """Mark this container disposed and run its disposal callbacks.

        Callbacks run in the order they were added: ``on_destroy`` hooks of
        values, hooks of produced values, ``dispose`` of produced
        ``Disposable`` values and of child containers. The list is emptied
        before running, so repeated or re-entrant calls never run a callback
        twice.
        """
        with self._lock:
            self._disposed = True
            callbacks, self._dispose_callbacks = self._dispose_callbacks, []
        if callbacks:
            logger.debug("Disposing %r (%d callbacks)", self, len(callbacks))
        for callback in callbacks:
            callback()

    def add_dispose_callback(self, callback: Callable[[], None]) -> None:
        """Schedule ``callback`` to run when this container is disposed."""
        with self._lock:
            self._dispose_callbacks.append(callback)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.dispose()

    def _ancestry(self) -> Iterator[Container]:
        container: Container | None = self
        while container is not None:
            yield container
            container = container._parent

    def _scoped(self, scope: Scope) -> Container:
        for container in self._ancestry():
            if container._scope is scope:
                return container
        raise ScopewireUndefinedScopeError(scope)

    def _search(self, key: Any, invocation: Container, stack: list[ConstructionFrame]) -> Any:
        fallback = self
        for container in self._ancestry():
            if key in container._values:
                return container._values[key]

            generator = container._generators.get(key)
            if generator is not None:
                return container._generate(key, generator, invocation)

            resolver = container._resolvers.get(key)
            if resolver is not None:
                return container._resolve(key, resolver, invocation)

            fallback = container

        dependencies = invocation._registry.dependencies_of(key)
        if dependencies is None:
            raise ScopewireUndefinedKeyError(key)
        return fallback._construct(key, dependencies, invocation, stack)

    def _context_for(self, scope: Scope | None, invocation: Container) -> ProviderContext[Any]:
        scope_container = invocation._scoped(scope) if scope is not None else None
        return ProviderContext(
            invocation_container=invocation,
            scope_container=scope_container,
            scope=scope,
            target=scope_container if scope_container is not None else self,
        )

    def _generate(self, key: Any, provider: GeneratorProvider[Any], invocation: Container) -> Any:
        context = self._context_for(provider.scope, invocation)
        value = provider.produce(context)
        target = context.scope_container if context.scope_container is not None else self
        logger.debug("Generated %s on %r", _name(key), target)
        target._track(value, context, provider.on_destroy)
        return value

    def _resolve(self, key: Any, provider: ResolverProvider[Any], invocation: Container) -> Any:
        context = self._context_for(provider.scope, invocation)
        target = context.scope_container if context.scope_container is not None else self
        if key in target._values:
            return target._values[key]

        value = provider.produce(context)
        target._values[key] = value
        if target is not self:
            logger.debug("Resolved %s defined on %r, cached on %r", _name(key), self, target)
        else:
            logger.debug("Resolved %s on %r", _name(key), self)
        target._track(value, context, provider.on_destroy)
        return value

    def _construct(
        self,
        key: type[Any],
        dependencies: tuple[DependencyRef, ...],
        invocation: Container,
        stack: list[ConstructionFrame],
    ) -> Any:
        if any(frame.target is key for frame in stack):
            chain = snapshot_chain(stack, key)
            stack.clear()
            raise ScopewireCircularDependencyError(chain, key)

        # Arguments of an enclosing construction push a pending frame to claim.
        owns_frame = not stack or stack[-1].target is not None
        base = len(stack)
        if owns_frame:
            stack.append(ConstructionFrame(target=key))
        else:
            stack[-1].target = key

        try:
            args = []
            for index, ref in enumerate(dependencies):
                dependency = ref.resolve()
                depth = len(stack)
                stack.append(ConstructionFrame(index=index))
                try:
                    args.append(invocation._search(dependency, invocation, stack))
                except ScopewireUndefinedKeyError as error:
                    raise ScopewireMissingDependencyError(dependency, key, index) from error
                # A swallowed nested failure may have cleared the stack already.
                del stack[depth:]

            scope = invocation._registry.scope_of(key)
            target = invocation._scoped(scope) if scope is not None else self
            value = key(*args)
        except BaseException:
            stack.clear()
            raise

        if owns_frame:
            del stack[base:]

        target._values[key] = value
        logger.debug("Constructed %s, cached on %r", _name(key), target)
        if _is_disposable(value):
            target._dispose_callbacks.append(value.dispose)
        return value

    def _track(
        self,
        value: Any,
        context: ProviderContext[Any],
        on_destroy: Callable[[Any], None] | None,
    ) -> None:
        context._settle(value)  # noqa: SLF001
        if on_destroy is not None:
            self._dispose_callbacks.append(bind_hook(on_destroy, value))
        if _is_disposable(value):
            self._dispose_callbacks.append(value.dispose)


def _make_lock(lock_mode: LockMode) -> AbstractContextManager[Any]:
    if lock_mode is LockMode.THREAD:
        return threading.RLock()
    return nullcontext()


def _is_disposable(value: Any) -> bool:
    return isinstance(value, Disposable) and not isinstance(value, type)


def _name(key: Any) -> str:
    return getattr(key, "__qualname__", None) or repr(key)
