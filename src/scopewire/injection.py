"""Injection declarations consumed by ``Container`` auto-construction.

A class opts into auto-construction by declaring the ordered keys of its
constructor arguments:

.. code-block:: python

    @scoped(HTTP_REQUEST)
    @inject(Database, deferred(lambda: Clock))
    class Handler:
        def __init__(self, database: Database, clock: Clock) -> None: ...

Declarations live in an ``InjectionRegistry``; the decorators write to
``default_registry`` unless another registry is passed.
"""

from __future__ import annotations

import inspect
import logging
import threading
import weakref
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias, TypeVar

from scopewire.exceptions import (
    ScopewireInjectionAlreadyAppliedError,
    ScopewireScopeAlreadyAppliedError,
    ScopewireScopeWithoutInjectionError,
)

if TYPE_CHECKING:
    from scopewire.scope import Scope

C = TypeVar("C", bound=type[Any])

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectKey:
    """Dependency reference naming its key directly."""

    key: Any

    def resolve(self) -> Any:
        return self.key


@dataclass(frozen=True)
class DeferredKey:
    """Dependency reference whose key is produced by a zero-argument thunk.

    Lets a class reference another class defined later in the module. The
    thunk runs immediately before each use.
    """

    thunk: Callable[[], Any]

    def resolve(self) -> Any:
        return self.thunk()


DependencyRef: TypeAlias = DirectKey | DeferredKey


def deferred(thunk: Callable[[], Any]) -> DeferredKey:
    """Wrap a forward reference, e.g. ``deferred(lambda: Clock)``."""
    return DeferredKey(thunk)


def as_dependency_ref(dependency: Any) -> DependencyRef:
    """Normalize a declared dependency into a ``DirectKey`` or ``DeferredKey``.

    Classes are direct keys. Any other callable (typically a lambda) is taken
    as a forward reference.
    """
    if isinstance(dependency, (DirectKey, DeferredKey)):
        return dependency
    if inspect.isclass(dependency) or not callable(dependency):
        return DirectKey(dependency)
    return DeferredKey(dependency)


@dataclass(frozen=True)
class InjectionDeclaration:
    dependencies: tuple[DependencyRef, ...]
    scope: Scope | None = None


class InjectionRegistry:
    """Map classes to their injection declaration and optional scope tag.

    Entries are held weakly by class, so declaring a throwaway class does not
    keep it alive.
    """

    def __init__(self) -> None:
        self._declarations: weakref.WeakKeyDictionary[type[Any], InjectionDeclaration] = (
            weakref.WeakKeyDictionary()
        )
        self._lock = threading.Lock()

    def __contains__(self, cls: object) -> bool:
        try:
            return cls in self._declarations
        except TypeError:
            return False

    def declare(self, cls: type[Any], dependencies: tuple[Any, ...] | list[Any]) -> None:
        """Record the ordered dependency keys of ``cls``.

        Raises:
            ScopewireInjectionAlreadyAppliedError: If ``cls`` already has a
                declaration.

        """
        refs = tuple(as_dependency_ref(dependency) for dependency in dependencies)
        with self._lock:
            if cls in self._declarations:
                raise ScopewireInjectionAlreadyAppliedError(cls)
            self._declarations[cls] = InjectionDeclaration(dependencies=refs)
        logger.debug("Declared injection of %s with %d dependencies", cls.__qualname__, len(refs))

    def declare_scope(self, cls: type[Any], scope: Scope) -> None:
        """Record the scope tag on which instances of ``cls`` are cached.

        Raises:
            ScopewireScopeWithoutInjectionError: If ``cls`` has no injection
                declaration yet.
            ScopewireScopeAlreadyAppliedError: If ``cls`` already has a scope.

        """
        with self._lock:
            declaration = self._declarations.get(cls)
            if declaration is None:
                raise ScopewireScopeWithoutInjectionError(cls)
            if declaration.scope is not None:
                raise ScopewireScopeAlreadyAppliedError(cls)
            self._declarations[cls] = InjectionDeclaration(
                dependencies=declaration.dependencies,
                scope=scope,
            )
        logger.debug("Declared scope %r for %s", scope, cls.__qualname__)

    def dependencies_of(self, cls: Any) -> tuple[DependencyRef, ...] | None:
        declaration = self._get(cls)
        return None if declaration is None else declaration.dependencies

    def scope_of(self, cls: Any) -> Scope | None:
        declaration = self._get(cls)
        return None if declaration is None else declaration.scope

    def _get(self, cls: Any) -> InjectionDeclaration | None:
        try:
            return self._declarations.get(cls)
        except TypeError:
            return None


default_registry = InjectionRegistry()
"""Registry used by ``inject``/``scoped`` and by containers unless overridden."""


def inject(*dependencies: Any, registry: InjectionRegistry | None = None) -> Callable[[C], C]:
    """Declare the constructor dependencies of the decorated class.

    Each dependency is a key (class or ``Token`` subclass) or a forward
    reference built with ``deferred`` or passed as a bare lambda. Arguments
    are resolved in order and passed positionally.

    Raises:
        ScopewireInjectionAlreadyAppliedError: If the class is decorated twice.

    """
    target_registry = registry if registry is not None else default_registry

    def decorator(cls: C) -> C:
        target_registry.declare(cls, dependencies)
        return cls

    return decorator


def scoped(scope: Scope, *, registry: InjectionRegistry | None = None) -> Callable[[C], C]:
    """Cache auto-constructed instances on the container tagged ``scope``.

    Must be applied above ``@inject(...)``.

    Raises:
        ScopewireScopeWithoutInjectionError: If the class has no ``@inject``.
        ScopewireScopeAlreadyAppliedError: If the class is decorated twice.

    """
    target_registry = registry if registry is not None else default_registry

    def decorator(cls: C) -> C:
        target_registry.declare_scope(cls, scope)
        return cls

    return decorator
