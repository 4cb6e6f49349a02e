from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from scopewire._internal.construction_stack import ConstructionFrame
    from scopewire.scope import Scope


def _key_name(key: Any) -> str:
    return getattr(key, "__qualname__", None) or repr(key)


class ScopewireError(Exception):
    """Represent a base class for all scopewire-specific failures.

    Catch this type when you want to handle any scopewire error path without
    matching each concrete exception class individually. Every error is a
    programmer error surfaced immediately; none of them are retried.
    """


class ScopewireUndefinedKeyError(ScopewireError):
    """Signal that no provider and no injection declaration exist for a key.

    Raised by ``Container.get`` after the whole ancestry of the invocation
    container has been searched.

    Typical fixes include registering the key on the container (or one of its
    ancestors) or decorating the class with ``@inject(...)``.
    """

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"Undefined key registration error: {_key_name(key)}")


class ScopewireUndefinedScopeError(ScopewireError):
    """Signal that a scoped provider has no matching container.

    Raised by ``Container.get`` when neither the invocation container nor any
    of its ancestors carries the provider's scope tag.
    """

    def __init__(self, scope: Scope) -> None:
        self.scope = scope
        super().__init__(f"Undefined scope error: {scope!r}")


class ScopewireDuplicateKeyError(ScopewireError):
    """Signal a second registration of a key on the same container."""

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"Duplicate key registration error: {_key_name(key)}")


class ScopewireDuplicateScopeError(ScopewireError):
    """Signal that a scope tag is already used in the intended ancestry.

    Raised by the ``Container`` constructor. A scope tag must be unique along
    any single root-to-leaf path; sibling subtrees may reuse it.
    """

    def __init__(self, scope: Scope) -> None:
        self.scope = scope
        super().__init__(f"Duplicate scope error: {scope!r}")


class ScopewireInjectionError(ScopewireError):
    """Represent a failure while auto-constructing an injected class."""


class ScopewireMissingDependencyError(ScopewireInjectionError):
    """Signal that a declared dependency of an injected class is undefined.

    ``dependency`` is the unresolvable key, ``target`` the class under
    construction and ``index`` the position of the dependency in its
    declaration. The original ``ScopewireUndefinedKeyError`` is chained as
    ``__cause__``.
    """

    def __init__(self, dependency: Any, target: type[Any], index: int) -> None:
        self.dependency = dependency
        self.target = target
        self.index = index
        super().__init__(
            f"Missing dependency #{index} ({_key_name(dependency)}) "
            f"while resolving dependencies for {_key_name(target)}",
        )


class ScopewireCircularDependencyError(ScopewireInjectionError):
    """Signal that an injected class depends on itself, directly or not.

    ``chain`` lists the construction frames that were in progress: the first
    frame names the outermost class, every following frame names the argument
    index being resolved and the class it led to. The last frame repeats
    ``target``.
    """

    def __init__(self, chain: tuple[ConstructionFrame, ...], target: type[Any]) -> None:
        self.chain = chain
        self.target = target
        path = " -> ".join(_key_name(frame.target) for frame in chain)
        super().__init__(
            f"Circular dependencies detected while resolving dependencies of "
            f"{_key_name(target)}: {path}",
        )


class ScopewireDeclarationError(ScopewireError):
    """Represent misuse of the ``@inject`` / ``@scoped`` declarations."""

    def __init__(self, cls: type[Any], message: str) -> None:
        self.cls = cls
        super().__init__(message)


class ScopewireInjectionAlreadyAppliedError(ScopewireDeclarationError):
    """Signal a second injection declaration for the same class."""

    def __init__(self, cls: type[Any]) -> None:
        super().__init__(cls, f"@inject() is already applied on {_key_name(cls)}.")


class ScopewireScopeAlreadyAppliedError(ScopewireDeclarationError):
    """Signal a second scope declaration for the same class."""

    def __init__(self, cls: type[Any]) -> None:
        super().__init__(cls, f"@scoped() is already applied on {_key_name(cls)}.")


class ScopewireScopeWithoutInjectionError(ScopewireDeclarationError):
    """Signal a scope declaration on a class without an injection declaration.

    Typical fix is ordering the decorators so ``@inject(...)`` sits below
    ``@scoped(...)`` and is therefore applied first.
    """

    def __init__(self, cls: type[Any]) -> None:
        super().__init__(
            cls,
            f"@scoped() is applied without or before @inject(), on {_key_name(cls)}.",
        )


class ScopewireTokenInstantiationError(ScopewireError, TypeError):
    """Signal an attempt to instantiate a ``Token`` or one of its subclasses.

    Tokens are inert keys; subclass them and use the subclass itself as the
    key passed to ``Container.register`` and ``Container.get``.
    """

    def __init__(self) -> None:
        super().__init__("Cannot instantiate.")
