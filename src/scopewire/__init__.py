from scopewire.container import Container
from scopewire.exceptions import (
    ScopewireCircularDependencyError,
    ScopewireDeclarationError,
    ScopewireDuplicateKeyError,
    ScopewireDuplicateScopeError,
    ScopewireError,
    ScopewireInjectionAlreadyAppliedError,
    ScopewireInjectionError,
    ScopewireMissingDependencyError,
    ScopewireScopeAlreadyAppliedError,
    ScopewireScopeWithoutInjectionError,
    ScopewireTokenInstantiationError,
    ScopewireUndefinedKeyError,
    ScopewireUndefinedScopeError,
)
from scopewire.injection import (
    DeferredKey,
    DirectKey,
    InjectionRegistry,
    default_registry,
    deferred,
    inject,
    scoped,
)
from scopewire.lock_mode import LockMode
from scopewire.providers import (
    Disposable,
    GeneratorProvider,
    ProviderContext,
    ResolverProvider,
    ValueProvider,
)
from scopewire.scope import Scope
from scopewire.token import Token

__all__ = [
    "Container",
    "DeferredKey",
    "DirectKey",
    "Disposable",
    "GeneratorProvider",
    "InjectionRegistry",
    "LockMode",
    "ProviderContext",
    "ResolverProvider",
    "Scope",
    "ScopewireCircularDependencyError",
    "ScopewireDeclarationError",
    "ScopewireDuplicateKeyError",
    "ScopewireDuplicateScopeError",
    "ScopewireError",
    "ScopewireInjectionAlreadyAppliedError",
    "ScopewireInjectionError",
    "ScopewireMissingDependencyError",
    "ScopewireScopeAlreadyAppliedError",
    "ScopewireScopeWithoutInjectionError",
    "ScopewireTokenInstantiationError",
    "ScopewireUndefinedKeyError",
    "ScopewireUndefinedScopeError",
    "Token",
    "ValueProvider",
    "default_registry",
    "deferred",
    "inject",
    "scoped",
]
