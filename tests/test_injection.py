"""Tests for injection declarations and the ``inject``/``scoped`` decorators."""

from __future__ import annotations

import gc

import pytest

from scopewire import InjectionRegistry, Scope, Token, default_registry, deferred, inject, scoped
from scopewire.exceptions import (
    ScopewireDeclarationError,
    ScopewireInjectionAlreadyAppliedError,
    ScopewireScopeAlreadyAppliedError,
    ScopewireScopeWithoutInjectionError,
)
from scopewire.injection import DeferredKey, DirectKey, as_dependency_ref


class Database:
    pass


class Port(Token[int]):
    pass


class TestDependencyRefs:
    def test_classes_are_direct_keys(self) -> None:
        assert as_dependency_ref(Database) == DirectKey(Database)
        assert as_dependency_ref(Port) == DirectKey(Port)

    def test_lambdas_are_deferred_keys(self) -> None:
        ref = as_dependency_ref(lambda: Database)

        assert isinstance(ref, DeferredKey)
        assert ref.resolve() is Database

    def test_existing_refs_kept(self) -> None:
        ref = deferred(lambda: Database)

        assert as_dependency_ref(ref) is ref

    def test_deferred_thunk_runs_on_every_resolve(self) -> None:
        calls: list[int] = []

        def thunk() -> type[Database]:
            calls.append(1)
            return Database

        ref = deferred(thunk)
        ref.resolve()
        ref.resolve()

        assert len(calls) == 2


class TestInjectionRegistry:
    def test_declare_and_lookup(self, registry: InjectionRegistry) -> None:
        class Service:
            pass

        registry.declare(Service, [Database, Port])

        assert Service in registry
        assert registry.dependencies_of(Service) == (DirectKey(Database), DirectKey(Port))
        assert registry.scope_of(Service) is None

    def test_lookup_of_undeclared(self, registry: InjectionRegistry) -> None:
        assert Database not in registry
        assert registry.dependencies_of(Database) is None
        assert registry.scope_of(Database) is None

    def test_lookup_of_non_weakrefable_key(self, registry: InjectionRegistry) -> None:
        assert "database" not in registry
        assert registry.dependencies_of(42) is None

    def test_declare_twice(self, registry: InjectionRegistry) -> None:
        registry.declare(Database, [])

        with pytest.raises(ScopewireInjectionAlreadyAppliedError) as exc_info:
            registry.declare(Database, [])

        assert exc_info.value.cls is Database
        assert "@inject() is already applied" in str(exc_info.value)

    def test_declare_scope(self, registry: InjectionRegistry) -> None:
        scope = Scope("REQUEST")
        registry.declare(Database, [Port])
        registry.declare_scope(Database, scope)

        assert registry.scope_of(Database) is scope
        assert registry.dependencies_of(Database) == (DirectKey(Port),)

    def test_scope_without_injection(self, registry: InjectionRegistry) -> None:
        with pytest.raises(ScopewireScopeWithoutInjectionError) as exc_info:
            registry.declare_scope(Database, Scope("REQUEST"))

        assert exc_info.value.cls is Database

    def test_scope_twice(self, registry: InjectionRegistry) -> None:
        registry.declare(Database, [])
        registry.declare_scope(Database, Scope("REQUEST"))

        with pytest.raises(ScopewireScopeAlreadyAppliedError):
            registry.declare_scope(Database, Scope("OTHER"))

    def test_declarations_do_not_keep_classes_alive(self, registry: InjectionRegistry) -> None:
        class Temporary:
            pass

        registry.declare(Temporary, [])
        del Temporary
        gc.collect()

        assert len(registry._declarations) == 0  # noqa: SLF001


class TestDecorators:
    def test_inject_returns_class_unchanged(self, registry: InjectionRegistry) -> None:
        @inject(Database, registry=registry)
        class Service:
            pass

        assert isinstance(Service, type)
        assert registry.dependencies_of(Service) == (DirectKey(Database),)

    def test_inject_defaults_to_default_registry(self) -> None:
        @inject()
        class Service:
            pass

        assert Service in default_registry

    def test_scoped_above_inject(self, registry: InjectionRegistry) -> None:
        scope = Scope("REQUEST")

        @scoped(scope, registry=registry)
        @inject(registry=registry)
        class Service:
            pass

        assert registry.scope_of(Service) is scope

    def test_scoped_below_inject_fails(self, registry: InjectionRegistry) -> None:
        with pytest.raises(ScopewireScopeWithoutInjectionError):

            @inject(registry=registry)
            @scoped(Scope("REQUEST"), registry=registry)
            class Service:
                pass

    def test_inject_twice_fails(self, registry: InjectionRegistry) -> None:
        with pytest.raises(ScopewireInjectionAlreadyAppliedError):

            @inject(registry=registry)
            @inject(Database, registry=registry)
            class Service:
                pass

    def test_scoped_twice_fails(self, registry: InjectionRegistry) -> None:
        with pytest.raises(ScopewireScopeAlreadyAppliedError):

            @scoped(Scope("A"), registry=registry)
            @scoped(Scope("B"), registry=registry)
            @inject(registry=registry)
            class Service:
                pass

    def test_declaration_errors_share_base(self) -> None:
        for error in (
            ScopewireInjectionAlreadyAppliedError,
            ScopewireScopeAlreadyAppliedError,
            ScopewireScopeWithoutInjectionError,
        ):
            assert issubclass(error, ScopewireDeclarationError)
