"""Shared pytest fixtures for scopewire tests."""

import pytest

from scopewire.container import Container
from scopewire.injection import InjectionRegistry
from scopewire.scope import Scope


@pytest.fixture()
def registry() -> InjectionRegistry:
    """Fresh injection registry, isolated from ``default_registry``."""
    return InjectionRegistry()


@pytest.fixture()
def container(registry: InjectionRegistry) -> Container:
    """Root container bound to the isolated registry."""
    return Container(registry=registry)


@pytest.fixture()
def request_scope() -> Scope:
    return Scope("REQUEST")
