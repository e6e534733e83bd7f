"""Shared pytest fixtures for keywire tests."""

from __future__ import annotations

import pytest

from keywire.container import Container
from keywire.method_injection import MethodInjection
from keywire.reflection_container import ReflectionContainer


@pytest.fixture()
def container() -> Container:
    """Default container with autowiring enabled."""
    return Container()


@pytest.fixture()
def strict_container() -> ReflectionContainer:
    """Container that refuses to inject ``None`` for unresolvable parameters."""
    return ReflectionContainer()


@pytest.fixture()
def no_autowire_container() -> Container:
    """Container where every key must be bound explicitly."""
    return Container(autowire=False)


@pytest.fixture()
def all_public_container() -> Container:
    """Container calling every public method after construction."""
    return Container(method_injection=MethodInjection.ALL_PUBLIC)
