from __future__ import annotations

import inspect
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

from keywire.exceptions import KeyWireInvalidRegistrationError

BindingKey: TypeAlias = Any
"""A hashable identifier for a service, usually a string or a class."""

Producer: TypeAlias = Callable[..., Any]
"""A callable receiving the container (and, for factories, call-time arguments)."""

_LITERAL_TYPES: tuple[type[Any], ...] = (str, bytes, int, float, complex, bool)


@dataclass(frozen=True, slots=True)
class LiteralConcrete:
    """A plain value returned verbatim by ``make``."""

    value: Any


@dataclass(frozen=True, slots=True)
class TypeConcrete:
    """A class built by the autowirer."""

    cls: type[Any]


@dataclass(frozen=True, slots=True)
class ProducerConcrete:
    """A closure called with the container."""

    producer: Producer


@dataclass(frozen=True, slots=True)
class InstanceConcrete:
    """A pre-built object returned as is."""

    instance: Any


Concrete: TypeAlias = LiteralConcrete | TypeConcrete | ProducerConcrete | InstanceConcrete


def classify_concrete(key: BindingKey, concrete: Any) -> Concrete:
    """Wrap a user-supplied concrete value into its ``Concrete`` variant.

    ``None`` means the key is its own concrete class.
    """
    if concrete is None:
        if not inspect.isclass(key):
            msg = f"Binding for {key!r} needs a concrete value unless the key is a class."
            raise KeyWireInvalidRegistrationError(msg)
        return TypeConcrete(key)
    if inspect.isclass(concrete):
        return TypeConcrete(concrete)
    if isinstance(concrete, _LITERAL_TYPES):
        return LiteralConcrete(concrete)
    if callable(concrete):
        return ProducerConcrete(concrete)
    return InstanceConcrete(concrete)


@dataclass(frozen=True, slots=True)
class Binding:
    concrete: Concrete
    shared: bool = False


@dataclass(frozen=True, slots=True)
class FactoryBinding:
    factory: Producer
    shared: bool = False


def ensure_callable(value: Any, *, what: str) -> None:
    if not callable(value):
        msg = f"{what} must be callable, got {value!r}."
        raise KeyWireInvalidRegistrationError(msg)


class BindingRegistry:
    """Hold every binding table of a container.

    Pure data with accessors: nothing here resolves anything. Every table is
    last-write-wins per key.
    """

    def __init__(self) -> None:
        self.bindings: dict[BindingKey, Binding] = {}
        self.factories: dict[BindingKey, FactoryBinding] = {}
        self.custom_resolvers: dict[BindingKey, Producer] = {}
        self.aliases: dict[BindingKey, BindingKey] = {}
        self.contextual: dict[tuple[BindingKey, BindingKey], Any] = {}
        self.tags: defaultdict[str, list[BindingKey]] = defaultdict(list)
        self.inflectors: defaultdict[type[Any], list[Callable[[Any], Any]]] = defaultdict(list)
        self.shared_instances: dict[BindingKey, Any] = {}
        self.config: dict[str, Any] = {}

    def resolve_alias(self, key: BindingKey) -> BindingKey:
        """Return the key an alias points to; a single hop, never chained."""
        return self.aliases.get(key, key)

    def is_shared(self, key: BindingKey) -> bool:
        binding = self.bindings.get(key)
        return binding is not None and binding.shared

    def contextual_implementation(self, context: BindingKey, key: BindingKey) -> Any | None:
        if context is None:
            return None
        return self.contextual.get((context, key))

    def knows(self, key: BindingKey) -> bool:
        """Return whether any producer table has an entry for ``key``."""
        return key in self.bindings or key in self.factories or key in self.custom_resolvers

    def tagged(self, tag: str) -> list[BindingKey]:
        # .get keeps unknown tags out of the defaultdict
        return list(self.tags.get(tag, ()))

    def inflectors_for(self, instance: Any) -> list[Callable[[Any], Any]]:
        return list(self.inflectors.get(type(instance), ()))


__all__ = [
    "Binding",
    "BindingKey",
    "BindingRegistry",
    "Concrete",
    "FactoryBinding",
    "InstanceConcrete",
    "LiteralConcrete",
    "Producer",
    "ProducerConcrete",
    "TypeConcrete",
    "classify_concrete",
    "ensure_callable",
]
