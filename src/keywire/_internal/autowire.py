from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from keywire._internal.parameters import ParameterDescriptor, ParameterInspector
from keywire._internal.type_checks import has_own_constructor, is_injectable_type, is_instantiable
from keywire.exceptions import KeyWireNonInstantiableError, KeyWireUnresolvableDependencyError
from keywire.markers import is_injectable_method
from keywire.method_injection import MethodInjection

if TYPE_CHECKING:
    from keywire._internal.bindings import BindingRegistry
    from keywire.container import Container

logger = logging.getLogger(__name__)


class Autowirer:
    """Build classes and call methods by resolving their parameters from a container.

    Parameters are resolved in this order: a ``Key`` marker, an injectable
    declared type, the default value, and finally ``None``. With
    ``strict=True`` the last step only applies to parameters whose annotation
    admits ``None``; any other parameter raises
    ``KeyWireUnresolvableDependencyError``.

    Every dependency is resolved with the class being built as the context,
    which is what contextual bindings registered with ``when`` match against.
    When the class was reached through a binding key, rules registered for
    that key take precedence over rules for the class.
    """

    def __init__(
        self,
        *,
        container: Container,
        registry: BindingRegistry,
        inspector: ParameterInspector,
        method_injection: MethodInjection,
        strict: bool,
    ) -> None:
        self._container = container
        self._registry = registry
        self._inspector = inspector
        self._method_injection = method_injection
        self._strict = strict

    def build(self, concrete: Any, *, consumer: Any = None) -> Any:
        """Instantiate ``concrete``, inject its methods and apply inflectors.

        Args:
            concrete: Class to build.
            consumer: Binding key ``concrete`` is built for, if any.

        """
        if not is_instantiable(concrete):
            raise KeyWireNonInstantiableError(concrete)

        if has_own_constructor(concrete):
            descriptors = self._inspector.inspect_constructor(concrete)
            args, kwargs = self.resolve_arguments(descriptors, owner=concrete, consumer=consumer)
            instance = concrete(*args, **kwargs)
        else:
            instance = concrete()

        logger.debug("Autowired %s", concrete.__qualname__)
        self.initialize(instance, consumer=consumer)
        return instance

    def initialize(self, instance: Any, *, consumer: Any = None) -> None:
        """Run method injection and inflectors on a constructed instance."""
        self.inject_methods(instance, consumer=consumer)
        self.apply_inflectors(instance)

    def call(self, method: Callable[..., Any], *, owner: Any, consumer: Any = None) -> Any:
        """Call ``method`` with every parameter resolved from the container."""
        descriptors = self._inspector.inspect_callable(method)
        args, kwargs = self.resolve_arguments(descriptors, owner=owner, consumer=consumer)
        return method(*args, **kwargs)

    def resolve_arguments(
        self,
        descriptors: list[ParameterDescriptor],
        *,
        owner: Any,
        consumer: Any = None,
    ) -> tuple[list[Any], dict[str, Any]]:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}

        for descriptor in descriptors:
            # *args/**kwargs are never filled
            if descriptor.is_variadic:
                continue

            value = self.resolve_parameter(descriptor, owner=owner, consumer=consumer)
            if descriptor.is_positional_only:
                args.append(value)
            else:
                kwargs[descriptor.name] = value

        return args, kwargs

    def resolve_parameter(
        self,
        descriptor: ParameterDescriptor,
        *,
        owner: Any,
        consumer: Any = None,
    ) -> Any:
        if descriptor.key is not None:
            dependency = descriptor.key.value
            context = self._context_for(dependency, owner=owner, consumer=consumer)
            return self._container.make(dependency, context=context)

        if is_injectable_type(descriptor.declared_type):
            dependency = descriptor.declared_type
            context = self._context_for(dependency, owner=owner, consumer=consumer)
            return self._container.make(dependency, context=context)

        if descriptor.has_default:
            return descriptor.default

        if self._strict and not descriptor.is_nullable:
            raise KeyWireUnresolvableDependencyError(descriptor.name, owner)
        return None

    def inject_methods(self, instance: Any, *, consumer: Any = None) -> None:
        if self._method_injection is MethodInjection.NONE:
            return

        owner = type(instance)
        for name in self._injection_targets(owner):
            self.call(getattr(instance, name), owner=owner, consumer=consumer)

    def apply_inflectors(self, instance: Any) -> None:
        for inflector in self._registry.inflectors_for(instance):
            inflector(instance)

    def _context_for(self, dependency: Any, *, owner: Any, consumer: Any) -> Any:
        if consumer is None or consumer is owner:
            return owner
        rule = self._registry.contextual_implementation(
            self._registry.resolve_alias(consumer),
            self._registry.resolve_alias(dependency),
        )
        return owner if rule is None else consumer

    def _injection_targets(self, cls: type[Any]) -> list[str]:
        """Return the names of methods to call after construction.

        Subclass definitions shadow base ones, so an overridden method is
        selected, or skipped, once.
        """
        seen: set[str] = set()
        targets: list[str] = []
        all_public = self._method_injection is MethodInjection.ALL_PUBLIC

        for klass in cls.__mro__:
            if klass is object:
                continue
            for name, attribute in vars(klass).items():
                if name in seen:
                    continue
                seen.add(name)
                # staticmethod, classmethod and property objects are not functions
                if not inspect.isfunction(attribute):
                    continue
                if is_injectable_method(attribute) or (all_public and not name.startswith("_")):
                    targets.append(name)

        return targets


__all__ = ["Autowirer"]
