from __future__ import annotations

from typing import Any


class KeyWireError(Exception):
    """Represent a base class for all keywire-specific failures.

    Catch this type when you want to handle any keywire error path without
    matching each concrete exception class individually.
    """


class KeyWireInvalidRegistrationError(KeyWireError):
    """Signal invalid registration arguments.

    Raised by registration APIs such as ``Container.bind``,
    ``Container.bind_factory``, ``Container.register_custom_resolver`` and
    ``Container.add_inflector`` when a producer is not callable or a key
    cannot stand for its own concrete class.
    """


class KeyWireUnresolvedBindingError(KeyWireError):
    """Signal that a key could not be satisfied by any precedence rule.

    Raised by ``make``/``factory`` after literal, contextual, cached, custom
    resolver, closure, factory, regular binding, delegate and autowiring
    lookups have all been exhausted.

    Typical fixes include binding the key explicitly, enabling autowiring, or
    wiring a delegate container that knows the key.
    """

    def __init__(self, key: Any, msg: str | None = None) -> None:
        self.key = key
        super().__init__(msg or f"Binding not found for key: {key!r}")


class KeyWireClassNotFoundError(KeyWireUnresolvedBindingError):
    """Signal that autowiring was attempted on something that is not a class.

    Raised when the key is neither a class nor an importable dotted path such
    as ``"package.module:ClassName"``.
    """

    def __init__(self, key: Any) -> None:
        super().__init__(key, f"Class not found: {key!r}")


class KeyWireNonInstantiableError(KeyWireError):
    """Signal that the target type cannot be instantiated.

    Abstract classes, protocols, builtins and metaclasses cannot be built by
    the autowirer. Typical fix is binding the abstract key to a concrete class.
    """

    def __init__(self, concrete: Any) -> None:
        self.concrete = concrete
        name = getattr(concrete, "__qualname__", repr(concrete))
        super().__init__(f"Class {name} is not instantiable.")


class KeyWireUnresolvableDependencyError(KeyWireError):
    """Signal a parameter that a strict container refuses to fill with ``None``.

    Raised by ``ReflectionContainer`` for parameters without an injectable
    type, without a default value and whose annotation does not admit ``None``.

    Typical fixes include annotating the parameter with a class, adding a
    default, or using ``Annotated[..., Key("name")]`` to point at a binding.
    """

    def __init__(self, parameter_name: str, owner: Any) -> None:
        self.parameter_name = parameter_name
        self.owner = owner
        owner_name = getattr(owner, "__qualname__", repr(owner))
        super().__init__(
            f"Unresolvable dependency for parameter '{parameter_name}' of {owner_name}",
        )


class KeyWireMethodNotFoundError(KeyWireError):
    """Signal that ``resolve_method`` targets a missing or non-callable attribute."""

    def __init__(self, instance: Any, method_name: str) -> None:
        self.instance = instance
        self.method_name = method_name
        super().__init__(
            f"Method {method_name} not found in class {type(instance).__qualname__}",
        )


class KeyWireNoCustomResolverError(KeyWireError):
    """Signal ``extend`` on a key that has no custom resolver to wrap.

    Typical fix is calling ``register_custom_resolver`` before ``extend``.
    """

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"No custom resolver registered for {key!r}")


class KeyWireCircularDependencyError(KeyWireError):
    """Signal that resolution re-entered a key that is still being built.

    ``chain`` lists the keys from the first occurrence of the repeated key to
    the repeated key itself.
    """

    def __init__(self, chain: list[Any]) -> None:
        self.chain = chain
        rendered = " -> ".join(getattr(key, "__qualname__", repr(key)) for key in chain)
        super().__init__(f"Circular dependency detected: {rendered}")
