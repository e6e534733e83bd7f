from keywire.container import Container, ContextualBindingBuilder
from keywire.exceptions import (
    KeyWireCircularDependencyError,
    KeyWireClassNotFoundError,
    KeyWireError,
    KeyWireInvalidRegistrationError,
    KeyWireMethodNotFoundError,
    KeyWireNoCustomResolverError,
    KeyWireNonInstantiableError,
    KeyWireUnresolvableDependencyError,
    KeyWireUnresolvedBindingError,
)
from keywire.markers import Key, inject
from keywire.method_injection import MethodInjection
from keywire.reflection_container import ReflectionContainer
from keywire.service_provider import ServiceProvider

__all__ = [
    "Container",
    "ContextualBindingBuilder",
    "Key",
    "KeyWireCircularDependencyError",
    "KeyWireClassNotFoundError",
    "KeyWireError",
    "KeyWireInvalidRegistrationError",
    "KeyWireMethodNotFoundError",
    "KeyWireNoCustomResolverError",
    "KeyWireNonInstantiableError",
    "KeyWireUnresolvableDependencyError",
    "KeyWireUnresolvedBindingError",
    "MethodInjection",
    "ReflectionContainer",
    "ServiceProvider",
    "inject",
]
