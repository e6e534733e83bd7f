from __future__ import annotations

import inspect
import types
from typing import Any, TypeGuard


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_protocol_class(candidate: type[Any]) -> bool:
    """Return true when candidate is a ``typing.Protocol`` subclass."""
    return bool(getattr(candidate, "_is_protocol", False))


def is_injectable_type(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when a parameter annotation names a dependency to resolve.

    Builtins such as ``int`` or ``str`` are configuration values, not
    dependencies; parameters annotated with them fall back to defaults.
    """
    if not is_runtime_class(candidate):
        return False
    return candidate.__module__ != "builtins"


def is_instantiable(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when the autowirer may build ``candidate``."""
    if not is_injectable_type(candidate):
        return False
    if inspect.isabstract(candidate) or is_protocol_class(candidate):
        return False
    return not issubclass(candidate, type)


def has_own_constructor(cls: type[Any]) -> bool:
    """Return true when a class or one of its bases defines ``__init__`` or ``__new__``."""
    return cls.__init__ is not object.__init__ or cls.__new__ is not object.__new__


__all__ = [
    "has_own_constructor",
    "is_injectable_type",
    "is_instantiable",
    "is_protocol_class",
    "is_runtime_class",
]
