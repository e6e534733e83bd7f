from __future__ import annotations

import inspect
import logging
import types
from collections.abc import Callable
from dataclasses import dataclass
from inspect import Parameter
from typing import Any, Union, get_args, get_origin, get_type_hints

from keywire._internal.type_checks import is_runtime_class
from keywire.markers import Key, find_key_marker, strip_annotated

logger = logging.getLogger(__name__)

_NONE_TYPE = type(None)
_VARIADIC_KINDS = (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    """Describe one parameter of a constructor or method."""

    name: str
    kind: Any
    declared_type: Any | None
    """Declared type with ``Annotated`` and ``None`` union members removed."""
    key: Key | None
    """``Key`` marker from ``Annotated`` metadata, if the parameter has one."""
    has_default: bool
    default: Any
    is_nullable: bool
    """True when the annotation admits ``None``."""

    @property
    def is_optional(self) -> bool:
        """Return whether the call succeeds without passing this parameter."""
        return self.has_default or self.is_variadic

    @property
    def is_variadic(self) -> bool:
        return self.kind in _VARIADIC_KINDS

    @property
    def is_positional_only(self) -> bool:
        return self.kind is Parameter.POSITIONAL_ONLY


class ParameterInspector:
    """Turn callables into ordered lists of ``ParameterDescriptor``.

    Results are cached per callable, so repeated autowiring of the same class
    does not re-run ``inspect.signature`` and ``get_type_hints``.
    """

    def __init__(self) -> None:
        self._cache: dict[Any, list[ParameterDescriptor]] = {}

    def inspect_constructor(self, cls: type[Any]) -> list[ParameterDescriptor]:
        """Return the constructor parameters of ``cls`` without ``self``."""
        cached = self._cache.get(cls)
        if cached is not None:
            return cached

        # a class that only defines __new__ takes its dependencies there
        constructor = cls.__new__ if cls.__init__ is object.__init__ else cls.__init__
        descriptors = self._describe(
            signature=inspect.signature(cls),
            hints=self._type_hints(constructor, owner=cls),
        )
        self._cache[cls] = descriptors
        return descriptors

    def inspect_callable(self, func: Callable[..., Any]) -> list[ParameterDescriptor]:
        """Return the parameters of a function or bound method.

        Bound methods are cached by their underlying function, which keeps the
        cache free of references to instances. Their signature lacks the
        bound first parameter, so they never share an entry with the plain
        function.
        """
        cache_key = (func.__func__, "bound") if inspect.ismethod(func) else func
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        descriptors = self._describe(
            signature=inspect.signature(func),
            hints=self._type_hints(func, owner=func),
        )
        self._cache[cache_key] = descriptors
        return descriptors

    def _describe(
        self,
        *,
        signature: inspect.Signature,
        hints: dict[str, Any],
    ) -> list[ParameterDescriptor]:
        descriptors: list[ParameterDescriptor] = []
        for parameter in signature.parameters.values():
            annotation = hints.get(parameter.name, parameter.annotation)
            if annotation is Parameter.empty:
                annotation = None
                is_nullable = False
            else:
                is_nullable = _admits_none(strip_annotated(annotation))

            descriptors.append(
                ParameterDescriptor(
                    name=parameter.name,
                    kind=parameter.kind,
                    declared_type=_declared_type(annotation),
                    key=find_key_marker(annotation),
                    has_default=parameter.default is not Parameter.empty,
                    default=parameter.default,
                    is_nullable=is_nullable,
                ),
            )
        return descriptors

    def _type_hints(self, func: Any, *, owner: Any) -> dict[str, Any]:
        try:
            return get_type_hints(func, include_extras=True)
        except (AttributeError, TypeError):
            return {}
        except NameError as exc:
            logger.warning(
                "'%s' name error retrieving %s type hints",
                exc.name,
                getattr(owner, "__qualname__", repr(owner)),
            )
            return {}


def _is_union(annotation: Any) -> bool:
    origin = get_origin(annotation)
    return origin is Union or origin is types.UnionType


def _admits_none(annotation: Any) -> bool:
    if annotation is None or annotation is _NONE_TYPE or annotation is Any:
        return True
    if _is_union(annotation):
        return _NONE_TYPE in get_args(annotation)
    return False


def _declared_type(annotation: Any) -> Any | None:
    """Return the single class an annotation names, or ``None``.

    ``Optional[X]`` and ``X | None`` name ``X``; wider unions name nothing.
    """
    if annotation is None:
        return None

    annotation = strip_annotated(annotation)
    if annotation is Any:
        return None
    if _is_union(annotation):
        members = [arg for arg in get_args(annotation) if arg is not _NONE_TYPE]
        if len(members) != 1:
            return None
        annotation = members[0]

    if is_runtime_class(annotation) and annotation is not _NONE_TYPE:
        return annotation
    return None


__all__ = ["ParameterDescriptor", "ParameterInspector"]
