from __future__ import annotations

from collections.abc import Callable
from typing import Annotated, Any, NamedTuple, TypeVar, get_args, get_origin

F = TypeVar("F", bound=Callable[..., Any])

INJECT_MARKER_ATTR = "__keywire_inject__"
_ANNOTATED_MARKER_MIN_ARGS = 2


class Key(NamedTuple):
    """Point a parameter at a container key instead of its annotated type.

    Attach ``Key`` metadata to ``typing.Annotated`` so the autowirer resolves
    the parameter with ``container.make(key)``. This is how string keys and
    literal configuration values reach constructors.

    Examples:
        .. code-block:: python

            class Repository:
                def __init__(self, dsn: Annotated[str, Key("database.dsn")]) -> None:
                    self.dsn = dsn


            container.bind("database.dsn", "postgresql://localhost/app")
            container.make(Repository).dsn

    """

    value: Any


def inject(method: F) -> F:
    """Mark a method for post-construction injection.

    With the default ``MethodInjection.MARKED`` policy the autowirer calls
    every marked method once after ``__init__`` returns, resolving its
    parameters from the container.

    Examples:
        .. code-block:: python

            class Service:
                @inject
                def set_logger(self, logger: Logger) -> None:
                    self.logger = logger

    """
    setattr(method, INJECT_MARKER_ATTR, True)
    return method


def is_injectable_method(method: object) -> bool:
    """Return whether ``method`` was decorated with ``inject``."""
    return getattr(method, INJECT_MARKER_ATTR, False) is True


def find_key_marker(annotation: Any) -> Key | None:
    """Return the ``Key`` marker from ``Annotated`` metadata, if any."""
    if get_origin(annotation) is not Annotated:
        return None

    args = get_args(annotation)
    if len(args) < _ANNOTATED_MARKER_MIN_ARGS:
        return None  # pragma: no cover - Annotated requires at least 2 args

    for metadata in args[1:]:
        if isinstance(metadata, Key):
            return metadata
    return None


def strip_annotated(annotation: Any) -> Any:
    """Return the inner type of ``Annotated[T, ...]`` or the annotation itself."""
    if get_origin(annotation) is Annotated:
        return get_args(annotation)[0]
    return annotation
