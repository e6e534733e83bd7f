from __future__ import annotations

from enum import Enum


class MethodInjection(Enum):
    """Select which methods the autowirer calls right after construction.

    Pass one of these values as ``Container(method_injection=...)``. Each
    selected method is invoked exactly once with its parameters resolved the
    same way constructor parameters are.
    """

    MARKED = "marked"
    """Call only methods decorated with ``@keywire.inject``."""

    ALL_PUBLIC = "all_public"
    """Call every public instance method, including inherited ones.

    Static methods, class methods, properties and names starting with an
    underscore are skipped.
    """

    NONE = "none"
    """Disable method injection."""
