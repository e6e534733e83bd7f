from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from keywire.exceptions import KeyWireCircularDependencyError


class ResolutionStack:
    """Keys currently being resolved, outermost first.

    Containers are configured and used from one thread, so a plain list is
    enough to detect a key re-entering its own resolution.
    """

    def __init__(self) -> None:
        self._keys: list[Any] = []

    @contextmanager
    def enter(self, key: Any) -> Iterator[None]:
        if key in self._keys:
            chain = [*self._keys[self._keys.index(key) :], key]
            raise KeyWireCircularDependencyError(chain)

        self._keys.append(key)
        try:
            yield
        finally:
            self._keys.pop()

    def __len__(self) -> int:
        return len(self._keys)


__all__ = ["ResolutionStack"]
