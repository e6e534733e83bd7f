from __future__ import annotations

from collections.abc import Callable
from typing import Any

from keywire._internal.bindings import BindingKey


class LifecycleCache:
    """Track instances that outlive a single resolution.

    ``resolved`` is the container-level cache consulted before any producer.
    ``shared`` memoizes builds of shared class bindings. For a shared key both
    end up holding the same object.
    """

    def __init__(self) -> None:
        self.resolved: dict[BindingKey, Any] = {}
        self.shared: dict[BindingKey, Any] = {}

    def get_shared(self, key: BindingKey, build: Callable[[], Any]) -> Any:
        """Call ``build`` the first time for ``key`` and return the memoized object afterwards."""
        if key not in self.shared:
            self.shared[key] = build()
        return self.shared[key]

    def is_resolved(self, key: BindingKey) -> bool:
        return key in self.resolved

    def remember(self, key: BindingKey, instance: Any) -> Any:
        self.resolved[key] = instance
        return instance

    def flush(self) -> None:
        self.resolved.clear()
        self.shared.clear()


__all__ = ["LifecycleCache"]
