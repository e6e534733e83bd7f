from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, ClassVar

from keywire._internal.bindings import BindingKey, ensure_callable
from keywire.container import Container
from keywire.exceptions import KeyWireNoCustomResolverError

logger = logging.getLogger(__name__)


class ReflectionContainer(Container):
    """A container with a strict parameter policy and cache management.

    Where ``Container`` passes ``None`` for a parameter it cannot resolve,
    this container only does so when the annotation admits ``None``;
    untyped, non-defaulted parameters raise
    ``KeyWireUnresolvableDependencyError``. It also supports decorating custom
    resolvers with ``extend`` and resetting shared instances with ``flush``.
    """

    _strict_parameters: ClassVar[bool] = True

    def extend(self, key: BindingKey, callback: Callable[[Any, Container], Any]) -> None:
        """Wrap the custom resolver of ``key``.

        The new resolver returns ``callback(previous_result, container)``.
        Extensions stack: each wraps whatever was registered before it.

        Raises:
            KeyWireNoCustomResolverError: If ``key`` has no custom resolver.
            KeyWireInvalidRegistrationError: If ``callback`` is not callable.

        Examples:
            .. code-block:: python

                container.register_custom_resolver("client", lambda c: HttpClient())
                container.extend("client", lambda client, c: RetryingClient(client))

        """
        previous = self._registry.custom_resolvers.get(key)
        if previous is None:
            raise KeyWireNoCustomResolverError(key)
        ensure_callable(callback, what="Extension callback")

        def extended(container: Container) -> Any:
            return callback(previous(container), container)

        self._registry.custom_resolvers[key] = extended

    def resolved(self, key: BindingKey) -> bool:
        """Return whether a shared instance is cached for ``key``."""
        return self._cache.is_resolved(self._registry.resolve_alias(key))

    def flush(self) -> None:
        """Forget every cached shared instance; the next ``make`` builds new ones."""
        self._cache.flush()
        logger.debug("Flushed resolved instances")
