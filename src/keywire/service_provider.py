from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from keywire.container import Container


class ServiceProvider(ABC):
    """Group related registrations into one reusable module.

    ``Container.add_service_provider`` instantiates the provider with the
    container and calls ``register`` immediately. ``boot`` runs later, from
    ``Container.boot``, once every provider has registered its bindings, so
    it may resolve services owned by other providers.

    Examples:
        .. code-block:: python

            class MailServiceProvider(ServiceProvider):
                def register(self) -> None:
                    self.container.singleton(Mailer, SmtpMailer)
                    self.container.bind("mail.host", "smtp.example.com")

                def provides(self) -> tuple[Any, ...]:
                    return (Mailer, "mail.host")


            container.add_service_provider(MailServiceProvider)

    """

    def __init__(self, container: Container) -> None:
        self.container = container

    @abstractmethod
    def register(self) -> None:
        """Register bindings on ``self.container``."""

    def provides(self) -> tuple[Any, ...]:
        """Return the keys this provider registers."""
        return ()

    def boot(self) -> None:
        """Run after all providers registered; override when needed."""
