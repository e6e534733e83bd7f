from __future__ import annotations

import pytest

from keywire.container import Container


class Mailer:
    def __init__(self, transport: str = "default") -> None:
        self.transport = transport


class SmtpMailer(Mailer):
    pass


def test_custom_resolver_beats_closure(container: Container) -> None:
    container.bind("mailer", lambda c: Mailer("closure"))
    container.register_custom_resolver("mailer", lambda c: Mailer("resolver"))

    assert container.make("mailer").transport == "resolver"
    assert container.factory("mailer").transport == "resolver"


def test_custom_resolver_beats_regular_binding(container: Container) -> None:
    container.bind("mailer", SmtpMailer)
    container.register_custom_resolver("mailer", lambda c: Mailer("resolver"))

    mailer = container.make("mailer")

    assert type(mailer) is Mailer
    assert mailer.transport == "resolver"


def test_custom_resolver_is_cached_when_binding_is_shared(container: Container) -> None:
    container.singleton("mailer", SmtpMailer)
    container.register_custom_resolver("mailer", lambda c: Mailer("resolver"))

    assert container.make("mailer") is container.make("mailer")


def test_custom_resolver_is_not_cached_without_shared_binding(container: Container) -> None:
    container.register_custom_resolver("mailer", lambda c: Mailer("resolver"))

    assert container.make("mailer") is not container.make("mailer")


def test_literal_binding_beats_custom_resolver(container: Container) -> None:
    container.bind("mailer", "smtp://localhost")
    container.register_custom_resolver("mailer", lambda c: Mailer("resolver"))

    assert container.make("mailer") == "smtp://localhost"


def test_literal_binding_beats_resolved_instance(container: Container) -> None:
    container.bind("mailer", "smtp://localhost")
    container.resolve_with("mailer", Mailer())

    assert container.make("mailer") == "smtp://localhost"


def test_resolved_instance_beats_producers(container: Container) -> None:
    instance = Mailer("injected")
    container.register_custom_resolver("mailer", lambda c: Mailer("resolver"))
    container.bind("mailer", lambda c: Mailer("closure"))
    container.resolve_with("mailer", instance)

    assert container.make("mailer") is instance


def test_closure_beats_delegate(container: Container) -> None:
    delegate = Container()
    delegate.bind("mailer", lambda c: Mailer("delegate"))
    container.set_delegate_container(delegate)
    container.bind("mailer", lambda c: Mailer("local"))

    assert container.make("mailer").transport == "local"


def test_regular_binding_beats_autowiring(container: Container) -> None:
    container.bind(Mailer, SmtpMailer)

    assert type(container.make(Mailer)) is SmtpMailer


@pytest.mark.parametrize("shared", [True, False])
def test_shared_flag_controls_caching(container: Container, shared: bool) -> None:
    container.bind(Mailer, SmtpMailer, shared=shared)

    assert (container.make(Mailer) is container.make(Mailer)) is shared
