from __future__ import annotations

import pytest

from keywire import inject
from keywire.container import Container
from keywire.exceptions import KeyWireMethodNotFoundError
from keywire.method_injection import MethodInjection


class Clock:
    pass


class EventBus:
    pass


class Handler:
    def __init__(self) -> None:
        self.calls: list[str] = []

    @inject
    def set_clock(self, clock: Clock) -> None:
        self.calls.append("set_clock")
        self.clock = clock

    def set_bus(self, bus: EventBus) -> None:
        self.calls.append("set_bus")
        self.bus = bus

    def _private(self, bus: EventBus) -> None:
        self.calls.append("_private")

    @staticmethod
    def helper() -> None:
        raise AssertionError("static methods are never injected")

    @classmethod
    def build(cls) -> "Handler":
        raise AssertionError("class methods are never injected")

    @property
    def name(self) -> str:
        raise AssertionError("properties are never injected")


class AuditedHandler(Handler):
    def set_bus(self, bus: EventBus) -> None:
        self.calls.append("audited.set_bus")

    def audit(self, label: str = "default") -> None:
        self.calls.append(f"audit:{label}")


def test_marked_methods_are_injected_by_default(container: Container) -> None:
    handler = container.make(Handler)

    assert handler.calls == ["set_clock"]
    assert isinstance(handler.clock, Clock)


def test_all_public_calls_every_public_method_once(all_public_container: Container) -> None:
    handler = all_public_container.make(Handler)

    assert sorted(handler.calls) == ["set_bus", "set_clock"]
    assert isinstance(handler.clock, Clock)
    assert isinstance(handler.bus, EventBus)


def test_all_public_includes_inherited_methods_once(all_public_container: Container) -> None:
    handler = all_public_container.make(AuditedHandler)

    assert sorted(handler.calls) == ["audit:default", "audited.set_bus", "set_clock"]


def test_all_public_resolves_parameters_independently(all_public_container: Container) -> None:
    class Service:
        def __init__(self, clock: Clock) -> None:
            self.constructor_clock = clock

        def attach(self, clock: Clock) -> None:
            self.method_clock = clock

    service = all_public_container.make(Service)

    assert service.constructor_clock is not service.method_clock


def test_method_injection_disabled() -> None:
    container = Container(method_injection=MethodInjection.NONE)

    assert container.make(Handler).calls == []


def test_method_injection_applies_to_classes_without_constructor(container: Container) -> None:
    class Plugin:
        @inject
        def set_clock(self, clock: Clock) -> None:
            self.clock = clock

    assert isinstance(container.make(Plugin).clock, Clock)


def test_method_injection_uses_shared_bindings(container: Container) -> None:
    container.singleton(Clock)

    assert container.make(Handler).clock is container.make(Clock)


def test_resolve_method_calls_single_method(container: Container) -> None:
    handler = Handler()

    container.resolve_method(handler, "set_bus")

    assert handler.calls == ["set_bus"]
    assert isinstance(handler.bus, EventBus)


def test_resolve_method_returns_result(container: Container) -> None:
    class Greeter:
        def greet(self, name: str = "world") -> str:
            return f"hello {name}"

    assert container.resolve_method(Greeter(), "greet") == "hello world"


@pytest.mark.parametrize("method_name", ["missing", "calls"])
def test_resolve_method_missing(container: Container, method_name: str) -> None:
    with pytest.raises(KeyWireMethodNotFoundError) as exc_info:
        container.resolve_method(Handler(), method_name)

    assert exc_info.value.method_name == method_name


def test_resolve_method_on_class_then_instance(container: Container) -> None:
    class Reporter:
        def run(self, clock: Clock) -> Clock:
            return clock

    assert isinstance(container.resolve_method(Reporter, "run"), Clock)
    assert isinstance(container.resolve_method(Reporter(), "run"), Clock)


def test_method_injection_uses_consumer_key_rules(container: Container) -> None:
    class SystemClock(Clock):
        pass

    container.bind("handler", Handler)
    container.when("handler").needs(Clock, SystemClock)

    assert isinstance(container.make("handler").clock, SystemClock)
    assert type(container.make(Handler).clock) is Clock
