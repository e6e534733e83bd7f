from __future__ import annotations

import logging
from inspect import Parameter
from typing import Annotated, Any, Optional, Union

import pytest

from keywire._internal.parameters import ParameterInspector
from keywire.markers import Key


class Database:
    pass


class Cache:
    pass


@pytest.fixture()
def inspector() -> ParameterInspector:
    return ParameterInspector()


def test_constructor_parameters_skip_self(inspector: ParameterInspector) -> None:
    class Repository:
        def __init__(self, db: Database, table: str = "users") -> None:
            pass

    db, table = inspector.inspect_constructor(Repository)

    assert db.name == "db"
    assert db.declared_type is Database
    assert not db.has_default
    assert not db.is_nullable
    assert not db.is_optional

    assert table.name == "table"
    assert table.declared_type is str
    assert table.has_default
    assert table.default == "users"
    assert table.is_optional


def test_untyped_parameter(inspector: ParameterInspector) -> None:
    def handler(value):  # noqa: ANN001, ANN202
        return value

    (value,) = inspector.inspect_callable(handler)

    assert value.declared_type is None
    assert value.key is None
    assert not value.is_nullable
    assert not value.has_default


@pytest.mark.parametrize(
    ("annotation", "declared_type", "is_nullable"),
    [
        (Database, Database, False),
        (Optional[Database], Database, True),
        (Database | None, Database, True),
        (Union[Database, Cache], None, False),
        (Union[Database, Cache, None], None, True),
        (Any, None, True),
        (Annotated[Database, "meta"], Database, False),
        (Annotated[Optional[Database], "meta"], Database, True),
        (list[Database], None, False),
    ],
)
def test_declared_type_and_nullability(
    inspector: ParameterInspector,
    annotation: Any,
    declared_type: Any,
    is_nullable: bool,
) -> None:
    def handler(value: Any) -> None:
        pass

    handler.__annotations__["value"] = annotation

    (value,) = inspector.inspect_callable(handler)

    assert value.declared_type is declared_type
    assert value.is_nullable is is_nullable


def test_key_marker_is_extracted(inspector: ParameterInspector) -> None:
    def handler(dsn: Annotated[str, Key("database.dsn")]) -> None:
        pass

    (dsn,) = inspector.inspect_callable(handler)

    assert dsn.key == Key("database.dsn")
    assert dsn.declared_type is str


def test_parameter_kinds(inspector: ParameterInspector) -> None:
    def handler(a: int, /, b: int, *args: int, c: int, **kwargs: int) -> None:
        pass

    a, b, args, c, kwargs = inspector.inspect_callable(handler)

    assert a.is_positional_only
    assert a.kind is Parameter.POSITIONAL_ONLY
    assert b.kind is Parameter.POSITIONAL_OR_KEYWORD
    assert args.is_variadic
    assert args.is_optional
    assert c.kind is Parameter.KEYWORD_ONLY
    assert kwargs.is_variadic


def test_bound_methods_skip_self_and_share_cache(inspector: ParameterInspector) -> None:
    class Service:
        def attach(self, db: Database) -> None:
            pass

    first = inspector.inspect_callable(Service().attach)
    second = inspector.inspect_callable(Service().attach)

    assert [descriptor.name for descriptor in first] == ["db"]
    assert first is second


def test_plain_function_and_bound_method_are_cached_separately(
    inspector: ParameterInspector,
) -> None:
    class Service:
        def attach(self, db: Database) -> None:
            pass

    plain = inspector.inspect_callable(Service.attach)
    bound = inspector.inspect_callable(Service().attach)

    assert [descriptor.name for descriptor in plain] == ["self", "db"]
    assert [descriptor.name for descriptor in bound] == ["db"]


def test_new_only_constructor_parameters(inspector: ParameterInspector) -> None:
    class Connection:
        def __new__(cls, db: Database) -> Any:
            return super().__new__(cls)

    (db,) = inspector.inspect_constructor(Connection)

    assert db.name == "db"
    assert db.declared_type is Database


def test_constructor_results_are_cached(inspector: ParameterInspector) -> None:
    class Service:
        def __init__(self, db: Database) -> None:
            pass

    assert inspector.inspect_constructor(Service) is inspector.inspect_constructor(Service)


def test_unresolvable_forward_reference_logs_warning(
    inspector: ParameterInspector,
    caplog: pytest.LogCaptureFixture,
) -> None:
    def handler(db: MissingType) -> None:  # noqa: F821
        pass

    with caplog.at_level(logging.WARNING, logger="keywire._internal.parameters"):
        (db,) = inspector.inspect_callable(handler)

    assert db.declared_type is None
    assert "MissingType" in caplog.text
