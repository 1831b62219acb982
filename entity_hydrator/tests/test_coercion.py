import enum
import typing
import uuid
from datetime import date, datetime
from decimal import Decimal

import pytest

from entity_hydrator.abstract_entity_tree import FieldNode
from entity_hydrator.coercion import coerce
from entity_hydrator.exceptions import TypeMismatchError
from entity_hydrator.payload import JsonValue


class Colour(enum.Enum):
    RED = "red"
    BLUE = "blue"


GUID = uuid.UUID("12345678-1234-5678-1234-567812345678")


@pytest.mark.parametrize(
    "field_type, raw, expected",
    [
        (int, 12, 12),
        (int, 12.0, 12),
        (int, "12", 12),
        (float, 1, 1.0),
        (float, "0.5", 0.5),
        (str, "title1", "title1"),
        (str, 45, "45"),
        (bool, True, True),
        (Decimal, 0.1, Decimal("0.1")),
        (Decimal, "10.50", Decimal("10.50")),
        (uuid.UUID, str(GUID), GUID),
        (datetime, "2021-05-01T10:00:00", datetime(2021, 5, 1, 10)),
        (date, "2021-05-01", date(2021, 5, 1)),
        (Colour, "blue", Colour.BLUE),
    ],
)
def test_coerces_declared_types(field_type: typing.Type, raw: typing.Any, expected: typing.Any) -> None:
    result = coerce(FieldNode(name="field", type=field_type), JsonValue.wrap(raw))

    assert result == expected
    assert type(result) is type(expected)


@pytest.mark.parametrize(
    "field_type, raw",
    [
        (int, True),
        (int, 1.5),
        (int, "abc"),
        (int, [1]),
        (float, "abc"),
        (float, False),
        (str, True),
        (str, {"a": 1}),
        (bool, 1),
        (bool, "true"),
        (Decimal, "ten"),
        (uuid.UUID, 1),
        (uuid.UUID, "not-a-uuid"),
        (date, "yesterday"),
        (Colour, "green"),
    ],
)
def test_rejects_values_of_wrong_type(field_type: typing.Type, raw: typing.Any) -> None:
    with pytest.raises(TypeMismatchError) as error:
        coerce(FieldNode(name="field", type=field_type), JsonValue.wrap(raw))

    assert error.value.field_name == "field"
    assert error.value.expected_type is field_type
    assert error.value.value == raw


def test_null_only_for_nullable_fields():
    assert coerce(FieldNode(name="field", type=str, nullable=True), JsonValue.wrap(None)) is None
    with pytest.raises(TypeMismatchError):
        coerce(FieldNode(name="field", type=str), JsonValue.wrap(None))


def test_other_types_are_checked_by_instance():
    field = FieldNode(name="field", type=list)

    assert coerce(field, JsonValue.wrap([1, 2])) == [1, 2]
    with pytest.raises(TypeMismatchError):
        coerce(field, JsonValue.wrap("a"))
