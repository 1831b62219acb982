import decimal
import enum
import typing
import uuid
from datetime import date, datetime

from entity_hydrator.abstract_entity_tree import FieldNode
from entity_hydrator.exceptions import TypeMismatchError
from entity_hydrator.payload import JsonKind, JsonValue


def _to_int(value: JsonValue) -> int:
    if value.kind is JsonKind.NUMBER:
        if isinstance(value.value, float):
            if not value.value.is_integer():
                raise ValueError(f"{value.value} is not integral")
            return int(value.value)
        return value.value
    if value.kind is JsonKind.STRING:
        return int(value.value)
    raise TypeError(value.kind)


def _to_float(value: JsonValue) -> float:
    if value.kind in (JsonKind.NUMBER, JsonKind.STRING):
        return float(value.value)
    raise TypeError(value.kind)


def _to_str(value: JsonValue) -> str:
    if value.kind in (JsonKind.STRING, JsonKind.NUMBER):
        return str(value.value)
    raise TypeError(value.kind)


def _to_bool(value: JsonValue) -> bool:
    if value.kind is JsonKind.BOOLEAN:
        return value.value
    raise TypeError(value.kind)


def _to_decimal(value: JsonValue) -> decimal.Decimal:
    if value.kind not in (JsonKind.NUMBER, JsonKind.STRING):
        raise TypeError(value.kind)
    try:
        return decimal.Decimal(str(value.value))
    except decimal.InvalidOperation as error:
        raise ValueError(value.value) from error


def _from_string(parse: typing.Callable[[str], typing.Any]) -> typing.Callable[[JsonValue], typing.Any]:
    def coerce_string(value: JsonValue) -> typing.Any:
        if value.kind is not JsonKind.STRING:
            raise TypeError(value.kind)
        return parse(value.value)

    return coerce_string


mapping: typing.Dict[typing.Type, typing.Callable[[JsonValue], typing.Any]] = {
    int: _to_int,
    float: _to_float,
    str: _to_str,
    bool: _to_bool,
    decimal.Decimal: _to_decimal,
    uuid.UUID: _from_string(uuid.UUID),
    datetime: _from_string(datetime.fromisoformat),
    date: _from_string(date.fromisoformat),
}


def _to_enum(enum_type: typing.Type[enum.Enum]) -> typing.Callable[[JsonValue], enum.Enum]:
    def coerce_enum(value: JsonValue) -> enum.Enum:
        if value.kind in (JsonKind.OBJECT, JsonKind.ARRAY):
            raise TypeError(value.kind)
        return enum_type(value.value)

    return coerce_enum


def _to_instance_of(field_type: typing.Type) -> typing.Callable[[JsonValue], typing.Any]:
    def coerce_instance(value: JsonValue) -> typing.Any:
        raw = value.unwrap()
        if not isinstance(raw, field_type):
            raise TypeError(type(raw))
        return raw

    return coerce_instance


def _coercer_for(field_type: typing.Type) -> typing.Callable[[JsonValue], typing.Any]:
    try:
        return mapping[field_type]
    except KeyError:
        if isinstance(field_type, type) and issubclass(field_type, enum.Enum):
            return _to_enum(field_type)
        return _to_instance_of(field_type)


def coerce(field: FieldNode, value: JsonValue) -> typing.Any:
    """Convert a JSON scalar into the type ``field`` declares."""
    if value.is_null:
        if field.nullable:
            return None
        raise TypeMismatchError(field.name, field.type, None)

    try:
        return _coercer_for(field.type)(value)
    except (TypeError, ValueError) as error:
        raise TypeMismatchError(field.name, field.type, value.unwrap()) from error
