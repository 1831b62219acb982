"""JSON payloads as a tagged variant tree.

Raw documents are parsed with the standard library parser and wrapped into
``JsonValue`` nodes, so that callers branch on ``kind`` instead of probing
Python types.
"""
import enum
import json
import typing

import attr

from entity_hydrator.exceptions import MalformedPayloadError


class JsonKind(enum.Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


@attr.s(auto_attribs=True, frozen=True)
class JsonValue:
    kind: JsonKind
    value: typing.Any = None

    @classmethod
    def wrap(cls, raw: typing.Any) -> "JsonValue":
        if raw is None:
            return cls(JsonKind.NULL)
        # bool first, it is a subclass of int
        if isinstance(raw, bool):
            return cls(JsonKind.BOOLEAN, raw)
        if isinstance(raw, (int, float)):
            return cls(JsonKind.NUMBER, raw)
        if isinstance(raw, str):
            return cls(JsonKind.STRING, raw)
        if isinstance(raw, dict):
            return cls(JsonKind.OBJECT, {str(key): cls.wrap(value) for key, value in raw.items()})
        if isinstance(raw, (list, tuple)):
            return cls(JsonKind.ARRAY, tuple(cls.wrap(value) for value in raw))
        raise MalformedPayloadError(f"{type(raw).__name__} is not a JSON value")

    @property
    def is_null(self) -> bool:
        return self.kind is JsonKind.NULL

    def as_object(self) -> typing.Dict[str, "JsonValue"]:
        if self.kind is not JsonKind.OBJECT:
            raise MalformedPayloadError(f"Expected a JSON object, got {self.kind.value}")
        return self.value

    def as_array(self) -> typing.Tuple["JsonValue", ...]:
        if self.kind is not JsonKind.ARRAY:
            raise MalformedPayloadError(f"Expected a JSON array, got {self.kind.value}")
        return self.value

    def unwrap(self) -> typing.Any:
        if self.kind is JsonKind.OBJECT:
            return {key: value.unwrap() for key, value in self.value.items()}
        if self.kind is JsonKind.ARRAY:
            return [value.unwrap() for value in self.value]
        return self.value


def _reject_constant(constant: str) -> typing.NoReturn:
    raise MalformedPayloadError(f"{constant} is not valid JSON")


def parse(document: typing.Union[str, bytes, bytearray]) -> JsonValue:
    try:
        raw = json.loads(document, parse_constant=_reject_constant)
    except (json.JSONDecodeError, UnicodeDecodeError) as error:
        raise MalformedPayloadError(f"Invalid JSON document: {error}") from error
    return JsonValue.wrap(raw)
