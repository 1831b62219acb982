import typing

import inflection

from entity_hydrator.abstract_entity_tree import FieldKind, Node
from entity_hydrator.coercion import coerce
from entity_hydrator.exceptions import MalformedPayloadError
from entity_hydrator.payload import JsonValue


def attribute_members(payload: JsonValue, fields: typing.Sequence[Node]) -> typing.Dict[str, JsonValue]:
    """Members of a JSON object keyed by the field they address.

    A key naming a field exactly addresses that field, any other key addresses
    its underscored form (``parentId`` -> ``parent_id``). Keys addressing no
    field are dropped.
    """
    names = {field.name for field in fields}
    members: typing.Dict[str, JsonValue] = {}
    sources: typing.Dict[str, str] = {}
    for key, value in payload.as_object().items():
        name = key if key in names else inflection.underscore(key)
        if name not in names:
            continue
        if name in sources:
            raise MalformedPayloadError(f"Members {sources[name]!r} and {key!r} both address field {name!r}")
        sources[name] = key
        members[name] = value
    return members


def merge_scalars(target: typing.Any, payload: JsonValue, fields: typing.Sequence[Node]) -> None:
    """Copy scalar members of ``payload`` onto ``target``.

    Keys missing from the payload leave the attribute as it is, unknown keys are
    ignored. Identity fields are never written, identifiers belong to the storage.
    """
    members = attribute_members(payload, fields)
    for field in fields:
        if field.kind is not FieldKind.SCALAR or field.is_identity:
            continue
        if field.name in members:
            setattr(target, field.name, coerce(field, members[field.name]))
