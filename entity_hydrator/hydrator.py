import decimal
import logging
import typing

import attr

from entity_hydrator.abstract_entity_tree import EntityNode, FieldKind, ListOfEntitiesNode, Node
from entity_hydrator.coercion import coerce
from entity_hydrator.exceptions import EntityNotFoundError, TypeMismatchError
from entity_hydrator.merging import attribute_members, merge_scalars
from entity_hydrator.payload import JsonValue, parse
from entity_hydrator.registry import Registry
from entity_hydrator.repository import EntityLoader


logger = logging.getLogger(__name__)

BLANK_VALUES = {int: 0, float: 0.0, str: "", bool: False, decimal.Decimal: decimal.Decimal(0)}

EntityType = typing.TypeVar("EntityType")
Payload = typing.Union[str, bytes, bytearray, JsonValue]


class Hydrator:
    """Creates or partially updates aggregates from JSON payloads.

    Only members present in a payload are applied. Elements of a JSON array are
    matched against the existing children of the same collection by identifier:
    matches are updated in place, everything else is appended as a new child.
    Existing children missing from the array are kept as they are.
    """

    def __init__(self, registry: Registry, loader: EntityLoader) -> None:
        self._registry = registry
        self._loader = loader

    def hydrate(
        self, entity_type: typing.Type[EntityType], payload: Payload, existing_root_id: typing.Any = None
    ) -> EntityType:
        fields = self._registry.fields_of(entity_type)
        document = payload if isinstance(payload, JsonValue) else parse(payload)
        document.as_object()  # reject non-objects before anything is loaded

        if existing_root_id is None:
            logger.debug("Creating new %s", entity_type.__name__)
            root = self.new_instance(entity_type)
        else:
            root = self._loader.load_by_id(entity_type, existing_root_id)
            if root is None:
                raise EntityNotFoundError(entity_type, existing_root_id)
            logger.debug("Updating %s %r", entity_type.__name__, existing_root_id)

        self._merge(root, entity_type, document, fields)
        return root

    def new_instance(self, entity_type: typing.Type[EntityType]) -> EntityType:
        """Blank instance of ``entity_type``, its identity left unset."""
        fields = {field.name: field for field in self._registry.fields_of(entity_type)}
        kwargs = {}
        for attribute in attr.fields(entity_type):
            if not attribute.init or attribute.default is not attr.NOTHING:
                continue
            kwargs[attribute.alias] = self._blank_value(fields[attribute.name])
        return entity_type(**kwargs)

    def _blank_value(self, field: Node) -> typing.Any:
        if field.kind is FieldKind.TO_MANY_ENTITY:
            return []
        if field.nullable:
            return None
        if field.kind is FieldKind.TO_ONE_ENTITY:
            return self.new_instance(field.type)
        return BLANK_VALUES.get(field.type)

    def _merge(
        self, target: typing.Any, entity_type: typing.Type, payload: JsonValue, fields: typing.Sequence[Node]
    ) -> None:
        merge_scalars(target, payload, fields)
        members = attribute_members(payload, fields)
        for field in fields:
            if field.name not in members:
                continue
            if field.kind is FieldKind.TO_MANY_ENTITY:
                self._reconcile(target, entity_type, field, members[field.name])
            elif field.kind is FieldKind.TO_ONE_ENTITY:
                self._merge_nested(target, field, members[field.name])

    def _reconcile(
        self, parent: typing.Any, parent_type: typing.Type, field: ListOfEntitiesNode, value: JsonValue
    ) -> None:
        elements = value.as_array()
        child_fields = self._registry.fields_of(field.type)

        collection = getattr(parent, field.name)
        if collection is None:
            setattr(parent, field.name, [])
            collection = getattr(parent, field.name)

        by_id = self._index(collection, field)

        for element in elements:
            identity = self._identity_in(element, field)
            child = by_id.get(identity) if identity is not None else None
            if child is not None:
                logger.debug("Updating %s %r in %s", field.type.__name__, identity, field.name)
                self._merge(child, field.type, element, child_fields)
                continue

            child = self.new_instance(field.type)
            self._merge(child, field.type, element, child_fields)
            if field.back_reference:
                parent_identity = getattr(parent, self._registry.identifier_of(parent_type))
                setattr(child, field.back_reference, parent_identity)
            logger.debug("Appending new %s to %s", field.type.__name__, field.name)
            collection.append(child)

    def _merge_nested(self, parent: typing.Any, field: EntityNode, value: JsonValue) -> None:
        if value.is_null:
            if not field.nullable:
                raise TypeMismatchError(field.name, field.type, None)
            setattr(parent, field.name, None)
            return

        child_fields = self._registry.fields_of(field.type)
        identity = self._identity_in(value, field)
        current = getattr(parent, field.name)
        if current is not None and identity is not None and getattr(current, field.identifier) == identity:
            self._merge(current, field.type, value, child_fields)
            return

        child = self.new_instance(field.type)
        self._merge(child, field.type, value, child_fields)
        setattr(parent, field.name, child)

    @staticmethod
    def _identity_in(element: JsonValue, field: EntityNode) -> typing.Any:
        raw = attribute_members(element, field.children).get(field.identifier)
        if raw is None or raw.is_null:
            return None
        return coerce(field.identity_node, raw)

    @staticmethod
    def _index(collection: typing.Iterable[typing.Any], field: ListOfEntitiesNode) -> typing.Dict[typing.Any, typing.Any]:
        by_id: typing.Dict[typing.Any, typing.Any] = {}
        for child in collection:
            identity = getattr(child, field.identifier)
            if not identity:
                continue
            if identity in by_id:
                logger.warning("Duplicate identity %r in %s, the later child wins the match", identity, field.name)
            by_id[identity] = child
        return by_id
