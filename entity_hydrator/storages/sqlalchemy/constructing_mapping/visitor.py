import logging
from typing import Callable, Dict, List, Type

import inflection
from sqlalchemy import ForeignKey, Table, event

from entity_hydrator.abstract_entity_tree import EntityNode, FieldNode, ListOfEntitiesNode, Visitor
from entity_hydrator.entity import Entity
from entity_hydrator.storages.sqlalchemy import native_type_to_column
from entity_hydrator.storages.sqlalchemy.constructing_mapping.raw_table import RawRelationship, RawTable
from entity_hydrator.storages.sqlalchemy.registry import SaRegistry


logger = logging.getLogger(__name__)


def table_name(entity_type: Type[Entity]) -> str:
    return inflection.pluralize(inflection.underscore(entity_type.__name__))


def _identity_node(entity: EntityNode) -> FieldNode:
    identity_nodes: List[FieldNode] = [node for node in entity.children if getattr(node, "is_identity", None)]
    assert len(identity_nodes) == 1, "Exactly one primary key supported"
    return identity_nodes.pop()


def _release_blank_identity(identity_name: str) -> Callable:
    def before_insert(mapper, connection, target) -> None:
        # 0 marks a new entity, the database assigns the real one
        if not getattr(target, identity_name):
            setattr(target, identity_name, None)

    return before_insert


class MappingConstructingVisitor(Visitor):
    """Derives tables from an aggregate's tree and maps its entity classes onto them."""

    def __init__(self, registry: SaRegistry) -> None:
        self._registry = registry
        self._entities_stack: List[EntityNode] = []
        self._raw_tables: Dict[Type[Entity], RawTable] = {}

    @property
    def current_entity(self) -> EntityNode:
        return self._entities_stack[-1]

    def visit_field(self, field: FieldNode) -> None:
        raw_table = self._raw_tables[self.current_entity.type]
        raw_table.append_column(
            field.name,
            native_type_to_column.convert(field.type),
            primary_key=field.is_identity,
            nullable=field.nullable and not field.is_identity,
        )

    def visit_entity(self, entity: EntityNode) -> None:
        if self._entities_stack:  # nested, include foreign key
            identity_node = _identity_node(entity)
            raw_table = self._raw_tables[self.current_entity.type]
            raw_table.append_column(
                f"{entity.name}_{identity_node.name}",
                native_type_to_column.convert(identity_node.type),
                ForeignKey(f"{table_name(entity.type)}.{identity_node.name}"),
                nullable=entity.nullable,
            )
            raw_table.append_relationship(
                entity.name, RawRelationship(entity.type, uselist=False, nullable=entity.nullable)
            )
        self._open_table(entity)

    def leave_entity(self, entity: EntityNode) -> None:
        self._entities_stack.pop()
        if not self._entities_stack:
            self._materialize()

    def visit_list_of_entities(self, list_of_entities: ListOfEntitiesNode) -> None:
        self._open_table(list_of_entities)

    def leave_list_of_entities(self, list_of_entities: ListOfEntitiesNode) -> None:
        self._entities_stack.pop()
        parent = self.current_entity
        parent_identity = _identity_node(parent)
        column_name = list_of_entities.back_reference or (
            f"{inflection.underscore(parent.type.__name__)}_{parent_identity.name}"
        )
        self._raw_tables[list_of_entities.type].append_foreign_key(
            column_name,
            native_type_to_column.convert(parent_identity.type),
            f"{table_name(parent.type)}.{parent_identity.name}",
        )
        self._raw_tables[parent.type].append_relationship(
            list_of_entities.name,
            RawRelationship(list_of_entities.type, order_by=_identity_node(list_of_entities).name),
        )

    def _open_table(self, entity: EntityNode) -> None:
        if entity.type in self._raw_tables:
            raise NotImplementedError("Probably recursive, not supported")
        if entity.type in self._registry.entities_tables:
            raise NotImplementedError(f"{entity.type.__name__} is already mapped by another aggregate")
        self._entities_stack.append(entity)
        self._raw_tables[entity.type] = RawTable(name=table_name(entity.type))

    def _materialize(self) -> None:
        tables: Dict[Type[Entity], Table] = {
            entity_type: raw_table.materialize(self._registry.metadata)
            for entity_type, raw_table in self._raw_tables.items()
        }
        for entity_type, raw_table in self._raw_tables.items():
            properties = {
                name: raw_relationship.materialize(tables[raw_relationship.target])
                for name, raw_relationship in raw_table.relationships.items()
            }
            self._registry.mapper_registry.map_imperatively(entity_type, tables[entity_type], properties=properties)
            self._registry.entities_tables[entity_type] = tables[entity_type]
            identity = next(column.name for column in tables[entity_type].primary_key.columns)
            event.listen(entity_type, "before_insert", _release_blank_identity(identity))
            logger.info("Mapped %s onto table %s", entity_type.__name__, tables[entity_type].name)
