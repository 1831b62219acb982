from typing import Dict, Tuple, Type

import attr

from entity_hydrator.abstract_entity_tree import AbstractEntityTree, FieldKind, Node, build
from entity_hydrator.entity import Entity
from entity_hydrator.exceptions import MissingIdentifierFieldError, UnknownTypeError


@attr.s(auto_attribs=True)
class Registry:
    """Field descriptors of every entity type known to the hydrator.

    Trees are built once, when a type is registered; lookups afterwards are read-only.
    """

    entities_to_aets: Dict[Type[Entity], AbstractEntityTree] = attr.Factory(dict)

    def register(self, entity_type: Type[Entity]) -> AbstractEntityTree:
        if entity_type not in self.entities_to_aets:
            aet = build(entity_type)
            self.entities_to_aets[entity_type] = aet
            for node in aet.root.children:
                if node.kind is not FieldKind.SCALAR:
                    self.register(node.type)
        return self.entities_to_aets[entity_type]

    def tree_of(self, entity_type: Type[Entity]) -> AbstractEntityTree:
        try:
            return self.entities_to_aets[entity_type]
        except KeyError:
            raise UnknownTypeError(entity_type) from None

    def fields_of(self, entity_type: Type[Entity]) -> Tuple[Node, ...]:
        fields = tuple(self.tree_of(entity_type).root.children)
        for field in fields:
            if field.kind is not FieldKind.SCALAR and field.identifier is None:
                raise MissingIdentifierFieldError(field.type, field.name)
        return fields

    def identifier_of(self, entity_type: Type[Entity]) -> str:
        identifier = self.tree_of(entity_type).root.identifier
        if identifier is None:
            raise MissingIdentifierFieldError(entity_type)
        return identifier
