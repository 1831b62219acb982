import abc
import enum
import inspect
import types
import typing
from collections import deque

import attr
import inflection

from entity_hydrator.entity import Entity, Identity, back_reference_of


NONE_TYPE = type(None)
UNION_TYPES = (typing.Union, types.UnionType)
DEFAULT_IDENTIFIER = "id"


class FieldKind(enum.Enum):
    SCALAR = "scalar"
    TO_ONE_ENTITY = "to_one_entity"
    TO_MANY_ENTITY = "to_many_entity"


def _is_generic(field_type: typing.Type) -> bool:
    return typing.get_origin(field_type) is not None


def _get_wrapped_type(wrapped_type: typing.Type) -> typing.Type:
    return next(arg for arg in typing.get_args(wrapped_type) if arg is not NONE_TYPE)


def _is_field_nullable(field_type: typing.Type) -> bool:
    args = typing.get_args(field_type)
    return typing.get_origin(field_type) in UNION_TYPES and len(args) == 2 and NONE_TYPE in args


def _is_entity(field_type: typing.Type) -> bool:
    return inspect.isclass(field_type) and not _is_generic(field_type) and issubclass(field_type, Entity)


def _is_nested_entity(field_type: typing.Type) -> bool:
    return _is_entity(field_type) or _is_nullable_entity(field_type)


def _is_nullable_entity(field_type: typing.Type) -> bool:
    if _is_generic(field_type) and _is_field_nullable(field_type):
        return _is_entity(_get_wrapped_type(field_type))
    return False


def _is_identity(field_type: typing.Type) -> bool:
    return typing.get_origin(field_type) is Identity


def _is_list_of_entities(field_type: typing.Type) -> bool:
    return (
        _is_generic(field_type)
        and typing.get_origin(field_type) is list
        and _is_entity(_get_wrapped_type(field_type))
    )


class Visitor:
    def traverse_from(self, node: "Node") -> None:
        node.accept(self)
        for child in node.children:
            self.traverse_from(child)
        node.farewell(self)

    def visit_field(self, field: "FieldNode") -> None:
        pass

    def leave_field(self, field: "FieldNode") -> None:
        pass

    def visit_entity(self, entity: "EntityNode") -> None:
        pass

    def leave_entity(self, entity: "EntityNode") -> None:
        pass

    def visit_list_of_entities(self, list_of_entities: "ListOfEntitiesNode") -> None:
        pass

    def leave_list_of_entities(self, list_of_entities: "ListOfEntitiesNode") -> None:
        pass


class NodeMeta(abc.ABCMeta):
    def __new__(mcs, name: str, bases: tuple, namespace: dict) -> typing.Type:
        cls = super().__new__(mcs, name, bases, namespace)
        return attr.s(auto_attribs=True)(cls)


class Node(metaclass=NodeMeta):
    """Descriptor of one field of an entity, or of the aggregate root itself."""

    kind: typing.ClassVar[FieldKind]

    name: str
    type: typing.Type
    nullable: bool = False
    children: typing.List["Node"] = attr.Factory(list)

    @abc.abstractmethod
    def accept(self, visitor: Visitor) -> None:
        pass

    @abc.abstractmethod
    def farewell(self, visitor: Visitor) -> None:
        pass


class FieldNode(Node):
    kind = FieldKind.SCALAR

    is_identity: bool = False

    def accept(self, visitor: Visitor) -> None:
        visitor.visit_field(self)

    def farewell(self, visitor: Visitor) -> None:
        visitor.leave_field(self)


class EntityNode(Node):
    kind = FieldKind.TO_ONE_ENTITY

    identifier: typing.Optional[str] = None

    def accept(self, visitor: Visitor) -> None:
        visitor.visit_entity(self)

    def farewell(self, visitor: Visitor) -> None:
        visitor.leave_entity(self)

    @property
    def identity_node(self) -> typing.Optional[FieldNode]:
        return next((node for node in self.children if node.name == self.identifier), None)


class ListOfEntitiesNode(EntityNode):
    kind = FieldKind.TO_MANY_ENTITY

    back_reference: typing.Optional[str] = None

    def accept(self, visitor: Visitor) -> None:
        visitor.visit_list_of_entities(self)

    def farewell(self, visitor: Visitor) -> None:
        visitor.leave_list_of_entities(self)


@attr.s(auto_attribs=True)
class AbstractEntityTree:
    root: EntityNode

    def __iter__(self) -> typing.Generator[Node, None, None]:
        def iterate_dfs() -> typing.Generator[Node, None, None]:
            nodes_left: typing.Deque[Node] = deque([self.root])

            while nodes_left:
                current = nodes_left.pop()
                yield current
                nodes_left.extend(current.children[::-1])

        return iterate_dfs()


def _identity_names(fields: typing.Sequence[attr.Attribute]) -> typing.List[str]:
    marked = [field.name for field in fields if Identity.is_identity(field)]
    if marked:
        return marked
    return [field.name for field in fields if field.name == DEFAULT_IDENTIFIER]


def build(root: typing.Type[Entity]) -> AbstractEntityTree:
    in_progress: typing.List[typing.Type] = []

    def parse_node(current_root: typing.Type, name: str, back_reference: typing.Optional[str] = None) -> EntityNode:
        node_name = name
        is_list = False
        if _is_list_of_entities(current_root):
            node_nullable = False
            node_type = _get_wrapped_type(current_root)
            is_list = True
        elif _is_nullable_entity(current_root):
            node_nullable = True
            node_type = _get_wrapped_type(current_root)
        else:
            node_nullable = False
            node_type = current_root

        if node_type in in_progress:
            raise NotImplementedError(f"Probably recursive, not supported - {node_type}")
        in_progress.append(node_type)

        attr.resolve_types(node_type)
        fields = attr.fields(node_type)
        identities = _identity_names(fields)
        node_children: typing.List[Node] = []

        for field in fields:
            field_type = field.type
            field_name = field.name

            if _is_nested_entity(field_type) or _is_list_of_entities(field_type):
                node_children.append(parse_node(field_type, field_name, back_reference_of(field)))
                continue

            field_nullable = False

            if _is_generic(field_type):
                if _is_identity(field_type):
                    field_type = _get_wrapped_type(field_type)
                elif _is_field_nullable(field_type):
                    field_type = _get_wrapped_type(field_type)
                    field_nullable = True
                else:
                    raise TypeError(f"Unhandled Generic type - {field_type}")

            node_children.append(FieldNode(field_name, field_type, field_nullable, [], field_name in identities))

        in_progress.pop()
        identifier = identities[0] if identities else None

        if back_reference is not None and not any(
            isinstance(child, FieldNode) and child.name == back_reference and not child.is_identity
            for child in node_children
        ):
            raise TypeError(f"Back reference {back_reference!r} is not a field of {node_type.__name__}")

        if is_list:
            return ListOfEntitiesNode(node_name, node_type, node_nullable, node_children, identifier, back_reference)
        return EntityNode(node_name, node_type, node_nullable, node_children, identifier)

    root_node = parse_node(root, inflection.underscore(root.__name__))
    return AbstractEntityTree(root_node)
