import abc
import typing

import attr


T = typing.TypeVar("T")

BACK_REFERENCE = "entity_hydrator.back_reference"


class Identity(typing.Generic[T]):
    @classmethod
    def is_identity(cls, field: attr.Attribute) -> bool:
        return typing.get_origin(field.type) is cls


class EntityMeta(abc.ABCMeta):
    def __new__(mcs, name: str, bases: tuple, namespace: dict):
        cls = super().__new__(mcs, name, bases, namespace)
        if name == "Entity":
            return cls
        return attr.s(auto_attribs=True)(cls)


class Entity(metaclass=EntityMeta):
    pass


def children(back_reference: typing.Optional[str] = None) -> typing.Any:
    """Declare a to-many collection of child entities.

    ``back_reference`` names the field of the child that receives the identifier
    of its owner whenever a new child is appended during hydration.
    """
    return attr.ib(factory=list, metadata={BACK_REFERENCE: back_reference})


def back_reference_of(field: attr.Attribute) -> typing.Optional[str]:
    return field.metadata.get(BACK_REFERENCE)
