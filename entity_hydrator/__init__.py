from entity_hydrator.entity import Entity, Identity, children
from entity_hydrator.exceptions import (
    EntityNotFoundError,
    HydrationError,
    MalformedPayloadError,
    MissingIdentifierFieldError,
    TypeMismatchError,
    UnknownTypeError,
)
from entity_hydrator.hydrator import Hydrator
from entity_hydrator.registry import Registry
from entity_hydrator.repository import EntityLoader, Repository
