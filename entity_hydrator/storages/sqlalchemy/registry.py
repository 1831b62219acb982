from typing import Dict, Type

import attr
from sqlalchemy import MetaData, Table
from sqlalchemy.orm import registry as mapper_registry_factory

from entity_hydrator.entity import Entity
from entity_hydrator.registry import Registry


@attr.s(auto_attribs=True)
class SaRegistry(Registry):
    mapper_registry: mapper_registry_factory = attr.Factory(mapper_registry_factory)
    entities_tables: Dict[Type[Entity], Table] = attr.Factory(dict)

    @property
    def metadata(self) -> MetaData:
        return self.mapper_registry.metadata
