import logging
from typing import Any, Optional, Type

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from entity_hydrator.config import get_database_url
from entity_hydrator.entity import Entity
from entity_hydrator.repository import EntityType, IdentityType, Repository
from entity_hydrator.storages.sqlalchemy.constructing_mapping.visitor import MappingConstructingVisitor
from entity_hydrator.storages.sqlalchemy.registry import SaRegistry


logger = logging.getLogger(__name__)


def map_aggregate(registry: SaRegistry, entity_cls: Type[Entity]) -> None:
    """Register ``entity_cls`` and map it, with everything it contains, onto tables."""
    aet = registry.register(entity_cls)
    MappingConstructingVisitor(registry).traverse_from(aet.root)


def create_session_factory(registry: SaRegistry, url: Optional[str] = None) -> sessionmaker:
    engine = create_engine(url or get_database_url())
    registry.metadata.create_all(engine)
    logger.info("Created schema for %d tables", len(registry.metadata.tables))
    return sessionmaker(engine)


class SqlAlchemyRepository(Repository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def load_by_id(self, entity_type: Type[EntityType], identity: IdentityType) -> Optional[EntityType]:
        return self._session.get(entity_type, identity)

    def save(self, entity: Any) -> None:
        self._session.add(entity)

    def flush(self) -> None:
        self._session.flush()

    def refresh(self, entity: Any) -> None:
        self._session.refresh(entity)
