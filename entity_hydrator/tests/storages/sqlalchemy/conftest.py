from typing import Generator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from entity_hydrator.storages.sqlalchemy import SqlAlchemyRepository
from entity_hydrator.storages.sqlalchemy.registry import SaRegistry


@pytest.fixture()
def session(sa_registry: SaRegistry, engine: Engine) -> Generator[Session, None, None]:
    sa_registry.metadata.drop_all(engine)
    sa_registry.metadata.create_all(engine)
    session_factory = sessionmaker(engine)
    session = session_factory()
    yield session
    session.close()
    sa_registry.metadata.drop_all(engine)


@pytest.fixture()
def repository(session: Session) -> SqlAlchemyRepository:
    return SqlAlchemyRepository(session)
