from typing import Generator

import pytest
from _pytest.fixtures import SubRequest
from sqlalchemy.engine import Engine, create_engine

from entity_hydrator.config import get_database_url


@pytest.fixture()
def engine(request: SubRequest) -> Generator[Engine, None, None]:
    connection_url = request.config.getoption("--sqlalchemy-url") or get_database_url()
    engine = create_engine(connection_url)
    yield engine
    engine.dispose()
