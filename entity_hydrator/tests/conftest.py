import typing

import pytest
from _pytest.config.argparsing import Parser

from entity_hydrator.repository import EntityLoader


def pytest_addoption(parser: Parser) -> None:
    parser.addoption("--sqlalchemy-url", action="store", default=None)


class InMemoryLoader(EntityLoader):
    def __init__(self) -> None:
        self.entities: typing.Dict[typing.Tuple[typing.Type, typing.Any], typing.Any] = {}
        self.loads: typing.List[typing.Tuple[typing.Type, typing.Any]] = []

    def add(self, entity: typing.Any) -> None:
        self.entities[(type(entity), entity.id)] = entity

    def load_by_id(self, entity_type: typing.Type, identity: typing.Any) -> typing.Any:
        self.loads.append((entity_type, identity))
        return self.entities.get((entity_type, identity))


@pytest.fixture()
def loader() -> InMemoryLoader:
    return InMemoryLoader()
