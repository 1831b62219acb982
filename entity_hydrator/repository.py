import abc
import typing


EntityType = typing.TypeVar("EntityType")
IdentityType = typing.TypeVar("IdentityType")


class EntityLoader(abc.ABC):
    @abc.abstractmethod
    def load_by_id(self, entity_type: typing.Type[EntityType], identity: IdentityType) -> typing.Optional[EntityType]:
        """Return the stored entity, or ``None`` if there is none."""


class Repository(EntityLoader):
    @abc.abstractmethod
    def save(self, entity: typing.Any) -> None:
        pass

    @abc.abstractmethod
    def flush(self) -> None:
        pass

    @abc.abstractmethod
    def refresh(self, entity: typing.Any) -> None:
        pass
