from typing import Any, Dict, Optional, Type

import attr
from sqlalchemy import Column, ForeignKey, MetaData, Table
from sqlalchemy.orm import Relationship, relationship


@attr.s(auto_attribs=True)
class RawRelationship:
    target: Type
    uselist: bool = True
    nullable: bool = True
    order_by: Optional[str] = None

    def materialize(self, target_table: Table) -> Relationship:
        if not self.uselist:
            return relationship(self.target, uselist=False, innerjoin=not self.nullable)
        return relationship(self.target, order_by=target_table.c[self.order_by] if self.order_by else False)


@attr.s(auto_attribs=True)
class RawTable:
    name: str
    columns: Dict[str, Column] = attr.Factory(dict)
    relationships: Dict[str, RawRelationship] = attr.Factory(dict)

    def append_column(self, name: str, column_type: Any, *args: Any, **kwargs: Any) -> None:
        self.columns[name] = Column(name, column_type, *args, **kwargs)

    def append_foreign_key(self, name: str, column_type: Any, target: str) -> None:
        # replaces a plain column declared by the entity itself
        self.columns[name] = Column(name, column_type, ForeignKey(target), nullable=True)

    def append_relationship(self, name: str, raw_relationship: RawRelationship) -> None:
        self.relationships[name] = raw_relationship

    def materialize(self, metadata: MetaData) -> Table:
        return Table(self.name, metadata, *self.columns.values())
