"""Explicit entity schema descriptors, reflected from SQLAlchemy models."""
from dataclasses import dataclass, field
from typing import Optional, Tuple, Type

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    DateTime,
    Float,
    Integer,
    Numeric,
    SmallInteger,
    String,
    inspect,
)

from models.base_model import BaseModel

# Checked in order, subclasses before their bases
_EDM_TYPES = (
    (Boolean, "Edm.Boolean"),
    (BigInteger, "Edm.Int64"),
    (SmallInteger, "Edm.Int16"),
    (Integer, "Edm.Int32"),
    (Float, "Edm.Double"),
    (Numeric, "Edm.Decimal"),
    (DateTime, "Edm.DateTimeOffset"),
    (Date, "Edm.Date"),
    (String, "Edm.String"),
)


def edm_type_for(sql_type) -> str:
    for type_class, edm_type in _EDM_TYPES:
        if isinstance(sql_type, type_class):
            return edm_type
    return "Edm.String"


@dataclass(frozen=True)
class PropertyDescriptor:
    name: str
    edm_type: str
    nullable: bool = True


@dataclass(frozen=True)
class EntitySchema:
    """
    Describes one entity set to the query translator and the metadata document.

    Attributes:
        namespace: CSDL namespace of the entity type
        entity_type: entity type name, e.g. "Category"
        entity_set: entity set name exposed in URLs, e.g. "Categories"
        model: SQLAlchemy model backing the entity set
        key: names of the key properties
        properties: structural properties in column order
        navigation_properties: names of relationships that $expand may follow
    """

    namespace: str
    entity_type: str
    entity_set: str
    model: Type[BaseModel]
    key: Tuple[str, ...]
    properties: Tuple[PropertyDescriptor, ...]
    navigation_properties: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def qualified_type(self) -> str:
        return f"{self.namespace}.{self.entity_type}"

    def get_property(self, name: str) -> Optional[PropertyDescriptor]:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    @classmethod
    def from_model(cls, model: Type[BaseModel], entity_set: str, namespace: str,
                   entity_type: Optional[str] = None) -> "EntitySchema":
        mapper = inspect(model)
        key = tuple(mapper.get_property_by_column(column).key for column in mapper.primary_key)
        properties = tuple(
            PropertyDescriptor(
                name=attr.key,
                edm_type=edm_type_for(attr.columns[0].type),
                nullable=bool(attr.columns[0].nullable) and attr.key not in key,
            )
            for attr in mapper.column_attrs
        )
        navigation = tuple(rel.key for rel in mapper.relationships)
        return cls(
            namespace=namespace,
            entity_type=entity_type or model.__tablename__,
            entity_set=entity_set,
            model=model,
            key=key,
            properties=properties,
            navigation_properties=navigation,
        )
