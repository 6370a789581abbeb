"""
Data Model Package
Output side of introspection: models, fields, relations, indices and enums
"""
from .models import (
    ScalarType,
    FieldKind,
    FieldArity,
    Cardinality,
    IndexKind,
    DefaultValue,
    RelationInfo,
    Field,
    IndexDefinition,
    Model,
    EnumValue,
    Enum,
    Datamodel,
)
from .names import camel_case, default_relation_name

__all__ = [
    "ScalarType",
    "FieldKind",
    "FieldArity",
    "Cardinality",
    "IndexKind",
    "DefaultValue",
    "RelationInfo",
    "Field",
    "IndexDefinition",
    "Model",
    "EnumValue",
    "Enum",
    "Datamodel",
    "camel_case",
    "default_relation_name",
]
