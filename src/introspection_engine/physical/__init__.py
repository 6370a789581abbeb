"""
Physical Schema Package
Input side of introspection: tables, columns, keys, indices and enums
"""
from .schema import (
    ColumnTypeFamily,
    ColumnArity,
    ForeignKeyAction,
    IndexType,
    ColumnType,
    Column,
    ForeignKey,
    Index,
    PrimaryKey,
    Table,
    DatabaseEnum,
    DatabaseSchema,
)
from .describer import SchemaDescriber, SnapshotDescriber
from .loader import infer_type_family, load_schema_snapshot, parse_schema_snapshot

__all__ = [
    "ColumnTypeFamily",
    "ColumnArity",
    "ForeignKeyAction",
    "IndexType",
    "ColumnType",
    "Column",
    "ForeignKey",
    "Index",
    "PrimaryKey",
    "Table",
    "DatabaseEnum",
    "DatabaseSchema",
    "SchemaDescriber",
    "SnapshotDescriber",
    "infer_type_family",
    "load_schema_snapshot",
    "parse_schema_snapshot",
]
