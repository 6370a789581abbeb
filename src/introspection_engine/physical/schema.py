"""
Physical Schema Module
Read-only description of a database as pulled by a schema describer
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..config import DatabaseType


class ColumnTypeFamily(str, Enum):
    """Broad category of a physical column type"""
    INT = "int"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    STRING = "string"
    DATETIME = "datetime"
    JSON = "json"
    UUID = "uuid"
    BINARY = "binary"
    ENUM = "enum"
    UNSUPPORTED = "unsupported"


class ColumnArity(str, Enum):
    """Whether a column holds one value, an optional value or an array"""
    REQUIRED = "required"
    NULLABLE = "nullable"
    LIST = "list"


class ForeignKeyAction(str, Enum):
    """Referential action taken on delete"""
    NO_ACTION = "no_action"
    RESTRICT = "restrict"
    CASCADE = "cascade"
    SET_NULL = "set_null"
    SET_DEFAULT = "set_default"


class IndexType(str, Enum):
    """Index kinds"""
    NORMAL = "normal"
    UNIQUE = "unique"


@dataclass
class ColumnType:
    """Physical column type"""
    data_type: str
    family: ColumnTypeFamily
    arity: ColumnArity = ColumnArity.NULLABLE
    enum_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data_type": self.data_type,
            "family": self.family.value,
            "arity": self.arity.value,
            "enum_name": self.enum_name,
        }


@dataclass
class Column:
    """Schema information for a database column"""
    name: str
    tpe: ColumnType
    default: Optional[str] = None
    auto_increment: bool = False

    @property
    def is_required(self) -> bool:
        return self.tpe.arity == ColumnArity.REQUIRED

    @property
    def nullable(self) -> bool:
        return self.tpe.arity == ColumnArity.NULLABLE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.tpe.to_dict(),
            "default": self.default,
            "auto_increment": self.auto_increment,
        }


@dataclass
class ForeignKey:
    """Foreign key relationship information"""
    columns: List[str]
    referenced_table: str
    referenced_columns: List[str]
    on_delete: ForeignKeyAction = ForeignKeyAction.NO_ACTION
    constraint_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "constraint_name": self.constraint_name,
            "columns": self.columns,
            "referenced_table": self.referenced_table,
            "referenced_columns": self.referenced_columns,
            "on_delete": self.on_delete.value,
        }


@dataclass
class Index:
    """Index information"""
    name: str
    columns: List[str]
    tpe: IndexType = IndexType.NORMAL

    def is_unique(self) -> bool:
        return self.tpe == IndexType.UNIQUE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "columns": self.columns,
            "type": self.tpe.value,
        }


@dataclass
class PrimaryKey:
    """Primary key of a table"""
    columns: List[str]
    sequence: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"columns": self.columns, "sequence": self.sequence}


@dataclass
class Table:
    """Schema information for a database table"""
    name: str
    columns: List[Column] = field(default_factory=list)
    foreign_keys: List[ForeignKey] = field(default_factory=list)
    indices: List[Index] = field(default_factory=list)
    primary_key: Optional[PrimaryKey] = None

    def get_column(self, name: str) -> Optional[Column]:
        """Get column by exact name"""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def primary_key_columns(self) -> List[str]:
        return list(self.primary_key.columns) if self.primary_key else []

    def is_column_unique(self, column_name: str) -> bool:
        """True when a single-column unique index sits exactly on the column"""
        return any(
            index.is_unique() and index.columns == [column_name]
            for index in self.indices
        )

    def is_foreign_key_column(self, column_name: str) -> bool:
        return any(column_name in fk.columns for fk in self.foreign_keys)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "columns": [c.to_dict() for c in self.columns],
            "foreign_keys": [fk.to_dict() for fk in self.foreign_keys],
            "indices": [idx.to_dict() for idx in self.indices],
            "primary_key": self.primary_key.to_dict() if self.primary_key else None,
        }


@dataclass
class DatabaseEnum:
    """Native enum type declared in the database"""
    name: str
    values: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "values": self.values}


@dataclass
class DatabaseSchema:
    """Complete physical schema snapshot"""
    tables: List[Table] = field(default_factory=list)
    enums: List[DatabaseEnum] = field(default_factory=list)
    database_name: str = ""
    database_type: DatabaseType = DatabaseType.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "database_name": self.database_name,
            "database_type": DatabaseType(self.database_type).value,
            "tables": [t.to_dict() for t in self.tables],
            "enums": [e.to_dict() for e in self.enums],
        }

    def get_table_names(self) -> List[str]:
        return [t.name for t in self.tables]

    def get_table(self, name: str) -> Optional[Table]:
        """Get table schema by exact name"""
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def get_enum(self, name: str) -> Optional[DatabaseEnum]:
        for enum in self.enums:
            if enum.name == name:
                return enum
        return None
