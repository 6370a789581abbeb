"""
Schema Snapshot Loader

Reads a physical schema snapshot from a YAML/JSON document.

Expected document format:
```yaml
database:
  name: blog
  type: postgresql

tables:
  - name: User
    columns:
      - name: id
        type: integer
        nullable: false
        auto_increment: true
      - name: tags
        type: text[]
    primary_key: [id]

  - name: Post
    columns:
      - name: id
        type: integer
        nullable: false
      - name: user_id
        type: integer
    primary_key: [id]
    foreign_keys:
      - columns: [user_id]
        referenced_table: User
        referenced_columns: [id]
        on_delete: cascade
    indices:
      - name: post_user_unique
        columns: [user_id]
        unique: true

enums:
  - name: color
    values: [red, green]
```

A column's ``family`` may be given explicitly; otherwise it is derived from
``type``. A ``[]`` suffix on the type (or ``arity: list``) marks an array column.
"""
from __future__ import annotations

import json
import os
import re
from typing import Any, Dict, List, Optional, Set, Union

import yaml

from ..config import DatabaseType
from ..utils import SchemaLoadError, get_logger
from .schema import (
    Column,
    ColumnArity,
    ColumnType,
    ColumnTypeFamily,
    DatabaseEnum,
    DatabaseSchema,
    ForeignKey,
    ForeignKeyAction,
    Index,
    IndexType,
    PrimaryKey,
    Table,
)

logger = get_logger(__name__)


_TYPE_FAMILIES = {
    "int": ColumnTypeFamily.INT,
    "int2": ColumnTypeFamily.INT,
    "int4": ColumnTypeFamily.INT,
    "int8": ColumnTypeFamily.INT,
    "integer": ColumnTypeFamily.INT,
    "smallint": ColumnTypeFamily.INT,
    "bigint": ColumnTypeFamily.INT,
    "tinyint": ColumnTypeFamily.INT,
    "mediumint": ColumnTypeFamily.INT,
    "serial": ColumnTypeFamily.INT,
    "bigserial": ColumnTypeFamily.INT,
    "smallserial": ColumnTypeFamily.INT,
    "real": ColumnTypeFamily.FLOAT,
    "float": ColumnTypeFamily.FLOAT,
    "float4": ColumnTypeFamily.FLOAT,
    "float8": ColumnTypeFamily.FLOAT,
    "double": ColumnTypeFamily.FLOAT,
    "double precision": ColumnTypeFamily.FLOAT,
    "numeric": ColumnTypeFamily.DECIMAL,
    "decimal": ColumnTypeFamily.DECIMAL,
    "money": ColumnTypeFamily.DECIMAL,
    "boolean": ColumnTypeFamily.BOOLEAN,
    "bool": ColumnTypeFamily.BOOLEAN,
    "text": ColumnTypeFamily.STRING,
    "varchar": ColumnTypeFamily.STRING,
    "character varying": ColumnTypeFamily.STRING,
    "char": ColumnTypeFamily.STRING,
    "character": ColumnTypeFamily.STRING,
    "bpchar": ColumnTypeFamily.STRING,
    "citext": ColumnTypeFamily.STRING,
    "mediumtext": ColumnTypeFamily.STRING,
    "longtext": ColumnTypeFamily.STRING,
    "date": ColumnTypeFamily.DATETIME,
    "datetime": ColumnTypeFamily.DATETIME,
    "timestamp": ColumnTypeFamily.DATETIME,
    "timestamptz": ColumnTypeFamily.DATETIME,
    "timestamp without time zone": ColumnTypeFamily.DATETIME,
    "timestamp with time zone": ColumnTypeFamily.DATETIME,
    "time": ColumnTypeFamily.DATETIME,
    "json": ColumnTypeFamily.JSON,
    "jsonb": ColumnTypeFamily.JSON,
    "uuid": ColumnTypeFamily.UUID,
    "bytea": ColumnTypeFamily.BINARY,
    "blob": ColumnTypeFamily.BINARY,
    "binary": ColumnTypeFamily.BINARY,
    "varbinary": ColumnTypeFamily.BINARY,
}

_ON_DELETE_ALIASES = {
    "no action": ForeignKeyAction.NO_ACTION,
    "restrict": ForeignKeyAction.RESTRICT,
    "cascade": ForeignKeyAction.CASCADE,
    "set null": ForeignKeyAction.SET_NULL,
    "set default": ForeignKeyAction.SET_DEFAULT,
}


def infer_type_family(data_type: str, enum_names: Optional[Set[str]] = None) -> ColumnTypeFamily:
    """Map a raw physical type name onto its column type family"""
    base = data_type.strip()
    if base.endswith("[]"):
        base = base[:-2]
    if enum_names and base in enum_names:
        return ColumnTypeFamily.ENUM

    base = re.sub(r"\(.*\)", "", base).strip().lower()
    return _TYPE_FAMILIES.get(base, ColumnTypeFamily.UNSUPPORTED)


def load_schema_snapshot(source: Union[str, Dict[str, Any]]) -> DatabaseSchema:
    """
    Load a physical schema snapshot

    Args:
        source: Path to a YAML/JSON file, or an already parsed document

    Returns:
        DatabaseSchema snapshot

    Raises:
        SchemaLoadError: If the document is missing or malformed
    """
    if isinstance(source, dict):
        return parse_schema_snapshot(source)

    if not os.path.exists(source):
        raise SchemaLoadError(f"Schema snapshot not found: {source}", source=source)

    try:
        with open(source, "r", encoding="utf-8") as f:
            if source.endswith(".yaml") or source.endswith(".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise SchemaLoadError(
            f"Could not parse schema snapshot: {e}",
            source=source,
            original_error=e,
        ) from e

    if not isinstance(data, dict):
        raise SchemaLoadError("Schema snapshot must parse to an object at root", source=source)

    logger.debug(f"Loaded schema snapshot from {source}")
    return parse_schema_snapshot(data, source=source)


def parse_schema_snapshot(data: Dict[str, Any], source: Optional[str] = None) -> DatabaseSchema:
    """Parse a snapshot document into a DatabaseSchema"""
    db_info = data.get("database", {}) or {}

    try:
        database_type = DatabaseType(db_info.get("type", "unknown"))
    except ValueError as e:
        raise SchemaLoadError(
            f"Unknown database type: {db_info.get('type')}",
            source=source,
            original_error=e,
        ) from e

    enums = [_parse_enum(item) for item in data.get("enums", []) or []]
    enum_names = {e.name for e in enums}

    tables = [_parse_table(item, enum_names, source) for item in data.get("tables", []) or []]

    schema = DatabaseSchema(
        tables=tables,
        enums=enums,
        database_name=db_info.get("name", ""),
        database_type=database_type,
    )
    _validate_references(schema, source)
    return schema


def _parse_enum(data: Dict[str, Any]) -> DatabaseEnum:
    return DatabaseEnum(name=data["name"], values=[str(v) for v in data.get("values", [])])


def _parse_table(data: Dict[str, Any], enum_names: Set[str], source: Optional[str]) -> Table:
    """Parse table definition"""
    if "name" not in data:
        raise SchemaLoadError("Table entry without a name", source=source)

    name = data["name"]
    table = Table(
        name=name,
        columns=[_parse_column(col, enum_names, name, source) for col in data.get("columns", [])],
    )

    pk_columns = data.get("primary_key")
    if isinstance(pk_columns, dict):
        table.primary_key = PrimaryKey(
            columns=list(pk_columns.get("columns", [])),
            sequence=pk_columns.get("sequence"),
        )
    elif pk_columns:
        table.primary_key = PrimaryKey(columns=list(pk_columns))

    for fk_data in data.get("foreign_keys", []) or []:
        table.foreign_keys.append(_parse_foreign_key(fk_data, name, source))

    for idx_data in data.get("indices", data.get("indexes", [])) or []:
        table.indices.append(
            Index(
                name=idx_data.get("name", f"{name}_{'_'.join(idx_data['columns'])}_idx"),
                columns=list(idx_data["columns"]),
                tpe=IndexType.UNIQUE if idx_data.get("unique", False) else IndexType.NORMAL,
            )
        )

    return table


def _parse_column(
    data: Dict[str, Any],
    enum_names: Set[str],
    table_name: str,
    source: Optional[str],
) -> Column:
    """Parse column definition"""
    if "name" not in data:
        raise SchemaLoadError("Column entry without a name", source=source, table_name=table_name)

    data_type = str(data.get("type", data.get("data_type", "unknown")))

    if "family" in data:
        try:
            family = ColumnTypeFamily(data["family"])
        except ValueError as e:
            raise SchemaLoadError(
                f"Unknown column type family: {data['family']}",
                source=source,
                table_name=table_name,
                original_error=e,
            ) from e
    else:
        family = infer_type_family(data_type, enum_names)

    if "arity" in data:
        arity = ColumnArity(data["arity"])
    elif data_type.endswith("[]"):
        arity = ColumnArity.LIST
    elif data.get("nullable", True):
        arity = ColumnArity.NULLABLE
    else:
        arity = ColumnArity.REQUIRED

    enum_name = None
    if family == ColumnTypeFamily.ENUM:
        enum_name = data.get("enum", data_type[:-2] if data_type.endswith("[]") else data_type)

    default = data.get("default")
    return Column(
        name=data["name"],
        tpe=ColumnType(data_type=data_type, family=family, arity=arity, enum_name=enum_name),
        default=str(default) if default is not None else None,
        auto_increment=bool(data.get("auto_increment", False)),
    )


def _parse_foreign_key(data: Dict[str, Any], table_name: str, source: Optional[str]) -> ForeignKey:
    references = data.get("references", {}) or {}
    referenced_table = data.get("referenced_table", references.get("table"))
    referenced_columns = data.get("referenced_columns", references.get("columns", []))

    if not referenced_table:
        raise SchemaLoadError(
            "Foreign key without a referenced table",
            source=source,
            table_name=table_name,
        )

    on_delete_raw = str(data.get("on_delete", "no_action")).lower()
    on_delete = _ON_DELETE_ALIASES.get(on_delete_raw)
    if on_delete is None:
        try:
            on_delete = ForeignKeyAction(on_delete_raw)
        except ValueError as e:
            raise SchemaLoadError(
                f"Unknown on_delete action: {on_delete_raw}",
                source=source,
                table_name=table_name,
                original_error=e,
            ) from e

    return ForeignKey(
        columns=list(data.get("columns", [])),
        referenced_table=referenced_table,
        referenced_columns=list(referenced_columns),
        on_delete=on_delete,
        constraint_name=data.get("name"),
    )


def _validate_references(schema: DatabaseSchema, source: Optional[str]) -> None:
    """Key and index column lists must name existing columns"""
    for table in schema.tables:
        column_names = {c.name for c in table.columns}

        def check(columns: List[str], what: str) -> None:
            missing = [c for c in columns if c not in column_names]
            if missing:
                raise SchemaLoadError(
                    f"{what} on table '{table.name}' names unknown columns: {', '.join(missing)}",
                    source=source,
                    table_name=table.name,
                )

        check(table.primary_key_columns(), "Primary key")
        for index in table.indices:
            check(index.columns, f"Index '{index.name}'")
        for fk in table.foreign_keys:
            check(fk.columns, "Foreign key")
            if not fk.columns or len(fk.columns) != len(fk.referenced_columns):
                raise SchemaLoadError(
                    f"Foreign key on table '{table.name}' pairs {len(fk.columns)} columns "
                    f"with {len(fk.referenced_columns)} referenced columns",
                    source=source,
                    table_name=table.name,
                )
