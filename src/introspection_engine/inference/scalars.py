"""
Scalar Field Builder

Turns a column that takes part in no foreign key into a scalar or enum
field, mapping its physical type family and parsing its default expression.
"""
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..datamodel import DefaultValue, Field, FieldArity, FieldKind, ScalarType
from ..physical import Column, ColumnArity, ColumnTypeFamily, DatabaseSchema, Table
from ..utils import get_logger

logger = get_logger(__name__)


_SCALAR_TYPES = {
    ColumnTypeFamily.INT: ScalarType.INT,
    ColumnTypeFamily.FLOAT: ScalarType.FLOAT,
    ColumnTypeFamily.DECIMAL: ScalarType.DECIMAL,
    ColumnTypeFamily.BOOLEAN: ScalarType.BOOLEAN,
    ColumnTypeFamily.STRING: ScalarType.STRING,
    ColumnTypeFamily.UUID: ScalarType.STRING,
    ColumnTypeFamily.DATETIME: ScalarType.DATETIME,
    ColumnTypeFamily.JSON: ScalarType.JSON,
}

_NOW_FUNCTIONS = {"now()", "current_timestamp", "current_timestamp()", "localtimestamp", "transaction_timestamp()"}
_UUID_FUNCTIONS = {"gen_random_uuid()", "uuid_generate_v4()", "uuid()"}

# Postgres-style casts: 'value'::text or 42::integer
_CAST_SUFFIX = re.compile(r"::[\w\s\"\[\]]+$")
_SEQUENCE_DEFAULT = re.compile(r"^nextval\(", re.IGNORECASE)


def calculate_scalar_field(schema: DatabaseSchema, table: Table, column: Column) -> Field:
    """Build the field for a non-foreign-key column"""
    family = column.tpe.family

    if family == ColumnTypeFamily.ENUM:
        kind = FieldKind.ENUM
        type_name = column.tpe.enum_name or column.tpe.data_type
    elif family in _SCALAR_TYPES:
        kind = FieldKind.SCALAR
        type_name = _SCALAR_TYPES[family].value
    else:
        kind = FieldKind.UNSUPPORTED
        type_name = column.tpe.data_type

    is_id = table.primary_key_columns() == [column.name]

    return Field(
        name=column.name,
        kind=kind,
        type_name=type_name,
        arity=calculate_field_arity(column),
        default_value=calculate_default(schema, table, column),
        is_unique=table.is_column_unique(column.name) and not is_id,
        is_id=is_id,
    )


def calculate_field_arity(column: Column) -> FieldArity:
    if column.tpe.arity == ColumnArity.LIST:
        return FieldArity.LIST
    if column.auto_increment and column.tpe.family == ColumnTypeFamily.INT:
        return FieldArity.REQUIRED
    if column.tpe.arity == ColumnArity.REQUIRED:
        return FieldArity.REQUIRED
    return FieldArity.OPTIONAL


def _is_sequence_backed(table: Table, column: Column) -> bool:
    if column.auto_increment:
        return True
    if column.default and _SEQUENCE_DEFAULT.match(column.default.strip()):
        return True
    return (
        table.primary_key is not None
        and table.primary_key.sequence is not None
        and table.primary_key.columns == [column.name]
    )


def calculate_default(schema: DatabaseSchema, table: Table, column: Column) -> Optional[DefaultValue]:
    """
    Translate a column default into the data model's default.

    List columns never carry a default. Int columns backed by a sequence
    become ``autoincrement()``; expressions that cannot be read as a literal
    of the column's family become ``dbgenerated()``.
    """
    if column.tpe.arity == ColumnArity.LIST:
        return None

    family = column.tpe.family
    if family == ColumnTypeFamily.INT and _is_sequence_backed(table, column):
        return DefaultValue.generated("autoincrement")

    if column.default is None:
        return None

    raw = column.default.strip()
    if raw.lower() == "null":
        return None

    value = _parse_default(schema, column, raw)
    if value is None:
        logger.debug(f"Default '{raw}' on {table.name}.{column.name} kept as database generated")
        return DefaultValue.generated("dbgenerated")
    return value


def _strip_cast(raw: str) -> str:
    return _CAST_SUFFIX.sub("", raw).strip()


def _unquote(raw: str) -> Optional[str]:
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ("'", '"'):
        return raw[1:-1].replace("''", "'")
    return None


def _parse_default(schema: DatabaseSchema, column: Column, raw: str) -> Optional[DefaultValue]:
    family = column.tpe.family
    text = _strip_cast(raw)
    quoted = _unquote(text)
    literal = quoted if quoted is not None else text

    if family == ColumnTypeFamily.BOOLEAN:
        lowered = literal.lower()
        if lowered in ("true", "t", "1"):
            return DefaultValue.literal(True)
        if lowered in ("false", "f", "0"):
            return DefaultValue.literal(False)
        return None

    if family == ColumnTypeFamily.INT:
        return _numeric(literal, int)

    if family == ColumnTypeFamily.FLOAT:
        return _numeric(literal, float)

    if family == ColumnTypeFamily.DECIMAL:
        try:
            return DefaultValue.literal(Decimal(literal))
        except InvalidOperation:
            return None

    if family == ColumnTypeFamily.DATETIME:
        if text.lower() in _NOW_FUNCTIONS:
            return DefaultValue.generated("now")
        return DefaultValue.literal(quoted) if quoted is not None else None

    if family == ColumnTypeFamily.UUID:
        if text.lower() in _UUID_FUNCTIONS:
            return DefaultValue.generated("uuid")
        return DefaultValue.literal(quoted) if quoted is not None else None

    if family == ColumnTypeFamily.STRING:
        return DefaultValue.literal(quoted) if quoted is not None else None

    if family == ColumnTypeFamily.ENUM:
        enum = schema.get_enum(column.tpe.enum_name or "")
        if enum is not None and literal in enum.values:
            return DefaultValue.literal(literal)
        return None

    return None


def _numeric(literal: str, cast: Any) -> Optional[DefaultValue]:
    # strip wrapping parentheses, e.g. ('-1')
    while literal.startswith("(") and literal.endswith(")"):
        literal = literal[1:-1].strip()
    unquoted = _unquote(literal)
    if unquoted is not None:
        literal = unquoted
    try:
        return DefaultValue.literal(cast(literal))
    except ValueError:
        return None
