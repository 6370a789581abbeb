"""
Identity Filters

Decide which physical tables become models. Migration bookkeeping tables
are dropped outright; tables following one of the two legacy implicit
join-table conventions are consumed by many-to-many synthesis instead.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from ..config import IntrospectionConfig, get_config
from ..physical import ForeignKey, IndexType, Table


class TableRole(str, Enum):
    """What a physical table turns into"""
    MIGRATION = "migration"
    JOIN_TABLE_V1 = "join_table_v1"
    JOIN_TABLE_V0 = "join_table_v0"
    MODEL = "model"


def is_migration_table(table: Table, config: IntrospectionConfig) -> bool:
    return table.name in config.migration_table_names


def _has_index(table: Table, columns, tpe: IndexType) -> bool:
    return any(index.tpe == tpe and index.columns == columns for index in table.indices)


def _join_columns(table: Table, config: IntrospectionConfig) -> Optional[tuple]:
    """
    Check the conditions both join table conventions share.

    Returns the (A, B) foreign keys when the table qualifies, else None.
    """
    if not table.name.startswith(config.join_table_prefix):
        return None
    if len(table.foreign_keys) != 2:
        return None

    first, second = table.foreign_keys
    if len(first.columns) != 1 or len(second.columns) != 1:
        return None

    first_col = first.columns[0].lower()
    second_col = second.columns[0].lower()

    # A must point at the model that sorts first, whichever order the FKs come in
    if first_col == "a" and second_col == "b" and first.referenced_table <= second.referenced_table:
        fk_a, fk_b = first, second
    elif first_col == "b" and second_col == "a" and second.referenced_table <= first.referenced_table:
        fk_a, fk_b = second, first
    else:
        return None

    col_a, col_b = fk_a.columns[0], fk_b.columns[0]
    if not _has_index(table, [col_a, col_b], IndexType.UNIQUE):
        return None
    if not _has_index(table, [col_b], IndexType.NORMAL):
        return None

    return fk_a, fk_b


def is_join_table_v1(table: Table, config: IntrospectionConfig) -> bool:
    """Current convention: only the two join columns, no primary key"""
    return (
        _join_columns(table, config) is not None
        and len(table.columns) == 2
        and table.primary_key is None
    )


def is_join_table_v0(table: Table, config: IntrospectionConfig) -> bool:
    """Older convention: the join columns plus a surrogate ``id`` primary key"""
    return (
        _join_columns(table, config) is not None
        and len(table.columns) == 3
        and table.primary_key_columns() == ["id"]
    )


def classify_table(table: Table, config: Optional[IntrospectionConfig] = None) -> TableRole:
    """Assign a role to a table, checking the rules in order"""
    config = config or get_config()

    if is_migration_table(table, config):
        return TableRole.MIGRATION
    if is_join_table_v1(table, config):
        return TableRole.JOIN_TABLE_V1
    if is_join_table_v0(table, config):
        return TableRole.JOIN_TABLE_V0
    return TableRole.MODEL


def is_excluded(table: Table, config: Optional[IntrospectionConfig] = None) -> bool:
    """True when the table must not be emitted as a model"""
    return classify_table(table, config) != TableRole.MODEL


def is_join_table(table: Table, config: Optional[IntrospectionConfig] = None) -> bool:
    return classify_table(table, config) in (TableRole.JOIN_TABLE_V1, TableRole.JOIN_TABLE_V0)


def join_foreign_keys(table: Table) -> tuple:
    """The two foreign keys of a join table in declaration order"""
    first: ForeignKey = table.foreign_keys[0]
    second: ForeignKey = table.foreign_keys[1]
    return first, second
