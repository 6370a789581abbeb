"""
Relation Field Builder

Builds the forward relation field for each foreign key: its relation name,
field name, arity and uniqueness.
"""
from __future__ import annotations

from typing import List, Optional, Set

from ..config import IntrospectionConfig, get_config
from ..datamodel import (
    Field,
    FieldArity,
    FieldKind,
    RelationInfo,
    camel_case,
    default_relation_name,
)
from ..physical import DatabaseSchema, ForeignKey, Table
from ..utils import InvariantViolationError
from .filters import is_join_table, join_foreign_keys


def _foreign_keys_to(table: Table, referenced_table: str) -> List[ForeignKey]:
    return [fk for fk in table.foreign_keys if fk.referenced_table == referenced_table]


def _claimed_by_join_table(
    schema: DatabaseSchema,
    table: Table,
    referenced_name: str,
    relation_name: str,
    config: IntrospectionConfig,
) -> bool:
    """A join table between the same two tables already uses the relation name"""
    pair = {table.name, referenced_name}
    for other in schema.tables:
        if not is_join_table(other, config):
            continue
        if other.name[len(config.join_table_prefix):] != relation_name:
            continue
        first, second = join_foreign_keys(other)
        if {first.referenced_table, second.referenced_table} == pair:
            return True
    return False


def calculate_relation_name(
    schema: DatabaseSchema,
    table: Table,
    foreign_key: ForeignKey,
    config: Optional[IntrospectionConfig] = None,
) -> str:
    """
    Name of the relation a foreign key forms.

    The default ``AToB`` name is used unless it could be confused with another
    relation between the same two tables. That is the case when this table
    has several foreign keys to the referenced table, or the referenced table
    points back at this one. Self-relations always fall in the second case.
    An implicit many-to-many join table between the same two tables whose
    name yields ``AToB`` also claims the default name.
    """
    referenced_name = foreign_key.referenced_table
    referenced_table = schema.get_table(referenced_name)
    if referenced_table is None:
        raise InvariantViolationError(
            f"Foreign key on '{table.name}' references unknown table '{referenced_name}'",
            table_name=table.name,
            columns=foreign_key.columns,
        )

    config = config or get_config()
    fks_to_other = _foreign_keys_to(table, referenced_name)
    fks_back = _foreign_keys_to(referenced_table, table.name)
    default_name = default_relation_name(table.name, referenced_name)

    if (
        len(fks_to_other) < 2
        and not fks_back
        and not _claimed_by_join_table(schema, table, referenced_name, default_name, config)
    ):
        return default_name

    columns = "_".join(foreign_key.columns)
    if table.name < referenced_name:
        return f"{table.name}_{columns}To{referenced_name}"
    return f"{referenced_name}To{table.name}_{columns}"


def _column_field_names(table: Table) -> Set[str]:
    """Names taken by scalar fields and single-column relation fields"""
    names = {c.name for c in table.columns if not table.is_foreign_key_column(c.name)}
    names.update(fk.columns[0] for fk in table.foreign_keys if len(fk.columns) == 1)
    return names


def calculate_relation_field_name(table: Table, foreign_key: ForeignKey) -> str:
    if len(foreign_key.columns) == 1:
        return foreign_key.columns[0]

    compound_to_same = [
        fk for fk in _foreign_keys_to(table, foreign_key.referenced_table)
        if len(fk.columns) > 1
    ]
    base = camel_case(foreign_key.referenced_table)
    if len(compound_to_same) > 1 or base in _column_field_names(table):
        return f"{base}_{'_'.join(foreign_key.columns)}"
    return base


def calculate_relation_field(
    schema: DatabaseSchema,
    table: Table,
    foreign_key: ForeignKey,
    config: Optional[IntrospectionConfig] = None,
) -> Field:
    """Build the to-one field that carries a foreign key"""
    columns = []
    for column_name in foreign_key.columns:
        column = table.get_column(column_name)
        if column is None:
            raise InvariantViolationError(
                f"Foreign key column '{column_name}' is missing from table '{table.name}'",
                table_name=table.name,
                columns=foreign_key.columns,
            )
        columns.append(column)

    relation_info = RelationInfo(
        to=foreign_key.referenced_table,
        name=calculate_relation_name(schema, table, foreign_key, config),
        fields=list(foreign_key.columns),
        to_fields=list(foreign_key.referenced_columns),
        on_delete=foreign_key.on_delete,
    )

    arity = FieldArity.REQUIRED if all(c.is_required for c in columns) else FieldArity.OPTIONAL
    fk_columns = set(foreign_key.columns)
    is_unique = any(
        index.is_unique() and len(index.columns) == len(fk_columns) and set(index.columns) == fk_columns
        for index in table.indices
    )

    return Field(
        name=calculate_relation_field_name(table, foreign_key),
        kind=FieldKind.RELATION,
        type_name=foreign_key.referenced_table,
        arity=arity,
        is_unique=is_unique,
        is_id=table.primary_key_columns() == list(foreign_key.columns),
        relation_info=relation_info,
        database_names=list(foreign_key.columns) if len(foreign_key.columns) > 1 else [],
    )
