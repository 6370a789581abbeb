"""
Many-to-Many Synthesizer

Implicit join tables are not modeled; each one instead contributes a list
field to both of the models it joins.
"""
from __future__ import annotations

from typing import List, Optional

from ..config import IntrospectionConfig, get_config
from ..datamodel import Field, FieldArity, FieldKind, RelationInfo
from ..physical import DatabaseSchema, ForeignKey, Table
from ..utils import InvariantViolationError
from .backrelations import PendingField
from .filters import is_excluded, is_join_table, join_foreign_keys


def calculate_many_to_many_field(foreign_key: ForeignKey, relation_name: str, is_self_relation: bool) -> Field:
    """The list field pointing at the model behind ``foreign_key``"""
    target = foreign_key.referenced_table
    if is_self_relation:
        name = f"{target}_{foreign_key.columns[0]}"
    else:
        name = target

    return Field(
        name=name,
        kind=FieldKind.RELATION,
        type_name=target,
        arity=FieldArity.LIST,
        relation_info=RelationInfo(
            to=target,
            name=relation_name,
            to_fields=list(foreign_key.referenced_columns),
            on_delete=foreign_key.on_delete,
        ),
    )


def _check_joined_model(
    schema: DatabaseSchema,
    table: Table,
    foreign_key: ForeignKey,
    config: IntrospectionConfig,
) -> None:
    referenced = schema.get_table(foreign_key.referenced_table)
    if referenced is None or is_excluded(referenced, config):
        raise InvariantViolationError(
            f"Join table '{table.name}' references '{foreign_key.referenced_table}', "
            f"which is not a model",
            table_name=table.name,
            columns=foreign_key.columns,
        )


def synthesize_many_to_many(
    schema: DatabaseSchema,
    config: Optional[IntrospectionConfig] = None,
) -> List[PendingField]:
    config = config or get_config()
    pending = []

    for table in schema.tables:
        if not is_join_table(table, config):
            continue

        first, second = join_foreign_keys(table)
        for foreign_key in (first, second):
            _check_joined_model(schema, table, foreign_key, config)

        relation_name = table.name[len(config.join_table_prefix):]
        is_self_relation = first.referenced_table == second.referenced_table

        pending.append(PendingField(
            second.referenced_table,
            calculate_many_to_many_field(first, relation_name, is_self_relation),
        ))
        pending.append(PendingField(
            first.referenced_table,
            calculate_many_to_many_field(second, relation_name, is_self_relation),
        ))

    return pending
