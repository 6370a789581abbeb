"""
Index Reconciler

Decides which physical indices survive as index declarations. Uniqueness
already carried by a relation or a scalar ``unique`` flag is not repeated.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from ..datamodel import IndexDefinition, IndexKind, Model
from ..physical import Index, Table
from ..utils import AmbiguousIndexError, get_logger

logger = get_logger(__name__)


class ColumnCount(str, Enum):
    SINGLE = "single"
    COMPOUND = "compound"


class IndexAction(str, Enum):
    """What happens to a physical index"""
    DROP = "drop"
    KEEP = "keep"
    KEEP_COMPOUND = "keep_compound"


# (foreign key on the same columns, column count, unique) -> action
INDEX_DECISIONS: Dict[Tuple[bool, ColumnCount, bool], IndexAction] = {
    (True, ColumnCount.SINGLE, True): IndexAction.DROP,
    (True, ColumnCount.COMPOUND, True): IndexAction.DROP,
    (True, ColumnCount.SINGLE, False): IndexAction.KEEP,
    (True, ColumnCount.COMPOUND, False): IndexAction.KEEP_COMPOUND,
    (False, ColumnCount.SINGLE, True): IndexAction.DROP,
    (False, ColumnCount.SINGLE, False): IndexAction.KEEP,
    (False, ColumnCount.COMPOUND, False): IndexAction.KEEP,
    (False, ColumnCount.COMPOUND, True): IndexAction.KEEP,
}


def columns_match(a: Sequence[str], b: Sequence[str]) -> bool:
    """Same columns regardless of order"""
    return len(a) == len(b) and all(c in b for c in a) and all(c in a for c in b)


def decide_index_action(table: Table, index: Index) -> IndexAction:
    fk_covers = any(columns_match(fk.columns, index.columns) for fk in table.foreign_keys)
    count = ColumnCount.SINGLE if len(index.columns) == 1 else ColumnCount.COMPOUND
    return INDEX_DECISIONS[(fk_covers, count, index.is_unique())]


def _index_kind(index: Index) -> IndexKind:
    return IndexKind.UNIQUE if index.is_unique() else IndexKind.NORMAL


def reconcile_index(model: Model, table: Table, index: Index) -> Optional[IndexDefinition]:
    """
    Translate one physical index against an already built model.

    Raises:
        AmbiguousIndexError: A compound foreign key index matches no relation field
    """
    action = decide_index_action(table, index)

    if action == IndexAction.DROP:
        logger.debug(f"Dropping index {index.name} on {table.name}: uniqueness implied")
        return None

    if action == IndexAction.KEEP:
        return IndexDefinition(name=index.name, fields=list(index.columns), tpe=_index_kind(index))

    for field in model.fields:
        if field.database_names and columns_match(field.database_names, index.columns):
            return IndexDefinition(name=index.name, fields=[field.name], tpe=_index_kind(index))

    raise AmbiguousIndexError(
        f"Compound index '{index.name}' on '{table.name}' matches no relation field",
        table_name=table.name,
        index_name=index.name,
        columns=index.columns,
    )


def reconcile_indices(model: Model, table: Table) -> List[IndexDefinition]:
    kept = []
    for index in table.indices:
        definition = reconcile_index(model, table, index)
        if definition is not None:
            kept.append(definition)
    return kept
