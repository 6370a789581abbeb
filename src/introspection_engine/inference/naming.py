"""
Name Deduplicator & Sanitizer

Both passes run on the fully assembled field set. Deduplication only
touches synthesized fields; sanitization turns every model, field and enum
name into a valid identifier and records the original as the database name.
"""
from __future__ import annotations

import re
from collections import Counter
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..config import DEFAULT_RESERVED_NAMES
from ..datamodel import Datamodel, FieldKind, Model
from ..utils import get_logger
from .backrelations import PendingField

logger = get_logger(__name__)


_LEADING_INVALID = re.compile(r"^[^a-zA-Z]+")
_INVALID_CHARS = re.compile(r"[^_a-zA-Z0-9]")

FALLBACK_NAME = "unnamed"
RESERVED_PREFIX = "Renamed"


def deduplicate_names_of_fields_to_be_added(
    pending: List[PendingField],
    datamodel: Optional[Datamodel] = None,
) -> List[PendingField]:
    """
    Make synthesized field names unique per model.

    Pending fields sharing a (model, name) pair get the relation name
    appended. Whatever still collides, with a declared field or an earlier
    pending one, gets a numeric suffix in pending order.
    """
    occurrences = Counter((p.model, p.field.name) for p in pending)
    for p in pending:
        if occurrences[(p.model, p.field.name)] > 1:
            p.field.name = f"{p.field.name}_{p.field.relation_info.name}"

    taken: Dict[str, Set[str]] = {}
    if datamodel is not None:
        for model in datamodel.models:
            taken[model.name] = {f.name for f in model.fields}

    for p in pending:
        names = taken.setdefault(p.model, set())
        if p.field.name in names:
            base = p.field.name
            suffix = 2
            while f"{base}_{suffix}" in names:
                suffix += 1
            p.field.name = f"{base}_{suffix}"
            logger.debug(f"Renamed synthesized field {p.model}.{base} to {p.field.name}")
        names.add(p.field.name)

    return pending


def sanitize_name(name: str, reserved: Iterable[str] = ()) -> Tuple[str, Optional[str]]:
    """
    Turn a database name into a valid identifier.

    Returns:
        (new_name, original name if it changed else None)
    """
    sanitized = _LEADING_INVALID.sub("", name)
    sanitized = _INVALID_CHARS.sub("_", sanitized)
    if not sanitized:
        sanitized = FALLBACK_NAME
    if sanitized in reserved:
        sanitized = f"{RESERVED_PREFIX}{sanitized}"

    if sanitized == name:
        return name, None
    return sanitized, name


def _unique_name(candidate: str, used: Set[str]) -> str:
    if candidate not in used:
        return candidate
    suffix = 2
    while f"{candidate}_{suffix}" in used:
        suffix += 1
    return f"{candidate}_{suffix}"


def sanitize_datamodel_names(datamodel: Datamodel, reserved: Optional[Iterable[str]] = None) -> Datamodel:
    """Sanitize every name in place and rewrite the references to it"""
    reserved = set(DEFAULT_RESERVED_NAMES if reserved is None else reserved)

    # models and enums share one namespace; names that are already valid keep priority
    taken = {
        item.name
        for item in list(datamodel.models) + list(datamodel.enums)
        if sanitize_name(item.name, reserved)[1] is None
    }
    model_names = _rename_types(datamodel.models, reserved, taken)
    enum_names = _rename_types(datamodel.enums, reserved, taken)

    for enum in datamodel.enums:
        for value in enum.values:
            new_value, original_value = sanitize_name(value.name)
            if original_value is not None:
                value.database_name = value.database_name or original_value
                value.name = new_value

    for model in datamodel.models:
        _sanitize_fields(model, model_names, enum_names)

    if model_names or enum_names:
        logger.debug(f"Sanitized {len(model_names)} model and {len(enum_names)} enum names")
    return datamodel


def _rename_types(items, reserved: Set[str], taken: Set[str]) -> Dict[str, str]:
    renamed: Dict[str, str] = {}
    for item in items:
        new_name, original = sanitize_name(item.name, reserved)
        if original is None:
            continue
        new_name = _unique_name(new_name, taken)
        taken.add(new_name)
        renamed[item.name] = new_name
        item.database_name = item.database_name or original
        item.name = new_name
    return renamed


def _sanitize_fields(model: Model, model_names: Dict[str, str], enum_names: Dict[str, str]) -> None:
    field_names: Dict[str, str] = {}
    used: Set[str] = set()
    valid = {f.name for f in model.fields if sanitize_name(f.name)[1] is None}

    for field in model.fields:
        new_name, original = sanitize_name(field.name)
        if original is not None or new_name in used:
            new_name = _unique_name(new_name, used | valid)
        used.add(new_name)
        # index and id references resolve to the first field that carried a name
        field_names.setdefault(field.name, new_name)

        if new_name != field.name:
            # relation fields are backed by their foreign key columns instead
            if not field.is_relation:
                field.database_name = field.database_name or original or field.name
            field.name = new_name

        if field.kind == FieldKind.ENUM and field.type_name in enum_names:
            field.type_name = enum_names[field.type_name]
        if field.is_relation and field.relation_info.to in model_names:
            field.relation_info.to = model_names[field.relation_info.to]
            field.type_name = field.relation_info.to

    for index in model.indices:
        index.fields = [field_names.get(name, name) for name in index.fields]
    model.id_fields = [field_names.get(name, name) for name in model.id_fields]
