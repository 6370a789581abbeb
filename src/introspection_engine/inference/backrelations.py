"""
Backrelation Synthesizer

Gives every relation a field on both ends. Forward fields come from foreign
keys; the far side is synthesized here and queued as a pending field.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..datamodel import Datamodel, Field, FieldArity, FieldKind, Model, RelationInfo
from ..utils import InvariantViolationError


@dataclass
class PendingField:
    """A synthesized field waiting to be added to ``model``"""
    model: str
    field: Field


def calculate_backrelation_field(model: Model, relation_field: Field) -> Field:
    info = relation_field.relation_info
    return Field(
        name=model.name,
        kind=FieldKind.RELATION,
        type_name=model.name,
        arity=FieldArity.OPTIONAL if relation_field.is_unique else FieldArity.LIST,
        relation_info=RelationInfo(
            to=model.name,
            name=info.name,
            on_delete=info.on_delete,
        ),
    )


def synthesize_backrelations(datamodel: Datamodel) -> List[PendingField]:
    """Collect back-relation fields for every relation field lacking a counterpart"""
    pending = []
    for model in datamodel.models:
        for relation_field in model.relation_fields():
            info = relation_field.relation_info
            counterpart = datamodel.related_field(model.name, info.to, info.name, relation_field.name)
            if counterpart is not None:
                continue

            target = datamodel.find_model(info.to)
            if target is None:
                raise InvariantViolationError(
                    f"Relation field '{model.name}.{relation_field.name}' points at "
                    f"unknown model '{info.to}'",
                    table_name=model.name,
                    columns=info.fields,
                )
            pending.append(PendingField(target.name, calculate_backrelation_field(model, relation_field)))
    return pending
