"""
Guardrail Pass

Comments out what the data model cannot express instead of failing the run,
and reports each downgrade as a warning.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..datamodel import Datamodel, FieldKind
from ..utils import get_logger

logger = get_logger(__name__)


MISSING_UNIQUE_IDENTIFIER = 1
UNSUPPORTED_TYPE = 2
RELATION_TO_COMMENTED_MODEL = 3

UNSUPPORTED_TYPE_DOCUMENTATION = "This type is currently not supported."
MISSING_IDENTIFIER_DOCUMENTATION = (
    "The underlying table does not contain a unique identifier and can therefore "
    "currently not be handled."
)
RELATION_TO_COMMENTED_DOCUMENTATION = "The related model is commented out."


@dataclass
class IntrospectionWarning:
    """A downgraded element, grouped by warning code"""
    code: int
    message: str
    affected: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "affected": self.affected}


def commenting_out_guardrails(datamodel: Datamodel) -> List[IntrospectionWarning]:
    """Annotate unsupported elements in place; never raises"""
    unsupported_fields = []
    models_without_identifier = []
    dangling_relations = []

    for model in datamodel.models:
        for f in model.fields:
            if f.kind == FieldKind.UNSUPPORTED and not f.is_commented_out:
                f.is_commented_out = True
                f.documentation = UNSUPPORTED_TYPE_DOCUMENTATION
                unsupported_fields.append({"model": model.name, "field": f.name, "type": f.type_name})

    # runs after the field pass so commented out fields no longer count as identifiers
    for model in datamodel.models:
        if not model.has_unique_identifier() and not model.is_commented_out:
            model.is_commented_out = True
            model.documentation = MISSING_IDENTIFIER_DOCUMENTATION
            models_without_identifier.append({"model": model.name})

    commented_models = {m.name for m in datamodel.models if m.is_commented_out}
    for model in datamodel.models:
        for f in model.relation_fields():
            if f.relation_info.to in commented_models and not f.is_commented_out:
                f.is_commented_out = True
                f.documentation = RELATION_TO_COMMENTED_DOCUMENTATION
                dangling_relations.append({"model": model.name, "field": f.name})

    warnings = []
    if models_without_identifier:
        warnings.append(IntrospectionWarning(
            code=MISSING_UNIQUE_IDENTIFIER,
            message="The following models were commented out as they do not have a unique identifier.",
            affected=models_without_identifier,
        ))
    if unsupported_fields:
        warnings.append(IntrospectionWarning(
            code=UNSUPPORTED_TYPE,
            message="These fields were commented out because their types are currently not supported.",
            affected=unsupported_fields,
        ))
    if dangling_relations:
        warnings.append(IntrospectionWarning(
            code=RELATION_TO_COMMENTED_MODEL,
            message="These relation fields were commented out because they point at a commented out model.",
            affected=dangling_relations,
        ))

    for warning in warnings:
        logger.warning(f"{warning.message} ({len(warning.affected)} affected)")
    return warnings
