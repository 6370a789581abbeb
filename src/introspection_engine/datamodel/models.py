"""
Data Model Definitions

Portable relational data model recovered from a physical schema: models
with scalar and relation fields, index declarations and enums. Relation
fields refer to their target by model name; lookups go through the
Datamodel rather than object references.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Any, Dict, Iterator, List, Optional
import json
import yaml

from ..physical.schema import ForeignKeyAction
from .names import default_relation_name


class ScalarType(str, PyEnum):
    """Scalar types of the data model language"""
    INT = "Int"
    FLOAT = "Float"
    DECIMAL = "Decimal"
    BOOLEAN = "Boolean"
    STRING = "String"
    DATETIME = "DateTime"
    JSON = "Json"


class FieldKind(str, PyEnum):
    SCALAR = "scalar"
    ENUM = "enum"
    RELATION = "relation"
    UNSUPPORTED = "unsupported"


class FieldArity(str, PyEnum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    LIST = "list"


class Cardinality(str, PyEnum):
    """How many records a relation field points at"""
    REQUIRED_TO_ONE = "required_to_one"
    OPTIONAL_TO_ONE = "optional_to_one"
    TO_MANY = "to_many"


class IndexKind(str, PyEnum):
    NORMAL = "normal"
    UNIQUE = "unique"


@dataclass(frozen=True)
class DefaultValue:
    """A literal default or a generator expression such as autoincrement()"""
    value: Any = None
    expression: Optional[str] = None

    @classmethod
    def literal(cls, value: Any) -> "DefaultValue":
        return cls(value=value)

    @classmethod
    def generated(cls, expression: str) -> "DefaultValue":
        return cls(expression=expression)

    @property
    def is_expression(self) -> bool:
        return self.expression is not None

    def to_dict(self) -> Dict[str, Any]:
        if self.is_expression:
            return {"expression": f"{self.expression}()"}
        if isinstance(self.value, Decimal):
            return {"value": str(self.value)}
        return {"value": self.value}


@dataclass
class RelationInfo:
    """Both ends of a relation as seen from the field that carries it"""
    to: str
    name: str
    fields: List[str] = field(default_factory=list)
    to_fields: List[str] = field(default_factory=list)
    on_delete: ForeignKeyAction = ForeignKeyAction.NO_ACTION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "to": self.to,
            "name": self.name,
            "fields": self.fields,
            "references": self.to_fields,
            "on_delete": self.on_delete.value,
        }


@dataclass
class Field:
    """A model field: scalar, enum, relation or an unsupported column"""
    name: str
    kind: FieldKind
    type_name: str
    arity: FieldArity = FieldArity.REQUIRED
    default_value: Optional[DefaultValue] = None
    is_unique: bool = False
    is_id: bool = False
    relation_info: Optional[RelationInfo] = None

    # Physical columns behind a compound relation field
    database_names: List[str] = field(default_factory=list)
    # Original name when sanitization changed it
    database_name: Optional[str] = None

    documentation: Optional[str] = None
    is_commented_out: bool = False

    @property
    def is_relation(self) -> bool:
        return self.kind == FieldKind.RELATION

    @property
    def is_list(self) -> bool:
        return self.arity == FieldArity.LIST

    @property
    def cardinality(self) -> Optional[Cardinality]:
        if not self.is_relation:
            return None
        if self.arity == FieldArity.LIST:
            return Cardinality.TO_MANY
        if self.arity == FieldArity.OPTIONAL:
            return Cardinality.OPTIONAL_TO_ONE
        return Cardinality.REQUIRED_TO_ONE

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "kind": self.kind.value,
            "type": self.type_name,
            "arity": self.arity.value,
        }
        if self.default_value is not None:
            data["default"] = self.default_value.to_dict()
        if self.is_unique:
            data["unique"] = True
        if self.is_id:
            data["id"] = True
        if self.relation_info is not None:
            data["relation"] = self.relation_info.to_dict()
        if self.database_names:
            data["database_names"] = self.database_names
        if self.database_name:
            data["map"] = self.database_name
        if self.documentation:
            data["documentation"] = self.documentation
        if self.is_commented_out:
            data["commented_out"] = True
        return data


@dataclass
class IndexDefinition:
    name: Optional[str]
    fields: List[str]
    tpe: IndexKind = IndexKind.NORMAL

    def is_unique(self) -> bool:
        return self.tpe == IndexKind.UNIQUE

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "fields": self.fields, "type": self.tpe.value}


@dataclass
class Model:
    """One model per physical table"""
    name: str
    fields: List[Field] = field(default_factory=list)
    id_fields: List[str] = field(default_factory=list)
    indices: List[IndexDefinition] = field(default_factory=list)
    database_name: Optional[str] = None
    documentation: Optional[str] = None
    is_commented_out: bool = False

    def add_field(self, field: Field) -> None:
        self.fields.append(field)

    def add_index(self, index: IndexDefinition) -> None:
        self.indices.append(index)

    def find_field(self, name: str) -> Optional[Field]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def relation_fields(self) -> Iterator[Field]:
        return (f for f in self.fields if f.is_relation)

    def has_unique_identifier(self) -> bool:
        return (
            bool(self.id_fields)
            or any((f.is_id or f.is_unique) and not f.is_commented_out for f in self.fields)
            or any(i.is_unique() for i in self.indices)
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
        }
        if self.id_fields:
            data["id_fields"] = self.id_fields
        if self.indices:
            data["indices"] = [i.to_dict() for i in self.indices]
        if self.database_name:
            data["map"] = self.database_name
        if self.documentation:
            data["documentation"] = self.documentation
        if self.is_commented_out:
            data["commented_out"] = True
        return data


@dataclass
class EnumValue:
    name: str
    database_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.database_name:
            data["map"] = self.database_name
        return data


@dataclass
class Enum:
    name: str
    values: List[EnumValue] = field(default_factory=list)
    database_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "values": [v.to_dict() for v in self.values],
        }
        if self.database_name:
            data["map"] = self.database_name
        return data


@dataclass
class Datamodel:
    """
    Complete data model of a database

    Owns every model and enum; relation fields name their target model and
    are resolved through ``find_model``.
    """
    models: List[Model] = field(default_factory=list)
    enums: List[Enum] = field(default_factory=list)

    def add_model(self, model: Model) -> None:
        self.models.append(model)

    def add_enum(self, enum: Enum) -> None:
        self.enums.append(enum)

    def find_model(self, name: str) -> Optional[Model]:
        for model in self.models:
            if model.name == name:
                return model
        return None

    def find_enum(self, name: str) -> Optional[Enum]:
        for enum in self.enums:
            if enum.name == name:
                return enum
        return None

    def related_field(
        self,
        from_model: str,
        to_model: str,
        relation_name: str,
        from_field: str,
    ) -> Optional[Field]:
        """Find the field on ``to_model`` that forms the other end of a relation"""
        model = self.find_model(to_model)
        if model is None:
            return None

        for candidate in model.relation_fields():
            info = candidate.relation_info
            if info.to != from_model or info.name != relation_name:
                continue
            # on a self-relation the field itself is not its own counterpart
            if from_model == to_model and candidate.name == from_field:
                continue
            return candidate
        return None

    def is_explicit_relation_name(self, model: Model, field: Field) -> bool:
        """True when the relation name has to be spelled out"""
        return field.relation_info.name != default_relation_name(model.name, field.relation_info.to)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "models": [m.to_dict() for m in self.models],
            "enums": [e.to_dict() for e in self.enums],
        }

    def to_json(self, indent: int = 2) -> str:
        """Export as JSON"""
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def to_yaml(self) -> str:
        """Export as YAML"""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def save(self, path: str) -> None:
        """Save model to file (JSON or YAML based on extension)"""
        if path.endswith('.yaml') or path.endswith('.yml'):
            with open(path, 'w') as f:
                f.write(self.to_yaml())
        else:
            with open(path, 'w') as f:
                f.write(self.to_json())
