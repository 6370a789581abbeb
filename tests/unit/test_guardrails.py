"""
Unit Tests for the Guardrail Pass
"""
import pytest
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from introspection_engine.datamodel import (
    Datamodel,
    Field,
    FieldArity,
    FieldKind,
    IndexDefinition,
    IndexKind,
    Model,
    RelationInfo,
)
from introspection_engine.inference import (
    MISSING_UNIQUE_IDENTIFIER,
    RELATION_TO_COMMENTED_MODEL,
    UNSUPPORTED_TYPE,
    commenting_out_guardrails,
)


def scalar(name, **kwargs):
    return Field(name, FieldKind.SCALAR, "Int", **kwargs)


class TestGuardrails:
    """Tests for commenting_out_guardrails"""

    def test_clean_datamodel_has_no_warnings(self):
        datamodel = Datamodel(models=[Model("User", [scalar("id", is_id=True)])])
        assert commenting_out_guardrails(datamodel) == []
        assert not datamodel.models[0].is_commented_out

    def test_unsupported_field(self):
        field = Field("location", FieldKind.UNSUPPORTED, "point")
        datamodel = Datamodel(models=[Model("Shop", [scalar("id", is_id=True), field])])

        warnings = commenting_out_guardrails(datamodel)

        assert field.is_commented_out
        assert field.documentation == "This type is currently not supported."
        assert [w.code for w in warnings] == [UNSUPPORTED_TYPE]
        assert warnings[0].affected == [{"model": "Shop", "field": "location", "type": "point"}]

    def test_model_without_identifier(self):
        datamodel = Datamodel(models=[Model("Log", [scalar("message")])])

        warnings = commenting_out_guardrails(datamodel)

        assert datamodel.models[0].is_commented_out
        assert datamodel.models[0].documentation
        assert [w.code for w in warnings] == [MISSING_UNIQUE_IDENTIFIER]

    @pytest.mark.parametrize("model", [
        Model("A", [scalar("x", is_unique=True)]),
        Model("B", [scalar("x"), scalar("y")], id_fields=["x", "y"]),
        Model("C", [scalar("x")], indices=[IndexDefinition("i", ["x"], IndexKind.UNIQUE)]),
    ])
    def test_other_identifiers_count(self, model):
        commenting_out_guardrails(Datamodel(models=[model]))
        assert not model.is_commented_out

    def test_unsupported_id_does_not_count(self):
        model = Model("Geo", [Field("shape", FieldKind.UNSUPPORTED, "polygon", is_id=True)])
        warnings = commenting_out_guardrails(Datamodel(models=[model]))

        assert model.is_commented_out
        assert {w.code for w in warnings} == {MISSING_UNIQUE_IDENTIFIER, UNSUPPORTED_TYPE}

    def test_relations_to_commented_model(self):
        log_ref = Field(
            "Log",
            FieldKind.RELATION,
            "Log",
            arity=FieldArity.LIST,
            relation_info=RelationInfo(to="Log", name="LogToUser"),
        )
        datamodel = Datamodel(models=[
            Model("Log", [scalar("user_id")]),
            Model("User", [scalar("id", is_id=True), log_ref]),
        ])

        warnings = commenting_out_guardrails(datamodel)

        assert log_ref.is_commented_out
        assert [w.code for w in warnings] == [MISSING_UNIQUE_IDENTIFIER, RELATION_TO_COMMENTED_MODEL]
        assert warnings[1].affected == [{"model": "User", "field": "Log"}]

    def test_warning_to_dict(self):
        datamodel = Datamodel(models=[Model("Log", [scalar("message")])])
        data = commenting_out_guardrails(datamodel)[0].to_dict()
        assert data["code"] == 1
        assert data["affected"] == [{"model": "Log"}]
