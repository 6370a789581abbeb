"""
Unit Tests for the Scalar Field Builder
"""
import pytest
import sys
import os
from decimal import Decimal

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from introspection_engine.datamodel import DefaultValue, FieldArity, FieldKind
from introspection_engine.inference import calculate_scalar_field
from introspection_engine.physical import (
    Column,
    ColumnArity,
    ColumnType,
    ColumnTypeFamily,
    DatabaseEnum,
    DatabaseSchema,
    Index,
    IndexType,
    PrimaryKey,
    Table,
)


def column(name, family, arity=ColumnArity.NULLABLE, data_type=None, default=None,
           auto_increment=False, enum_name=None):
    return Column(
        name=name,
        tpe=ColumnType(data_type or family.value, family, arity, enum_name),
        default=default,
        auto_increment=auto_increment,
    )


def build(col, table=None, schema=None):
    table = table or Table(name="Thing", columns=[col])
    schema = schema or DatabaseSchema(tables=[table])
    return calculate_scalar_field(schema, table, col)


class TestScalarTypes:
    """Tests for type and arity mapping"""

    @pytest.mark.parametrize("family,expected", [
        (ColumnTypeFamily.INT, "Int"),
        (ColumnTypeFamily.FLOAT, "Float"),
        (ColumnTypeFamily.DECIMAL, "Decimal"),
        (ColumnTypeFamily.BOOLEAN, "Boolean"),
        (ColumnTypeFamily.STRING, "String"),
        (ColumnTypeFamily.UUID, "String"),
        (ColumnTypeFamily.DATETIME, "DateTime"),
        (ColumnTypeFamily.JSON, "Json"),
    ])
    def test_family_mapping(self, family, expected):
        field = build(column("value", family))
        assert field.kind == FieldKind.SCALAR
        assert field.type_name == expected

    def test_enum_field(self):
        col = column("mood", ColumnTypeFamily.ENUM, data_type="mood", enum_name="mood")
        field = build(col)
        assert field.kind == FieldKind.ENUM
        assert field.type_name == "mood"

    def test_unsupported_field_keeps_raw_type(self):
        field = build(column("location", ColumnTypeFamily.UNSUPPORTED, data_type="point"))
        assert field.kind == FieldKind.UNSUPPORTED
        assert field.type_name == "point"

    def test_binary_is_unsupported(self):
        field = build(column("blob", ColumnTypeFamily.BINARY, data_type="bytea"))
        assert field.kind == FieldKind.UNSUPPORTED

    def test_arity(self):
        assert build(column("a", ColumnTypeFamily.STRING, ColumnArity.REQUIRED)).arity == FieldArity.REQUIRED
        assert build(column("a", ColumnTypeFamily.STRING, ColumnArity.NULLABLE)).arity == FieldArity.OPTIONAL
        assert build(column("a", ColumnTypeFamily.STRING, ColumnArity.LIST)).arity == FieldArity.LIST

    def test_auto_increment_is_required(self):
        col = column("id", ColumnTypeFamily.INT, ColumnArity.NULLABLE, auto_increment=True)
        assert build(col).arity == FieldArity.REQUIRED


class TestIdAndUnique:
    """Tests for id and unique flags"""

    def test_single_primary_key_is_id(self):
        col = column("id", ColumnTypeFamily.INT, ColumnArity.REQUIRED)
        table = Table(name="User", columns=[col], primary_key=PrimaryKey(["id"]))
        field = build(col, table)
        assert field.is_id
        assert not field.is_unique

    def test_composite_primary_key_is_not_id(self):
        a = column("a", ColumnTypeFamily.INT, ColumnArity.REQUIRED)
        b = column("b", ColumnTypeFamily.INT, ColumnArity.REQUIRED)
        table = Table(name="Pair", columns=[a, b], primary_key=PrimaryKey(["a", "b"]))
        assert not build(a, table).is_id

    def test_single_unique_index(self):
        col = column("email", ColumnTypeFamily.STRING)
        table = Table(name="User", columns=[col], indices=[Index("email_key", ["email"], IndexType.UNIQUE)])
        assert build(col, table).is_unique

    def test_unique_on_id_not_repeated(self):
        col = column("id", ColumnTypeFamily.INT, ColumnArity.REQUIRED)
        table = Table(
            name="User",
            columns=[col],
            primary_key=PrimaryKey(["id"]),
            indices=[Index("id_key", ["id"], IndexType.UNIQUE)],
        )
        assert not build(col, table).is_unique

    def test_compound_unique_does_not_mark_field(self):
        a = column("a", ColumnTypeFamily.STRING)
        b = column("b", ColumnTypeFamily.STRING)
        table = Table(name="T", columns=[a, b], indices=[Index("ab_key", ["a", "b"], IndexType.UNIQUE)])
        assert not build(a, table).is_unique


class TestDefaults:
    """Tests for default value parsing"""

    def test_no_default(self):
        assert build(column("name", ColumnTypeFamily.STRING)).default_value is None

    def test_autoincrement(self):
        col = column("id", ColumnTypeFamily.INT, ColumnArity.REQUIRED, auto_increment=True)
        assert build(col).default_value == DefaultValue.generated("autoincrement")

    def test_sequence_default(self):
        col = column("id", ColumnTypeFamily.INT, ColumnArity.REQUIRED, default="nextval('user_id_seq'::regclass)")
        assert build(col).default_value == DefaultValue.generated("autoincrement")

    def test_primary_key_sequence(self):
        col = column("id", ColumnTypeFamily.INT, ColumnArity.REQUIRED)
        table = Table(name="User", columns=[col], primary_key=PrimaryKey(["id"], sequence="user_id_seq"))
        assert build(col, table).default_value == DefaultValue.generated("autoincrement")

    def test_list_defaults_dropped(self):
        col = column("ints", ColumnTypeFamily.INT, ColumnArity.LIST, default="array[]::Integer[]")
        assert build(col).default_value is None
        col = column("ints2", ColumnTypeFamily.INT, ColumnArity.LIST, default="'{}'")
        assert build(col).default_value is None

    @pytest.mark.parametrize("family,raw,expected", [
        (ColumnTypeFamily.INT, "42", 42),
        (ColumnTypeFamily.INT, "'-1'::integer", -1),
        (ColumnTypeFamily.FLOAT, "1.5", 1.5),
        (ColumnTypeFamily.DECIMAL, "10.25", Decimal("10.25")),
        (ColumnTypeFamily.BOOLEAN, "true", True),
        (ColumnTypeFamily.BOOLEAN, "0", False),
        (ColumnTypeFamily.STRING, "'hello'::character varying", "hello"),
        (ColumnTypeFamily.STRING, "'it''s'", "it's"),
    ])
    def test_literals(self, family, raw, expected):
        field = build(column("value", family, default=raw))
        assert field.default_value == DefaultValue.literal(expected)

    def test_now(self):
        field = build(column("created_at", ColumnTypeFamily.DATETIME, default="CURRENT_TIMESTAMP"))
        assert field.default_value == DefaultValue.generated("now")

    def test_uuid(self):
        field = build(column("token", ColumnTypeFamily.UUID, default="gen_random_uuid()"))
        assert field.default_value == DefaultValue.generated("uuid")

    def test_enum_default(self):
        col = column("mood", ColumnTypeFamily.ENUM, default="'happy'::mood", enum_name="mood")
        table = Table(name="User", columns=[col])
        schema = DatabaseSchema(tables=[table], enums=[DatabaseEnum("mood", ["happy", "sad"])])
        assert build(col, table, schema).default_value == DefaultValue.literal("happy")

    def test_unparseable_is_dbgenerated(self):
        field = build(column("value", ColumnTypeFamily.INT, default="floor(random() * 10)"))
        assert field.default_value == DefaultValue.generated("dbgenerated")

    def test_null_default(self):
        assert build(column("value", ColumnTypeFamily.STRING, default="NULL")).default_value is None
