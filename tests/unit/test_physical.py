"""
Unit Tests for the Physical Schema and Snapshot Loader
"""
import json
import pytest
import sys
import os

import yaml

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from introspection_engine.physical import (
    ColumnArity,
    ColumnTypeFamily,
    ForeignKeyAction,
    IndexType,
    SnapshotDescriber,
    infer_type_family,
    load_schema_snapshot,
)
from introspection_engine.utils import SchemaLoadError


BLOG_SNAPSHOT = {
    "database": {"name": "blog", "type": "postgresql"},
    "tables": [
        {
            "name": "User",
            "columns": [
                {"name": "id", "type": "integer", "nullable": False, "auto_increment": True},
                {"name": "email", "type": "varchar(255)"},
                {"name": "tags", "type": "text[]"},
                {"name": "mood", "type": "mood", "nullable": False, "default": "happy"},
            ],
            "primary_key": ["id"],
            "indices": [{"name": "user_email_key", "columns": ["email"], "unique": True}],
        },
        {
            "name": "Post",
            "columns": [
                {"name": "id", "type": "integer", "nullable": False},
                {"name": "user_id", "type": "integer"},
            ],
            "primary_key": {"columns": ["id"], "sequence": "post_id_seq"},
            "foreign_keys": [
                {"columns": ["user_id"], "references": {"table": "User", "columns": ["id"]}, "on_delete": "set null"},
            ],
        },
    ],
    "enums": [{"name": "mood", "values": ["happy", "sad"]}],
}


class TestTypeFamilies:
    """Tests for raw type mapping"""

    def test_known_types(self):
        assert infer_type_family("integer") == ColumnTypeFamily.INT
        assert infer_type_family("varchar(255)") == ColumnTypeFamily.STRING
        assert infer_type_family("numeric(10,2)") == ColumnTypeFamily.DECIMAL
        assert infer_type_family("timestamp with time zone") == ColumnTypeFamily.DATETIME
        assert infer_type_family("JSONB") == ColumnTypeFamily.JSON
        assert infer_type_family("bytea") == ColumnTypeFamily.BINARY

    def test_arrays_use_element_type(self):
        assert infer_type_family("int4[]") == ColumnTypeFamily.INT

    def test_enum_names(self):
        assert infer_type_family("mood", {"mood"}) == ColumnTypeFamily.ENUM

    def test_unknown_is_unsupported(self):
        assert infer_type_family("tsvector") == ColumnTypeFamily.UNSUPPORTED


class TestSnapshotLoader:
    """Tests for load_schema_snapshot"""

    def test_load_from_dict(self):
        schema = load_schema_snapshot(BLOG_SNAPSHOT)

        assert schema.database_name == "blog"
        assert schema.get_table_names() == ["User", "Post"]

        user = schema.get_table("User")
        assert user.get_column("id").auto_increment is True
        assert user.get_column("id").is_required
        assert user.get_column("email").nullable
        assert user.get_column("tags").tpe.arity == ColumnArity.LIST
        assert user.get_column("mood").tpe.family == ColumnTypeFamily.ENUM
        assert user.get_column("mood").tpe.enum_name == "mood"
        assert user.get_column("mood").default == "happy"
        assert user.indices[0].tpe == IndexType.UNIQUE
        assert user.is_column_unique("email")

    def test_foreign_key_and_primary_key_forms(self):
        post = load_schema_snapshot(BLOG_SNAPSHOT).get_table("Post")

        fk = post.foreign_keys[0]
        assert fk.referenced_table == "User"
        assert fk.referenced_columns == ["id"]
        assert fk.on_delete == ForeignKeyAction.SET_NULL
        assert post.primary_key.sequence == "post_id_seq"
        assert post.is_foreign_key_column("user_id")

    def test_load_yaml_file(self, tmp_path):
        path = tmp_path / "schema.yaml"
        path.write_text(yaml.dump(BLOG_SNAPSHOT))

        schema = SnapshotDescriber(str(path)).describe()
        assert len(schema.tables) == 2

    def test_load_json_file(self, tmp_path):
        path = tmp_path / "schema.json"
        path.write_text(json.dumps(BLOG_SNAPSHOT))

        schema = load_schema_snapshot(str(path))
        assert schema.get_enum("mood").values == ["happy", "sad"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SchemaLoadError):
            load_schema_snapshot(str(tmp_path / "missing.yaml"))

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("tables: [unclosed")

        with pytest.raises(SchemaLoadError):
            load_schema_snapshot(str(path))

    def test_unknown_column_in_foreign_key(self):
        data = {
            "tables": [
                {"name": "User", "columns": [{"name": "id", "type": "int"}]},
                {
                    "name": "Post",
                    "columns": [{"name": "id", "type": "int"}],
                    "foreign_keys": [{"columns": ["user_id"], "referenced_table": "User", "referenced_columns": ["id"]}],
                },
            ]
        }
        with pytest.raises(SchemaLoadError) as exc_info:
            load_schema_snapshot(data)
        assert exc_info.value.context.table_name == "Post"

    def test_mismatched_foreign_key_length(self):
        data = {
            "tables": [
                {
                    "name": "Post",
                    "columns": [{"name": "a", "type": "int"}, {"name": "b", "type": "int"}],
                    "foreign_keys": [{"columns": ["a", "b"], "referenced_table": "Post", "referenced_columns": ["a"]}],
                },
            ]
        }
        with pytest.raises(SchemaLoadError):
            load_schema_snapshot(data)

    def test_unknown_database_type(self):
        with pytest.raises(SchemaLoadError):
            load_schema_snapshot({"database": {"type": "db2"}, "tables": []})

