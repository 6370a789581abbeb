"""
Unit Tests for Identity Filters
"""
import pytest
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from introspection_engine.config import IntrospectionConfig
from introspection_engine.inference import TableRole, classify_table, is_excluded
from introspection_engine.physical import (
    Column,
    ColumnArity,
    ColumnType,
    ColumnTypeFamily,
    ForeignKey,
    Index,
    IndexType,
    PrimaryKey,
    Table,
)


def int_column(name):
    return Column(name, ColumnType("integer", ColumnTypeFamily.INT, ColumnArity.REQUIRED))


def join_table(name="_PostToUser", first="Post", second="User", extra_columns=(), primary_key=None,
               a="A", b="B", indices=None):
    columns = [int_column(a), int_column(b)] + [int_column(c) for c in extra_columns]
    if indices is None:
        indices = [
            Index("unique_ab", [a, b], IndexType.UNIQUE),
            Index("index_b", [b], IndexType.NORMAL),
        ]
    return Table(
        name=name,
        columns=columns,
        foreign_keys=[
            ForeignKey([a], first, ["id"]),
            ForeignKey([b], second, ["id"]),
        ],
        indices=indices,
        primary_key=primary_key,
    )


@pytest.fixture
def config():
    return IntrospectionConfig()


class TestClassifyTable:
    """Tests for classify_table"""

    def test_migration_table(self, config):
        table = Table(name="_Migration", columns=[int_column("revision")])
        assert classify_table(table, config) == TableRole.MIGRATION
        assert is_excluded(table, config)

    def test_custom_migration_table(self):
        config = IntrospectionConfig(migration_table_names=["schema_migrations"])
        table = Table(name="schema_migrations", columns=[int_column("version")])
        assert classify_table(table, config) == TableRole.MIGRATION

    def test_join_table_v1(self, config):
        assert classify_table(join_table(), config) == TableRole.JOIN_TABLE_V1

    def test_join_table_v1_lowercase_columns(self, config):
        table = join_table(a="a", b="b")
        assert classify_table(table, config) == TableRole.JOIN_TABLE_V1

    def test_join_table_v1_reversed_foreign_keys(self, config):
        table = join_table()
        table.foreign_keys.reverse()
        assert classify_table(table, config) == TableRole.JOIN_TABLE_V1

    def test_join_table_v0_with_surrogate_id(self, config):
        table = join_table(
            name="_BookRoyalty",
            first="Book",
            second="Royalty",
            extra_columns=["id"],
            primary_key=PrimaryKey(["id"]),
        )
        assert classify_table(table, config) == TableRole.JOIN_TABLE_V0
        assert is_excluded(table, config)

    def test_wrong_referenced_order_is_model(self, config):
        table = join_table(first="User", second="Post")
        assert classify_table(table, config) == TableRole.MODEL

    def test_missing_prefix_is_model(self, config):
        assert classify_table(join_table(name="PostToUser"), config) == TableRole.MODEL

    def test_extra_column_without_primary_key_is_model(self, config):
        table = join_table(extra_columns=["position"])
        assert classify_table(table, config) == TableRole.MODEL

    def test_other_primary_key_is_model(self, config):
        table = join_table(primary_key=PrimaryKey(["A", "B"]))
        assert classify_table(table, config) == TableRole.MODEL

    def test_missing_indices_is_model(self, config):
        table = join_table(indices=[Index("unique_ab", ["A", "B"], IndexType.UNIQUE)])
        assert classify_table(table, config) == TableRole.MODEL

    def test_compound_foreign_key_is_model(self, config):
        table = join_table()
        table.foreign_keys[0] = ForeignKey(["A", "B"], "Post", ["id", "other"])
        assert classify_table(table, config) == TableRole.MODEL

    def test_custom_prefix(self):
        config = IntrospectionConfig(join_table_prefix="jt_")
        assert classify_table(join_table(name="jt_PostToUser"), config) == TableRole.JOIN_TABLE_V1
        assert classify_table(join_table(name="_PostToUser"), config) == TableRole.MODEL

    def test_ordinary_table(self, config):
        table = Table(name="User", columns=[int_column("id")], primary_key=PrimaryKey(["id"]))
        assert classify_table(table, config) == TableRole.MODEL
        assert not is_excluded(table, config)
