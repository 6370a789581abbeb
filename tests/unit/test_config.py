"""
Unit Tests for Configuration
"""
import pytest
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from pydantic import ValidationError

from introspection_engine.config import (
    DEFAULT_RESERVED_NAMES,
    DatabaseType,
    IntrospectionConfig,
    LoggingConfig,
    get_config,
    reset_config,
    set_config,
)


class TestIntrospectionConfig:
    """Tests for IntrospectionConfig"""

    def test_defaults(self):
        config = IntrospectionConfig()

        assert config.database_type == "unknown"
        assert config.migration_table_names == ["_Migration"]
        assert config.join_table_prefix == "_"
        assert config.max_workers == 1
        assert config.reserved_names == DEFAULT_RESERVED_NAMES
        assert config.metrics.enabled is True
        assert config.logging.level == "INFO"

    def test_enum_values_are_stored(self):
        config = IntrospectionConfig(database_type=DatabaseType.POSTGRESQL)
        assert config.database_type == "postgresql"

    def test_max_workers_bounds(self):
        with pytest.raises(ValidationError):
            IntrospectionConfig(max_workers=0)
        with pytest.raises(ValidationError):
            IntrospectionConfig(max_workers=65)

    def test_blank_migration_table_rejected(self):
        with pytest.raises(ValidationError):
            IntrospectionConfig(migration_table_names=["_Migration", "  "])

    def test_empty_join_prefix_rejected(self):
        with pytest.raises(ValidationError):
            IntrospectionConfig(join_table_prefix="")

    def test_reserved_names_not_shared(self):
        first = IntrospectionConfig()
        first.reserved_names.append("Custom")
        assert "Custom" not in IntrospectionConfig().reserved_names


class TestConfigFromEnv:
    """Tests for environment based configuration"""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("INTROSPECTION_DB_TYPE", "mysql")
        monkeypatch.setenv("INTROSPECTION_MIGRATION_TABLES", "_Migration, schema_migrations")
        monkeypatch.setenv("INTROSPECTION_MAX_WORKERS", "4")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_JSON", "true")
        monkeypatch.setenv("INTROSPECTION_METRICS", "false")

        config = IntrospectionConfig.from_env()

        assert config.database_type == "mysql"
        assert config.migration_table_names == ["_Migration", "schema_migrations"]
        assert config.max_workers == 4
        assert config.logging.level == "DEBUG"
        assert config.logging.json_format is True
        assert config.metrics.enabled is False

    def test_from_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("INTROSPECTION_JOIN_TABLE_PREFIX", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("INTROSPECTION_JOIN_TABLE_PREFIX=jt_\n")

        try:
            config = IntrospectionConfig.from_env(env_file=str(env_file))
            assert config.join_table_prefix == "jt_"
        finally:
            os.environ.pop("INTROSPECTION_JOIN_TABLE_PREFIX", None)

    def test_invalid_db_type(self, monkeypatch):
        monkeypatch.setenv("INTROSPECTION_DB_TYPE", "oracle")
        with pytest.raises(ValueError):
            IntrospectionConfig.from_env()


class TestGlobalConfig:
    """Tests for the module level configuration instance"""

    def teardown_method(self):
        reset_config()

    def test_set_and_get(self):
        config = IntrospectionConfig(max_workers=2)
        set_config(config)
        assert get_config() is config

    def test_reset_rebuilds_from_env(self, monkeypatch):
        set_config(IntrospectionConfig(max_workers=2))
        reset_config()
        monkeypatch.delenv("INTROSPECTION_MAX_WORKERS", raising=False)
        assert get_config().max_workers == 1

    def test_logging_config(self):
        config = LoggingConfig(level="WARNING", log_file="run.log")
        assert config.level == "WARNING"
        assert config.log_file == "run.log"
