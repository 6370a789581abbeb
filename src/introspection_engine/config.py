"""
Configuration Management for the Introspection Engine
Uses Pydantic for validation and type safety
"""
from __future__ import annotations

import os
from enum import Enum
from typing import List, Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


class DatabaseType(str, Enum):
    """Database engines whose schemas can be introspected"""
    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    SQLITE = "sqlite"
    UNKNOWN = "unknown"


class LogLevel(str, Enum):
    """Log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# Scalar type names and keywords of the data model language
DEFAULT_RESERVED_NAMES = [
    "String",
    "Boolean",
    "Int",
    "Float",
    "Decimal",
    "DateTime",
    "Json",
    "model",
    "enum",
    "datasource",
    "generator",
    "type",
]


class LoggingConfig(BaseModel):
    """Logging configuration"""
    level: LogLevel = LogLevel.INFO
    json_format: bool = False
    log_file: Optional[str] = None

    model_config = {"use_enum_values": True}


class MetricsConfig(BaseModel):
    """Metrics configuration"""
    enabled: bool = True


class IntrospectionConfig(BaseModel):
    """Settings that steer how a physical schema is interpreted"""
    database_type: DatabaseType = DatabaseType.UNKNOWN

    # Tables holding migration bookkeeping, never modeled
    migration_table_names: List[str] = Field(default_factory=lambda: ["_Migration"])

    # Name prefix shared by both legacy implicit join table conventions
    join_table_prefix: str = Field(default="_", min_length=1, max_length=8)

    reserved_names: List[str] = Field(default_factory=lambda: list(DEFAULT_RESERVED_NAMES))

    # Per-table construction can fan out across a thread pool
    max_workers: int = Field(default=1, ge=1, le=64)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @field_validator("migration_table_names")
    @classmethod
    def validate_migration_tables(cls, v: List[str]) -> List[str]:
        """Reject blank table names"""
        if any(not name.strip() for name in v):
            raise ValueError("migration table names must not be blank")
        return v

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "IntrospectionConfig":
        """Create configuration from environment variables, optionally seeded from a .env file"""
        if env_file:
            load_dotenv(env_file, override=False)

        migration_tables = os.getenv("INTROSPECTION_MIGRATION_TABLES")
        kwargs = {}
        if migration_tables:
            kwargs["migration_table_names"] = [
                name.strip() for name in migration_tables.split(",") if name.strip()
            ]

        return cls(
            database_type=DatabaseType(os.getenv("INTROSPECTION_DB_TYPE", "unknown")),
            join_table_prefix=os.getenv("INTROSPECTION_JOIN_TABLE_PREFIX", "_"),
            max_workers=int(os.getenv("INTROSPECTION_MAX_WORKERS", "1")),
            logging=LoggingConfig(
                level=LogLevel(os.getenv("LOG_LEVEL", "INFO")),
                json_format=os.getenv("LOG_JSON", "false").lower() == "true",
                log_file=os.getenv("LOG_FILE"),
            ),
            metrics=MetricsConfig(
                enabled=os.getenv("INTROSPECTION_METRICS", "true").lower() == "true",
            ),
            **kwargs,
        )

    model_config = {"use_enum_values": True}


# Global configuration instance
_config: Optional[IntrospectionConfig] = None


def get_config() -> IntrospectionConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = IntrospectionConfig.from_env()
    return _config


def set_config(config: IntrospectionConfig) -> None:
    """Set the global configuration instance"""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance"""
    global _config
    _config = None
