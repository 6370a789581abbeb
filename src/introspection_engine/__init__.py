"""
SQL Introspection Engine
========================

Recovers a portable relational data model from a physical database schema.

Features:
- One-to-one vs one-to-many detection from unique indices
- Back-relations synthesized so every relation is navigable from both ends
- Legacy implicit many-to-many join tables collapsed into list fields
- Redundant indices dropped, compound ones attributed to relation fields
- Names deduplicated and sanitized into valid identifiers
- Unsupported types and models without identifiers commented out, not fatal
- Structured logging and metrics for every run

Quick Start:
------------

    from introspection_engine import create_engine, SnapshotDescriber

    engine = create_engine(database_type="postgresql")
    result = engine.introspect(SnapshotDescriber("schema.yaml"))

    print(result.datamodel.to_yaml())
    for warning in result.warnings:
        print(warning.code, warning.message)

From an in-memory snapshot:
---------------------------

    from introspection_engine import calculate_datamodel, load_schema_snapshot

    schema = load_schema_snapshot({"tables": [...]})
    datamodel = calculate_datamodel(schema)
"""
from typing import Any, Optional

__version__ = "1.0.0"
__author__ = "SQL Introspection Team"

# Configuration
from .config import (
    DatabaseType,
    LogLevel,
    LoggingConfig,
    MetricsConfig,
    IntrospectionConfig,
    DEFAULT_RESERVED_NAMES,
    get_config,
    set_config,
    reset_config,
)

# Physical schema
from .physical import (
    ColumnTypeFamily,
    ColumnArity,
    ForeignKeyAction,
    IndexType,
    ColumnType,
    Column,
    ForeignKey,
    Index,
    PrimaryKey,
    Table,
    DatabaseEnum,
    DatabaseSchema,
    SchemaDescriber,
    SnapshotDescriber,
    load_schema_snapshot,
    parse_schema_snapshot,
)

# Data model
from .datamodel import (
    ScalarType,
    FieldKind,
    FieldArity,
    Cardinality,
    IndexKind,
    DefaultValue,
    RelationInfo,
    Field,
    IndexDefinition,
    Model,
    EnumValue,
    Enum,
    Datamodel,
)

# Inference
from .inference import (
    TableRole,
    classify_table,
    is_excluded,
    calculate_scalar_field,
    calculate_relation_field,
    calculate_relation_name,
    reconcile_index,
    synthesize_backrelations,
    synthesize_many_to_many,
    deduplicate_names_of_fields_to_be_added,
    sanitize_name,
    sanitize_datamodel_names,
    commenting_out_guardrails,
    IntrospectionWarning,
    IntrospectionEngine,
    IntrospectionResult,
    calculate_datamodel,
)

# Utilities
from .utils import (
    setup_logging,
    get_logger,
    IntrospectionError,
    InvariantViolationError,
    AmbiguousIndexError,
    SchemaLoadError,
    ConfigurationError,
    format_error,
    get_metrics_collector,
    IntrospectionMetrics,
)


def create_engine(
    database_type: str = "unknown",
    config: Optional[IntrospectionConfig] = None,
    configure_logging: bool = False,
    **kwargs: Any
) -> IntrospectionEngine:
    """
    Create an introspection engine with minimal configuration

    Args:
        database_type: Database type (mysql, postgresql, sqlite)
        config: Complete configuration; overrides the other arguments
        configure_logging: Install log handlers from the logging settings
        **kwargs: Additional IntrospectionConfig fields, e.g. max_workers

    Returns:
        Configured IntrospectionEngine

    Raises:
        ConfigurationError: If the settings do not validate

    Example:
        engine = create_engine(database_type="postgresql", max_workers=4)
    """
    if config is None:
        try:
            config = IntrospectionConfig(database_type=DatabaseType(database_type), **kwargs)
        except ValueError as e:
            # pydantic's ValidationError subclasses ValueError
            raise ConfigurationError(
                f"Invalid introspection configuration: {e}",
                original_error=e,
            ) from e

    if configure_logging:
        setup_logging(
            level=config.logging.level,
            json_format=config.logging.json_format,
            log_file=config.logging.log_file,
        )

    return IntrospectionEngine(config)


__all__ = [
    # Version
    "__version__",
    # Configuration
    "DatabaseType",
    "LogLevel",
    "LoggingConfig",
    "MetricsConfig",
    "IntrospectionConfig",
    "DEFAULT_RESERVED_NAMES",
    "get_config",
    "set_config",
    "reset_config",
    # Physical schema
    "ColumnTypeFamily",
    "ColumnArity",
    "ForeignKeyAction",
    "IndexType",
    "ColumnType",
    "Column",
    "ForeignKey",
    "Index",
    "PrimaryKey",
    "Table",
    "DatabaseEnum",
    "DatabaseSchema",
    "SchemaDescriber",
    "SnapshotDescriber",
    "load_schema_snapshot",
    "parse_schema_snapshot",
    # Data model
    "ScalarType",
    "FieldKind",
    "FieldArity",
    "Cardinality",
    "IndexKind",
    "DefaultValue",
    "RelationInfo",
    "Field",
    "IndexDefinition",
    "Model",
    "EnumValue",
    "Enum",
    "Datamodel",
    # Inference
    "TableRole",
    "classify_table",
    "is_excluded",
    "calculate_scalar_field",
    "calculate_relation_field",
    "calculate_relation_name",
    "reconcile_index",
    "synthesize_backrelations",
    "synthesize_many_to_many",
    "deduplicate_names_of_fields_to_be_added",
    "sanitize_name",
    "sanitize_datamodel_names",
    "commenting_out_guardrails",
    "IntrospectionWarning",
    "IntrospectionEngine",
    "IntrospectionResult",
    "calculate_datamodel",
    "create_engine",
    # Utilities
    "setup_logging",
    "get_logger",
    "IntrospectionError",
    "InvariantViolationError",
    "AmbiguousIndexError",
    "SchemaLoadError",
    "ConfigurationError",
    "format_error",
    "get_metrics_collector",
    "IntrospectionMetrics",
]
