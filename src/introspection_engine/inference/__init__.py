"""
Inference Package
Passes that turn a physical schema snapshot into a data model
"""
from .filters import (
    TableRole,
    classify_table,
    is_excluded,
    is_join_table,
    is_join_table_v0,
    is_join_table_v1,
    is_migration_table,
)
from .scalars import calculate_default, calculate_field_arity, calculate_scalar_field
from .relations import (
    calculate_relation_field,
    calculate_relation_field_name,
    calculate_relation_name,
)
from .indexes import (
    INDEX_DECISIONS,
    ColumnCount,
    IndexAction,
    columns_match,
    decide_index_action,
    reconcile_index,
    reconcile_indices,
)
from .backrelations import PendingField, calculate_backrelation_field, synthesize_backrelations
from .many_to_many import calculate_many_to_many_field, synthesize_many_to_many
from .naming import (
    deduplicate_names_of_fields_to_be_added,
    sanitize_datamodel_names,
    sanitize_name,
)
from .guardrails import (
    MISSING_UNIQUE_IDENTIFIER,
    RELATION_TO_COMMENTED_MODEL,
    UNSUPPORTED_TYPE,
    IntrospectionWarning,
    commenting_out_guardrails,
)
from .engine import (
    IntrospectionEngine,
    IntrospectionResult,
    calculate_datamodel,
    calculate_model,
)

__all__ = [
    "TableRole",
    "classify_table",
    "is_excluded",
    "is_join_table",
    "is_join_table_v0",
    "is_join_table_v1",
    "is_migration_table",
    "calculate_default",
    "calculate_field_arity",
    "calculate_scalar_field",
    "calculate_relation_field",
    "calculate_relation_field_name",
    "calculate_relation_name",
    "INDEX_DECISIONS",
    "ColumnCount",
    "IndexAction",
    "columns_match",
    "decide_index_action",
    "reconcile_index",
    "reconcile_indices",
    "PendingField",
    "calculate_backrelation_field",
    "synthesize_backrelations",
    "calculate_many_to_many_field",
    "synthesize_many_to_many",
    "deduplicate_names_of_fields_to_be_added",
    "sanitize_datamodel_names",
    "sanitize_name",
    "MISSING_UNIQUE_IDENTIFIER",
    "RELATION_TO_COMMENTED_MODEL",
    "UNSUPPORTED_TYPE",
    "IntrospectionWarning",
    "commenting_out_guardrails",
    "IntrospectionEngine",
    "IntrospectionResult",
    "calculate_datamodel",
    "calculate_model",
]
