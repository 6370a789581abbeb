"""
Introspection Engine

Orchestrates the complete process of recovering a data model:
1. Filter out migration and implicit join tables
2. Build one model per remaining table (scalars, relations, indices)
3. Synthesize back-relations and implicit many-to-many fields
4. Deduplicate synthesized names and sanitize every name
5. Comment out what cannot be expressed
"""
from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import DatabaseType, IntrospectionConfig, get_config
from ..datamodel import Datamodel, Enum, EnumValue, Model
from ..physical import DatabaseSchema, SchemaDescriber, Table
from ..utils import (
    IntrospectionError,
    IntrospectionMetrics,
    get_logger,
    get_metrics_collector,
    get_run_id,
    log_context,
    log_operation,
    set_run_id,
)
from .backrelations import synthesize_backrelations
from .filters import is_excluded
from .guardrails import IntrospectionWarning, commenting_out_guardrails
from .indexes import reconcile_indices
from .many_to_many import synthesize_many_to_many
from .naming import deduplicate_names_of_fields_to_be_added, sanitize_datamodel_names
from .relations import calculate_relation_field
from .scalars import calculate_scalar_field

logger = get_logger(__name__)


def calculate_model(
    schema: DatabaseSchema,
    table: Table,
    config: Optional[IntrospectionConfig] = None,
) -> Model:
    """Build the model for a single table; touches no other model"""
    with log_context(table_name=table.name):
        logger.debug(f"Calculating model: {table.name}")
        model = Model(name=table.name)

        for column in table.columns:
            if not table.is_foreign_key_column(column.name):
                model.add_field(calculate_scalar_field(schema, table, column))

        for foreign_key in table.foreign_keys:
            model.add_field(calculate_relation_field(schema, table, foreign_key, config))

        for index in reconcile_indices(model, table):
            model.add_index(index)

        if len(table.primary_key_columns()) > 1:
            model.id_fields = table.primary_key_columns()

        return model


def _calculate_models(
    schema: DatabaseSchema,
    tables: List[Table],
    config: IntrospectionConfig,
) -> List[Model]:
    max_workers = config.max_workers
    if max_workers <= 1 or len(tables) <= 1:
        return [calculate_model(schema, table, config) for table in tables]

    run_id = get_run_id()

    def build(table: Table) -> Model:
        # worker threads do not inherit the caller's logging context
        with log_context(run_id=run_id):
            return calculate_model(schema, table, config)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        # map keeps table order and re-raises the first failure
        return list(executor.map(build, tables))


def calculate_datamodel(
    schema: DatabaseSchema,
    config: Optional[IntrospectionConfig] = None,
) -> Datamodel:
    """Recover a data model from a physical schema snapshot"""
    datamodel, _ = _calculate(schema, config or get_config())
    return datamodel


def _calculate(schema: DatabaseSchema, config: IntrospectionConfig) -> tuple:
    logger.debug("Calculating data model.")

    tables = [table for table in schema.tables if not is_excluded(table, config)]
    datamodel = Datamodel()
    for model in _calculate_models(schema, tables, config):
        datamodel.add_model(model)

    for enum in schema.enums:
        datamodel.add_enum(Enum(name=enum.name, values=[EnumValue(v) for v in enum.values]))

    backrelations = synthesize_backrelations(datamodel)
    many_to_many = synthesize_many_to_many(schema, config)
    pending = deduplicate_names_of_fields_to_be_added(backrelations + many_to_many, datamodel)

    for p in pending:
        datamodel.find_model(p.model).add_field(p.field)

    sanitize_datamodel_names(datamodel, config.reserved_names)
    warnings = commenting_out_guardrails(datamodel)

    logger.debug(
        f"Done calculating data model: {len(datamodel.models)} models, "
        f"{len(backrelations)} back-relations, {len(many_to_many)} many-to-many fields"
    )
    return datamodel, {
        "warnings": warnings,
        "backrelations": len(backrelations),
        "many_to_many": len(many_to_many),
    }


@dataclass
class IntrospectionResult:
    """Finished data model of one run, plus what was downgraded on the way"""
    datamodel: Datamodel
    warnings: List[IntrospectionWarning] = field(default_factory=list)
    run_id: Optional[str] = None
    duration_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "duration_ms": self.duration_ms,
            "datamodel": self.datamodel.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
        }


class IntrospectionEngine:
    """
    Runs introspection with logging context and metrics

    Usage:
        engine = IntrospectionEngine()
        result = engine.introspect(SnapshotDescriber("schema.yaml"))
        print(result.datamodel.to_yaml())
    """

    def __init__(self, config: Optional[IntrospectionConfig] = None):
        self.config = config or get_config()
        if self.config.metrics.enabled:
            get_metrics_collector().enable()
        else:
            get_metrics_collector().disable()

    def introspect(self, describer: SchemaDescriber) -> IntrospectionResult:
        """Describe the database and introspect the resulting snapshot"""
        schema = describer.describe()
        return self.introspect_schema(schema)

    def introspect_schema(self, schema: DatabaseSchema) -> IntrospectionResult:
        run_id = set_run_id()
        db_type = DatabaseType(schema.database_type).value
        start_time = time.time()

        with log_context(run_id=run_id):
            try:
                with log_operation(logger, "introspect", tables=len(schema.tables), db_type=db_type) as ctx:
                    datamodel, stats = _calculate(schema, self.config)
                    ctx["models"] = len(datamodel.models)
                    ctx["warnings"] = len(stats["warnings"])
            except IntrospectionError as e:
                e.context.run_id = e.context.run_id or run_id
                IntrospectionMetrics.record_run(time.time() - start_time, False, db_type)
                IntrospectionMetrics.record_error(type(e).__name__, e.category.value)
                raise

        duration = time.time() - start_time
        IntrospectionMetrics.record_run(duration, True, db_type)
        IntrospectionMetrics.record_datamodel(
            models=len(datamodel.models),
            enums=len(datamodel.enums),
            relation_fields=sum(len(list(m.relation_fields())) for m in datamodel.models),
            db_type=db_type,
        )
        IntrospectionMetrics.record_synthesized_fields(stats["backrelations"], stats["many_to_many"])
        for warning in stats["warnings"]:
            IntrospectionMetrics.record_warnings(warning.code, len(warning.affected))

        return IntrospectionResult(
            datamodel=datamodel,
            warnings=stats["warnings"],
            run_id=run_id,
            duration_ms=round(duration * 1000, 2),
        )
